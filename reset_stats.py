"""
Reset all StudyFlow stats by clearing the database.
This deletes all session history, tags and projects, and optionally the
timer settings.
"""

import os
from BackEnd.core.paths import db_path, settings_path

def _confirm(prompt):
    return input(prompt).strip().lower() in ['yes', 'y']

def reset_all_stats(ask=_confirm):
    """Delete the database file (and optionally settings) to reset all stats.

    Returns the list of files removed.
    """
    removed = []
    db_file = db_path()

    if db_file.exists():
        print(f"Found database at: {db_file}")
        if ask("Are you sure you want to reset all stats? This cannot be undone. (yes/no): "):
            try:
                os.remove(db_file)
                removed.append(db_file)
                print("✓ Database deleted successfully!")
                print("✓ All stats have been reset to 0")
            except OSError as e:
                print(f"✗ Error deleting database: {e}")
        else:
            print("Reset cancelled.")
    else:
        print("No database found. Stats are already at 0.")

    settings_file = settings_path()
    if settings_file.exists():
        if ask("\nAlso reset timer settings to defaults? (yes/no): "):
            try:
                os.remove(settings_file)
                removed.append(settings_file)
                print("✓ Timer settings reset!")
            except OSError as e:
                print(f"✗ Error deleting settings: {e}")
    return removed

if __name__ == "__main__":
    print("=" * 50)
    print("StudyFlow - Reset All Stats")
    print("=" * 50)
    reset_all_stats()
    print("\nPress Enter to exit...")
    input()

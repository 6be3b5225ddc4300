import sys
from PySide6.QtWidgets import QApplication, QStyle, QSystemTrayIcon
from BackEnd.core.log import setup_logger
from BackEnd.repos.config_store import SettingsConfigStore
from BackEnd.repos.session_repo import SessionRepo
from BackEnd.services.notifier import TrayNotifier
from BackEnd.services.study_controller import StudyController
from BackEnd.services.tag_service import Library
from BackEnd.services.timer_service import TimerService
from FrontEnd.ui_main import MainWindow

def main():
    logger = setup_logger()
    app = QApplication(sys.argv)
    app.setApplicationName("StudyFlow")

    tray = None
    if QSystemTrayIcon.isSystemTrayAvailable():
        icon = app.style().standardIcon(QStyle.StandardPixmap.SP_BrowserReload)
        tray = QSystemTrayIcon(icon, app)
        tray.show()

    repo = SessionRepo()
    library = Library(repo)
    timer = TimerService(SettingsConfigStore())
    controller = StudyController(timer, repo, library=library, notifier=TrayNotifier(tray))

    win = MainWindow(controller, library)
    win.show()
    logger.info("StudyFlow started, data in %s", repo.db_file.parent)
    sys.exit(app.exec())

if __name__ == "__main__":
    main()

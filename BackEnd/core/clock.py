from datetime import datetime, timedelta

def local_now():
	"""Return current local time (naive, no microseconds)."""
	return datetime.now().replace(microsecond=0)

def start_of_day(moment):
	"""Return midnight of the calendar day containing `moment`."""
	return moment.replace(hour=0, minute=0, second=0, microsecond=0)

def start_of_week(moment):
	"""Return Monday 00:00 of the ISO week containing `moment`."""
	day = start_of_day(moment)
	return day - timedelta(days=day.weekday())

def fmt_mmss(seconds: int) -> str:
	"""Format seconds as MM:SS (minutes may exceed 59)."""
	return f"{seconds // 60:02}:{seconds % 60:02}"

def format_duration(seconds: int) -> str:
	"""Format seconds as '1h 5m' or '25m'."""
	hours = seconds // 3600
	minutes = (seconds % 3600) // 60
	if hours > 0:
		return f"{hours}h {minutes}m"
	return f"{minutes}m"

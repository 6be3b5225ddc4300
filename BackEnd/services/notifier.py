import logging

from PySide6.QtWidgets import QApplication, QSystemTrayIcon

logger = logging.getLogger(__name__)

APP_TITLE = "StudyFlow"


class Notifier:
	"""Fire-and-forget notification/sound sink. The base class does nothing."""

	def notify(self, phase):
		pass

	def play_sound(self):
		pass


NullNotifier = Notifier


class TrayNotifier(Notifier):
	"""Shows phase-end messages through the system tray and beeps."""

	def __init__(self, tray=None):
		self.tray = tray

	def notify(self, phase):
		try:
			if self.tray is not None and QSystemTrayIcon.isSystemTrayAvailable():
				self.tray.showMessage(APP_TITLE, phase.notification_body, self.tray.icon())
		except RuntimeError as e:
			# tray widget already deleted on shutdown
			logger.debug("Notification dropped: %s", e)

	def play_sound(self):
		try:
			QApplication.beep()
		except RuntimeError as e:
			logger.debug("Beep dropped: %s", e)

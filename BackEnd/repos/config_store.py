import logging

from PySide6.QtCore import QSettings

from BackEnd.core.paths import settings_path
from BackEnd.models.timer_state import TimerConfig

logger = logging.getLogger(__name__)

# Persistence keys, one per TimerConfig field
FOCUS_KEY = "timerConfig.focusDuration"
SHORT_BREAK_KEY = "timerConfig.shortBreakDuration"
LONG_BREAK_KEY = "timerConfig.longBreakDuration"
LONG_BREAK_INTERVAL_KEY = "timerConfig.longBreakInterval"
SOUND_KEY = "timerConfig.soundEnabled"
NOTIFICATIONS_KEY = "timerConfig.notificationsEnabled"

_FIELDS = (
	(FOCUS_KEY, "focus_duration", int),
	(SHORT_BREAK_KEY, "short_break_duration", int),
	(LONG_BREAK_KEY, "long_break_duration", int),
	(LONG_BREAK_INTERVAL_KEY, "long_break_interval", int),
	(SOUND_KEY, "sound_enabled", bool),
	(NOTIFICATIONS_KEY, "notifications_enabled", bool),
)


class ConfigStore:
	"""Load/save contract for timer preferences."""

	def load(self) -> TimerConfig:
		raise NotImplementedError

	def save(self, config: TimerConfig) -> None:
		raise NotImplementedError


class MemoryConfigStore(ConfigStore):
	"""Key-value store kept in a dict. Nothing touches disk."""

	def __init__(self, values=None):
		self.values = dict(values or {})
		self.saves = 0

	def load(self):
		defaults = TimerConfig()
		kwargs = {
			attr: self.values.get(key, getattr(defaults, attr))
			for key, attr, _ in _FIELDS
		}
		return TimerConfig(**kwargs).clamped()

	def save(self, config):
		for key, attr, _ in _FIELDS:
			self.values[key] = getattr(config, attr)
		self.saves += 1


class SettingsConfigStore(ConfigStore):
	"""QSettings INI file in the user data dir."""

	def __init__(self, path=None):
		self.path = str(path or settings_path())

	def _settings(self):
		return QSettings(self.path, QSettings.Format.IniFormat)

	def load(self):
		defaults = TimerConfig()
		settings = self._settings()
		kwargs = {}
		for key, attr, kind in _FIELDS:
			default = getattr(defaults, attr)
			try:
				kwargs[attr] = settings.value(key, default, type=kind)
			except (TypeError, ValueError):
				logger.warning("Ignoring unreadable setting %s", key)
				kwargs[attr] = default
		return TimerConfig(**kwargs).clamped()

	def save(self, config):
		settings = self._settings()
		for key, attr, _ in _FIELDS:
			settings.setValue(key, getattr(config, attr))
		settings.sync()
		if settings.status() != QSettings.Status.NoError:
			raise OSError(f"could not write settings to {self.path}")

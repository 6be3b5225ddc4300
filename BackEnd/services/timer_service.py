import logging
import random
from datetime import timedelta

from PySide6.QtCore import QObject, Signal, QTimer

from BackEnd.core.clock import local_now
from BackEnd.models.study_session import DEFAULT_TAG_NAME, FALLBACK_COLOR, SessionCompleted
from BackEnd.models.timer_state import (
	ADJUST_STEP_MINUTES, MAX_ADJUST_MINUTES, MIN_ADJUST_MINUTES,
	TimerPhase, TimerState, TimerStatus,
)

logger = logging.getLogger(__name__)

WALK_REMINDERS = [
	"Time to stretch your legs! 🚶",
	"Great session! Go take a short walk 🌿",
	"Stand up and move around! 💪",
	"Your body will thank you, take a walk! 🌤️",
	"Nice work! Now get some fresh air 🍃",
]


class TimerService(QObject):
	"""Pomodoro timer engine: phase state machine and 1 s countdown.

	The engine never persists sessions, plays sounds or shows notifications.
	It reports those through signals and leaves the wiring to the caller.
	"""

	remaining_changed = Signal(int)  # emits seconds left
	state_changed = Signal(str)  # emits 'idle', 'running', 'paused'
	phase_changed = Signal(object)  # emits TimerPhase
	session_completed = Signal(object)  # emits SessionCompleted
	walk_reminder = Signal(str)
	sound_requested = Signal()
	notification_requested = Signal(object)  # emits the TimerPhase that ended
	config_changed = Signal(object)  # emits TimerConfig

	def __init__(self, config_store, clock=local_now, parent=None):
		super().__init__(parent)
		self._store = config_store
		self._clock = clock
		self.config = config_store.load()

		# app restart always lands on an idle Focus countdown
		self.phase = TimerPhase.FOCUS
		self.status = TimerStatus.IDLE
		self.total_time = self.config.duration_for(self.phase)
		self.time_remaining = self.total_time
		self.completed_pomodoros = 0
		self.session_start = None

		self.subject_name = DEFAULT_TAG_NAME
		self.subject_color = FALLBACK_COLOR
		self.project_name = None
		self.project_color = None

		self._timer = QTimer(self)
		self._timer.setInterval(1000)
		self._timer.timeout.connect(self.tick)

	@property
	def is_ticking(self):
		return self._timer.isActive()

	def snapshot(self):
		return TimerState(
			phase=self.phase,
			status=self.status,
			time_remaining=self.time_remaining,
			total_time=self.total_time,
			completed_pomodoros=self.completed_pomodoros,
			session_start=self.session_start,
		)

	# transitions

	def start(self):
		if self.status == TimerStatus.RUNNING:
			return
		if self.status == TimerStatus.IDLE:
			self.session_start = self._clock()
		self._stop_countdown()
		self._timer.start()
		self._set_status(TimerStatus.RUNNING)

	def pause(self):
		if self.status != TimerStatus.RUNNING:
			return
		self._stop_countdown()
		self._set_status(TimerStatus.PAUSED)

	def toggle(self):
		"""Start when idle/paused, pause when running."""
		if self.status == TimerStatus.RUNNING:
			self.pause()
		else:
			self.start()

	def reset(self):
		self._stop_countdown()
		self._load_phase_duration()
		self._set_status(TimerStatus.IDLE)

	def skip(self):
		self._stop_countdown()
		self._advance_phase()

	def set_phase(self, phase):
		self._stop_countdown()
		changed = phase != self.phase
		self.phase = phase
		self._load_phase_duration()
		self._set_status(TimerStatus.IDLE)
		if changed:
			self.phase_changed.emit(self.phase)

	def tick(self):
		if self.status != TimerStatus.RUNNING:
			return
		if self.time_remaining <= 0:
			return
		self.time_remaining -= 1
		self.remaining_changed.emit(self.time_remaining)
		if self.time_remaining <= 0:
			self.complete()

	def complete(self):
		"""Finish the current phase. Returns the SessionCompleted for Focus, else None."""
		started = self.session_start
		self._stop_countdown()
		self._set_status(TimerStatus.IDLE)
		finished = self.phase
		completed = None

		if finished == TimerPhase.FOCUS:
			self.completed_pomodoros += 1
			end = self._clock()
			start = started or end - timedelta(seconds=self.total_time)
			completed = SessionCompleted(
				subject_name=self.subject_name,
				subject_color=self.subject_color,
				duration=self.total_time,
				start_time=start,
				end_time=end,
				project_name=self.project_name,
				project_color=self.project_color,
			)
			logger.debug("Pomodoro #%d finished (%ss)", self.completed_pomodoros, self.total_time)
			self.session_completed.emit(completed)
			self.walk_reminder.emit(random.choice(WALK_REMINDERS))

		if self.config.sound_enabled:
			self.sound_requested.emit()
		if self.config.notifications_enabled:
			self.notification_requested.emit(finished)

		self._advance_phase()
		return completed

	# configuration

	def adjust_duration(self, delta_minutes):
		"""Nudge the idle countdown to the next 5 minute mark up or down.

		Returns the new length in minutes, or None when not idle.
		"""
		if self.status != TimerStatus.IDLE or delta_minutes == 0:
			return None
		step = ADJUST_STEP_MINUTES
		minutes = self.time_remaining // 60
		if delta_minutes > 0:
			snapped = (minutes // step + 1) * step
		else:
			snapped = minutes - step if minutes % step == 0 else (minutes // step) * step
		clamped = max(MIN_ADJUST_MINUTES, min(MAX_ADJUST_MINUTES, snapped))

		self.time_remaining = self.total_time = clamped * 60
		self.config = self.config.with_duration(self.phase, clamped * 60)
		self._persist_config()
		self.remaining_changed.emit(self.time_remaining)
		return clamped

	@property
	def can_increase(self):
		return self.time_remaining < MAX_ADJUST_MINUTES * 60

	@property
	def can_decrease(self):
		return self.time_remaining > MIN_ADJUST_MINUTES * 60

	def update_config(self, new_config):
		self.config = new_config.clamped()
		self._persist_config()
		if self.status == TimerStatus.IDLE:
			self._load_phase_duration()

	def select_subject(self, name, color):
		self.subject_name = name
		self.subject_color = color

	def select_project(self, name=None, color=None):
		self.project_name = name or None
		self.project_color = color if name else None

	# internals

	def _stop_countdown(self):
		# QTimer.stop() on an inactive timer is a no-op
		self._timer.stop()

	def _set_status(self, status):
		if status == TimerStatus.IDLE:
			self.session_start = None
		if status != self.status:
			self.status = status
			logger.debug("Timer %s (%s)", status.value, self.phase.label)
			self.state_changed.emit(status.value)

	def _load_phase_duration(self):
		self.total_time = self.config.duration_for(self.phase)
		self.time_remaining = self.total_time
		self.session_start = None
		self.remaining_changed.emit(self.time_remaining)

	def _advance_phase(self):
		self._set_status(TimerStatus.IDLE)
		if self.phase == TimerPhase.FOCUS:
			interval = self.config.long_break_interval
			if self.completed_pomodoros > 0 and self.completed_pomodoros % interval == 0:
				self.phase = TimerPhase.LONG_BREAK
			else:
				self.phase = TimerPhase.SHORT_BREAK
		else:
			self.phase = TimerPhase.FOCUS
		self._load_phase_duration()
		self.phase_changed.emit(self.phase)

	def _persist_config(self):
		try:
			self._store.save(self.config)
		except OSError as e:
			logger.warning("Could not save timer settings: %s", e)
		self.config_changed.emit(self.config)

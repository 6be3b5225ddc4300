from dataclasses import dataclass, replace
from datetime import datetime
from enum import Enum
from typing import Optional

from BackEnd.core.clock import fmt_mmss

MIN_ADJUST_MINUTES = 1
MAX_ADJUST_MINUTES = 120
ADJUST_STEP_MINUTES = 5

# Ranges offered by the settings page: minutes, and a pomodoro count.
DURATION_RANGE = (MIN_ADJUST_MINUTES, MAX_ADJUST_MINUTES)
INTERVAL_RANGE = (2, 8)


class TimerPhase(Enum):
	FOCUS = "Focus"
	SHORT_BREAK = "Short Break"
	LONG_BREAK = "Long Break"

	@property
	def label(self) -> str:
		return self.value

	@property
	def default_duration(self) -> int:
		return _DEFAULT_DURATIONS[self]

	@property
	def emoji(self) -> str:
		return _EMOJI[self]

	@property
	def notification_body(self) -> str:
		"""Message shown when this phase finishes."""
		return _NOTIFICATION_BODIES[self]


_DEFAULT_DURATIONS = {
	TimerPhase.FOCUS: 25 * 60,
	TimerPhase.SHORT_BREAK: 5 * 60,
	TimerPhase.LONG_BREAK: 15 * 60,
}

_EMOJI = {
	TimerPhase.FOCUS: "🎯",
	TimerPhase.SHORT_BREAK: "☕",
	TimerPhase.LONG_BREAK: "🌿",
}

_NOTIFICATION_BODIES = {
	TimerPhase.FOCUS: "Focus session complete! Take a break. 🎉",
	TimerPhase.SHORT_BREAK: "Break's over! Ready to focus? 🎯",
	TimerPhase.LONG_BREAK: "Long break's over! Let's get back to it! 💪",
}


class TimerStatus(Enum):
	IDLE = "idle"
	RUNNING = "running"
	PAUSED = "paused"


_PHASE_FIELDS = {
	TimerPhase.FOCUS: "focus_duration",
	TimerPhase.SHORT_BREAK: "short_break_duration",
	TimerPhase.LONG_BREAK: "long_break_duration",
}


@dataclass(frozen=True)
class TimerConfig:
	"""Durable timer preferences. Durations are in seconds."""

	focus_duration: int = 25 * 60
	short_break_duration: int = 5 * 60
	long_break_duration: int = 15 * 60
	long_break_interval: int = 4
	sound_enabled: bool = True
	notifications_enabled: bool = True

	def duration_for(self, phase: TimerPhase) -> int:
		return getattr(self, _PHASE_FIELDS[phase])

	def with_duration(self, phase: TimerPhase, seconds: int) -> "TimerConfig":
		"""Return a copy with the duration of `phase` replaced."""
		return replace(self, **{_PHASE_FIELDS[phase]: seconds})

	def clamped(self) -> "TimerConfig":
		"""Return a copy with every field forced into a valid range."""
		return replace(
			self,
			focus_duration=max(1, int(self.focus_duration)),
			short_break_duration=max(1, int(self.short_break_duration)),
			long_break_duration=max(1, int(self.long_break_duration)),
			long_break_interval=max(2, int(self.long_break_interval)),
			sound_enabled=bool(self.sound_enabled),
			notifications_enabled=bool(self.notifications_enabled),
		)


@dataclass(frozen=True)
class TimerState:
	"""Read-only snapshot of the engine."""

	phase: TimerPhase
	status: TimerStatus
	time_remaining: int
	total_time: int
	completed_pomodoros: int
	session_start: Optional[datetime] = None

	@property
	def progress(self) -> float:
		if self.total_time <= 0:
			return 0.0
		return 1.0 - (self.time_remaining / self.total_time)

	@property
	def time_string(self) -> str:
		return fmt_mmss(self.time_remaining)

	@property
	def phase_label(self) -> str:
		return f"{self.phase.emoji} {self.phase.label}"

	@property
	def can_start(self) -> bool:
		return self.status in (TimerStatus.IDLE, TimerStatus.PAUSED)

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from BackEnd.core.clock import format_duration

DEFAULT_TAG_NAME = "General"
# Used when a deleted tag leaves nothing to fall back on.
FALLBACK_COLOR = "#868E96"

TAG_COLORS = [
	"#7C5CFC", "#00C9A7", "#FF6B6B", "#FFA94D",
	"#339AF0", "#E599F7", "#20C997", "#868E96",
]

PROJECT_COLORS = [
	"#FF6B6B", "#339AF0", "#00C9A7", "#FFA94D",
	"#E599F7", "#FF922B", "#20C997", "#4DABF7",
]


@dataclass(frozen=True)
class SessionCompleted:
	"""A finished focus interval, produced by the timer engine."""

	subject_name: str
	subject_color: str
	duration: int
	start_time: datetime
	end_time: datetime
	pomodoro_count: int = 1
	project_name: Optional[str] = None
	project_color: Optional[str] = None


@dataclass(frozen=True)
class StudySession:
	id: str
	subject_name: str
	subject_color: str
	duration: int
	start_time: datetime
	end_time: datetime
	pomodoro_count: int = 1
	project_name: Optional[str] = None
	project_color: Optional[str] = None

	@property
	def formatted_duration(self) -> str:
		return format_duration(self.duration)

	@property
	def time_range(self) -> str:
		return f"{self.start_time:%H:%M} – {self.end_time:%H:%M}"


@dataclass(frozen=True)
class Tag:
	id: str
	name: str
	color: str
	created_at: datetime


@dataclass(frozen=True)
class Project:
	id: str
	name: str
	color: str
	created_at: datetime

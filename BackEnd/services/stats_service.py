"""Derived study statistics.

Everything here is a pure function of the session list and "now"; the
dashboard calls compute_stats() again whenever the session list changes.
Sessions are bucketed by their start time. Weeks start on Monday (ISO).
"""

from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Iterable, List, Optional, Sequence, Tuple

from BackEnd.core.clock import start_of_day, start_of_week
from BackEnd.models.study_session import StudySession

SERIES_DAYS = 7


@dataclass(frozen=True)
class TagTotal:
	name: str
	color: str
	duration: int


@dataclass(frozen=True)
class DayTotal:
	day: date
	duration: int
	tags: Tuple[TagTotal, ...] = ()


@dataclass(frozen=True)
class DerivedStats:
	today_total: int = 0
	week_total: int = 0
	total_sessions: int = 0
	current_streak: int = 0
	today_sessions: int = 0
	subject_breakdown: Tuple[TagTotal, ...] = ()
	daily_totals: Tuple[DayTotal, ...] = ()
	project_filter: str = ""
	project_tag_breakdown: Tuple[TagTotal, ...] = ()

	@property
	def project_total(self) -> int:
		return sum(t.duration for t in self.project_tag_breakdown)

	def project_percentage(self, entry: TagTotal) -> int:
		"""Share of the project total, truncated to a whole percent."""
		total = self.project_total
		if total <= 0:
			return 0
		return int(entry.duration / total * 100)


def _in_window(sessions, start, end):
	return [s for s in sessions if start <= s.start_time < end]


def tag_breakdown(sessions: Iterable[StudySession]) -> Tuple[TagTotal, ...]:
	"""Sum durations per subject, largest first.

	The color is the last one seen for that name. Ties keep the order in
	which the names first appeared.
	"""
	totals = {}
	for s in sessions:
		_, duration = totals.get(s.subject_name, (None, 0))
		totals[s.subject_name] = (s.subject_color, duration + s.duration)
	entries = [TagTotal(name, color, duration) for name, (color, duration) in totals.items()]
	return tuple(sorted(entries, key=lambda t: t.duration, reverse=True))


def daily_series(sessions: Sequence[StudySession], now: datetime, days: int = SERIES_DAYS) -> Tuple[DayTotal, ...]:
	"""Totals for the `days` calendar days ending today, oldest first."""
	today = start_of_day(now)
	series = []
	for offset in range(days - 1, -1, -1):
		day_start = today - timedelta(days=offset)
		day_sessions = _in_window(sessions, day_start, day_start + timedelta(days=1))
		series.append(DayTotal(
			day=day_start.date(),
			duration=sum(s.duration for s in day_sessions),
			tags=tag_breakdown(day_sessions),
		))
	return tuple(series)


def current_streak(sessions: Iterable[StudySession], now: datetime) -> int:
	"""Consecutive days with a session, counting back from today."""
	days = {s.start_time.date() for s in sessions}
	streak = 0
	check = now.date()
	while check in days:
		streak += 1
		check -= timedelta(days=1)
	return streak


def project_breakdown(sessions: Iterable[StudySession], project: Optional[str]) -> Tuple[TagTotal, ...]:
	if not project:
		return ()
	return tag_breakdown(s for s in sessions if s.project_name == project)


def compute_stats(sessions: Sequence[StudySession], now: datetime, project_filter: str = "") -> DerivedStats:
	sessions = list(sessions)
	day_start = start_of_day(now)
	week_start = start_of_week(now)
	todays = _in_window(sessions, day_start, day_start + timedelta(days=1))
	weeks = _in_window(sessions, week_start, week_start + timedelta(days=7))

	return DerivedStats(
		today_total=sum(s.duration for s in todays),
		week_total=sum(s.duration for s in weeks),
		total_sessions=len(sessions),
		current_streak=current_streak(sessions, now),
		today_sessions=len(todays),
		subject_breakdown=tag_breakdown(todays),
		daily_totals=daily_series(sessions, now),
		project_filter=project_filter or "",
		project_tag_breakdown=project_breakdown(sessions, project_filter),
	)


# history helpers

def filter_sessions(sessions: Iterable[StudySession], subject: Optional[str] = None) -> List[StudySession]:
	if subject is None:
		return list(sessions)
	return [s for s in sessions if s.subject_name == subject]


def group_by_day(sessions: Iterable[StudySession]) -> List[Tuple[date, List[StudySession]]]:
	"""Group sessions by start date. Newest day first, newest session first."""
	groups = {}
	for s in sessions:
		groups.setdefault(s.start_time.date(), []).append(s)
	return [
		(day, sorted(groups[day], key=lambda s: s.start_time, reverse=True))
		for day in sorted(groups, reverse=True)
	]

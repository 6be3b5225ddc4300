import logging
import sqlite3
import uuid
from dataclasses import replace

from PySide6.QtCore import QObject, Signal

from BackEnd.core.clock import local_now
from BackEnd.models.study_session import StudySession
from BackEnd.services.notifier import NullNotifier
from BackEnd.services.stats_service import compute_stats, filter_sessions, group_by_day

logger = logging.getLogger(__name__)


class StudyController(QObject):
	"""Wires the timer to the session store, the notifier and the stats.

	Store failures are logged and dropped. Sessions that could not be written
	stay in memory so the current run still counts them.
	"""

	stats_changed = Signal(object)  # emits DerivedStats
	sessions_changed = Signal()

	def __init__(self, timer, repo, library=None, notifier=None, clock=local_now, parent=None):
		# owned by the timer unless a parent is given
		super().__init__(parent if parent is not None else timer)
		self.timer = timer
		self.repo = repo
		self.library = library
		self.notifier = notifier or NullNotifier()
		self._clock = clock
		self.project_filter = ""
		self.sessions = []
		self._unsaved = []
		self.stats = compute_stats([], clock())

		timer.session_completed.connect(self._on_session_completed)
		timer.sound_requested.connect(self.notifier.play_sound)
		timer.notification_requested.connect(self.notifier.notify)
		if library is not None:
			timer.select_subject(library.subject_name, library.subject_color)
			timer.select_project(library.project_name, library.project_color)
			library.subject_selected.connect(timer.select_subject)
			library.project_selected.connect(timer.select_project)
			library.tags_changed.connect(self.refresh)
			library.projects_changed.connect(self.refresh)
			library.tag_deleted.connect(self._on_tag_deleted)
			library.project_deleted.connect(self._on_project_deleted)

	def refresh(self):
		"""Reload sessions and recompute stats from scratch."""
		try:
			stored = self.repo.query()
		except sqlite3.Error as e:
			logger.warning("Could not read sessions: %s", e)
			stored = [s for s in self.sessions if s not in self._unsaved]
		self.sessions = sorted(stored + self._unsaved, key=lambda s: s.start_time)
		self.stats = compute_stats(self.sessions, self._clock(), self.project_filter)
		self.sessions_changed.emit()
		self.stats_changed.emit(self.stats)
		return self.stats

	def set_project_filter(self, name):
		self.project_filter = name or ""
		self.stats = compute_stats(self.sessions, self._clock(), self.project_filter)
		self.stats_changed.emit(self.stats)
		return self.stats

	def delete_session(self, session_id):
		self._unsaved = [s for s in self._unsaved if s.id != session_id]
		try:
			self.repo.delete(session_id)
		except sqlite3.Error as e:
			logger.warning("Could not delete session %s: %s", session_id, e)
		self.refresh()

	def history(self, subject=None):
		"""Sessions grouped by day, newest first, optionally for one tag."""
		return group_by_day(filter_sessions(self.sessions, subject))

	def _on_session_completed(self, completed):
		try:
			self.repo.insert(completed)
		except (sqlite3.Error, OSError) as e:
			logger.warning("Session not saved, keeping it in memory: %s", e)
			self._unsaved.append(StudySession(
				id=str(uuid.uuid4()),
				subject_name=completed.subject_name,
				subject_color=completed.subject_color,
				duration=completed.duration,
				start_time=completed.start_time,
				end_time=completed.end_time,
				pomodoro_count=completed.pomodoro_count,
				project_name=completed.project_name,
				project_color=completed.project_color,
			))
		self.refresh()

	def _on_tag_deleted(self, name, fallback_name, fallback_color):
		self._unsaved = [
			replace(s, subject_name=fallback_name, subject_color=fallback_color) if s.subject_name == name else s
			for s in self._unsaved
		]

	def _on_project_deleted(self, name):
		self._unsaved = [
			replace(s, project_name=None, project_color=None) if s.project_name == name else s
			for s in self._unsaved
		]
		if self.project_filter == name:
			self.project_filter = ""

import logging
import sqlite3
import uuid
from contextlib import contextmanager
from datetime import datetime
from pathlib import Path

from BackEnd.core.clock import local_now
from BackEnd.core.paths import db_path
from BackEnd.models.study_session import Project, StudySession, Tag

SCHEMA_PATH = Path(__file__).parent / "schema.sql"

logger = logging.getLogger(__name__)


class DuplicateNameError(ValueError):
	"""A tag or project with this name already exists."""


def _iso(moment):
	return moment.replace(microsecond=0).isoformat()


def _row_to_session(row):
	return StudySession(
		id=row["id"],
		subject_name=row["subject"],
		subject_color=row["subject_color"],
		duration=row["duration_sec"],
		start_time=datetime.fromisoformat(row["start_local"]),
		end_time=datetime.fromisoformat(row["end_local"]),
		pomodoro_count=row["pomodoro_count"],
		project_name=row["project"],
		project_color=row["project_color"],
	)


class SessionRepo:
	"""SQLite store for completed sessions, tags and projects.

	Every call opens its own connection and closes it before returning.
	"""

	def __init__(self, db_file=None):
		self.db_file = Path(db_file) if db_file else db_path()

	@contextmanager
	def connect(self):
		"""Open SQLite connection and ensure schema is applied."""
		conn = sqlite3.connect(self.db_file)
		conn.row_factory = sqlite3.Row
		try:
			with open(SCHEMA_PATH, encoding="utf-8") as f:
				conn.executescript(f.read())
			with conn:
				yield conn
		finally:
			conn.close()

	# sessions

	def insert(self, completed):
		"""Persist a SessionCompleted and return the stored StudySession."""
		session = StudySession(
			id=str(uuid.uuid4()),
			subject_name=completed.subject_name,
			subject_color=completed.subject_color,
			duration=completed.duration,
			start_time=completed.start_time.replace(microsecond=0),
			end_time=completed.end_time.replace(microsecond=0),
			pomodoro_count=completed.pomodoro_count,
			project_name=completed.project_name,
			project_color=completed.project_color,
		)
		with self.connect() as conn:
			conn.execute(
				"""
				INSERT INTO sessions (id, subject, subject_color, duration_sec, start_local,
					end_local, local_date, pomodoro_count, project, project_color)
				VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
				""",
				(
					session.id, session.subject_name, session.subject_color, session.duration,
					_iso(session.start_time), _iso(session.end_time),
					session.start_time.date().isoformat(), session.pomodoro_count,
					session.project_name, session.project_color,
				)
			)
		logger.info("Stored %ss session for %r", session.duration, session.subject_name)
		return session

	def query(self, subject=None, project=None, start=None, end=None):
		"""Return sessions ordered by start time (oldest first).

		`start` is inclusive, `end` exclusive; both compare against start time.
		"""
		clauses, params = [], []
		if subject is not None:
			clauses.append("subject = ?")
			params.append(subject)
		if project is not None:
			clauses.append("project = ?")
			params.append(project)
		if start is not None:
			clauses.append("start_local >= ?")
			params.append(_iso(start))
		if end is not None:
			clauses.append("start_local < ?")
			params.append(_iso(end))
		sql = "SELECT * FROM sessions"
		if clauses:
			sql += " WHERE " + " AND ".join(clauses)
		sql += " ORDER BY start_local ASC, rowid ASC"
		with self.connect() as conn:
			rows = conn.execute(sql, params).fetchall()
		return [_row_to_session(r) for r in rows]

	def delete(self, session_id):
		"""Delete one session. Returns True if a row was removed."""
		with self.connect() as conn:
			cur = conn.execute("DELETE FROM sessions WHERE id=?", (session_id,))
			return cur.rowcount > 0

	def reassign_tag(self, old_name, new_name, new_color):
		"""Move every session tagged `old_name` to another tag. Returns row count."""
		with self.connect() as conn:
			cur = conn.execute(
				"UPDATE sessions SET subject=?, subject_color=? WHERE subject=?",
				(new_name, new_color, old_name)
			)
			return cur.rowcount

	def clear_project(self, project_name):
		"""Detach every session from `project_name`. Returns row count."""
		with self.connect() as conn:
			cur = conn.execute(
				"UPDATE sessions SET project=NULL, project_color=NULL WHERE project=?",
				(project_name,)
			)
			return cur.rowcount

	# tags and projects

	def _add_named(self, table, name, color):
		created = local_now()
		row_id = str(uuid.uuid4())
		try:
			with self.connect() as conn:
				conn.execute(
					f"INSERT INTO {table} (id, name, color, created_at) VALUES (?, ?, ?, ?)",
					(row_id, name, color, _iso(created))
				)
		except sqlite3.IntegrityError as e:
			raise DuplicateNameError(f"{name!r} already exists") from e
		return row_id, created

	def add_tag(self, name, color):
		row_id, created = self._add_named("tags", name, color)
		return Tag(id=row_id, name=name, color=color, created_at=created)

	def tags(self):
		"""All tags sorted by name."""
		with self.connect() as conn:
			rows = conn.execute("SELECT * FROM tags ORDER BY name ASC").fetchall()
		return [
			Tag(r["id"], r["name"], r["color"], datetime.fromisoformat(r["created_at"]))
			for r in rows
		]

	def remove_tag(self, name):
		with self.connect() as conn:
			cur = conn.execute("DELETE FROM tags WHERE name=?", (name,))
			return cur.rowcount > 0

	def add_project(self, name, color):
		row_id, created = self._add_named("projects", name, color)
		return Project(id=row_id, name=name, color=color, created_at=created)

	def projects(self):
		"""All projects in creation order."""
		with self.connect() as conn:
			rows = conn.execute("SELECT * FROM projects ORDER BY created_at ASC, rowid ASC").fetchall()
		return [
			Project(r["id"], r["name"], r["color"], datetime.fromisoformat(r["created_at"]))
			for r in rows
		]

	def remove_project(self, name):
		with self.connect() as conn:
			cur = conn.execute("DELETE FROM projects WHERE name=?", (name,))
			return cur.rowcount > 0

import logging
import sqlite3

from PySide6.QtCore import QObject, Signal

from BackEnd.models.study_session import DEFAULT_TAG_NAME, FALLBACK_COLOR, PROJECT_COLORS, TAG_COLORS

logger = logging.getLogger(__name__)


class Library(QObject):
	"""Tags and projects, the current selection, and the tag delete mode.

	Deleting a tag or project never deletes sessions: tagged sessions move to
	a fallback tag, project sessions lose their project.
	"""

	subject_selected = Signal(str, str)  # name, color
	project_selected = Signal(object, object)  # name or None, color or None
	tags_changed = Signal()
	projects_changed = Signal()
	delete_mode_changed = Signal(bool)
	tag_deleted = Signal(str, str, str)  # name, fallback name, fallback color
	project_deleted = Signal(str)

	def __init__(self, repo, parent=None):
		super().__init__(parent)
		self.repo = repo
		self.subject_name = DEFAULT_TAG_NAME
		self.subject_color = FALLBACK_COLOR
		self.project_name = None
		self.project_color = None
		self.delete_mode = False

	# tags

	def tags(self):
		return self.repo.tags()

	def add_tag(self, name, color=None):
		name = (name or "").strip()
		if not name:
			raise ValueError("tag name must not be empty")
		color = color or TAG_COLORS[len(self.tags()) % len(TAG_COLORS)]
		tag = self.repo.add_tag(name, color)
		self.tags_changed.emit()
		self.select_subject(tag.name, tag.color)
		return tag

	@staticmethod
	def fallback_for(name, tags):
		"""The tag that inherits sessions when `name` is deleted."""
		for tag in tags:
			if tag.name != name:
				return tag.name, tag.color
		return DEFAULT_TAG_NAME, FALLBACK_COLOR

	def delete_tag(self, name):
		"""Remove a tag and reassign its sessions. Returns the number moved."""
		remaining = [t for t in self.tags() if t.name != name]
		fallback_name, fallback_color = self.fallback_for(name, remaining)
		try:
			moved = self.repo.reassign_tag(name, fallback_name, fallback_color)
			self.repo.remove_tag(name)
		except sqlite3.Error as e:
			logger.warning("Could not delete tag %r: %s", name, e)
			return 0
		logger.info("Deleted tag %r, %d sessions moved to %r", name, moved, fallback_name)

		self.tag_deleted.emit(name, fallback_name, fallback_color)
		if self.subject_name == name:
			self.select_subject(fallback_name, fallback_color)
		if not remaining:
			self.set_delete_mode(False)
		self.tags_changed.emit()
		return moved

	def select_subject(self, name, color):
		self.subject_name = name
		self.subject_color = color
		self.subject_selected.emit(name, color)

	def toggle_delete_mode(self):
		self.set_delete_mode(not self.delete_mode)

	def set_delete_mode(self, enabled):
		enabled = bool(enabled)
		if enabled != self.delete_mode:
			self.delete_mode = enabled
			self.delete_mode_changed.emit(enabled)

	# projects

	def projects(self):
		return self.repo.projects()

	def add_project(self, name, color=None):
		name = (name or "").strip()
		if not name:
			raise ValueError("project name must not be empty")
		color = color or PROJECT_COLORS[len(self.projects()) % len(PROJECT_COLORS)]
		project = self.repo.add_project(name, color)
		self.projects_changed.emit()
		return project

	def delete_project(self, name):
		"""Remove a project and detach its sessions. Returns the number cleared."""
		try:
			cleared = self.repo.clear_project(name)
			self.repo.remove_project(name)
		except sqlite3.Error as e:
			logger.warning("Could not delete project %r: %s", name, e)
			return 0
		self.project_deleted.emit(name)
		if self.project_name == name:
			self.select_project(None)
		self.projects_changed.emit()
		return cleared

	def select_project(self, name, color=None):
		self.project_name = name or None
		self.project_color = color if name else None
		self.project_selected.emit(self.project_name, self.project_color)

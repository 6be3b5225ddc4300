import os
from datetime import datetime, timedelta

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

import pytest
from PySide6.QtWidgets import QApplication

from BackEnd.models.study_session import StudySession
from BackEnd.repos.config_store import MemoryConfigStore
from BackEnd.repos.session_repo import SessionRepo
from BackEnd.services.timer_service import TimerService

# Wednesday; the ISO week started on Monday 2026-10-19
NOW = datetime(2026, 10, 21, 15, 0, 0)


class FakeClock:
	def __init__(self, now=NOW):
		self.now = now

	def __call__(self):
		return self.now

	def advance(self, seconds):
		self.now += timedelta(seconds=seconds)


def make_session(subject="Math", duration=600, start=NOW, color="#7C5CFC", project=None, project_color=None, id=None):
	return StudySession(
		id=id or f"{subject}-{start.isoformat()}-{duration}",
		subject_name=subject,
		subject_color=color,
		duration=duration,
		start_time=start,
		end_time=start + timedelta(seconds=duration),
		project_name=project,
		project_color=project_color,
	)


@pytest.fixture(scope="session", autouse=True)
def qapp():
	app = QApplication.instance() or QApplication([])
	yield app


@pytest.fixture(autouse=True)
def data_dir(tmp_path, monkeypatch):
	path = tmp_path / "data"
	path.mkdir()
	monkeypatch.setenv("STUDYFLOW_DATA_DIR", str(path))
	return path


@pytest.fixture
def clock():
	return FakeClock()


@pytest.fixture
def store():
	return MemoryConfigStore()


@pytest.fixture
def timer(store, clock):
	engine = TimerService(store, clock=clock)
	yield engine
	engine.reset()


@pytest.fixture
def repo(tmp_path):
	return SessionRepo(tmp_path / "study.db")


@pytest.fixture
def emitted():
	"""Collects signal payloads: connect(emitted.slot('name'))."""
	class Recorder(dict):
		def slot(self, name):
			self.setdefault(name, [])
			return lambda *args: self[name].append(args[0] if len(args) == 1 else args)
	return Recorder()

import sqlite3
from datetime import timedelta

import pytest

from BackEnd.models.study_session import DEFAULT_TAG_NAME, FALLBACK_COLOR
from BackEnd.models.timer_state import TimerConfig, TimerPhase
from BackEnd.repos.config_store import MemoryConfigStore
from BackEnd.repos.session_repo import SessionRepo
from BackEnd.services.notifier import Notifier
from BackEnd.services.study_controller import StudyController
from BackEnd.services.tag_service import Library
from BackEnd.services.timer_service import TimerService


class RecordingNotifier(Notifier):
	def __init__(self):
		self.calls = []

	def notify(self, phase):
		self.calls.append(("notify", phase))

	def play_sound(self):
		self.calls.append(("sound",))


class BrokenRepo(SessionRepo):
	def insert(self, completed):
		raise sqlite3.OperationalError("database is locked")


@pytest.fixture
def short_timer(clock):
	store = MemoryConfigStore()
	store.save(TimerConfig(focus_duration=2, short_break_duration=1))
	return TimerService(store, clock=clock)


def finish_focus(timer, clock):
	timer.start()
	while timer.phase == TimerPhase.FOCUS:
		clock.advance(1)
		timer.tick()


def test_completed_focus_is_stored_and_counted(short_timer, repo, clock, emitted):
	controller = StudyController(short_timer, repo, clock=clock)
	controller.stats_changed.connect(emitted.slot("stats"))
	finish_focus(short_timer, clock)

	(stored,) = repo.query()
	assert stored.duration == 2
	stats = controller.stats
	assert stats.total_sessions == 1
	assert stats.today_total == 2
	assert stats.current_streak == 1
	assert emitted["stats"][-1] is stats


def test_library_selection_reaches_sessions(short_timer, repo, clock):
	library = Library(repo)
	controller = StudyController(short_timer, repo, library=library, clock=clock)
	library.add_tag("Physics", "#339AF0")
	library.add_project("Thesis", "#FF6B6B")
	library.select_project("Thesis", "#FF6B6B")
	finish_focus(short_timer, clock)

	(stored,) = repo.query()
	assert (stored.subject_name, stored.subject_color) == ("Physics", "#339AF0")
	assert (stored.project_name, stored.project_color) == ("Thesis", "#FF6B6B")
	assert controller.stats.total_sessions == 1


def test_notifier_receives_side_effects(short_timer, repo, clock):
	notifier = RecordingNotifier()
	controller = StudyController(short_timer, repo, notifier=notifier, clock=clock)
	finish_focus(short_timer, clock)
	short_timer.start()
	short_timer.tick()
	assert notifier.calls == [
		("sound",), ("notify", TimerPhase.FOCUS),
		("sound",), ("notify", TimerPhase.SHORT_BREAK),
	]
	assert controller.notifier is notifier


def test_store_failure_keeps_session_in_memory(short_timer, tmp_path, clock):
	controller = StudyController(short_timer, BrokenRepo(tmp_path / "study.db"), clock=clock)
	finish_focus(short_timer, clock)
	assert controller.stats.total_sessions == 1
	assert controller.stats.today_total == 2

	controller.refresh()
	assert controller.stats.total_sessions == 1


def test_project_filter_and_delete(short_timer, repo, clock):
	library = Library(repo)
	controller = StudyController(short_timer, repo, library=library, clock=clock)
	library.select_project("Thesis", "#FF6B6B")
	finish_focus(short_timer, clock)

	stats = controller.set_project_filter("Thesis")
	assert [(t.name, t.duration) for t in stats.project_tag_breakdown] == [("General", 2)]
	assert controller.set_project_filter("").project_tag_breakdown == ()

	(session,) = controller.sessions
	controller.delete_session(session.id)
	assert repo.query() == []
	assert controller.stats.total_sessions == 0


def test_history_is_grouped_by_day(short_timer, repo, clock):
	controller = StudyController(short_timer, repo, clock=clock)
	finish_focus(short_timer, clock)
	short_timer.set_phase(TimerPhase.FOCUS)
	clock.advance(timedelta(days=1).total_seconds())
	finish_focus(short_timer, clock)

	groups = controller.history()
	assert [len(day_sessions) for _, day_sessions in groups] == [1, 1]
	assert groups[0][0] > groups[1][0]
	assert controller.history("Nope") == []


def test_deleting_tag_refreshes_stats(short_timer, repo, clock):
	library = Library(repo)
	controller = StudyController(short_timer, repo, library=library, clock=clock)
	library.add_tag("Physics", "#339AF0")
	finish_focus(short_timer, clock)
	library.delete_tag("Physics")
	assert [t.name for t in controller.stats.subject_breakdown] == ["General"]


def test_controller_is_owned_by_timer(short_timer, repo, clock):
	controller = StudyController(short_timer, repo, clock=clock)
	assert controller.parent() is short_timer


def test_deleting_filtered_project_clears_filter(short_timer, repo, clock):
	library = Library(repo)
	controller = StudyController(short_timer, repo, library=library, clock=clock)
	library.add_project("Thesis", "#FF6B6B")
	library.add_project("Other", "#339AF0")
	controller.set_project_filter("Thesis")

	library.delete_project("Other")
	assert controller.project_filter == "Thesis"

	library.delete_project("Thesis")
	assert controller.project_filter == ""
	assert controller.stats.project_filter == ""


def test_deletions_reach_unsaved_sessions(short_timer, tmp_path, clock):
	repo = BrokenRepo(tmp_path / "study.db")
	library = Library(repo)
	controller = StudyController(short_timer, repo, library=library, clock=clock)
	library.add_tag("Physics", "#339AF0")
	library.add_project("Thesis", "#FF6B6B")
	library.select_project("Thesis", "#FF6B6B")
	finish_focus(short_timer, clock)
	assert [t.name for t in controller.stats.subject_breakdown] == ["Physics"]

	library.delete_tag("Physics")
	library.delete_project("Thesis")
	(session,) = controller.sessions
	assert (session.subject_name, session.subject_color) == (DEFAULT_TAG_NAME, FALLBACK_COLOR)
	assert session.project_name is None
	assert session.project_color is None
	assert [t.name for t in controller.stats.subject_breakdown] == [DEFAULT_TAG_NAME]

from datetime import timedelta

import pytest

from BackEnd.models.study_session import SessionCompleted
from BackEnd.repos.session_repo import DuplicateNameError, SessionRepo

from conftest import NOW


def completed(subject="Math", duration=1500, start=NOW, project=None, color="#7C5CFC"):
	return SessionCompleted(
		subject_name=subject,
		subject_color=color,
		duration=duration,
		start_time=start,
		end_time=start + timedelta(seconds=duration),
		project_name=project,
		project_color="#FF6B6B" if project else None,
	)


def test_insert_and_query_round_trip(repo):
	stored = repo.insert(completed(project="Thesis"))
	(loaded,) = repo.query()
	assert loaded == stored
	assert loaded.subject_name == "Math"
	assert loaded.duration == 1500
	assert loaded.start_time == NOW
	assert loaded.end_time == NOW + timedelta(seconds=1500)
	assert loaded.pomodoro_count == 1
	assert loaded.project_name == "Thesis"
	assert loaded.project_color == "#FF6B6B"


def test_ids_are_unique(repo):
	a = repo.insert(completed())
	b = repo.insert(completed())
	assert a.id != b.id
	assert len(repo.query()) == 2


def test_query_orders_by_start_and_filters(repo):
	repo.insert(completed("Art", start=NOW))
	repo.insert(completed("Math", start=NOW - timedelta(days=2), project="Thesis"))
	repo.insert(completed("Math", start=NOW - timedelta(days=1)))

	assert [s.start_time for s in repo.query()] == [
		NOW - timedelta(days=2), NOW - timedelta(days=1), NOW,
	]
	assert {s.subject_name for s in repo.query(subject="Math")} == {"Math"}
	assert len(repo.query(project="Thesis")) == 1
	window = repo.query(start=NOW - timedelta(days=1), end=NOW)
	assert [s.start_time for s in window] == [NOW - timedelta(days=1)]


def test_delete(repo):
	session = repo.insert(completed())
	assert repo.delete(session.id) is True
	assert repo.delete(session.id) is False
	assert repo.query() == []


def test_reassign_tag_touches_only_that_tag(repo):
	for _ in range(3):
		repo.insert(completed("Math"))
	repo.insert(completed("Art"))
	assert repo.reassign_tag("Math", "Physics", "#339AF0") == 3
	subjects = sorted((s.subject_name, s.subject_color) for s in repo.query())
	assert subjects == [("Art", "#7C5CFC")] + [("Physics", "#339AF0")] * 3


def test_clear_project_keeps_sessions(repo):
	repo.insert(completed(project="Thesis"))
	repo.insert(completed(project="Thesis"))
	repo.insert(completed(project="Other"))
	assert repo.clear_project("Thesis") == 2
	sessions = repo.query()
	assert len(sessions) == 3
	assert sorted(s.project_name or "" for s in sessions) == ["", "", "Other"]
	assert all(s.project_color is None for s in sessions if s.project_name is None)


def test_tags_sorted_and_unique(repo):
	repo.add_tag("Physics", "#339AF0")
	repo.add_tag("Art", "#FF6B6B")
	assert [t.name for t in repo.tags()] == ["Art", "Physics"]
	with pytest.raises(DuplicateNameError):
		repo.add_tag("Art", "#000000")
	assert repo.remove_tag("Art") is True
	assert repo.remove_tag("Art") is False
	assert [t.name for t in repo.tags()] == ["Physics"]


def test_projects_in_creation_order(repo):
	repo.add_project("Zeta", "#FF6B6B")
	repo.add_project("Alpha", "#339AF0")
	assert [p.name for p in repo.projects()] == ["Zeta", "Alpha"]
	with pytest.raises(DuplicateNameError):
		repo.add_project("Zeta", "#FF6B6B")
	assert repo.remove_project("Zeta") is True
	assert [p.name for p in repo.projects()] == ["Alpha"]


def test_default_location_is_user_data_dir(data_dir):
	repo = SessionRepo()
	assert repo.db_file == data_dir / "study.db"
	repo.insert(completed())
	assert repo.db_file.exists()

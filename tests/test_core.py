from datetime import datetime

import pytest

from BackEnd.core.clock import fmt_mmss, format_duration, start_of_day, start_of_week
from BackEnd.core.log import setup_logger
from BackEnd.core.paths import db_path, log_dir, settings_path, user_data_dir
from BackEnd.models.timer_state import TimerPhase
from BackEnd.services.notifier import TrayNotifier
import reset_stats


@pytest.mark.parametrize("seconds,expected", [(0, "0m"), (59, "0m"), (1500, "25m"), (3900, "1h 5m"), (7200, "2h 0m")])
def test_format_duration(seconds, expected):
	assert format_duration(seconds) == expected


def test_time_strings():
	assert fmt_mmss(1500) == "25:00"
	assert fmt_mmss(7199) == "119:59"


def test_day_and_week_boundaries():
	sunday = datetime(2026, 10, 25, 23, 59, 59)
	assert start_of_day(sunday) == datetime(2026, 10, 25)
	assert start_of_week(sunday) == datetime(2026, 10, 19)
	assert start_of_week(datetime(2026, 10, 19)) == datetime(2026, 10, 19)


def test_paths_follow_override(data_dir):
	assert user_data_dir() == data_dir
	assert db_path() == data_dir / "study.db"
	assert settings_path() == data_dir / "settings.ini"
	assert log_dir().is_dir()


def test_setup_logger_attaches_handlers_once(data_dir):
	logger = setup_logger("studyflow.test", console=False)
	try:
		again = setup_logger("studyflow.test", console=False)
		assert again is logger
		assert len(logger.handlers) == 1
		logger.info("hello")
		logger.handlers[0].flush()
		assert "hello" in (data_dir / "logs" / "studyflow.log").read_text(encoding="utf-8")
	finally:
		for handler in list(logger.handlers):
			handler.close()
			logger.removeHandler(handler)


def test_tray_notifier_without_tray_is_silent():
	notifier = TrayNotifier(tray=None)
	notifier.notify(TimerPhase.FOCUS)
	notifier.play_sound()


def test_reset_stats_removes_db_and_settings(data_dir):
	(data_dir / "study.db").write_text("x")
	(data_dir / "settings.ini").write_text("[General]\n")
	removed = reset_stats.reset_all_stats(ask=lambda prompt: True)
	assert removed == [data_dir / "study.db", data_dir / "settings.ini"]
	assert not (data_dir / "study.db").exists()


def test_reset_stats_cancelled(data_dir):
	(data_dir / "study.db").write_text("x")
	assert reset_stats.reset_all_stats(ask=lambda prompt: False) == []
	assert (data_dir / "study.db").exists()

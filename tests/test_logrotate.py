import logging
import logging.handlers

import pytest

from godot2video.logrotate import LogRotationManager


@pytest.fixture
def log_file(tmp_path):
    return tmp_path / "godot2video.log"


def test_rotation_disabled(log_file):
    handler = LogRotationManager.create_rotating_handler(log_file, {"enabled": False})
    try:
        assert type(handler) is logging.FileHandler
    finally:
        handler.close()


@pytest.mark.parametrize(
    "interval, when, keep_files",
    [("daily", "MIDNIGHT", 30), ("weekly", "W6", 4), ("monthly", "D", 3)],
)
def test_rotation_schedule(log_file, interval, when, keep_files):
    handler = LogRotationManager.create_rotating_handler(
        log_file, {"enabled": True, "interval": interval, "keep_files": keep_files}
    )
    try:
        assert isinstance(handler, logging.handlers.TimedRotatingFileHandler)
        assert handler.when == when
        assert handler.backupCount == keep_files
    finally:
        handler.close()

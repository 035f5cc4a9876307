import logging
import os
import stat

import pytest

from godot2video import platforms


@pytest.fixture(autouse=True)
def restore_root_logger():
    """main() replaces the root logger handlers; put them back after each test"""
    root_logger = logging.getLogger()
    handlers = root_logger.handlers[:]
    level = root_logger.level
    yield
    for handler in root_logger.handlers[:]:
        if handler not in handlers:
            root_logger.removeHandler(handler)
            handler.close()
    for handler in handlers:
        if handler not in root_logger.handlers:
            root_logger.addHandler(handler)
    root_logger.setLevel(level)


@pytest.fixture(autouse=True)
def clean_platform_registry():
    yield
    platforms._PLATFORMS.clear()


@pytest.fixture
def project_dir(tmp_path):
    project = tmp_path / "game"
    project.mkdir()
    (project / "project.godot").write_text("config_version=5\n", encoding="utf-8")
    return project


@pytest.fixture
def fake_engine(tmp_path):
    """Executable stand-in for the Godot binary"""
    engine = tmp_path / "bin" / "godot"
    engine.parent.mkdir()
    engine.write_text("#!/bin/sh\necho 4.3.stable.official\n", encoding="utf-8")
    engine.chmod(engine.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
    return engine


@pytest.fixture
def no_engine_env(monkeypatch, tmp_path):
    """Hide any engine installed on the machine running the tests"""
    monkeypatch.delenv("GODOT2VIDEO_ENGINE", raising=False)
    monkeypatch.delenv("GODOT_BIN", raising=False)
    empty_bin = tmp_path / "empty-bin"
    empty_bin.mkdir()
    monkeypatch.setenv("PATH", str(empty_bin))
    return os.environ

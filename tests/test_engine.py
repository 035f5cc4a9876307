import subprocess

import pytest

from godot2video import engine
from godot2video.engine import (
    EngineLocator,
    EngineNotFoundError,
    list_builtin_output_formats,
    parse_engine_version,
)


@pytest.mark.parametrize(
    "version, expected",
    [
        ((3, 6), ["avi", "png"]),
        ((4, 4), ["avi", "png"]),
        ((4, 5), ["avi", "png", "ogv"]),
        ((4, 6), ["avi", "png", "ogv"]),
        ((5, 0), ["avi", "png", "ogv"]),
    ],
)
def test_builtin_output_formats(version, expected):
    assert list_builtin_output_formats(version) == expected


@pytest.mark.parametrize(
    "output, expected",
    [
        ("4.3.stable.official.77dcf97d8\n", (4, 3)),
        ("4.5.1.rc2.mono.official\n", (4, 5)),
        ("\n  v4.2.dev\n", (4, 2)),
        ("5.0.beta1\nWARNING: something\n", (5, 0)),
        ("Godot Engine\n4.3\n", None),
        ("", None),
    ],
)
def test_parse_engine_version(output, expected):
    assert parse_engine_version(output) == expected


def test_configured_executable(fake_engine, no_engine_env):
    locator = EngineLocator(str(fake_engine))

    assert locator.find_executable() == str(fake_engine.resolve())


def test_environment_executable(fake_engine, no_engine_env, monkeypatch):
    monkeypatch.setenv("GODOT_BIN", str(fake_engine))

    assert EngineLocator().find_executable() == str(fake_engine.resolve())


def test_unusable_configured_executable_falls_back(fake_engine, no_engine_env, monkeypatch, tmp_path):
    monkeypatch.setenv("GODOT2VIDEO_ENGINE", str(fake_engine))

    locator = EngineLocator(str(tmp_path / "missing" / "godot"))

    assert locator.find_executable() == str(fake_engine.resolve())


def test_executable_on_path(fake_engine, no_engine_env, monkeypatch):
    monkeypatch.setenv("PATH", str(fake_engine.parent))

    assert EngineLocator().find_executable() == str(fake_engine)


def test_executable_not_found(no_engine_env):
    with pytest.raises(EngineNotFoundError):
        EngineLocator().find_executable()


class FakeCompleted:
    def __init__(self, stdout):
        self.stdout = stdout
        self.returncode = 0


def test_get_version_runs_engine(fake_engine, monkeypatch):
    calls = []

    def fake_run(command, **kwargs):
        calls.append(command)
        return FakeCompleted("4.5.stable.official\n")

    monkeypatch.setattr(engine.subprocess, "run", fake_run)
    locator = EngineLocator(str(fake_engine))

    assert locator.get_version() == (4, 5)
    assert locator.get_output_formats() == ["avi", "png", "ogv"]
    # Cached after the first query
    assert calls == [[str(fake_engine.resolve()), "--version"]]


def test_get_version_unrecognized_output(fake_engine, monkeypatch):
    monkeypatch.setattr(engine.subprocess, "run", lambda command, **kwargs: FakeCompleted("??"))

    assert EngineLocator(str(fake_engine)).get_version() == (0, 0)


def test_get_version_timeout(fake_engine, monkeypatch):
    def fake_run(command, **kwargs):
        raise subprocess.TimeoutExpired(command, kwargs.get("timeout"))

    monkeypatch.setattr(engine.subprocess, "run", fake_run)

    assert EngineLocator(str(fake_engine)).get_output_formats() == ["avi", "png"]

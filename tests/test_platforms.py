from concurrent.futures import Future

import pytest

from godot2video.config import ConfigManager
from godot2video.export import ExportError, ExportRequest, Verbosity
from godot2video.platforms import (
    VideoExportPlatform,
    get_platform,
    register_platform,
    registered_platforms,
    unregister_platform,
)


class FakeLauncher:
    def __init__(self, exit_code=0):
        self.exit_code = exit_code
        self.calls = []

    def launch(self, arguments, working_dir=None, keep_open=False):
        self.calls.append((list(arguments), working_dir, keep_open))
        future = Future()
        future.set_result(self.exit_code)
        return future


@pytest.fixture
def config_manager(tmp_path):
    manager = ConfigManager(tmp_path / "conf" / "godot2video.xml")
    manager.load_config(fps=30, resolution="640x360", args="--foo bar", verbosity="fps", keepopen=True)
    return manager


def test_register_is_idempotent():
    first = register_platform()
    second = register_platform(VideoExportPlatform())

    assert second is first
    assert registered_platforms() == ["Video"]
    assert get_platform("video") is first


def test_unregister_is_idempotent():
    register_platform()

    assert unregister_platform() is True
    assert unregister_platform() is False
    assert get_platform() is None
    assert registered_platforms() == []


def test_export_options():
    options = {option["name"]: option for option in VideoExportPlatform().get_export_options()}

    assert list(options) == ["fps", "resolution", "args", "verbosity", "keepopen"]
    assert options["fps"]["type"] == "int"
    assert options["fps"]["default"] == 60
    assert options["keepopen"]["default"] is False
    assert options["resolution"]["hint"]


def test_build_request(config_manager, project_dir, tmp_path):
    request = VideoExportPlatform().build_request(config_manager, tmp_path / "movie.avi", project_dir)

    assert request == ExportRequest(
        output_path=str(tmp_path / "movie.avi"),
        source_project_path=str(project_dir),
        frame_rate=30,
        resolution_override=(640, 360),
        verbosity=Verbosity.VERBOSE_FPS,
        extra_arguments=("--foo", "bar"),
        keep_open=True,
    )


def test_build_request_uses_project_setting(tmp_path, project_dir):
    manager = ConfigManager(tmp_path / "conf" / "godot2video.xml")
    manager.load_config(project=str(project_dir))

    request = VideoExportPlatform().build_request(manager, "movie.avi")

    assert request.source_project_path == str(project_dir)


def test_export_launches_engine(project_dir, tmp_path):
    output = tmp_path / "renders" / "movie.avi"
    request = ExportRequest(
        output_path=str(output), source_project_path=str(project_dir), frame_rate=24, keep_open=True
    )
    launcher = FakeLauncher(exit_code=0)

    assert VideoExportPlatform().export(request, launcher) == 0

    arguments, working_dir, keep_open = launcher.calls[0]
    assert arguments == [
        "--write-movie", str(output), "--path", str(project_dir), "--fixed-fps", "24",
    ]
    assert working_dir == project_dir
    assert keep_open is True
    assert output.parent.is_dir()


def test_export_passes_engine_exit_code(project_dir, tmp_path):
    request = ExportRequest(output_path=str(tmp_path / "a.avi"), source_project_path=str(project_dir))

    assert VideoExportPlatform().export(request, FakeLauncher(exit_code=255)) == 255


def test_export_error_does_not_launch(project_dir, tmp_path):
    request = ExportRequest(
        output_path=str(tmp_path / "a.avi"),
        source_project_path=str(project_dir),
        resolution_override=(0, 720),
    )
    launcher = FakeLauncher()

    assert VideoExportPlatform().export(request, launcher) is ExportError.INVALID_RESOLUTION
    assert launcher.calls == []

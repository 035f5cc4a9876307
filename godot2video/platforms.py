"""
godot2video.platforms - Video export platform

The "Video" export target: declares its preset options, turns a loaded
preset into an export request and runs the export through a launcher.
Platforms are kept in a small registry with idempotent register/unregister.
"""

import logging
from pathlib import Path
from typing import Dict, List, Optional, Union

from .config import ConfigManager
from .export import ExportError, ExportRequest, build_arguments
from .args.path_manager import PathManager


class VideoExportPlatform:
    """Export target rendering a project to a movie file"""

    name = "Video"

    def get_export_options(self) -> List[Dict[str, object]]:
        """
        Declared preset options

        Returns:
            List of dicts with name, type, default and hint
        """
        return [
            {
                "name": setting_id,
                "type": ConfigManager.VALID_SETTINGS[setting_id].__name__,
                "default": ConfigManager.DEFAULT_VALUES[setting_id],
                "hint": ConfigManager.SETTING_HINTS[setting_id],
            }
            for setting_id in ("fps", "resolution", "args", "verbosity", "keepopen")
        ]

    def build_request(
        self, config_manager: ConfigManager, output_path, project_path=None
    ) -> ExportRequest:
        """
        Build an export request from loaded settings

        Args:
            config_manager: ConfigManager with settings already loaded
            output_path: Movie file to write
            project_path: Project directory (defaults to the 'project' setting)
        """
        project = project_path if project_path is not None else config_manager.get_project()
        return ExportRequest(
            output_path=str(output_path),
            source_project_path=str(project),
            frame_rate=config_manager.get_fps(),
            resolution_override=config_manager.get_resolution(),
            verbosity=config_manager.get_verbosity(),
            extra_arguments=tuple(config_manager.get_extra_arguments()),
            keep_open=config_manager.get_keep_open(),
        )

    def export(self, request: ExportRequest, launcher) -> Union[ExportError, int]:
        """
        Validate the request and run the engine

        Args:
            request: Export parameters
            launcher: ProcessLauncher used to run the engine

        Returns:
            The ExportError when validation fails, otherwise the engine exit code
        """
        result = build_arguments(request)
        if not result:
            logging.error("Export failed: %s", result.error.value)
            return result.error

        # Vector starts with: --write-movie <output> --path <project>
        PathManager.ensure_parent_directory(result.arguments[1])
        working_dir = Path(result.arguments[3])
        future = launcher.launch(result.arguments, working_dir, request.keep_open)
        return future.result()


_PLATFORMS: Dict[str, VideoExportPlatform] = {}


def register_platform(platform: Optional[VideoExportPlatform] = None) -> VideoExportPlatform:
    """
    Register an export platform; registering the same name again is a no-op

    Returns:
        The registered platform instance
    """
    platform = platform or VideoExportPlatform()
    key = platform.name.lower()
    if key in _PLATFORMS:
        logging.debug("Export platform already registered: %s", platform.name)
        return _PLATFORMS[key]
    _PLATFORMS[key] = platform
    logging.debug("Export platform registered: %s", platform.name)
    return platform


def unregister_platform(name: str = VideoExportPlatform.name) -> bool:
    """
    Remove an export platform; unknown names are ignored

    Returns:
        bool: True if a platform was removed
    """
    removed = _PLATFORMS.pop(name.lower(), None)
    if removed is not None:
        logging.debug("Export platform unregistered: %s", removed.name)
    return removed is not None


def get_platform(name: str = VideoExportPlatform.name) -> Optional[VideoExportPlatform]:
    return _PLATFORMS.get(name.lower())


def registered_platforms() -> List[str]:
    return [platform.name for platform in _PLATFORMS.values()]

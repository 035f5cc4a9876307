"""
godot2video - Render Godot projects to video files

A small command line front-end for the Godot movie writer: reads an export
preset, validates it, builds the engine command line and runs the engine
headless until the movie is written.
"""

__version__ = "1.0.0"
__author__ = "godot2video contributors"
__license__ = "MIT"

from .args import ArgumentParser
from .config import ConfigManager
from .engine import EngineLocator, list_builtin_output_formats, parse_engine_version
from .export import (
    ExportError,
    ExportRequest,
    ExportResult,
    Verbosity,
    build_arguments,
)
from .launcher import ProcessLauncher
from .platforms import (
    VideoExportPlatform,
    get_platform,
    register_platform,
    unregister_platform,
)

__all__ = [
    "ArgumentParser",
    "ConfigManager",
    "EngineLocator",
    "ExportError",
    "ExportRequest",
    "ExportResult",
    "ProcessLauncher",
    "Verbosity",
    "VideoExportPlatform",
    "build_arguments",
    "get_platform",
    "list_builtin_output_formats",
    "parse_engine_version",
    "register_platform",
    "unregister_platform",
]

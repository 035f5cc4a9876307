"""
godot2video.export - Movie export argument builder

Validates an export request and translates it into the ordered command line
understood by the Godot movie writer.
"""

import logging
import os
from dataclasses import dataclass, field
from enum import Enum, IntEnum
from typing import List, Optional, Tuple

from .args.path_manager import PathManager

# Godot project descriptor; a project path may point at it instead of its directory
PROJECT_DESCRIPTOR = "project.godot"

# Engine command line flags
WRITE_MOVIE_FLAG = "--write-movie"
PROJECT_PATH_FLAG = "--path"
RESOLUTION_FLAG = "--resolution"
FIXED_FPS_FLAG = "--fixed-fps"
PRINT_FPS_FLAG = "--print-fps"
VERBOSE_FLAG = "--verbose"
QUIET_FLAG = "--quiet"


class Verbosity(IntEnum):
    """Engine logging tiers"""

    QUIET = -1
    UNSET = 0
    VERBOSE_FPS = 1
    VERBOSE_ALL = 2

    # Names accepted in presets and on the command line
    @classmethod
    def aliases(cls) -> dict:
        return {
            "quiet": cls.QUIET,
            "unset": cls.UNSET,
            "fps": cls.VERBOSE_FPS,
            "all": cls.VERBOSE_ALL,
        }

    @classmethod
    def from_setting(cls, value) -> "Verbosity":
        """
        Convert a preset or command line value to a Verbosity

        Accepts an alias name ('quiet', 'unset', 'fps', 'all'), an integer
        or its string form (-1 to 2).

        Raises:
            ValueError: if the value is not a known verbosity
        """
        if isinstance(value, Verbosity):
            return value
        if isinstance(value, str):
            text = value.strip().lower()
            if text in cls.aliases():
                return cls.aliases()[text]
            try:
                value = int(text)
            except ValueError:
                raise ValueError(f"Unknown verbosity: {value!r}") from None
        return cls(value)


class ExportError(Enum):
    """Reasons a request cannot be turned into a command line"""

    SOURCE_NOT_FOUND = "source project directory not found"
    OUTPUT_IS_DIRECTORY = "output path is an existing directory"
    INVALID_RESOLUTION = "resolution override needs both width and height"


@dataclass(frozen=True)
class ExportRequest:
    """Typed, already-defaulted parameters of a single movie export"""

    output_path: str
    source_project_path: str
    frame_rate: int = 0
    resolution_override: Tuple[int, int] = (0, 0)
    verbosity: Verbosity = Verbosity.UNSET
    extra_arguments: Tuple[str, ...] = field(default_factory=tuple)
    keep_open: bool = False


@dataclass(frozen=True)
class ExportResult:
    """Either the engine arguments or the error that prevented them"""

    arguments: Optional[List[str]] = None
    error: Optional[ExportError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def __bool__(self) -> bool:
        return self.ok

    @classmethod
    def success(cls, arguments: List[str]) -> "ExportResult":
        return cls(arguments=arguments)

    @classmethod
    def failure(cls, error: ExportError) -> "ExportResult":
        return cls(error=error)


def resolve_project_directory(path: str, normalizer=PathManager) -> Optional[str]:
    """
    Resolve a project path to an existing project directory

    Args:
        path: Absolute project directory, or the path of its project.godot
        normalizer: Object providing directory_exists()

    Returns:
        The existing directory, or None when there is none
    """
    if normalizer.directory_exists(path):
        return path

    head, tail = os.path.split(path)
    if tail == PROJECT_DESCRIPTOR and normalizer.directory_exists(head):
        return head

    return None


def build_arguments(request: ExportRequest, normalizer=PathManager) -> ExportResult:
    """
    Validate an export request and build the engine argument vector

    The vector always starts with the output and project path pairs, followed
    by the extra arguments exactly as given, then the optional resolution,
    verbosity and frame rate flags.

    Args:
        request: Export parameters
        normalizer: Path collaborator (normalize_absolute, directory_exists)

    Returns:
        ExportResult holding the arguments or the validation error
    """
    output_path = normalizer.normalize_absolute(request.output_path, True)
    source_path = normalizer.normalize_absolute(request.source_project_path, True)

    project_dir = resolve_project_directory(source_path, normalizer)
    if project_dir is None:
        return ExportResult.failure(ExportError.SOURCE_NOT_FOUND)

    if normalizer.directory_exists(output_path):
        return ExportResult.failure(ExportError.OUTPUT_IS_DIRECTORY)

    arguments = [WRITE_MOVIE_FLAG, output_path, PROJECT_PATH_FLAG, project_dir]

    # Passed through unfiltered, duplicates and shell metacharacters included
    if request.extra_arguments:
        logging.warning(
            "Passing additional engine arguments unfiltered: %s",
            " ".join(request.extra_arguments),
        )
        arguments.extend(request.extra_arguments)

    width, height = request.resolution_override
    if width > 0 and height > 0:
        arguments.extend([RESOLUTION_FLAG, f"{int(width)}x{int(height)}"])
    elif width > 0 or height > 0:
        return ExportResult.failure(ExportError.INVALID_RESOLUTION)

    if request.verbosity < 0:
        arguments.append(QUIET_FLAG)
    elif request.verbosity > 0:
        arguments.append(PRINT_FPS_FLAG)
        if request.verbosity >= Verbosity.VERBOSE_ALL:
            arguments.append(VERBOSE_FLAG)

    if request.frame_rate > 0:
        arguments.extend([FIXED_FPS_FLAG, str(int(request.frame_rate))])

    return ExportResult.success(arguments)

"""
Argument validation module for godot2video

Handles validation of command-line arguments including frame rate,
resolution overrides, engine verbosity and additional engine arguments.
"""

import re
import shlex
from typing import Optional, Tuple

# Engine verbosity names accepted on the command line
VERBOSITY_CHOICES = ["quiet", "unset", "fps", "all"]


class ArgumentValidator:
    """Validates command-line arguments"""

    RESOLUTION_PATTERN = re.compile(r"^\s*(\d+)\s*[xX]\s*(\d+)\s*$")

    @classmethod
    def validate_fps(cls, fps: Optional[int]) -> Tuple[bool, Optional[str]]:
        """
        Validate frame rate parameter

        Args:
            fps: Frames per second, 0 lets the engine pace frames

        Returns:
            Tuple of (is_valid, error_message)
        """
        if fps is None:
            return True, None

        if fps < 0:
            return False, f"Parameter [--fps] must be 0 or greater, got: {fps}"

        return True, None

    @classmethod
    def parse_resolution(
        cls, resolution: Optional[str]
    ) -> Tuple[Optional[Tuple[int, int]], Optional[str]]:
        """
        Parse a WxH resolution string

        Partial overrides such as '1920x0' parse fine; rejecting them is left
        to the export step.

        Args:
            resolution: Resolution string, e.g. '1920x1080'

        Returns:
            Tuple of ((width, height), error_message)
        """
        if resolution is None:
            return None, None

        match = cls.RESOLUTION_PATTERN.match(resolution)
        if not match:
            return None, f"Parameter [--resolution] must be WIDTHxHEIGHT, got: {resolution}"

        return (int(match.group(1)), int(match.group(2))), None

    @classmethod
    def validate_resolution(cls, resolution: Optional[str]) -> Tuple[bool, Optional[str]]:
        """Validate a WxH resolution string"""
        _, error = cls.parse_resolution(resolution)
        return error is None, error

    @classmethod
    def validate_verbosity(cls, verbosity: Optional[str]) -> Tuple[bool, Optional[str]]:
        """Validate engine verbosity name"""
        if verbosity is None:
            return True, None

        if verbosity.lower() not in VERBOSITY_CHOICES:
            return False, (
                f"Parameter [--engine-verbosity] must be one of "
                f"{', '.join(VERBOSITY_CHOICES)}, got: {verbosity}"
            )

        return True, None

    @classmethod
    def validate_extra_args(cls, extra_args: Optional[str]) -> Tuple[bool, Optional[str]]:
        """Validate that additional engine arguments can be shell-split"""
        if extra_args is None:
            return True, None

        try:
            shlex.split(extra_args)
        except ValueError as e:
            return False, f"Parameter [--extra-args] cannot be parsed: {e}"

        return True, None

    @classmethod
    def validate_all_arguments(cls, args) -> list:
        """
        Validate all arguments at once

        Args:
            args: Parsed arguments object

        Returns:
            List of error messages (empty if all valid)
        """
        errors = []

        checks = [
            cls.validate_fps(getattr(args, "fps", None)),
            cls.validate_resolution(getattr(args, "resolution", None)),
            cls.validate_verbosity(getattr(args, "engine_verbosity", None)),
            cls.validate_extra_args(getattr(args, "extra_args", None)),
        ]
        for valid, error in checks:
            if not valid:
                errors.append(error)

        return errors

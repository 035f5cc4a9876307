"""
Main argument parser module for godot2video

Orchestrates argument parsing, validation, and special actions handling.
"""

import argparse
import sys
from pathlib import Path
from typing import Dict, Optional

from .validator import ArgumentValidator, VERBOSITY_CHOICES
from .path_manager import PathManager


class ArgumentParser:
    """Command line argument parser for godot2video"""

    def __init__(self):
        self.parser = self._create_parser()
        self.validator = ArgumentValidator()
        self.path_manager = PathManager()

    def _create_parser(self):
        """Create the argument parser with all options"""
        parser = argparse.ArgumentParser(
            prog="godot2video",
            description="Render a Godot project to a video file with the engine movie writer",
            formatter_class=argparse.RawDescriptionHelpFormatter,
            epilog=self._get_epilog_text(),
        )

        parser.add_argument(
            "output", nargs="?", type=Path,
            help="Movie file to write (.avi, .png, .ogv with Godot 4.5+)",
        )

        parser.add_argument(
            "--version", "-v", action="store_true",
            help="Show version and exit",
        )

        parser.add_argument(
            "--list-formats", action="store_true",
            help="Show the builtin output formats of the engine and exit",
        )

        parser.add_argument(
            "--dry-run", "-n", action="store_true",
            help="Print the engine command line without running it",
        )

        # Engine and project
        parser.add_argument(
            "--project", "-p", type=Path,
            help="Project directory or its project.godot file",
        )

        parser.add_argument(
            "--engine", "-e", type=str,
            help="Godot executable (default: GODOT2VIDEO_ENGINE, GODOT_BIN or PATH)",
        )

        # Movie options
        parser.add_argument(
            "--fps", "-f", type=int,
            help="Fixed frame rate (0 lets the engine pace frames)",
        )

        parser.add_argument(
            "--resolution", "-r", type=str, metavar="WxH",
            help="Force render resolution, e.g. 1920x1080 (0x0 keeps the project setting)",
        )

        parser.add_argument(
            "--engine-verbosity", type=str.lower, choices=VERBOSITY_CHOICES,
            help="Engine logging: quiet, unset, fps (print fps) or all (print fps and verbose)",
        )

        parser.add_argument(
            "--extra-args", type=str, metavar="ARGS",
            help="Additional engine arguments, passed unfiltered after the path options",
        )

        keep_group = parser.add_mutually_exclusive_group()
        keep_group.add_argument(
            "--keep-open", dest="keep_open", action="store_const", const=True,
            help="Keep the console open after the engine exits",
        )
        keep_group.add_argument(
            "--close", dest="keep_open", action="store_const", const=False,
            help="Return as soon as the engine exits",
        )

        # Log level selection
        level_group = parser.add_mutually_exclusive_group()
        level_group.add_argument(
            "--warning", "-w", action="store_true",
            help="Only warnings and errors",
        )
        level_group.add_argument(
            "--debug", action="store_true",
            help="All debug information (very verbose)",
        )

        parser.add_argument(
            "--quiet", "-q", action="store_true",
            help="No console output, logs to file only",
        )

        # Configuration
        parser.add_argument(
            "--config-file", type=Path,
            help="Configuration file path",
        )

        parser.add_argument(
            "--basedir", type=Path,
            help="Base directory for config and logs",
        )

        return parser

    def _get_epilog_text(self):
        """Get the epilog help text"""
        return """
Examples:
  godot2video movie.avi --project ~/games/demo
  godot2video out/frames.png --project ~/games/demo/project.godot --fps 30
  godot2video movie.avi --resolution 1280x720 --engine-verbosity fps
  godot2video movie.avi --extra-args "--rendering-driver opengl3 res://intro.tscn"
  godot2video movie.avi --dry-run
  godot2video --list-formats --engine /opt/godot/godot

Configuration:
  Default config: ~/godot2video/conf/godot2video.xml
  Default logs:   ~/godot2video/log/
  Command line options override the configuration for the current run only.

Engine Verbosity:
  quiet           Pass --quiet to the engine
  unset           Engine default logging
  fps             Pass --print-fps
  all             Pass --print-fps and --verbose

Exit Status:
  The engine exit code is returned unchanged; 1 for validation errors.
        """

    def parse_args(self, args=None):
        """Parse command line arguments with validation"""
        args = self.parser.parse_args(args)

        if self._handle_special_actions(args):
            sys.exit(0)

        if args.output is None and not args.list_formats:
            self.parser.error("the following arguments are required: output")

        self._validate_args(args)

        return args

    def _handle_special_actions(self, args) -> bool:
        """Handle special actions that exit immediately"""
        if args.version:
            from .. import __version__
            print(__version__)
            return True

        return False

    def _validate_args(self, args):
        """Validate argument values"""
        errors = self.validator.validate_all_arguments(args)
        if errors:
            # parser.error exits on the first message; report them all together
            self.parser.error("; ".join(errors))

    def get_logging_config(self, args) -> Dict[str, object]:
        """Determine logging configuration from arguments"""
        config = {
            "level": "default",
            "quiet": False,
        }

        if args.debug:
            config["level"] = "debug"
        elif args.warning:
            config["level"] = "warning"

        if args.quiet:
            config["quiet"] = True

        return config

    def get_config_overrides(self, args) -> Dict[str, object]:
        """Map command line options to configuration setting overrides"""
        return {
            "engine": args.engine,
            "project": str(args.project) if args.project is not None else None,
            "fps": args.fps,
            "resolution": args.resolution,
            "args": args.extra_args,
            "verbosity": args.engine_verbosity,
            "keepopen": args.keep_open,
        }

    def get_system_defaults(self, basedir: Optional[Path] = None):
        """Get default directories"""
        return self.path_manager.get_system_defaults(basedir)

    def create_directories_with_proper_permissions(self, basedir: Optional[Path] = None):
        """Create required directories with proper permissions"""
        defaults = self.get_system_defaults(basedir)
        self.path_manager.create_directories(defaults)

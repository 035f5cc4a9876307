#!/usr/bin/env python3
"""
godot2video - Render Godot projects to video files

Loads the preset, validates the export request and runs the engine movie writer.
"""

import logging
import sys
import time
from pathlib import Path

from .args import ArgumentParser
from .config import ConfigManager
from .engine import EngineLocator, EngineNotFoundError
from .export import ExportError, build_arguments
from .launcher import ProcessLauncher, format_command
from .logrotate import LogRotationManager
from .platforms import get_platform, register_platform

# Package version
from . import __version__


def setup_logging(logging_config: dict, log_file: Path, retention_config: dict):
    """Setup logging configuration with retention policy"""
    log_file.parent.mkdir(parents=True, exist_ok=True)

    if logging_config["level"] == "warning":
        level = logging.WARNING
    elif logging_config["level"] == "debug":
        level = logging.DEBUG
    else:  # default
        level = logging.INFO

    file_handler = LogRotationManager.create_rotating_handler(log_file, retention_config)
    file_handler.setLevel(level)
    file_handler.setFormatter(
        logging.Formatter("%(asctime)s %(levelname)-8s %(message)s", datefmt="%Y/%m/%d %H:%M:%S")
    )

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers.clear()
    root_logger.addHandler(file_handler)

    if not logging_config["quiet"]:
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setLevel(level)
        console_handler.setFormatter(logging.Formatter("%(levelname)s: %(message)s"))
        root_logger.addHandler(console_handler)

    return file_handler


def check_output_format(output: Path, locator: EngineLocator):
    """Warn when the output extension is not handled by a builtin movie writer"""
    extension = output.suffix.lower().lstrip(".")
    formats = locator.get_output_formats()
    if not extension:
        logging.warning("Output %s has no extension; the engine picks its writer by extension", output)
    elif extension not in formats:
        logging.warning(
            "Output format '%s' is not a builtin movie writer (%s); it needs an engine plugin",
            extension,
            ", ".join(formats),
        )


def main(argv=None):
    """Main application entry point"""
    start_time = time.time()

    try:
        arg_parser = ArgumentParser()
        args = arg_parser.parse_args(argv)

        defaults = arg_parser.get_system_defaults(args.basedir)
        config_file = args.config_file or defaults["config_file"]
        log_file = defaults["log_file"]

        arg_parser.create_directories_with_proper_permissions(args.basedir)

        config_manager = ConfigManager(config_file)
        config_manager.load_config(**arg_parser.get_config_overrides(args))

        retention_config = config_manager.get_retention_config()
        logging_config = arg_parser.get_logging_config(args)
        setup_logging(logging_config, log_file, retention_config)

        logging.info("=" * 60)
        logging.info("godot2video session started - Version %s", __version__)
        logging.info("Configuration loaded from: %s", config_file)
        config_manager.log_config_summary()

        platform = get_platform() or register_platform()
        locator = EngineLocator(config_manager.get_engine())

        if args.list_formats:
            for output_format in locator.get_output_formats():
                print(output_format)
            return 0

        executable = locator.find_executable()
        check_output_format(args.output, locator)

        request = platform.build_request(config_manager, args.output, args.project)

        if args.dry_run:
            result = build_arguments(request)
            if not result:
                logging.error("Export failed: %s", result.error.value)
                return 1
            print(format_command([executable, *result.arguments]))
            return 0

        with ProcessLauncher(executable) as launcher:
            outcome = platform.export(request, launcher)

        if isinstance(outcome, ExportError):
            logging.info("godot2video session ended with error")
            logging.info("=" * 60)
            return 1

        logging.info("Total execution time: %.2f seconds", time.time() - start_time)
        if outcome == 0:
            logging.info("Movie written to: %s", request.output_path)
            logging.info("godot2video session ended successfully")
        else:
            logging.info("godot2video session ended with engine exit code %d", outcome)
        logging.info("=" * 60)
        return outcome

    except KeyboardInterrupt:
        logging.info("Interrupted by user")
        return 1
    except EngineNotFoundError as e:
        logging.error("%s", e)
        return 1
    except Exception as e:
        logging.exception("Critical error: %s", str(e))
        logging.info("godot2video session ended with error")
        logging.info("=" * 60)
        return 1


if __name__ == "__main__":
    sys.exit(main())

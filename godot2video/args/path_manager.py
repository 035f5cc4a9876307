"""
Path management module for godot2video

Handles default directories, path normalization and directory creation
with proper permissions.
"""

import logging
import os
from pathlib import Path
from typing import Dict, Optional


class PathManager:
    """Manages default paths, path normalization and directory creation"""

    @staticmethod
    def get_system_defaults(basedir: Optional[Path] = None) -> Dict[str, Path]:
        """
        Get default directories and files

        Args:
            basedir: Base directory override (defaults to ~/godot2video)

        Returns:
            Dict containing base_dir, conf_dir, log_dir and file paths
        """
        base_dir = Path(basedir).expanduser() if basedir else Path.home() / "godot2video"

        return {
            "base_dir": base_dir,
            "conf_dir": base_dir / "conf",
            "log_dir": base_dir / "log",
            "config_file": base_dir / "conf" / "godot2video.xml",
            "log_file": base_dir / "log" / "godot2video.log",
        }

    @staticmethod
    def create_directories(defaults: Dict[str, Path]):
        """
        Create required directories with proper 755 permissions

        Args:
            defaults: Dictionary containing directory paths
        """
        for key in ["conf_dir", "log_dir"]:
            if key in defaults:
                directory = defaults[key]
                try:
                    directory.mkdir(parents=True, exist_ok=True, mode=0o755)
                except PermissionError:
                    # Fallback: create without mode specification (depends on umask)
                    directory.mkdir(parents=True, exist_ok=True)

    @staticmethod
    def normalize_absolute(path, expand_user: bool = True) -> str:
        """
        Normalize a path to an absolute path string

        Args:
            path: Relative or absolute path
            expand_user: Expand a leading ~ to the user home directory

        Returns:
            Absolute, normalized path (no trailing separator)
        """
        path = os.fspath(path)
        if expand_user:
            path = os.path.expanduser(path)
        return os.path.abspath(path)

    @staticmethod
    def directory_exists(path) -> bool:
        """Check if path denotes an existing directory"""
        try:
            return os.path.isdir(path)
        except (OSError, ValueError) as e:
            logging.debug("Cannot check directory %s: %s", path, e)
            return False

    @staticmethod
    def ensure_parent_directory(path) -> Path:
        """
        Create the parent directory of a file path if it does not exist

        Returns:
            The parent directory
        """
        parent = Path(path).parent
        if not parent.exists():
            logging.info("Creating output directory: %s", parent)
            parent.mkdir(parents=True, exist_ok=True)
        return parent

"""
godot2video.args - Command line argument parsing module

Provides argument parsing, validation and path management for godot2video.
"""

from .base import ArgumentParser
from .validator import ArgumentValidator
from .path_manager import PathManager

__all__ = [
    "ArgumentParser",      # Main public interface
    "ArgumentValidator",   # For testing/validation
    "PathManager",         # For path management
]

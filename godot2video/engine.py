"""
godot2video.engine - Godot engine discovery

Locates the engine executable, reads its version and reports which movie
writer formats it ships with.
"""

import logging
import os
import re
import shutil
import subprocess
from pathlib import Path
from typing import List, Optional, Tuple

# Environment variables checked in order when no engine is configured
ENGINE_ENV_VARS = ["GODOT2VIDEO_ENGINE", "GODOT_BIN"]

# Executable names searched on PATH as a last resort
ENGINE_NAMES = ["godot", "godot4"]

# Matches "4.3.stable.official.77dcf97d8", "4.5.1.rc2.mono" or "v4.2"
VERSION_PATTERN = re.compile(r"^v?(\d+)\.(\d+)")

# First engine release with the Ogg Theora movie writer
OGV_MIN_VERSION = (4, 5)


class EngineNotFoundError(Exception):
    """Raised when no usable Godot executable can be found"""


def parse_engine_version(text: str) -> Optional[Tuple[int, int]]:
    """
    Parse the (major, minor) version out of `godot --version` output

    Only the first non-empty line is considered; the engine may print
    warnings after it.
    """
    for line in text.splitlines():
        line = line.strip()
        if not line:
            continue
        match = VERSION_PATTERN.match(line)
        if match:
            return int(match.group(1)), int(match.group(2))
        return None
    return None


def list_builtin_output_formats(version: Tuple[int, int]) -> List[str]:
    """
    List the output file extensions supported by the engine's own writers

    Args:
        version: Engine (major, minor) version

    Returns:
        Ordered list of file extensions
    """
    formats = ["avi", "png"]
    major, minor = version[0], version[1]
    if major > OGV_MIN_VERSION[0] or (major == OGV_MIN_VERSION[0] and minor >= OGV_MIN_VERSION[1]):
        formats.append("ogv")
    return formats


class EngineLocator:
    """Finds the Godot executable and queries its version"""

    def __init__(self, configured: Optional[str] = None, timeout: int = 10):
        self.configured = configured or None
        self.timeout = timeout
        self._executable: Optional[str] = None
        self._version: Optional[Tuple[int, int]] = None

    def find_executable(self) -> str:
        """
        Locate the engine executable

        Order: configured path, environment variables, then PATH lookup.

        Raises:
            EngineNotFoundError: if nothing usable is found
        """
        if self._executable:
            return self._executable

        candidates = []
        if self.configured:
            candidates.append(("configuration", self.configured))
        for env_var in ENGINE_ENV_VARS:
            if os.environ.get(env_var):
                candidates.append((env_var, os.environ[env_var]))

        for source, candidate in candidates:
            resolved = self._resolve(candidate)
            if resolved:
                logging.debug("Engine executable from %s: %s", source, resolved)
                self._executable = resolved
                return resolved
            logging.warning("Engine executable from %s not usable: %s", source, candidate)

        for name in ENGINE_NAMES:
            resolved = shutil.which(name)
            if resolved:
                logging.debug("Engine executable found on PATH: %s", resolved)
                self._executable = resolved
                return resolved

        raise EngineNotFoundError(
            "Godot executable not found. Use --engine, the 'engine' setting, "
            "or set GODOT2VIDEO_ENGINE"
        )

    def _resolve(self, candidate: str) -> Optional[str]:
        path = Path(candidate).expanduser()
        if path.is_file() and os.access(str(path), os.X_OK):
            return str(path.resolve())
        return shutil.which(candidate)

    def get_version(self) -> Tuple[int, int]:
        """
        Query the engine version

        Returns:
            (major, minor), or (0, 0) when the version cannot be determined
        """
        if self._version is not None:
            return self._version

        executable = self.find_executable()
        try:
            completed = subprocess.run(
                [executable, "--version"],
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                universal_newlines=True,
                timeout=self.timeout,
                check=False,
            )
        except subprocess.TimeoutExpired:
            logging.warning("Engine version query timed out after %ds", self.timeout)
            self._version = (0, 0)
            return self._version
        except OSError as e:
            logging.warning("Cannot run engine %s: %s", executable, e)
            self._version = (0, 0)
            return self._version

        version = parse_engine_version(completed.stdout)
        if version is None:
            logging.warning("Unrecognized engine version output: %r", completed.stdout.strip())
            version = (0, 0)
        else:
            logging.debug("Engine version: %d.%d", version[0], version[1])

        self._version = version
        return version

    def get_output_formats(self) -> List[str]:
        """Builtin output formats of the located engine"""
        return list_builtin_output_formats(self.get_version())

"""
godot2video.config - Configuration management

Handles the XML export preset file: parsing, typed settings, defaults,
cleanup of unknown settings and per-run command line overrides.
"""

import logging
import shlex
import xml.etree.ElementTree as ET
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from .args.validator import ArgumentValidator
from .export import Verbosity


class ConfigManager:
    """Manages the godot2video preset file"""

    DEFAULT_CONFIG = """<?xml version="1.0" encoding="utf-8"?>
<settings version="1">
  <!-- Engine and project -->
  <setting id="engine"></setting>
  <setting id="project"></setting>

  <!-- Movie options -->
  <setting id="fps">60</setting>
  <setting id="resolution">0x0</setting>
  <setting id="args"></setting>
  <setting id="verbosity">unset</setting>
  <setting id="keepopen">false</setting>

  <!-- Log retention -->
  <setting id="logrotate">true</setting>
  <setting id="relogs">30</setting>
</settings>"""

    # Valid settings and their types
    VALID_SETTINGS = {
        "engine": str,
        "project": str,
        "fps": int,
        "resolution": str,
        "args": str,
        "verbosity": str,
        "keepopen": bool,
        "logrotate": str,
        "relogs": int,
    }

    # Defaults used for missing or invalid values
    DEFAULT_VALUES = {
        "engine": "",
        "project": "",
        "fps": 60,
        "resolution": "0x0",
        "args": "",
        "verbosity": "unset",
        "keepopen": False,
        "logrotate": "true",
        "relogs": 30,
    }

    # Hints shown in the option listing
    SETTING_HINTS = {
        "engine": "Godot executable (empty: GODOT2VIDEO_ENGINE, GODOT_BIN or PATH)",
        "project": "Project directory or project.godot (empty: current directory)",
        "fps": "Fixed frame rate, 0 lets the engine pace frames",
        "resolution": "Forced resolution WxH, 0x0 keeps the project setting",
        "args": "Additional engine arguments, passed unfiltered",
        "verbosity": "quiet, unset, fps or all",
        "keepopen": "Keep the console open after the engine exits",
        "logrotate": "true, false, daily, weekly or monthly",
        "relogs": "Days of log backups to keep (0: unlimited)",
    }

    # Settings order for clean output
    SETTINGS_ORDER = [
        "engine",
        "project",
        "fps",
        "resolution",
        "args",
        "verbosity",
        "keepopen",
        "logrotate",
        "relogs",
    ]

    def __init__(self, config_file: Path):
        self.config_file = Path(config_file)
        self.settings: Dict[str, Any] = {}
        self.version: str = "1"
        self.config_changes: Dict[str, str] = {}  # Track command line changes for clean logging
        self._original_file_settings: Dict[str, Any] = {}

    def load_config(self, **overrides) -> Dict[str, Any]:
        """
        Load and validate configuration file

        Args:
            **overrides: Setting values from the command line (None = not given).
                         They apply to this run only and are never written back.

        Returns:
            Dict of typed settings
        """
        if not self.config_file.exists():
            self._create_default_config()

        self._parse_config_file()

        # Store original values from config file before any command line modifications
        self._original_file_settings = self.settings.copy()

        self.config_changes = {}
        for setting_id, value in overrides.items():
            if value is None:
                continue
            if setting_id not in self.VALID_SETTINGS:
                raise ValueError(f"Unknown setting override: {setting_id}")
            original = self.settings.get(setting_id, self.DEFAULT_VALUES[setting_id])
            if original != value:
                self.config_changes[setting_id] = f"{original!r} → {value!r}"
            self.settings[setting_id] = value

        self._validate_config()

        # Missing defaults are written using the original file values only
        self._set_defaults()

        return self.settings

    def _create_default_config(self):
        """Create default configuration file with proper permissions"""
        logging.info("Creating default configuration: %s", self.config_file)

        try:
            self.config_file.parent.mkdir(parents=True, exist_ok=True, mode=0o755)
        except PermissionError:
            self.config_file.parent.mkdir(parents=True, exist_ok=True)

        with open(self.config_file, "w", encoding="utf-8") as f:
            f.write(self.DEFAULT_CONFIG)

    def _parse_config_file(self):
        """Parse XML configuration file, dropping unknown settings"""
        try:
            tree = ET.parse(self.config_file)
            root = tree.getroot()

            logging.info("Reading configuration from: %s", self.config_file)
            self.version = root.attrib.get("version", "1")

            valid_settings = {}
            unknown_settings = []
            original_order = []

            for setting in root.findall("setting"):
                setting_id = setting.get("id")
                original_order.append(setting_id)

                # 'value' attribute first, then element text
                setting_value = setting.get("value")
                if setting_value is None:
                    setting_value = setting.text
                if setting_value is not None:
                    setting_value = setting_value.strip()

                logging.debug("Config setting: %s = %s", setting_id, setting_value)

                if setting_id in self.VALID_SETTINGS:
                    valid_settings[setting_id] = setting_value
                else:
                    unknown_settings.append(setting_id)
                    logging.warning(
                        "Unknown configuration setting: %s = %s (will be removed)",
                        setting_id,
                        setting_value,
                    )

            self._process_settings(valid_settings)

            ordering_needed = self._check_ordering_needed(original_order, valid_settings)
            if unknown_settings or ordering_needed:
                reason = []
                if unknown_settings:
                    reason.append(f"removed {len(unknown_settings)} unknown settings")
                if ordering_needed:
                    reason.append("reordered settings for consistency")
                logging.info("Configuration update needed: %s", ", ".join(reason))
                self._write_clean_config(valid_settings)

        except ET.ParseError as e:
            logging.error("Cannot parse configuration file %s: %s", self.config_file, e)
            raise

    def _check_ordering_needed(
        self, original_order: List[str], valid_settings: Dict[str, Optional[str]]
    ) -> bool:
        """Check if configuration settings need to be reordered"""
        current_valid_order = [
            setting_id for setting_id in original_order if setting_id in valid_settings
        ]
        expected_order = [
            setting_id for setting_id in self.SETTINGS_ORDER if setting_id in valid_settings
        ]

        if current_valid_order != expected_order:
            logging.debug("Settings order differs from recommended:")
            logging.debug("  Current:  %s", current_valid_order)
            logging.debug("  Expected: %s", expected_order)
            return True

        return False

    def _process_settings(self, settings_dict: Dict[str, Optional[str]]):
        """Process and type-convert settings"""
        for setting_id, setting_value in settings_dict.items():
            expected_type = self.VALID_SETTINGS[setting_id]

            if expected_type == bool:
                self.settings[setting_id] = self._parse_boolean(setting_value)
            elif expected_type == int:
                self.settings[setting_id] = self._parse_integer(setting_id, setting_value)
            else:
                self.settings[setting_id] = setting_value if setting_value is not None else ""

            logging.debug(
                "Processed setting: %s = %s (%s)",
                setting_id,
                self.settings[setting_id],
                expected_type.__name__,
            )

    def _parse_boolean(self, value: Any) -> bool:
        """Parse boolean values from configuration"""
        if value is None:
            return False
        if isinstance(value, bool):
            return value
        if isinstance(value, str):
            return value.lower() in ("true", "1", "yes", "on")
        return bool(value)

    def _parse_integer(self, setting_id: str, value: Optional[str]) -> int:
        default = self.DEFAULT_VALUES[setting_id]
        if value is None or value == "":
            return default
        try:
            return int(value)
        except ValueError:
            logging.warning('Invalid %s setting "%s", using default %s', setting_id, value, default)
            return default

    def _validate_config(self):
        """Validate settings, falling back to defaults with a warning"""
        fps = self.settings.get("fps", self.DEFAULT_VALUES["fps"])
        valid, error = ArgumentValidator.validate_fps(fps)
        if not valid:
            logging.warning("%s, using default %d", error, self.DEFAULT_VALUES["fps"])
            self.settings["fps"] = self.DEFAULT_VALUES["fps"]

        resolution = self.settings.get("resolution", self.DEFAULT_VALUES["resolution"])
        _, error = ArgumentValidator.parse_resolution(resolution)
        if error:
            logging.warning("%s, using default %s", error, self.DEFAULT_VALUES["resolution"])
            self.settings["resolution"] = self.DEFAULT_VALUES["resolution"]

        verbosity = self.settings.get("verbosity", self.DEFAULT_VALUES["verbosity"])
        try:
            Verbosity.from_setting(verbosity)
        except ValueError:
            logging.warning(
                'Invalid verbosity setting "%s", using default %s',
                verbosity,
                self.DEFAULT_VALUES["verbosity"],
            )
            self.settings["verbosity"] = self.DEFAULT_VALUES["verbosity"]

        args = self.settings.get("args", "")
        try:
            shlex.split(args)
        except ValueError as e:
            raise ValueError(f"Invalid additional arguments {args!r}: {e}") from e

        relogs = self.settings.get("relogs", self.DEFAULT_VALUES["relogs"])
        if relogs < 0:
            logging.warning("Invalid relogs %d, using default 30", relogs)
            self.settings["relogs"] = self.DEFAULT_VALUES["relogs"]

        logrotate = str(self.settings.get("logrotate", "true")).lower()
        if logrotate not in ("true", "false", "daily", "weekly", "monthly"):
            logging.warning('Invalid logrotate setting "%s", using default true', logrotate)
            self.settings["logrotate"] = "true"

    def _set_defaults(self):
        """Set default values for missing settings and update config file if needed"""
        missing = [s for s in self.SETTINGS_ORDER if s not in self._original_file_settings]
        for setting_id in missing:
            self.settings.setdefault(setting_id, self.DEFAULT_VALUES[setting_id])

        if missing:
            file_settings = {
                setting_id: self._original_file_settings.get(
                    setting_id, self.DEFAULT_VALUES[setting_id]
                )
                for setting_id in self.SETTINGS_ORDER
            }
            self._write_clean_config(file_settings)
            logging.info("Configuration upgraded with default settings: %s", ", ".join(missing))

    def _write_clean_config(self, valid_settings: Dict[str, Any]):
        """Write settings back in canonical order"""
        root = ET.Element("settings", version=self.version)
        root.text = "\n  "

        ordered = [s for s in self.SETTINGS_ORDER if s in valid_settings]
        for index, setting_id in enumerate(ordered):
            element = ET.SubElement(root, "setting", id=setting_id)
            value = valid_settings[setting_id]
            if isinstance(value, bool):
                element.text = "true" if value else "false"
            elif value is not None and value != "":
                element.text = str(value)
            element.tail = "\n  " if index < len(ordered) - 1 else "\n"

        with open(self.config_file, "wb") as f:
            f.write(b'<?xml version="1.0" encoding="utf-8"?>\n')
            ET.ElementTree(root).write(f, encoding="utf-8", xml_declaration=False)

        logging.debug("Configuration file rewritten: %s", self.config_file)

    # Typed accessors

    def get_fps(self) -> int:
        return int(self.settings.get("fps", self.DEFAULT_VALUES["fps"]))

    def get_resolution(self) -> Tuple[int, int]:
        resolution, _ = ArgumentValidator.parse_resolution(
            self.settings.get("resolution", self.DEFAULT_VALUES["resolution"])
        )
        return resolution or (0, 0)

    def get_extra_arguments(self) -> List[str]:
        """Additional engine arguments split the way a POSIX shell would"""
        return shlex.split(self.settings.get("args", "") or "")

    def get_verbosity(self) -> Verbosity:
        return Verbosity.from_setting(self.settings.get("verbosity", "unset"))

    def get_keep_open(self) -> bool:
        return bool(self.settings.get("keepopen", False))

    def get_engine(self) -> Optional[str]:
        return self.settings.get("engine") or None

    def get_project(self) -> str:
        return self.settings.get("project") or "."

    def get_retention_config(self) -> Dict[str, Any]:
        """Get log rotation and retention configuration"""
        logrotate = str(self.settings.get("logrotate", "true")).lower()

        if logrotate == "false":
            rotation_enabled = False
            rotation_interval = "daily"
        elif logrotate in ("daily", "weekly", "monthly"):
            rotation_enabled = True
            rotation_interval = logrotate
        else:
            rotation_enabled = True
            rotation_interval = "daily"

        log_retention_days = int(self.settings.get("relogs", self.DEFAULT_VALUES["relogs"]))

        return {
            "enabled": rotation_enabled,
            "interval": rotation_interval,
            "keep_files": self._days_to_keep_files(log_retention_days, rotation_interval),
            "log_retention_days": log_retention_days,
        }

    def _days_to_keep_files(self, retention_days: int, interval: str) -> int:
        """Convert retention days to number of backup files to keep"""
        if retention_days == 0:
            return 0  # Unlimited

        if interval == "weekly":
            return max(1, retention_days // 7)
        elif interval == "monthly":
            return max(1, retention_days // 30)
        return retention_days

    def log_config_summary(self):
        """Log configuration summary"""
        logging.info("Configuration values processed:")
        for setting_id in self.SETTINGS_ORDER:
            if setting_id in self.config_changes:
                logging.info("  %s: %s (command line)", setting_id, self.config_changes[setting_id])
            else:
                logging.info("  %s: %r", setting_id, self.settings.get(setting_id))

        retention_config = self.get_retention_config()
        if retention_config["enabled"]:
            logging.info(
                "  log rotation: %s, %d days retention",
                retention_config["interval"],
                retention_config["log_retention_days"],
            )
        else:
            logging.info("  log rotation: disabled")

"""
godot2video.logrotate - Log rotation setup

Builds the file handler used by the session log according to the
logrotate/relogs retention settings.
"""

import logging
import logging.handlers
from pathlib import Path

# TimedRotatingFileHandler parameters per rotation interval
ROTATION_SCHEDULES = {
    "daily": {"when": "midnight", "interval": 1},
    "weekly": {"when": "W6", "interval": 1},  # Sunday as first day of week
    "monthly": {"when": "D", "interval": 30},  # Approximation for 1 month
}


class LogRotationManager:
    """Manages log rotation configuration and setup"""

    @staticmethod
    def create_rotating_handler(log_file: Path, retention_config: dict) -> logging.Handler:
        """
        Create appropriate log handler based on retention configuration.

        Args:
            log_file: Path to log file
            retention_config: Retention configuration from config manager

        Returns:
            Configured logging handler
        """
        if not retention_config.get("enabled", False):
            handler = logging.FileHandler(log_file, mode="a", encoding="utf-8")
            logging.debug("Log rotation disabled - using standard FileHandler")
            return handler

        interval = retention_config.get("interval", "daily").lower()
        schedule = ROTATION_SCHEDULES.get(interval, ROTATION_SCHEDULES["daily"])
        backup_count = retention_config.get("keep_files", 30)

        handler = logging.handlers.TimedRotatingFileHandler(
            str(log_file),
            when=schedule["when"],
            interval=schedule["interval"],
            backupCount=backup_count,
            encoding="utf-8",
        )

        log_retention_days = retention_config.get("log_retention_days", 30)
        retention_desc = "unlimited" if log_retention_days == 0 else f"{log_retention_days} days"
        logging.debug(
            "Log rotation enabled: %s rotation, %s retention (%d backup files)",
            interval,
            retention_desc,
            backup_count,
        )

        return handler

# SPDX-License-Identifier: GPL-3.0-or-later
# SPDX-FileCopyrightText: Copyright 2023 Geoffrey Coulaud
# SPDX-FileCopyrightText: Copyright 2026 Playshelf Contributors

import logging
import logging.config as logging_dot_config
import os
import platform
import sys
from os import PathLike
from pathlib import Path

from playshelf import APP_ID, LOG_DIR, VERSION


def setup_logging(log_dir: PathLike[str] | str = LOG_DIR) -> None:
    """Initiate the app's logging"""

    app_log_level = os.environ.get("LOGLEVEL", "INFO").upper()
    lib_log_level = os.environ.get("LIBLOGLEVEL", "WARNING").upper()

    lib_logger = {
        "handlers": ["lib_console_handler", "file_handler"],
        "propagate": False,
        "level": "NOTSET",
    }

    config = {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "file_formatter": {
                "format": "%(asctime)s - %(name)s %(levelname)s: %(message)s",
                "datefmt": "%H:%M:%S",
            },
            "console_formatter": {
                "format": "%(name)s %(levelname)s - %(message)s",
                "class": "playshelf.logging.color_log_formatter.ColorLogFormatter",
            },
        },
        "handlers": {
            "file_handler": {
                "class": "playshelf.logging.session_file_handler.SessionFileHandler",
                "formatter": "file_formatter",
                "level": "DEBUG",
                "filename": Path(log_dir) / f"{APP_ID}.log",
                "backup_count": 2,
            },
            "app_console_handler": {
                "class": "logging.StreamHandler",
                "formatter": "console_formatter",
                "level": app_log_level,
            },
            "lib_console_handler": {
                "class": "logging.StreamHandler",
                "formatter": "console_formatter",
                "level": lib_log_level,
            },
        },
        "loggers": {
            "urllib3": {**lib_logger},
            "requests": {**lib_logger},
        },
        "root": {
            "level": "NOTSET",
            "handlers": ["app_console_handler", "file_handler"],
        },
    }
    logging_dot_config.dictConfig(config)


def log_system_info() -> None:
    """Log system debug information"""

    logging.debug("Starting %s v%s", APP_ID, VERSION)
    logging.debug("Python version: %s", sys.version)
    logging.debug("Platform: %s", platform.platform())
    if sys.platform.startswith("win32"):
        logging.debug("Windows edition: %s", platform.win32_edition())
    logging.debug("─" * 37)

# SPDX-License-Identifier: GPL-3.0-or-later
# SPDX-FileCopyrightText: Copyright 2023 Geoffrey Coulaud
# SPDX-FileCopyrightText: Copyright 2026 Playshelf Contributors

import logging
from logging import Formatter, LogRecord

RESET = "\033[0m"

_LEVEL_COLORS = {
    logging.CRITICAL: "\033[1m\033[31m",
    logging.ERROR: "\033[31m",
    logging.WARNING: "\033[33m",
    logging.DEBUG: "\033[2m",
}


class ColorLogFormatter(Formatter):
    """Formatter that colors console logs by level"""

    def format(self, record: LogRecord) -> str:
        text = super().format(record)
        if color := _LEVEL_COLORS.get(record.levelno):
            return color + text + RESET
        return text

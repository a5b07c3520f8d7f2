# SPDX-License-Identifier: GPL-3.0-or-later
# SPDX-FileCopyrightText: Copyright 2026 Playshelf Contributors

from pathlib import Path

from platformdirs import user_cache_dir, user_config_dir, user_log_dir

APP_ID = "playshelf"
VERSION = "0.3.0"

CONFIG_DIR = Path(user_config_dir(APP_ID, appauthor=False))
CACHE_DIR = Path(user_cache_dir(APP_ID, appauthor=False))
LOG_DIR = Path(user_log_dir(APP_ID, appauthor=False))

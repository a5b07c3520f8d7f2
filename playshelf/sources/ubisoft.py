# SPDX-License-Identifier: GPL-3.0-or-later
# SPDX-FileCopyrightText: Copyright 2026 Playshelf Contributors

import logging
from collections.abc import Generator
from gettext import gettext as _

from playshelf.games import Game
from playshelf.icons import find_icon
from playshelf.registry import NullRegistry, Registry

from .uninstall import UninstallEntry, entries

ID, NAME = "ubisoft", _("Ubisoft Connect")

_KEY_PREFIX = "Uplay Install "

# The client registers itself next to the games it installs
_CLIENT_NAMES = ("ubisoft connect", "uplay")

_logger = logging.getLogger(__name__)


def get_games(*, registry: Registry | None = None) -> Generator[Game]:
    """Installed Ubisoft Connect games."""
    seen = set()
    for entry in entries(registry or NullRegistry()):
        if not _is_ubisoft(entry):
            continue

        if entry.display_name.strip().lower() in _CLIENT_NAMES:
            _logger.debug("Skipping the Ubisoft Connect client")
            continue

        game_id = entry.name.removeprefix(_KEY_PREFIX).strip()
        if not game_id or game_id in seen:
            continue

        seen.add(game_id)
        yield Game(
            game_id=f"{ID}-{game_id}",
            title=entry.display_name,
            platform=NAME,
            icon_path=find_icon(entry.install_dir),
            launch_command=f"uplay://launch/{game_id}/0",
            uninstall_command=entry.uninstall_string,
            source=NAME,
        )


def _is_ubisoft(entry: UninstallEntry) -> bool:
    if entry.name.startswith(_KEY_PREFIX) or "ubisoft" in entry.name.lower():
        return True

    return entry.published_by("ubisoft")

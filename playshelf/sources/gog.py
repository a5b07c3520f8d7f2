# SPDX-License-Identifier: GPL-3.0-or-later
# SPDX-FileCopyrightText: Copyright 2026 Playshelf Contributors

import logging
from collections.abc import Generator
from gettext import gettext as _
from pathlib import Path
from typing import NamedTuple

from playshelf.games import Game
from playshelf.icons import GAME_ICON_NAMES, find_icon
from playshelf.registry import UNINSTALL_KEYS, NullRegistry, Registry, walk

from . import LOCAL_APPDATA, PROGRAM_FILES, PROGRAM_FILES_X86

ID, NAME = "gog", _("GOG Galaxy")

_CLIENT_EXE = "GalaxyClient.exe"
_CLIENT_PATHS = (
    PROGRAM_FILES / "GOG Galaxy",
    PROGRAM_FILES_X86 / "GOG Galaxy",
    LOCAL_APPDATA / "GOG.com" / "Galaxy",
)
_GAMES_KEYS = (
    r"HKEY_LOCAL_MACHINE\SOFTWARE\GOG.com\Games",
    r"HKEY_LOCAL_MACHINE\SOFTWARE\WOW6432Node\GOG.com\Games",
)

_logger = logging.getLogger(__name__)


class _Title(NamedTuple):
    game_id: str
    name: str
    path: Path


def get_games(*, registry: Registry | None = None) -> Generator[Game]:
    """Installed GOG games."""
    registry = registry or NullRegistry()

    if not (client := _find_client(registry)):
        _logger.info("GOG Galaxy is not installed")
        return

    seen = set()
    for title in _titles(registry):
        if title.game_id in seen:
            continue

        seen.add(title.game_id)
        yield Game(
            game_id=f"{ID}-{title.game_id}",
            title=title.name,
            platform=NAME,
            icon_path=find_icon(
                title.path,
                (f"goggame-{title.game_id}.ico", "goggame.ico", *GAME_ICON_NAMES),
            ),
            launch_command=(
                f'"{client}" /command=runGame'
                f' /gameId={title.game_id} /path="{title.path}"'
            ),
            uninstall_command=f"goggalaxy://openGameView/{title.game_id}",
            source=NAME,
        )


def _find_client(registry: Registry) -> Path | None:
    """The Galaxy client, needed to start any GOG game."""
    for directory in _CLIENT_PATHS:
        if (executable := directory / _CLIENT_EXE).is_file():
            return executable

    for uninstall_key in UNINSTALL_KEYS:
        for key in walk(registry, uninstall_key):
            name = registry.value(key, "DisplayName") or ""
            if "gog galaxy" not in name.lower():
                continue

            location = registry.value(key, "InstallLocation")
            if location and (executable := Path(location, _CLIENT_EXE)).is_file():
                return executable

    return None


def _titles(registry: Registry) -> Generator[_Title]:
    for games_key in _GAMES_KEYS:
        for key in walk(registry, games_key):
            name = registry.value(key, "gameName")
            path = registry.value(key, "path")

            if not (name and path):
                _logger.debug("Skipping incomplete GOG entry %s", key)
                continue

            if not Path(path).is_dir():
                _logger.debug("Skipping GOG entry %s, %s is missing", key, path)
                continue

            yield _Title(
                game_id=registry.value(key, "gameID") or key.rsplit("\\", 1)[-1],
                name=name,
                path=Path(path),
            )

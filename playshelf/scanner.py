# SPDX-License-Identifier: GPL-3.0-or-later
# SPDX-FileCopyrightText: Copyright 2026 Playshelf Contributors

import logging
from typing import TYPE_CHECKING, Any, cast

from playshelf.games import Game
from playshelf.registry import Registry, default_registry
from playshelf.sources import (
    Platform,
    Source,
    ea,
    epic,
    gog,
    playnite,
    shortcuts,
    steam,
    ubisoft,
    xbox,
)

if TYPE_CHECKING:
    from playshelf.cache import ResultCache
    from playshelf.config import Preferences

SOURCES: dict[Platform, Source] = {
    Platform.STEAM: cast(Source, steam),
    Platform.EPIC: cast(Source, epic),
    Platform.GOG: cast(Source, gog),
    Platform.EA: cast(Source, ea),
    Platform.UBISOFT: cast(Source, ubisoft),
    Platform.PLAYNITE: cast(Source, playnite),
    Platform.XBOX: cast(Source, xbox),
    Platform.SHORTCUTS: cast(Source, shortcuts),
}

_logger = logging.getLogger(__name__)


class Scanner:
    """
    Finds the installed games of one platform.

    `synchronize()` runs a full scan and blocks until it is done,
    `games` holds its result until the next one.
    """

    platform: Platform
    games: list[Game]

    def __init__(self, platform: Platform, **kwargs: Any) -> None:  # noqa: ANN401
        self.platform = platform
        self.games = []
        self._kwargs = kwargs

    @property
    def source(self) -> Source:
        return SOURCES[self.platform]

    @property
    def name(self) -> str:
        return self.source.NAME

    def synchronize(self) -> list[Game]:
        """
        Scan for games, replacing the previous result.

        :raises UnresolvableLocationError: The platform's data can't be found
        """
        self.games = list(self.source.get_games(**self._kwargs))
        _logger.debug("%s: %d games", self.name, len(self.games))
        return self.games

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.platform.value!r})"


def scanners_from_preferences(
    preferences: "Preferences",
    *,
    registry: Registry | None = None,
    cache: "ResultCache | None" = None,
) -> list[Scanner]:
    """The scanners of every platform enabled in `preferences`."""
    registry = registry or default_registry()

    enabled = (
        (preferences.enable_steam, Platform.STEAM, {"registry": registry}),
        (preferences.enable_epic_games, Platform.EPIC, {"registry": registry}),
        (preferences.enable_gog, Platform.GOG, {"registry": registry}),
        (preferences.enable_ea_app, Platform.EA, {"registry": registry}),
        (preferences.enable_ubisoft, Platform.UBISOFT, {"registry": registry}),
        (
            preferences.enable_playnite,
            Platform.PLAYNITE,
            {
                "data_path": preferences.playnite_data_path,
                "library_export": preferences.playnite_library_export,
            },
        ),
        (preferences.enable_xbox, Platform.XBOX, {"cache": cache}),
    )

    scanners = [
        Scanner(platform, **kwargs) for enable, platform, kwargs in enabled if enable
    ]

    if directories := preferences.shortcut_directories():
        scanners.append(Scanner(Platform.SHORTCUTS, directories=directories))

    return scanners

# SPDX-License-Identifier: GPL-3.0-or-later
# SPDX-FileCopyrightText: Copyright 2025 Zoey Ahmed
# SPDX-FileCopyrightText: Copyright 2026 Playshelf Contributors

import dataclasses
from collections.abc import Iterable
from dataclasses import dataclass
from enum import StrEnum
from types import UnionType
from typing import Any, NamedTuple, Self


class _GameProp(NamedTuple):
    name: str
    type_: type | UnionType
    required: bool = False


PROPERTIES: tuple[_GameProp, ...] = (
    _GameProp("game_id", str, required=True),
    _GameProp("title", str, required=True),
    _GameProp("platform", str, required=True),
    _GameProp("launch_command", str, required=True),
    _GameProp("icon_path", str),
    _GameProp("uninstall_command", str),
    _GameProp("working_dir", str),
    _GameProp("description", str),
    _GameProp("developers", list | tuple),
    _GameProp("publishers", list | tuple),
    _GameProp("genres", list | tuple),
    _GameProp("release_date", str),
    _GameProp("last_activity", int),
    _GameProp("added", int),
    _GameProp("favorite", bool),
    _GameProp("cover", str),
    _GameProp("source", str),
)

_SEQUENCES = "developers", "publishers", "genres"


@dataclass(frozen=True, slots=True)
class Game:
    """An installed game, as found by one of the sources."""

    game_id: str
    title: str
    platform: str
    launch_command: str
    icon_path: str | None = None
    uninstall_command: str | None = None
    working_dir: str | None = None

    description: str | None = None
    developers: tuple[str, ...] = ()
    publishers: tuple[str, ...] = ()
    genres: tuple[str, ...] = ()
    release_date: str | None = None
    last_activity: int | None = None
    added: int | None = None
    favorite: bool = False
    cover: str | None = None
    source: str | None = None

    def __post_init__(self):
        if not self.game_id:
            raise ValueError("A game needs an ID")

        if not (self.launch_command and self.launch_command.strip()):
            raise ValueError(f"{self.game_id} has no launch command")

        for name in _SEQUENCES:
            object.__setattr__(self, name, tuple(getattr(self, name) or ()))

    @classmethod
    def from_data(cls, data: dict[str, Any]) -> Self:
        """Create a game from data. Useful for loading from JSON."""
        kwargs = {}

        for prop in PROPERTIES:
            value = data.get(prop.name)

            if not prop.required and value is None:
                continue

            if not isinstance(value, prop.type_):
                raise TypeError(f"Invalid value for {prop.name}: {value!r}")

            kwargs[prop.name] = value

        return cls(**kwargs)

    def to_data(self) -> dict[str, Any]:
        """The game's properties, without the unset ones."""
        return {
            key: list(value) if isinstance(value, tuple) else value
            for key, value in dataclasses.asdict(self).items()
            if value not in (None, ())
        }


class SortOrder(StrEnum):
    ALPHABETICAL = "alphabetical"
    LAST_PLAYED = "lastPlayed"
    PLATFORM = "platform"
    DISCOVERED = "discovered"


# Platforms not in the list go last
PLATFORM_ORDER = (
    "Steam",
    "Epic Games",
    "GOG Galaxy",
    "EA app",
    "Ubisoft Connect",
    "Xbox",
    "Playnite",
    "Shortcut",
)


def base_platform(platform: str) -> str:
    """`Playnite (Steam)` -> `Playnite`"""
    return platform.split(" (", 1)[0]


def _platform_rank(game: Game) -> int:
    try:
        return PLATFORM_ORDER.index(base_platform(game.platform))
    except ValueError:
        return len(PLATFORM_ORDER)


def sort_games(games: Iterable[Game], order: SortOrder | str) -> list[Game]:
    """Sort `games` according to `order`. All orders are stable."""
    games = list(games)

    match SortOrder(order):
        case SortOrder.ALPHABETICAL:
            games.sort(key=lambda game: (game.title.casefold(), game.title))
        case SortOrder.PLATFORM:
            games.sort(key=_platform_rank)
        case SortOrder.LAST_PLAYED:
            games.sort(key=lambda game: -(game.last_activity or 0))
        case SortOrder.DISCOVERED:
            pass

    return games

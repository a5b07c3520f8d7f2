# SPDX-License-Identifier: GPL-3.0-or-later
# SPDX-FileCopyrightText: Copyright 2026 Playshelf Contributors

from collections.abc import Iterable
from os import PathLike
from pathlib import Path

# Icons usually shipped next to a game's executable, most specific first
GAME_ICON_NAMES = (
    "game.ico",
    "icon.ico",
    "game.png",
    "icon.png",
    "launcher.ico",
    "app.ico",
)


def resolve_icon(path: PathLike[str] | str | None) -> str | None:
    """`path` if there is a file there, `None` otherwise."""
    if not path:
        return None

    try:
        return str(path) if Path(path).exists() else None
    except (OSError, ValueError):
        return None


def from_display_icon(value: str | None) -> str | None:
    """
    Resolve a `DisplayIcon` registry value.

    These look like `"C:\\Games\\game.exe",0`, the icon index is dropped.
    """
    if not value:
        return None

    path = value.strip()
    if path.startswith('"'):
        path = path[1:].split('"', 1)[0]
    else:
        path, _sep, index = path.rpartition(",")
        if not (path and index.strip().lstrip("-").isdigit()):
            path = value.strip()

    return resolve_icon(path.strip())


def find_icon(
    directory: PathLike[str] | str | None,
    names: Iterable[str] = GAME_ICON_NAMES,
    subfolders: Iterable[str] = ("",),
) -> str | None:
    """
    The first of `names` found in `directory`.

    Each name is tried in `directory` and then in each of `subfolders`
    before moving on to the next name.
    """
    if not (directory and resolve_icon(directory)):
        return None

    subfolders = tuple(subfolders)
    for name in names:
        for subfolder in subfolders:
            if icon := resolve_icon(Path(directory, subfolder, name)):
                return icon

    return None

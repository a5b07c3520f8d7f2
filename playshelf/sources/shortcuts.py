# SPDX-License-Identifier: GPL-3.0-or-later
# SPDX-FileCopyrightText: Copyright 2026 Playshelf Contributors

import base64
import configparser
import logging
from collections.abc import Generator, Iterable
from contextlib import suppress
from gettext import gettext as _
from os import PathLike
from pathlib import Path

from playshelf.games import Game
from playshelf.icons import resolve_icon

ID, NAME = "shortcut", _("Shortcut")

EXTENSIONS = frozenset((".url", ".lnk"))

DELETE_PREFIX = "delete:"

_logger = logging.getLogger(__name__)


def get_games(
    *, directories: Iterable[tuple[str, PathLike[str] | str]] = ()
) -> Generator[Game]:
    """Shortcuts in the `(name, path)` pairs of `directories`."""
    for name, directory in directories:
        directory = Path(directory).expanduser()
        if not directory.is_dir():
            _logger.debug("Skipping missing shortcut directory %s", directory)
            continue

        platform = f"{NAME} ({name or directory.name})"
        for path in _shortcuts(directory):
            yield Game(
                game_id=f"{ID}-{_encode(path)}",
                title=path.stem,
                platform=platform,
                icon_path=_icon(path),
                launch_command=str(path),
                uninstall_command=f"{DELETE_PREFIX}{path}",
                working_dir=str(path.parent),
                source=NAME,
            )


def _shortcuts(directory: Path) -> list[Path]:
    try:
        return sorted(
            path
            for path in directory.rglob("*")
            if path.suffix.lower() in EXTENSIONS and path.is_file()
        )
    except OSError as error:
        _logger.warning("Cannot walk %s: %s", directory, error)
        return []


def _icon(path: Path) -> str:
    """The `IconFile` of an internet shortcut, the shortcut itself otherwise."""
    if path.suffix.lower() == ".url":
        with suppress(OSError, configparser.Error):
            parser = configparser.ConfigParser(interpolation=None, strict=False)

            # Some files don't bother with the [InternetShortcut] header
            parser.read_string("[shortcut]\n" + path.read_text("utf-8", "replace"))

            for section in parser.sections():
                if icon := resolve_icon(parser[section].get("IconFile", "").strip()):
                    return icon

    return str(path)


def _encode(path: Path) -> str:
    return base64.urlsafe_b64encode(str(path).encode("utf-8")).decode("ascii")


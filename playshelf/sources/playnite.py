# SPDX-License-Identifier: GPL-3.0-or-later
# SPDX-FileCopyrightText: Copyright 2026 Playshelf Contributors

"""
Games known to Playnite, a library manager for other storefronts.

A companion extension exports the whole library to a single JSON document,
which is preferred. Without one, the per-game files of Playnite's own store
are read instead.
"""

import logging
import re
from collections.abc import Generator, Iterable
from datetime import datetime
from gettext import gettext as _
from os import PathLike
from pathlib import Path
from typing import Any, NamedTuple

from playshelf.games import Game
from playshelf.icons import resolve_icon
from playshelf.utils.json_repair import loads_lenient

from . import APPDATA, DOCUMENTS
from .location import Location, LocationSubPath, UnresolvableLocationError

ID, NAME = "playnite", _("Playnite")

DEFAULT_LIBRARY_EXPORT = DOCUMENTS / "playnite-raycast-library.json"

_FILES = Path("library", "files")
_EXPORTER = Path("Extensions", "RaycastExport")

_logger = logging.getLogger(__name__)


class ExporterStatus(NamedTuple):
    """Whether the library exporter extension is set up."""

    extension: Path | None = None
    library_export: Path | None = None

    @property
    def is_installed(self) -> bool:
        return self.extension is not None and self.library_export is not None


def exporter_status(
    *,
    data_path: PathLike[str] | str | None = None,
    library_export: PathLike[str] | str | None = None,
) -> ExporterStatus:
    """Look for the exporter extension and the export it writes."""
    data_dir = Path(data_path or APPDATA / "Playnite").expanduser()
    extension = data_dir / _EXPORTER
    export = Path(library_export or DEFAULT_LIBRARY_EXPORT).expanduser()

    return ExporterStatus(
        extension if extension.is_dir() else None,
        export if export.is_file() else None,
    )


def get_games(
    *,
    data_path: PathLike[str] | str | None = None,
    library_export: PathLike[str] | str | None = None,
) -> Generator[Game]:
    """Installed games in the Playnite library that aren't hidden."""
    location = _location(data_path)
    export = Path(library_export or DEFAULT_LIBRARY_EXPORT).expanduser()

    if export.is_file():
        _logger.debug("Reading the Playnite library export at %s", export)
        try:
            records = _export_records(export)
        except (OSError, ValueError) as error:
            _logger.warning("Cannot read the Playnite library export: %s", error)
            records = None

        if records is not None:
            try:
                files = location.resolve() / _FILES
            except UnresolvableLocationError:
                files = None

            yield from _games(records, files)
            return

    # Raises if Playnite isn't installed, which is worth reporting
    root = location.resolve()
    yield from _games(_store_records(location["games"]), root / _FILES)


def _location(data_path: PathLike[str] | str | None) -> Location:
    return Location(
        NAME,
        (APPDATA / "Playnite",),
        {"games": LocationSubPath(Path("library", "games"), is_directory=True)},
        override=data_path,
        optional=False,
    )


def _export_records(path: Path) -> list[Any]:
    data = loads_lenient(path.read_text("utf-8", "replace"))

    if isinstance(data, dict):
        data = data.get("games", data.get("Games"))

    if not isinstance(data, list):
        raise ValueError(f"{path} does not contain a list of games")

    return data


def _store_records(directory: Path) -> Generator[Any]:
    for path in sorted(directory.glob("*.json")):
        try:
            yield loads_lenient(path.read_text("utf-8", "replace"))
        except (OSError, ValueError) as error:
            _logger.debug("Skipping %s: %s", path.name, error)


def _games(records: Iterable[Any], files: Path | None) -> Generator[Game]:
    seen = set()
    for record in records:
        if not isinstance(record, dict):
            continue

        try:
            game = _game(record, files)
        except (TypeError, ValueError) as error:
            _logger.debug("Skipping Playnite record: %s", error)
            continue

        if game is None or game.game_id in seen:
            continue

        seen.add(game.game_id)
        yield game


def _game(record: dict[str, Any], files: Path | None) -> Game | None:
    if not record.get("IsInstalled") or record.get("Hidden"):
        return None

    game_id, name = record.get("Id"), record.get("Name")
    if not (isinstance(game_id, str) and game_id and isinstance(name, str) and name):
        raise ValueError(f"Invalid record {game_id!r}")

    source = _name(record.get("Source"))

    return Game(
        game_id=f"{ID}-{game_id}",
        title=name,
        platform=f"{NAME} ({source})" if source else NAME,
        icon_path=_media(record.get("Icon"), files),
        launch_command=f"playnite://playnite/start/{game_id}",
        description=_string(record.get("Description")),
        developers=_names(record.get("Developers")),
        publishers=_names(record.get("Publishers")),
        genres=_names(record.get("Genres")),
        release_date=_release_date(record.get("ReleaseDate")),
        last_activity=_timestamp(record.get("LastActivity")),
        added=_timestamp(record.get("Added")),
        favorite=bool(record.get("Favorite")),
        cover=_media(record.get("CoverImage"), files),
        source=source or NAME,
    )


def _media(value: Any, files: Path | None) -> str | None:  # noqa: ANN401
    """Resolve a media reference, either a path or an ID relative to `files`."""
    if not (value := _string(value)):
        return None

    if value.startswith(("http://", "https://")):
        return value

    if Path(value).is_absolute():
        return resolve_icon(value)

    if files is None:
        return None

    return resolve_icon(Path(files, *re.split(r"[\\/]", value)))


def _string(value: Any) -> str | None:  # noqa: ANN401
    return (value.strip() or None) if isinstance(value, str) else None


def _name(value: Any) -> str | None:  # noqa: ANN401
    """Playnite writes references either as names or as `{"Name": ...}`."""
    if isinstance(value, dict):
        value = value.get("Name")

    return _string(value)


def _names(values: Any) -> tuple[str, ...]:  # noqa: ANN401
    if not isinstance(values, list):
        return ()

    return tuple(name for value in values if (name := _name(value)))


def _timestamp(value: Any) -> int | None:  # noqa: ANN401
    if isinstance(value, bool):
        return None

    if isinstance(value, int | float):
        return int(value)

    if not (value := _string(value)):
        return None

    try:
        return int(datetime.fromisoformat(value.replace("Z", "+00:00")).timestamp())
    except ValueError:
        return None


def _release_date(value: Any) -> str | None:  # noqa: ANN401
    # Exported as "2019-05-23" or as {"ReleaseDate": "2019-05-23T00:00:00"}
    if isinstance(value, dict):
        value = value.get("ReleaseDate") or value.get("Date")

    if not (value := _string(value)):
        return None

    return value.split("T", 1)[0]

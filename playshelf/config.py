# SPDX-License-Identifier: GPL-3.0-or-later
# SPDX-FileCopyrightText: Copyright 2026 Playshelf Contributors

"""
User preferences.

Stored as a flat JSON object in the user's config directory. A missing file
means defaults, unknown keys are dropped and values of the wrong type fall
back to their default so that a hand-edited file never stops a scan.
"""

import json
import logging
from dataclasses import asdict, dataclass, fields
from os import PathLike
from pathlib import Path
from typing import Any, Self

from playshelf import CONFIG_DIR
from playshelf.games import SortOrder

DEFAULT_PATH = CONFIG_DIR / "preferences.json"

SHORTCUT_SLOTS = 5

_logger = logging.getLogger(__name__)


@dataclass(slots=True)
class Preferences:
    enable_steam: bool = True
    enable_epic_games: bool = True
    enable_gog: bool = True
    enable_ubisoft: bool = True
    enable_ea_app: bool = True
    enable_playnite: bool = True
    enable_xbox: bool = True

    custom_dir1: str | None = None
    custom_dir1_name: str = ""
    custom_dir1_enable: bool = False
    custom_dir2: str | None = None
    custom_dir2_name: str = ""
    custom_dir2_enable: bool = False
    custom_dir3: str | None = None
    custom_dir3_name: str = ""
    custom_dir3_enable: bool = False
    custom_dir4: str | None = None
    custom_dir4_name: str = ""
    custom_dir4_enable: bool = False
    custom_dir5: str | None = None
    custom_dir5_name: str = ""
    custom_dir5_enable: bool = False

    sort_order: str = SortOrder.ALPHABETICAL.value
    playnite_data_path: str | None = None
    playnite_library_export: str | None = None

    @classmethod
    def from_data(cls, data: dict[str, Any]) -> Self:
        """Preferences from a JSON object, ignoring anything invalid."""
        kwargs = {}
        for field in fields(cls):
            if field.name not in data:
                continue

            value = data[field.name]
            if not isinstance(value, field.type):
                _logger.warning(
                    "Invalid value for %s: %r, using the default", field.name, value
                )
                continue

            kwargs[field.name] = value

        preferences = cls(**kwargs)

        if preferences.sort_order not in tuple(SortOrder):
            _logger.warning("Unknown sort order %r", preferences.sort_order)
            preferences.sort_order = SortOrder.ALPHABETICAL.value

        return preferences

    @classmethod
    def load(cls, path: PathLike[str] | str = DEFAULT_PATH) -> Self:
        path = Path(path)

        try:
            data = json.loads(path.read_text("utf-8"))
        except FileNotFoundError:
            return cls()
        except (OSError, ValueError) as error:
            _logger.warning("Cannot read preferences from %s: %s", path, error)
            return cls()

        if not isinstance(data, dict):
            _logger.warning("Ignoring preferences in %s: not an object", path)
            return cls()

        return cls.from_data(data)

    def save(self, path: PathLike[str] | str = DEFAULT_PATH) -> None:
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(asdict(self), indent=4), "utf-8")

    def shortcut_directories(self) -> list[tuple[str, str]]:
        """
        The `(name, path)` of each enabled shortcut directory.

        An empty name means the directory is labelled by its own name.
        """
        directories = []
        for slot in range(1, SHORTCUT_SLOTS + 1):
            path = getattr(self, f"custom_dir{slot}")
            if path and getattr(self, f"custom_dir{slot}_enable"):
                directories.append((getattr(self, f"custom_dir{slot}_name"), path))

        return directories

# SPDX-License-Identifier: GPL-3.0-or-later
# SPDX-FileCopyrightText: Copyright 2023 Geoffrey Coulaud
# SPDX-FileCopyrightText: Copyright 2022-2025 kramo
# SPDX-FileCopyrightText: Copyright 2026 Playshelf Contributors

import logging
import re
from collections.abc import Generator
from gettext import gettext as _
from pathlib import Path
from typing import Any, NamedTuple, Self

import vdf

from playshelf.games import Game
from playshelf.icons import from_display_icon, resolve_icon
from playshelf.registry import UNINSTALL_KEYS, NullRegistry, Registry, join_key

from . import PROGRAM_FILES, PROGRAM_FILES_X86
from .location import Location, LocationSubPath, RegistryCandidate

ID, NAME = "steam", _("Steam")

_DATA_PATHS = (
    PROGRAM_FILES_X86 / "Steam",
    PROGRAM_FILES / "Steam",
)
_REGISTRY_PATHS = (
    RegistryCandidate(r"HKEY_LOCAL_MACHINE\SOFTWARE\WOW6432Node\Valve\Steam", "InstallPath"),
    RegistryCandidate(r"HKEY_LOCAL_MACHINE\SOFTWARE\Valve\Steam", "InstallPath"),
)

_MANIFEST_INSTALLED_MASK = 4

# Things Steam installs that aren't games
_NAME_DENYLIST = (
    "steamworks common redistributables",
    "steam linux runtime",
    "proton",
    "directx",
    "visual c++",
    ".net framework",
    "common redistributables",
)

_logger = logging.getLogger(__name__)


class _App(NamedTuple):
    appid: str
    name: str
    stateflags: int = 0
    installdir: str = ""
    lastplayed: int | None = None

    @classmethod
    def from_manifest(cls, path: Path) -> Self:
        try:
            data = _lower_keys(vdf.loads(path.read_text("utf-8", "replace")))
            state = data["appstate"]
            appid, name = str(state["appid"]), str(state["name"])
        except (SyntaxError, ValueError, TypeError, KeyError) as e:
            raise ValueError(f"Invalid manifest {path}") from e

        if not (appid and name):
            raise ValueError(f"Invalid manifest {path}")

        return cls(
            appid=appid,
            name=name,
            stateflags=_to_int(state.get("stateflags")) or 0,
            installdir=str(state.get("installdir", "")),
            lastplayed=_to_int(state.get("lastplayed")) or None,
        )

    @property
    def installed(self) -> bool:
        return bool(self.stateflags & _MANIFEST_INSTALLED_MASK)

    @property
    def is_game(self) -> bool:
        name = self.name.lower()
        return not any(entry in name for entry in _NAME_DENYLIST)


def get_games(*, registry: Registry | None = None) -> Generator[Game]:
    """Installed Steam games."""
    registry = registry or NullRegistry()
    root = _location(registry).resolve()

    appids = set()
    for library in _library_folders(root):
        for manifest in sorted(library.glob("appmanifest_*.acf")):
            try:
                app = _App.from_manifest(manifest)
            except (ValueError, OSError):
                _logger.debug("Skipping unreadable manifest %s", manifest)
                continue

            if app.appid in appids or not app.installed or not app.is_game:
                continue

            appids.add(app.appid)
            yield Game(
                game_id=f"{ID}-{app.appid}",
                title=app.name,
                platform=NAME,
                icon_path=_find_icon(registry, library, app),
                launch_command=f"steam://launch/{app.appid}",
                uninstall_command=f"steam://uninstall/{app.appid}",
                last_activity=app.lastplayed,
                source=NAME,
            )


def _location(registry: Registry) -> Location:
    return Location(
        NAME,
        _DATA_PATHS,
        {"client": LocationSubPath("steam.exe")},
        registry_candidates=_REGISTRY_PATHS,
        registry=registry,
    )


def _library_folders(root: Path) -> list[Path]:
    """Every `steamapps` folder, starting with the one in the Steam root."""
    folders = [root / "steamapps"]

    try:
        text = (root / "steamapps" / "libraryfolders.vdf").read_text("utf-8", "replace")
        data = _lower_keys(vdf.loads(text))
    except (OSError, SyntaxError, ValueError, TypeError):
        _logger.debug("No usable libraryfolders.vdf in %s", root)
        data = {}

    entries = data.get("libraryfolders", {})
    if not isinstance(entries, dict):
        entries = {}

    for key, entry in entries.items():
        # Older files map indices straight to paths
        if isinstance(entry, dict):
            path = entry.get("path")
        elif key.isdigit():
            path = entry
        else:
            continue

        if isinstance(path, str) and path:
            folders.append(Path(path) / "steamapps")

    unique = []
    for folder in folders:
        if folder not in unique and folder.is_dir():
            unique.append(folder)

    return unique


def _find_icon(registry: Registry, library: Path, app: _App) -> str | None:
    for key in UNINSTALL_KEYS:
        value = registry.value(join_key(key, f"Steam App {app.appid}"), "DisplayIcon")
        if icon := from_display_icon(value):
            return icon

    if not app.installdir:
        return None

    return resolve_icon(_find_executable(library / "common" / app.installdir, app.name))


def _find_executable(directory: Path, name: str) -> Path | None:
    """The executable that looks the most like it belongs to the game `name`."""
    try:
        executables = sorted(
            path
            for path in directory.iterdir()
            if path.suffix.lower() == ".exe" and path.is_file()
        )
    except OSError:
        return None

    for word in re.split(r"[\s\-_]+", name.lower()):
        if len(word) <= 2:
            continue

        for executable in executables:
            if word in executable.name.lower():
                return executable

    return executables[0] if executables else None


def _lower_keys(data: Any) -> Any:  # noqa: ANN401
    if isinstance(data, dict):
        return {str(key).lower(): _lower_keys(value) for key, value in data.items()}
    return data


def _to_int(value: Any) -> int | None:  # noqa: ANN401
    try:
        return int(value)
    except (TypeError, ValueError):
        return None

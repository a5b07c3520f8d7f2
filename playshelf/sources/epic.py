# SPDX-License-Identifier: GPL-3.0-or-later
# SPDX-FileCopyrightText: Copyright 2026 Playshelf Contributors

import logging
from collections.abc import Generator
from gettext import gettext as _
from pathlib import Path
from typing import Any, NamedTuple, Self

from playshelf.games import Game
from playshelf.icons import resolve_icon
from playshelf.registry import NullRegistry, Registry
from playshelf.utils.json_repair import loads_lenient

from . import APPDATA, LOCAL_APPDATA, PROGRAM_DATA
from .location import Location

ID, NAME = "epic", _("Epic Games")

_MANIFEST_PATHS = (
    PROGRAM_DATA / "Epic" / "EpicGamesLauncher" / "Data" / "Manifests",
    LOCAL_APPDATA / "EpicGamesLauncher" / "Saved" / "Manifests",
    APPDATA / "Epic" / "EpicGamesLauncher" / "Data" / "Manifests",
)
_REGISTRY_KEY = r"HKEY_CURRENT_USER\Software\Epic Games\EOS"

_URI = "com.epicgames.launcher://apps/{namespace}%3A{item_id}%3A{app_name}"

_logger = logging.getLogger(__name__)


class _Manifest(NamedTuple):
    display_name: str
    app_name: str
    namespace: str
    item_id: str
    install_location: str
    launch_executable: str | None = None

    @classmethod
    def from_file(cls, path: Path) -> Self:
        """
        Read an `.item` manifest.

        :raises ValueError: The file isn't a manifest for an installed application
        """
        data = loads_lenient(path.read_text("utf-8", "replace"))
        if not isinstance(data, dict):
            raise ValueError(f"{path} is not an object")

        if not data.get("bIsApplication"):
            raise ValueError(f"{path} is not an application")

        for key in "CatalogItemId", "DisplayName", "InstallLocation":
            if not _text(data.get(key)):
                raise ValueError(f'{path} does not have a value "{key}"')

        return cls(
            display_name=_text(data["DisplayName"]),
            app_name=_text(data.get("AppName")) or _text(data["CatalogItemId"]),
            namespace=_text(data.get("CatalogNamespace")),
            item_id=_text(data["CatalogItemId"]),
            install_location=_text(data["InstallLocation"]),
            launch_executable=_text(data.get("LaunchExecutable")) or None,
        )

    @property
    def uri(self) -> str:
        return _URI.format(
            namespace=self.namespace, item_id=self.item_id, app_name=self.app_name
        )


def get_games(*, registry: Registry | None = None) -> Generator[Game]:
    """Installed Epic Games Store games."""
    manifests = _location(registry or NullRegistry()).resolve()

    for path in sorted(manifests.glob("*.item")):
        try:
            manifest = _Manifest.from_file(path)
        except (ValueError, OSError) as error:
            _logger.debug("Skipping %s: %s", path.name, error)
            continue

        executable = (
            Path(manifest.install_location, manifest.launch_executable)
            if manifest.launch_executable
            else None
        )

        yield Game(
            game_id=f"{ID}-{manifest.app_name}",
            title=manifest.display_name,
            platform=NAME,
            icon_path=resolve_icon(executable),
            launch_command=f"{manifest.uri}?action=launch&silent=true",
            uninstall_command=f"{manifest.uri}?action=uninstall",
            source=NAME,
        )


def _location(registry: Registry) -> Location:
    candidates = list(_MANIFEST_PATHS)

    # The launcher records its own directory, which beats any default
    if found := registry.value(_REGISTRY_KEY, "ModSdkMetadataDir"):
        candidates.insert(0, Path(found))

    return Location(NAME, candidates)


def _text(value: Any) -> str:  # noqa: ANN401
    return value.strip() if isinstance(value, str) else ""

# SPDX-License-Identifier: GPL-3.0-or-later
# SPDX-FileCopyrightText: Copyright 2026 Playshelf Contributors

import logging
import re
from collections.abc import Generator
from gettext import gettext as _
from pathlib import Path

from defusedxml import ElementTree

from playshelf.games import Game
from playshelf.icons import find_icon, from_display_icon
from playshelf.registry import NullRegistry, Registry

from .uninstall import UninstallEntry, entries

ID, NAME = "ea", _("EA app")

PUBLISHERS = ("electronic arts", "ea games", "ea sports", "ea swiss", "origin")

_INSTALLER_DIR = "__Installer"
_INSTALLER_DATA = "installerdata.xml"

# e.g. "[HKEY_LOCAL_MACHINE\SOFTWARE\EA Games\Game\Install Dir]Game.exe"
_PLACEHOLDER = re.compile(r"\[HKEY_[^\]]*\]", re.IGNORECASE)

_logger = logging.getLogger(__name__)


def get_games(*, registry: Registry | None = None) -> Generator[Game]:
    """Installed EA app games."""
    seen = set()
    for entry in entries(registry or NullRegistry()):
        if entry.name in seen or not entry.published_by(*PUBLISHERS):
            continue

        if not (executable := _find_executable(entry)):
            _logger.debug("No executable for %s", entry.display_name)
            continue

        seen.add(entry.name)
        yield Game(
            game_id=f"{ID}-{entry.name}",
            title=entry.display_name,
            platform=NAME,
            icon_path=(
                from_display_icon(entry.display_icon) or find_icon(entry.install_dir)
            ),
            launch_command=str(executable),
            uninstall_command=entry.uninstall_string,
            working_dir=str(executable.parent),
            source=NAME,
        )


def _find_executable(entry: UninstallEntry) -> Path | None:
    if (install_dir := entry.install_dir) and (
        launcher := _installer_launcher(install_dir / _INSTALLER_DIR / _INSTALLER_DATA)
    ):
        return launcher

    return entry.uninstaller


def _installer_launcher(path: Path) -> Path | None:
    """The first non-trial launcher in an `installerdata.xml` that exists."""
    if not path.is_file():
        return None

    try:
        root = ElementTree.parse(path).getroot()
    except (ElementTree.ParseError, ValueError, OSError) as error:
        _logger.debug("Cannot read %s: %s", path, error)
        return None

    for launcher in root.findall("runtime/launcher"):
        if (launcher.findtext("trial") or "").strip().lower() == "true":
            continue

        if not (file_path := _PLACEHOLDER.sub("", launcher.findtext("filePath") or "")):
            continue

        file_path = file_path.strip().lstrip("\\/")
        for base in path.parent, path.parent.parent:
            if (executable := base / file_path).is_file():
                return executable

    return None

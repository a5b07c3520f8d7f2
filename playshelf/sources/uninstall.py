# SPDX-License-Identifier: GPL-3.0-or-later
# SPDX-FileCopyrightText: Copyright 2026 Playshelf Contributors

"""Programs registered in the Windows "Apps & features" list."""

import logging
import re
from collections.abc import Generator
from pathlib import Path
from typing import NamedTuple

from playshelf.registry import UNINSTALL_KEYS, Registry, walk

_logger = logging.getLogger(__name__)

_EXECUTABLE = re.compile(r'^\s*"?([^"]+?\.exe)\b', re.IGNORECASE)


class UninstallEntry(NamedTuple):
    key: str
    name: str
    display_name: str
    publisher: str | None = None
    install_location: str | None = None
    uninstall_string: str | None = None
    display_icon: str | None = None

    def published_by(self, *publishers: str) -> bool:
        """Whether any of `publishers` is part of the entry's publisher."""
        if not self.publisher:
            return False

        publisher = self.publisher.lower()
        return any(candidate in publisher for candidate in publishers)

    @property
    def install_dir(self) -> Path | None:
        if not self.install_location:
            return None

        path = Path(self.install_location.strip().strip('"'))
        return path if path.is_dir() else None

    @property
    def uninstaller(self) -> Path | None:
        """The executable `UninstallString` runs, if it exists."""
        if not self.uninstall_string:
            return None

        if not (match := _EXECUTABLE.match(self.uninstall_string)):
            return None

        path = Path(match.group(1).strip())
        return path if path.is_file() else None


def entries(registry: Registry) -> Generator[UninstallEntry]:
    """Every entry with a display name, in both registry views."""
    for uninstall_key in UNINSTALL_KEYS:
        for key in walk(registry, uninstall_key):
            if not (display_name := registry.value(key, "DisplayName")):
                continue

            yield UninstallEntry(
                key=key,
                name=key.rsplit("\\", 1)[-1],
                display_name=display_name,
                publisher=registry.value(key, "Publisher"),
                install_location=registry.value(key, "InstallLocation"),
                uninstall_string=registry.value(key, "UninstallString"),
                display_icon=registry.value(key, "DisplayIcon"),
            )

# SPDX-License-Identifier: GPL-3.0-or-later
# SPDX-FileCopyrightText: Copyright 2026 Playshelf Contributors

"""
Read-only access to the Windows registry.

Every source goes through a `Registry` so that lookups are answered in one
place: a missing key or value is always `None` (or an empty list), never an
exception. Keys are written as full paths, e.g.
`HKEY_LOCAL_MACHINE\\SOFTWARE\\Valve\\Steam`.
"""

import logging
import sys
from collections.abc import Generator
from typing import Protocol

_logger = logging.getLogger(__name__)

UNINSTALL_KEYS = (
    r"HKEY_LOCAL_MACHINE\SOFTWARE\Microsoft\Windows\CurrentVersion\Uninstall",
    r"HKEY_LOCAL_MACHINE\SOFTWARE\WOW6432Node\Microsoft\Windows\CurrentVersion\Uninstall",
)

_HIVE_ALIASES = {
    "HKLM": "HKEY_LOCAL_MACHINE",
    "HKCU": "HKEY_CURRENT_USER",
    "HKCR": "HKEY_CLASSES_ROOT",
    "HKU": "HKEY_USERS",
}


class Registry(Protocol):
    """Something that can answer registry lookups."""

    def value(self, key: str, name: str) -> str | None:
        """The value `name` of `key` as a string, if any."""
        ...

    def subkeys(self, key: str) -> list[str]:
        """The names of the direct subkeys of `key`."""
        ...


def split_key(key: str) -> tuple[str, str]:
    """Split a full key path into its hive name and sub path."""
    hive, _sep, path = key.strip("\\").partition("\\")
    return _HIVE_ALIASES.get(hive.upper(), hive.upper()), path


def join_key(*parts: str) -> str:
    return "\\".join(part.strip("\\") for part in parts)


def walk(registry: Registry, key: str) -> Generator[str]:
    """The full paths of the direct subkeys of `key`."""
    for name in registry.subkeys(key):
        yield join_key(key, name)


class WindowsRegistry:
    """A `Registry` backed by `winreg`."""

    def __init__(self) -> None:
        import winreg  # noqa: PLC0415

        self._winreg = winreg

    def _open(self, key: str):
        hive_name, path = split_key(key)
        hive = getattr(self._winreg, hive_name)
        return self._winreg.OpenKey(hive, path, 0, self._winreg.KEY_READ)

    def value(self, key: str, name: str) -> str | None:
        try:
            with self._open(key) as handle:
                data, _type = self._winreg.QueryValueEx(handle, name)
        except (OSError, AttributeError):
            return None

        if data is None:
            return None

        return str(data).strip() or None

    def subkeys(self, key: str) -> list[str]:
        names = []
        try:
            with self._open(key) as handle:
                count = self._winreg.QueryInfoKey(handle)[0]
                for index in range(count):
                    try:
                        names.append(self._winreg.EnumKey(handle, index))
                    except OSError:
                        continue
        except (OSError, AttributeError):
            _logger.debug("Registry key not found: %s", key)

        return names


class NullRegistry:
    """A `Registry` for systems without one."""

    def value(self, key: str, name: str) -> str | None:
        return None

    def subkeys(self, key: str) -> list[str]:
        return []


def default_registry() -> Registry:
    """The registry of the running system."""
    return WindowsRegistry() if sys.platform.startswith("win32") else NullRegistry()

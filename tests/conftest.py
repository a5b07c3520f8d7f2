# SPDX-License-Identifier: GPL-3.0-or-later
# SPDX-FileCopyrightText: Copyright 2026 Playshelf Contributors

from collections.abc import Mapping
from pathlib import Path

import pytest

from playshelf.cache import ResultCache
from playshelf.registry import split_key


def _normalize(key: str) -> str:
    hive, path = split_key(key)
    return f"{hive}\\{path}".lower()


class FakeRegistry:
    """A registry answering from a mapping of full key paths to their values."""

    def __init__(self, keys: Mapping[str, Mapping[str, str]] | None = None) -> None:
        self.keys = {
            _normalize(key): (key, dict(values)) for key, values in (keys or {}).items()
        }

    def value(self, key: str, name: str) -> str | None:
        _key, values = self.keys.get(_normalize(key), (key, {}))
        return values.get(name)

    def subkeys(self, key: str) -> list[str]:
        parent = _normalize(key) + "\\"
        names = []
        for normalized, (original, _values) in self.keys.items():
            if not normalized.startswith(parent):
                continue

            # Only direct children
            name = original.split("\\")[-1]
            if "\\" not in normalized.removeprefix(parent) and name not in names:
                names.append(name)

        return names


@pytest.fixture
def registry() -> FakeRegistry:
    return FakeRegistry()


@pytest.fixture
def cache(tmp_path: Path) -> ResultCache:
    return ResultCache(tmp_path / "cache" / "cache.json")

# SPDX-License-Identifier: GPL-3.0-or-later
# SPDX-FileCopyrightText: Copyright 2026 Playshelf Contributors

"""A small persistent key/value store for results that are expensive to compute."""

import json
import logging
import os
import tempfile
import threading
from os import PathLike
from pathlib import Path
from typing import Any

from playshelf import CACHE_DIR

DEFAULT_PATH = CACHE_DIR / "cache.json"

_logger = logging.getLogger(__name__)


class ResultCache:
    """
    String values stored under string keys in a single JSON file.

    The file is read on every access so that separate processes
    (e.g. `xbox-setup` and `list`) see each other's writes.
    Writes replace the file atomically.
    """

    path: Path

    def __init__(self, path: PathLike[str] | str = DEFAULT_PATH) -> None:
        self.path = Path(path)
        self._lock = threading.Lock()

    def get(self, key: str) -> str | None:
        with self._lock:
            value = self._read().get(key)

        return value if isinstance(value, str) else None

    def get_json(self, key: str) -> Any:  # noqa: ANN401
        """The value of `key` decoded as JSON, `None` if unset or invalid."""
        if (value := self.get(key)) is None:
            return None

        try:
            return json.loads(value)
        except json.JSONDecodeError:
            _logger.warning("Invalid JSON cached under %s", key)
            return None

    def set(self, key: str, value: str) -> None:
        with self._lock:
            data = self._read()
            data[key] = value
            self._write(data)

    def set_json(self, key: str, value: Any) -> None:  # noqa: ANN401
        self.set(key, json.dumps(value))

    def remove(self, key: str) -> None:
        with self._lock:
            data = self._read()
            if data.pop(key, None) is not None:
                self._write(data)

    def clear(self) -> None:
        with self._lock:
            self._write({})

    def __contains__(self, key: str) -> bool:
        return self.get(key) is not None

    def _read(self) -> dict[str, Any]:
        try:
            with self.path.open(encoding="utf-8") as f:
                data = json.load(f)
        except FileNotFoundError:
            return {}
        except (OSError, ValueError) as error:
            _logger.warning("Ignoring unreadable cache %s: %s", self.path, error)
            return {}

        return data if isinstance(data, dict) else {}

    def _write(self, data: dict[str, Any]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)

        fd, tmp = tempfile.mkstemp(dir=self.path.parent, prefix=f".{self.path.name}.")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=4, sort_keys=True)
            os.replace(tmp, self.path)
        except BaseException:
            Path(tmp).unlink(missing_ok=True)
            raise

# SPDX-License-Identifier: GPL-3.0-or-later
# SPDX-FileCopyrightText: Copyright 2023 Geoffrey Coulaud
# SPDX-FileCopyrightText: Copyright 2026 Playshelf Contributors

import lzma
import re
from io import TextIOWrapper
from logging import StreamHandler
from os import PathLike
from pathlib import Path

# playshelf.log, playshelf.1.log.xz, playshelf.2.log.xz...
_SESSION_NUMBER = re.compile(r"^(?P<stem>[^.]+)(?:\.(?P<number>\d+))?(?P<suffix>\..*)$")


class SessionFileHandler(StreamHandler):
    """
    A logging handler that starts a new file for every session.

    The logs of previous sessions are compressed with xz and numbered,
    only the `backup_count` most recent ones are kept.
    """

    filename: Path
    backup_count: int
    log_file: TextIOWrapper | None = None

    def __init__(self, filename: PathLike[str] | str, backup_count: int = 2) -> None:
        self.filename = Path(filename)
        self.backup_count = backup_count

        self.filename.parent.mkdir(parents=True, exist_ok=True)
        self.rotate()

        self.log_file = self.filename.open("w", encoding="utf-8")
        super().__init__(self.log_file)

    @staticmethod
    def session_number(path: Path) -> int:
        """How many sessions ago `path` was written, 0 for the current one"""
        match = _SESSION_NUMBER.match(path.name)
        return int(match["number"]) if match and match["number"] else 0

    def logfiles(self) -> list[Path]:
        """The log files, oldest first"""
        stem = self.filename.name.split(".", 1)[0]
        return sorted(
            (
                path
                for path in self.filename.parent.iterdir()
                if path.is_file() and path.name.split(".", 1)[0] == stem
            ),
            key=self.session_number,
            reverse=True,
        )

    def rotate(self) -> None:
        """Compress and renumber the logs of previous sessions"""
        for path in self.logfiles():
            self._rotate_file(path)

    def _rotate_file(self, path: Path) -> None:
        if path.suffix != ".xz":
            try:
                text = path.read_text("utf-8")
            except UnicodeDecodeError:
                path.unlink()
                return

            compressed = path.with_name(path.name + ".xz")
            with lzma.open(compressed, "wt", encoding="utf-8") as f:
                f.write(text)

            path.unlink()
            path = compressed

        number = self.session_number(path) + 1
        if number > self.backup_count:
            path.unlink()
            return

        match = _SESSION_NUMBER.match(path.name)
        if not match:
            path.unlink()
            return

        path.rename(path.with_name(f"{match['stem']}.{number}{match['suffix']}"))

    def close(self) -> None:
        if self.log_file:
            self.log_file.close()
        super().close()

# SPDX-License-Identifier: GPL-3.0-or-later
# SPDX-FileCopyrightText: Copyright 2025 kramo
# SPDX-FileCopyrightText: Copyright 2026 Playshelf Contributors

import os
from collections.abc import Generator
from enum import StrEnum
from pathlib import Path
from typing import Any, Final, Protocol

from playshelf.games import Game

PROGRAM_FILES = Path(os.getenv("PROGRAMFILES", r"C:\Program Files"))
PROGRAM_FILES_X86 = Path(os.getenv("PROGRAMFILES(X86)", r"C:\Program Files (x86)"))
PROGRAM_DATA = Path(os.getenv("PROGRAMDATA", r"C:\ProgramData"))
APPDATA = Path(os.getenv("APPDATA", Path.home() / "AppData" / "Roaming"))
LOCAL_APPDATA = Path(os.getenv("LOCALAPPDATA", Path.home() / "AppData" / "Local"))
DOCUMENTS = Path.home() / "Documents"


class Platform(StrEnum):
    """Every platform games can be found on."""

    STEAM = "steam"
    EPIC = "epic"
    GOG = "gog"
    EA = "ea"
    UBISOFT = "ubisoft"
    PLAYNITE = "playnite"
    XBOX = "xbox"
    SHORTCUTS = "shortcuts"


class Source(Protocol):
    """A source of installed games."""

    ID: Final[str]
    NAME: Final[str]

    @staticmethod
    def get_games(**kwargs: Any) -> Generator[Game]:  # noqa: ANN401
        """Installed games."""
        ...

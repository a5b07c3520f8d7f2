# SPDX-License-Identifier: GPL-3.0-or-later
# SPDX-FileCopyrightText: Copyright 2022-2025 kramo
# SPDX-FileCopyrightText: Copyright 2026 Playshelf Contributors

"""
Launching and uninstalling games.

Commands are opaque to everything but this module: they are handed to the
shell's generic "open", so a command can be a URI, a path or a command line.
"""

import logging
import os
import re
import subprocess
import sys
from gettext import gettext as _
from pathlib import Path
from shlex import quote

from playshelf.errors import Notification
from playshelf.games import Game
from playshelf.sources import playnite, shortcuts

OPEN = (
    "open"
    if sys.platform.startswith("darwin")
    else 'start ""'
    if sys.platform.startswith("win32")
    else "xdg-open"
)

DEFAULT_TIMEOUT = 15

_URI = re.compile(r"^[a-zA-Z][a-zA-Z0-9+.\-]+:")

_logger = logging.getLogger(__name__)


def shell_command(command: str) -> str:
    """The shell command line that opens `command`."""
    command = command.strip()

    # Already a command line with a quoted program
    if command.startswith('"'):
        target = command
    elif _URI.match(command) or " " not in command or _exists(command):
        target = _quote(command)
    else:
        target = command

    return f"{OPEN} {target}"


def open_command(
    command: str,
    working_dir: os.PathLike[str] | str | None = None,
    timeout: float = DEFAULT_TIMEOUT,
) -> None:
    """
    Open `command` with the shell.

    :raises OSError: The shell couldn't be started
    :raises subprocess.SubprocessError: The shell failed or timed out
    """
    args = shell_command(command)
    cwd = Path(working_dir) if working_dir else Path.home()

    _logger.info("Opening `%s` in %s", args, cwd)
    subprocess.run(  # noqa: S602
        args,
        cwd=cwd,
        shell=True,
        check=True,
        timeout=timeout,
        start_new_session=True,
        creationflags=subprocess.CREATE_NEW_PROCESS_GROUP if os.name == "nt" else 0,
    )


def launch(game: Game, timeout: float = DEFAULT_TIMEOUT) -> Notification:
    """Launch `game`. The notification asks to dismiss the UI on success."""
    try:
        open_command(game.launch_command, game.working_dir, timeout)
    except (OSError, subprocess.SubprocessError) as error:
        _logger.error("Failed to launch %s: %s", game.game_id, error)
        return Notification.failure(
            _("Launch failed"), _("Failed to launch {}").format(game.title)
        )

    return Notification.success(
        _("Game launched"), _("Launched {}").format(game.title), dismiss=True
    )


def uninstall(game: Game, timeout: float = DEFAULT_TIMEOUT) -> Notification:
    """Start uninstalling `game`, if it can be uninstalled at all."""
    if not game.uninstall_command:
        return Notification.info(
            _("Uninstall not available"),
            _("{} cannot be uninstalled from here").format(game.title),
        )

    try:
        if game.uninstall_command.startswith(shortcuts.DELETE_PREFIX):
            path = Path(game.uninstall_command.removeprefix(shortcuts.DELETE_PREFIX))
            _logger.info("Deleting %s", path)
            path.unlink()
        else:
            open_command(game.uninstall_command, game.working_dir, timeout)
    except (OSError, subprocess.SubprocessError) as error:
        _logger.error("Failed to uninstall %s: %s", game.game_id, error)
        return Notification.failure(
            _("Uninstall failed"), _("Failed to uninstall {}").format(game.title)
        )

    return Notification.success(
        _("Uninstall started"), _("Started uninstall for {}").format(game.title)
    )


def open_in_playnite(game: Game, timeout: float = DEFAULT_TIMEOUT) -> Notification:
    """Show a game from the Playnite library in Playnite itself."""
    prefix = f"{playnite.ID}-"
    if not game.game_id.startswith(prefix):
        return Notification.info(
            _("Not in Playnite"), _("{} is not a Playnite game").format(game.title)
        )

    uri = f"playnite://playnite/showgame/{game.game_id.removeprefix(prefix)}"
    try:
        open_command(uri, timeout=timeout)
    except (OSError, subprocess.SubprocessError) as error:
        _logger.error("Failed to open %s in Playnite: %s", game.game_id, error)
        return Notification.failure(
            _("Playnite failed"), _("Failed to open {} in Playnite").format(game.title)
        )

    return Notification.success(
        _("Opened in Playnite"), _("Showing {} in Playnite").format(game.title)
    )


def _quote(target: str) -> str:
    if sys.platform.startswith("win32"):
        return f'"{target}"'

    return quote(target)


def _exists(path: str) -> bool:
    try:
        return Path(path).exists()
    except (OSError, ValueError):
        return False

# SPDX-License-Identifier: GPL-3.0-or-later
# SPDX-FileCopyrightText: Copyright 2026 Playshelf Contributors

import logging
import subprocess
import time
from collections.abc import Iterable
from os import PathLike
from pathlib import Path

_logger = logging.getLogger(__name__)

PLAYNITE_PROCESSES = "Playnite.DesktopApp.exe", "Playnite.FullscreenApp.exe"
PLAYNITE_EXECUTABLE = "Playnite.DesktopApp.exe"

DEFAULT_TIMEOUT = 10


def terminate_processes(
    names: Iterable[str], timeout: float = DEFAULT_TIMEOUT
) -> list[str]:
    """
    Forcibly stop every process running one of the executables in `names`.

    Returns the names that were running.
    """
    terminated = []
    for name in names:
        try:
            subprocess.run(
                ("taskkill", "/F", "/IM", name),
                capture_output=True,
                timeout=timeout,
                check=True,
            )
        except subprocess.CalledProcessError:
            _logger.debug("%s was not running", name)
        except (OSError, subprocess.SubprocessError) as error:
            _logger.warning("Cannot stop %s: %s", name, error)
        else:
            _logger.info("Stopped %s", name)
            terminated.append(name)

    return terminated


def restart_playnite(
    data_dir: PathLike[str] | str,
    timeout: float = DEFAULT_TIMEOUT,
    grace_period: float = 2,
) -> None:
    """
    Restart Playnite minimized, so that it writes a fresh library export.

    :raises FileNotFoundError: Playnite is not installed in `data_dir`
    :raises subprocess.SubprocessError: Playnite couldn't be started
    """
    executable = Path(data_dir) / PLAYNITE_EXECUTABLE
    if not executable.is_file():
        raise FileNotFoundError(f"Playnite executable not found at {executable}")

    if terminate_processes(PLAYNITE_PROCESSES, timeout):
        # Let Playnite release its database before starting it again
        time.sleep(grace_period)

    escaped = str(executable).replace("'", "''")
    script = f"Start-Process '{escaped}' -WindowStyle Minimized"
    _logger.info("Starting %s", executable)
    subprocess.run(
        ("powershell", "-NoProfile", "-Command", script),
        capture_output=True,
        timeout=timeout,
        check=True,
    )

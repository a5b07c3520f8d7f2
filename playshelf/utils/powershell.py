# SPDX-License-Identifier: GPL-3.0-or-later
# SPDX-FileCopyrightText: Copyright 2026 Playshelf Contributors

import json
import logging
import subprocess
from typing import Any

_logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30


def run_powershell_json(script: str, timeout: float = DEFAULT_TIMEOUT) -> list[Any]:
    """
    Run a PowerShell `script` that ends in `ConvertTo-Json`.

    `ConvertTo-Json` writes a bare object for a single result,
    so the output is always normalized to a list.
    Any failure is logged and results in an empty list.
    """
    try:
        process = subprocess.run(
            ("powershell", "-NoProfile", "-NonInteractive", "-Command", script),
            capture_output=True,
            text=True,
            encoding="utf-8",
            errors="replace",
            timeout=timeout,
            check=True,
        )
    except (OSError, subprocess.SubprocessError) as error:
        _logger.warning("PowerShell query failed: %s", error)
        return []

    if not (output := process.stdout.strip()):
        return []

    try:
        data = json.loads(output)
    except json.JSONDecodeError as error:
        _logger.warning("PowerShell returned invalid JSON: %s", error)
        return []

    return data if isinstance(data, list) else [data]

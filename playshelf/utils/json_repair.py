# SPDX-License-Identifier: GPL-3.0-or-later
# SPDX-FileCopyrightText: Copyright 2026 Playshelf Contributors

"""
Best-effort parsing of JSON written by sloppy tools.

The salvage steps are heuristics, not a grammar: a document they can't fix
raises `ValueError` and should be skipped by the caller.
"""

import json
import re
from typing import Any

_TRAILING_COMMA = re.compile(r",(\s*[}\]])")
_DUPLICATE_COMMAS = re.compile(r",(\s*,)+")
_FINAL_COMMA = re.compile(r",\s*$")


def repair(text: str) -> str:
    """Apply the salvage steps to `text`."""
    fixed = text.strip().lstrip("\ufeff")

    fixed = _DUPLICATE_COMMAS.sub(",", fixed)
    fixed = _TRAILING_COMMA.sub(r"\1", fixed)
    fixed = _FINAL_COMMA.sub("", fixed)

    # Anything outside of the outermost object or array is noise
    brace, bracket = fixed.find("{"), fixed.find("[")
    if bracket != -1 and (brace == -1 or bracket < brace):
        start, end = bracket, fixed.rfind("]")
    else:
        start, end = brace, fixed.rfind("}")

    if start == -1 or end < start:
        return fixed

    return fixed[start : end + 1]


def loads_lenient(text: str) -> Any:  # noqa: ANN401
    """Parse `text` as JSON, repairing it first if needed.

    :raises ValueError: `text` is beyond repair
    """
    try:
        return json.loads(text)
    except json.JSONDecodeError:
        pass

    return json.loads(repair(text))

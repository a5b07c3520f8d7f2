# SPDX-License-Identifier: GPL-3.0-or-later
# SPDX-FileCopyrightText: Copyright 2026 Playshelf Contributors

from playshelf.icons import find_icon, from_display_icon, resolve_icon


def test_resolve_icon(tmp_path):
    icon = tmp_path / "game.ico"
    icon.touch()

    assert resolve_icon(icon) == str(icon)
    assert resolve_icon(tmp_path / "missing.ico") is None
    assert resolve_icon(None) is None
    assert resolve_icon("") is None


def test_resolve_icon_never_raises():
    assert resolve_icon("bad\0path") is None


def test_display_icon_index_is_stripped(tmp_path):
    exe = tmp_path / "game.exe"
    exe.touch()

    assert from_display_icon(f"{exe},0") == str(exe)
    assert from_display_icon(f'"{exe}",-101') == str(exe)
    assert from_display_icon(str(exe)) == str(exe)
    assert from_display_icon(f"{tmp_path / 'other.exe'},0") is None
    assert from_display_icon(None) is None


def test_find_icon_priority(tmp_path):
    (tmp_path / "Assets").mkdir()
    (tmp_path / "Assets" / "first.png").touch()
    (tmp_path / "second.png").touch()

    assert find_icon(tmp_path, ("first.png", "second.png"), ("", "Assets")) == str(
        tmp_path / "Assets" / "first.png"
    )
    assert find_icon(tmp_path, ("second.png", "first.png"), ("", "Assets")) == str(
        tmp_path / "second.png"
    )


def test_find_icon_in_missing_directory(tmp_path):
    assert find_icon(tmp_path / "missing") is None
    assert find_icon(None) is None

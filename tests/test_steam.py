# SPDX-License-Identifier: GPL-3.0-or-later
# SPDX-FileCopyrightText: Copyright 2026 Playshelf Contributors

from pathlib import Path

import pytest
from conftest import FakeRegistry

from playshelf.registry import UNINSTALL_KEYS, join_key
from playshelf.sources import steam
from playshelf.sources.location import UnresolvableLocationError


def _manifest(library: Path, appid: int, name: str, flags: int, **extra: str) -> None:
    fields = {
        "appid": str(appid),
        "name": name,
        "StateFlags": str(flags),
        "installdir": name,
        **extra,
    }
    body = "\n".join(f'\t"{key}"\t\t"{value}"' for key, value in fields.items())
    (library / f"appmanifest_{appid}.acf").write_text(
        f'"AppState"\n{{\n{body}\n}}\n', "utf-8"
    )


@pytest.fixture
def root(tmp_path, monkeypatch):
    root = tmp_path / "Steam"
    (root / "steamapps").mkdir(parents=True)
    (root / "steam.exe").touch()
    monkeypatch.setattr(steam, "_DATA_PATHS", (root,))
    return root


def _games(registry=None):
    return {game.game_id: game for game in steam.get_games(registry=registry)}


def test_installed_flag_boundary(root):
    apps = root / "steamapps"
    _manifest(apps, 10, "Exactly Installed", 4)
    _manifest(apps, 20, "Just Below", 3)
    _manifest(apps, 30, "Updating", 6)
    _manifest(apps, 40, "Other Bits", 1026)

    assert set(_games()) == {"steam-10", "steam-30"}


def test_game_record(root):
    _manifest(root / "steamapps", 620, "Portal 2", 4, LastPlayed="1700000000")

    game = _games()["steam-620"]

    assert game.title == "Portal 2"
    assert game.platform == "Steam"
    assert game.launch_command == "steam://launch/620"
    assert game.uninstall_command == "steam://uninstall/620"
    assert game.last_activity == 1700000000


def test_redistributables_are_skipped(root):
    apps = root / "steamapps"
    _manifest(apps, 228980, "Steamworks Common Redistributables", 4)
    _manifest(apps, 1493710, "Proton Experimental", 4)
    _manifest(apps, 70, "Half-Life", 4)

    assert set(_games()) == {"steam-70"}


def test_library_folders(root, tmp_path):
    library = tmp_path / "Library"
    (library / "steamapps").mkdir(parents=True)
    _manifest(library / "steamapps", 70, "Half-Life", 4)
    _manifest(root / "steamapps", 70, "Half-Life", 4)
    _manifest(root / "steamapps", 220, "Half-Life 2", 4)

    (root / "steamapps" / "libraryfolders.vdf").write_text(
        '"libraryfolders"\n{\n'
        f'\t"0"\n\t{{\n\t\t"path"\t\t"{root}"\n\t}}\n'
        f'\t"1"\n\t{{\n\t\t"path"\t\t"{library}"\n\t}}\n'
        f'\t"2"\n\t{{\n\t\t"path"\t\t"{tmp_path / "Unplugged"}"\n\t}}\n'
        "}\n",
        "utf-8",
    )

    games = list(steam.get_games())

    assert sorted(game.game_id for game in games) == ["steam-220", "steam-70"]


def test_unreadable_manifest_is_skipped(root):
    (root / "steamapps" / "appmanifest_1.acf").write_text('"AppState"\n{\n', "utf-8")
    _manifest(root / "steamapps", 70, "Half-Life", 4)

    assert set(_games()) == {"steam-70"}


def test_icon_from_uninstall_entry(root, tmp_path):
    icon = tmp_path / "portal2.exe"
    icon.touch()
    _manifest(root / "steamapps", 620, "Portal 2", 4)

    registry = FakeRegistry({
        join_key(UNINSTALL_KEYS[0], "Steam App 620"): {"DisplayIcon": f"{icon},0"},
    })

    assert _games(registry)["steam-620"].icon_path == str(icon)


def test_icon_from_executable(root):
    _manifest(root / "steamapps", 620, "Portal 2", 4)
    game_dir = root / "steamapps" / "common" / "Portal 2"
    game_dir.mkdir(parents=True)
    (game_dir / "launcher.exe").touch()
    (game_dir / "portal2.exe").touch()

    assert _games()["steam-620"].icon_path == str(game_dir / "portal2.exe")


def test_root_from_registry(tmp_path, monkeypatch):
    monkeypatch.setattr(steam, "_DATA_PATHS", (tmp_path / "missing",))
    root = tmp_path / "Elsewhere"
    (root / "steamapps").mkdir(parents=True)
    (root / "steam.exe").touch()
    _manifest(root / "steamapps", 70, "Half-Life", 4)

    registry = FakeRegistry({
        r"HKEY_LOCAL_MACHINE\SOFTWARE\WOW6432Node\Valve\Steam": {
            "InstallPath": str(root)
        },
    })

    assert set(_games(registry)) == {"steam-70"}


def test_not_installed(tmp_path, monkeypatch):
    monkeypatch.setattr(steam, "_DATA_PATHS", (tmp_path,))

    with pytest.raises(UnresolvableLocationError) as info:
        list(steam.get_games())

    assert info.value.optional

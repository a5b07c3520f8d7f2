# SPDX-License-Identifier: GPL-3.0-or-later
# SPDX-FileCopyrightText: Copyright 2026 Playshelf Contributors

import pytest
from conftest import FakeRegistry

from playshelf.registry import UNINSTALL_KEYS, join_key
from playshelf.sources import gog

_GAMES = r"HKEY_LOCAL_MACHINE\SOFTWARE\GOG.com\Games"
_GAMES_WOW = r"HKEY_LOCAL_MACHINE\SOFTWARE\WOW6432Node\GOG.com\Games"


@pytest.fixture
def client(tmp_path, monkeypatch):
    galaxy = tmp_path / "GOG Galaxy"
    galaxy.mkdir()
    (galaxy / "GalaxyClient.exe").touch()
    monkeypatch.setattr(gog, "_CLIENT_PATHS", (tmp_path / "missing", galaxy))
    return galaxy / "GalaxyClient.exe"


@pytest.fixture
def game_dir(tmp_path):
    path = tmp_path / "The Witcher 3"
    path.mkdir()
    return path


def test_game_record(client, game_dir):
    (game_dir / "goggame-1207664643.ico").touch()
    (game_dir / "goggame.ico").touch()

    registry = FakeRegistry({
        join_key(_GAMES, "1207664643"): {
            "gameID": "1207664643",
            "gameName": "The Witcher 3: Wild Hunt",
            "path": str(game_dir),
            "buildId": "123",
        },
    })

    (game,) = gog.get_games(registry=registry)

    assert game.game_id == "gog-1207664643"
    assert game.title == "The Witcher 3: Wild Hunt"
    assert game.platform == "GOG Galaxy"
    assert game.icon_path == str(game_dir / "goggame-1207664643.ico")
    assert game.launch_command == (
        f'"{client}" /command=runGame /gameId=1207664643 /path="{game_dir}"'
    )
    assert game.uninstall_command == "goggalaxy://openGameView/1207664643"


def test_conventional_icon(client, game_dir):
    (game_dir / "icon.png").touch()

    registry = FakeRegistry({
        join_key(_GAMES_WOW, "1"): {"gameName": "Game", "path": str(game_dir)},
    })

    (game,) = gog.get_games(registry=registry)

    assert game.game_id == "gog-1"
    assert game.icon_path == str(game_dir / "icon.png")


def test_entries_need_a_name_and_an_existing_path(client, game_dir, tmp_path):
    registry = FakeRegistry({
        join_key(_GAMES, "1"): {"gameName": "No Path"},
        join_key(_GAMES, "2"): {"path": str(game_dir)},
        join_key(_GAMES, "3"): {"gameName": "Gone", "path": str(tmp_path / "gone")},
        join_key(_GAMES, "4"): {"gameName": "Present", "path": str(game_dir)},
    })

    assert [game.game_id for game in gog.get_games(registry=registry)] == ["gog-4"]


def test_both_registry_views_are_deduplicated(client, game_dir):
    entry = {"gameID": "1", "gameName": "Game", "path": str(game_dir)}
    registry = FakeRegistry({
        join_key(_GAMES, "1"): entry,
        join_key(_GAMES_WOW, "1"): entry,
    })

    assert len(list(gog.get_games(registry=registry))) == 1


def test_client_from_uninstall_entry(tmp_path, monkeypatch, game_dir):
    monkeypatch.setattr(gog, "_CLIENT_PATHS", ())
    galaxy = tmp_path / "Custom Galaxy"
    galaxy.mkdir()
    (galaxy / "GalaxyClient.exe").touch()

    registry = FakeRegistry({
        join_key(UNINSTALL_KEYS[1], "{7258BA11-600C-430E-A759-27E2C691A335}_is1"): {
            "DisplayName": "GOG GALAXY",
            "InstallLocation": str(galaxy),
        },
        join_key(_GAMES, "1"): {"gameName": "Game", "path": str(game_dir)},
    })

    (game,) = gog.get_games(registry=registry)

    assert game.launch_command.startswith(f'"{galaxy / "GalaxyClient.exe"}"')


def test_no_client_means_no_games(monkeypatch, game_dir):
    monkeypatch.setattr(gog, "_CLIENT_PATHS", ())
    registry = FakeRegistry({
        join_key(_GAMES, "1"): {"gameName": "Game", "path": str(game_dir)},
    })

    assert list(gog.get_games(registry=registry)) == []


def test_titles_carry_what_launching_needs(game_dir):
    registry = FakeRegistry({
        join_key(_GAMES, "1207664643"): {
            "gameName": "The Witcher 3",
            "path": str(game_dir),
            "buildId": "123",
        },
    })

    (title,) = gog._titles(registry)

    assert title._asdict() == {
        "game_id": "1207664643",
        "name": "The Witcher 3",
        "path": game_dir,
    }

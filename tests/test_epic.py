# SPDX-License-Identifier: GPL-3.0-or-later
# SPDX-FileCopyrightText: Copyright 2026 Playshelf Contributors

import json

import pytest
from conftest import FakeRegistry

from playshelf.sources import epic

_MANIFEST = {
    "bIsApplication": True,
    "AppName": "Fortnite",
    "DisplayName": "Fortnite",
    "CatalogNamespace": "fn",
    "CatalogItemId": "4fe75bbc5a674f4f9b356b5c90567da5",
    "LaunchExecutable": "FortniteLauncher.exe",
}


@pytest.fixture
def manifests(tmp_path, monkeypatch):
    manifests = tmp_path / "Manifests"
    manifests.mkdir()
    monkeypatch.setattr(epic, "_MANIFEST_PATHS", (manifests,))
    return manifests


def _write(manifests, name, data):
    (manifests / f"{name}.item").write_text(json.dumps(data), "utf-8")


def test_game_record(manifests, tmp_path):
    install = tmp_path / "Fortnite"
    install.mkdir()
    (install / "FortniteLauncher.exe").touch()
    _write(manifests, "fortnite", {**_MANIFEST, "InstallLocation": str(install)})

    (game,) = epic.get_games()

    uri = "com.epicgames.launcher://apps/fn%3A4fe75bbc5a674f4f9b356b5c90567da5%3AFortnite"
    assert game.game_id == "epic-Fortnite"
    assert game.title == "Fortnite"
    assert game.platform == "Epic Games"
    assert game.launch_command == f"{uri}?action=launch&silent=true"
    assert game.uninstall_command == f"{uri}?action=uninstall"
    assert game.icon_path == str(install / "FortniteLauncher.exe")


def test_trailing_comma_is_repaired(manifests):
    text = json.dumps({**_MANIFEST, "InstallLocation": "C:/Games/Fortnite"})
    (manifests / "repaired.item").write_text(text[:-1] + ",}", "utf-8")

    assert [game.game_id for game in epic.get_games()] == ["epic-Fortnite"]


def test_truncated_manifest_is_skipped(manifests):
    (manifests / "a.item").write_text('{"bIsApplication": true, "AppName": "Tr', "utf-8")
    _write(
        manifests,
        "b",
        {**_MANIFEST, "AppName": "Other", "InstallLocation": "C:/Games/Other"},
    )

    assert [game.game_id for game in epic.get_games()] == ["epic-Other"]


@pytest.mark.parametrize(
    "changes",
    (
        {"bIsApplication": False},
        {"CatalogItemId": ""},
        {"DisplayName": None},
        {"InstallLocation": ""},
    ),
)
def test_incomplete_manifests_are_skipped(manifests, changes):
    _write(manifests, "game", {**_MANIFEST, "InstallLocation": "C:/Games", **changes})

    assert list(epic.get_games()) == []


def test_registry_directory_comes_first(manifests, tmp_path):
    _write(manifests, "default", {**_MANIFEST, "InstallLocation": "C:/Games"})

    registered = tmp_path / "Registered"
    registered.mkdir()
    _write(
        registered,
        "registered",
        {**_MANIFEST, "AppName": "Registered", "InstallLocation": "C:/Games"},
    )

    registry = FakeRegistry({
        r"HKEY_CURRENT_USER\Software\Epic Games\EOS": {
            "ModSdkMetadataDir": str(registered)
        },
    })

    assert [game.game_id for game in epic.get_games(registry=registry)] == [
        "epic-Registered"
    ]

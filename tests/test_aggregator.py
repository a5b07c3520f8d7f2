# SPDX-License-Identifier: GPL-3.0-or-later
# SPDX-FileCopyrightText: Copyright 2026 Playshelf Contributors

import threading

import pytest

from playshelf.aggregator import Aggregator
from playshelf.errors import FriendlyError, NotificationStyle
from playshelf.games import Game
from playshelf.sources.location import UnresolvableLocationError


class FakeScanner:
    def __init__(self, name, titles=(), error=None, barrier=None):
        self.name = name
        self.titles = titles
        self.error = error
        self.barrier = barrier

    def synchronize(self):
        if self.barrier:
            self.barrier.wait(timeout=5)

        if self.error:
            raise self.error

        return [
            Game(
                game_id=f"{self.name.lower()}-{index}",
                title=title,
                platform=self.name,
                launch_command=f"{self.name.lower()}://{index}",
            )
            for index, title in enumerate(self.titles)
        ]


def test_games_are_merged_and_sorted():
    aggregator = Aggregator([
        FakeScanner("Steam", ("Portal 2", "Half-Life")),
        FakeScanner("GOG", ("Celeste",)),
    ])

    games = aggregator.run()

    assert [game.title for game in games] == ["Celeste", "Half-Life", "Portal 2"]
    assert len({game.game_id for game in games}) == 3
    assert aggregator.failures == []


def test_failing_scanner_is_isolated():
    aggregator = Aggregator([
        FakeScanner("Steam", ("Portal 2",)),
        FakeScanner("Epic Games", error=ValueError("corrupt")),
        FakeScanner("GOG", ("Celeste",)),
    ])

    games = aggregator.run()

    assert [game.title for game in games] == ["Celeste", "Portal 2"]

    (failure,) = aggregator.failures
    assert failure.platform == "Epic Games"
    assert failure.error.title == "Epic Games detection failed"

    (error,) = aggregator.collect_errors()
    assert isinstance(error, FriendlyError)


def test_not_installed_is_skipped_silently():
    aggregator = Aggregator([
        FakeScanner("Steam", error=UnresolvableLocationError("Steam")),
        FakeScanner("GOG", ("Celeste",)),
    ])

    assert len(aggregator.run()) == 1
    assert aggregator.failures == []


def test_required_location_is_a_failure():
    aggregator = Aggregator([
        FakeScanner("Playnite", error=UnresolvableLocationError("Playnite", False)),
    ])

    assert aggregator.run() == []
    assert [outcome.platform for outcome in aggregator.failures] == ["Playnite"]


def test_parallel_scanners_run_at_once():
    # Both scanners have to be running for either to get past the barrier
    barrier = threading.Barrier(2)
    aggregator = Aggregator(
        [
            FakeScanner("Steam", ("Portal 2",), barrier=barrier),
            FakeScanner("GOG", ("Celeste",), barrier=barrier),
        ],
        "discovered",
        parallel=True,
    )

    games = aggregator.run()

    assert [game.title for game in games] == ["Portal 2", "Celeste"]


def test_runs_are_independent():
    aggregator = Aggregator([FakeScanner("Steam", error=OSError("denied"))])

    aggregator.run()
    aggregator.run()

    assert len(aggregator.collect_errors()) == 1


def test_notifications():
    aggregator = Aggregator([
        FakeScanner("Steam", ("Portal 2",)),
        FakeScanner("GOG", error=KeyError("gameName")),
    ])
    aggregator.run()

    failure, summary = aggregator.notifications()

    assert failure.style == NotificationStyle.FAILURE
    assert failure.title == "GOG detection failed"
    assert summary.style == NotificationStyle.SUCCESS
    assert summary.message == "Found 1 game"


def test_unknown_sort_order():
    with pytest.raises(ValueError):
        Aggregator([], "random")

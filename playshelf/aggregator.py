# SPDX-License-Identifier: GPL-3.0-or-later
# SPDX-FileCopyrightText: Copyright 2023 Geoffrey Coulaud
# SPDX-FileCopyrightText: Copyright 2026 Playshelf Contributors

import logging
from collections.abc import Iterable
from concurrent.futures import ThreadPoolExecutor
from gettext import gettext as _
from gettext import ngettext
from typing import NamedTuple

from playshelf.errors import ErrorProducer, FriendlyError, Notification
from playshelf.games import Game, SortOrder, sort_games
from playshelf.scanner import Scanner
from playshelf.sources.location import UnresolvableLocationError

_logger = logging.getLogger(__name__)


class ScanOutcome(NamedTuple):
    """What a single scanner produced during a run."""

    platform: str
    games: tuple[Game, ...] = ()
    error: FriendlyError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


class Aggregator(ErrorProducer):
    """
    Runs scanners and merges the games they find.

    A scanner failing never affects the others: its error is reported
    and its games are left out of the result.
    """

    scanners: tuple[Scanner, ...]
    sort_order: SortOrder
    parallel: bool

    outcomes: list[ScanOutcome]
    games: list[Game]

    def __init__(
        self,
        scanners: Iterable[Scanner],
        sort_order: SortOrder | str = SortOrder.ALPHABETICAL,
        *,
        parallel: bool = False,
    ) -> None:
        super().__init__()
        self.scanners = tuple(scanners)
        self.sort_order = SortOrder(sort_order)
        self.parallel = parallel
        self.outcomes = []
        self.games = []

    def run(self) -> list[Game]:
        """Synchronize every scanner and return the sorted merged games."""
        self.collect_errors()

        if self.parallel and len(self.scanners) > 1:
            with ThreadPoolExecutor(
                max_workers=len(self.scanners), thread_name_prefix="scanner"
            ) as executor:
                # Each scanner gets its own slot, in the order they were given
                self.outcomes = list(executor.map(self._scan, self.scanners))
        else:
            self.outcomes = [self._scan(scanner) for scanner in self.scanners]

        self.games = sort_games(
            (game for outcome in self.outcomes for game in outcome.games),
            self.sort_order,
        )

        _logger.info("Found %d games", len(self.games))
        return self.games

    def _scan(self, scanner: Scanner) -> ScanOutcome:
        _logger.info("Scanning %s", scanner.name)

        try:
            games = scanner.synchronize()
        except UnresolvableLocationError as error:
            if error.optional:
                _logger.info("%s skipped, not installed", scanner.name)
                return ScanOutcome(scanner.name)

            return self._fail(scanner, error)
        except Exception as error:  # noqa: BLE001
            return self._fail(scanner, error)

        return ScanOutcome(scanner.name, tuple(games))

    def _fail(self, scanner: Scanner, error: Exception) -> ScanOutcome:
        _logger.error(
            "%s in %s", type(error).__name__, scanner.name, exc_info=error
        )

        friendly = FriendlyError(
            _("{} detection failed").format(scanner.name),
            _("Could not detect {} games").format(scanner.name),
        )
        self.report_error(friendly)
        return ScanOutcome(scanner.name, error=friendly)

    @property
    def failures(self) -> list[ScanOutcome]:
        return [outcome for outcome in self.outcomes if not outcome.ok]

    def notifications(self) -> list[Notification]:
        """One notification per failed scanner, then a summary."""
        return [
            *(Notification.from_error(outcome.error) for outcome in self.failures),
            Notification.success(
                _("Games loaded"),
                ngettext("Found {} game", "Found {} games", len(self.games)).format(
                    len(self.games)
                ),
            ),
        ]

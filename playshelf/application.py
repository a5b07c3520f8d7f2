# SPDX-License-Identifier: GPL-3.0-or-later
# SPDX-FileCopyrightText: Copyright 2022-2025 kramo
# SPDX-FileCopyrightText: Copyright 2026 Playshelf Contributors

import argparse
import json
import logging
import subprocess
import sys
import webbrowser
from collections.abc import Sequence
from gettext import gettext as _
from pathlib import Path

from playshelf import APP_ID, VERSION, launcher
from playshelf.aggregator import Aggregator
from playshelf.cache import ResultCache
from playshelf.config import DEFAULT_PATH, Preferences
from playshelf.errors import Notification
from playshelf.games import Game, SortOrder
from playshelf.logging.setup import log_system_info, setup_logging
from playshelf.scanner import scanners_from_preferences
from playshelf.sources import APPDATA, playnite
from playshelf.utils.processes import restart_playnite
from playshelf.xbox_auth import AuthorizationError, AuthorizationFlow

_logger = logging.getLogger(__name__)


class Application:
    """Ties the preferences, the cache and the scanners together for the CLI."""

    preferences: Preferences
    cache: ResultCache

    def __init__(self, preferences: Preferences, cache: ResultCache) -> None:
        self.preferences = preferences
        self.cache = cache

    def scan(self, sort_order: str | None = None, *, parallel: bool = False) -> Aggregator:
        aggregator = Aggregator(
            scanners_from_preferences(self.preferences, cache=self.cache),
            sort_order or self.preferences.sort_order,
            parallel=parallel,
        )
        aggregator.run()
        return aggregator

    def find(self, game_id: str, aggregator: Aggregator) -> Game | None:
        return next((game for game in aggregator.games if game.game_id == game_id), None)

    @property
    def playnite_data_dir(self) -> Path:
        return Path(self.preferences.playnite_data_path or APPDATA / "Playnite")


def main(argv: Sequence[str] | None = None) -> int:
    args = _parser().parse_args(argv)

    setup_logging()
    log_system_info()

    app = Application(Preferences.load(args.config), ResultCache())

    match args.command:
        case "list":
            return _list(app, args)
        case "launch" | "uninstall" | "show-in-playnite":
            return _act(app, args)
        case "xbox-setup":
            return _xbox_setup(app)
        case "xbox-status":
            return _xbox_status(app)
        case "playnite-status":
            return _playnite_status(app)
        case "restart-playnite":
            return _restart_playnite(app)

    return 1


def _parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog=APP_ID, description=_("Find, launch and uninstall installed PC games.")
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {VERSION}")
    parser.add_argument(
        "--config", type=Path, default=DEFAULT_PATH, help=_("preferences file")
    )
    parser.add_argument(
        "--sort",
        choices=tuple(order.value for order in SortOrder),
        help=_("order of the games, defaults to the preferences"),
    )
    parser.add_argument(
        "--parallel", action="store_true", help=_("scan every platform at once")
    )

    commands = parser.add_subparsers(dest="command", required=True)

    list_parser = commands.add_parser("list", help=_("list installed games"))
    list_parser.add_argument("--json", action="store_true", help=_("output JSON"))

    for command, help_text in (
        ("launch", _("launch a game")),
        ("uninstall", _("uninstall a game")),
        ("show-in-playnite", _("show a Playnite game in Playnite")),
    ):
        commands.add_parser(command, help=help_text).add_argument("game_id")

    commands.add_parser("xbox-setup", help=_("sign in to fetch owned Xbox games"))
    commands.add_parser("xbox-status", help=_("show the cached Xbox games"))
    commands.add_parser(
        "playnite-status", help=_("check the Playnite library exporter")
    )
    commands.add_parser(
        "restart-playnite", help=_("restart Playnite to refresh its library export")
    )

    return parser


def _print_notification(notification: Notification) -> None:
    stream = sys.stdout if notification.ok else sys.stderr
    print(f"{notification.title}: {notification.message}", file=stream)


def _list(app: Application, args: argparse.Namespace) -> int:
    aggregator = app.scan(args.sort, parallel=args.parallel)

    for outcome in aggregator.failures:
        if outcome.error:
            print(outcome.error, file=sys.stderr)

    if args.json:
        json.dump([game.to_data() for game in aggregator.games], sys.stdout, indent=2)
        print()
        return 0

    for game in aggregator.games:
        print(f"{game.title}\t{game.platform}\t{game.game_id}")

    _print_notification(aggregator.notifications()[-1])
    return 0


def _act(app: Application, args: argparse.Namespace) -> int:
    aggregator = app.scan(args.sort, parallel=args.parallel)

    if not (game := app.find(args.game_id, aggregator)):
        print(_("No game with the ID {}").format(args.game_id), file=sys.stderr)
        return 1

    match args.command:
        case "launch":
            notification = launcher.launch(game)
        case "uninstall":
            notification = launcher.uninstall(game)
        case _:
            notification = launcher.open_in_playnite(game)

    _print_notification(notification)
    return 0 if notification.ok else 1


def _xbox_setup(app: Application) -> int:
    flow = AuthorizationFlow(app.cache)

    url = flow.start()
    print(_("Sign in with Microsoft, then paste the URL you were redirected to."))
    print(url)
    webbrowser.open(url)

    try:
        redirect_url = input(_("Redirect URL: "))
    except EOFError:
        return 1

    try:
        count = flow.submit(redirect_url)
    except AuthorizationError as error:
        _print_notification(Notification.failure(_("Authentication failed"), str(error)))
        return 1

    _print_notification(
        Notification.success(
            _("Xbox setup complete"), _("Found {} owned Xbox games").format(count)
        )
    )
    return 0


def _xbox_status(app: Application) -> int:
    status = AuthorizationFlow(app.cache).status()
    if status.is_setup:
        print(_("{} owned Xbox games cached").format(status.games_found))
    else:
        print(_("Xbox is not set up, run xbox-setup"))

    return 0


def _playnite_status(app: Application) -> int:
    status = playnite.exporter_status(
        data_path=app.playnite_data_dir,
        library_export=app.preferences.playnite_library_export,
    )

    if status.extension:
        print(_("Exporter extension: {}").format(status.extension))
    else:
        print(_("The exporter extension is not installed"))

    if status.library_export:
        print(_("Library export: {}").format(status.library_export))
    else:
        print(_("No library export yet, restart Playnite to write one"))

    return 0 if status.is_installed else 1


def _restart_playnite(app: Application) -> int:
    try:
        restart_playnite(app.playnite_data_dir)
    except (OSError, subprocess.SubprocessError) as error:
        _logger.error("Cannot restart Playnite: %s", error)
        _print_notification(
            Notification.failure(_("Restart failed"), _("Could not restart Playnite"))
        )
        return 1

    _print_notification(
        Notification.success(_("Playnite restarted"), _("Playnite is starting minimized"))
    )
    return 0

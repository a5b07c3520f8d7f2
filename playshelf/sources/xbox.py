# SPDX-License-Identifier: GPL-3.0-or-later
# SPDX-FileCopyrightText: Copyright 2026 Playshelf Contributors

"""
Xbox games installed from the Microsoft Store.

Store packages can't be told apart from regular apps locally, so the
packages found on the system are matched against the games owned by the
user. The owned games are fetched once by the `xbox-setup` command and
cached; scanning never touches the network.
"""

import logging
import re
from collections.abc import Generator
from datetime import datetime
from gettext import gettext as _
from typing import TYPE_CHECKING, Any, NamedTuple, Self

from playshelf.games import Game
from playshelf.icons import find_icon
from playshelf.utils.powershell import run_powershell_json

if TYPE_CHECKING:
    from playshelf.cache import ResultCache

ID, NAME = "xbox", _("Xbox")

AUTH_TOKENS_KEY = "xbox-auth-tokens"
OWNED_GAMES_KEY = "xbox-owned-games-pfns"
GAME_DETAILS_KEY = "xbox-game-details"

ICON_NAMES = (
    "Square44x44Logo.png",
    "Square150x150Logo.png",
    "Square310x310Logo.png",
    "StoreLogo.png",
    "ApplicationIcon.png",
    "Icon.png",
)

_PACKAGES_SCRIPT = """
Get-AppxPackage | Where-Object {
    $_.SignatureKind -eq "Store" -and -not $_.IsFramework -and -not $_.IsResourcePackage
} | ForEach-Object {
    [PSCustomObject]@{
        Name = $_.Name
        PackageFamilyName = $_.PackageFamilyName
        InstallLocation = $_.InstallLocation
    }
} | ConvertTo-Json -Compress
"""

_START_APPS_SCRIPT = """
Get-StartApps | ForEach-Object {
    [PSCustomObject]@{ Name = $_.Name; AppID = $_.AppID }
} | ConvertTo-Json -Compress
"""

_logger = logging.getLogger(__name__)


class _Package(NamedTuple):
    name: str
    family_name: str
    install_location: str | None = None

    @classmethod
    def from_data(cls, data: Any) -> Self:  # noqa: ANN401
        if not isinstance(data, dict):
            raise TypeError("Package is not an object")

        name, family_name = data.get("Name"), data.get("PackageFamilyName")
        if not (isinstance(name, str) and name and isinstance(family_name, str)):
            raise ValueError(f"Invalid package {name!r}")

        location = data.get("InstallLocation")
        return cls(name, family_name, location if isinstance(location, str) else None)


def get_games(*, cache: "ResultCache | None" = None) -> Generator[Game]:
    """Installed Xbox games owned by the user."""
    owned = owned_games(cache)
    if not owned:
        _logger.info("No owned Xbox games cached, run xbox-setup first")
        return

    details = cache.get_json(GAME_DETAILS_KEY) if cache else None
    if not isinstance(details, dict):
        details = {}

    app_ids = _start_app_ids()

    for package in _packages():
        if package.family_name not in owned:
            continue

        yield _game(package, details.get(package.family_name) or {}, app_ids)


def owned_games(cache: "ResultCache | None") -> set[str]:
    """The package family names of the games the user owns, as cached."""
    if cache is None:
        return set()

    owned = cache.get_json(OWNED_GAMES_KEY)
    if not isinstance(owned, list):
        return set()

    return {pfn for pfn in owned if isinstance(pfn, str) and pfn}


def clean_name(package_name: str) -> str:
    """`Microsoft.MinecraftUWP` -> `Minecraftuwp`"""
    name = re.sub(r"^Microsoft\.", "", package_name)
    name = re.sub(r"^Xbox\.", "", name)
    name = re.sub(r"Game$", "", name)
    name = re.sub(r"App$", "", name)
    return " ".join(word.capitalize() for word in name.replace(".", " ").split())


def _game(package: _Package, details: dict[str, Any], app_ids: dict[str, str]) -> Game:
    app_id = app_ids.get(package.family_name, f"{package.family_name}!App")

    icon = _string(details.get("displayImage")) or find_icon(
        package.install_location, ICON_NAMES, ("", "Assets")
    )

    developer, publisher = details.get("developerName"), details.get("publisherName")

    return Game(
        game_id=f"{ID}-{package.family_name}",
        title=_string(details.get("name")) or clean_name(package.name) or package.name,
        platform=NAME,
        icon_path=icon,
        launch_command=f"shell:AppsFolder\\{app_id}",
        description=_string(details.get("description")),
        developers=(developer,) if _string(developer) else (),
        publishers=(publisher,) if _string(publisher) else (),
        genres=tuple(
            genre for genre in details.get("genres") or () if isinstance(genre, str)
        ),
        release_date=(_string(details.get("releaseDate")) or "").split("T", 1)[0] or None,
        last_activity=_timestamp(details.get("lastTimePlayed")),
        source=_("Xbox Store"),
    )


def _packages() -> Generator[_Package]:
    for data in run_powershell_json(_PACKAGES_SCRIPT):
        try:
            package = _Package.from_data(data)
        except (TypeError, ValueError) as error:
            _logger.debug("Skipping package: %s", error)
            continue

        yield package


def _start_app_ids() -> dict[str, str]:
    """Start menu app IDs (`<family name>!<app>`) by package family name."""
    app_ids = {}
    for app in run_powershell_json(_START_APPS_SCRIPT):
        if not isinstance(app, dict) or not isinstance(app_id := app.get("AppID"), str):
            continue

        family_name, sep, _app = app_id.partition("!")
        if sep and "_" in family_name:
            app_ids.setdefault(family_name, app_id)

    return app_ids


def _string(value: Any) -> str | None:  # noqa: ANN401
    return (value.strip() or None) if isinstance(value, str) else None


def _timestamp(value: Any) -> int | None:  # noqa: ANN401
    if not (value := _string(value)):
        return None

    try:
        return int(datetime.fromisoformat(value.replace("Z", "+00:00")).timestamp())
    except ValueError:
        return None

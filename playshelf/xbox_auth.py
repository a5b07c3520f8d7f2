# SPDX-License-Identifier: GPL-3.0-or-later
# SPDX-FileCopyrightText: Copyright 2026 Playshelf Contributors

"""
One-time authorization with Xbox Live.

The user signs in with Microsoft in their browser and pastes back the URL
they were redirected to. The code it carries is traded for Xbox Live tokens,
which are used once to fetch the games the user owns. Those are cached for
the Xbox source, so scanning never needs the network.
"""

import logging
from enum import StrEnum
from typing import Any, NamedTuple
from urllib.parse import parse_qs, urlencode, urlparse

import requests
from requests.exceptions import HTTPError, RequestException

from playshelf.cache import ResultCache
from playshelf.sources.xbox import AUTH_TOKENS_KEY, GAME_DETAILS_KEY, OWNED_GAMES_KEY

CLIENT_ID = "38cd2fa8-66fd-4760-afb2-405eb65d5b0c"
REDIRECT_URI = "https://login.live.com/oauth20_desktop.srf"
SCOPE = "XboxLive.signin XboxLive.offline_access"

AUTHORIZE_URL = "https://login.live.com/oauth20_authorize.srf"
TOKEN_URL = "https://login.live.com/oauth20_token.srf"
USER_AUTH_URL = "https://user.auth.xboxlive.com/user/authenticate"
XSTS_URL = "https://xsts.auth.xboxlive.com/xsts/authorize"
TITLE_HISTORY_URL = (
    "https://titlehub.xboxlive.com/users/xuid({xuid})/titles/titlehistory/decoration/detail"
)

TIMEOUT = 10

_logger = logging.getLogger(__name__)


class AuthorizationError(Exception):
    """The authorization failed, the message says why."""


class AuthStep(StrEnum):
    STATUS = "status"
    AUTH = "auth"
    PROCESSING = "processing"
    COMPLETE = "complete"


class XboxStatus(NamedTuple):
    is_setup: bool
    games_found: int = 0


class XboxTokens(NamedTuple):
    user_hash: str
    xsts_token: str
    xuid: str

    def to_data(self) -> dict[str, str]:
        return {"userHash": self.user_hash, "xstsToken": self.xsts_token, "xuid": self.xuid}


class AuthorizationFlow:
    """
    The steps of the authorization, driven by the caller.

    `start()` gives the sign-in URL to open, `submit()` takes the URL the
    browser ended up on. Nothing is locked in between, so the flow can
    wait on the user for as long as it takes.
    """

    cache: ResultCache
    step: AuthStep
    error: str | None
    games_found: int | None

    def __init__(
        self, cache: ResultCache, session: requests.Session | None = None
    ) -> None:
        self.cache = cache
        self.session = session or requests.Session()
        self.step = AuthStep.STATUS
        self.error = None
        self.games_found = None

    def status(self) -> XboxStatus:
        """Whether owned games are cached, and how many."""
        owned = self.cache.get_json(OWNED_GAMES_KEY)
        if not isinstance(owned, list):
            return XboxStatus(False)

        return XboxStatus(True, len(owned))

    def start(self) -> str:
        """Begin the authorization, returning the sign-in URL to open."""
        self.step = AuthStep.AUTH
        self.error = None

        query = urlencode({
            "client_id": CLIENT_ID,
            "response_type": "code",
            "redirect_uri": REDIRECT_URI,
            "scope": SCOPE,
        })
        return f"{AUTHORIZE_URL}?{query}"

    def submit(self, redirect_url: str) -> int:
        """
        Finish the authorization with the URL the browser was redirected to.

        Returns the number of games the user owns.

        :raises AuthorizationError: Anything went wrong, the flow starts over
        """
        if self.step != AuthStep.AUTH:
            raise self._fail("Start the authorization first")

        self.step = AuthStep.PROCESSING
        try:
            code = parse_redirect_url(redirect_url)
            tokens = self._authenticate(code)
            self.cache.set_json(AUTH_TOKENS_KEY, tokens.to_data())

            owned, details = self._owned_games(tokens)
        except AuthorizationError as error:
            raise self._fail(str(error)) from error
        except HTTPError as error:
            status = getattr(error.response, "status_code", None)
            raise self._fail(f"Xbox Live refused the request ({status})") from error
        except RequestException as error:
            raise self._fail(f"Cannot reach Xbox Live: {error}") from error
        except (AttributeError, KeyError, IndexError, TypeError, ValueError) as error:
            raise self._fail("Unexpected response from Xbox Live") from error

        self.cache.set_json(OWNED_GAMES_KEY, owned)
        self.cache.set_json(GAME_DETAILS_KEY, details)

        _logger.info("Xbox authorization complete, %d games owned", len(owned))
        self.step = AuthStep.COMPLETE
        self.games_found = len(owned)
        return len(owned)

    def _fail(self, reason: str) -> AuthorizationError:
        _logger.error("Xbox authorization failed: %s", reason)
        self.step = AuthStep.STATUS
        self.error = reason
        return AuthorizationError(reason)

    def _post(self, url: str, **kwargs: Any) -> Any:  # noqa: ANN401
        response = self.session.post(url, timeout=TIMEOUT, **kwargs)
        response.raise_for_status()
        return response.json()

    def _authenticate(self, code: str) -> XboxTokens:
        access_token = self._post(
            TOKEN_URL,
            data={
                "grant_type": "authorization_code",
                "code": code,
                "client_id": CLIENT_ID,
                "redirect_uri": REDIRECT_URI,
            },
        )["access_token"]

        user = self._post(
            USER_AUTH_URL,
            json={
                "Properties": {
                    "AuthMethod": "RPS",
                    "SiteName": "user.auth.xboxlive.com",
                    "RpsTicket": f"d={access_token}",
                },
                "RelyingParty": "http://auth.xboxlive.com",
                "TokenType": "JWT",
            },
            headers={"x-xbl-contract-version": "1"},
        )

        xsts = self._post(
            XSTS_URL,
            json={
                "Properties": {"SandboxId": "RETAIL", "UserTokens": [user["Token"]]},
                "RelyingParty": "http://xboxlive.com",
                "TokenType": "JWT",
            },
            headers={"x-xbl-contract-version": "1"},
        )

        return XboxTokens(
            user_hash=user["DisplayClaims"]["xui"][0]["uhs"],
            xsts_token=xsts["Token"],
            xuid=xsts["DisplayClaims"]["xui"][0]["xid"],
        )

    def _owned_games(
        self, tokens: XboxTokens
    ) -> tuple[list[str], dict[str, dict[str, Any]]]:
        response = self.session.get(
            TITLE_HISTORY_URL.format(xuid=tokens.xuid),
            headers={
                "Authorization": f"XBL3.0 x={tokens.user_hash};{tokens.xsts_token}",
                "x-xbl-contract-version": "2",
                "Accept-Language": "en",
            },
            timeout=TIMEOUT,
        )
        response.raise_for_status()

        body = response.json()
        if not isinstance(body, dict):
            raise ValueError("Title history is not an object")

        owned, details = [], {}
        for title in body.get("titles") or ():
            if not isinstance(title, dict):
                continue

            if title.get("type") != "Game" or not (pfn := title.get("pfn")):
                continue

            # The first listing of a title carries its details
            if pfn not in details:
                owned.append(pfn)
                details[pfn] = _title_details(title)

        return owned, details


def parse_redirect_url(redirect_url: str) -> str:
    """
    The authorization code carried by a redirect URL.

    :raises AuthorizationError: The URL doesn't carry a code
    """
    if not (redirect_url := redirect_url.strip()):
        raise AuthorizationError("Please enter the redirect URL")

    if "login.live.com/oauth20_desktop.srf" not in redirect_url:
        raise AuthorizationError(
            "Invalid redirect URL, make sure to copy the complete URL from the browser"
        )

    query = parse_qs(urlparse(redirect_url).query)

    if error := query.get("error"):
        description = query.get("error_description", ["Unknown error"])[0]
        raise AuthorizationError(f"OAuth error: {error[0]} - {description}")

    if not (code := query.get("code")):
        raise AuthorizationError("No authorization code found in the redirect URL")

    return code[0]


def _title_details(title: dict[str, Any]) -> dict[str, Any]:
    detail = title.get("detail") or {}
    history = title.get("titleHistory") or {}

    return {
        "name": title.get("name"),
        "displayImage": title.get("displayImage"),
        "lastTimePlayed": history.get("lastTimePlayed"),
        "description": detail.get("description") or detail.get("shortDescription") or "",
        "developerName": detail.get("developerName") or "",
        "publisherName": detail.get("publisherName") or "",
        "genres": detail.get("genres") or [],
        "releaseDate": detail.get("releaseDate"),
        "devices": title.get("devices") or [],
    }

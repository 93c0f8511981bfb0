"""
MediaWiki API Client

Async client for wikis that run the WSSlots extension. It logs in with a
bot password, keeps the session cookies and exposes the `editslot` action
together with a slot-aware content read.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import httpx

from ..config import settings
from ..slots.models import MAIN_SLOT

logger = logging.getLogger("wsslots.wiki")


# ---------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------

class MediaWikiClientError(RuntimeError):
    """Base exception for MediaWiki client failures."""


class MediaWikiRequestError(MediaWikiClientError):
    """Raised when the HTTP request itself fails."""


class MediaWikiResponseError(MediaWikiClientError):
    """Raised when the API answers with an error payload."""

    def __init__(self, code: str, info: str) -> None:
        super().__init__(f"{code}: {info}")
        self.code = code
        self.info = info


# ---------------------------------------------------------------------
# Client
# ---------------------------------------------------------------------

class MediaWikiClient:
    """
    Session-based MediaWiki API client.
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        username: Optional[str] = None,
        password: Optional[str] = None,
        http_client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        """
        Parameters
        ----------
        base_url : Optional[str]
            URL of the wiki's api.php. Defaults to `settings.mw_api_base_url`.

        username, password : Optional[str]
            Bot password credentials. Default to the configured bot account.

        http_client : Optional[httpx.AsyncClient]
            Client to use instead of a new one (e.g. with a mock transport).
        """
        if base_url is None and settings.mw_api_base_url is not None:
            base_url = str(settings.mw_api_base_url)
        if not base_url:
            raise MediaWikiClientError("No MediaWiki API URL configured.")

        self.base_url = base_url
        self._username = username or settings.mw_bot_username
        if password is None and settings.mw_bot_password is not None:
            password = settings.mw_bot_password.get_secret_value()
        self._password = password

        self._http = http_client or httpx.AsyncClient(timeout=15)
        self._csrf_token: Optional[str] = None

    async def __aenter__(self) -> "MediaWikiClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._http.aclose()

    # ------------------------------------------------------------------
    # Transport
    # ------------------------------------------------------------------

    async def _request(
        self,
        params: Dict[str, Any],
        post: bool = False,
    ) -> Dict[str, Any]:
        params = {"format": "json", "formatversion": 2, **params}

        try:
            if post:
                resp = await self._http.post(self.base_url, data=params)
            else:
                resp = await self._http.get(self.base_url, params=params)
            resp.raise_for_status()
        except httpx.HTTPError as exc:
            logger.error("MediaWiki request %s failed: %s", params.get("action"), exc)
            raise MediaWikiRequestError(
                f"MediaWiki request failed: {type(exc).__name__}"
            ) from exc

        data = resp.json()

        if "error" in data:
            error = data["error"]
            raise MediaWikiResponseError(
                error.get("code", "unknown"),
                error.get("info", ""),
            )

        return data

    async def _get_token(self, token_type: str) -> str:
        data = await self._request(
            {"action": "query", "meta": "tokens", "type": token_type}
        )
        return data["query"]["tokens"][f"{token_type}token"]

    # ------------------------------------------------------------------
    # Session
    # ------------------------------------------------------------------

    async def login(self) -> None:
        """
        Log in with the configured bot password.

        Raises
        ------
        MediaWikiResponseError
            If the wiki rejects the credentials.
        """
        if not self._username or not self._password:
            raise MediaWikiClientError("Bot credentials are not configured.")

        login_token = await self._get_token("login")
        data = await self._request(
            {
                "action": "login",
                "lgname": self._username,
                "lgpassword": self._password,
                "lgtoken": login_token,
            },
            post=True,
        )

        result = data.get("login", {})
        if result.get("result") != "Success":
            raise MediaWikiResponseError("loginfailed", result.get("reason", ""))

        self._csrf_token = None
        logger.info("Logged in to %s as %s", self.base_url, self._username)

    async def get_csrf_token(self, refresh: bool = False) -> str:
        if self._csrf_token is None or refresh:
            self._csrf_token = await self._get_token("csrf")
        return self._csrf_token

    # ------------------------------------------------------------------
    # Slots
    # ------------------------------------------------------------------

    async def edit_slot(
        self,
        title: Optional[str] = None,
        pageid: Optional[int] = None,
        text: str = "",
        slot: str = MAIN_SLOT,
        append: bool = False,
        summary: str = "",
        watchlist: str = "",
    ) -> Dict[str, Any]:
        """
        Run the `editslot` action. A stale CSRF token is refreshed once.
        """
        if (title is None) == (pageid is None):
            raise ValueError("Exactly one of 'title' and 'pageid' is required.")

        params: Dict[str, Any] = {
            "action": "editslot",
            "text": text,
            "slot": slot,
            "summary": summary,
            "watchlist": watchlist,
        }
        if title is not None:
            params["title"] = title
        else:
            params["pageid"] = pageid
        if append:
            # Boolean API parameters are true when present
            params["append"] = 1

        params["token"] = await self.get_csrf_token()
        try:
            return await self._request(params, post=True)
        except MediaWikiResponseError as exc:
            if exc.code != "badtoken":
                raise

        logger.debug("CSRF token expired, retrying editslot once")
        params["token"] = await self.get_csrf_token(refresh=True)
        return await self._request(params, post=True)

    async def get_slot_content(self, title: str, slot: str = MAIN_SLOT) -> Optional[str]:
        """
        Return the text of `slot` on the latest revision of `title`, or
        None if the page or the slot does not exist.
        """
        data = await self._request(
            {
                "action": "query",
                "prop": "revisions",
                "rvprop": "content",
                "rvslots": slot,
                "titles": title,
            }
        )

        pages = data.get("query", {}).get("pages", [])
        if not pages or pages[0].get("missing") or pages[0].get("invalid"):
            return None

        revisions = pages[0].get("revisions")
        if not revisions:
            return None

        slots = revisions[0].get("slots", {})
        slot_data = slots.get(slot)
        if slot_data is None or slot_data.get("missing"):
            return None

        return slot_data.get("content")

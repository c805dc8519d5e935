"""
Minimal Discord REST client for application command registration.

Only the bulk overwrite endpoints are needed: one ``PUT`` replaces the whole
command list of an application, globally or inside one guild.
"""

from __future__ import annotations

from typing import Any

import aiohttp

from strawhat.util.logger import get_logger

logger = get_logger("rest_client")

DEFAULT_API_BASE_URL = "https://discord.com/api/v10"


class RestError(Exception):
    """Raised when Discord answers a REST call with a non-2xx status."""

    def __init__(self, method: str, route: str, status: int, body: Any) -> None:
        super().__init__(f"{method} {route} failed with HTTP {status}: {body}")
        self.method = method
        self.route = route
        self.status = status
        self.body = body


def application_commands_route(application_id: int) -> str:
    return f"/applications/{application_id}/commands"


def guild_commands_route(application_id: int, guild_id: int) -> str:
    return f"/applications/{application_id}/guilds/{guild_id}/commands"


class RestClient:
    """aiohttp-backed client bound to one bot token.

    The HTTP session is created lazily on the first request so the client can
    be built outside a running event loop. Call :meth:`close` when done.
    """

    def __init__(self, token: str, base_url: str = DEFAULT_API_BASE_URL) -> None:
        if not token:
            raise ValueError("A bot token is required to build a RestClient")
        self._token = token
        self.base_url = base_url.rstrip("/")
        self._session: aiohttp.ClientSession | None = None

    @property
    def token(self) -> str:
        return self._token

    def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(
                headers={
                    "Authorization": f"Bot {self._token}",
                    "Content-Type": "application/json",
                }
            )
        return self._session

    async def request(self, method: str, route: str, body: Any = None) -> Any:
        """Send a request and return the decoded JSON payload (or None)."""
        session = self._get_session()
        url = f"{self.base_url}{route}"
        async with session.request(method, url, json=body) as response:
            if response.content_type == "application/json":
                payload = await response.json()
            else:
                payload = await response.text()

            if not 200 <= response.status < 300:
                raise RestError(method, route, response.status, payload)
            return None if payload == "" else payload

    async def put(self, route: str, body: Any) -> Any:
        return await self.request("PUT", route, body)

    async def close(self) -> None:
        if self._session is not None and not self._session.closed:
            await self._session.close()
        self._session = None

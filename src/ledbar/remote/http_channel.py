"""Pull/push variant of the remote channel over plain HTTP.

State is polled from ``GET /getsettings`` at a fixed interval; commands
are applied with ``POST /updatesettings`` carrying a JSON patch of only
the fields that change.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, AsyncIterator

import httpx

from ledbar.domain.commands import build_patch
from ledbar.domain.models import Command, LedConfig
from ledbar.remote.base import RemoteChannel, RemoteChannelError

logger = logging.getLogger(__name__)

SETTINGS_PATH = "/getsettings"
UPDATE_PATH = "/updatesettings"


class HttpChannel(RemoteChannel):
    """Polls the controller's settings and posts patches back."""

    transport_name = "http"

    def __init__(
        self,
        base_url: str = "http://raspberrypi.local",
        poll_interval: float = 1.0,
        timeout: float = 5.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._poll_interval = poll_interval
        self._timeout = timeout
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    async def connect(self) -> None:
        """Create the HTTP client. Reachability is proven by the first poll."""
        self._client = httpx.AsyncClient(
            base_url=self._base_url,
            timeout=self._timeout,
            transport=self._transport,
        )
        logger.info("Polling %s every %.1fs", self._base_url, self._poll_interval)

    async def disconnect(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None
            logger.info("Stopped polling %s", self._base_url)

    async def messages(self) -> AsyncIterator[str]:
        while True:
            resp = await self._request("GET", SETTINGS_PATH)
            yield resp.text
            await asyncio.sleep(self._poll_interval)

    async def forward(self, command: Command, config: LedConfig) -> None:
        """POST the patch that applies ``command`` to ``config``."""
        patch = build_patch(command, config)
        await self._request("POST", UPDATE_PATH, json=patch)
        logger.debug("Forwarded %s as %s", command.value, patch)

    async def _request(self, method: str, path: str, json: dict[str, Any] | None = None) -> httpx.Response:
        if self._client is None:
            raise RemoteChannelError("HTTP client is not connected", transport=self.transport_name)
        try:
            resp = await self._client.request(method, path, json=json)
            resp.raise_for_status()
            return resp
        except httpx.HTTPStatusError as e:
            raise RemoteChannelError(
                f"{method} {path} failed: {e}",
                transport=self.transport_name,
                code=str(e.response.status_code),
            ) from e
        except httpx.HTTPError as e:
            raise RemoteChannelError(
                f"{method} {path} failed: {e}",
                transport=self.transport_name,
                code=type(e).__name__,
            ) from e

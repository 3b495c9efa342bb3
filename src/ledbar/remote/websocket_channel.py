"""Push variant of the remote channel: one persistent WebSocket.

The controller pushes a full snapshot on every state change; commands
are sent back as bare token frames and the controller answers with a
fresh snapshot.
"""

from __future__ import annotations

import asyncio
import logging
from typing import AsyncIterator

import aiohttp
from aiohttp import WSMsgType

from ledbar.domain.models import Command, LedConfig
from ledbar.remote.base import RemoteChannel, RemoteChannelError

logger = logging.getLogger(__name__)


class WebSocketChannel(RemoteChannel):
    """Remote channel over a persistent WebSocket connection."""

    transport_name = "websocket"

    def __init__(self, url: str = "ws://raspberrypi.local:8080", timeout: float = 5.0) -> None:
        self._url = url
        self._timeout = timeout
        self._session: aiohttp.ClientSession | None = None
        self._ws: aiohttp.ClientWebSocketResponse | None = None

    @property
    def is_connected(self) -> bool:
        return self._ws is not None and not self._ws.closed

    async def connect(self) -> None:
        """Open the WebSocket to the controller."""
        self._session = aiohttp.ClientSession(
            timeout=aiohttp.ClientTimeout(total=None, sock_connect=self._timeout),
        )
        try:
            self._ws = await self._session.ws_connect(self._url)
            logger.info("Connected to %s", self._url)
        except (aiohttp.ClientError, asyncio.TimeoutError, OSError) as e:
            await self._session.close()
            self._session = None
            raise RemoteChannelError(
                f"Failed to connect to {self._url}: {e}",
                transport=self.transport_name,
                code=type(e).__name__,
            ) from e

    async def disconnect(self) -> None:
        if self._ws is not None:
            await self._ws.close()
            self._ws = None
        if self._session is not None:
            await self._session.close()
            self._session = None
            logger.info("Disconnected from %s", self._url)

    async def messages(self) -> AsyncIterator[str]:
        ws = self._require_ws()
        async for msg in ws:
            if msg.type == WSMsgType.TEXT:
                yield msg.data
            elif msg.type == WSMsgType.BINARY:
                yield msg.data.decode("utf-8", errors="replace")
            elif msg.type == WSMsgType.ERROR:
                raise RemoteChannelError(
                    f"WebSocket error: {ws.exception()}",
                    transport=self.transport_name,
                )
        raise RemoteChannelError(
            "WebSocket ended unexpectedly",
            transport=self.transport_name,
            code=str(ws.close_code) if ws.close_code is not None else None,
        )

    async def forward(self, command: Command, config: LedConfig) -> None:
        """Send the command token as a text frame."""
        ws = self._require_ws()
        try:
            await ws.send_str(command.value)
        except (aiohttp.ClientError, ConnectionError) as e:
            raise RemoteChannelError(
                f"Failed to send {command.value}: {e}",
                transport=self.transport_name,
                code=type(e).__name__,
            ) from e
        logger.debug("Forwarded %s", command.value)

    def _require_ws(self) -> aiohttp.ClientWebSocketResponse:
        if self._ws is None:
            raise RemoteChannelError("WebSocket is not connected", transport=self.transport_name)
        return self._ws

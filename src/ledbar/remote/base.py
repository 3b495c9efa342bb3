"""Abstract base class for the remote state channel.

Both transports expose the same two-sided contract: a lazy stream of raw
messages (state snapshots as JSON text) and a ``forward()`` call that
relays a command to the controller. The rest of the system never knows
which transport is in use.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import AsyncIterator

from ledbar.domain.models import Command, LedConfig

logger = logging.getLogger(__name__)


class RemoteChannel(ABC):
    """Abstract interface to the remote lighting controller.

    A channel lives for exactly one pipeline run. It is opened with
    ``connect()`` (or the async context manager), read through
    ``messages()`` and released with ``disconnect()``.

    Example usage::

        async with WebSocketChannel("ws://raspberrypi.local:8080") as channel:
            async for raw in channel.messages():
                ...
            await channel.forward(Command.POWER, config)
    """

    transport_name: str = ""

    @abstractmethod
    async def connect(self) -> None:
        """Open the channel.

        Raises:
            RemoteChannelError: If the channel cannot be opened.
        """
        ...

    @abstractmethod
    async def disconnect(self) -> None:
        """Close the channel. Safe to call multiple times."""
        ...

    @abstractmethod
    def messages(self) -> AsyncIterator[str]:
        """Yield raw messages from the controller in arrival order.

        The stream does not end cleanly while the channel is healthy;
        transport loss is raised as ``RemoteChannelError``.
        """
        ...

    @abstractmethod
    async def forward(self, command: Command, config: LedConfig) -> None:
        """Relay ``command`` to the controller.

        Args:
            command: The user action to apply.
            config: The currently held snapshot the command is relative to.

        Raises:
            RemoteChannelError: If the command could not be delivered.
        """
        ...

    async def __aenter__(self) -> RemoteChannel:
        await self.connect()
        return self

    async def __aexit__(self, exc_type: type | None, exc_val: Exception | None, exc_tb: object) -> None:
        await self.disconnect()


class RemoteChannelError(Exception):
    """Raised when the remote channel fails."""

    def __init__(self, message: str, transport: str = "", code: str | None = None) -> None:
        super().__init__(message)
        self.transport = transport
        self.code = code

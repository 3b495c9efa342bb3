"""Shared test fixtures for the ledbar test suite.

Provides snapshots, a captured status output, and an in-memory remote
channel that can be fed messages and failures from a test.
"""

from __future__ import annotations

import asyncio
import io
from typing import AsyncIterator

import pytest

from ledbar.domain.models import Command, LedConfig
from ledbar.remote.base import RemoteChannel, RemoteChannelError
from ledbar.render.status import StatusOutput


# ---------------------------------------------------------------------------
# Snapshot Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def snapshot_data() -> dict:
    """A full controller snapshot as it arrives on the wire."""
    return {
        "on": 1,
        "global_brightness": 0.42,
        "groups": {"main": {"palette": 50, "speed": 3}},
        "fps": 60,
    }


@pytest.fixture
def led_config(snapshot_data: dict) -> LedConfig:
    return LedConfig.model_validate(snapshot_data)


# ---------------------------------------------------------------------------
# Output Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def status_stream() -> io.StringIO:
    return io.StringIO()


@pytest.fixture
def status_output(status_stream: io.StringIO) -> StatusOutput:
    return StatusOutput(status_stream)


# ---------------------------------------------------------------------------
# Fake Remote Channel
# ---------------------------------------------------------------------------


class FakeChannel(RemoteChannel):
    """In-memory channel: tests push raw messages or an error into it."""

    transport_name = "fake"

    def __init__(self) -> None:
        self.queue: asyncio.Queue[str | Exception] = asyncio.Queue()
        self.forwarded: list[tuple[Command, LedConfig]] = []
        self.connected = False
        self.connect_count = 0
        self.forward_error: Exception | None = None

    def push(self, item: str | Exception) -> None:
        self.queue.put_nowait(item)

    async def connect(self) -> None:
        self.connected = True
        self.connect_count += 1

    async def disconnect(self) -> None:
        self.connected = False

    async def messages(self) -> AsyncIterator[str]:
        while True:
            item = await self.queue.get()
            if isinstance(item, Exception):
                raise item
            yield item

    async def forward(self, command: Command, config: LedConfig) -> None:
        if self.forward_error is not None:
            raise self.forward_error
        self.forwarded.append((command, config))


@pytest.fixture
def fake_channel() -> FakeChannel:
    return FakeChannel()


@pytest.fixture
def channel_error() -> RemoteChannelError:
    return RemoteChannelError("WebSocket ended unexpectedly", transport="fake")


@pytest.fixture
def channel_cls() -> type[FakeChannel]:
    """The fake channel class, for tests that need one channel per run."""
    return FakeChannel

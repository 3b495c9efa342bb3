"""Tests for the single-client Unix socket command source."""

from __future__ import annotations

import asyncio
import socket
from pathlib import Path

import pytest

from ledbar.local.server import (
    AddressInUseError,
    LocalCommandSource,
    LocalSourceError,
    find_socket_holder,
)


@pytest.fixture
def socket_path(tmp_path: Path) -> Path:
    return tmp_path / "led"


async def _next(source: LocalCommandSource, timeout: float = 1.0) -> str:
    messages = source.messages()
    return await asyncio.wait_for(messages.__anext__(), timeout)


class TestOpenClose:
    @pytest.mark.asyncio
    async def test_open_binds_path(self, socket_path: Path) -> None:
        source = LocalCommandSource(socket_path)
        await source.open()
        try:
            assert source.is_open
            assert socket_path.exists()
        finally:
            await source.close()
        assert not source.is_open
        assert not socket_path.exists()

    @pytest.mark.asyncio
    async def test_close_twice_is_safe(self, socket_path: Path) -> None:
        source = LocalCommandSource(socket_path)
        await source.open()
        await source.close()
        await source.close()

    @pytest.mark.asyncio
    async def test_existing_path_raises_address_in_use(self, socket_path: Path) -> None:
        stale = socket.socket(socket.AF_UNIX, socket.SOCK_STREAM)
        stale.bind(str(socket_path))
        stale.close()

        source = LocalCommandSource(socket_path)
        with pytest.raises(AddressInUseError) as exc_info:
            await source.open()
        assert exc_info.value.path == socket_path
        assert exc_info.value.code == "EADDRINUSE"
        # A stale path is never removed by the source itself
        assert socket_path.exists()

    @pytest.mark.asyncio
    async def test_other_bind_errors_are_distinct(self, tmp_path: Path) -> None:
        source = LocalCommandSource(tmp_path / "missing-dir" / "led")
        with pytest.raises(LocalSourceError) as exc_info:
            await source.open()
        assert not isinstance(exc_info.value, AddressInUseError)

    @pytest.mark.asyncio
    async def test_messages_before_open_raises(self, socket_path: Path) -> None:
        source = LocalCommandSource(socket_path)
        with pytest.raises(LocalSourceError):
            await source.messages().__anext__()


class TestMessages:
    @pytest.mark.asyncio
    async def test_client_chunk_is_yielded(self, socket_path: Path) -> None:
        async with LocalCommandSource(socket_path) as source:
            _, writer = await asyncio.open_unix_connection(str(socket_path))
            writer.write(b"palette_up")
            await writer.drain()
            assert await _next(source) == "palette_up"
            writer.close()
            await writer.wait_closed()

    @pytest.mark.asyncio
    async def test_sequential_clients_are_served(self, socket_path: Path) -> None:
        async with LocalCommandSource(socket_path) as source:
            messages = source.messages()
            for token in ("power", "brightness_up"):
                _, writer = await asyncio.open_unix_connection(str(socket_path))
                writer.write(token.encode())
                await writer.drain()
                assert await asyncio.wait_for(messages.__anext__(), 1.0) == token
                writer.close()
                await writer.wait_closed()
                for _ in range(50):
                    if not source.has_client:
                        break
                    await asyncio.sleep(0.01)
                assert not source.has_client

    @pytest.mark.asyncio
    async def test_second_concurrent_connection_is_ignored(self, socket_path: Path) -> None:
        async with LocalCommandSource(socket_path) as source:
            messages = source.messages()
            _, first = await asyncio.open_unix_connection(str(socket_path))
            first.write(b"power")
            await first.drain()
            assert await asyncio.wait_for(messages.__anext__(), 1.0) == "power"

            _, second = await asyncio.open_unix_connection(str(socket_path))
            second.write(b"palette_down")
            await second.drain()

            first.write(b"brightness_down")
            await first.drain()
            assert await asyncio.wait_for(messages.__anext__(), 1.0) == "brightness_down"

            with pytest.raises(asyncio.TimeoutError):
                await asyncio.wait_for(messages.__anext__(), 0.1)

            for writer in (first, second):
                writer.close()

    @pytest.mark.asyncio
    async def test_extra_connections_are_released_on_disconnect(self, socket_path: Path) -> None:
        async with LocalCommandSource(socket_path) as source:
            messages = source.messages()
            _, first = await asyncio.open_unix_connection(str(socket_path))
            first.write(b"power")
            await first.drain()
            assert await asyncio.wait_for(messages.__anext__(), 1.0) == "power"

            for _ in range(20):
                _, extra = await asyncio.open_unix_connection(str(socket_path))
                extra.write(b"palette_up")
                await extra.drain()
                extra.close()
                await extra.wait_closed()

            loop = asyncio.get_running_loop()
            deadline = loop.time() + 1.0
            while source._parked and loop.time() < deadline:
                await asyncio.sleep(0.01)
            assert not source._parked

            with pytest.raises(asyncio.TimeoutError):
                await asyncio.wait_for(messages.__anext__(), 0.1)

            first.write(b"brightness_up")
            await first.drain()
            assert await asyncio.wait_for(messages.__anext__(), 1.0) == "brightness_up"
            first.close()

    @pytest.mark.asyncio
    async def test_close_terminates_stream_with_error(self, socket_path: Path) -> None:
        source = LocalCommandSource(socket_path)
        await source.open()
        messages = source.messages()
        pending = asyncio.create_task(messages.__anext__())
        await asyncio.sleep(0)
        await source.close()
        with pytest.raises(LocalSourceError, match="closed"):
            await asyncio.wait_for(pending, 1.0)


class TestFindSocketHolder:
    @pytest.mark.asyncio
    async def test_stale_socket_has_no_holder(self, socket_path: Path) -> None:
        stale = socket.socket(socket.AF_UNIX, socket.SOCK_STREAM)
        stale.bind(str(socket_path))
        stale.close()
        assert await find_socket_holder(socket_path) is None

    @pytest.mark.asyncio
    async def test_live_listener_is_reported(self, socket_path: Path) -> None:
        async with LocalCommandSource(socket_path):
            assert await find_socket_holder(socket_path) is not None

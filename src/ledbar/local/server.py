"""Single-client Unix socket server for local commands.

The endpoint path is a system-wide singleton: binding never removes an
existing file, so a leftover socket from a crashed instance surfaces as
``AddressInUseError`` and the supervisor decides whether it is stale.

Only one client is served at a time. Further connections made while a
client is active are accepted by the kernel but parked unread until the
source closes; they are neither queued for later service nor errored.
"""

from __future__ import annotations

import asyncio
import contextlib
import errno
import logging
import socket
from pathlib import Path
from typing import AsyncIterator

logger = logging.getLogger(__name__)

DEFAULT_READ_SIZE = 4096


class LocalSourceError(Exception):
    """Raised when the local endpoint fails or is closed under a reader."""

    def __init__(self, message: str, code: str | None = None) -> None:
        super().__init__(message)
        self.code = code


class AddressInUseError(LocalSourceError):
    """Raised when the endpoint path is already bound."""

    def __init__(self, path: Path | str) -> None:
        super().__init__(f"Address already in use: {path}", code="EADDRINUSE")
        self.path = Path(path)


class LocalCommandSource:
    """Accepts text chunks on a Unix stream socket and yields them in order.

    Usage::

        async with LocalCommandSource("/tmp/waybar-led") as source:
            async for chunk in source.messages():
                handle(chunk)

    ``messages()`` never ends cleanly: it raises ``LocalSourceError``
    when the listener is closed or a client connection errors.
    """

    def __init__(self, path: Path | str, read_size: int = DEFAULT_READ_SIZE) -> None:
        self._path = Path(path)
        self._read_size = read_size
        self._server: asyncio.AbstractServer | None = None
        self._queue: asyncio.Queue[str | Exception] = asyncio.Queue()
        self._client: asyncio.StreamWriter | None = None
        self._parked: set[asyncio.StreamWriter] = set()

    @property
    def path(self) -> Path:
        return self._path

    @property
    def is_open(self) -> bool:
        return self._server is not None

    @property
    def has_client(self) -> bool:
        return self._client is not None

    async def open(self) -> None:
        """Bind and start listening on the endpoint path.

        Raises:
            AddressInUseError: If the path already exists.
            LocalSourceError: For any other bind/listen failure.
        """
        self._queue = asyncio.Queue()
        sock = socket.socket(socket.AF_UNIX, socket.SOCK_STREAM)
        try:
            sock.bind(str(self._path))
        except OSError as e:
            sock.close()
            if e.errno == errno.EADDRINUSE:
                raise AddressInUseError(self._path) from e
            raise LocalSourceError(
                f"Cannot bind {self._path}: {e}",
                code=errno.errorcode.get(e.errno or 0),
            ) from e

        try:
            self._server = await asyncio.start_unix_server(self._on_client, sock=sock)
        except OSError as e:
            sock.close()
            self._unlink()
            raise LocalSourceError(
                f"Cannot listen on {self._path}: {e}",
                code=errno.errorcode.get(e.errno or 0),
            ) from e
        logger.info("Listening on %s", self._path)

    async def close(self) -> None:
        """Drop the active client, then release the listener and the path.

        Safe to call multiple times.
        """
        if self._server is None:
            return
        server, self._server = self._server, None

        if self._client is not None:
            self._client.close()
            self._client = None
        for writer in list(self._parked):
            writer.close()
        self._parked.clear()

        server.close()
        await server.wait_closed()
        self._unlink()
        self._queue.put_nowait(LocalSourceError("Local socket closed"))
        logger.info("Closed %s", self._path)

    async def messages(self) -> AsyncIterator[str]:
        """Yield every chunk received from the active client."""
        if self._server is None:
            raise LocalSourceError("Local socket is not open")
        while True:
            item = await self._queue.get()
            if isinstance(item, Exception):
                raise item
            yield item

    async def _on_client(self, reader: asyncio.StreamReader, writer: asyncio.StreamWriter) -> None:
        if self._client is not None:
            await self._drain_parked(reader, writer)
            return

        self._client = writer
        logger.debug("Client connected on %s", self._path)
        try:
            while True:
                data = await reader.read(self._read_size)
                if not data:
                    break
                self._queue.put_nowait(data.decode("utf-8", errors="replace"))
        except OSError as e:
            self._queue.put_nowait(
                LocalSourceError(
                    f"Client connection failed: {e}",
                    code=errno.errorcode.get(e.errno or 0),
                )
            )
        finally:
            if self._client is writer:
                self._client = None
            writer.close()
            logger.debug("Client disconnected from %s", self._path)

    async def _drain_parked(self, reader: asyncio.StreamReader, writer: asyncio.StreamWriter) -> None:
        # Extra connections are read to EOF and discarded
        self._parked.add(writer)
        logger.debug("Ignoring extra connection on %s", self._path)
        try:
            while await reader.read(self._read_size):
                pass
        except OSError:
            logger.debug("Extra connection on %s failed", self._path)
        finally:
            self._parked.discard(writer)
            writer.close()

    def _unlink(self) -> None:
        with contextlib.suppress(FileNotFoundError):
            self._path.unlink()

    async def __aenter__(self) -> LocalCommandSource:
        await self.open()
        return self

    async def __aexit__(self, exc_type: type | None, exc_val: Exception | None, exc_tb: object) -> None:
        await self.close()


async def find_socket_holder(path: Path | str) -> str | None:
    """Describe the live process holding ``path``, or None if it is stale.

    Asks ``lsof`` first; if it is not installed, falls back to trying a
    connection, since only a live listener accepts one.
    """
    try:
        proc = await asyncio.create_subprocess_exec(
            "lsof", str(path),
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.DEVNULL,
        )
    except FileNotFoundError:
        logger.debug("lsof not available, probing %s by connecting", path)
        return await _probe_listener(path)

    stdout, _ = await proc.communicate()
    if proc.returncode == 0:
        return stdout.decode("utf-8", errors="replace").strip()
    return None


async def _probe_listener(path: Path | str) -> str | None:
    try:
        _, writer = await asyncio.open_unix_connection(str(path))
    except OSError:
        return None
    writer.close()
    with contextlib.suppress(OSError):
        await writer.wait_closed()
    return f"a live listener accepted a connection on {path}"

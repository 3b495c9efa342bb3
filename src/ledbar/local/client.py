"""Command client for the local endpoint, used by ``ledbar send``."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path

from ledbar.domain.models import Command

logger = logging.getLogger(__name__)


async def send_command(path: Path | str, command: Command, timeout: float = 2.0) -> None:
    """Write one command token to the endpoint and disconnect."""
    _, writer = await asyncio.wait_for(asyncio.open_unix_connection(str(path)), timeout)
    try:
        writer.write(command.value.encode("utf-8"))
        await asyncio.wait_for(writer.drain(), timeout)
    finally:
        writer.close()
        await writer.wait_closed()
    logger.debug("Sent %s to %s", command.value, path)

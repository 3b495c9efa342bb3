"""Wireless-network gate checked before every pipeline run."""

from __future__ import annotations

import asyncio
import logging
from typing import Sequence

logger = logging.getLogger(__name__)


class NetworkGate:
    """Passes only while the active wireless network matches ``ssid``.

    The network name is read from the stdout of ``command``. With no
    ``ssid`` configured the gate always passes.
    """

    def __init__(self, ssid: str | None = None, command: Sequence[str] = ("iwgetid", "-r")) -> None:
        self._ssid = ssid
        self._command = list(command)

    @property
    def configured(self) -> bool:
        return bool(self._ssid)

    async def check(self) -> bool:
        if not self.configured:
            return True
        current = await self.current_network()
        if current != self._ssid:
            logger.error("Not on network %s (current: %s)", self._ssid, current or "none")
            return False
        return True

    async def current_network(self) -> str | None:
        try:
            proc = await asyncio.create_subprocess_exec(
                *self._command,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.DEVNULL,
            )
        except OSError as e:
            logger.error("Cannot run %s: %s", self._command[0], e)
            return None
        stdout, _ = await proc.communicate()
        if proc.returncode != 0:
            return None
        return stdout.decode("utf-8", errors="replace").strip() or None

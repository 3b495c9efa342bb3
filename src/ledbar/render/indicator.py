"""Startup animation shown until a run classifies its first message."""

from __future__ import annotations

import asyncio
import logging

from ledbar.render.status import StatusOutput

logger = logging.getLogger(__name__)

INITIAL_FRAME = "..."
FRAMES = ("/..", ".-.", "..\\")


class StartupIndicator:
    """Cycles a three-frame animation on the status output.

    Usage::

        indicator = StartupIndicator(output, interval=0.5)
        indicator.start()
        ...
        indicator.stop()
    """

    def __init__(self, output: StatusOutput, interval: float = 0.5) -> None:
        self._output = output
        self._interval = interval
        self._task: asyncio.Task[None] | None = None

    @property
    def is_running(self) -> bool:
        return self._task is not None

    def start(self) -> None:
        if self._task is not None:
            return
        self._output.write(INITIAL_FRAME)
        self._task = asyncio.create_task(self._animate())

    def stop(self) -> None:
        """Stop the animation. Safe to call when it is not running."""
        if self._task is None:
            return
        self._task.cancel()
        self._task = None
        logger.debug("Startup indicator stopped")

    async def _animate(self) -> None:
        frame = 0
        while True:
            await asyncio.sleep(self._interval)
            self._output.write(FRAMES[frame % len(FRAMES)])
            frame += 1

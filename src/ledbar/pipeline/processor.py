"""Classification of merged messages and their side effects.

A raw message is either a state snapshot (a JSON object) or a command
token. Snapshots replace the held state and are rendered to the status
line; commands are forwarded to the remote channel relative to the held
state.
"""

from __future__ import annotations

import json
import logging
from typing import Callable

from pydantic import ValidationError

from ledbar.domain.commands import build_patch
from ledbar.domain.models import Command, LedConfig
from ledbar.remote.base import RemoteChannel
from ledbar.render.status import StatusOutput, format_status

logger = logging.getLogger(__name__)


class ClassificationError(Exception):
    """Raised for a message that is neither a snapshot nor a known command."""

    code = "ECLASSIFY"


def classify(raw: str) -> LedConfig | Command:
    """Turn one raw message into a snapshot or a command.

    Raises:
        ClassificationError: If the message is neither.
    """
    text = raw.strip()
    try:
        data = json.loads(text)
    except json.JSONDecodeError:
        data = None

    if isinstance(data, dict):
        try:
            return LedConfig.model_validate(data)
        except ValidationError as e:
            raise ClassificationError(f"Invalid state snapshot: {e}") from e

    try:
        return Command(text)
    except ValueError:
        raise ClassificationError(f"Unknown IPC message {text!r}") from None


class EventProcessor:
    """Handles merged messages for one pipeline run.

    Holds the current snapshot for the lifetime of the run only; a new
    processor is created on every restart. Messages are handled one at
    a time, so at most one forward is ever in flight.
    """

    def __init__(
        self,
        channel: RemoteChannel,
        output: StatusOutput,
        on_first_message: Callable[[], None] | None = None,
    ) -> None:
        self._channel = channel
        self._output = output
        self._on_first_message = on_first_message
        self._config: LedConfig | None = None
        self._handled = 0

    @property
    def config(self) -> LedConfig | None:
        return self._config

    @property
    def handled_count(self) -> int:
        return self._handled

    async def handle(self, raw: str) -> None:
        """Classify ``raw`` and apply it.

        Raises:
            ClassificationError: For unrecognized input.
            RemoteChannelError: If forwarding a command fails.
        """
        if not raw.strip():
            return
        message = classify(raw)

        self._handled += 1
        if self._handled == 1 and self._on_first_message is not None:
            self._on_first_message()

        if isinstance(message, LedConfig):
            self._config = message
            self._output.write(format_status(message))
        else:
            await self._forward(message)

    async def _forward(self, command: Command) -> None:
        if self._config is None:
            logger.warning("Ignoring %s: no state received yet", command.value)
            return
        await self._channel.forward(command, self._config)
        # Held until the next snapshot replaces it, so repeated commands stack
        self._config = self._config.merged(build_patch(command, self._config))

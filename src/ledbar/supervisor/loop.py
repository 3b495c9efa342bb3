"""The supervisor that owns the process lifetime.

Each pipeline run binds the local endpoint, opens the remote channel and
feeds the merged message stream through an ``EventProcessor``. Any error
ends the run; every resource the run opened is released, the error is
classified, and the run is retried:

    Idle -> Preflight -> Running -> Recovering -> Idle -> ...

A leftover endpoint socket with no live owner is deleted and retried
immediately. Everything else waits out a fixed backoff. Interrupt, quit
and terminate signals stop the process from any state.
"""

from __future__ import annotations

import asyncio
import contextlib
import enum
import errno
import logging
import signal
from pathlib import Path
from typing import Awaitable, Callable

from ledbar.config.settings import Settings
from ledbar.local.server import AddressInUseError, LocalCommandSource, find_socket_holder
from ledbar.pipeline.merge import merge_streams
from ledbar.pipeline.processor import EventProcessor
from ledbar.remote import create_channel
from ledbar.remote.base import RemoteChannel
from ledbar.render.indicator import StartupIndicator
from ledbar.render.status import RECOVERING_INDICATOR, StatusOutput
from ledbar.supervisor.gate import NetworkGate
from ledbar.utils.logging import setup_logging, teardown_logging

logger = logging.getLogger(__name__)

SHUTDOWN_SIGNALS = (signal.SIGINT, signal.SIGQUIT, signal.SIGTERM)


class SupervisorState(str, enum.Enum):
    IDLE = "idle"
    PREFLIGHT = "preflight"
    RUNNING = "running"
    RECOVERING = "recovering"
    STOPPED = "stopped"


class StartupError(Exception):
    """Raised when preflight fails in a way no retry can fix."""


class PipelineEndedError(Exception):
    """Raised when the merged stream ends without an error."""


def error_code(error: BaseException) -> str:
    """Short code for the log line describing a failed run."""
    if isinstance(error, OSError) and error.errno is not None:
        return errno.errorcode.get(error.errno, str(error.errno))
    code = getattr(error, "code", None)
    if code:
        return str(code)
    return type(error).__name__


class Supervisor:
    """Runs the pipeline forever, restarting it after every failure.

    Example usage::

        supervisor = Supervisor(load_settings())
        exit_code = asyncio.run(supervisor.run())
    """

    def __init__(
        self,
        settings: Settings,
        output: StatusOutput | None = None,
        channel_factory: Callable[[], RemoteChannel] | None = None,
        gate: NetworkGate | None = None,
        holder_probe: Callable[[Path], Awaitable[str | None]] = find_socket_holder,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
        handle_signals: bool = True,
    ) -> None:
        self._settings = settings
        self._output = output or StatusOutput()
        self._channel_factory = channel_factory or (lambda: create_channel(settings.remote))
        self._gate = gate or NetworkGate(settings.gate.ssid, settings.gate.command)
        self._holder_probe = holder_probe
        self._sleep = sleep
        self._handle_signals = handle_signals
        self._socket_path = Path(settings.local.socket_path)
        self._backoff = settings.supervisor.backoff
        self._state = SupervisorState.IDLE
        self._shutdown = asyncio.Event()
        self._shutdown_reason: str | None = None
        self._log_open = False
        self._run_count = 0
        self._failure_count = 0

    @property
    def state(self) -> SupervisorState:
        return self._state

    @property
    def run_count(self) -> int:
        return self._run_count

    @property
    def failure_count(self) -> int:
        return self._failure_count

    def request_shutdown(self, reason: str) -> None:
        """Stop the supervisor from any state, skipping pending backoff."""
        if self._shutdown_reason is None:
            self._shutdown_reason = reason
        self._shutdown.set()

    async def run(self) -> int:
        """Supervise until shutdown and return the process exit code.

        Returns 0 after a shutdown request and 1 after a startup failure.
        Any other error escaping the cycle is re-raised to the caller.
        """
        loop = asyncio.get_running_loop()
        if self._handle_signals:
            for sig in SHUTDOWN_SIGNALS:
                loop.add_signal_handler(sig, self.request_shutdown, sig.name)

        cycle = asyncio.create_task(self._cycle())
        stop = asyncio.create_task(self._shutdown.wait())
        try:
            await asyncio.wait({cycle, stop}, return_when=asyncio.FIRST_COMPLETED)
        finally:
            for task in (cycle, stop):
                task.cancel()
            await asyncio.gather(cycle, stop, return_exceptions=True)
            if self._handle_signals:
                for sig in SHUTDOWN_SIGNALS:
                    loop.remove_signal_handler(sig)
            self._state = SupervisorState.STOPPED

        try:
            if self._shutdown.is_set():
                logger.info("Quitting (%s)", self._shutdown_reason)
                return 0
            error = cycle.exception()
            if isinstance(error, StartupError):
                logger.error("Startup failed: %s", error)
                return 1
            raise error
        finally:
            teardown_logging()

    async def _cycle(self) -> None:
        while True:
            self._state = SupervisorState.PREFLIGHT
            await self._preflight()

            self._state = SupervisorState.RUNNING
            self._run_count += 1
            logger.info("Starting...")
            try:
                await self._run_pipeline()
            except asyncio.CancelledError:
                raise
            except Exception as e:
                self._state = SupervisorState.RECOVERING
                if await self._recover(e):
                    continue
                await self._sleep(self._backoff)
            self._state = SupervisorState.IDLE

    async def _preflight(self) -> None:
        if not await self._gate.check():
            raise StartupError("Network gate failed")

        if not self._log_open:
            log_file = self._settings.log_file
            try:
                setup_logging(self._settings.logging, log_file)
            except OSError as e:
                raise StartupError(f"Error opening logfile {log_file}: {e}") from e
            self._log_open = True
            logger.info("---------")

    async def _run_pipeline(self) -> None:
        local_config = self._settings.local
        indicator = StartupIndicator(self._output, self._settings.supervisor.indicator_interval)

        async with contextlib.AsyncExitStack() as stack:
            indicator.start()
            stack.callback(indicator.stop)

            local = await stack.enter_async_context(
                LocalCommandSource(self._socket_path, read_size=local_config.read_size)
            )
            channel = await stack.enter_async_context(self._channel_factory())
            processor = EventProcessor(channel, self._output, on_first_message=indicator.stop)

            merged = await stack.enter_async_context(
                contextlib.aclosing(merge_streams(local.messages(), channel.messages()))
            )
            async for raw in merged:
                await processor.handle(raw)

        raise PipelineEndedError("Loop ended unexpectedly")

    async def _recover(self, error: Exception) -> bool:
        """Log and remediate a failed run.

        Returns True when the run should be retried without backoff.
        """
        if isinstance(error, AddressInUseError):
            holder = await self._holder_probe(error.path)
            if holder is None:
                logger.info("Deleting old %s", error.path)
                with contextlib.suppress(FileNotFoundError):
                    error.path.unlink()
                return True
            logger.info("Someone else is using %s\n%s", error.path, holder)

        self._failure_count += 1
        logger.error("main loop error %s %s", error_code(error), error)
        logger.info("Restarting in %gs...", self._backoff)
        self._output.write(RECOVERING_INDICATOR)
        return False

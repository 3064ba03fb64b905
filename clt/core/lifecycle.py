"""
Signal and lifecycle handling for an active session.

    IDLE -> ACTIVE -> COMPLETED
                   -> KILLED

While ACTIVE, SIGTERM/SIGINT/SIGHUP kill the child shell and end the
program at once with 128 + signal number. Nothing else is cleaned up: a
partially written transcript stays as it is.
"""

import asyncio
import os
import signal
from enum import Enum
from typing import Callable, Optional

from clt.core.session import ShellSession
from clt.logging import get_clt_logger

logger = get_clt_logger(__name__)

WATCHED_SIGNALS = (signal.SIGTERM, signal.SIGINT, signal.SIGHUP)


class LifecycleState(Enum):
    IDLE = "idle"
    ACTIVE = "active"
    COMPLETED = "completed"
    KILLED = "killed"


def signal_exit_code(signum: int) -> int:
    """Conventional exit code for death by signal (143, 130, 129, ...)."""
    return 128 + int(signum)


class SignalGuard:
    """
    Async context manager that watches termination signals during a session.

    Args:
        session: Session whose shell is killed on a signal
        exit_func: Called with the exit code (default: os._exit)

    Example:
        async with SignalGuard(session):
            await driver.replay(commands, sink)
    """

    def __init__(self, session: ShellSession, exit_func: Optional[Callable[[int], None]] = None):
        self.session = session
        self.exit_func = exit_func or os._exit
        self.state = LifecycleState.IDLE
        self._queue: Optional[asyncio.Queue] = None
        self._watcher: Optional[asyncio.Task] = None
        self._loop: Optional[asyncio.AbstractEventLoop] = None

    async def __aenter__(self) -> "SignalGuard":
        self._loop = asyncio.get_running_loop()
        self._queue = asyncio.Queue()
        for signum in WATCHED_SIGNALS:
            self._loop.add_signal_handler(signum, self._queue.put_nowait, signum)
        self._watcher = asyncio.create_task(self._watch())
        self.state = LifecycleState.ACTIVE
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        self._remove_handlers()
        if self._watcher is not None:
            self._watcher.cancel()
            try:
                await self._watcher
            except asyncio.CancelledError:
                pass
        if self.state == LifecycleState.ACTIVE:
            self.state = LifecycleState.COMPLETED

    def _remove_handlers(self) -> None:
        if self._loop is None:
            return
        for signum in WATCHED_SIGNALS:
            self._loop.remove_signal_handler(signum)

    async def _watch(self) -> None:
        signum = await self._queue.get()
        self.terminate(signum)

    def terminate(self, signum: int) -> None:
        """Kill the child, announce the signal and exit."""
        self.state = LifecycleState.KILLED
        self.session.kill()
        name = signal.Signals(signum).name
        code = signal_exit_code(signum)
        logger.notice(f"Received {name}, child killed, exiting with {code}")
        self.exit_func(code)

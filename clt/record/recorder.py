"""
Interactive terminal recorder.

The user types commands line by line; each line is sent to the shell
followed by the completion marker. Shell output is mirrored to the
terminal while it is also collected into transcript records.
"""

import asyncio
import sys
import threading
import time
from typing import Callable, Optional

from clt.core.filters import strip_escapes
from clt.core.session import ShellSession
from clt.core.transcript import Record, TranscriptWriter
from clt.errors import RecordingError
from clt.logging import get_clt_logger

logger = get_clt_logger(__name__)


class CommandMailbox:
    """
    Single-slot channel for the command being executed.

    The forward loop puts a command before writing it to the shell and
    blocks while the previous one has not been taken. The capture loop
    takes it when that command's marker arrives.
    """

    def __init__(self):
        self._slot: asyncio.Queue = asyncio.Queue(maxsize=1)

    async def put(self, command: str) -> None:
        await self._slot.put(command)

    def take(self) -> str:
        """Take the pending command, "" if none."""
        try:
            return self._slot.get_nowait()
        except asyncio.QueueEmpty:
            return ""


class StdinLineSource:
    """
    Lines from the real terminal.

    A daemon thread does the blocking reads so the event loop stays free,
    and the program can exit while the thread still waits for input.
    """

    def __init__(self, stream=None):
        self.stream = stream or sys.stdin
        self._queue: Optional[asyncio.Queue] = None
        self._thread: Optional[threading.Thread] = None

    def start(self, loop: asyncio.AbstractEventLoop) -> None:
        self._queue = asyncio.Queue()
        self._thread = threading.Thread(target=self._pump, args=(loop,), daemon=True)
        self._thread.start()

    def _pump(self, loop: asyncio.AbstractEventLoop) -> None:
        while True:
            line = self.stream.readline()
            loop.call_soon_threadsafe(self._queue.put_nowait, line)
            if not line:
                return

    async def readline(self) -> str:
        """Next line including newline, "" at end of input."""
        if self._queue is None:
            self.start(asyncio.get_running_loop())
        return await self._queue.get()


class InteractiveRecorder:
    """
    Record mode driver.

    Runs a forward loop (user -> shell) and a capture loop (shell -> user
    and transcript) until input ends or the shell exits.

    Example:
        recorder = InteractiveRecorder(session, sink)
        await recorder.run(StdinLineSource())
    """

    def __init__(
        self,
        session: ShellSession,
        sink: TranscriptWriter,
        mirror: Optional[Callable[[str], None]] = None,
    ):
        self.session = session
        self.sink = sink
        self.mirror = mirror or _write_stdout
        self.mailbox = CommandMailbox()

    async def run(self, source) -> None:
        """
        Record until end of input, a typed `exit` or shell exit.

        Raises:
            RecordingError: I/O failure on the shell channel
        """
        forward = asyncio.create_task(self.forward_loop(source))
        capture = asyncio.create_task(self.capture_loop())

        try:
            done, _ = await asyncio.wait({forward, capture}, return_when=asyncio.FIRST_COMPLETED)
            if forward in done:
                forward.result()
                # Input finished first: let the shell drain its remaining output
                await capture
            else:
                capture.result()
        finally:
            for task in (forward, capture):
                if not task.done():
                    task.cancel()
            await asyncio.gather(forward, capture, return_exceptions=True)

    async def forward_loop(self, source) -> None:
        """Send each non-blank input line to the shell until end of input or `exit`."""
        while True:
            line = await source.readline()
            if not line:
                logger.debug("End of input, closing shell input")
                self.session.close_input()
                return

            command = line.rstrip("\r\n")
            if not command.strip():
                continue
            if command.strip().lower() == "exit":
                # the shell has exit disabled; typing it ends the recording
                logger.debug("exit typed, closing shell input")
                self.session.close_input()
                return

            await self.mailbox.put(command)
            try:
                await self.session.send(command)
            except (OSError, ConnectionError) as e:
                raise RecordingError(f"cannot write to shell: {e}") from e

    async def capture_loop(self) -> None:
        """Mirror shell output and cut records at each marker."""
        detector = self.session.detector
        output_lines = []
        last_mark = time.monotonic()

        while True:
            try:
                raw = await self.session.transport.readline()
            except (OSError, ConnectionError, ValueError) as e:
                raise RecordingError(f"cannot read from shell: {e}") from e
            if not raw:
                return

            line = raw.decode("utf-8", errors="replace")
            before, is_boundary = detector.split_line(line)

            if not is_boundary:
                self.mirror(line)
                output_lines.append(line)
                continue

            if before:
                self.mirror(before + "\n")
                output_lines.append(before)

            now = time.monotonic()
            command = self.mailbox.take()
            if command:
                output = strip_escapes("".join(output_lines).encode()).decode("utf-8", errors="replace")
                record = Record(
                    command=command,
                    output=output.rstrip("\r\n"),
                    duration_ms=int((now - last_mark) * 1000),
                )
                self.sink.write(record)
                logger.command(command, record.duration_ms)

            output_lines = []
            last_mark = now


def _write_stdout(text: str) -> None:
    sys.stdout.write(text)
    sys.stdout.flush()

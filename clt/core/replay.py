"""
Command replay driver.

Feeds commands to the session one at a time and captures each one's output
up to the completion marker:

1. Send command + marker
2. Skip echoed input (when the transport echoes)
3. Accumulate output until the marker
4. Emit an input/output/duration record
"""

import asyncio
import time
from dataclasses import dataclass, field
from typing import List

from clt.core.filters import clean_output
from clt.core.session import ShellSession
from clt.core.transcript import Record, TranscriptWriter
from clt.errors import TestExecutionFailed
from clt.logging import get_clt_logger

logger = get_clt_logger(__name__)


@dataclass
class ReplayResult:
    """
    Result of a replay run.

    Contains the emitted records and total command time.
    """

    records: List[Record] = field(default_factory=list)

    @property
    def total_ms(self) -> int:
        return sum(record.duration_ms for record in self.records)

    @property
    def command_count(self) -> int:
        return len(self.records)


class ReplayDriver:
    """
    Strictly sequential replay: command N+1 is never written before the
    marker of command N has been read.

    Example:
        driver = ReplayDriver(session)
        result = await driver.replay(["echo hello", "echo world"], sink)
    """

    def __init__(self, session: ShellSession, read_size: int = 4096):
        self.session = session
        self.read_size = read_size

    async def replay(self, commands: List[str], sink: TranscriptWriter, delay_ms: int = 0) -> ReplayResult:
        """
        Replay commands and write one record per command to sink.

        Args:
            commands: Flattened command list
            sink: Where records go
            delay_ms: Pause between commands

        Raises:
            TestExecutionFailed: The shell exited before a command finished
        """
        result = ReplayResult()

        for index, command in enumerate(commands):
            if index and delay_ms > 0:
                await asyncio.sleep(delay_ms / 1000)

            record = await self.run_command(command)
            sink.write(record)
            result.records.append(record)
            logger.command(command, record.duration_ms)

        return result

    async def run_command(self, command: str) -> Record:
        """Run one command and capture its output."""
        transport = self.session.transport
        detector = self.session.detector

        start = time.monotonic()
        try:
            written = await self.session.send(command)
        except (OSError, ConnectionError) as e:
            raise TestExecutionFailed(f"shell closed its input before {_first_line(command)!r}: {e}") from e

        # Bytes echoed back by the terminal are not output
        to_discard = written if transport.echoes_input else 0
        buffer = b""

        while True:
            chunk = await transport.read(self.read_size)
            if not chunk:
                raise TestExecutionFailed(
                    f"shell exited before {_first_line(command)!r} completed"
                )

            if to_discard:
                skip = min(to_discard, len(chunk))
                to_discard -= skip
                chunk = chunk[skip:]
                if not chunk:
                    continue

            buffer += chunk
            boundary = detector.find(buffer)
            if boundary >= 0:
                break

        duration_ms = int((time.monotonic() - start) * 1000)
        return Record(command=command, output=clean_output(buffer[:boundary]), duration_ms=duration_ms)


def _first_line(command: str) -> str:
    return command.splitlines()[0] if command else ""

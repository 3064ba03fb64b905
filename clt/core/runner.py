"""
Runner - wires the engine together for one replay or record run.

Replay:  compile -> extract commands -> replay -> finalize
Record:  interactive capture -> finalize
"""

import asyncio
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Union

from clt.config import ShellConfig
from clt.core.finalizer import finalize
from clt.core.lifecycle import SignalGuard
from clt.core.replay import ReplayDriver
from clt.core.session import ShellSession
from clt.core.transcript import Record, TranscriptWriter
from clt.logging import get_clt_logger
from clt.parser.compiler import compile_file, extract_commands
from clt.record.recorder import InteractiveRecorder, StdinLineSource

logger = get_clt_logger(__name__)


@dataclass
class RunResult:
    """
    Result of a replay or record run.

    Contains the records written and the total command time.
    """

    output_file: Path
    records: List[Record] = field(default_factory=list)
    total_ms: int = 0

    @property
    def command_count(self) -> int:
        return len(self.records)


def replay(
    input_file: Union[str, Path],
    output_file: Union[str, Path],
    delay_ms: int = 0,
    config: Optional[ShellConfig] = None,
) -> RunResult:
    """
    Replay a transcript and write the finalized result to output_file.

    Raises:
        ValidationError: input_file does not exist
        CompilationError: input_file or one of its blocks is invalid
        SetupError: shell could not be started
        TestExecutionFailed: shell died before a command completed
    """
    config = config or ShellConfig.from_env()
    commands = extract_commands(compile_file(input_file, config.block_extension))
    logger.info("Replaying %d command(s) from %s", len(commands), input_file)

    return asyncio.run(_replay(commands, Path(output_file), delay_ms, config))


async def _replay(commands: List[str], output_file: Path, delay_ms: int, config: ShellConfig) -> RunResult:
    session = ShellSession(config)
    sink = TranscriptWriter(output_file)

    async with SignalGuard(session):
        try:
            await session.start()
            with sink:
                await ReplayDriver(session).replay(commands, sink, delay_ms)
        finally:
            await session.close()

    total_ms = finalize(output_file, sink.total_ms)
    return RunResult(output_file=output_file, records=sink.records, total_ms=total_ms)


def record(
    output_file: Union[str, Path],
    config: Optional[ShellConfig] = None,
    source=None,
) -> RunResult:
    """
    Record an interactive session into output_file.

    Args:
        output_file: Transcript to create
        config: Shell settings
        source: Line source for user input (default: the real stdin)

    Raises:
        SetupError: shell could not be started
        RecordingError: I/O failure while capturing
    """
    config = config or ShellConfig.from_env()
    return asyncio.run(_record(Path(output_file), config, source or StdinLineSource()))


async def _record(output_file: Path, config: ShellConfig, source) -> RunResult:
    session = ShellSession(config)
    sink = TranscriptWriter(output_file)

    async with SignalGuard(session):
        try:
            await session.start()
            with sink:
                await InteractiveRecorder(session, sink).run(source)
        finally:
            await session.close()

    total_ms = finalize(output_file, sink.total_ms)
    return RunResult(output_file=output_file, records=sink.records, total_ms=total_ms)

"""
Transcript records and the raw file writer.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, TextIO, Union

from clt.parser.statement import Statement, format_duration, format_statement


@dataclass
class Record:
    """One command with its captured output and timing."""

    command: str
    output: str
    duration_ms: int
    percentage: float = 0.0

    def to_lines(self) -> List[str]:
        lines = [format_statement(Statement.INPUT), self.command, format_statement(Statement.OUTPUT)]
        if self.output:
            lines.append(self.output)
        lines.append(format_duration(self.duration_ms, self.percentage))
        return lines

    def render(self) -> str:
        return "\n".join(self.to_lines()) + "\n"


class TranscriptWriter:
    """
    Output sink for drivers.

    Appends each record to the raw transcript as soon as it is complete, so
    a run that is killed keeps everything captured so far. Percentages are
    left at 0 here; the finalizer fills them in.

    Example:
        with TranscriptWriter("output.rec") as sink:
            sink.write(Record("echo hi", "hi", 3))
        finalize("output.rec", sink.total_ms)
    """

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)
        self.records: List[Record] = []
        self.total_ms = 0
        self._fh: Optional[TextIO] = None

    def open(self) -> "TranscriptWriter":
        self._fh = open(self.path, "w", encoding="utf-8")
        return self

    def write(self, record: Record) -> None:
        if self._fh is None:
            self.open()
        self._fh.write(record.render())
        self._fh.flush()
        self.records.append(record)
        self.total_ms += record.duration_ms

    def close(self) -> None:
        if self._fh is not None:
            self._fh.close()
            self._fh = None

    def __enter__(self):
        return self.open()

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

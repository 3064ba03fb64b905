"""
Output finalizer - turn a raw transcript into its durable form.

- drop blank lines
- fill in duration percentages
- strip a trailing interactive `exit`
- prepend the header
- atomically replace the file
"""

import os
import tempfile
from pathlib import Path
from typing import Dict, List, Optional, Union

from clt.errors import MalformedDuration, MalformedStatement, RecordingError
from clt.parser.statement import Statement, format_duration, is_statement_line, parse_duration, parse_statement

HEADER = "Recorded with clt-rec. Edit the output sections to refine expectations; durations are informational."
TOTAL_PREFIX = "Time taken for test: "


def finalize(path: Union[str, Path], total_ms: Optional[int] = None) -> int:
    """
    Finalize a raw transcript in place.

    Args:
        path: Raw transcript file
        total_ms: Total run time used for percentages (default: sum of all
                  durations in the file). When it is 0, as with a run of
                  0ms commands, every percentage is written as 0.00%
                  and they do not add up to 100.

    Returns:
        Total milliseconds written to the header

    Raises:
        RecordingError: If the file cannot be read or replaced
    """
    path = Path(path)
    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        raise RecordingError(f"cannot read raw transcript: {e}", path=path, phase="finalize") from e

    lines = [line.rstrip() for line in raw.splitlines() if line.strip()]

    durations = _durations(lines)
    if total_ms is None:
        total_ms = sum(durations.values())

    for i, ms in durations.items():
        percentage = (ms / total_ms * 100) if total_ms > 0 else 0.0
        lines[i] = format_duration(ms, percentage)

    if lines and "exit" in lines[-1].lower():
        lines.pop()

    content = "\n".join([HEADER, f"{TOTAL_PREFIX}{total_ms}ms"] + lines) + "\n"
    _atomic_write(path, content)
    return total_ms


def _durations(lines: List[str]) -> Dict[int, int]:
    """Milliseconds of each duration statement, by line index."""
    durations = {}
    for i, line in enumerate(lines):
        if not is_statement_line(line):
            continue
        try:
            statement, arg = parse_statement(line.strip())
            if statement != Statement.DURATION:
                continue
            durations[i] = parse_duration(arg).milliseconds
        except (MalformedStatement, MalformedDuration):
            # captured output that merely looks like a statement
            continue
    return durations


def _atomic_write(path: Path, content: str) -> None:
    """Write to a sibling temporary file and rename it over path."""
    fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=path.parent)
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(content)
            f.flush()
            os.fsync(f.fileno())
        os.replace(tmp_name, path)
    except OSError as e:
        try:
            os.unlink(tmp_name)
        except FileNotFoundError:
            pass
        raise RecordingError(f"cannot write transcript: {e}", path=path, phase="finalize") from e

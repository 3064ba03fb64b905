"""
Statement grammar for transcript files.

A statement is a single line of the form

    ––– name –––
    ––– name: argument –––

where the delimiter is three EN DASH characters. Lines that are not
statements are content (commands, output, comments).
"""

import re
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple

from clt.errors import MalformedDuration, MalformedStatement

DELIMITER = "–––"

STATEMENT_RE = re.compile(r"^––– ([A-Za-z]+)(?:: (.+?))? –––$")
DURATION_RE = re.compile(r"^(\S+)ms \((\S+)%\)$")


class Statement(Enum):
    """Statement kinds understood in transcript files."""

    INPUT = "input"
    OUTPUT = "output"
    COMMENT = "comment"
    BLOCK = "block"
    DURATION = "duration"


# Statements that are meaningless without an argument
_ARGUMENT_REQUIRED = {Statement.BLOCK, Statement.DURATION}


@dataclass(frozen=True)
class Duration:
    """Execution time of one command and its share of the whole run."""

    milliseconds: int
    percentage: float = 0.0

    def __str__(self) -> str:
        return f"{self.milliseconds}ms ({self.percentage:.2f}%)"


def is_statement_line(line: str) -> bool:
    """Check if line is framed like a statement (it may still be malformed)."""
    line = line.strip()
    return line.startswith(DELIMITER + " ") and line.endswith(" " + DELIMITER)


def parse_statement(line: str) -> Tuple[Statement, Optional[str]]:
    """
    Parse a statement line.

    Args:
        line: Line without trailing newline

    Returns:
        Tuple of (statement, argument or None)

    Raises:
        MalformedStatement: If the line does not follow the grammar
    """
    match = STATEMENT_RE.match(line)
    if not match:
        raise MalformedStatement(line)

    name, arg = match.group(1), match.group(2)
    try:
        statement = Statement(name.lower())
    except ValueError:
        raise MalformedStatement(line, reason=f"unknown statement {name!r}") from None

    if statement in _ARGUMENT_REQUIRED and arg is None:
        raise MalformedStatement(line, reason=f"{statement.value} requires an argument")

    return statement, arg


def format_statement(statement: Statement, arg: Optional[str] = None) -> str:
    """
    Format a statement line, the inverse of parse_statement.

    Example:
        format_statement(Statement.BLOCK, "common/init")
        # '––– block: common/init –––'
    """
    if arg is None:
        return f"{DELIMITER} {statement.value} {DELIMITER}"
    return f"{DELIMITER} {statement.value}: {arg} {DELIMITER}"


def parse_duration(value: str) -> Duration:
    """
    Parse a duration argument like "120ms (12.50%)".

    Raises:
        MalformedDuration: If either number is missing or not numeric
    """
    match = DURATION_RE.match(value.strip())
    if not match:
        raise MalformedDuration(value)
    try:
        return Duration(int(match.group(1)), float(match.group(2)))
    except ValueError:
        raise MalformedDuration(value) from None


def format_duration(milliseconds: int, percentage: float = 0.0) -> str:
    """Format a complete duration statement line."""
    return format_statement(Statement.DURATION, str(Duration(milliseconds, percentage)))

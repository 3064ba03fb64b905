__version__ = "0.1.0"

from clt.errors import CltError, ErrorKind
from clt.config import ShellConfig
from clt.parser import Statement, compile_file, format_statement, parse_statement
from clt.core import ReplayDriver, ShellSession, TranscriptWriter, finalize
from clt.logging import get_logger, get_clt_logger, setup_logging

"""
Foundations of clt:
    Statement is one marker line of a transcript (input, output, comment, block, duration).
    compile_file flattens a transcript, inlining blocks.
    ShellSession owns the child shell a run drives.
    ReplayDriver feeds commands to the session and captures their output.
    TranscriptWriter collects records; finalize turns them into the durable file.
"""

__all__ = [
    "CltError",
    "ErrorKind",
    "ShellConfig",
    "Statement",
    "compile_file",
    "format_statement",
    "parse_statement",
    "ReplayDriver",
    "ShellSession",
    "TranscriptWriter",
    "finalize",
    "get_logger",
    "get_clt_logger",
    "setup_logging",
]

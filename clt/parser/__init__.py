"""
Transcript parsing.

Components:
- statement: line grammar (––– name[: arg] –––)
- compiler: block expansion and command extraction
- structured: typed step tree for editing tools
"""

from clt.parser.statement import (
    Duration,
    Statement,
    format_duration,
    format_statement,
    is_statement_line,
    parse_duration,
    parse_statement,
)
from clt.parser.compiler import Compiler, compile_file, extract_commands
from clt.parser.structured import TestStep, TestStructure, read_test_file, to_rec, write_test_file

__all__ = [
    "Duration",
    "Statement",
    "format_duration",
    "format_statement",
    "is_statement_line",
    "parse_duration",
    "parse_statement",
    "Compiler",
    "compile_file",
    "extract_commands",
    "TestStep",
    "TestStructure",
    "read_test_file",
    "to_rec",
    "write_test_file",
]

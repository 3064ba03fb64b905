"""
Block compiler - flatten a transcript before replay.

    ––– block: common/login –––

is replaced by the compiled content of common/login.recb, resolved relative
to the directory of the file that contains the reference. Blocks may nest.
Duration statements are dropped since replay produces fresh ones.
"""

from pathlib import Path
from typing import List, Optional, Union

from clt.config import BLOCK_EXTENSION
from clt.errors import (
    BlockNotFound,
    CircularDependency,
    CompilationError,
    InputNotFound,
    MalformedStatement,
)
from clt.logging import get_logger
from clt.parser.statement import Statement, is_statement_line, parse_statement

logger = get_logger(__name__)


class Compiler:
    """
    Recursive block expander.

    The path stack holds the canonical paths from the root file down to the
    file being compiled, so a block that includes one of its ancestors is
    reported instead of recursing forever.

    Example:
        text = Compiler().compile("tests/basic.rec")
    """

    def __init__(self, block_extension: str = BLOCK_EXTENSION):
        self.block_extension = block_extension
        self._stack: List[Path] = []

    def compile(self, path: Union[str, Path]) -> str:
        """
        Compile a transcript file into flattened text.

        Raises:
            InputNotFound: Root file does not exist
            BlockNotFound: A referenced block file does not exist
            CircularDependency: A block includes itself
            MalformedStatement: A statement line does not parse
        """
        path = Path(path)
        if not path.is_file():
            raise InputNotFound(path)

        self._stack = []
        return self._compile_file(path.resolve()).rstrip().lstrip("\n")

    def _compile_file(self, path: Path) -> str:
        if path in self._stack:
            raise CircularDependency(path)

        self._stack.append(path)
        try:
            return self._expand(path)
        finally:
            self._stack.pop()

    def _expand(self, path: Path) -> str:
        try:
            lines = path.read_text(encoding="utf-8").splitlines()
        except (OSError, UnicodeDecodeError) as e:
            raise CompilationError(f"cannot read file: {e}", path=path) from e

        result = []
        for line in lines:
            if not is_statement_line(line):
                result.append(line + "\n")
                continue

            try:
                statement, arg = parse_statement(line.strip())
            except MalformedStatement as e:
                raise MalformedStatement(e.line, reason=e.reason, path=path) from None

            if statement == Statement.BLOCK:
                block_path = self._resolve_block(path.parent, arg)
                logger.debug("Expanding block %s", block_path)
                result.append(self._compile_file(block_path).strip() + "\n")
            elif statement == Statement.DURATION:
                continue
            else:
                result.append(line + "\n")

        return "".join(result)

    def _resolve_block(self, base_dir: Path, name: str) -> Path:
        block_path = base_dir / f"{name}{self.block_extension}"
        if not block_path.is_file():
            raise BlockNotFound(block_path)
        return block_path.resolve()


def compile_file(path: Union[str, Path], block_extension: str = BLOCK_EXTENSION) -> str:
    """Compile a transcript file, expanding all blocks."""
    return Compiler(block_extension).compile(path)


def extract_commands(text: str) -> List[str]:
    """
    Collect the commands of all input statements in order.

    Content before the first statement (a description) and the bodies of
    output and comment statements are ignored.

    Args:
        text: Flattened transcript (see compile_file)

    Returns:
        List of command strings; multi-line inputs are joined with newlines
    """
    commands = []
    current: Optional[List[str]] = None

    for line in text.splitlines():
        if is_statement_line(line):
            if current is not None:
                _flush(current, commands)
            statement, _ = parse_statement(line.strip())
            current = [] if statement == Statement.INPUT else None
        elif current is not None:
            current.append(line)

    if current is not None:
        _flush(current, commands)

    return commands


def _flush(lines: List[str], commands: List[str]) -> None:
    command = "\n".join(lines).strip("\n")
    if command.strip():
        commands.append(command)

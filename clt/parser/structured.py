"""
Structured view of a transcript.

Turns a .rec file into a tree of typed steps for editing tools and back.
Block steps carry their resolved nested steps when read, but are written
back as a single block reference line.
"""

import json
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple, Union

from clt.config import BLOCK_EXTENSION
from clt.errors import BlockNotFound, CircularDependency, CompilationError, InputNotFound
from clt.parser.statement import Statement, format_statement, is_statement_line, parse_statement

STEP_TYPES = ("input", "output", "comment", "block")


@dataclass
class TestStep:
    """One statement of a transcript with its content."""

    __test__ = False

    type: str
    args: List[str] = field(default_factory=list)
    content: Optional[str] = None
    steps: Optional[List["TestStep"]] = None


@dataclass
class TestStructure:
    """Whole transcript: optional description plus steps."""

    __test__ = False

    description: Optional[str] = None
    steps: List[TestStep] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), indent=2, ensure_ascii=False)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TestStructure":
        return cls(
            description=data.get("description"),
            steps=[_step_from_dict(step) for step in data.get("steps", [])],
        )


def _step_from_dict(data: Dict[str, Any]) -> TestStep:
    nested = data.get("steps")
    return TestStep(
        type=data["type"],
        args=list(data.get("args") or []),
        content=data.get("content"),
        steps=[_step_from_dict(step) for step in nested] if nested is not None else None,
    )


def read_test_file(
    path: Union[str, Path],
    block_extension: str = BLOCK_EXTENSION,
) -> TestStructure:
    """
    Read a .rec file into a TestStructure.

    Raises:
        InputNotFound: File does not exist
        BlockNotFound: A referenced block does not exist
        CircularDependency: Blocks reference each other
        MalformedStatement: A statement does not parse
    """
    path = Path(path)
    if not path.is_file():
        raise InputNotFound(path)
    return _Reader(block_extension).read(path.resolve())


class _Reader:
    def __init__(self, block_extension: str):
        self.block_extension = block_extension
        self.stack: List[Path] = []

    def read(self, path: Path) -> TestStructure:
        if path in self.stack:
            raise CircularDependency(path)
        self.stack.append(path)
        try:
            try:
                content = path.read_text(encoding="utf-8")
            except OSError as e:
                raise CompilationError(f"cannot read file: {e}", path=path) from e
            return self.parse(content, path.parent)
        finally:
            self.stack.pop()

    def parse(self, content: str, base_dir: Path) -> TestStructure:
        lines = content.splitlines()
        i = 0

        # Everything before the first statement is the description
        description_lines: List[str] = []
        while i < len(lines) and not is_statement_line(lines[i]):
            if description_lines or lines[i].strip():
                description_lines.append(lines[i])
            i += 1
        while description_lines and not description_lines[-1].strip():
            description_lines.pop()

        structure = TestStructure(description="\n".join(description_lines) or None)

        while i < len(lines):
            line = lines[i].strip()
            if not line:
                i += 1
                continue
            if not is_statement_line(line):
                raise CompilationError(f"unexpected line outside a statement: {line!r}")

            statement, arg = parse_statement(line)
            if statement == Statement.DURATION:
                i += 1
                continue

            if statement == Statement.BLOCK:
                block_path = base_dir / f"{arg}{self.block_extension}"
                if not block_path.is_file():
                    raise BlockNotFound(block_path)
                nested = self.read(block_path.resolve())
                structure.steps.append(TestStep(type="block", args=[arg], steps=nested.steps))
                i += 1
                continue

            body, i = _collect_content(lines, i + 1)
            args = [arg] if arg is not None else []
            structure.steps.append(TestStep(type=statement.value, args=args, content=body))

        return structure


def _collect_content(lines: List[str], start: int) -> Tuple[str, int]:
    i = start
    while i < len(lines) and not is_statement_line(lines[i]):
        i += 1
    return "\n".join(lines[start:i]).rstrip(), i


def to_rec(structure: TestStructure) -> str:
    """
    Convert a TestStructure back to .rec text.

    Raises:
        CompilationError: Unknown step type or block without a path
    """
    lines = []
    if structure.description:
        lines.append(structure.description)
        if structure.steps:
            lines.append("")

    for step in structure.steps:
        if step.type not in STEP_TYPES:
            raise CompilationError(f"unknown step type: {step.type!r}")

        if step.type == "block":
            if not step.args:
                raise CompilationError("block step missing path argument")
            lines.append(format_statement(Statement.BLOCK, step.args[0]))
            continue

        statement = Statement(step.type)
        arg = step.args[0] if step.type == "output" and step.args else None
        lines.append(format_statement(statement, arg))
        if step.content:
            lines.append(step.content)

    return "\n".join(lines) + "\n"


def write_test_file(path: Union[str, Path], structure: TestStructure) -> None:
    """Write a TestStructure as a .rec file, creating parent directories."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(to_rec(structure), encoding="utf-8")

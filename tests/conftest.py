"""
Shared fixtures for clt tests.
"""

import asyncio
from typing import Dict, List, Optional

import pytest

from clt.transport.base import Transport


class FakeShell(Transport):
    """
    In-memory stand-in for a shell process.

    Understands just enough: `echo X` prints X, commands listed in
    outputs print their canned output, everything else prints nothing.
    Optionally echoes written bytes back first and splits the output
    stream into small chunks.
    """

    def __init__(
        self,
        outputs: Optional[Dict[str, str]] = None,
        echoes_input: bool = False,
        chunk_size: Optional[int] = None,
        die_on: Optional[str] = None,
    ):
        self.outputs = outputs or {}
        self.echoes_input = echoes_input
        self.chunk_size = chunk_size
        self.die_on = die_on
        self.written: List[bytes] = []
        self.started = False
        self.killed = False
        self.input_closed = False
        self._chunks: asyncio.Queue = asyncio.Queue()
        self._pending = b""
        self._eof = False

    @property
    def pid(self) -> Optional[int]:
        return 4242 if self.started else None

    async def start(self) -> None:
        self.started = True

    async def write(self, data: bytes) -> None:
        if self._eof or self.input_closed:
            raise BrokenPipeError("shell is gone")
        self.written.append(data)

        response = data if self.echoes_input else b""
        died = False
        for line in data.decode().splitlines():
            if line == self.die_on:
                died = True
                break
            if line.startswith("echo "):
                response += line[5:].encode() + b"\n"
            elif line in self.outputs:
                response += self.outputs[line].encode()

        self._enqueue(response)
        if died:
            self._chunks.put_nowait(b"")

    def _enqueue(self, data: bytes) -> None:
        size = self.chunk_size or len(data) or 1
        for i in range(0, len(data), size):
            self._chunks.put_nowait(data[i:i + size])

    async def read(self, size: int = 4096) -> bytes:
        if not self._pending:
            if self._eof:
                return b""
            chunk = await self._chunks.get()
            if not chunk:
                self._eof = True
                return b""
            self._pending = chunk
        data, self._pending = self._pending[:size], self._pending[size:]
        return data

    async def readline(self) -> bytes:
        line = b""
        while not line.endswith(b"\n"):
            data = await self.read(1)
            if not data:
                break
            line += data
        return line

    def close_input(self) -> None:
        if not self.input_closed:
            self.input_closed = True
            self._chunks.put_nowait(b"")

    def kill(self) -> None:
        self.killed = True
        self._chunks.put_nowait(b"")

    async def wait(self) -> int:
        return -9 if self.killed else 0

    @property
    def sent_text(self) -> str:
        return b"".join(self.written).decode()


class FakeLineSource:
    """Scripted user input for the record driver."""

    def __init__(self, lines: List[str]):
        self.lines = list(lines)

    async def readline(self) -> str:
        if not self.lines:
            return ""
        return self.lines.pop(0)


@pytest.fixture
def fake_shell():
    """Factory for FakeShell transports."""
    return FakeShell


@pytest.fixture
def line_source():
    """Factory for scripted user input."""
    return FakeLineSource


@pytest.fixture
def write_file(tmp_path):
    """Write a file under tmp_path and return its path."""

    def _write(name: str, content: str):
        path = tmp_path / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
        return path

    return _write

"""
Frame boundary detection.

The shell gives no signal when a command finishes, so after every command
the session also asks the shell to print a marker. Whatever appears before
the marker is the command's output.
"""

import uuid
from abc import ABC, abstractmethod
from typing import Optional, Tuple


class FrameDetector(ABC):
    """Decides where one command's output ends."""

    @abstractmethod
    def command_suffix(self) -> str:
        """Shell code appended after every command, newline-terminated."""
        pass

    @abstractmethod
    def find(self, buffer: bytes) -> int:
        """
        Locate the end of the current frame in accumulated output.

        Returns:
            Offset where the boundary starts once the whole boundary line
            has arrived, or -1 if not seen yet
        """
        pass

    @abstractmethod
    def split_line(self, line: str) -> Tuple[str, bool]:
        """
        Check one output line for the boundary.

        Returns:
            Tuple of (text before the boundary, boundary found). When no
            boundary is found the whole line is returned.
        """
        pass


class SentinelFrameDetector(FrameDetector):
    """
    Marks completion with `echo <sentinel>`.

    The sentinel is unique per process. A command whose output contains it
    verbatim ends its frame early.
    """

    def __init__(self, sentinel: Optional[str] = None):
        self.sentinel = sentinel or f"__CLT_DONE_{uuid.uuid4().hex}__"
        self._sentinel_bytes = self.sentinel.encode()

    def command_suffix(self) -> str:
        return f"echo {self.sentinel}\n"

    def find(self, buffer: bytes) -> int:
        index = buffer.find(self._sentinel_bytes)
        # echo terminates the marker with a newline; wait for it so it
        # does not leak into the next frame
        if index < 0 or buffer.find(b"\n", index) < 0:
            return -1
        return index

    def split_line(self, line: str) -> Tuple[str, bool]:
        stripped = line.rstrip("\r\n")
        if stripped.endswith(self.sentinel):
            return stripped[: -len(self.sentinel)], True
        return line, False

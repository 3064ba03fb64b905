"""
Base transport interface.

A transport is the byte channel to one running shell process. All
transport implementations must implement this interface.
"""

from abc import ABC, abstractmethod
from typing import Optional


class Transport(ABC):
    """
    Abstract byte channel to a child shell.

    Implementations:
    - LocalTransport: shell spawned locally with piped stdio

    Attributes:
        echoes_input: True if every byte written comes back on the output
                      stream before the command's own output (terminal
                      echo). Pipes do not echo.
    """

    echoes_input: bool = False

    @abstractmethod
    async def start(self) -> None:
        """
        Spawn the process.

        Raises:
            SetupError: If the process cannot be started
        """
        pass

    @abstractmethod
    async def write(self, data: bytes) -> None:
        """
        Write bytes to the process input and wait until they are flushed.

        Raises:
            OSError: If the pipe is closed
        """
        pass

    @abstractmethod
    async def read(self, size: int = 4096) -> bytes:
        """
        Read up to size bytes of output.

        Returns:
            Bytes read, b"" at end of stream
        """
        pass

    @abstractmethod
    async def readline(self) -> bytes:
        """
        Read one line of output including the newline.

        Returns:
            Line bytes, b"" at end of stream
        """
        pass

    @abstractmethod
    def close_input(self) -> None:
        """Close process input so the shell sees end of file."""
        pass

    @abstractmethod
    def kill(self) -> None:
        """
        Kill the process immediately.

        Killing a process that already exited is a no-op.
        """
        pass

    @abstractmethod
    async def wait(self) -> int:
        """Wait for the process to exit and return its exit code."""
        pass

    @property
    @abstractmethod
    def pid(self) -> Optional[int]:
        """Process id, None before start."""
        pass

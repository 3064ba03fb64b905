"""
Shell session controller.

Owns the child shell for the lifetime of a run: spawns it, writes the
initialization command, and tears it down exactly once.
"""

from typing import Optional

from clt.config import ShellConfig
from clt.core.framing import FrameDetector, SentinelFrameDetector
from clt.errors import SetupError
from clt.logging import get_logger
from clt.transport import LocalTransport, Transport

logger = get_logger(__name__)


class ShellSession:
    """
    One child shell plus its piped stdin/stdout.

    Example:
        session = ShellSession(ShellConfig.from_env())
        await session.start()
        written = await session.send("ls -la")
        ...
        await session.close()
    """

    def __init__(
        self,
        config: Optional[ShellConfig] = None,
        transport: Optional[Transport] = None,
        detector: Optional[FrameDetector] = None,
    ):
        self.config = config or ShellConfig()
        self.transport = transport or LocalTransport(self.config.shell, env=self.config.environment())
        self.detector = detector or SentinelFrameDetector()
        self._closed = False

    @property
    def pid(self) -> Optional[int]:
        return self.transport.pid

    async def start(self) -> "ShellSession":
        """
        Spawn the shell and initialize it.

        Raises:
            SetupError: Spawn, init write or handshake failed
        """
        await self.transport.start()
        logger.debug("Shell started (pid %s)", self.pid)

        try:
            await self.transport.write(self.config.init_command().encode())
            await self._handshake()
        except (OSError, ConnectionError) as e:
            self.kill()
            raise SetupError(f"cannot initialize shell: {e}") from e

        return self

    async def _handshake(self) -> None:
        """Wait for the first marker so a shell that died during init is caught."""
        suffix = self.detector.command_suffix().encode()
        await self.transport.write(suffix)

        to_discard = len(suffix) if self.transport.echoes_input else 0
        buffer = b""
        while True:
            chunk = await self.transport.read()
            if not chunk:
                self.kill()
                output = buffer.decode(errors="replace").strip()
                raise SetupError(f"shell exited during initialization: {output or 'no output'}")
            skip = min(to_discard, len(chunk))
            to_discard -= skip
            buffer += chunk[skip:]
            if self.detector.find(buffer) >= 0:
                return

    async def send(self, command: str) -> int:
        """
        Write a command followed by the completion marker.

        Returns:
            Number of bytes written
        """
        payload = (command.rstrip("\n") + "\n" + self.detector.command_suffix()).encode()
        await self.transport.write(payload)
        return len(payload)

    def close_input(self) -> None:
        self.transport.close_input()

    def kill(self) -> None:
        """Kill the shell and everything it started. Safe to call repeatedly."""
        self.transport.kill()

    async def close(self) -> int:
        """
        End the session once: close input, kill the process group
        (detached jobs included) and reap the shell.
        """
        if self._closed:
            return 0
        self._closed = True
        self.close_input()
        self.kill()
        return await self.transport.wait()

    async def __aenter__(self):
        return await self.start()

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

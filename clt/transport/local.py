"""
Local transport - run the shell on the local machine.
"""

import asyncio
import os
import signal
from typing import Dict, List, Optional

from clt.errors import SetupError
from clt.transport.base import Transport


class LocalTransport(Transport):
    """
    Shell spawned with asyncio subprocess pipes.

    stdin and stdout are piped, stderr is merged into stdout. The child
    gets its own session so kill() can take down everything it started.
    """

    echoes_input = False

    def __init__(self, argv: List[str], env: Optional[Dict[str, str]] = None, cwd: Optional[str] = None):
        """
        Args:
            argv: Shell command line
            env: Environment for the child (default: inherit)
            cwd: Working directory (default: current)
        """
        self.argv = argv
        self.env = env
        self.cwd = cwd
        self.process: Optional[asyncio.subprocess.Process] = None

    @property
    def pid(self) -> Optional[int]:
        return self.process.pid if self.process else None

    async def start(self) -> None:
        try:
            self.process = await asyncio.create_subprocess_exec(
                *self.argv,
                stdin=asyncio.subprocess.PIPE,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.STDOUT,
                env=self.env,
                cwd=self.cwd,
                start_new_session=True,
            )
        except OSError as e:
            raise SetupError(f"cannot spawn shell {' '.join(self.argv)}: {e}") from e

    async def write(self, data: bytes) -> None:
        self.process.stdin.write(data)
        await self.process.stdin.drain()

    async def read(self, size: int = 4096) -> bytes:
        return await self.process.stdout.read(size)

    async def readline(self) -> bytes:
        return await self.process.stdout.readline()

    def close_input(self) -> None:
        if self.process and not self.process.stdin.is_closing():
            self.process.stdin.close()

    def kill(self) -> None:
        if self.process is None or self.process.returncode is not None:
            return
        try:
            os.killpg(self.process.pid, signal.SIGKILL)
        except ProcessLookupError:
            pass
        except PermissionError:
            # Session leader gone and the group id reused; kill just the child
            try:
                self.process.kill()
            except ProcessLookupError:
                pass

    async def wait(self) -> int:
        if self.process is None:
            return 0
        return await self.process.wait()

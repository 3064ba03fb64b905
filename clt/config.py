"""
Configuration for clt sessions.

Defaults can be overridden from the environment:

    CLT_SHELL   Shell command line used for sessions
                (default: /usr/bin/env bash --noprofile --norc)
"""

import os
import shlex
from dataclasses import dataclass, field
from typing import List

DEFAULT_SHELL = ["/usr/bin/env", "bash", "--noprofile", "--norc"]
DEFAULT_PATH = "/bin:/usr/bin:/usr/local/bin:/sbin:/usr/local/sbin"
DEFAULT_OUTPUT = "output.rec"
BLOCK_EXTENSION = ".recb"


@dataclass
class ShellConfig:
    """
    Settings for the child shell and the files it produces.

    Attributes:
        shell: Command line that starts the shell
        prompt: Value for PS1/PS2 (printable, never expected in output)
        lang: Exported LANG
        path: Exported PATH
        columns: Fixed terminal width so output does not wrap
        block_extension: File extension of block files
    """

    shell: List[str] = field(default_factory=lambda: list(DEFAULT_SHELL))
    prompt: str = "clt> "
    lang: str = "en_US.UTF-8"
    path: str = DEFAULT_PATH
    columns: int = 10000
    block_extension: str = BLOCK_EXTENSION

    @classmethod
    def from_env(cls) -> "ShellConfig":
        """Build config from defaults plus CLT_* environment overrides."""
        config = cls()
        shell = os.environ.get("CLT_SHELL")
        if shell:
            config.shell = shlex.split(shell)
        return config

    def init_command(self) -> str:
        """
        Shell code written once right after spawning.

        Fixes the prompt, locale, PATH and width, silences job control,
        neutralizes the exit builtin, merges stderr and defines `detach`.
        """
        prompt = shlex.quote(self.prompt)
        parts = [
            f"export PS1={prompt} PS2={prompt}",
            f"export LANG={shlex.quote(self.lang)} PATH={shlex.quote(self.path)} COLUMNS={self.columns}",
            "set +m",
            "detach() { \"$@\" </dev/null >/dev/null 2>&1 & }",
            "enable -n exit enable",
            "exec 2>&1",
        ]
        return "; ".join(parts) + "\n"

    def environment(self) -> dict:
        """Environment for the spawned shell process."""
        env = os.environ.copy()
        env["LANG"] = self.lang
        env["COLUMNS"] = str(self.columns)
        env["TERM"] = "dumb"
        return env

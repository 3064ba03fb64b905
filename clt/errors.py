"""
Error taxonomy for clt.

Every failure the engine can classify carries an ErrorKind, and every kind
maps to a fixed process exit code:

    ValidationError      -> 5  (bad or missing input path)
    CompilationError     -> 2  (malformed statement, missing/circular block)
    SetupError           -> 3  (shell failed to spawn or initialize)
    RecordingError       -> 4  (I/O failure during an interactive capture)
    TestExecutionFailed  -> 1  (replay ran but a command never completed)

Anything unclassified exits with 1. Signal-driven termination does not go
through this module at all (see clt.core.lifecycle).
"""

from enum import Enum
from pathlib import Path
from typing import Optional, Union


class ErrorKind(Enum):
    """Failure categories and their exit codes."""

    TEST_FAILED = 1
    COMPILATION = 2
    SETUP = 3
    RECORDING = 4
    VALIDATION = 5

    @property
    def exit_code(self) -> int:
        return self.value


class CltError(Exception):
    """
    Base class for all classified clt failures.

    Args:
        message: Human readable description
        path: File the failure relates to, if any
        phase: Phase of the run (compile, setup, replay, record, finalize)
    """

    kind: ErrorKind = ErrorKind.TEST_FAILED
    phase: str = "run"

    def __init__(
        self,
        message: str,
        path: Optional[Union[str, Path]] = None,
        phase: Optional[str] = None,
    ):
        super().__init__(message)
        self.message = message
        self.path = str(path) if path is not None else None
        if phase is not None:
            self.phase = phase

    @property
    def exit_code(self) -> int:
        return self.kind.exit_code

    def __str__(self) -> str:
        location = f" ({self.path})" if self.path else ""
        return f"{self.phase} error: {self.message}{location}"


class ValidationError(CltError):
    """Input could not be accepted before any work started."""

    kind = ErrorKind.VALIDATION
    phase = "validation"


class InputNotFound(ValidationError):
    """The transcript passed on the command line does not exist."""

    def __init__(self, path: Union[str, Path]):
        super().__init__("input file does not exist", path=path)


class CompilationError(CltError):
    """Transcript or block file could not be compiled."""

    kind = ErrorKind.COMPILATION
    phase = "compile"


class MalformedStatement(CompilationError):
    """A line framed like a statement does not follow the grammar."""

    def __init__(self, line: str, reason: str = "malformed statement", path=None):
        super().__init__(f"{reason}: {line!r}", path=path)
        self.line = line
        self.reason = reason


class MalformedDuration(CompilationError):
    """A duration statement carries a non-numeric value."""

    def __init__(self, value: str, path=None):
        super().__init__(f"malformed duration: {value!r}", path=path)
        self.value = value


class BlockNotFound(CompilationError):
    """A referenced block file does not exist."""

    def __init__(self, path: Union[str, Path]):
        super().__init__("block file not found", path=path)


class CircularDependency(CompilationError):
    """A block references itself directly or transitively."""

    def __init__(self, path: Union[str, Path]):
        super().__init__("circular block reference", path=path)


class SetupError(CltError):
    """The shell could not be spawned or initialized."""

    kind = ErrorKind.SETUP
    phase = "setup"


class RecordingError(CltError):
    """I/O failure while capturing an interactive session."""

    kind = ErrorKind.RECORDING
    phase = "record"


class TestExecutionFailed(CltError):
    """Replay started but a command did not run to completion."""

    __test__ = False  # not a pytest test class

    kind = ErrorKind.TEST_FAILED
    phase = "replay"

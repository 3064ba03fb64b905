"""
Recording mode - capture an interactive shell session as a transcript.

Usage:
    clt rec -O tests/new.rec
    # type commands, then `exit` or ^D to save
"""

from clt.record.recorder import CommandMailbox, InteractiveRecorder, StdinLineSource

__all__ = [
    "CommandMailbox",
    "InteractiveRecorder",
    "StdinLineSource",
]

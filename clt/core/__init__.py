"""
Core clt engine.

Exports the session, drivers and finalizer.
"""

from clt.core.finalizer import finalize
from clt.core.framing import FrameDetector, SentinelFrameDetector
from clt.core.lifecycle import LifecycleState, SignalGuard
from clt.core.replay import ReplayDriver, ReplayResult
from clt.core.session import ShellSession
from clt.core.transcript import Record, TranscriptWriter

__all__ = [
    "finalize",
    "FrameDetector",
    "SentinelFrameDetector",
    "LifecycleState",
    "SignalGuard",
    "ReplayDriver",
    "ReplayResult",
    "ShellSession",
    "Record",
    "TranscriptWriter",
]

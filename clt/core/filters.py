"""
Byte-level cleanup of captured output.

Not a terminal emulator: escape sequences are removed, not interpreted.
"""

from enum import Enum
from typing import Optional

ESC = 0x1B
BEL = 0x07
NUL = 0x00
CSI_INTRODUCER = ord("[")
OSC_INTRODUCER = ord("]")
STRING_TERMINATOR = ord("\\")


class FilterState(Enum):
    NORMAL = "normal"
    IN_ESCAPE = "in_escape"


class EscapeFilter:
    """
    Two-state machine removing ESC sequences, NUL and BEL bytes.

    The byte right after ESC is kept as the introducer. An OSC sequence
    ("]") is swallowed up to BEL or ESC "\\"; any other sequence ends at
    BEL or a final byte (0x40-0x7E) following the introducer, or at the
    introducer itself unless it is "[". State is kept between feed() calls
    so a sequence split across reads is still removed.

    Example:
        f = EscapeFilter()
        f.feed(b"\\x1b[31mred\\x1b[0m")  # b"red"
    """

    def __init__(self):
        self.state = FilterState.NORMAL
        self._introducer: Optional[int] = None
        self._previous: Optional[int] = None

    def feed(self, data: bytes) -> bytes:
        out = bytearray()
        for byte in data:
            if self.state == FilterState.NORMAL:
                if byte == ESC:
                    self.state = FilterState.IN_ESCAPE
                    self._introducer = None
                elif byte not in (NUL, BEL):
                    out.append(byte)
            elif self._introducer is None:
                self._introducer = byte
                if byte not in (CSI_INTRODUCER, OSC_INTRODUCER) and _is_final(byte):
                    self.state = FilterState.NORMAL
            elif self._introducer == OSC_INTRODUCER:
                if byte == BEL or (byte == STRING_TERMINATOR and self._previous == ESC):
                    self.state = FilterState.NORMAL
            elif _is_final(byte):
                self.state = FilterState.NORMAL
            self._previous = byte
        return bytes(out)

    def reset(self) -> None:
        self.state = FilterState.NORMAL
        self._introducer = None
        self._previous = None


def _is_final(byte: int) -> bool:
    return byte == BEL or 0x40 <= byte <= 0x7E


def strip_escapes(data: bytes) -> bytes:
    """Filter a complete buffer in one go."""
    return EscapeFilter().feed(data)


def clean_output(data: bytes) -> str:
    """Decode captured bytes for the transcript: filtered, no trailing newlines."""
    return strip_escapes(data).decode("utf-8", errors="replace").rstrip("\r\n")

"""
Transport layer - byte channels to a child shell.
"""

from clt.transport.base import Transport
from clt.transport.local import LocalTransport

__all__ = ["Transport", "LocalTransport"]

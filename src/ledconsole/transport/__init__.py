"""Transport module for ledconsole.

Carries commands to the remote server and delivers inbound messages and
connection-state changes back through callbacks.

Public API:
    Transport -- Abstract base class
    TransportError -- Raised when a send fails
    TcpTransport -- asyncio TCP client
"""

from ledconsole.transport.base import Transport, TransportError

__all__ = ["Transport", "TransportError", "TcpTransport"]


def __getattr__(name: str) -> type:
    """Lazy import for concrete implementations."""
    if name == "TcpTransport":
        from ledconsole.transport.tcp import TcpTransport
        return TcpTransport
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")

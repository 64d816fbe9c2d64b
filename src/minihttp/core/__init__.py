"""
=============================================================================
CORE NETWORKING
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │ SOCKET SERVER (socket_server.py)                                    │
    │ ─────────────────────────────────────────────────────────────────── │
    │ Binds 0.0.0.0:4221 (by default), accepts connections, hands each    │
    │ one to a callback without waiting for it.                           │
    │ Raises BindError / AcceptError, both fatal.                         │
    └─────────────────────────────────────────────────────────────────────┘

    ┌─────────────────────────────────────────────────────────────────────┐
    │ CONNECTION (connection.py)                                          │
    │ ─────────────────────────────────────────────────────────────────── │
    │ One accepted socket: one read, one write, always closed.            │
    │ Raises ConnectionReadError when the read fails.                     │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
"""

from .socket_server import SocketServer, ServerError, BindError, AcceptError
from .connection import Connection, ConnectionState, ConnectionReadError

__all__ = [
    "SocketServer",
    "ServerError",
    "BindError",
    "AcceptError",
    "Connection",
    "ConnectionState",
    "ConnectionReadError",
]

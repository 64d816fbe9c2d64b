"""
=============================================================================
CLIENT CONNECTION
=============================================================================

Wraps one accepted client socket for exactly one request/response.

=============================================================================
ONE REQUEST PER CONNECTION
=============================================================================

    ┌─────────────────────────────────────────────────────────────────┐
    │                    Connection lifetime                          │
    ├─────────────────────────────────────────────────────────────────┤
    │                                                                  │
    │   accept()                                                       │
    │      │                                                           │
    │      ▼                                                           │
    │   recv(buffer_size)        one read, never looped               │
    │      │                                                           │
    │      ▼                                                           │
    │   parse → route → build    (done by HTTPServer)                  │
    │      │                                                           │
    │      ▼                                                           │
    │   sendall(response)        one write                             │
    │      │                                                           │
    │      ▼                                                           │
    │   close()                  always, via the context manager       │
    │                                                                  │
    └─────────────────────────────────────────────────────────────────┘

No keep-alive, no pipelining, no second read. A request bigger than the
buffer is cut at buffer_size bytes.

=============================================================================
CONNECTION STATE MACHINE
=============================================================================

    NEW ──► READING ──► PROCESSING ──► WRITING ──► CLOSED
     │         │             │                        ▲
     └─────────┴─────────────┴────────────────────────┘
                (read failure, parse failure, error)

=============================================================================
"""

import socket
import time
import logging
from enum import Enum
from dataclasses import dataclass, field
from typing import Optional
import uuid


logger = logging.getLogger(__name__)


class ConnectionReadError(ConnectionError):
    """The single read from the client failed; no response will be sent."""


class ConnectionState(Enum):
    """Where a connection is in its one-request lifetime."""
    NEW = "new"                # Accepted, nothing read yet
    READING = "reading"        # Inside the single recv()
    PROCESSING = "processing"  # Parsing and routing
    WRITING = "writing"        # Inside sendall()
    CLOSED = "closed"          # Socket released


@dataclass
class Connection:
    """
    Represents a client connection.

    Attributes:
        socket: The accepted client socket.
        address: Client's (ip, port) tuple.
        id: Short identifier used to correlate log lines.
        state: Current ConnectionState.
        created_at: Timestamp when the connection was accepted.
        buffer_size: Size of the single read.
        timeout: Socket timeout in seconds, None for fully blocking.
    """

    socket: socket.socket
    address: tuple[str, int]

    id: str = field(default_factory=lambda: str(uuid.uuid4())[:8])
    state: ConnectionState = ConnectionState.NEW
    created_at: float = field(default_factory=time.time)

    buffer_size: int = 1024
    timeout: Optional[float] = None

    def __post_init__(self):
        # Accepted sockets may inherit the listener's accept timeout
        self.socket.settimeout(self.timeout)

    @property
    def client_ip(self) -> str:
        return self.address[0]

    @property
    def age(self) -> float:
        """Seconds since the connection was accepted."""
        return time.time() - self.created_at

    # =========================================================================
    # READING
    # =========================================================================

    def read_request(self) -> bytes:
        """
        Perform the one fixed-size read.

        Returns:
            Whatever the client sent in that read; empty bytes if the
            client closed without sending anything.

        Raises:
            ConnectionReadError: If recv() fails or times out.
        """
        self.state = ConnectionState.READING
        try:
            data = self.socket.recv(self.buffer_size)
        except OSError as e:
            raise ConnectionReadError(f"Error reading from {self.client_ip}: {e}") from e

        self.state = ConnectionState.PROCESSING
        return data

    # =========================================================================
    # WRITING
    # =========================================================================

    def send_response(self, data: bytes) -> bool:
        """
        Write the full response with a single sendall().

        Returns:
            True if the bytes were handed to the kernel, False if the
            client had already gone away.
        """
        self.state = ConnectionState.WRITING
        try:
            self.socket.sendall(data)
            return True
        except OSError as e:
            logger.warning(f"[{self.id}] Send failed: {e}")
            return False

    # =========================================================================
    # CLOSING
    # =========================================================================

    def close(self):
        """
        Close the connection.

        1. shutdown(SHUT_WR) sends FIN so the client sees end-of-response.
        2. Briefly drain anything still unread (e.g. the tail of a request
           larger than the buffer) so the kernel doesn't answer with RST
           and discard the response we just sent.
        3. close() releases the descriptor.
        """
        if self.state == ConnectionState.CLOSED:
            return

        try:
            self.socket.shutdown(socket.SHUT_WR)
        except OSError:
            pass  # Peer already gone

        try:
            self.socket.settimeout(0.5)
            while self.socket.recv(1024):
                pass
        except OSError:
            pass  # socket.timeout is an OSError

        try:
            self.socket.close()
        except OSError:
            pass

        self.state = ConnectionState.CLOSED
        logger.debug(f"[{self.id}] Connection closed after {self.age * 1000:.1f}ms")

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Close on every exit path."""
        self.close()
        return False

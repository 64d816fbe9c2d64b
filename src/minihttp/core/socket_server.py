"""
=============================================================================
LISTENER LOOP
=============================================================================

Binds the listening socket and accepts connections forever, handing each
one off without waiting for it to be served.

=============================================================================
SOCKET LIFECYCLE
=============================================================================

    socket() ──► bind() ──► listen() ──► accept() ──┐
                   │                        ▲        │
                   │                        └────────┘  hand off, loop
                   ▼
               BindError  (fatal: the CLI exits with status 1)

    accept() failing for any reason other than the 1-second poll
    timeout raises AcceptError, which is also fatal. There is no retry.

=============================================================================
SHUTDOWN
=============================================================================

accept() uses a 1-second timeout so the loop can notice shutdown()
being called from another thread or from a SIGINT/SIGTERM handler.
A timeout is not an accept failure; the loop just goes round again.

=============================================================================
"""

import socket
import signal
import logging
import threading
from typing import Optional, Callable, Tuple

from ..config import ServerConfig
from .connection import Connection


logger = logging.getLogger(__name__)


class ServerError(Exception):
    """Fatal listener failure."""


class BindError(ServerError):
    """The listening socket could not be bound."""


class AcceptError(ServerError):
    """accept() failed while the server was running."""


class SocketServer:
    """
    Low-level TCP listener.

    Usage:
        def handle_connection(conn: Connection):
            threading.Thread(target=serve, args=(conn,)).start()

        server = SocketServer(config)
        server.start(handle_connection)  # Blocks until shutdown()

    The callback must return quickly: the accept loop is single-threaded
    and blocks only on accept().
    """

    ACCEPT_POLL_INTERVAL = 1.0

    def __init__(self, config: ServerConfig):
        self.config = config
        self._socket: Optional[socket.socket] = None
        self._running = False
        self._started = threading.Event()
        self._original_handlers: dict = {}
        self._bound_port: Optional[int] = None

    @property
    def address(self) -> Tuple[str, int]:
        """Bound (host, port); the real port once started with port 0."""
        return (self.config.host, self._bound_port or self.config.port)

    def _create_socket(self) -> socket.socket:
        """Create the TCP socket with SO_REUSEADDR and the accept poll timeout."""
        sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)

        # Restart without waiting for TIME_WAIT to expire
        sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)

        sock.settimeout(self.ACCEPT_POLL_INTERVAL)
        return sock

    def _setup_signals(self):
        """Turn SIGINT/SIGTERM into shutdown(). Only possible on the main thread."""
        if threading.current_thread() is not threading.main_thread():
            return

        def shutdown_handler(signum, frame):
            signal_name = signal.Signals(signum).name
            logger.info(f"Received {signal_name}, initiating shutdown...")
            self.shutdown()

        self._original_handlers[signal.SIGTERM] = signal.signal(signal.SIGTERM, shutdown_handler)
        self._original_handlers[signal.SIGINT] = signal.signal(signal.SIGINT, shutdown_handler)

    def _restore_signals(self):
        for sig, handler in self._original_handlers.items():
            signal.signal(sig, handler)
        self._original_handlers.clear()

    def start(self, connection_handler: Callable[[Connection], None]):
        """
        Bind, listen and run the accept loop.

        Blocks until shutdown() is called.

        Raises:
            BindError: If the address cannot be bound.
            AcceptError: If accept() fails while running.
        """
        self._socket = self._create_socket()

        try:
            self._socket.bind((self.config.host, self.config.port))
            self._socket.listen(self.config.backlog)
        except OSError as e:
            logger.error(f"Failed to bind to {self.config.address}: {e}")
            self._socket.close()
            self._socket = None
            raise BindError(f"Failed to bind to {self.config.address}: {e}") from e

        self._bound_port = self._socket.getsockname()[1]
        self._running = True
        self._setup_signals()

        logger.info(f"Server listening on {self.config.host}:{self._bound_port}")
        self._started.set()

        try:
            self._accept_loop(connection_handler)
        finally:
            self._cleanup()

    def _accept_loop(self, connection_handler: Callable[[Connection], None]):
        while self._running:
            try:
                client_socket, client_address = self._socket.accept()
            except socket.timeout:
                continue
            except OSError as e:
                if not self._running:
                    break  # Socket closed by shutdown
                logger.error(f"Error accepting connection: {e}")
                raise AcceptError(f"Error accepting connection: {e}") from e

            logger.debug(f"Accepted connection from {client_address[0]}:{client_address[1]}")

            conn = Connection(
                socket=client_socket,
                address=client_address,
                buffer_size=self.config.buffer_size,
                timeout=self.config.timeout,
            )
            connection_handler(conn)

    def shutdown(self):
        """Stop the accept loop. Safe to call more than once and from any thread."""
        logger.info("Shutting down socket server...")
        self._running = False

    def _cleanup(self):
        self._running = False
        self._restore_signals()

        if self._socket:
            try:
                self._socket.close()
            except OSError:
                pass
            self._socket = None

        self._started.clear()
        logger.info("Socket server stopped")

    def wait_until_started(self, timeout: Optional[float] = None) -> bool:
        """Block until the socket is listening. Returns False on timeout."""
        return self._started.wait(timeout)

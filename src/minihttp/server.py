"""
=============================================================================
HTTP SERVER
=============================================================================

Ties the listener, the connection wrapper and the HTTP core together.

=============================================================================
REQUEST FLOW
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │                                                                      │
    │   SocketServer (main thread)                                         │
    │        │  accept()                                                   │
    │        ▼                                                             │
    │   _handle_connection(conn)  ──► new thread, return immediately       │
    │                                      │                               │
    │                                      ▼                               │
    │                              _process_connection(conn)               │
    │                                      │                               │
    │        ┌─────────────────────────────┼─────────────────────────┐     │
    │        │ with conn:                  ▼                         │     │
    │        │   read_request()   fails → log, close, no response    │     │
    │        │   parse()          fails → 400 Bad Request            │     │
    │        │   router.handle()  raises → 500 (logged)              │     │
    │        │   build_response()                                    │     │
    │        │   send_response()                                     │     │
    │        │ (closed on every path)                                │     │
    │        └───────────────────────────────────────────────────────┘     │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
CONCURRENCY
=============================================================================

One thread per accepted connection, nothing shared between them except
the served directory on disk. Two requests for the same file name race
at the filesystem; no lock is taken.

Threads are daemons: stopping the server does not wait for in-flight
connections, and a client that never sends keeps its thread blocked in
recv() unless a timeout is configured.

=============================================================================
"""

import logging
import os
import threading
import time
from typing import Optional

from .accesslog import AccessLogger
from .config import ServerConfig
from .core import SocketServer, Connection, ConnectionReadError
from .http import (
    HTTPParseError,
    RequestParser,
    Router,
    bad_request,
    build_response,
    create_router,
    internal_error,
)


logger = logging.getLogger(__name__)


class HTTPServer:
    """
    The minimal HTTP/1.1 server.

    Usage:
        server = HTTPServer(ServerConfig(directory="/tmp/files"))
        server.run()  # Blocks until SIGINT/SIGTERM or shutdown()

    Pass a Router to serve something other than the four fixed routes
    (tests do this).
    """

    def __init__(self, config: Optional[ServerConfig] = None, router: Optional[Router] = None):
        self.config = config or ServerConfig()
        self.config.validate()

        self._socket_server = SocketServer(self.config)
        self._parser = RequestParser()
        self._router = router or create_router(self.config.directory)
        self._access_log = AccessLogger(self.config.log_format)

    @property
    def router(self) -> Router:
        return self._router

    @property
    def address(self) -> tuple[str, int]:
        """Bound (host, port)."""
        return self._socket_server.address

    # =========================================================================
    # SERVER LIFECYCLE
    # =========================================================================

    def run(self):
        """
        Start the server (blocking).

        Raises:
            BindError: If the listen address cannot be bound.
            AcceptError: If accept() fails; the server does not retry.
        """
        self._setup_logging()
        self._check_directory()

        logger.info(f"Starting HTTP server on {self.config.address}")
        try:
            self._socket_server.start(self._handle_connection)
        except KeyboardInterrupt:
            logger.info("Received keyboard interrupt")
        finally:
            logger.info("Server stopped")

    def shutdown(self):
        """Stop accepting connections; run() returns within about a second."""
        self._socket_server.shutdown()

    def wait_until_started(self, timeout: Optional[float] = None) -> bool:
        return self._socket_server.wait_until_started(timeout)

    def _setup_logging(self):
        level = getattr(logging, self.config.log_level.upper(), logging.INFO)

        logging.basicConfig(
            level=level,
            format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
        logging.getLogger("minihttp").setLevel(level)

    def _check_directory(self):
        directory = self.config.directory
        if directory is None:
            logger.warning("No directory configured; /files requests will return 404")
        elif not os.path.isdir(directory):
            logger.warning(f"Directory {directory!r} does not exist; /files requests will return 404")
        else:
            logger.info(f"Serving files from directory: {directory}")

    # =========================================================================
    # CONNECTION HANDLING
    # =========================================================================

    def _handle_connection(self, conn: Connection):
        """Spawn a thread for the connection and return to accept() at once."""
        thread = threading.Thread(
            target=self._process_connection,
            args=(conn,),
            name=f"conn-{conn.id}",
            daemon=True,
        )
        thread.start()

    def _process_connection(self, conn: Connection):
        """Read, parse, route, build, write, close. Runs in its own thread."""
        with conn:
            try:
                raw_request = conn.read_request()
            except ConnectionReadError as e:
                logger.warning(f"[{conn.id}] {e}")
                return

            if not raw_request:
                logger.debug(f"[{conn.id}] Client closed without sending a request")
                return

            start = time.time()
            method, path, user_agent = "-", "-", ""

            try:
                request = self._parser.parse(raw_request, conn.address)
            except HTTPParseError as e:
                logger.warning(f"[{conn.id}] Malformed request: {e}")
                outcome = bad_request()
            else:
                method, path, user_agent = request.method, request.path, request.user_agent
                logger.debug(f"[{conn.id}] {request}")
                try:
                    outcome = self._router.handle(request)
                except Exception as e:
                    logger.exception(f"[{conn.id}] Handler error: {e}")
                    outcome = internal_error()

            if conn.send_response(build_response(outcome)):
                self._access_log.log(
                    conn.id,
                    conn.client_ip,
                    method,
                    path,
                    user_agent,
                    outcome.status,
                    len(outcome.body),
                    (time.time() - start) * 1000,
                )


def create_app(config: Optional[ServerConfig] = None) -> HTTPServer:
    """Create a server with the four fixed routes."""
    return HTTPServer(config)

"""
=============================================================================
SERVER CONFIGURATION
=============================================================================

Everything the server needs to know, read once at startup and never
changed while it runs.

=============================================================================
CONFIGURATION SOURCES
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │                    CONFIGURATION HIERARCHY                          │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   Priority (highest to lowest):                                     │
    │                                                                      │
    │   1. Command-line arguments                                         │
    │      └── python -m minihttp --directory /tmp/files                  │
    │                                                                      │
    │   2. Environment variables                                          │
    │      └── MINIHTTP_DIRECTORY=/tmp/files python -m minihttp           │
    │                                                                      │
    │   3. Default values (in this dataclass)                             │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

The served directory is handed to the file route when the router is
built. Nothing reads it from process arguments at request time.

=============================================================================
"""

import os
from dataclasses import dataclass
from typing import Optional


LOG_FORMATS = ("text", "json")


@dataclass
class ServerConfig:
    """
    Configuration for the HTTP server.

    =========================================================================
    CONFIGURATION GROUPS
    =========================================================================

    NETWORK
    - host, port, backlog, buffer_size, timeout

    FILES
    - directory

    LOGGING
    - log_level, log_format

    =========================================================================
    """

    # ─────────────────────────────────────────────────────────────────────
    # NETWORK SETTINGS
    # ─────────────────────────────────────────────────────────────────────

    host: str = "0.0.0.0"
    """Address to bind. All interfaces by default."""

    port: int = 4221
    """TCP port to listen on."""

    backlog: int = 128
    """Accept queue length passed to listen()."""

    buffer_size: int = 1024
    """
    Size of the one and only read per connection.
    Requests larger than this are truncated, not drained.
    """

    timeout: Optional[float] = None
    """
    Per-connection socket timeout in seconds.
    None = block forever on the read, matching a plain blocking socket.
    """

    # ─────────────────────────────────────────────────────────────────────
    # FILES
    # ─────────────────────────────────────────────────────────────────────

    directory: Optional[str] = None
    """
    Directory that /files/{name} reads from and writes to.
    Without it every file request answers 404.
    """

    # ─────────────────────────────────────────────────────────────────────
    # LOGGING
    # ─────────────────────────────────────────────────────────────────────

    log_level: str = "INFO"
    """DEBUG, INFO, WARNING, ERROR or CRITICAL."""

    log_format: str = "text"
    """Access log format: 'text' (one readable line) or 'json'."""

    @property
    def address(self) -> str:
        """host:port as a single string, for logs."""
        return f"{self.host}:{self.port}"

    @classmethod
    def from_env(cls) -> "ServerConfig":
        """
        Create configuration from environment variables.

        =====================================================================
        ENVIRONMENT VARIABLES
        =====================================================================

        MINIHTTP_HOST          Bind address (default: 0.0.0.0)
        MINIHTTP_PORT          Port (default: 4221)
        MINIHTTP_DIRECTORY     Served directory (default: none)
        MINIHTTP_BUFFER_SIZE   Read size in bytes (default: 1024)
        MINIHTTP_BACKLOG       listen() backlog (default: 128)
        MINIHTTP_TIMEOUT       Per-connection timeout in seconds (default: none)
        MINIHTTP_LOG_LEVEL     Logging level (default: INFO)
        MINIHTTP_LOG_FORMAT    text or json (default: text)

        =====================================================================
        """
        timeout = os.getenv("MINIHTTP_TIMEOUT")

        return cls(
            host=os.getenv("MINIHTTP_HOST", "0.0.0.0"),
            port=int(os.getenv("MINIHTTP_PORT", "4221")),
            directory=os.getenv("MINIHTTP_DIRECTORY") or None,
            buffer_size=int(os.getenv("MINIHTTP_BUFFER_SIZE", "1024")),
            backlog=int(os.getenv("MINIHTTP_BACKLOG", "128")),
            timeout=float(timeout) if timeout else None,
            log_level=os.getenv("MINIHTTP_LOG_LEVEL", "INFO"),
            log_format=os.getenv("MINIHTTP_LOG_FORMAT", "text"),
        )

    def validate(self) -> None:
        """
        Validate configuration values, failing fast with ValueError.

        A missing served directory is not an error here: the file route
        answers 404 and the server logs a warning at startup.
        """
        if not 0 <= self.port < 65536:
            raise ValueError(f"Invalid port: {self.port}. Must be 0-65535.")

        if self.backlog < 1:
            raise ValueError("backlog must be >= 1")

        if self.buffer_size < 64:
            raise ValueError("buffer_size must be >= 64")

        if self.timeout is not None and self.timeout <= 0:
            raise ValueError("timeout must be > 0")

        if self.log_format not in LOG_FORMATS:
            raise ValueError(f"log_format must be one of {', '.join(LOG_FORMATS)}")

"""
=============================================================================
HTTP STATUS CODES
=============================================================================

The status codes this server can answer with, plus their reason phrases.

Only a handful of codes are ever produced by the four routes:

    ┌────────┬──────────────────────────────────────────────────────────┐
    │  Code  │  Produced when                                           │
    ├────────┼──────────────────────────────────────────────────────────┤
    │  200   │  root, echo, user-agent, successful file read            │
    │  201   │  successful file write (POST /files/{name})              │
    │  400   │  request line has fewer than three fields                │
    │  404   │  unmatched path, missing file, failed write (quirk)      │
    │  500   │  unexpected exception while routing                      │
    └────────┴──────────────────────────────────────────────────────────┘

The status line on the wire is:

    HTTP/1.1 404 Not Found
             ─── ─────────
              │      │
              │      └── Reason phrase (from _STATUS_PHRASES)
              └───────── Status code (the IntEnum value)

=============================================================================
"""

from enum import IntEnum


class HTTPStatus(IntEnum):
    """
    HTTP status codes used by the server.

    IntEnum keeps comparisons with plain integers working:

        HTTPStatus.OK == 200        # True
        f"{HTTPStatus.OK}"          # "200"
    """

    OK = 200                        # Route produced a result
    CREATED = 201                   # File written
    BAD_REQUEST = 400               # Malformed request line
    NOT_FOUND = 404                 # No route, no file, or write failure
    INTERNAL_SERVER_ERROR = 500     # Unexpected failure while routing

    def __str__(self) -> str:
        return str(self.value)

    @property
    def phrase(self) -> str:
        """Reason phrase for the status line ("OK", "Not Found", ...)."""
        return _STATUS_PHRASES.get(self, "Unknown")

    @property
    def status_text(self) -> str:
        """Code and phrase as they appear after the version: "200 OK"."""
        return f"{self.value} {self.phrase}"

    @property
    def is_success(self) -> bool:
        return 200 <= self < 300

    @property
    def is_error(self) -> bool:
        return self >= 400


_STATUS_PHRASES = {
    HTTPStatus.OK: "OK",
    HTTPStatus.CREATED: "Created",
    HTTPStatus.BAD_REQUEST: "Bad Request",
    HTTPStatus.NOT_FOUND: "Not Found",
    HTTPStatus.INTERNAL_SERVER_ERROR: "Internal Server Error",
}

"""
=============================================================================
HTTP REQUEST PARSER
=============================================================================

Turns the bytes of a single socket read into an immutable HTTPRequest.

=============================================================================
WHAT ONE READ LOOKS LIKE
=============================================================================

The connection performs exactly one fixed-size read. Whatever arrived in
that read is all the parser ever sees:

    ┌─────────────────────────────────────────────────────────────────────┐
    │                    ONE READ BUFFER (split on "\n")                  │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │  line 0   POST /files/report.txt HTTP/1.1\r    ← request line       │
    │  line 1   Host: localhost:4221\r               ┐                    │
    │  line 2   User-Agent: curl/8.4.0\r             │ header block        │
    │  line 3   Content-Length: 5\r                  │                    │
    │  line 4   \r                                   ┘ (no colon: skipped) │
    │  line 5   hello                                ← trailing body line  │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

For GET the header block runs to the last line. For every other method
the last line is reserved for the body and excluded from the headers.

=============================================================================
LIMITATIONS (deliberate)
=============================================================================

1. SINGLE READ: bodies or headers larger than the read buffer are
   truncated. There is no loop that drains the socket.

2. SINGLE BODY LINE: only the final "\n"-delimited line is the body.
   A multi-line body keeps its last line only.

3. NO CASE FOLDING: header names are stored exactly as received and
   duplicates resolve to the last occurrence.

=============================================================================
ENCODING
=============================================================================

Bytes are decoded as UTF-8 with the "surrogateescape" error handler.
Any byte sequence survives decode/encode unchanged, so echoed paths,
user agents and written file contents round-trip byte-for-byte.

=============================================================================
"""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Dict, List, Mapping


# Codec used in both directions (request decode, response encode)
ENCODING = "utf-8"
ENCODING_ERRORS = "surrogateescape"

# The only method whose request carries no trailing body line
BODYLESS_METHOD = "GET"


class HTTPParseError(Exception):
    """
    Raised when a request (or a path inside it) is malformed.

    Carries the HTTP status the connection should answer with:

        400 Bad Request  - request line has fewer than three fields
        404 Not Found    - /files path has no file-name segment
    """

    def __init__(self, message: str, status_code: int = 400):
        super().__init__(message)
        self.status_code = status_code


@dataclass(frozen=True)
class HTTPRequest:
    """
    A parsed HTTP request.

    Built once per connection and never modified afterwards.

        method:          "GET", "POST", ...
        path:            Request target as sent ("/echo/abc")
        version:         "HTTP/1.1"
        headers:         Header name → value, names as received (read-only)
        body:            Final line of the read buffer, NUL padding trimmed
        client_address:  (ip, port) of the peer, for logging
    """

    method: str
    path: str
    version: str = "HTTP/1.1"
    headers: Mapping[str, str] = field(default_factory=dict)
    body: str = ""
    client_address: tuple[str, int] = ("", 0)

    def __post_init__(self):
        # Copy, so the caller's dict cannot change the request either
        object.__setattr__(self, "headers", MappingProxyType(dict(self.headers)))

    @property
    def user_agent(self) -> str:
        """Value of the User-Agent header, empty when absent."""
        return self.headers.get("User-Agent", "")

    @property
    def has_body(self) -> bool:
        """Whether the last line of the request is reserved for a body."""
        return self.method != BODYLESS_METHOD

    def get_header(self, name: str, default: str = "") -> str:
        """
        Look up a header by its exact name.

        Names are matched as received; "user-agent" does not find a
        "User-Agent" header.
        """
        return self.headers.get(name, default)


def extract_headers(lines: List[str], method: str) -> Dict[str, str]:
    """
    Build the header mapping from the lines of a request.

    Args:
        lines: All lines of the request; line 0 is the request line.
        method: Request method; decides whether the last line is a body.

    Returns:
        Trimmed header name → trimmed value. Lines without a colon are
        skipped, values are split on the first colon only, and the last
        occurrence of a repeated name wins.
    """
    last_header = len(lines) if method == BODYLESS_METHOD else len(lines) - 1

    headers: Dict[str, str] = {}
    for line in lines[1:last_header]:
        name, sep, value = line.partition(":")
        if not sep:
            continue
        headers[name.strip()] = value.strip()
    return headers


class RequestParser:
    """
    Parses raw request bytes into HTTPRequest objects.

    ==========================================================================
    PARSER STEPS
    ==========================================================================

        Raw bytes (one recv)
              │
              ▼
        1. Decode (utf-8 / surrogateescape)
              │
              ▼
        2. Split on "\n"
              │
              ▼
        3. Request line → whitespace fields
              │  fewer than 3? → HTTPParseError(400)
              ▼
        4. extract_headers(lines, method)
              │
              ▼
        5. Trailing body line (NULs trimmed)
              │
              ▼
        HTTPRequest (frozen dataclass)

    ==========================================================================
    """

    def parse(
        self,
        data: bytes,
        client_address: tuple[str, int] = ("", 0)
    ) -> HTTPRequest:
        """
        Parse one read buffer.

        Args:
            data: Bytes from the single socket read.
            client_address: Peer (ip, port), kept for logging.

        Returns:
            The parsed request.

        Raises:
            HTTPParseError: If the request line has fewer than three fields.
        """
        text = data.decode(ENCODING, errors=ENCODING_ERRORS)
        lines = text.split("\n")

        # ---------------------------------------------------------------------
        # Request line: METHOD PATH VERSION, split on any whitespace
        # ---------------------------------------------------------------------
        fields = lines[0].split()
        if len(fields) < 3:
            raise HTTPParseError(f"Malformed request line: {lines[0]!r}")

        method, path, version = fields[0], fields[1], fields[2]

        return HTTPRequest(
            method=method,
            path=path,
            version=version,
            headers=extract_headers(lines, method),
            body=lines[-1].strip("\x00"),
            client_address=client_address,
        )


def parse_request(
    data: bytes,
    client_address: tuple[str, int] = ("", 0)
) -> HTTPRequest:
    """Parse request bytes with a default RequestParser."""
    return RequestParser().parse(data, client_address)

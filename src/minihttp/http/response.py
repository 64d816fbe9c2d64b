"""
=============================================================================
ROUTE OUTCOMES AND RESPONSE SERIALIZATION
=============================================================================

The Router produces a RouteOutcome; this module turns it into the exact
bytes written back to the socket.

=============================================================================
WIRE FORMAT
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │                     SERIALIZED RESPONSE                             │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   HTTP/1.1 200 OK\r\n                      ← always                 │
    │   Content-Type: text/plain\r\n             ← only if content_type    │
    │   Content-Length: 3\r\n                    ← only if length > 0      │
    │   \r\n                                     ← always                 │
    │   abc                                      ← body bytes verbatim     │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

No other headers are ever added: no Date, no Server, no Connection.
The connection is closed after the write, which is how the client knows
the body ended when no Content-Length is present.

Examples:

    GET /            → b"HTTP/1.1 200 OK\r\nContent-Type: text/plain\r\n\r\n"
    GET /echo/abc    → b"HTTP/1.1 200 OK\r\nContent-Type: text/plain\r\n\r\nabc"
    GET /files/nope  → b"HTTP/1.1 404 Not Found\r\n\r\n"
    POST /files/x    → b"HTTP/1.1 201 Created\r\n\r\n"

=============================================================================
"""

from dataclasses import dataclass
from typing import Optional

from .request import ENCODING, ENCODING_ERRORS
from .status_codes import HTTPStatus


PROTOCOL_VERSION = "HTTP/1.1"
CRLF = "\r\n"

TEXT_PLAIN = "text/plain"
OCTET_STREAM = "application/octet-stream"


@dataclass(frozen=True)
class RouteOutcome:
    """
    The result of routing one request, before serialization.

        status:          HTTPStatus for the status line
        content_type:    Content-Type value, or None to omit the header
        body:            Body bytes, written verbatim
        content_length:  Content-Length value, or None to omit the header

    Content-Length is emitted only when content_length is set and
    non-zero; an empty body with no explicit length produces no
    Content-Length header at all.
    """

    status: HTTPStatus = HTTPStatus.OK
    content_type: Optional[str] = None
    body: bytes = b""
    content_length: Optional[int] = None

    @property
    def status_line(self) -> str:
        """First line of the response without CRLF: "HTTP/1.1 200 OK"."""
        return f"{PROTOCOL_VERSION} {self.status.status_text}"

    def to_bytes(self) -> bytes:
        """
        Serialize the outcome into one byte string.

        The full response is built in memory and written with a single
        sendall(); there is no chunked or streaming encoding.
        """
        lines = [self.status_line]

        if self.content_type is not None:
            lines.append(f"Content-Type: {self.content_type}")

        if self.content_length:
            lines.append(f"Content-Length: {self.content_length}")

        # Blank line separates headers from body
        head = CRLF.join(lines) + CRLF + CRLF
        return head.encode(ENCODING, errors=ENCODING_ERRORS) + self.body


def build_response(outcome: RouteOutcome) -> bytes:
    """Serialize a RouteOutcome to wire bytes."""
    return outcome.to_bytes()


# =============================================================================
# OUTCOME CONSTRUCTORS
# =============================================================================
#
# Every route behavior is one of these shapes.
#
#     return text_outcome("abc")      # 200 text/plain, no length
#     return file_outcome(data)       # 200 octet-stream, length len(data)
#     return created()                # 201, no headers, no body
#     return not_found()              # 404 text/plain "404 Not Found"
#     return not_found(empty=True)    # 404, no headers, no body
#
# =============================================================================

def text_outcome(text: str, status: HTTPStatus = HTTPStatus.OK) -> RouteOutcome:
    """
    text/plain outcome with no Content-Length.

    Only file contents carry a length; text bodies are framed by the
    connection closing after the write.
    """
    body = text.encode(ENCODING, errors=ENCODING_ERRORS)
    return RouteOutcome(
        status=status,
        content_type=TEXT_PLAIN,
        body=body,
    )


def file_outcome(data: bytes) -> RouteOutcome:
    """200 application/octet-stream outcome carrying file bytes."""
    return RouteOutcome(
        status=HTTPStatus.OK,
        content_type=OCTET_STREAM,
        body=data,
        content_length=len(data),
    )


def created() -> RouteOutcome:
    """201 Created with no content type and no body."""
    return RouteOutcome(status=HTTPStatus.CREATED)


def not_found(empty: bool = False) -> RouteOutcome:
    """
    404 Not Found.

    Args:
        empty: True for the file-route flavor (no content type, no body).
               False for the unmatched-route flavor, whose text/plain
               body is "404 Not Found".
    """
    if empty:
        return RouteOutcome(status=HTTPStatus.NOT_FOUND)
    return text_outcome(HTTPStatus.NOT_FOUND.status_text, HTTPStatus.NOT_FOUND)


def bad_request() -> RouteOutcome:
    """400 Bad Request with no body."""
    return RouteOutcome(status=HTTPStatus.BAD_REQUEST)


def internal_error() -> RouteOutcome:
    """500 Internal Server Error with no body."""
    return RouteOutcome(status=HTTPStatus.INTERNAL_SERVER_ERROR)

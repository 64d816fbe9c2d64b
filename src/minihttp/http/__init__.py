"""
=============================================================================
HTTP PROTOCOL CORE
=============================================================================

Bytes in, bytes out. Everything between the socket read and the socket
write lives here:

    ┌─────────────────────────────────────────────────────────────────────┐
    │                                                                      │
    │   b"GET /echo/hi HTTP/1.1\r\n..."                                    │
    │        │                                                             │
    │        ▼  RequestParser.parse()            (request.py)              │
    │   HTTPRequest(method="GET", path="/echo/hi", ...)                    │
    │        │                                                             │
    │        ▼  Router.handle()                  (router.py)               │
    │   RouteOutcome(status=200, content_type="text/plain", body=b"hi")    │
    │        │                                                             │
    │        ▼  build_response()                 (response.py)             │
    │   b"HTTP/1.1 200 OK\r\nContent-Type: text/plain\r\n..."              │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
"""

from .request import (
    HTTPRequest,
    RequestParser,
    HTTPParseError,
    extract_headers,
    parse_request,
)
from .response import (
    RouteOutcome,
    build_response,
    text_outcome,
    file_outcome,
    created,
    not_found,
    bad_request,
    internal_error,
)
from .router import Router, Route, MatchKind, create_router
from .status_codes import HTTPStatus

__all__ = [
    # Request parsing
    "HTTPRequest",
    "RequestParser",
    "HTTPParseError",
    "extract_headers",
    "parse_request",

    # Outcomes and serialization
    "RouteOutcome",
    "build_response",
    "text_outcome",
    "file_outcome",
    "created",
    "not_found",
    "bad_request",
    "internal_error",

    # Routing
    "Router",
    "Route",
    "MatchKind",
    "create_router",

    # Status codes
    "HTTPStatus",
]

"""
=============================================================================
MINIHTTP - Minimal single-port HTTP/1.1 server
=============================================================================

Accepts raw TCP connections, reads one request per connection, answers
it and closes.

    ┌─────────────────────────────────────────────────────────────────────┐
    │ Route                     │ Response                                │
    ├───────────────────────────┼─────────────────────────────────────────┤
    │ GET  /                    │ 200, empty body                         │
    │ GET  /echo/{text}         │ 200 text/plain {text}                   │
    │ GET  /user-agent          │ 200 text/plain User-Agent header        │
    │ GET  /files/{name}        │ 200 octet-stream file bytes, or 404     │
    │ POST /files/{name}        │ 201 after writing the body, or 404      │
    │ anything else             │ 404 text/plain "404 Not Found"          │
    └─────────────────────────────────────────────────────────────────────┘

Quick start:

    from minihttp import HTTPServer, ServerConfig

    HTTPServer(ServerConfig(directory="/tmp/data")).run()

=============================================================================
"""

__version__ = "1.0.0"

from .config import ServerConfig
from .server import HTTPServer, create_app
from .core import ServerError, BindError, AcceptError
from .http import (
    HTTPRequest,
    HTTPParseError,
    HTTPStatus,
    RouteOutcome,
    Router,
    build_response,
    create_router,
    parse_request,
)

__all__ = [
    "__version__",
    "ServerConfig",
    "HTTPServer",
    "create_app",
    "ServerError",
    "BindError",
    "AcceptError",
    "HTTPRequest",
    "HTTPParseError",
    "HTTPStatus",
    "RouteOutcome",
    "Router",
    "build_response",
    "create_router",
    "parse_request",
]

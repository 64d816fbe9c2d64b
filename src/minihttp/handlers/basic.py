"""
Root, echo and user-agent route behaviors.

Each handler takes the parsed request and returns a RouteOutcome. None
of them touch anything outside the request.
"""

from ..http.request import HTTPRequest
from ..http.response import RouteOutcome, text_outcome


ECHO_PREFIX = "/echo/"


def handle_root(request: HTTPRequest) -> RouteOutcome:
    """GET / health check: 200, text/plain, empty body."""
    return text_outcome("")


def handle_echo(request: HTTPRequest) -> RouteOutcome:
    """Return whatever follows "/echo/" in the path (possibly nothing)."""
    return text_outcome(request.path[len(ECHO_PREFIX):])


def handle_user_agent(request: HTTPRequest) -> RouteOutcome:
    """Return the User-Agent header value, empty when the header is absent."""
    return text_outcome(request.user_agent)

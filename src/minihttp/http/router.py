"""
=============================================================================
ROUTER
=============================================================================

Maps a parsed request to a RouteOutcome with an ordered list of path
rules. The first rule that matches wins; nothing matched means 404.

=============================================================================
DEFAULT ROUTE TABLE
=============================================================================

    ┌─────┬──────────────────────┬──────────┬──────────────────────────────┐
    │  #  │ Rule                 │ Kind     │ Outcome                      │
    ├─────┼──────────────────────┼──────────┼──────────────────────────────┤
    │  1  │ /files               │ prefix   │ FileHandler (GET/POST)       │
    │  2  │ /user-agent          │ prefix   │ 200 text/plain User-Agent    │
    │  3  │ /echo/               │ prefix   │ 200 text/plain rest of path  │
    │  4  │ /                    │ exact    │ 200 text/plain empty         │
    │  -  │ (anything else)      │ -        │ 404 text/plain 404 Not Found │
    └─────┴──────────────────────┴──────────┴──────────────────────────────┘

Rules are prefix checks, not segment matches, so "/filesystem" goes to
the file route and "/user-agents" to the user-agent route. Order is what
keeps "/" from swallowing everything: it is the only exact rule and it
comes last.

Matching ignores the method. Only the file route looks at it.

=============================================================================
"""

from dataclasses import dataclass
from enum import Enum
from typing import Callable, List, Optional
import logging

from .request import HTTPRequest, HTTPParseError
from .response import RouteOutcome, not_found
from .status_codes import HTTPStatus


logger = logging.getLogger(__name__)


# Handler: request in, outcome out
Handler = Callable[[HTTPRequest], RouteOutcome]


class MatchKind(Enum):
    """How a rule compares against the request path."""
    PREFIX = "prefix"   # path.startswith(rule)
    EXACT = "exact"     # path == rule


@dataclass(frozen=True)
class Route:
    """
    One routing rule.

        Route(path="/echo/", handler=handle_echo, kind=MatchKind.PREFIX)
    """

    path: str
    handler: Handler
    kind: MatchKind = MatchKind.PREFIX
    name: Optional[str] = None

    def matches(self, path: str) -> bool:
        if self.kind is MatchKind.EXACT:
            return path == self.path
        return path.startswith(self.path)


class Router:
    """
    Ordered, first-match-wins router.

    Usage:
        router = Router()

        @router.prefix("/echo/")
        def echo(request):
            return text_outcome(request.path[6:])

        @router.exact("/")
        def root(request):
            return text_outcome("")

        outcome = router.handle(request)

    handle() is a pure function of the request apart from whatever the
    matched handler itself does (the file route touches the filesystem).
    """

    def __init__(self):
        self._routes: List[Route] = []
        self.default_handler: Handler = lambda request: not_found()

    def add_route(
        self,
        path: str,
        handler: Handler,
        kind: MatchKind = MatchKind.PREFIX,
        name: Optional[str] = None,
    ) -> Route:
        """
        Append a rule. Rules are tried in the order they were added.

        Returns:
            The created Route.
        """
        route = Route(path=path, handler=handler, kind=kind, name=name or handler.__name__)
        self._routes.append(route)
        return route

    def prefix(self, path: str, name: Optional[str] = None) -> Callable[[Handler], Handler]:
        """Decorator: register a prefix rule."""
        def decorator(handler: Handler) -> Handler:
            self.add_route(path, handler, MatchKind.PREFIX, name)
            return handler
        return decorator

    def exact(self, path: str, name: Optional[str] = None) -> Callable[[Handler], Handler]:
        """Decorator: register an exact-path rule."""
        def decorator(handler: Handler) -> Handler:
            self.add_route(path, handler, MatchKind.EXACT, name)
            return handler
        return decorator

    def match(self, path: str) -> Optional[Route]:
        """Return the first rule matching the path, or None."""
        for route in self._routes:
            if route.matches(path):
                return route
        return None

    def handle(self, request: HTTPRequest) -> RouteOutcome:
        """
        Route a request to its outcome.

        A handler that finds the path malformed raises HTTPParseError;
        that becomes an outcome with the error's status and an empty body.
        """
        route = self.match(request.path)
        if route is None:
            return self.default_handler(request)

        try:
            return route.handler(request)
        except HTTPParseError as e:
            logger.warning(f"Malformed path {request.path!r}: {e}")
            return RouteOutcome(status=HTTPStatus(e.status_code))

    @property
    def routes(self) -> List[Route]:
        """Registered rules in match order."""
        return list(self._routes)


def create_router(directory: Optional[str] = None) -> Router:
    """
    Build the router with the four fixed routes.

    Args:
        directory: Served directory for /files, or None to disable it.
    """
    # Deferred: the handlers package imports from minihttp.http
    from ..handlers import FileHandler, handle_echo, handle_root, handle_user_agent

    router = Router()
    router.add_route("/files", FileHandler(directory).handle, name="files")
    router.add_route("/user-agent", handle_user_agent)
    router.add_route("/echo/", handle_echo)
    router.add_route("/", handle_root, MatchKind.EXACT)
    return router

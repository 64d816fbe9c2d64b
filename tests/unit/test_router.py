"""
Unit tests for the router and the fixed route table.
"""

import pytest

from minihttp.http.router import Router, Route, MatchKind, create_router
from minihttp.http.request import HTTPRequest, HTTPParseError, parse_request
from minihttp.http.response import RouteOutcome, text_outcome, build_response
from minihttp.http.status_codes import HTTPStatus


def make_request(method: str, path: str, headers: dict = None, body: str = "") -> HTTPRequest:
    """Helper to create a request for testing."""
    return HTTPRequest(method=method, path=path, headers=headers or {}, body=body)


def path_handler(request: HTTPRequest) -> RouteOutcome:
    """Dummy handler for testing."""
    return text_outcome(request.path)


class TestRoute:
    """Tests for Route matching."""

    def test_prefix(self):
        """Test prefix rules."""
        route = Route(path="/echo/", handler=path_handler)

        assert route.matches("/echo/")
        assert route.matches("/echo/abc")
        assert not route.matches("/echo")
        assert not route.matches("/ECHO/abc")

    def test_exact(self):
        """Test exact rules."""
        route = Route(path="/", handler=path_handler, kind=MatchKind.EXACT)

        assert route.matches("/")
        assert not route.matches("/x")
        assert not route.matches("")


class TestRouter:
    """Tests for Router class."""

    def test_add_route(self):
        """Test adding routes."""
        router = Router()
        route = router.add_route("/echo/", path_handler)

        assert router.routes == [route]
        assert route.name == "path_handler"
        assert route.kind is MatchKind.PREFIX

    def test_first_match_wins(self):
        """Test that rules are tried in insertion order."""
        router = Router()
        router.add_route("/a", lambda r: text_outcome("short"), name="short")
        router.add_route("/abc", lambda r: text_outcome("long"), name="long")

        assert router.match("/abc").name == "short"
        assert router.handle(make_request("GET", "/abc")).body == b"short"

    def test_decorators(self):
        """Test registering rules with decorators."""
        router = Router()

        @router.prefix("/greet/")
        def greet(request):
            return text_outcome("hi " + request.path[7:])

        @router.exact("/")
        def root(request):
            return text_outcome("root")

        assert router.handle(make_request("GET", "/greet/bob")).body == b"hi bob"
        assert router.handle(make_request("GET", "/")).body == b"root"
        assert [r.name for r in router.routes] == ["greet", "root"]

    def test_no_match(self):
        """Test the text 404 when nothing matches."""
        router = Router()
        outcome = router.handle(make_request("GET", "/missing"))

        assert outcome.status == HTTPStatus.NOT_FOUND
        assert outcome.body == b"404 Not Found"
        assert outcome.content_type == "text/plain"

    def test_match_returns_none(self):
        """Test match() without a matching rule."""
        assert Router().match("/anything") is None

    def test_parse_error_becomes_status(self):
        """Test that a handler's HTTPParseError becomes a bodyless outcome."""
        router = Router()

        def broken(request):
            raise HTTPParseError("bad path", status_code=404)

        router.add_route("/broken", broken)
        outcome = router.handle(make_request("GET", "/broken"))

        assert outcome == RouteOutcome(status=HTTPStatus.NOT_FOUND)

    def test_other_exceptions_propagate(self):
        """Test that unexpected handler errors are left to the caller."""
        router = Router()

        def crash(request):
            raise RuntimeError("boom")

        router.add_route("/crash", crash)

        with pytest.raises(RuntimeError):
            router.handle(make_request("GET", "/crash"))


class TestFixedRoutes:
    """Tests for the router built by create_router()."""

    @pytest.fixture
    def router(self, served_dir):
        return create_router(str(served_dir))

    def test_route_order(self, router):
        """Test the rule order of the fixed table."""
        assert [(r.path, r.kind) for r in router.routes] == [
            ("/files", MatchKind.PREFIX),
            ("/user-agent", MatchKind.PREFIX),
            ("/echo/", MatchKind.PREFIX),
            ("/", MatchKind.EXACT),
        ]

    def test_root(self, router):
        """Test GET / health check."""
        assert build_response(router.handle(make_request("GET", "/"))) == (
            b"HTTP/1.1 200 OK\r\nContent-Type: text/plain\r\n\r\n"
        )

    @pytest.mark.parametrize("text", ["abc", "", "hello/world", "a b", "日本"])
    def test_echo(self, router, text):
        """Test that echo returns everything after the prefix."""
        outcome = router.handle(make_request("GET", "/echo/" + text))

        assert outcome.status == HTTPStatus.OK
        assert outcome.content_type == "text/plain"
        assert outcome.body == text.encode("utf-8")

    def test_echo_ignores_method(self, router):
        """Test that routing does not look at the method."""
        outcome = router.handle(make_request("DELETE", "/echo/abc"))

        assert outcome.body == b"abc"

    @pytest.mark.parametrize("raw,expected", [
        (
            b"GET /echo/abc HTTP/1.1\r\n\r\n",
            b"HTTP/1.1 200 OK\r\nContent-Type: text/plain\r\n\r\nabc",
        ),
        (
            b"GET /nope HTTP/1.1\r\n\r\n",
            b"HTTP/1.1 404 Not Found\r\nContent-Type: text/plain\r\n\r\n404 Not Found",
        ),
    ])
    def test_text_responses_have_no_length(self, raw, expected):
        """Test that only file contents are framed with Content-Length."""
        router = create_router(None)

        assert build_response(router.handle(parse_request(raw))) == expected

    def test_user_agent(self, router):
        """Test User-Agent echo."""
        request = make_request("GET", "/user-agent", {"User-Agent": "foobar/1.2.3"})
        outcome = router.handle(request)

        assert build_response(outcome) == (
            b"HTTP/1.1 200 OK\r\nContent-Type: text/plain\r\n\r\nfoobar/1.2.3"
        )

    def test_user_agent_missing(self, router):
        """Test an absent header echoes an empty body."""
        outcome = router.handle(make_request("GET", "/user-agent"))

        assert outcome.status == HTTPStatus.OK
        assert outcome.body == b""

    def test_user_agent_lowercase_header_not_found(self, router):
        """Test that the header name must match exactly."""
        outcome = router.handle(make_request("GET", "/user-agent", {"user-agent": "x"}))

        assert outcome.body == b""

    def test_user_agent_prefix(self, router):
        """Test that anything starting with /user-agent is the user-agent route."""
        request = make_request("GET", "/user-agents", {"User-Agent": "ua"})

        assert router.handle(request).body == b"ua"

    def test_files_prefix_wins(self, router, served_dir):
        """Test that /files-prefixed paths never reach later rules."""
        (served_dir / "echo").write_bytes(b"file")

        outcome = router.handle(make_request("GET", "/files/echo"))

        assert outcome.content_type == "application/octet-stream"
        assert outcome.body == b"file"

    def test_files_without_name(self, router):
        """Test that /files alone is an empty 404."""
        outcome = router.handle(make_request("GET", "/files"))

        assert build_response(outcome) == b"HTTP/1.1 404 Not Found\r\n\r\n"

    @pytest.mark.parametrize("path", ["/echo", "/index.html", "//", "/Echo/abc", ""])
    def test_unmatched(self, router, path):
        """Test paths that match no rule."""
        outcome = router.handle(make_request("GET", path))

        assert outcome.status == HTTPStatus.NOT_FOUND
        assert outcome.body == b"404 Not Found"

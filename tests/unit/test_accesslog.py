"""
Unit tests for the access log.
"""

import json
import logging

from minihttp.accesslog import AccessLogger


class TestAccessLogger:
    """Tests for AccessLogger."""

    def test_text_format(self, caplog):
        """Test the one-line text entry."""
        with caplog.at_level(logging.INFO, logger="minihttp.access"):
            AccessLogger("text").log("abcd1234", "127.0.0.1", "GET", "/echo/hi", "curl", 200, 2, 0.5)

        assert len(caplog.records) == 1
        message = caplog.records[0].getMessage()
        assert message.startswith("127.0.0.1 - - [")
        assert '"GET /echo/hi" 200 2 0.50ms' in message
        assert caplog.records[0].name == "minihttp.access"

    def test_json_format(self, caplog):
        """Test the JSON entry."""
        with caplog.at_level(logging.INFO, logger="minihttp.access"):
            AccessLogger("json").log("abcd1234", "127.0.0.1", "POST", "/files/x", "", 201, 0, 1.234)

        entry = json.loads(caplog.records[0].getMessage())
        assert entry["conn_id"] == "abcd1234"
        assert entry["method"] == "POST"
        assert entry["path"] == "/files/x"
        assert entry["user_agent"] == "-"
        assert entry["status_code"] == 201
        assert entry["duration_ms"] == 1.23

    def test_returns_entry(self):
        """Test that the logged entry is returned."""
        entry = AccessLogger().log("id", "10.0.0.1", "GET", "/", "ua", 404, 13, 0.1)

        assert entry.status_code == 404
        assert entry.content_length == 13
        assert entry.to_dict()["client_ip"] == "10.0.0.1"

    def test_silenced_below_level(self, caplog):
        """Test that the access logger can be silenced on its own."""
        with caplog.at_level(logging.WARNING, logger="minihttp.access"):
            AccessLogger().log("id", "10.0.0.1", "GET", "/", "ua", 200, 0, 0.1)

        assert caplog.records == []

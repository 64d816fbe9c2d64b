"""
=============================================================================
ACCESS LOG
=============================================================================

One line per answered request on the "minihttp.access" logger, separate
from the server's operational logs so it can be routed or silenced on its
own:

    logging.getLogger("minihttp.access").setLevel(logging.WARNING)

Two formats:

    text   127.0.0.1 - - [19/Oct/2026:10:00:00 +0000] "GET /echo/hi" 200 2 0.41ms
    json   {"conn_id": "1a2b3c4d", "method": "GET", "path": "/echo/hi", ...}

Connections dropped before a response (read failures) are not logged here.

=============================================================================
"""

import json
import time
import logging
from dataclasses import dataclass, asdict


logger = logging.getLogger("minihttp.access")


@dataclass
class RequestLog:
    """Structured entry for one request/response pair."""

    conn_id: str
    client_ip: str
    method: str
    path: str
    user_agent: str
    status_code: int
    content_length: int
    duration_ms: float
    timestamp: str

    def to_dict(self) -> dict:
        entry = asdict(self)
        entry["duration_ms"] = round(self.duration_ms, 2)
        return entry

    def to_text(self) -> str:
        """Apache-style line."""
        return (
            f'{self.client_ip} - - [{self.timestamp}] '
            f'"{self.method} {self.path}" {self.status_code} '
            f'{self.content_length} {self.duration_ms:.2f}ms'
        )


class AccessLogger:
    """
    Emits RequestLog entries in the configured format.

    Usage:
        access = AccessLogger("json")
        access.log(conn.id, conn.client_ip, "GET", "/echo/hi", "curl/8.4.0",
                   200, 2, duration_ms)
    """

    def __init__(self, log_format: str = "text", level: int = logging.INFO):
        self.log_format = log_format
        self.level = level

    def log(
        self,
        conn_id: str,
        client_ip: str,
        method: str,
        path: str,
        user_agent: str,
        status_code: int,
        content_length: int,
        duration_ms: float,
    ) -> RequestLog:
        entry = RequestLog(
            conn_id=conn_id,
            client_ip=client_ip,
            method=method,
            path=path,
            user_agent=user_agent or "-",
            status_code=int(status_code),
            content_length=content_length,
            duration_ms=duration_ms,
            timestamp=time.strftime("%d/%b/%Y:%H:%M:%S %z"),
        )

        if self.log_format == "json":
            logger.log(self.level, json.dumps(entry.to_dict()))
        else:
            logger.log(self.level, entry.to_text())
        return entry

"""
=============================================================================
FILE ROUTE
=============================================================================

Reads and writes files by name directly under the served directory.

=============================================================================
PATH → FILE
=============================================================================

The path is split on "/" and segment 2 is the file name:

    "/files/report.txt".split("/")  →  ["", "files", "report.txt"]
                                                      ──────────
                                                      file name

    "/files/a/b"   →  "a"          (extra segments ignored)
    "/files/"      →  ""           (the directory itself: read/write fails → 404)
    "/files"       →  too few segments → HTTPParseError(404)

The name is joined onto the served directory with no traversal checks.
Whoever runs the server is trusting the clients that reach it.

=============================================================================
METHOD BEHAVIOR
=============================================================================

    ┌────────┬──────────────────────────────┬─────────────────────────────┐
    │ Method │ Success                      │ Any OSError                 │
    ├────────┼──────────────────────────────┼─────────────────────────────┤
    │ GET    │ 200 octet-stream, file bytes │ 404, no type, empty body    │
    │ POST   │ 201, no type, empty body     │ 404 (write failures reuse   │
    │        │ file = trailing body line    │ 404, kept for compatibility)│
    │ other  │ -                            │ 404, no type, empty body    │
    └────────┴──────────────────────────────┴─────────────────────────────┘

Concurrent requests against the same file name are not serialized; the
filesystem decides what a racing reader or writer sees.

=============================================================================
"""

import os
import logging
from pathlib import Path
from typing import Optional

from ..http.request import HTTPRequest, HTTPParseError, ENCODING, ENCODING_ERRORS
from ..http.response import RouteOutcome, file_outcome, created, not_found


logger = logging.getLogger(__name__)


# rw-r--r--
FILE_MODE = 0o644


def _create_or_truncate(path: str, flags: int) -> int:
    """open() opener that applies FILE_MODE to newly created files."""
    return os.open(path, flags, FILE_MODE)


class FileHandler:
    """
    Serves GET/POST on /files/{name} from one directory.

    The directory is fixed at construction; nothing here reads process
    arguments or globals.

    Usage:
        files = FileHandler("/tmp/data")
        outcome = files.handle(request)
    """

    def __init__(self, directory: Optional[str]):
        """
        Args:
            directory: Served directory, or None when file routes are
                       disabled (every file request then answers 404).
        """
        self.directory = Path(directory) if directory else None

    @staticmethod
    def file_name(path: str) -> str:
        """
        Extract the file name from a /files path.

        Raises:
            HTTPParseError: If the path has fewer than three segments.
        """
        parts = path.split("/")
        if len(parts) < 3:
            raise HTTPParseError(f"No file name in path: {path!r}", status_code=404)
        return parts[2]

    def resolve(self, name: str) -> Path:
        """Join a file name onto the served directory."""
        return self.directory / name

    def handle(self, request: HTTPRequest) -> RouteOutcome:
        """Dispatch a /files request on its method."""
        name = self.file_name(request.path)

        if self.directory is None:
            logger.warning(f"File request for {name!r} but no directory is configured")
            return not_found(empty=True)

        target = self.resolve(name)

        if request.method == "GET":
            return self._read(target)
        if request.method == "POST":
            return self._write(target, request.body)

        logger.debug(f"Unsupported method {request.method} on {request.path}")
        return not_found(empty=True)

    def _read(self, target: Path) -> RouteOutcome:
        try:
            data = target.read_bytes()
        except OSError as e:
            logger.info(f"File not readable: {target}: {e}")
            return not_found(empty=True)

        logger.debug(f"Read {len(data)} bytes from {target}")
        return file_outcome(data)

    def _write(self, target: Path, content: str) -> RouteOutcome:
        data = content.encode(ENCODING, errors=ENCODING_ERRORS)
        try:
            with open(target, "wb", opener=_create_or_truncate) as f:
                f.write(data)
        except OSError as e:
            logger.warning(f"File write failed: {target}: {e}")
            return not_found(empty=True)

        logger.info(f"Wrote {len(data)} bytes to {target}")
        return created()

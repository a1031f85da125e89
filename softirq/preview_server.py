"""Static HTTP server used by ``softirq preview``."""

from __future__ import annotations

import contextlib
from http import HTTPStatus
from http.server import SimpleHTTPRequestHandler, ThreadingHTTPServer
from pathlib import Path
from typing import Any, Iterator

NOT_FOUND_PAGE = "404.html"


class _ThreadingHTTPServer(ThreadingHTTPServer):
    daemon_threads = True
    allow_reuse_address = True


def make_request_handler(directory: Path) -> type[SimpleHTTPRequestHandler]:
    """Create a request handler rooted at ``directory``.

    Missing paths are answered with the site's own ``404.html`` when the
    build produced one, mirroring how static hosts serve it.
    """
    directory_path = str(directory)
    not_found = directory / NOT_FOUND_PAGE

    class PreviewRequestHandler(SimpleHTTPRequestHandler):
        extensions_map = dict(SimpleHTTPRequestHandler.extensions_map)
        extensions_map.update(
            {
                ".json": "application/json; charset=utf-8",
                ".xml": "application/xml; charset=utf-8",
                ".js": "application/javascript; charset=utf-8",
                ".css": "text/css; charset=utf-8",
                ".svg": "image/svg+xml",
                ".webp": "image/webp",
            }
        )

        def __init__(self, *args: Any, **kwargs: Any) -> None:
            super().__init__(*args, directory=directory_path, **kwargs)

        def send_error(self, code: int, message: str | None = None, explain: str | None = None) -> None:
            if code != HTTPStatus.NOT_FOUND or not not_found.is_file():
                super().send_error(code, message, explain)
                return
            body = not_found.read_bytes()
            self.send_response(code, message)
            self.send_header("Content-Type", "text/html; charset=utf-8")
            self.send_header("Content-Length", str(len(body)))
            self.end_headers()
            if self.command != "HEAD":
                self.wfile.write(body)

    return PreviewRequestHandler


@contextlib.contextmanager
def serve(
    host: str,
    port: int,
    handler: type[SimpleHTTPRequestHandler],
) -> Iterator[ThreadingHTTPServer]:
    """Context manager that creates and cleans up the HTTP server."""
    server = _ThreadingHTTPServer((host, port), handler)
    try:
        yield server
    finally:
        server.server_close()


def bound_url(server: ThreadingHTTPServer) -> str:
    raw_host = server.server_address[0]
    bound_host = raw_host.decode("utf-8", "ignore") if isinstance(raw_host, bytes) else str(raw_host)
    bound_port = int(server.server_address[1])
    url_host = "127.0.0.1" if bound_host in {"0.0.0.0", ""} else bound_host
    return f"http://{url_host}:{bound_port}/"

"""Server-rendered Doggos application.

This module provides a minimal HTTP server for keeping a personal list of
dogs: browsing and searching the list, liking and removing entries, and
adding new dogs with a best-effort random photo. All state lives in one
in-memory ``DoggosSession`` owned by the server.
"""

from __future__ import annotations

import argparse
import json
import logging
from http.server import SimpleHTTPRequestHandler, ThreadingHTTPServer
from urllib.parse import parse_qs, unquote, urlencode, urlparse

from doggos.roster import DuplicateNameError
from doggos.web.config import (
    APP_DIR,
    APP_TITLE,
    DUPLICATE_NAME_MESSAGE,
    LOG_FORMAT,
    get_log_level,
    get_owner_name,
    normalize_query,
)
from doggos.web.pages import (
    render_add_page,
    render_details_page,
    render_list_page,
    render_not_found_page,
    render_profile_page,
    render_settings_page,
)
from doggos.web.session import DoggosSession

logger = logging.getLogger(__name__)

STATIC_FILES = {"/styles.css", "/add_dog.js"}
ERROR_MESSAGES = {"duplicate": DUPLICATE_NAME_MESSAGE}


def normalize_next_path(value: str | None, default: str = "/") -> str:
    """Normalize redirect targets to local absolute paths only."""
    candidate = (value or "").strip()
    if not candidate:
        return default
    parsed = urlparse(candidate)
    if parsed.scheme or parsed.netloc:
        return default
    if not candidate.startswith("/") or candidate.startswith("//"):
        return default
    return candidate


class DoggosServer(ThreadingHTTPServer):
    """Threading HTTP server that owns a single ``DoggosSession``."""

    daemon_threads = True

    def __init__(self, server_address, handler_class=None, session: DoggosSession | None = None):
        super().__init__(server_address, handler_class or AppHandler)
        self.session = session or DoggosSession()

    def server_close(self) -> None:
        super().server_close()
        self.session.close()


class AppHandler(SimpleHTTPRequestHandler):
    """HTTP handler for Doggos pages, form actions, and JSON APIs."""

    def __init__(self, *args, **kwargs):
        """Initialize the handler with the app directory as static root.

        Args:
            *args: Positional arguments passed to the base handler.
            **kwargs: Keyword arguments passed to the base handler.
        """
        super().__init__(*args, directory=str(APP_DIR), **kwargs)

    @property
    def session(self) -> DoggosSession:
        return self.server.session

    def _send_json(self, status: int, payload: dict) -> None:
        """Write a JSON response.

        Args:
            status: HTTP status code.
            payload: JSON-serializable response payload.

        Returns:
            None.
        """
        data = json.dumps(payload).encode("utf-8")
        self.send_response(status)
        self.send_header("Content-Type", "application/json")
        self.send_header("Cache-Control", "no-store, no-cache, must-revalidate, max-age=0")
        self.send_header("Content-Length", str(len(data)))
        self.end_headers()
        self.wfile.write(data)

    def _send_html(self, status: int, body: bytes) -> None:
        """Write an HTML response."""
        self.send_response(status)
        self.send_header("Content-Type", "text/html; charset=utf-8")
        self.send_header("Cache-Control", "no-store, no-cache, must-revalidate, max-age=0")
        self.send_header("Content-Length", str(len(body)))
        self.end_headers()
        self.wfile.write(body)

    def _redirect(self, location: str) -> None:
        self.send_response(303)
        self.send_header("Location", location)
        self.send_header("Content-Length", "0")
        self.end_headers()

    def _read_form(self) -> dict[str, list[str]]:
        """Read and parse a urlencoded request body."""
        length = int(self.headers.get("Content-Length", 0) or 0)
        body = self.rfile.read(length).decode("utf-8") if length else ""
        return parse_qs(body, keep_blank_values=True)

    def do_GET(self):
        """Handle GET requests for screens, APIs, and static assets.

        Returns:
            None.
        """
        parsed = urlparse(self.path)
        query = parse_qs(parsed.query, keep_blank_values=True)

        if parsed.path == "/" or parsed.path == "/index.html":
            if "q" in query:
                self.session.set_search_query(normalize_query(query["q"][0]))
            error_key = query.get("error", [""])[0]
            dogs = self.session.view()
            body = render_list_page(
                dogs,
                self.session.roster.liked_count(dogs),
                query=self.session.search_query,
                error=ERROR_MESSAGES.get(error_key),
            )
            return self._send_html(200, body)

        if parsed.path.startswith("/dogs/"):
            name = unquote(parsed.path[len("/dogs/"):])
            dog = self.session.get(name)
            if dog is None:
                return self._send_html(404, render_not_found_page(name))
            return self._send_html(200, render_details_page(dog))

        if parsed.path == "/add":
            flow = self.session.begin_add_flow()
            flow.error = None
            return self._send_html(200, render_add_page(flow))

        if parsed.path == "/settings":
            return self._send_html(200, render_settings_page())

        if parsed.path == "/profile":
            return self._send_html(200, render_profile_page(get_owner_name()))

        if parsed.path == "/api/dogs":
            if "q" in query:
                dogs = self.session.view(normalize_query(query["q"][0]))
            else:
                dogs = self.session.view()
            return self._send_json(
                200,
                {
                    "items": [dog.to_dict() for dog in dogs],
                    "count": len(dogs),
                    "liked": self.session.roster.liked_count(dogs),
                },
            )

        if parsed.path == "/api/add-flow":
            flow = self.session.add_flow
            if flow is None:
                return self._send_json(404, {"error": "no add flow in progress"})
            return self._send_json(
                200,
                {"flow": flow.flow_id, "state": flow.state, "image_url": flow.image_url},
            )

        if parsed.path == "/api/health":
            return self._send_json(200, {"ok": True, "dogs": len(self.session.roster)})

        if parsed.path in STATIC_FILES:
            return super().do_GET()

        return self.send_error(404, "Not Found")

    def do_POST(self):
        """Handle form posts for adding, liking, and removing dogs.

        Returns:
            None.
        """
        parsed = urlparse(self.path)
        form = self._read_form()

        def field(key: str) -> str:
            return form.get(key, [""])[0]

        if parsed.path == "/add":
            name, breed = field("name"), field("breed")
            try:
                self.session.submit_new_dog(name, breed, flow_id=field("flow") or None)
            except DuplicateNameError:
                status, error = 409, DUPLICATE_NAME_MESSAGE
            except ValueError as exc:
                status, error = 400, str(exc)
            else:
                return self._redirect("/")
            flow = self.session.begin_add_flow()
            flow.error = error
            return self._send_html(status, render_add_page(flow, name=name, breed=breed))

        if parsed.path == "/add/cancel":
            self.session.cancel_add_flow()
            return self._redirect("/")

        if parsed.path == "/quick-add":
            try:
                self.session.quick_add(field("name"))
            except DuplicateNameError:
                params = {"error": "duplicate"}
                if self.session.search_query:
                    params["q"] = self.session.search_query
                return self._redirect(f"/?{urlencode(params)}")
            except ValueError:
                pass
            return self._redirect("/")

        if parsed.path == "/like":
            self.session.toggle_liked(field("name"))
            return self._redirect(normalize_next_path(field("next")))

        if parsed.path == "/remove":
            self.session.remove(field("name"))
            return self._redirect(normalize_next_path(field("next")))

        return self._send_json(404, {"error": "not found"})

    def log_message(self, fmt, *args):
        """Route default HTTP request logging through the module logger.

        Args:
            fmt: Log format string.
            *args: Format arguments.

        Returns:
            None.
        """
        logger.debug(f"{self.address_string()} {fmt % args}")


def main() -> None:
    """Run the Doggos HTTP server from CLI arguments.

    Returns:
        None.
    """
    logging.basicConfig(level=get_log_level(), format=LOG_FORMAT)
    parser = argparse.ArgumentParser(description=f"Serve the {APP_TITLE} web app")
    parser.add_argument("--host", default="127.0.0.1")
    parser.add_argument("--port", type=int, default=8000)
    args = parser.parse_args()

    server = DoggosServer((args.host, args.port))
    logger.info(f"{APP_TITLE} running at http://{args.host}:{args.port}")
    try:
        server.serve_forever()
    except KeyboardInterrupt:
        pass
    finally:
        server.server_close()


if __name__ == "__main__":
    main()

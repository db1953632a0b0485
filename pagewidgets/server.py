"""Preview server for menu pages, tabular input forms and their row endpoints.

The routing lives in :class:`PreviewApp` so it can be exercised without a
socket; ``make_request_handler`` and ``serve`` put it behind
``http.server`` for the CLI.
"""

from __future__ import annotations

import contextlib
import logging
import mimetypes
from dataclasses import dataclass
from html import escape
from http import HTTPStatus
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from typing import Any, Iterator, Mapping, Sequence
from urllib.parse import parse_qs, urlsplit

from .assets import BUNDLED_ASSETS_DIR
from .config import Config
from .content import Menu, MenuLoadError, load_menus
from .forms import (
    UnknownWidgetError,
    build_row_endpoint,
    parse_submission,
    render_widget_page,
    submission_prefix,
)
from .markup import link, tag
from .pages import ArticleViewRenderer, render_document
from .templates import TemplateAssets
from .widgets.lightbox import LIGHTBOX_ASSETS_DIR

logger = logging.getLogger(__name__)

HTML_CONTENT_TYPE = "text/html; charset=utf-8"
TEXT_CONTENT_TYPE = "text/plain; charset=utf-8"
MAX_FORM_BYTES = 1024 * 1024

# Ensure correct Content-Type headers for the bundled assets.
CONTENT_TYPES = {
    ".css": "text/css; charset=utf-8",
    ".js": "application/javascript; charset=utf-8",
    ".json": "application/json; charset=utf-8",
    ".svg": "image/svg+xml",
    ".png": "image/png",
    ".webp": "image/webp",
}


@dataclass(frozen=True, slots=True)
class Response:
    status: int
    body: bytes
    content_type: str = HTML_CONTENT_TYPE

    @classmethod
    def html(cls, text: str, status: int = HTTPStatus.OK) -> "Response":
        return cls(status=status, body=text.encode("utf-8"))

    @classmethod
    def text(cls, text: str, status: int) -> "Response":
        return cls(status=status, body=text.encode("utf-8"), content_type=TEXT_CONTENT_TYPE)


class PreviewApp:
    """Route preview requests to the page, form and row renderers."""

    def __init__(self, config: Config, *, admin: bool | None = None) -> None:
        self._config = config
        self._admin = config.admin_access if admin is None else admin
        self._assets = TemplateAssets(config)
        self._assets.publisher.publish(BUNDLED_ASSETS_DIR)
        self._assets.publisher.publish(LIGHTBOX_ASSETS_DIR)
        self._pages = ArticleViewRenderer(self._assets, is_admin=lambda: self._admin)

    @property
    def assets(self) -> TemplateAssets:
        return self._assets

    def dispatch(
        self,
        method: str,
        target: str,
        form: Mapping[str, Sequence[str]] | None = None,
        *,
        ajax: bool = False,
    ) -> Response:
        parts = urlsplit(target)
        path = parts.path
        query = parse_qs(parts.query, keep_blank_values=True)
        base = self._config.base_url

        if path.startswith(f"{self._assets.publisher.base_url}/"):
            return self._serve_asset(path)
        if base:
            if not (path == base or path.startswith(f"{base}/")):
                return Response.text("Not found", HTTPStatus.NOT_FOUND)
            path = path[len(base):]

        segments = [segment for segment in path.split("/") if segment]
        logger.debug("%s %s -> %s", method, target, segments)
        if method not in {"GET", "POST"}:
            return Response.text("Method not allowed", HTTPStatus.METHOD_NOT_ALLOWED)
        if not segments:
            return self._index()
        if segments[0] == "pages" and len(segments) == 2 and method == "GET":
            return self._menu_page(segments[1], query)
        if segments[0] == "widgets" and len(segments) == 2:
            submitted = form if method == "POST" else None
            return self._widget_page(segments[1], submitted, ajax=ajax)
        if segments[0] == "widgets" and len(segments) == 3 and segments[2] == "row" and method == "GET":
            return self._row(segments[1], query)
        return Response.text("Not found", HTTPStatus.NOT_FOUND)

    def _index(self) -> Response:
        urls = self._assets.urls
        items: list[str] = []
        for menu_id, menu in sorted(self._load_menus().items()):
            items.append(tag("li", None, link(escape(menu.title), urls.build(f"pages/{menu_id}"))))
        for name in sorted(self._config.widgets):
            items.append(tag("li", None, link(escape(name), urls.build(f"widgets/{name}"))))
        body = tag("ul", {"class": "preview-index"}, "".join(items))
        return Response.html(f"<!DOCTYPE html>\n<title>{escape(self._config.app_name)}</title>\n{body}\n")

    def _menu_page(self, raw_id: str, query: Mapping[str, list[str]]) -> Response:
        if not raw_id.isdigit():
            return Response.text("Not found", HTTPStatus.NOT_FOUND)
        menu = self._load_menus().get(int(raw_id))
        if menu is None:
            return Response.text("Not found", HTTPStatus.NOT_FOUND)
        flashes = {key[len("flash."):]: values[-1] for key, values in query.items() if key.startswith("flash.")}
        page = self._pages.render(menu, flashes=flashes)
        return Response.html(render_document(self._assets, page))

    def _widget_page(
        self,
        name: str,
        form: Mapping[str, Sequence[str]] | None,
        *,
        ajax: bool,
    ) -> Response:
        try:
            models: list[Any] | None = None
            if form is not None:
                models = parse_submission(form, submission_prefix(self._assets, name))
                logger.info("Received %d row(s) for widget '%s'.", len(models), name)
            page = render_widget_page(self._assets, name, models=models, ajax=ajax)
        except UnknownWidgetError:
            return Response.text("Not found", HTTPStatus.NOT_FOUND)
        if ajax:
            return Response.html(page.content)
        return Response.html(render_document(self._assets, page))

    def _row(self, name: str, query: Mapping[str, list[str]]) -> Response:
        try:
            endpoint = build_row_endpoint(self._assets, name)
        except UnknownWidgetError:
            return Response.text("Not found", HTTPStatus.NOT_FOUND)
        result = endpoint.handle(query)
        if result.ok:
            return Response.html(result.body, result.status)
        return Response.text(result.body, result.status)

    def _serve_asset(self, path: str) -> Response:
        located = self._assets.publisher.locate(path)
        if located is None:
            return Response.text("Not found", HTTPStatus.NOT_FOUND)
        content_type = CONTENT_TYPES.get(located.suffix.lower())
        if content_type is None:
            content_type = mimetypes.guess_type(located.name)[0] or "application/octet-stream"
        return Response(status=HTTPStatus.OK, body=located.read_bytes(), content_type=content_type)

    def _load_menus(self) -> dict[int, Menu]:
        try:
            return load_menus(self._config.content_dir)
        except MenuLoadError as exc:
            logger.error("Unable to load menus: %s", exc)
            return {}


def content_length(raw: str | None) -> int | None:
    """Parse a Content-Length header; ``None`` marks a malformed value."""
    if raw is None or not raw.strip():
        return 0
    try:
        length = int(raw)
    except ValueError:
        return None
    return length if length >= 0 else None


def make_request_handler(app: PreviewApp) -> type[BaseHTTPRequestHandler]:
    """Create a request handler bound to ``app``."""

    class PreviewRequestHandler(BaseHTTPRequestHandler):
        def do_GET(self) -> None:  # noqa: N802
            self._respond(app.dispatch("GET", self.path, ajax=self._is_ajax()))

        def do_POST(self) -> None:  # noqa: N802
            length = content_length(self.headers.get("Content-Length"))
            if length is None:
                self._respond(Response.text("Invalid Content-Length", HTTPStatus.BAD_REQUEST))
                return
            if length > MAX_FORM_BYTES:
                self._respond(Response.text("Request too large", HTTPStatus.REQUEST_ENTITY_TOO_LARGE))
                return
            raw = self.rfile.read(length).decode("utf-8", "replace")
            form = parse_qs(raw, keep_blank_values=True)
            self._respond(app.dispatch("POST", self.path, form, ajax=self._is_ajax()))

        def log_message(self, format: str, *args: Any) -> None:
            logger.info("%s - %s", self.address_string(), format % args)

        def _is_ajax(self) -> bool:
            return self.headers.get("X-Requested-With") == "XMLHttpRequest"

        def _respond(self, response: Response) -> None:
            self.send_response(response.status)
            self.send_header("Content-Type", response.content_type)
            self.send_header("Content-Length", str(len(response.body)))
            self.send_header("Cache-Control", "no-store")
            self.end_headers()
            self.wfile.write(response.body)

    return PreviewRequestHandler


class _ThreadingHTTPServer(ThreadingHTTPServer):
    daemon_threads = True
    allow_reuse_address = True


@contextlib.contextmanager
def serve(
    host: str,
    port: int,
    handler: type[BaseHTTPRequestHandler],
) -> Iterator[ThreadingHTTPServer]:
    """Context manager that creates and cleans up the HTTP server."""
    server = _ThreadingHTTPServer((host, port), handler)
    try:
        yield server
    finally:
        try:
            server.shutdown()
        finally:
            server.server_close()

"""URL building for framework routes."""

from __future__ import annotations

import logging
from typing import Any, Mapping, Protocol
from urllib.parse import quote, urlencode

logger = logging.getLogger(__name__)

FRAGMENT_PARAM = "#"


class UrlBuilder(Protocol):
    def build(self, route: str, params: Mapping[str, Any] | None = None) -> str:
        ...


class RouteUrlBuilder:
    """Turn ``controller/action`` routes into URLs below ``base_url``.

    ``routes`` maps a route to an explicit path; unmapped routes are used as the
    path verbatim. The ``"#"`` parameter becomes the URL fragment.
    """

    def __init__(self, base_url: str = "", routes: Mapping[str, str] | None = None) -> None:
        self._base_url = base_url.rstrip("/")
        self._routes = dict(routes or {})

    def build(self, route: str, params: Mapping[str, Any] | None = None) -> str:
        query = {key: value for key, value in (params or {}).items() if value is not None}
        fragment = query.pop(FRAGMENT_PARAM, None)

        path = self._routes.get(route, route).strip("/")
        url = f"{self._base_url}/{path}"
        if query:
            url = f"{url}?{urlencode(query, doseq=True)}"
        if fragment:
            url = f"{url}#{quote(str(fragment))}"
        logger.debug("Built URL %s for route %s", url, route)
        return url

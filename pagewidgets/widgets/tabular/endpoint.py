"""Row-fetch endpoint rendering the interior of a single new row."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from http import HTTPStatus
from typing import Any, Callable, Mapping, Sequence

from ...themes import TemplateRenderer

logger = logging.getLogger(__name__)

RESERVED_PARAMS = frozenset({"index", "count", "_"})


@dataclass(frozen=True, slots=True)
class RowResponse:
    status: int
    body: str

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300


class RowEndpoint:
    """Render ``input_view`` for a fresh model at the requested index.

    The response carries the row interior only; the client wraps it in the row
    tag and appends the remove control and the index field itself.
    """

    def __init__(
        self,
        renderer: TemplateRenderer,
        input_view: str,
        *,
        model_factory: Callable[[], Any] = dict,
        input_limit: int | None = None,
    ) -> None:
        self._renderer = renderer
        self._input_view = input_view
        self._model_factory = model_factory
        self._input_limit = input_limit or None

    def handle(self, query: Mapping[str, str | Sequence[str]]) -> RowResponse:
        params = {key: _first(value) for key, value in query.items()}

        index = _parse_non_negative(params.get("index"))
        if index is None:
            logger.warning("Rejected row request with index %r.", params.get("index"))
            return RowResponse(HTTPStatus.BAD_REQUEST, "A non-negative integer 'index' is required.")

        count = _parse_non_negative(params.get("count"))
        if self._input_limit is not None and count is not None and count >= self._input_limit:
            logger.warning("Rejected row %d: %d row(s) already present (limit %d).", index, count, self._input_limit)
            return RowResponse(HTTPStatus.CONFLICT, f"No more than {self._input_limit} rows are allowed.")

        data: dict[str, Any] = {key: value for key, value in params.items() if key not in RESERVED_PARAMS}
        data["model"] = self._model_factory()
        data["index"] = index
        return RowResponse(HTTPStatus.OK, self._renderer.render_partial(self._input_view, data))


def _first(value: str | Sequence[str]) -> str:
    if isinstance(value, str):
        return value
    return value[0] if value else ""


def _parse_non_negative(value: str | None) -> int | None:
    if value is None:
        return None
    text = value.strip()
    if not (text.isascii() and text.isdigit()):
        return None
    return int(text)

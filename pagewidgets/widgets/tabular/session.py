"""In-process model of the tabular input add/remove protocol.

The bundled client script and this class follow the same rules, so the
server can reason about a widget's state (and tests can exercise it) without a
browser:

* the row count and the next index are explicit state, never re-derived from
  the markup;
* only one add may be in flight; indices grow strictly and are never reused;
* the add control is visible iff the limit is not reached, the hide-on-single
  markers iff more than one row exists, and the header iff any row exists.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Mapping

from .config import TabularInputConfig
from .widget import TabularInputError

logger = logging.getLogger(__name__)

RowFetcher = Callable[[str, Mapping[str, Any]], str]
ConfirmPrompt = Callable[[str], bool]


class AddInProgressError(TabularInputError):
    """Raised when a second add starts before the first one resolved."""


class InputLimitReachedError(TabularInputError):
    """Raised when an add is attempted while the row limit is reached."""


class RowFetchError(TabularInputError):
    """Raised when the row-fetch endpoint could not supply a new row."""

    def __init__(self, message: str, *, index: int) -> None:
        super().__init__(message)
        self.index = index


class UnknownRowError(TabularInputError, KeyError):
    """Raised when removing an index that is not currently rendered."""


@dataclass(slots=True)
class Row:
    index: int
    html: str = ""


class TabularInputSession:
    """Track the rows of one widget instance through adds and removes."""

    def __init__(
        self,
        config: TabularInputConfig,
        *,
        rows: list[Row] | None = None,
        after_add: Callable[[Row], None] | None = None,
        after_remove: Callable[[Row], None] | None = None,
        on_error: Callable[[Exception, int], None] | None = None,
    ) -> None:
        self.config = config
        self._rows: list[Row] = list(rows or [])
        self._next_index = max((row.index for row in self._rows), default=-1) + 1
        self._pending: int | None = None
        self.after_add = after_add
        self.after_remove = after_remove
        self.on_error = on_error

    @classmethod
    def from_config(cls, config: TabularInputConfig, **callbacks: Any) -> "TabularInputSession":
        """Start from the rows the initial render emits."""
        rows = [Row(index=index) for index, _ in enumerate(config.initial_models)]
        return cls(config, rows=rows, **callbacks)

    @property
    def rows(self) -> list[int]:
        return [row.index for row in self._rows]

    @property
    def count(self) -> int:
        return len(self._rows)

    @property
    def pending(self) -> bool:
        return self._pending is not None

    @property
    def next_index(self) -> int:
        return self._next_index

    @property
    def add_visible(self) -> bool:
        return not self.config.limit_reached(self.count)

    @property
    def hide_on_single_visible(self) -> bool:
        return self.count > 1

    @property
    def header_visible(self) -> bool:
        return self.count > 0

    def request_params(self, index: int) -> dict[str, Any]:
        """Query parameters sent to the row-fetch endpoint for ``index``."""
        params = dict(self.config.view_data)
        params["index"] = index
        params["count"] = self.count
        return params

    def begin_add(self) -> int:
        """Lock the session for an add and return the index the new row gets."""
        if self._pending is not None:
            raise AddInProgressError(f"Row {self._pending} is still being fetched.")
        if self.config.limit_reached(self.count):
            raise InputLimitReachedError(f"Input limit of {self.config.input_limit} reached.")
        self._pending = self._next_index
        return self._pending

    def complete_add(self, index: int, html: str) -> Row:
        self._expect_pending(index)
        row = Row(index=index, html=html)
        self._rows.append(row)
        self._next_index = index + 1
        self._pending = None
        if self.after_add is not None:
            self.after_add(row)
        return row

    def fail_add(self, index: int, error: Exception) -> None:
        """Release the lock after a failed fetch; rows are left untouched."""
        self._expect_pending(index)
        self._pending = None
        logger.warning("Fetching tabular row %d failed: %s", index, error)
        if self.on_error is not None:
            self.on_error(error, index)

    def add(self, fetch: RowFetcher) -> Row:
        """Run a complete add using ``fetch(url, params)`` to obtain the row interior."""
        index = self.begin_add()
        try:
            html = fetch(self.config.input_url, self.request_params(index))
        except Exception as exc:
            self.fail_add(index, exc)
            raise RowFetchError(f"Unable to fetch row {index}: {exc}", index=index) from exc
        return self.complete_add(index, html)

    def remove(self, index: int, confirm: ConfirmPrompt | None = None) -> bool:
        """Remove the row with ``index``; returns False when confirmation is declined."""
        position = self._position(index)
        message = self.config.remove_confirmation
        if message is not None and confirm is not None and not confirm(message):
            logger.debug("Removal of tabular row %d declined.", index)
            return False
        row = self._rows.pop(position)
        if self.after_remove is not None:
            self.after_remove(row)
        return True

    def _position(self, index: int) -> int:
        for position, row in enumerate(self._rows):
            if row.index == index:
                return position
        raise UnknownRowError(index)

    def _expect_pending(self, index: int) -> None:
        if self._pending != index:
            raise TabularInputError(f"No pending add for row {index}.")

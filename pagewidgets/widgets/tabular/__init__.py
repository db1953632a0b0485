"""Repeatable form input groups with add/remove controls."""

from .config import TabularInputConfig
from .endpoint import RowEndpoint, RowResponse
from .session import (
    AddInProgressError,
    InputLimitReachedError,
    Row,
    RowFetchError,
    TabularInputSession,
    UnknownRowError,
)
from .widget import INDEX_PLACEHOLDER, TabularInput, TabularInputError

__all__ = [
    "AddInProgressError",
    "INDEX_PLACEHOLDER",
    "InputLimitReachedError",
    "Row",
    "RowEndpoint",
    "RowFetchError",
    "RowResponse",
    "TabularInput",
    "TabularInputConfig",
    "TabularInputError",
    "TabularInputSession",
    "UnknownRowError",
]

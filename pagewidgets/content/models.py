"""Typed representations of page menus and their articles."""

from __future__ import annotations

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, field_validator


class ContentFormat(str, Enum):
    """How an article body is stored."""

    HTML = "html"
    MARKDOWN = "markdown"


class Article(BaseModel):
    """One article shown on a menu page."""

    id: int = Field(ge=0)
    title: str = Field(description="Display title.")
    content: str = Field(default="", description="Trusted body markup or Markdown source.")
    content_format: ContentFormat = Field(default=ContentFormat.HTML)

    @field_validator("title")
    def _strip_title(cls, value: str) -> str:
        return value.strip()

    @property
    def anchor(self) -> str:
        return f"article{self.id}"


class Menu(BaseModel):
    """A page menu entry: title, optional side content and ordered articles."""

    id: int = Field(ge=0)
    title: str = Field(description="Display title.")
    content: Optional[str] = Field(default=None, description="Optional side content markup.")
    articles: list[Article] = Field(default_factory=list)

    @field_validator("title")
    def _normalize_title(cls, value: str) -> str:
        cleaned = value.strip()
        if not cleaned:
            raise ValueError("title cannot be empty")
        return cleaned

    @field_validator("content")
    def _blank_content_is_none(cls, value: Optional[str]) -> Optional[str]:
        if value is None or not value.strip():
            return None
        return value

    @property
    def article_count(self) -> int:
        return len(self.articles)

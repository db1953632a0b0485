"""Shared rendering resources: theme templates, URLs, and published assets."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from .assets import AssetPublisher
from .config import Config
from .routing import RouteUrlBuilder
from .themes import DEFAULT_THEME_NAME, ThemeError, ThemeLoader

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class TemplateAssets:
    """Bundle the collaborators every renderer needs for one configuration."""

    config: Config
    theme: ThemeLoader
    urls: RouteUrlBuilder
    publisher: AssetPublisher

    def __init__(self, config: Config) -> None:
        self.config = config
        self.theme = self._load_theme()
        self.urls = RouteUrlBuilder(config.base_url)
        self.publisher = AssetPublisher(config.assets.base_url, hash_length=config.assets.hash_length)

    def _load_theme(self) -> ThemeLoader:
        try:
            return ThemeLoader(
                themes_root=self.config.themes_dir,
                active_theme=self.config.theme_name or DEFAULT_THEME_NAME,
            )
        except ThemeError as exc:
            raise ThemeError(f"Unable to load theme '{self.config.theme_name}': {exc}") from exc

    def render_partial(self, view_id: str, data: dict[str, Any]) -> str:
        return self.theme.render_partial(view_id, data)

    def render_page(self, key: str, context: dict[str, Any]) -> str:
        return self.theme.render_page(key, context)

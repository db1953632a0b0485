"""Theme loading and Jinja rendering for pagewidgets."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Protocol, Sequence

from jinja2 import Environment, FileSystemLoader, TemplateNotFound, select_autoescape
from pydantic import BaseModel, ConfigDict, Field, ValidationError

logger = logging.getLogger(__name__)

MANIFEST_FILENAME = "theme.json"
DEFAULT_THEME_NAME = "default"
BUNDLED_THEMES_ROOT = Path(__file__).resolve().parent


class ThemeError(RuntimeError):
    """Raised when a theme cannot be loaded or a template cannot be rendered."""


class TemplateRenderer(Protocol):
    def render_partial(self, view_id: str, data: dict[str, Any]) -> str:
        ...


class ThemeManifest(BaseModel):
    """Structured representation of the theme.json manifest."""

    model_config = ConfigDict(extra="ignore")

    name: str = Field(default="Unnamed Theme")
    version: str | None = Field(default=None)
    entrypoints: dict[str, str] = Field(default_factory=dict)
    partials: dict[str, str] = Field(default_factory=dict)

    def merge_with(self, fallback: "ThemeManifest | None") -> "ThemeManifest":
        if fallback is None:
            return self
        data = {
            "name": self.name or fallback.name,
            "version": self.version or fallback.version,
            "entrypoints": {**fallback.entrypoints, **self.entrypoints},
            "partials": {**fallback.partials, **self.partials},
        }
        return ThemeManifest(**data)

    def to_template_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "version": self.version,
            "entrypoints": dict(self.entrypoints),
            "partials": dict(self.partials),
        }


class ThemeLoader:
    """Load a theme manifest and its Jinja environment.

    The active theme is looked up under ``themes_root``; templates it does not
    provide are served from the bundled default theme.
    """

    def __init__(
        self,
        *,
        themes_root: Path | None = None,
        active_theme: str = DEFAULT_THEME_NAME,
        fallback_root: Path = BUNDLED_THEMES_ROOT,
    ) -> None:
        self._themes_root = themes_root
        self._active_theme = active_theme or DEFAULT_THEME_NAME
        self._fallback_root = fallback_root
        self._environment: Environment | None = None
        self._manifest: ThemeManifest | None = None
        self._load()

    @property
    def manifest(self) -> ThemeManifest:
        assert self._manifest is not None  # pragma: no cover - construction guarantees
        return self._manifest

    @property
    def environment(self) -> Environment:
        assert self._environment is not None  # pragma: no cover - construction guarantees
        return self._environment

    @property
    def active_theme(self) -> str:
        return self._active_theme

    def render_page(self, key: str, context: dict[str, Any]) -> str:
        template_path = self.manifest.entrypoints.get(key)
        if not template_path:
            raise ThemeError(f"Theme '{self._active_theme}' does not define an entrypoint named '{key}'.")
        return self._render(template_path, context)

    def render_partial(self, view_id: str, data: dict[str, Any]) -> str:
        """Render a partial by manifest alias or template path."""
        template_path = self.manifest.partials.get(view_id, view_id)
        return self._render(template_path, data)

    def ensure_templates(self, template_keys: Sequence[str]) -> None:
        for key in template_keys:
            if not key:
                continue
            template_path = self.manifest.entrypoints.get(key, key)
            try:
                self.environment.get_template(template_path)
            except TemplateNotFound as exc:
                raise ThemeError(
                    f"Required template '{template_path}' not found while loading theme '{self._active_theme}'."
                ) from exc

    def _render(self, template_path: str, context: dict[str, Any]) -> str:
        try:
            template = self.environment.get_template(template_path)
        except TemplateNotFound as exc:
            raise ThemeError(f"Template '{template_path}' not found in theme '{self._active_theme}'.") from exc
        return template.render(**context)

    def _load(self) -> None:
        fallback_dir = self._fallback_root / DEFAULT_THEME_NAME
        fallback_manifest = self._load_manifest(fallback_dir)
        if fallback_manifest is None:
            raise ThemeError(f"Bundled theme manifest missing at {fallback_dir / MANIFEST_FILENAME}.")

        search_paths = [fallback_dir]
        merged_manifest = fallback_manifest
        if self._themes_root is not None:
            active_dir = self._themes_root / self._active_theme
            active_manifest = self._load_manifest(active_dir)
            if active_manifest is None:
                logger.warning(
                    "Theme '%s' not available under %s. Falling back to the bundled theme.",
                    self._active_theme,
                    self._themes_root,
                )
            else:
                merged_manifest = active_manifest.merge_with(fallback_manifest)
                search_paths.insert(0, active_dir)

        loader = FileSystemLoader([str(path) for path in search_paths])
        environment = Environment(
            loader=loader,
            autoescape=select_autoescape(["html", "xml"]),
            trim_blocks=True,
            lstrip_blocks=True,
        )
        environment.globals["theme"] = merged_manifest.to_template_dict()

        self._environment = environment
        self._manifest = merged_manifest
        self.ensure_templates(list(merged_manifest.entrypoints.values()))

    def _load_manifest(self, theme_dir: Path) -> ThemeManifest | None:
        manifest_path = theme_dir / MANIFEST_FILENAME
        if not manifest_path.exists():
            logger.debug("Theme manifest not found at %s", manifest_path)
            return None
        try:
            data = json.loads(manifest_path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as exc:
            raise ThemeError(f"Failed to load theme manifest at {manifest_path}: {exc}") from exc
        try:
            return ThemeManifest.model_validate(data)
        except ValidationError as exc:
            raise ThemeError(f"Theme manifest validation failed for {manifest_path}: {exc}") from exc

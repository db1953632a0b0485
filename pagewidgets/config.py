from pathlib import Path
from typing import Any, Literal

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator

from .widgets.tabular.config import TabularInputConfig

CONFIG_FILENAME = "pagewidgets.yml"


class ConfigError(ValueError):
    """Raised when a configuration file cannot be parsed or validated."""


class AssetConfig(BaseModel):
    """Where published asset directories are exposed."""

    base_url: str = Field(default="/assets", description="URL prefix for published asset directories.")
    hash_length: int = Field(default=8, ge=4, le=64)

    @field_validator("base_url")
    def _normalize_base_url(cls, value: str) -> str:
        text = value.strip().rstrip("/")
        if not text:
            return "/assets"
        if "://" not in text and not text.startswith("/"):
            text = f"/{text}"
        return text


class PageLabels(BaseModel):
    """Alternative text for the admin action icons."""

    update_menu: str = Field(default="Update Menu")
    manage_articles: str = Field(default="Manage Articles")
    new_article: str = Field(default="New Article")
    update_article: str = Field(default="Update Article")


class PageConfig(BaseModel):
    """Options for the article view renderer."""

    page_css_file: str | Literal[False] | None = Field(
        default=None,
        description=(
            "Stylesheet for menu pages. Leave unset for the bundled stylesheet, "
            "set to false to skip it, or give a URL."
        ),
    )
    alerts: dict[str, str] = Field(
        default_factory=lambda: {"search.short": "error"},
        description="Flash message keys rendered above the page, mapped to a severity.",
    )
    lightbox_selector: str = Field(default=".page-article-body img")
    labels: PageLabels = Field(default_factory=PageLabels)

    @field_validator("page_css_file", mode="before")
    def _normalize_css_file(cls, value: Any) -> Any:
        if isinstance(value, str) and not value.strip():
            return None
        if value is True:
            raise ValueError("page_css_file must be a URL, false, or unset.")
        return value


class WidgetDefinition(BaseModel):
    """Named tabular input exposed by the preview server and CLI."""

    title: str | None = Field(default=None)
    model_defaults: dict[str, Any] = Field(
        default_factory=dict,
        description="Field values of the blank model rendered for new rows.",
    )
    widget: TabularInputConfig = Field(default_factory=TabularInputConfig)
    strict_limit: bool = Field(
        default=False,
        description="Reject row requests once the client reports the limit was reached.",
    )


class Config(BaseModel):
    app_name: str = Field(default="My Web Application")
    base_url: str = Field(default="", description="URL prefix prepended to generated routes.")
    content_dir: Path = Field(default=Path("content/menus"))
    themes_dir: Path | None = Field(default=None)
    theme_name: str = Field(default="default")
    admin_access: bool = Field(default=False)
    assets: AssetConfig = Field(default_factory=AssetConfig)
    page: PageConfig = Field(default_factory=PageConfig)
    widgets: dict[str, WidgetDefinition] = Field(default_factory=dict)

    @field_validator("content_dir", mode="before")
    def _ensure_path(cls, value: Any) -> Path:
        return Path(value)

    @field_validator("themes_dir", mode="before")
    def _ensure_optional_path(cls, value: Any) -> Path | None:
        if value is None:
            return None
        return Path(value)

    @field_validator("base_url")
    def _strip_trailing_slash(cls, value: str) -> str:
        return value.strip().rstrip("/")


def load_config(path: str | Path) -> Config:
    """Load configuration and resolve relative paths based on the config location.

    The ``path`` argument may point to a file (e.g., ``/site/pagewidgets.yml``) or a
    directory containing that file. All relative paths inside the configuration
    are interpreted relative to the directory holding the config file.
    """
    candidate = Path(path)
    data: dict[str, Any] = {}
    base_dir: Path
    if candidate.is_dir():
        # A project directory without a config file runs on defaults.
        config_file = candidate / CONFIG_FILENAME
        if config_file.exists():
            data = _read_yaml(config_file)
        base_dir = candidate.resolve()
        config_path = config_file
    else:
        config_path = candidate
        if not config_path.exists():
            raise FileNotFoundError(config_path)
        data = _read_yaml(config_path)
        base_dir = config_path.parent.resolve()

    try:
        cfg = Config(**data)
    except ValidationError as exc:
        raise ConfigError(f"Invalid configuration in {config_path}: {exc}") from exc

    def _abs_required(value: Path) -> Path:
        return value if value.is_absolute() else (base_dir / value).resolve()

    cfg.content_dir = _abs_required(cfg.content_dir)
    if cfg.themes_dir is not None:
        cfg.themes_dir = _abs_required(cfg.themes_dir)
    return cfg


def _read_yaml(path: Path) -> dict[str, Any]:
    try:
        with path.open("r", encoding="utf-8") as handle:
            data = yaml.safe_load(handle) or {}
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigError(f"Configuration {path} does not define a mapping root.")
    return data

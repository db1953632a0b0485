from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from .models import Menu

logger = logging.getLogger(__name__)

SUPPORTED_SUFFIXES = {".yml", ".yaml", ".json"}


class MenuLoadError(ValueError):
    """Raised when a menu file cannot be read or validated."""

    def __init__(self, message: str, *, path: Path | None = None) -> None:
        super().__init__(message)
        self.path = path


def load_menu(path: Path) -> Menu:
    """Load a single menu from a YAML or JSON file."""
    if path.suffix.lower() not in SUPPORTED_SUFFIXES:
        raise MenuLoadError(f"Unsupported menu file type '{path.suffix}'.", path=path)
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise MenuLoadError(f"Unable to read {path}: {exc}", path=path) from exc

    try:
        data: Any = json.loads(text) if path.suffix.lower() == ".json" else yaml.safe_load(text)
    except (json.JSONDecodeError, yaml.YAMLError) as exc:
        raise MenuLoadError(f"Failed to parse {path}: {exc}", path=path) from exc
    if not isinstance(data, dict):
        raise MenuLoadError(f"Menu file {path} does not define a mapping root.", path=path)

    try:
        return Menu.model_validate(data)
    except ValidationError as exc:
        raise MenuLoadError(f"Invalid menu in {path}: {exc}", path=path) from exc


def load_menus(directory: Path) -> dict[int, Menu]:
    """Load every menu file in ``directory`` keyed by menu id."""
    menus: dict[int, Menu] = {}
    if not directory.exists():
        logger.warning("Menu directory %s does not exist.", directory)
        return menus
    for path in sorted(directory.iterdir()):
        if not path.is_file() or path.suffix.lower() not in SUPPORTED_SUFFIXES:
            continue
        menu = load_menu(path)
        if menu.id in menus:
            raise MenuLoadError(f"Duplicate menu id {menu.id} in {path}.", path=path)
        menus[menu.id] = menu
    return menus

"""Menu and article content models."""

from .loader import MenuLoadError, load_menu, load_menus
from .models import Article, ContentFormat, Menu

__all__ = ["Article", "ContentFormat", "Menu", "MenuLoadError", "load_menu", "load_menus"]

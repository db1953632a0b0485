"""Render page menus (title, side content and articles) into HTML."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Mapping

from .clientscript import ClientScript, ScriptPosition
from .content import Article, ContentFormat, Menu
from .markdown import render_markdown
from .markup import image, link
from .templates import TemplateAssets
from .widgets import AlertWidget, LightboxWidget

logger = logging.getLogger(__name__)

ENHANCE_SCRIPT_ID = "enhanceArticleContent"
ENHANCE_VIEW = "page/enhance"
PAGE_CSS_PATH = "css/page.css"


@dataclass(frozen=True, slots=True)
class Breadcrumb:
    label: str
    url: str | None = None


@dataclass(slots=True)
class RenderedPage:
    """A rendered content fragment plus the document-level data it needs."""

    title: str
    content: str
    client_script: ClientScript
    breadcrumbs: list[Breadcrumb] = field(default_factory=list)


class ArticleViewRenderer:
    """Render a menu with its articles, gating edit links behind ``is_admin``."""

    def __init__(
        self,
        assets: TemplateAssets,
        *,
        is_admin: Callable[[], bool] | None = None,
    ) -> None:
        self._assets = assets
        self._config = assets.config
        self._is_admin = is_admin or (lambda: assets.config.admin_access)
        self._alerts = AlertWidget(assets, assets.config.page.alerts)

    def render(self, menu: Menu, flashes: Mapping[str, str] | None = None) -> RenderedPage:
        client_script = ClientScript()
        self._register_stylesheet(client_script)
        client_script.register_script(
            ENHANCE_SCRIPT_ID,
            self._assets.render_partial(ENHANCE_VIEW, {}),
            ScriptPosition.READY,
        )

        admin = self._is_admin()
        context: dict[str, Any] = {
            "menu": menu,
            "alerts": self._alerts.render(flashes),
            "admin_actions": self._menu_actions(menu) if admin else [],
            "show_sub_nav": menu.article_count > 1,
            "articles": [self._article_context(article, admin) for article in menu.articles],
        }
        content = self._assets.render_page("article", context)

        LightboxWidget(
            self._assets,
            self._assets.publisher,
            selector=self._config.page.lightbox_selector,
        ).register(client_script)

        return RenderedPage(
            title=f"{self._config.app_name} - {menu.title}",
            content=content,
            client_script=client_script,
            breadcrumbs=[Breadcrumb(label=menu.title)],
        )

    def _register_stylesheet(self, client_script: ClientScript) -> None:
        css_file = self._config.page.page_css_file
        if css_file is None:
            client_script.register_css_file(self._assets.publisher.resolve(PAGE_CSS_PATH))
        elif css_file is not False:
            client_script.register_css_file(css_file)

    def _menu_actions(self, menu: Menu) -> list[str]:
        labels = self._config.page.labels
        urls = self._assets.urls
        return [
            self._icon_link("update", labels.update_menu, urls.build("menu/update", {"id": menu.id})),
            self._icon_link("admin", labels.manage_articles, urls.build("article/admin", {"menuId": menu.id})),
            self._icon_link("new", labels.new_article, urls.build("article/create", {"menuId": menu.id})),
        ]

    def _article_context(self, article: Article, admin: bool) -> dict[str, Any]:
        update_link = None
        if admin:
            url = self._assets.urls.build("article/update", {"id": article.id, "#": article.anchor})
            update_link = self._icon_link("update", self._config.page.labels.update_article, url)
        return {
            "id": article.id,
            "anchor": article.anchor,
            "title": article.title,
            "body": self._article_body(article),
            "update_link": update_link,
        }

    def _article_body(self, article: Article) -> str:
        if article.content_format is ContentFormat.MARKDOWN:
            return render_markdown(article.content)
        return article.content

    def _icon_link(self, icon: str, label: str, url: str) -> str:
        icon_url = self._assets.publisher.resolve(f"images/{icon}.svg")
        return link(image(icon_url, label, {"title": label}), url)


def render_document(assets: TemplateAssets, page: RenderedPage) -> str:
    """Wrap a rendered page in the theme layout."""
    context = {
        "page": {
            "title": page.title,
            "content": page.content,
            "breadcrumbs": page.breadcrumbs,
            "home_url": assets.urls.build(""),
            **page.client_script.to_template_dict(),
        }
    }
    return assets.render_page("layout", context)

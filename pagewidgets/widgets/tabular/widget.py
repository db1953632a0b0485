"""Server-side rendering of the tabular input widget."""

from __future__ import annotations

import itertools
import logging
from typing import Any

from ...clientscript import ClientScript, ScriptPosition
from ...markup import close_tag, hidden_input, link, merge_css_class, open_tag, substitute, tag
from ...themes import TemplateRenderer
from .config import TabularInputConfig

logger = logging.getLogger(__name__)

SCRIPT_VIEW = "tabular/script"
INDEX_PLACEHOLDER = "__index__"
AUTO_ID_PREFIX = "tabular"

_auto_ids = itertools.count()


class TabularInputError(RuntimeError):
    """Base class for tabular input failures."""


def next_widget_id() -> str:
    return f"{AUTO_ID_PREFIX}{next(_auto_ids)}"


class TabularInput:
    """Render a container of repeatable input rows plus add/remove controls.

    The protocol script is registered on ``client_script`` at the ready
    position. For partial (AJAX) responses, or when no registry is supplied, it
    is emitted inline right after the container instead.
    """

    def __init__(
        self,
        config: TabularInputConfig,
        renderer: TemplateRenderer,
        *,
        client_script: ClientScript | None = None,
        ajax: bool = False,
    ) -> None:
        self.config = config
        self._renderer = renderer
        self._client_script = client_script
        self._ajax = ajax

        container_options = dict(config.container_html_options)
        self.id = str(container_options.get("id") or config.id or next_widget_id())
        container_options["id"] = self.id
        self.container_options = merge_css_class(container_options, config.container_css_class)
        self.input_container_options = merge_css_class(
            config.input_container_html_options, config.input_container_css_class
        )
        self.header_options = merge_css_class(config.header_html_options, config.header_css_class)
        self.input_options = merge_css_class(config.input_html_options, config.input_css_class)
        self.remove_options = merge_css_class(config.remove_html_options, config.remove_css_class)
        self.add_options = merge_css_class(config.add_html_options, config.add_css_class)

        if config.limit_reached(len(config.models)):
            self.add_options = _hidden(self.add_options)
        if not config.models:
            self.header_options = _hidden(self.header_options)

    def render(self) -> str:
        config = self.config
        parts: list[str] = [open_tag(config.container_tag, self.container_options)]
        if config.header:
            parts.append(tag(config.header_tag, self.header_options, config.header))
        parts.append(open_tag(config.input_container_tag, self.input_container_options))
        parts.extend(self.render_rows())
        parts.append(close_tag(config.input_container_tag))
        parts.append(self.add_link())
        parts.append(close_tag(config.container_tag))

        script = self.render_script()
        if self._ajax or self._client_script is None:
            parts.append(f"<script>\n{script.strip()}\n</script>")
        else:
            self._client_script.register_script(f"TabularInput#{self.id}", script, ScriptPosition.READY)
        return "".join(parts)

    def render_rows(self) -> list[str]:
        config = self.config
        models = config.initial_models
        if not models:
            return []
        input_view = config.input_view
        if not input_view:
            raise TabularInputError(f"Tabular input '{self.id}' has models but no input_view to render them.")
        if len(models) < len(config.models):
            logger.debug(
                "Tabular input '%s' truncated %d model(s) to the limit of %d.",
                self.id,
                len(config.models),
                config.input_limit,
            )

        rows: list[str] = []
        for index, model in enumerate(models):
            data: dict[str, Any] = dict(config.view_data)
            data["model"] = model
            data["index"] = index
            interior = self._renderer.render_partial(input_view, data)
            rows.append(self.compose_row(interior, index))
        return rows

    def compose_row(self, interior: str, index: int | str) -> str:
        """Wrap a row interior with the row tag, remove control and index field."""
        return "".join(
            [
                open_tag(self.config.input_tag, self.input_options),
                interior,
                self.remove_link_and_index(index),
                close_tag(self.config.input_tag),
            ]
        )

    def add_link(self) -> str:
        markup = link(self.config.add_label, self.config.input_url, self.add_options)
        if self.config.add_template:
            markup = substitute(self.config.add_template, {"link": markup})
        return markup

    def remove_link_and_index(self, index: int | str) -> str:
        markup = link(self.config.remove_label, "#", self.remove_options) + hidden_input(
            index, {"class": self.config.index_css_class}
        )
        if self.config.remove_template:
            markup = substitute(self.config.remove_template, {"link": markup})
        return markup

    def script_options(self) -> dict[str, Any]:
        config = self.config
        return {
            "id": self.id,
            "containerClass": config.container_css_class,
            "inputContainerClass": config.input_container_css_class,
            "inputClass": config.input_css_class,
            "indexClass": config.index_css_class,
            "headerClass": config.header_css_class,
            "addClass": config.add_css_class,
            "removeClass": config.remove_css_class,
            "hideOnSingleClass": config.hide_on_single_css_class,
            "inputLimit": config.input_limit,
            "viewData": config.view_data,
            "removeConfirmation": config.remove_confirmation,
            "rowOpen": open_tag(config.input_tag, self.input_options),
            "rowClose": close_tag(config.input_tag),
            "rowSuffix": self.remove_link_and_index(INDEX_PLACEHOLDER),
            "indexPlaceholder": INDEX_PLACEHOLDER,
        }

    def render_script(self) -> str:
        config = self.config
        return self._renderer.render_partial(
            SCRIPT_VIEW,
            {
                "options": self.script_options(),
                "after_add_input": config.after_add_input,
                "after_remove_input": config.after_remove_input,
                "on_add_error": config.on_add_error,
            },
        )


def _hidden(options: dict[str, Any]) -> dict[str, Any]:
    """Hide an element while keeping the caller's other inline declarations."""
    hidden = dict(options)
    declarations = [part.strip() for part in str(hidden.get("style") or "").split(";")]
    kept = [part for part in declarations if part and part.split(":", 1)[0].strip().lower() != "display"]
    hidden["style"] = ";".join([*kept, "display:none"])
    return hidden

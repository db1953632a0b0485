"""Pages and row endpoints for the tabular inputs named in the configuration."""

from __future__ import annotations

import re
from typing import Any, Mapping, Sequence

from .clientscript import ClientScript
from .config import WidgetDefinition
from .pages import Breadcrumb, RenderedPage
from .templates import TemplateAssets
from .widgets.tabular import RowEndpoint, TabularInput, TabularInputConfig

DEFAULT_INPUT_VIEW = "tabular/row"
TABULAR_CSS_PATH = "css/tabular.css"
DEFAULT_FIELD_PREFIX = "rows"

_FIELD_RE = re.compile(r"(?P<prefix>[^\[\]]+)\[(?P<index>\d+)\]\[(?P<field>[^\[\]]+)\]")


class UnknownWidgetError(KeyError):
    """Raised when a widget name is not present in the configuration."""


def widget_definition(assets: TemplateAssets, name: str) -> WidgetDefinition:
    try:
        return assets.config.widgets[name]
    except KeyError:
        raise UnknownWidgetError(name) from None


def resolve_widget_config(assets: TemplateAssets, name: str) -> TabularInputConfig:
    """Fill in the id, row view and row URL a configured widget leaves open."""
    widget = widget_definition(assets, name).widget
    updates: dict[str, object] = {}
    if widget.id is None and "id" not in widget.container_html_options:
        updates["id"] = f"tabular-{name}"
    if widget.input_view is None:
        updates["input_view"] = DEFAULT_INPUT_VIEW
    if widget.input_url == "#":
        updates["input_url"] = assets.urls.build(f"widgets/{name}/row")
    return widget.model_copy(update=updates)


def submission_prefix(assets: TemplateAssets, name: str) -> str:
    """Field-name prefix the row view uses (the ``name`` view data entry)."""
    view_data = widget_definition(assets, name).widget.view_data
    return str(view_data.get("name") or DEFAULT_FIELD_PREFIX)


def parse_submission(form: Mapping[str, Sequence[str]], prefix: str = DEFAULT_FIELD_PREFIX) -> list[dict[str, str]]:
    """Group ``prefix[<index>][<field>]`` form fields into rows ordered by index."""
    grouped: dict[int, dict[str, str]] = {}
    for key, values in form.items():
        match = _FIELD_RE.fullmatch(key)
        if match is None or match.group("prefix") != prefix:
            continue
        row = grouped.setdefault(int(match.group("index")), {})
        row[match.group("field")] = values[-1] if values else ""
    return [grouped[index] for index in sorted(grouped)]


def render_widget_page(
    assets: TemplateAssets,
    name: str,
    *,
    models: list[Any] | None = None,
    ajax: bool = False,
) -> RenderedPage:
    """Render a configured tabular input inside a form.

    ``models`` replaces the configured initial rows, e.g. with a parsed submission.
    """
    definition = widget_definition(assets, name)
    config = resolve_widget_config(assets, name)
    if models is not None:
        config = config.model_copy(update={"models": list(models)})
    client_script = ClientScript()
    client_script.register_css_file(assets.publisher.resolve(TABULAR_CSS_PATH))
    widget = TabularInput(config, assets, client_script=client_script, ajax=ajax)
    title = definition.title or name.replace("-", " ").replace("_", " ").title()
    content = assets.render_page(
        "widget",
        {
            "title": title,
            "action": assets.urls.build(f"widgets/{name}"),
            "widget": widget.render(),
            "submit_label": "Save",
        },
    )
    return RenderedPage(
        title=f"{assets.config.app_name} - {title}",
        content=content,
        client_script=client_script,
        breadcrumbs=[Breadcrumb(label=title)],
    )


def build_row_endpoint(assets: TemplateAssets, name: str) -> RowEndpoint:
    definition = widget_definition(assets, name)
    widget = resolve_widget_config(assets, name)
    defaults = dict(definition.model_defaults)
    return RowEndpoint(
        assets,
        widget.input_view or DEFAULT_INPUT_VIEW,
        model_factory=lambda: dict(defaults),
        input_limit=widget.input_limit if definition.strict_limit else None,
    )

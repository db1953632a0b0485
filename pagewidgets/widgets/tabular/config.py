from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


class TabularInputConfig(BaseModel):
    """Options for a tabular input widget.

    Every CSS class and tag name can be overridden; the defaults match the
    class names the bundled client script and stylesheets expect.
    """

    model_config = ConfigDict(extra="forbid")

    id: str | None = Field(default=None, description="Widget id; derived when omitted.")
    models: list[Any] = Field(default_factory=list, description="Initial row payloads.")
    input_view: str | None = Field(
        default=None,
        description="Template id rendered for each row's interior.",
    )
    view_data: dict[str, Any] = Field(
        default_factory=dict,
        description="Extra template data, also sent as query parameters when adding rows.",
    )
    input_url: str = Field(default="#", description="Row-fetch endpoint URL.")
    input_limit: int | None = Field(
        default=None,
        ge=0,
        description="Maximum number of rows; unset or 0 means unbounded.",
    )
    header: str | None = Field(default=None, description="Header markup.")
    remove_confirmation: str | None = Field(
        default=None,
        description="Confirmation prompt shown before a row is removed.",
    )
    remove_template: str | None = Field(default=None, description="Template wrapping the remove control ({link}).")
    add_template: str | None = Field(default=None, description="Template wrapping the add control ({link}).")
    remove_label: str = Field(default="Remove")
    add_label: str = Field(default="Add")

    container_tag: str = Field(default="div")
    input_container_tag: str = Field(default="div")
    header_tag: str = Field(default="div")
    input_tag: str = Field(default="div")

    container_html_options: dict[str, Any] = Field(default_factory=dict)
    input_container_html_options: dict[str, Any] = Field(default_factory=dict)
    header_html_options: dict[str, Any] = Field(default_factory=dict)
    input_html_options: dict[str, Any] = Field(default_factory=dict)
    add_html_options: dict[str, Any] = Field(default_factory=dict)
    remove_html_options: dict[str, Any] = Field(default_factory=dict)

    container_css_class: str = Field(default="tabular-container")
    input_container_css_class: str = Field(default="tabular-input-container")
    input_css_class: str = Field(default="tabular-input")
    index_css_class: str = Field(default="tabular-input-index")
    header_css_class: str = Field(default="tabular-header")
    remove_css_class: str = Field(default="tabular-input-remove")
    add_css_class: str = Field(default="tabular-input-add")
    hide_on_single_css_class: str = Field(default="tabular-hide-on-single")

    after_add_input: str | None = Field(
        default=None,
        description="JavaScript function expression called after a row is added.",
    )
    after_remove_input: str | None = Field(
        default=None,
        description="JavaScript function expression called after a row is removed.",
    )
    on_add_error: str | None = Field(
        default=None,
        description="JavaScript function expression called when fetching a new row fails.",
    )

    @field_validator("input_limit")
    def _zero_means_unbounded(cls, value: int | None) -> int | None:
        if not value:
            return None
        return value

    @property
    def initial_models(self) -> list[Any]:
        """Models that are rendered on the first paint, truncated by the limit."""
        if self.input_limit is None:
            return list(self.models)
        return list(self.models[: self.input_limit])

    def limit_reached(self, count: int) -> bool:
        return self.input_limit is not None and count >= self.input_limit

"""Small HTML builders shared by the page renderer and widgets."""

from __future__ import annotations

import re
from html import escape
from typing import Any, Mapping

HtmlOptions = Mapping[str, Any]

_TOKEN_RE = re.compile(r"\{([A-Za-z_][A-Za-z0-9_]*)\}")


def render_attributes(options: HtmlOptions | None) -> str:
    """Render HTML attributes in insertion order, escaping every value.

    ``None`` and ``False`` values are dropped; ``True`` renders a bare attribute.
    """
    if not options:
        return ""
    parts: list[str] = []
    for name, value in options.items():
        if value is None or value is False:
            continue
        if value is True:
            parts.append(f" {escape(str(name))}")
            continue
        parts.append(f' {escape(str(name))}="{escape(str(value), quote=True)}"')
    return "".join(parts)


def open_tag(tag: str, options: HtmlOptions | None = None) -> str:
    return f"<{tag}{render_attributes(options)}>"


def close_tag(tag: str) -> str:
    return f"</{tag}>"


def tag(tag_name: str, options: HtmlOptions | None = None, content: str = "") -> str:
    """Render a complete element. ``content`` is inserted as-is."""
    return f"{open_tag(tag_name, options)}{content}{close_tag(tag_name)}"


def link(label: str, href: str, options: HtmlOptions | None = None) -> str:
    """Render an anchor; ``label`` is trusted markup (text or an ``<img>``)."""
    attributes = dict(options or {})
    attributes["href"] = href
    return tag("a", attributes, label)


def image(src: str, alt: str = "", options: HtmlOptions | None = None) -> str:
    attributes: dict[str, Any] = {"src": src, "alt": alt}
    attributes.update(options or {})
    return f"<img{render_attributes(attributes)} />"


def hidden_input(value: Any, options: HtmlOptions | None = None) -> str:
    attributes: dict[str, Any] = {"type": "hidden"}
    attributes.update(options or {})
    attributes["value"] = value
    return f"<input{render_attributes(attributes)} />"


def merge_css_class(options: HtmlOptions | None, css_class: str) -> dict[str, Any]:
    """Return a copy of ``options`` whose class list ends with ``css_class``."""
    merged = dict(options or {})
    existing = str(merged.get("class") or "").strip()
    merged["class"] = f"{existing} {css_class}" if existing else css_class
    return merged


def substitute(template: str, tokens: Mapping[str, str]) -> str:
    """Replace ``{name}`` tokens in a single pass.

    Replacement text is never re-scanned and unknown tokens are left untouched.
    """

    def replace(match: re.Match[str]) -> str:
        name = match.group(1)
        if name in tokens:
            return tokens[name]
        return match.group(0)

    return _TOKEN_RE.sub(replace, template)

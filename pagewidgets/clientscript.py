"""Registry of stylesheets and scripts collected while rendering a page."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any

from .markup import render_attributes

logger = logging.getLogger(__name__)


class ScriptPosition(str, Enum):
    """Where a script is placed in the final document."""

    HEAD = "head"
    END = "end"
    READY = "ready"


@dataclass(slots=True)
class InlineScript:
    """Inline script block registered under a unique id."""

    id: str
    code: str
    position: ScriptPosition


@dataclass(frozen=True, slots=True)
class StyleFile:
    href: str
    media: str | None = None


class ClientScript:
    """Collect page assets; files and inline blocks are deduplicated."""

    def __init__(self) -> None:
        self._styles: list[StyleFile] = []
        self._script_files: dict[ScriptPosition, list[str]] = {position: [] for position in ScriptPosition}
        self._scripts: dict[str, InlineScript] = {}

    def register_css_file(self, href: str, media: str | None = None) -> None:
        style = StyleFile(href=href, media=media)
        if style not in self._styles:
            self._styles.append(style)

    def register_script_file(self, src: str, position: ScriptPosition = ScriptPosition.HEAD) -> None:
        if position is ScriptPosition.READY:
            position = ScriptPosition.END
        for files in self._script_files.values():
            if src in files:
                return
        self._script_files[position].append(src)

    def register_script(
        self,
        script_id: str,
        code: str,
        position: ScriptPosition = ScriptPosition.READY,
    ) -> None:
        """Register an inline block; a later registration with the same id replaces it."""
        if script_id in self._scripts:
            logger.debug("Replacing inline script '%s'.", script_id)
        self._scripts[script_id] = InlineScript(id=script_id, code=code, position=position)

    def is_script_registered(self, script_id: str) -> bool:
        return script_id in self._scripts

    @property
    def styles(self) -> list[StyleFile]:
        return list(self._styles)

    def script_files(self, position: ScriptPosition) -> list[str]:
        return list(self._script_files[position])

    def scripts(self, position: ScriptPosition) -> list[InlineScript]:
        return [script for script in self._scripts.values() if script.position is position]

    def render_head(self) -> str:
        lines: list[str] = []
        for style in self._styles:
            attributes = {"rel": "stylesheet", "href": style.href, "media": style.media}
            lines.append(f"<link{render_attributes(attributes)} />")
        lines.extend(_script_file_tag(src) for src in self._script_files[ScriptPosition.HEAD])
        lines.extend(_inline_tag(script.code) for script in self.scripts(ScriptPosition.HEAD))
        return "\n".join(lines)

    def render_body_end(self) -> str:
        lines = [_script_file_tag(src) for src in self._script_files[ScriptPosition.END]]
        lines.extend(_inline_tag(script.code) for script in self.scripts(ScriptPosition.END))
        ready = self.scripts(ScriptPosition.READY)
        if ready:
            body = "\n".join(script.code.strip() for script in ready)
            lines.append(_inline_tag(f"document.addEventListener('DOMContentLoaded', function () {{\n{body}\n}});"))
        return "\n".join(lines)

    def to_template_dict(self) -> dict[str, Any]:
        return {
            "head": self.render_head(),
            "body_end": self.render_body_end(),
        }


def _script_file_tag(src: str) -> str:
    return f"<script{render_attributes({'src': src})}></script>"


def _inline_tag(code: str) -> str:
    return f"<script>\n{code.strip()}\n</script>"

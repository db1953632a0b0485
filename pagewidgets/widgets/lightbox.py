from __future__ import annotations

from pathlib import Path

from ..assets import BUNDLED_ASSETS_DIR, AssetPublisher
from ..clientscript import ClientScript, ScriptPosition
from ..themes import TemplateRenderer

LIGHTBOX_VIEW = "widgets/lightbox"
LIGHTBOX_ASSETS_DIR = BUNDLED_ASSETS_DIR / "lightbox"


class LightboxWidget:
    """Open matching images in an overlay when clicked."""

    def __init__(
        self,
        renderer: TemplateRenderer,
        publisher: AssetPublisher,
        *,
        selector: str,
        assets_dir: Path = LIGHTBOX_ASSETS_DIR,
    ) -> None:
        self._renderer = renderer
        self._publisher = publisher
        self.selector = selector
        self._assets_dir = assets_dir

    def register(self, client_script: ClientScript) -> None:
        base_url = self._publisher.publish(self._assets_dir)
        client_script.register_css_file(f"{base_url}/lightbox.css")
        client_script.register_script_file(f"{base_url}/lightbox.js", ScriptPosition.END)
        code = self._renderer.render_partial(LIGHTBOX_VIEW, {"selector": self.selector})
        client_script.register_script(f"LightboxWidget#{self.selector}", code, ScriptPosition.READY)

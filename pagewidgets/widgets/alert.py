from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Mapping

from ..themes import TemplateRenderer

logger = logging.getLogger(__name__)

ALERT_VIEW = "widgets/alert"
SEVERITIES = frozenset({"error", "success", "info", "notice", "warning"})


@dataclass(frozen=True, slots=True)
class Alert:
    key: str
    severity: str
    message: str


class AlertWidget:
    """Render flash messages whose keys are listed in ``alerts``."""

    def __init__(self, renderer: TemplateRenderer, alerts: Mapping[str, str]) -> None:
        self._renderer = renderer
        self._alerts = dict(alerts)

    def collect(self, flashes: Mapping[str, str] | None) -> list[Alert]:
        if not flashes:
            return []
        collected: list[Alert] = []
        for key, severity in self._alerts.items():
            message = flashes.get(key)
            if not message:
                continue
            if severity not in SEVERITIES:
                logger.warning("Unknown alert severity '%s' for flash '%s'; using 'info'.", severity, key)
                severity = "info"
            collected.append(Alert(key=key, severity=severity, message=message))
        return collected

    def render(self, flashes: Mapping[str, str] | None) -> str:
        alerts = self.collect(flashes)
        if not alerts:
            return ""
        return self._renderer.render_partial(ALERT_VIEW, {"alerts": alerts}).strip()

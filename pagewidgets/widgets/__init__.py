"""Reusable page widgets."""

from .alert import Alert, AlertWidget
from .lightbox import LightboxWidget

__all__ = ["Alert", "AlertWidget", "LightboxWidget"]

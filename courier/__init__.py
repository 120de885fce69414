"""
Courier - chainable helpers for outgoing HTTP responses.

This module exports the decorated Response, the template cache it renders
through, and a minimal ASGI application serving a single endpoint.
"""

from .__version__ import __version__
from .api import API
from .models import Response
from .templates import (
    TemplateError,
    TemplateExtensionNotFound,
    TemplateNotFound,
    Templates,
)
from .transport import BufferedWriter, ResponseClosed, ResponseWriter

__all__ = [
    "__version__",
    "API",
    "BufferedWriter",
    "Response",
    "ResponseClosed",
    "ResponseWriter",
    "TemplateError",
    "TemplateExtensionNotFound",
    "TemplateNotFound",
    "Templates",
]

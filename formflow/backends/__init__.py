"""
Output backends.

- ``pdf``: fillable PDF through reportlab (:mod:`.pdf_backend`)
- ``html``: paginated HTML page containers (:mod:`.html_backend`)
"""

from __future__ import annotations

from typing import Any, Optional

from ..exceptions import RenderingError
from .base import Backend, DocumentInfo

BACKEND_NAMES = ("pdf", "html")


def create_backend(name: str, config: Optional[Any] = None) -> Backend:
    """Instantiate the backend registered under ``name``."""
    key = (name or "").strip().lower()
    if key == "pdf":
        from .pdf_backend import PdfBackend

        return PdfBackend(config)
    if key == "html":
        from .html_backend import HtmlBackend

        return HtmlBackend(config)
    raise RenderingError("Unknown backend", f"{name!r}, expected one of {', '.join(BACKEND_NAMES)}")


__all__ = ["Backend", "DocumentInfo", "BACKEND_NAMES", "create_backend"]

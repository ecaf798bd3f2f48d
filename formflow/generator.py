"""
Render entry point.

``generate`` runs one complete render:

1. create the layout context with the document's initial page count,
2. place the flow content (or only the centered title when there is none),
3. place legacy absolute form fields on their pages,
4. decorate every page with header and footer,
5. let the backend serialize the result.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Union

from .backends import create_backend
from .backends.base import Backend, DocumentInfo
from .engine.decorations import draw_footer, draw_header, draw_title
from .engine.flow_layout import FlowLayout
from .engine.form_fields import place_form_fields
from .engine.layout_validator import DrawnElement
from .engine.page_engine import LayoutContext
from .exceptions import FormflowError, RenderingError, SchemaError
from .models import FormDocument
from .style import ResolvedStyle, default_style

logger = logging.getLogger(__name__)

DocumentInput = Union[FormDocument, Mapping[str, Any]]


@dataclass(slots=True)
class GenerationResult:
    """Output of one render."""

    output: Union[bytes, str]
    field_count: int
    page_count: int
    drawn_elements: List[DrawnElement]
    backend: str = "pdf"

    def summary(self) -> str:
        return f"{self.field_count} fields, {self.page_count} pages"

    def save(self, path: Union[str, Path]) -> Path:
        target = Path(path)
        target.parent.mkdir(parents=True, exist_ok=True)
        if isinstance(self.output, bytes):
            target.write_bytes(self.output)
        else:
            target.write_text(self.output, encoding="utf-8")
        return target


def layout_document(ctx: LayoutContext, document: FormDocument) -> None:
    """Place the whole document into ``ctx`` without serializing it."""
    if document.content:
        FlowLayout(ctx).place_all(document.content)
    else:
        draw_title(ctx, document.title)

    place_form_fields(ctx, document.fields, draw_labels=not document.content)

    draw_header(ctx, document.title)
    if document.version:
        draw_footer(ctx, f"Version {document.version}")


def generate(
    document: DocumentInput,
    style: Optional[ResolvedStyle] = None,
    backend: Union[str, Backend] = "pdf",
    config: Optional[Any] = None,
) -> GenerationResult:
    """
    Lay out ``document`` and render it with ``backend``.

    Args:
        document: ``FormDocument`` or its dict form
        style: Resolved style, the built-in default when omitted
        backend: Backend name (``"pdf"``/``"html"``) or a fresh backend instance
        config: Backend configuration used when ``backend`` is a name

    Returns:
        GenerationResult with the serialized document and layout statistics

    Raises:
        SchemaError: if a dict document is malformed
        LayoutError: if the style leaves no room for content
        RenderingError: if the backend fails
    """
    if not isinstance(document, FormDocument):
        document = FormDocument.from_dict(document)
    style = style or default_style()
    if isinstance(backend, str):
        backend = create_backend(backend, config)

    try:
        ctx = LayoutContext.initialize(backend, style, document.pages)
        layout_document(ctx, document)
        output = backend.finalize(
            DocumentInfo(title=document.title, author=document.author, version=document.version)
        )
    except FormflowError:
        raise
    except Exception as exc:
        raise RenderingError(f"{backend.name} backend failed", str(exc)) from exc

    result = GenerationResult(
        output=output,
        field_count=ctx.field_count,
        page_count=ctx.page_count,
        drawn_elements=ctx.drawn.to_list(),
        backend=backend.name,
    )
    logger.info(f"Generated {backend.name} document {document.title!r}: {result.summary()}")
    return result


def load_json(path: Union[str, Path]) -> Dict[str, Any]:
    """Read a JSON object from ``path``."""
    path = Path(path)
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise SchemaError(f"Invalid JSON in {path}", str(exc)) from exc
    if not isinstance(data, dict):
        raise SchemaError(f"Expected a JSON object in {path}", type(data).__name__)
    return data


def load_document(path: Union[str, Path]) -> FormDocument:
    return FormDocument.from_dict(load_json(path))


def load_style(path: Optional[Union[str, Path]]) -> ResolvedStyle:
    """Default style with the overrides of the JSON file at ``path`` applied."""
    if path is None:
        return default_style()
    return ResolvedStyle.from_dict(load_json(path))


def render_file(
    input_path: Union[str, Path],
    output_path: Union[str, Path],
    backend: str = "pdf",
    style_path: Optional[Union[str, Path]] = None,
) -> GenerationResult:
    """Render the JSON document at ``input_path`` to ``output_path`` (convenience function)."""
    result = generate(load_document(input_path), load_style(style_path), backend)
    result.save(output_path)
    return result

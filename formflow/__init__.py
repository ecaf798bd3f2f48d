"""
formflow - flow layout and pagination of fillable forms.

A form document is an ordered list of typed content blocks (headings,
paragraphs, rules, spacers, admonitions, tables and input fields) plus
optional fields at absolute positions. The layout engine estimates block
heights, breaks pages and positions every block once; the PDF and HTML
backends only turn those decisions into marks, so both paginate alike.

Main Components:
- generate: render a document with a backend
- FormDocument: the normalized document model
- ResolvedStyle: page geometry and typography
- LayoutValidator: geometry checks over a finished layout
"""

from .exceptions import (
    FormflowError,
    GeometryError,
    LayoutError,
    RenderingError,
    SchemaError,
    StyleError,
)
from .generator import GenerationResult, generate, render_file
from .models import FormDocument, FormField
from .style import ResolvedStyle, default_style
from .version import __version__

__all__ = [
    "__version__",
    "generate",
    "render_file",
    "GenerationResult",
    "FormDocument",
    "FormField",
    "ResolvedStyle",
    "default_style",
    "FormflowError",
    "GeometryError",
    "LayoutError",
    "RenderingError",
    "SchemaError",
    "StyleError",
]

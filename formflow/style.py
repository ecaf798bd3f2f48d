"""Resolved style tree consumed by the layout engine and the backends.

The engine never resolves a stylesheet cascade itself: it receives one fully
resolved :class:`ResolvedStyle`. :func:`default_style` provides the built-in
values and :meth:`ResolvedStyle.from_dict` layers a nested override mapping
(for example loaded from JSON) on top of them.
"""

from __future__ import annotations

import dataclasses
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Mapping

from .engine.geometry import Margins, Size
from .exceptions import StyleError

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class TextStyle:
    font_family: str = "Helvetica"
    font_size: float = 12.0
    color: str = "#000000"


@dataclass(frozen=True, slots=True)
class ParagraphStyle:
    font_family: str = "Helvetica"
    font_size: float = 12.0
    color: str = "#333333"
    line_height: float = 1.5
    max_width: float = 468.0


@dataclass(frozen=True, slots=True)
class RuleStyle:
    thickness: float = 1.0
    color: str = "#d1d1d1"


@dataclass(frozen=True, slots=True)
class AdmonitionStyle:
    background_color: str
    border_color: str
    text_color: str
    padding: float = 12.0
    border_width: float = 4.0
    title_font_family: str = "Helvetica-Bold"
    title_font_size: float = 12.0
    content_font_family: str = "Helvetica"
    content_font_size: float = 11.0
    content_line_height: float = 1.4


@dataclass(frozen=True, slots=True)
class FieldStyle:
    """Box style of an interactive field.

    ``width`` and ``height`` are the defaults for absolutely placed fields;
    ``size`` is the square edge used by checkboxes and radio buttons.
    """

    font_family: str = "Helvetica"
    font_size: float = 12.0
    text_color: str = "#000000"
    border_width: float = 1.0
    border_color: str = "#767676"
    background_color: str = "#ffffff"
    width: float = 200.0
    height: float = 28.0
    size: float = 24.0
    required_border_color: str = "#767676"
    required_border_width: float = 1.0


@dataclass(frozen=True, slots=True)
class LabelStyle:
    font_family: str = "Helvetica"
    font_size: float = 11.0
    color: str = "#333333"
    margin_bottom: float = 6.0


@dataclass(frozen=True, slots=True)
class TableStyle:
    header_background: str = "#f0f0f0"
    header_font_family: str = "Helvetica-Bold"
    header_font_size: float = 10.0
    header_text_color: str = "#000000"
    row_background: str = "#ffffff"
    alternate_row_background: str = "#f9f9f9"
    border_color: str = "#cccccc"
    border_width: float = 0.5
    cell_padding: float = 4.0
    cell_font_family: str = "Helvetica"
    cell_font_size: float = 10.0
    cell_text_color: str = "#333333"
    row_height: float = 22.0
    header_height: float = 24.0


@dataclass(frozen=True, slots=True)
class Spacing:
    """Vertical margin applied around a flow block."""

    top: float = 0.0
    bottom: float = 0.0


@dataclass(frozen=True, slots=True)
class PageStyle:
    size: str = "letter"
    margins: Margins = field(default_factory=lambda: Margins.uniform(72.0))


def _default_headings() -> Dict[int, TextStyle]:
    sizes = {1: 20.0, 2: 16.0, 3: 14.0, 4: 12.0, 5: 11.0, 6: 11.0}
    return {
        level: TextStyle(font_family="Helvetica-Bold", font_size=size, color="#000000")
        for level, size in sizes.items()
    }


def _default_admonitions() -> Dict[str, AdmonitionStyle]:
    return {
        "warning": AdmonitionStyle("#fef3cd", "#856404", "#664d03"),
        "note": AdmonitionStyle("#cce5ff", "#004085", "#004085"),
        "info": AdmonitionStyle("#d1ecf1", "#0c5460", "#0c5460"),
        "tip": AdmonitionStyle("#d4edda", "#155724", "#155724"),
        "danger": AdmonitionStyle("#f8d7da", "#721c24", "#721c24"),
    }


def _default_fields() -> Dict[str, FieldStyle]:
    return {
        "text": FieldStyle(),
        "textarea": FieldStyle(width=400.0, height=100.0),
        "checkbox": FieldStyle(),
        "radio": FieldStyle(),
        "dropdown": FieldStyle(width=150.0),
        "signature": FieldStyle(
            font_size=14.0,
            border_width=1.5,
            background_color="#fafafa",
            height=50.0,
            required_border_color="#721c24",
            required_border_width=2.0,
        ),
    }


def _default_spacing() -> Dict[str, Spacing]:
    return {
        "heading": Spacing(16.0, 8.0),
        "paragraph": Spacing(0.0, 12.0),
        "admonition": Spacing(12.0, 12.0),
        "rule": Spacing(10.0, 10.0),
        "table": Spacing(12.0, 12.0),
        "spacer": Spacing(0.0, 0.0),
        "field": Spacing(8.0, 12.0),
    }


@dataclass(frozen=True, slots=True)
class ResolvedStyle:
    """Every visual value the layout needs, fully resolved."""

    page: PageStyle = field(default_factory=PageStyle)
    headings: Dict[int, TextStyle] = field(default_factory=_default_headings)
    paragraph: ParagraphStyle = field(default_factory=ParagraphStyle)
    rule: RuleStyle = field(default_factory=RuleStyle)
    admonitions: Dict[str, AdmonitionStyle] = field(default_factory=_default_admonitions)
    fields: Dict[str, FieldStyle] = field(default_factory=_default_fields)
    label: LabelStyle = field(default_factory=LabelStyle)
    header: TextStyle = field(default_factory=lambda: TextStyle("Helvetica", 10.0, "#666666"))
    footer: TextStyle = field(default_factory=lambda: TextStyle("Helvetica", 9.0, "#666666"))
    table: TableStyle = field(default_factory=TableStyle)
    spacing: Dict[str, Spacing] = field(default_factory=_default_spacing)

    @property
    def page_size(self) -> Size:
        return Size.named(self.page.size)

    @property
    def margins(self) -> Margins:
        return self.page.margins

    def heading(self, level: int) -> TextStyle:
        """Heading style for ``level``, clamped to the 1-6 range."""
        return self.headings[min(max(int(level), 1), 6)]

    def admonition(self, variant: str) -> AdmonitionStyle:
        try:
            return self.admonitions[variant]
        except KeyError:
            logger.warning(f"Unknown admonition variant {variant!r}, using 'note'")
            return self.admonitions["note"]

    def field_style(self, field_type: str) -> FieldStyle:
        return self.fields.get(field_type, self.fields["text"])

    def spacing_for(self, block_type: str) -> Spacing:
        return self.spacing.get(block_type, Spacing())

    @classmethod
    def from_dict(cls, overrides: Mapping[str, Any] | None) -> "ResolvedStyle":
        """Build a style from the defaults with ``overrides`` deep-merged on top.

        Example::

            ResolvedStyle.from_dict({
                "page": {"size": "a4", "margins": {"top": 50}},
                "headings": {"1": {"font_size": 24}},
                "spacing": {"paragraph": {"bottom": 6}},
            })

        Raises:
            StyleError: if a key does not name an existing style attribute
                or a value has the wrong shape.
        """
        style = default_style()
        if not overrides:
            return style
        merged = _merge(style, overrides, "style")
        Size.named(merged.page.size)
        return merged


def default_style() -> ResolvedStyle:
    """Built-in style: letter paper, 72pt margins, Helvetica family."""
    return ResolvedStyle()


def _merge(current: Any, override: Any, path: str) -> Any:
    if dataclasses.is_dataclass(current):
        if not isinstance(override, Mapping):
            raise StyleError("Expected a mapping", f"{path} = {override!r}")
        known = {f.name for f in dataclasses.fields(current)}
        changes = {}
        for key, value in override.items():
            if key not in known:
                raise StyleError("Unknown style attribute", f"{path}.{key}")
            changes[key] = _merge(getattr(current, key), value, f"{path}.{key}")
        return dataclasses.replace(current, **changes)

    if isinstance(current, dict):
        if not isinstance(override, Mapping):
            raise StyleError("Expected a mapping", f"{path} = {override!r}")
        merged = dict(current)
        for raw_key, value in override.items():
            key = _coerce_key(raw_key, current, path)
            if key in merged:
                merged[key] = _merge(merged[key], value, f"{path}.{key}")
            else:
                template = next(iter(current.values()))
                if isinstance(template, AdmonitionStyle):
                    raise StyleError("Unknown admonition variant", f"{path}.{key}")
                merged[key] = _merge(type(template)(), value, f"{path}.{key}")
        return merged

    if isinstance(current, bool) or isinstance(override, bool):
        raise StyleError("Unsupported style value", f"{path} = {override!r}")
    if isinstance(current, float):
        if not isinstance(override, (int, float)):
            raise StyleError("Expected a number", f"{path} = {override!r}")
        return float(override)
    if isinstance(current, str):
        if not isinstance(override, str):
            raise StyleError("Expected a string", f"{path} = {override!r}")
        return override
    return override


def _coerce_key(raw_key: Any, current: Dict[Any, Any], path: str) -> Any:
    if current and isinstance(next(iter(current)), int):
        try:
            return int(raw_key)
        except (TypeError, ValueError):
            raise StyleError("Expected a numeric key", f"{path}.{raw_key}") from None
    return str(raw_key)

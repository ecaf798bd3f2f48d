"""Normalized document model consumed by the layout engine.

A :class:`FormDocument` is an ordered sequence of typed content blocks plus
an optional list of legacy absolutely positioned :class:`FormField` entries.
All model objects are immutable; the engine never mutates its input.

Documents are usually built from plain mappings (decoded JSON)::

    FormDocument.from_dict({
        "title": "Order form",
        "content": [
            {"type": "heading", "level": 1, "text": "Order"},
            {"type": "field", "label": "Name", "fieldType": "text", "fieldName": "name"},
        ],
    })

Both ``snake_case`` and the ``camelCase`` keys of the form schema are
accepted. Schema errors raise :class:`~formflow.exceptions.SchemaError`.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, ClassVar, Dict, Mapping, Optional, Sequence, Tuple, Union

from .exceptions import SchemaError

logger = logging.getLogger(__name__)

ADMONITION_VARIANTS = ("warning", "note", "info", "tip", "danger")
FLOW_FIELD_TYPES = ("text", "dropdown", "checkbox", "textarea")
CELL_FIELD_TYPES = ("text", "dropdown", "checkbox")
LEGACY_FIELD_TYPES = ("text", "textarea", "checkbox", "radio", "dropdown", "signature")


@dataclass(frozen=True, slots=True)
class Position:
    """Explicit placement of a block.

    With ``y`` set the block is absolute: drawn at the literal coordinates
    without touching the flow cursor. With only ``x`` set the block still
    flows vertically but is drawn at that horizontal offset.
    """

    x: Optional[float] = None
    y: Optional[float] = None

    @property
    def is_absolute(self) -> bool:
        return self.y is not None


@dataclass(frozen=True, slots=True)
class FieldOption:
    value: str
    label: str


@dataclass(frozen=True, slots=True, kw_only=True)
class Block:
    """Attributes shared by every content block."""

    page: Optional[int] = None
    position: Optional[Position] = None

    block_type: ClassVar[str] = "block"


@dataclass(frozen=True, slots=True)
class Heading(Block):
    level: int
    text: str

    block_type: ClassVar[str] = "heading"


@dataclass(frozen=True, slots=True)
class Paragraph(Block):
    text: str
    max_width: Optional[float] = None
    font_size: Optional[float] = None

    block_type: ClassVar[str] = "paragraph"


@dataclass(frozen=True, slots=True)
class Rule(Block):
    block_type: ClassVar[str] = "rule"


@dataclass(frozen=True, slots=True)
class Spacer(Block):
    height: float

    block_type: ClassVar[str] = "spacer"


@dataclass(frozen=True, slots=True)
class Admonition(Block):
    variant: str
    title: str
    text: str

    block_type: ClassVar[str] = "admonition"


@dataclass(frozen=True, slots=True)
class LabelCell:
    """Static text in a table cell; an empty value renders as a blank cell."""

    value: str = ""

    kind: ClassVar[str] = "label"


@dataclass(frozen=True, slots=True)
class FieldCell:
    """Interactive field inside a table cell."""

    kind: str
    field_name: str
    options: Tuple[FieldOption, ...] = ()
    default: Union[str, bool, None] = None


Cell = Union[LabelCell, FieldCell]


@dataclass(frozen=True, slots=True)
class TableColumn:
    label: str
    width: float = 100.0
    cell_type: Optional[str] = None
    field_suffix: Optional[str] = None
    options: Tuple[FieldOption, ...] = ()


@dataclass(frozen=True, slots=True)
class TableRow:
    """A table row given either as explicit ``cells`` or as ``values`` shorthand."""

    cells: Tuple[Cell, ...] = ()
    values: Optional[Tuple[Union[str, bool], ...]] = None


@dataclass(frozen=True, slots=True)
class Table(Block):
    columns: Tuple[TableColumn, ...]
    rows: Tuple[TableRow, ...] = ()
    row_count: Optional[int] = None
    field_prefix: Optional[str] = None
    label: Optional[str] = None
    row_height: Optional[float] = None
    header_height: Optional[float] = None
    show_borders: bool = True

    block_type: ClassVar[str] = "table"

    @property
    def total_width(self) -> float:
        return sum(column.width for column in self.columns)


@dataclass(frozen=True, slots=True)
class Field(Block):
    """Form field placed in the content flow with its label."""

    label: str
    field_type: str
    field_name: str
    label_position: str = "above"
    label_width: float = 120.0
    width: Optional[float] = None
    height: Optional[float] = None
    options: Tuple[FieldOption, ...] = ()
    default: Union[str, bool, None] = None
    placeholder: Optional[str] = None
    required: bool = False

    block_type: ClassVar[str] = "field"


@dataclass(frozen=True, slots=True)
class UnknownBlock(Block):
    """Block of a type the engine does not know; laid out as a fixed gap."""

    type_name: str
    raw: Mapping[str, Any] = field(default_factory=dict, compare=False)

    block_type: ClassVar[str] = "unknown"


ContentBlock = Union[Heading, Paragraph, Rule, Spacer, Admonition, Table, Field, UnknownBlock]


@dataclass(frozen=True, slots=True)
class FieldPosition:
    x: float
    y: float
    width: Optional[float] = None
    height: Optional[float] = None


@dataclass(frozen=True, slots=True)
class FormField:
    """Legacy field placed at absolute page coordinates."""

    name: str
    type: str
    position: FieldPosition
    label: str = ""
    page: int = 1
    options: Tuple[FieldOption, ...] = ()
    default: Union[str, bool, None] = None
    required: bool = False
    label_position: Optional[str] = None
    font_size: Optional[float] = None
    max_length: Optional[int] = None
    multiline: bool = False
    read_only: bool = False

    @property
    def display_label(self) -> str:
        return f"{self.label} *" if self.required else self.label


@dataclass(frozen=True, slots=True)
class FormDocument:
    title: str = "Document"
    version: Optional[str] = None
    author: Optional[str] = None
    pages: int = 1
    content: Tuple[ContentBlock, ...] = ()
    fields: Tuple[FormField, ...] = ()

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "FormDocument":
        """Build a document from a mapping.

        Metadata may sit at the top level or under a ``form`` key.
        """
        if not isinstance(data, Mapping):
            raise SchemaError("Document must be a mapping", type(data).__name__)
        meta = data.get("form", data)
        if not isinstance(meta, Mapping):
            raise SchemaError("'form' must be a mapping")

        pages = _get(meta, "pages", default=1)
        if not isinstance(pages, int) or isinstance(pages, bool):
            raise SchemaError("'pages' must be an integer", repr(pages))

        version = _get(meta, "version")
        return cls(
            title=str(_get(meta, "title", default="Document")),
            version=None if version is None else str(version),
            author=_get(meta, "author"),
            pages=pages,
            content=tuple(
                block_from_dict(item, index)
                for index, item in enumerate(_sequence(data, "content"))
            ),
            fields=tuple(
                form_field_from_dict(item, index)
                for index, item in enumerate(_sequence(data, "fields"))
            ),
        )


def normalize_options(raw: Any) -> Tuple[FieldOption, ...]:
    """Normalize ``"x"`` and ``{"value", "label"}`` option entries."""
    if not raw:
        return ()
    if not isinstance(raw, (list, tuple)):
        raise SchemaError("Options must be a list", repr(raw))
    options = []
    for item in raw:
        if isinstance(item, FieldOption):
            options.append(item)
        elif isinstance(item, Mapping):
            value = str(item.get("value", item.get("label", "")))
            options.append(FieldOption(value=value, label=str(item.get("label", value))))
        else:
            options.append(FieldOption(value=str(item), label=str(item)))
    return tuple(options)


def find_option(options: Sequence[FieldOption], default: Any) -> Optional[FieldOption]:
    """Option whose value or label equals ``default``."""
    if not isinstance(default, str):
        return None
    for option in options:
        if option.value == default or option.label == default:
            return option
    return None


def block_from_dict(data: Mapping[str, Any], index: int = 0) -> ContentBlock:
    if not isinstance(data, Mapping):
        raise SchemaError("Content block must be a mapping", f"content[{index}]")
    block_type = data.get("type")
    where = f"content[{index}] ({block_type})"
    placement = {
        "page": _optional_integer(data, where, "page"),
        "position": _position(data.get("position"), where),
    }

    if block_type == "heading":
        return Heading(
            level=_integer(_require(data, where, "level"), where, "level"),
            text=str(_require(data, where, "text")),
            **placement,
        )
    if block_type == "paragraph":
        return Paragraph(
            text=str(_require(data, where, "text")),
            max_width=_optional_number(data, where, "max_width", "maxWidth"),
            font_size=_optional_number(data, where, "font_size", "fontSize"),
            **placement,
        )
    if block_type == "rule":
        return Rule(**placement)
    if block_type == "spacer":
        return Spacer(height=_number(_require(data, where, "height"), where, "height"), **placement)
    if block_type == "admonition":
        return Admonition(
            variant=str(_get(data, "variant", default="note")),
            title=str(_get(data, "title", default="")),
            text=str(_get(data, "text", default="")),
            **placement,
        )
    if block_type == "table":
        return _table_from_dict(data, where, placement)
    if block_type == "field":
        field_type = str(_require(data, where, "field_type", "fieldType"))
        if field_type not in FLOW_FIELD_TYPES:
            raise SchemaError("Unsupported field type", f"{where}: {field_type!r}")
        return Field(
            label=str(_get(data, "label", default="")),
            field_type=field_type,
            field_name=str(_require(data, where, "field_name", "fieldName")),
            label_position=_get(data, "label_position", "labelPosition", default="above"),
            label_width=_number(_get(data, "label_width", "labelWidth", default=120.0), where, "label_width"),
            width=_optional_number(data, where, "width"),
            height=_optional_number(data, where, "height"),
            options=normalize_options(data.get("options")),
            default=data.get("default"),
            placeholder=_optional_text(data, "placeholder"),
            required=bool(data.get("required", False)),
            **placement,
        )

    logger.debug(f"Keeping unknown block type {block_type!r} at {where}")
    return UnknownBlock(type_name=str(block_type), raw=dict(data), **placement)


def form_field_from_dict(data: Mapping[str, Any], index: int = 0) -> FormField:
    where = f"fields[{index}]"
    if not isinstance(data, Mapping):
        raise SchemaError("Field must be a mapping", where)
    field_type = str(_require(data, where, "type"))
    if field_type not in LEGACY_FIELD_TYPES:
        raise SchemaError("Unsupported field type", f"{where}: {field_type!r}")
    raw_position = _require(data, where, "position")
    if not isinstance(raw_position, Mapping) or "x" not in raw_position or "y" not in raw_position:
        raise SchemaError("Field position needs 'x' and 'y'", where)
    return FormField(
        name=str(_require(data, where, "name")),
        type=field_type,
        label=str(data.get("label", "")),
        page=_integer(data.get("page", 1), where, "page"),
        position=FieldPosition(
            x=_number(raw_position["x"], where, "x"),
            y=_number(raw_position["y"], where, "y"),
            width=_optional_number(raw_position, where, "width"),
            height=_optional_number(raw_position, where, "height"),
        ),
        options=normalize_options(data.get("options")),
        default=data.get("default"),
        required=bool(data.get("required", False)),
        label_position=_get(data, "label_position", "labelPosition"),
        font_size=_optional_number(data, where, "font_size", "fontSize"),
        max_length=_optional_integer(data, where, "max_length", "maxLength"),
        multiline=bool(data.get("multiline", False)),
        read_only=bool(_get(data, "read_only", "readOnly", default=False)),
    )


def _table_from_dict(data: Mapping[str, Any], where: str, placement: Dict[str, Any]) -> Table:
    raw_columns = _require(data, where, "columns")
    if not isinstance(raw_columns, (list, tuple)):
        raise SchemaError("'columns' must be a list", where)
    columns = []
    for column in raw_columns:
        if not isinstance(column, Mapping):
            raise SchemaError("Table column must be a mapping", where)
        columns.append(
            TableColumn(
                label=str(column.get("label", "")),
                width=_number(column.get("width", 100.0), where, "width"),
                cell_type=_get(column, "cell_type", "cellType"),
                field_suffix=_get(column, "field_suffix", "fieldSuffix"),
                options=normalize_options(column.get("options")),
            )
        )

    rows = []
    for row in _sequence(data, "rows"):
        if not isinstance(row, Mapping):
            raise SchemaError("Table row must be a mapping", where)
        values = row.get("values")
        if values is not None and not isinstance(values, (list, tuple)):
            raise SchemaError("Row values must be a list", f"{where}: {values!r}")
        if not isinstance(row.get("cells") or (), (list, tuple)):
            raise SchemaError("Row cells must be a list", where)
        rows.append(
            TableRow(
                cells=tuple(_cell_from_dict(cell, where) for cell in row.get("cells") or ()),
                values=None if values is None else tuple(values),
            )
        )

    return Table(
        columns=tuple(columns),
        rows=tuple(rows),
        row_count=_optional_integer(data, where, "row_count", "rowCount"),
        field_prefix=_get(data, "field_prefix", "fieldPrefix"),
        label=data.get("label"),
        row_height=_optional_number(data, where, "row_height", "rowHeight"),
        header_height=_optional_number(data, where, "header_height", "headerHeight"),
        show_borders=_get(data, "show_borders", "showBorders", default=True) is not False,
        **placement,
    )


def _cell_from_dict(data: Any, where: str) -> Cell:
    if not isinstance(data, Mapping):
        raise SchemaError("Table cell must be a mapping", where)
    kind = data.get("type", "label")
    if kind == "label":
        return LabelCell(value=str(data.get("value", "")))
    if kind not in CELL_FIELD_TYPES:
        raise SchemaError("Unsupported table cell type", f"{where}: {kind!r}")
    return FieldCell(
        kind=kind,
        field_name=str(_require(data, where, "field_name", "fieldName")),
        options=normalize_options(data.get("options")),
        default=data.get("default"),
    )


def _position(raw: Any, where: str) -> Optional[Position]:
    if raw is None:
        return None
    if not isinstance(raw, Mapping):
        raise SchemaError("Position must be a mapping", f"{where}: {raw!r}")
    return Position(
        x=_optional_number(raw, where, "x"),
        y=_optional_number(raw, where, "y"),
    )


def _sequence(data: Mapping[str, Any], key: str) -> Sequence[Any]:
    value = data.get(key) or ()
    if not isinstance(value, (list, tuple)):
        raise SchemaError(f"'{key}' must be a list", type(value).__name__)
    return value


def _get(data: Mapping[str, Any], *keys: str, default: Any = None) -> Any:
    for key in keys:
        if key in data and data[key] is not None:
            return data[key]
    return default


def _require(data: Mapping[str, Any], where: str, *keys: str) -> Any:
    value = _get(data, *keys)
    if value is None:
        raise SchemaError("Missing required key", f"{where}: {keys[0]!r}")
    return value


def _number(value: Any, where: str, key: str) -> float:
    if isinstance(value, bool):
        raise SchemaError(f"'{key}' must be a number", f"{where}: {value!r}")
    try:
        return float(value)
    except (TypeError, ValueError) as exc:
        raise SchemaError(f"'{key}' must be a number", f"{where}: {value!r}") from exc


def _optional_number(data: Mapping[str, Any], where: str, *keys: str) -> Optional[float]:
    value = _get(data, *keys)
    return None if value is None else _number(value, where, keys[0])


def _integer(value: Any, where: str, key: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise SchemaError(f"'{key}' must be an integer", f"{where}: {value!r}")
    return value


def _optional_integer(data: Mapping[str, Any], where: str, *keys: str) -> Optional[int]:
    value = _get(data, *keys)
    return None if value is None else _integer(value, where, keys[0])


def _optional_text(data: Mapping[str, Any], *keys: str) -> Optional[str]:
    value = _get(data, *keys)
    return None if value is None else str(value)

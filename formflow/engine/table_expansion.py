"""Expansion of table shorthand into an explicit cell grid.

Tables can be declared three ways:

1. ``row_count`` with ``field_prefix``: identical rows whose field names are
   derived from the prefix, the column suffix (or index) and the row number
2. rows with ``values``: one entry per column, turned into label text or
   field names depending on the column's ``cell_type``
3. rows with explicit ``cells``

:func:`expand_table` turns all of them into the third form, with exactly
one cell per column in every row. Height estimation and drawing both work
on the expanded table so they always agree on the row count.
"""

from __future__ import annotations

import logging
import re
from dataclasses import replace
from typing import List, Sequence, Union

from ..models import Cell, FieldCell, LabelCell, Table, TableColumn, TableRow

logger = logging.getLogger(__name__)

FIELD_NAME_PATTERN = re.compile(r"^[a-zA-Z][a-zA-Z0-9_]*$")


def expand_table(table: Table) -> Table:
    """Return ``table`` with every row given as explicit cells.

    The function is pure and idempotent. Rows that are too short are padded
    with blank label cells and rows that are too long are truncated, so the
    result always has ``len(table.columns)`` cells per row. A table that is
    already explicit and conforming is returned as is.
    """
    if table.row_count and table.field_prefix:
        rows = tuple(
            TableRow(cells=_generated_cells(table, index))
            for index in range(1, table.row_count + 1)
        )
    elif any(row.values is not None for row in table.rows):
        rows = tuple(
            TableRow(cells=_cells_from_values(table.columns, row.values))
            if row.values is not None
            else row
            for row in table.rows
        )
    else:
        rows = table.rows

    rows = tuple(_conform(row, len(table.columns)) for row in rows)
    if rows == table.rows:
        return table
    return replace(table, rows=rows)


def _generated_cells(table: Table, row_number: int) -> tuple:
    cells: List[Cell] = []
    for column_index, column in enumerate(table.columns):
        if column.cell_type == "label":
            cells.append(LabelCell())
            continue
        suffix = column.field_suffix or f"col{column_index}"
        field_name = f"{table.field_prefix}_{suffix}_{row_number}"
        if column.cell_type == "dropdown":
            cells.append(FieldCell("dropdown", field_name, options=column.options))
        elif column.cell_type == "checkbox":
            cells.append(FieldCell("checkbox", field_name))
        else:
            cells.append(FieldCell("text", field_name))
    return tuple(cells)


def _cells_from_values(
    columns: Sequence[TableColumn], values: Sequence[Union[str, bool]]
) -> tuple:
    cells: List[Cell] = []
    for column, value in zip(columns, values):
        text = _stringify(value)
        if column.cell_type == "label":
            cells.append(LabelCell(text))
        elif text == "":
            cells.append(LabelCell())
        elif column.cell_type == "dropdown":
            cells.append(FieldCell("dropdown", text, options=column.options))
        elif column.cell_type == "checkbox":
            default = value if isinstance(value, bool) else None
            cells.append(FieldCell("checkbox", text, default=default))
        elif column.cell_type == "text":
            cells.append(FieldCell("text", text))
        elif isinstance(value, bool):
            # Best effort inference: a bare boolean is an unnamed checkbox.
            cells.append(FieldCell("checkbox", "", default=value))
        elif FIELD_NAME_PATTERN.match(text):
            cells.append(FieldCell("text", text))
        else:
            cells.append(LabelCell(text))
    return tuple(cells)


def _conform(row: TableRow, column_count: int) -> TableRow:
    cells = row.cells
    if len(cells) == column_count and row.values is None:
        return row
    if len(cells) < column_count:
        logger.debug(f"Padding table row from {len(cells)} to {column_count} cells")
        cells = cells + tuple(LabelCell() for _ in range(column_count - len(cells)))
    elif len(cells) > column_count:
        logger.debug(f"Truncating table row from {len(cells)} to {column_count} cells")
        cells = cells[:column_count]
    return TableRow(cells=cells)


def _stringify(value: Union[str, bool, None]) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if value is None:
        return ""
    return str(value)

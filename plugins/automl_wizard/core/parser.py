"""Comma separated text to typed rows."""

from __future__ import annotations

import math
import re
from typing import Iterable, List, Sequence

from .models import Cell, Row

_NUMBER_RE = re.compile(r"[+-]?(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?")


def _clean_field(field: str) -> str:
    field = field.strip()
    if len(field) >= 2 and field.startswith('"') and field.endswith('"'):
        return field[1:-1]
    # A lone leading or trailing quote is stripped on its own.
    if field.startswith('"'):
        return field[1:]
    if field.endswith('"'):
        return field[:-1]
    return field


def _split_fields(line: str) -> List[str]:
    return [_clean_field(field) for field in line.split(",")]


def parse_cell(raw: str) -> Cell:
    """Cast a trimmed field to a float, falling back to text or ``None``.

    Only plain ASCII decimal notation counts as a number; digit group
    underscores and non-ASCII digits are kept as text.
    """

    if raw == "":
        return None
    if not _NUMBER_RE.fullmatch(raw):
        return raw
    value = float(raw)
    if not math.isfinite(value):
        return raw
    return value


def parse_table(raw_text: str) -> List[Row]:
    """Parse CSV text into rows keyed by the header fields.

    Lines whose field count differs from the header are skipped, and input
    without at least one data line yields an empty list.
    """

    lines = [line.strip() for line in raw_text.split("\n")]
    lines = [line for line in lines if line]
    if len(lines) < 2:
        return []

    headers = _split_fields(lines[0])
    rows: List[Row] = []
    for line in lines[1:]:
        values = _split_fields(line)
        if len(values) != len(headers):
            continue
        rows.append({header: parse_cell(value) for header, value in zip(headers, values)})
    return rows


def format_cell(value: Cell) -> str:
    if value is None:
        return ""
    if isinstance(value, float):
        if value.is_integer():
            return str(int(value))
        return repr(value)
    return str(value)


def rows_to_csv(rows: Sequence[Row], columns: Iterable[str] | None = None) -> str:
    """Serialise rows back into text accepted by :func:`parse_table`."""

    if columns is None:
        columns = list(rows[0].keys()) if rows else []
    columns = list(columns)
    lines = [",".join(columns)]
    for row in rows:
        lines.append(",".join(format_cell(row.get(column)) for column in columns))
    return "\n".join(lines) + "\n"


__all__ = ["format_cell", "parse_cell", "parse_table", "rows_to_csv"]

"""Per-column profiling of parsed rows."""

from __future__ import annotations

from typing import List, Sequence

from .models import Cell, ColumnStat, ColumnType, Row, is_missing, is_number

NUMERIC_RATIO_THRESHOLD = 0.8
SAMPLE_SIZE = 5


def _infer_type(values: Sequence[Cell]) -> ColumnType:
    if not values:
        return "string"
    numeric = sum(1 for value in values if is_number(value))
    return "number" if numeric / len(values) > NUMERIC_RATIO_THRESHOLD else "string"


def profile_column(rows: Sequence[Row], name: str) -> ColumnStat:
    present: List[Cell] = []
    missing = 0
    for row in rows:
        value = row.get(name)
        if is_missing(value):
            missing += 1
        else:
            present.append(value)
    return ColumnStat(
        name=name,
        inferred_type=_infer_type(present),
        missing_count=missing,
        unique_count=len(set(present)),
        sample=tuple(present[:SAMPLE_SIZE]),
    )


def profile_columns(rows: Sequence[Row]) -> List[ColumnStat]:
    """Return one :class:`ColumnStat` per column of the first row."""

    if not rows:
        return []
    return [profile_column(rows, name) for name in rows[0].keys()]


__all__ = ["NUMERIC_RATIO_THRESHOLD", "SAMPLE_SIZE", "profile_column", "profile_columns"]

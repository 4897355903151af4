"""Missing value imputation and row de-duplication."""

from __future__ import annotations

import json
from typing import Dict, List, Optional, Sequence

import numpy as np

from .models import Cell, CleaningSpec, ColumnStat, Row, is_missing, is_number
from .parser import format_cell


def _mode(values: Sequence[Cell]) -> Cell:
    """Most frequent value by its text form; the first to reach the top count wins."""

    counts: Dict[str, int] = {}
    best_count = 0
    best: Cell = values[0]
    for value in values:
        key = format_cell(value)
        counts[key] = counts.get(key, 0) + 1
        if counts[key] > best_count:
            best_count = counts[key]
            best = value
    return best


def _fill_value(values: Sequence[Cell], column_type: str, method: str) -> Optional[Cell]:
    if column_type == "number":
        numbers = [float(value) for value in values if is_number(value)]
        if not numbers:
            return None
        if method == "fill_mean":
            return float(np.mean(numbers))
        if method == "fill_median":
            return float(np.median(numbers))
        return _mode(numbers)
    if not values:
        return None
    return _mode(values)


def _missing_in(row: Row, column: str) -> bool:
    return column in row and is_missing(row[column])


def _fill_column(rows: List[Row], stat: ColumnStat, method: str) -> List[Row]:
    name = stat.name
    present = [row[name] for row in rows if name in row and not is_missing(row[name])]
    fill = _fill_value(present, stat.inferred_type, method)
    if fill is None:
        return rows
    return [{**row, name: fill} if _missing_in(row, name) else row for row in rows]


def deduplicate(rows: Sequence[Row]) -> List[Row]:
    """Keep the first occurrence of every structurally distinct row."""

    seen = set()
    unique: List[Row] = []
    for row in rows:
        key = json.dumps(row, sort_keys=True)
        if key in seen:
            continue
        seen.add(key)
        unique.append(row)
    return unique


def clean_rows(rows: Sequence[Row], stats: Sequence[ColumnStat], spec: CleaningSpec) -> List[Row]:
    """Apply ``spec`` to ``rows`` and drop duplicate rows.

    Fill methods run column by column in ``spec.target_columns`` order, each
    column seeing the values imputed for the columns before it. Columns with
    no entry in ``stats`` are left untouched. The input rows are not modified.
    """

    cleaned: List[Row] = [dict(row) for row in rows]

    if spec.method == "drop_rows":
        cleaned = [
            row
            for row in cleaned
            if not any(_missing_in(row, column) for column in spec.target_columns)
        ]
    else:
        stats_by_name = {stat.name: stat for stat in stats}
        for column in spec.target_columns:
            stat = stats_by_name.get(column)
            if stat is None:
                continue
            cleaned = _fill_column(cleaned, stat, spec.method)

    return deduplicate(cleaned)


__all__ = ["clean_rows", "deduplicate"]

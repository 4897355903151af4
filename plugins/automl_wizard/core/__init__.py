"""Facade for the AutoML wizard tabular pipeline."""

from __future__ import annotations

from .cleaner import clean_rows, deduplicate
from .models import (
    CLEANING_METHODS,
    DEFAULT_EPOCHS,
    DEFAULT_LEARNING_RATE,
    SUPPORTED_ALGORITHMS,
    Cell,
    CleaningSpec,
    ColumnStat,
    InsufficientDataError,
    Metrics,
    Prediction,
    Row,
    TrainingSpec,
    WizardError,
    is_missing,
    is_number,
)
from .parser import format_cell, parse_table, rows_to_csv
from .profiler import profile_columns
from .trainer import split_rows, train_regression

__all__ = [
    "CLEANING_METHODS",
    "Cell",
    "CleaningSpec",
    "ColumnStat",
    "DEFAULT_EPOCHS",
    "DEFAULT_LEARNING_RATE",
    "InsufficientDataError",
    "Metrics",
    "Prediction",
    "Row",
    "SUPPORTED_ALGORITHMS",
    "TrainingSpec",
    "WizardError",
    "clean_rows",
    "deduplicate",
    "format_cell",
    "is_missing",
    "is_number",
    "parse_table",
    "profile_columns",
    "rows_to_csv",
    "split_rows",
    "train_regression",
]

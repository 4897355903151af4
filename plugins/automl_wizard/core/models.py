"""Value types shared by the tabular pipeline stages."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Literal, Tuple, Union

Cell = Union[float, str, None]
Row = Dict[str, Cell]

ColumnType = Literal["number", "string"]
CleaningMethod = Literal["drop_rows", "fill_mean", "fill_median", "fill_mode"]

CLEANING_METHODS: Tuple[str, ...] = ("drop_rows", "fill_mean", "fill_median", "fill_mode")
SUPPORTED_ALGORITHMS: Tuple[str, ...] = ("linear_regression",)

DEFAULT_EPOCHS = 500
DEFAULT_LEARNING_RATE = 1e-4


class WizardError(ValueError):
    """Raised when pipeline inputs are invalid."""


class InsufficientDataError(WizardError):
    """Raised when a training split has no rows to learn from or score."""


def is_missing(value: object) -> bool:
    return value is None or value == ""


def is_number(value: object) -> bool:
    return isinstance(value, float) or (
        isinstance(value, int) and not isinstance(value, bool)
    )


@dataclass(frozen=True)
class ColumnStat:
    name: str
    inferred_type: ColumnType
    missing_count: int
    unique_count: int
    sample: Tuple[Cell, ...] = ()

    def to_dict(self) -> Dict[str, object]:
        return {
            "name": self.name,
            "type": self.inferred_type,
            "missing_count": self.missing_count,
            "unique_count": self.unique_count,
            "sample": list(self.sample),
        }


@dataclass(frozen=True)
class CleaningSpec:
    method: CleaningMethod
    target_columns: Tuple[str, ...] = ()

    def __post_init__(self) -> None:
        if self.method not in CLEANING_METHODS:
            raise WizardError(f"Unsupported cleaning method '{self.method}'")
        object.__setattr__(self, "target_columns", tuple(self.target_columns))


@dataclass(frozen=True)
class TrainingSpec:
    """User selection driving a single training run.

    ``feature_columns`` order only affects how weights are reported.
    """

    target_column: str
    feature_columns: Tuple[str, ...]
    split_ratio: float = 0.8
    epochs: int = DEFAULT_EPOCHS
    learning_rate: float = DEFAULT_LEARNING_RATE
    algorithm: str = "linear_regression"

    def __post_init__(self) -> None:
        object.__setattr__(self, "feature_columns", tuple(self.feature_columns))
        if not self.target_column:
            raise WizardError("Select a target column")
        if not self.feature_columns:
            raise WizardError("Select at least one feature column")
        if self.target_column in self.feature_columns:
            raise WizardError("Target column cannot also be a feature")
        if not 0 < self.split_ratio < 1:
            raise WizardError("Split ratio must be between 0 and 1")
        if self.epochs < 1:
            raise WizardError("Epochs must be a positive integer")
        if not self.learning_rate > 0:
            raise WizardError("Learning rate must be positive")
        if self.algorithm not in SUPPORTED_ALGORITHMS:
            raise WizardError(f"Unsupported algorithm '{self.algorithm}'")


@dataclass(frozen=True)
class Prediction:
    actual: float
    predicted: float


@dataclass(frozen=True)
class Metrics:
    mse: float
    mae: float
    r2: float
    predictions: Tuple[Prediction, ...]
    train_rows: int = 0
    test_rows: int = 0
    weights: Dict[str, float] = field(default_factory=dict)
    bias: float = 0.0

    def to_dict(self) -> Dict[str, object]:
        return {
            "mse": self.mse,
            "mae": self.mae,
            "r2": self.r2,
            "predictions": [
                {"actual": item.actual, "predicted": item.predicted}
                for item in self.predictions
            ],
            "rows": {"train": self.train_rows, "test": self.test_rows},
            "weights": dict(self.weights),
            "bias": self.bias,
        }


__all__ = [
    "CLEANING_METHODS",
    "Cell",
    "CleaningMethod",
    "CleaningSpec",
    "ColumnStat",
    "ColumnType",
    "DEFAULT_EPOCHS",
    "DEFAULT_LEARNING_RATE",
    "InsufficientDataError",
    "Metrics",
    "Prediction",
    "Row",
    "SUPPORTED_ALGORITHMS",
    "TrainingSpec",
    "WizardError",
    "is_missing",
    "is_number",
]

"""Linear regression fitted by per-example gradient descent."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import List, Sequence, Tuple

import numpy as np

from .models import InsufficientDataError, Metrics, Prediction, Row, TrainingSpec, WizardError, is_number


@dataclass
class _Scaler:
    """Column means and population standard deviations of the training rows."""

    means: np.ndarray
    stds: np.ndarray

    @classmethod
    def fit(cls, matrix: np.ndarray) -> "_Scaler":
        means = matrix.mean(axis=0)
        stds = matrix.std(axis=0)
        stds[stds == 0] = 1.0
        return cls(means=means, stds=stds)

    def transform(self, matrix: np.ndarray) -> np.ndarray:
        return (matrix - self.means) / self.stds


def _valid_rows(rows: Sequence[Row], columns: Sequence[str]) -> List[Row]:
    return [row for row in rows if all(is_number(row.get(column)) for column in columns)]


def split_rows(rows: Sequence[Row], spec: TrainingSpec) -> Tuple[List[Row], List[Row]]:
    """Return the ordered train/test partition of the rows usable for ``spec``."""

    valid = _valid_rows(rows, [*spec.feature_columns, spec.target_column])
    split_index = math.floor(len(valid) * spec.split_ratio)
    return valid[:split_index], valid[split_index:]


def _fit(
    features: np.ndarray, target: np.ndarray, *, epochs: int, learning_rate: float
) -> Tuple[np.ndarray, float]:
    samples = list(zip(features.tolist(), target.tolist()))
    weights = [0.0] * features.shape[1]
    bias = 0.0
    for _ in range(epochs):
        for x, y in samples:
            error = bias + sum(w * v for w, v in zip(weights, x)) - y
            step = learning_rate * error
            bias -= step
            weights = [w - step * v for w, v in zip(weights, x)]
    return np.array(weights), bias


def _r2(actual: np.ndarray, sse: float) -> float:
    total_variance = float(np.sum((actual - actual.mean()) ** 2))
    if total_variance == 0.0:
        return 1.0 if bool(np.isclose(sse, 0.0)) else 0.0
    return 1.0 - sse / total_variance


def train_regression(rows: Sequence[Row], spec: TrainingSpec) -> Metrics:
    """Fit ``spec.target_column`` on ``spec.feature_columns`` and score the held-out rows.

    Rows are filtered to those with numeric target and features, then split in
    their original order: the first ``floor(n * split_ratio)`` rows train and
    the remainder test. Features and target are standardised with training
    statistics, weights are updated after every training row for
    ``spec.epochs`` passes, and metrics are reported in the target's raw units.

    Raises :class:`InsufficientDataError` when either split is empty.
    """

    if rows and spec.target_column not in rows[0]:
        raise WizardError(f"Target column '{spec.target_column}' not found")
    missing = [column for column in spec.feature_columns if rows and column not in rows[0]]
    if missing:
        raise WizardError("Feature columns not found: " + ", ".join(missing))

    train, test = split_rows(rows, spec)
    if not train:
        raise InsufficientDataError("Not enough numeric rows to train on")
    if not test:
        raise InsufficientDataError("Not enough numeric rows left to evaluate the model")

    columns = [*spec.feature_columns, spec.target_column]
    train_matrix = np.array([[row[column] for column in columns] for row in train], dtype=float)
    test_matrix = np.array([[row[column] for column in columns] for row in test], dtype=float)

    scaler = _Scaler.fit(train_matrix)
    train_scaled = scaler.transform(train_matrix)
    test_scaled = scaler.transform(test_matrix)

    weights, bias = _fit(
        train_scaled[:, :-1],
        train_scaled[:, -1],
        epochs=spec.epochs,
        learning_rate=spec.learning_rate,
    )

    scaled_predictions = bias + test_scaled[:, :-1] @ weights
    predicted = scaled_predictions * scaler.stds[-1] + scaler.means[-1]
    actual = test_matrix[:, -1]

    residuals = actual - predicted
    sse = float(np.sum(residuals**2))
    sae = float(np.sum(np.abs(residuals)))
    count = len(test)

    return Metrics(
        mse=sse / count,
        mae=sae / count,
        r2=_r2(actual, sse),
        predictions=tuple(
            Prediction(actual=float(a), predicted=float(p)) for a, p in zip(actual, predicted)
        ),
        train_rows=len(train),
        test_rows=count,
        weights={column: float(weight) for column, weight in zip(spec.feature_columns, weights)},
        bias=float(bias),
    )


__all__ = ["split_rows", "train_regression"]

"""Request schema definitions for the AutoML wizard backend."""

from __future__ import annotations

from typing import Literal

from pydantic import Field

from common.validation import SchemaModel


class CleanRequest(SchemaModel):
    session_id: str
    method: Literal["drop_rows", "fill_mean", "fill_median", "fill_mode"] = "fill_mean"
    target_columns: list[str] = Field(default_factory=list)


class TrainRequest(SchemaModel):
    session_id: str
    target: str = Field(min_length=1)
    features: list[str] = Field(min_length=1)
    split_ratio: float = Field(default=0.8, ge=0.1, le=0.9)
    algorithm: Literal["linear_regression"] = "linear_regression"
    epochs: int = Field(default=500, ge=1, le=5000)
    learning_rate: float = Field(default=1e-4, gt=0, le=1)


class AdviceRequest(SchemaModel):
    session_id: str

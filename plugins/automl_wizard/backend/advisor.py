"""Advisory text for a finished training run, generated by Gemini."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Any, Mapping, Sequence

import requests

from common.logging import get_logger

from ..core import Metrics, TrainingSpec

logger = get_logger("advisor")

GEMINI_ENDPOINT = "https://generativelanguage.googleapis.com/v1beta/models/{model}:generateContent"
DEFAULT_MODEL = "gemini-2.5-flash"
DEFAULT_TIMEOUT = 30
DEFAULT_API_KEY_ENV = "GEMINI_API_KEY"

MISSING_KEY_MESSAGE = (
    "API Key is missing. Please configure the environment variable to receive AI tips."
)
API_ERROR_MESSAGE = "Failed to generate tips due to an API error."
EMPTY_RESPONSE_MESSAGE = "No tips could be generated at this time."

SYSTEM_INSTRUCTION = (
    "You are an expert Senior Data Scientist helping a user improve their machine "
    "learning model. Your response must be a clean Markdown list only."
)


@dataclass(frozen=True, slots=True)
class AdviceContext:
    algorithm: str
    target_column: str
    feature_columns: tuple[str, ...]
    column_names: tuple[str, ...]
    split_ratio: float
    r2: float
    mse: float

    @classmethod
    def from_run(
        cls, spec: TrainingSpec, metrics: Metrics, column_names: Sequence[str]
    ) -> "AdviceContext":
        return cls(
            algorithm=spec.algorithm,
            target_column=spec.target_column,
            feature_columns=tuple(spec.feature_columns),
            column_names=tuple(column_names),
            split_ratio=spec.split_ratio,
            r2=metrics.r2,
            mse=metrics.mse,
        )


@dataclass(frozen=True, slots=True)
class AdvisorSettings:
    api_key: str | None = None
    model: str = DEFAULT_MODEL
    timeout: float = DEFAULT_TIMEOUT

    @classmethod
    def from_settings(cls, settings: Mapping[str, Any] | None) -> "AdvisorSettings":
        settings = settings or {}
        key_env = settings.get("api_key_env") or DEFAULT_API_KEY_ENV
        try:
            timeout = float(settings.get("timeout", DEFAULT_TIMEOUT))
        except (TypeError, ValueError):
            timeout = DEFAULT_TIMEOUT
        return cls(
            api_key=os.environ.get(key_env) or None,
            model=settings.get("model") or DEFAULT_MODEL,
            timeout=timeout,
        )


def build_prompt(context: AdviceContext) -> str:
    train_pct = context.split_ratio * 100
    test_pct = (1 - context.split_ratio) * 100
    return (
        "I have trained a regression model using the AutoML Wizard.\n\n"
        "Context:\n"
        f"- Algorithm: {context.algorithm}\n"
        f"- Target Variable: {context.target_column}\n"
        f"- Features Used: {', '.join(context.feature_columns)}\n"
        f"- Total Columns Available: {', '.join(context.column_names)}\n"
        f"- Train/Test Split: {train_pct:g}% Train / {test_pct:g}% Test\n\n"
        "Results:\n"
        f"- R2 Score: {context.r2:.4f}\n"
        f"- Mean Squared Error: {context.mse:.4f}\n\n"
        "Please provide 3-4 specific, high-impact data science tips to improve this "
        "model based on the metrics and feature context.\n"
        "Focus on feature engineering, data quality, or model selection. Keep it "
        "professional but encouraging.\n"
        "Format the output as a clean Markdown list."
    )


def _extract_text(data: Mapping[str, Any]) -> str:
    candidates = data.get("candidates") or [{}]
    parts = candidates[0].get("content", {}).get("parts") or [{}]
    return "".join(str(part.get("text") or "") for part in parts).strip()


def generate_tips(context: AdviceContext, settings: AdvisorSettings) -> str:
    """Return Markdown tips for the run, or a fixed message when Gemini is unavailable."""

    if not settings.api_key:
        logger.warning("Gemini API key not configured; returning fallback advice")
        return MISSING_KEY_MESSAGE

    payload = {
        "systemInstruction": {"parts": [{"text": SYSTEM_INSTRUCTION}]},
        "contents": [{"role": "user", "parts": [{"text": build_prompt(context)}]}],
    }
    try:
        response = requests.post(
            GEMINI_ENDPOINT.format(model=settings.model),
            params={"key": settings.api_key},
            json=payload,
            timeout=settings.timeout,
        )
        response.raise_for_status()
        text = _extract_text(response.json())
    except (requests.RequestException, ValueError, AttributeError, IndexError, TypeError) as exc:
        logger.warning("Gemini advice request failed: %s", exc)
        return API_ERROR_MESSAGE

    return text or EMPTY_RESPONSE_MESSAGE


__all__ = [
    "API_ERROR_MESSAGE",
    "AdviceContext",
    "AdvisorSettings",
    "EMPTY_RESPONSE_MESSAGE",
    "MISSING_KEY_MESSAGE",
    "build_prompt",
    "generate_tips",
]

"""Service layer orchestrating the AutoML wizard steps."""

from __future__ import annotations

from typing import Any, Mapping

from common.errors import UnprocessableAppError
from common.logging import get_logger

from ..core import CleaningSpec, TrainingSpec, WizardError, clean_rows, profile_columns, train_regression
from .advisor import AdviceContext, AdvisorSettings, generate_tips
from .schemas import AdviceRequest, CleanRequest, TrainRequest
from .utils import (
    clear_session,
    configure_session_store,
    describe_session,
    enforce_table_limits,
    ensure_columns_exist,
    get_session,
    load_csv_bytes,
    new_session,
    session_config,
)

logger = get_logger("services")

_DEFAULT_LIMITS = {
    "max_rows": 100_000,
    "max_columns": 200,
    "max_sessions": 64,
    "max_train_steps": 5_000_000,
}


def _limits_from_settings(settings: Mapping[str, Any] | None) -> dict[str, int]:
    settings = settings or {}
    limits: dict[str, int] = {}
    for key, default in _DEFAULT_LIMITS.items():
        try:
            limits[key] = int(settings.get(key, default))
        except (TypeError, ValueError):
            limits[key] = default
    return limits


def dataset_load_from_bytes(
    data: bytes,
    settings: Mapping[str, Any] | None = None,
    *,
    replaces: str | None = None,
) -> dict[str, Any]:
    """Parse an upload into a new session, dropping the session it ``replaces``."""

    settings = settings or {}
    limits = _limits_from_settings(settings)
    configure_session_store(limits["max_sessions"], settings.get("session_ttl_minutes"))
    rows = load_csv_bytes(data)
    enforce_table_limits(rows, max_rows=limits["max_rows"], max_columns=limits["max_columns"])
    if replaces:
        clear_session(replaces)
        logger.info("dropped session %s replaced by a new upload", replaces)
    session_id, session = new_session(rows)
    logger.info("created session %s with %d rows", session_id, len(rows))
    return describe_session(session)


def run_clean(request: CleanRequest) -> dict[str, Any]:
    session = get_session(request.session_id)
    spec = CleaningSpec(method=request.method, target_columns=tuple(request.target_columns))
    cleaned = clean_rows(session.raw_rows, session.raw_stats, spec)
    session.rows = cleaned
    session.stats = profile_columns(cleaned)
    session.training_spec = None
    session.metrics = None
    removed = len(session.raw_rows) - len(cleaned)
    logger.info(
        "session %s cleaned with %s on %d columns, %d rows removed",
        session.session_id,
        spec.method,
        len(spec.target_columns),
        removed,
    )
    summary = describe_session(session)
    summary["rows_removed"] = removed
    return summary


def run_train(request: TrainRequest, settings: Mapping[str, Any] | None = None) -> dict[str, Any]:
    session = get_session(request.session_id)
    ensure_columns_exist(session, [request.target, *request.features])
    if not session.rows:
        raise WizardError("No rows left to train on. Adjust the cleaning step.")
    max_steps = _limits_from_settings(settings)["max_train_steps"]
    steps = len(session.rows) * request.epochs
    if steps > max_steps:
        raise UnprocessableAppError(
            message=(
                f"Training {len(session.rows)} rows for {request.epochs} epochs exceeds "
                f"the limit of {max_steps} row updates. Lower the epochs or upload fewer rows."
            ),
            code="automl_wizard.training_too_large",
            details={"steps": steps, "max_train_steps": max_steps},
        )
    spec = TrainingSpec(
        target_column=request.target,
        feature_columns=tuple(request.features),
        split_ratio=request.split_ratio,
        epochs=request.epochs,
        learning_rate=request.learning_rate,
        algorithm=request.algorithm,
    )
    metrics = train_regression(session.rows, spec)
    session.training_spec = spec
    session.metrics = metrics
    logger.info(
        "session %s trained %s on %s: r2=%.4f mse=%.4f",
        session.session_id,
        spec.algorithm,
        spec.target_column,
        metrics.r2,
        metrics.mse,
    )
    return {
        "model": {
            "algorithm": spec.algorithm,
            "target": spec.target_column,
            "features": list(spec.feature_columns),
            "split_ratio": spec.split_ratio,
            "epochs": spec.epochs,
            "learning_rate": spec.learning_rate,
        },
        "metrics": metrics.to_dict(),
    }


def run_advice(request: AdviceRequest, settings: Mapping[str, Any] | None = None) -> dict[str, Any]:
    session = get_session(request.session_id)
    if session.metrics is None or session.training_spec is None:
        raise WizardError("Train a model before requesting advice")
    context = AdviceContext.from_run(session.training_spec, session.metrics, session.columns)
    tips = generate_tips(context, AdvisorSettings.from_settings(settings))
    return {"tips": tips}


__all__ = [
    "dataset_load_from_bytes",
    "run_advice",
    "run_clean",
    "run_train",
    "session_config",
]

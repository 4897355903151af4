"""Flask routes for the AutoML wizard plugin."""

from __future__ import annotations

from typing import Any, Callable

from flask import Blueprint, Response, current_app, request

from common.errors import AppError, UnprocessableAppError, ValidationAppError, ensure_app_error
from common.responses import fail, ok
from common.validation import FileLimit, ValidationError, enforce_limits, parse_model, validate_mime

from ..core import InsufficientDataError
from .schemas import AdviceRequest, CleanRequest, TrainRequest
from .services import dataset_load_from_bytes, run_advice, run_clean, run_train, session_config

bp = Blueprint("automl_wizard", __name__, url_prefix="/api/automl_wizard")


def _plugin_settings() -> dict[str, Any]:
    return current_app.config.get("PLUGIN_SETTINGS", {}).get("automl_wizard", {})


def _service_settings() -> dict[str, Any]:
    settings = dict(_plugin_settings())
    settings.setdefault("session_ttl_minutes", current_app.config.get("SESSION_TTL_MINUTES"))
    return settings


def _advisor_settings() -> dict[str, Any]:
    """Advisor defaults from the config class, overridden by ``config.yml``."""

    return {**current_app.config.get("ADVISOR", {}), **(_plugin_settings().get("advisor") or {})}


def _upload_limits() -> FileLimit:
    upload = _plugin_settings().get("upload")
    return FileLimit.from_settings(upload, default_max_files=1, default_max_mb=5)


def _handle(callable_: Callable[[], Response | tuple[Any, int]]) -> Response:
    try:
        result = callable_()
        if isinstance(result, tuple):
            payload, status = result
            return ok(payload, status=status)
        if isinstance(result, Response):
            return result
        return ok(result)
    except AppError as exc:
        return fail(exc)
    except InsufficientDataError as exc:
        error = UnprocessableAppError(message=str(exc), code="automl_wizard.insufficient_data")
        return fail(error)
    except ValidationError as exc:
        error = ValidationAppError(
            message=str(exc), code="automl_wizard.invalid_request", details={"errors": exc.details}
        )
        return fail(error)
    except (ValueError, KeyError) as exc:
        message = exc.args[0] if isinstance(exc, KeyError) and exc.args else str(exc)
        error = ValidationAppError(message=str(message), code="automl_wizard.invalid_request")
        return fail(error)
    except Exception as exc:  # pragma: no cover - defensive path
        current_app.logger.exception("automl_wizard request failed")
        error = ensure_app_error(exc, fallback_code="automl_wizard.internal")
        return fail(error, status=error.status_code)


@bp.post("/datasets/load")
def datasets_load() -> Response:
    def _load() -> dict[str, Any]:
        file = request.files.get("csv")
        if not file:
            raise ValidationAppError(message="CSV upload required", code="automl_wizard.dataset.missing")
        try:
            enforce_limits([file], _upload_limits())
            validate_mime([file], {"text/csv", "application/vnd.ms-excel"})
        except ValidationError as exc:
            raise ValidationAppError(
                message=str(exc), code="automl_wizard.upload.invalid", details={"errors": exc.details}
            )
        replaces = request.form.get("replace_session") or None
        return dataset_load_from_bytes(file.read(), _service_settings(), replaces=replaces)

    return _handle(_load)


@bp.post("/clean")
def clean() -> Response:
    def _call() -> dict[str, Any]:
        payload = parse_model(CleanRequest, request.get_json(silent=True))
        return run_clean(payload)

    return _handle(_call)


@bp.post("/model/train")
def model_train() -> Response:
    def _call() -> dict[str, Any]:
        payload = parse_model(TrainRequest, request.get_json(silent=True))
        return run_train(payload, _service_settings())

    return _handle(_call)


@bp.post("/model/advice")
def model_advice() -> Response:
    def _call() -> dict[str, Any]:
        payload = parse_model(AdviceRequest, request.get_json(silent=True))
        return run_advice(payload, _advisor_settings())

    return _handle(_call)


@bp.get("/system/config")
def system_config() -> Response:
    def _call() -> dict[str, Any]:
        return session_config(current_app.config)

    return _handle(_call)


__all__ = ["bp"]

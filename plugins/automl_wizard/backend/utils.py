"""Utility helpers for the AutoML wizard backend."""

from __future__ import annotations

import threading
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Any, Mapping, Sequence

from ..core import ColumnStat, Metrics, Row, TrainingSpec, WizardError, parse_table, profile_columns

_DEFAULT_TTL_MINUTES = 30
_DEFAULT_MAX_SESSIONS = 64


@dataclass(slots=True)
class SessionData:
    """In-memory state of one wizard run over an uploaded table."""

    raw_rows: list[Row]
    raw_stats: list[ColumnStat]
    session_id: str = ""
    rows: list[Row] = field(default_factory=list)
    stats: list[ColumnStat] = field(default_factory=list)
    training_spec: TrainingSpec | None = None
    metrics: Metrics | None = None
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    last_accessed: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def touch(self) -> None:
        self.last_accessed = datetime.now(timezone.utc)

    @property
    def columns(self) -> list[str]:
        return [stat.name for stat in self.raw_stats]


class SessionStore:
    """Thread-safe in-memory session registry with TTL purging and a size cap."""

    def __init__(self, max_sessions: int = _DEFAULT_MAX_SESSIONS, ttl_minutes: float = _DEFAULT_TTL_MINUTES) -> None:
        self.max_sessions = max_sessions
        self.ttl = timedelta(minutes=ttl_minutes)
        self._items: dict[str, SessionData] = {}
        self._lock = threading.Lock()

    def _purge_locked(self) -> None:
        now = datetime.now(timezone.utc)
        expired = [
            session_id
            for session_id, session in self._items.items()
            if now - session.last_accessed > self.ttl
        ]
        for session_id in expired:
            self._items.pop(session_id, None)

    def create(self, raw_rows: list[Row], raw_stats: list[ColumnStat]) -> tuple[str, SessionData]:
        session_id = uuid.uuid4().hex
        with self._lock:
            self._purge_locked()
            if len(self._items) >= self.max_sessions:
                raise WizardError("Too many active sessions. Try again later.")
            data = SessionData(
                raw_rows=raw_rows,
                raw_stats=raw_stats,
                session_id=session_id,
                rows=list(raw_rows),
                stats=list(raw_stats),
            )
            self._items[session_id] = data
        return session_id, data

    def get(self, session_id: str) -> SessionData:
        with self._lock:
            self._purge_locked()
            try:
                data = self._items[session_id]
            except KeyError as exc:
                raise KeyError("Session expired or not found") from exc
            data.touch()
            return data

    def delete(self, session_id: str) -> None:
        with self._lock:
            self._items.pop(session_id, None)

    def clear(self) -> None:
        with self._lock:
            self._items.clear()


_SESSION_STORE = SessionStore()


def configure_session_store(max_sessions: int, ttl_minutes: float | None = None) -> None:
    _SESSION_STORE.max_sessions = max(int(max_sessions), 1)
    if ttl_minutes is not None:
        _SESSION_STORE.ttl = timedelta(minutes=max(float(ttl_minutes), 0.0))


def reset_session_store() -> None:
    _SESSION_STORE.clear()
    _SESSION_STORE.max_sessions = _DEFAULT_MAX_SESSIONS
    _SESSION_STORE.ttl = timedelta(minutes=_DEFAULT_TTL_MINUTES)


def get_session(session_id: str) -> SessionData:
    return _SESSION_STORE.get(session_id)


def new_session(raw_rows: list[Row]) -> tuple[str, SessionData]:
    return _SESSION_STORE.create(raw_rows, profile_columns(raw_rows))


def clear_session(session_id: str) -> None:
    _SESSION_STORE.delete(session_id)


def decode_csv_bytes(data: bytes) -> str:
    try:
        return data.decode("utf-8-sig")
    except UnicodeDecodeError:
        return data.decode("latin-1")


def load_csv_bytes(data: bytes) -> list[Row]:
    rows = parse_table(decode_csv_bytes(data))
    if not rows:
        raise WizardError("Could not parse CSV or file is empty.")
    return rows


def enforce_table_limits(rows: Sequence[Row], *, max_rows: int, max_columns: int) -> None:
    if len(rows) > max_rows:
        raise WizardError(f"Table has {len(rows)} rows; the limit is {max_rows}")
    columns = len(rows[0]) if rows else 0
    if columns > max_columns:
        raise WizardError(f"Table has {columns} columns; the limit is {max_columns}")


def rows_preview(rows: Sequence[Row], *, head: int = 5) -> list[dict[str, Any]]:
    return [dict(row) for row in rows[:head]]


def describe_session(session: SessionData) -> dict[str, Any]:
    return {
        "session_id": session.session_id,
        "columns": [stat.to_dict() for stat in session.stats],
        "shape": [len(session.rows), len(session.columns)],
        "head": rows_preview(session.rows),
    }


def ensure_columns_exist(session: SessionData, columns: Sequence[str]) -> None:
    missing = [column for column in columns if column not in session.columns]
    if missing:
        raise KeyError(f"Columns not found: {', '.join(missing)}")


def session_config(app_config: Mapping[str, Any]) -> dict[str, Any]:
    plugin_settings = app_config.get("PLUGIN_SETTINGS", {}).get("automl_wizard", {})
    upload = plugin_settings.get("upload", {})
    limits = {
        "max_mb": upload.get("max_mb", 5),
        "max_files": upload.get("max_files", 1),
        "max_columns": plugin_settings.get("max_columns", 200),
        "max_rows": plugin_settings.get("max_rows", 100000),
        "max_train_steps": plugin_settings.get("max_train_steps", 5_000_000),
    }
    return {
        "upload": limits,
        "session_ttl_minutes": app_config.get("SESSION_TTL_MINUTES", _DEFAULT_TTL_MINUTES),
    }


__all__ = [
    "SessionData",
    "SessionStore",
    "clear_session",
    "configure_session_store",
    "decode_csv_bytes",
    "describe_session",
    "enforce_table_limits",
    "ensure_columns_exist",
    "get_session",
    "load_csv_bytes",
    "new_session",
    "reset_session_store",
    "rows_preview",
    "session_config",
]

"""Command line interface for the AutoML wizard pipeline."""

from __future__ import annotations

import argparse
import json
from pathlib import Path
from typing import Any

from .core import (
    CLEANING_METHODS,
    CleaningSpec,
    TrainingSpec,
    clean_rows,
    parse_table,
    profile_columns,
    rows_to_csv,
    train_regression,
)


def _print(payload: dict[str, Any]) -> None:
    print(json.dumps(payload, indent=2, sort_keys=True))


def _load_rows(path: str) -> list[dict[str, Any]]:
    text = Path(path).read_text(encoding="utf-8-sig")
    rows = parse_table(text)
    if not rows:
        raise SystemExit(f"Could not parse CSV or file is empty: {path}")
    return rows


def _clean(rows: list[dict[str, Any]], args: argparse.Namespace) -> list[dict[str, Any]]:
    if not args.method:
        return rows
    spec = CleaningSpec(method=args.method, target_columns=tuple(args.columns or ()))
    return clean_rows(rows, profile_columns(rows), spec)


def command_profile(args: argparse.Namespace) -> None:
    rows = _load_rows(args.path)
    _print({"rows": len(rows), "columns": [stat.to_dict() for stat in profile_columns(rows)]})


def command_clean(args: argparse.Namespace) -> None:
    rows = _load_rows(args.path)
    cleaned = _clean(rows, args)
    if args.output:
        Path(args.output).write_text(rows_to_csv(cleaned), encoding="utf-8")
    _print(
        {
            "rows": len(cleaned),
            "rows_removed": len(rows) - len(cleaned),
            "columns": [stat.to_dict() for stat in profile_columns(cleaned)],
        }
    )


def command_train(args: argparse.Namespace) -> None:
    rows = _clean(_load_rows(args.path), args)
    spec = TrainingSpec(
        target_column=args.target,
        feature_columns=tuple(args.features),
        split_ratio=args.split,
        epochs=args.epochs,
        learning_rate=args.learning_rate,
    )
    metrics = train_regression(rows, spec)
    _print({"target": spec.target_column, "features": list(spec.feature_columns), "metrics": metrics.to_dict()})


def _add_cleaning_arguments(parser: argparse.ArgumentParser, *, required: bool) -> None:
    parser.add_argument("--method", required=required, choices=CLEANING_METHODS, help="Missing value strategy")
    parser.add_argument("--columns", nargs="*", default=[], help="Columns the strategy applies to")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="AutoML wizard CLI")
    subparsers = parser.add_subparsers(dest="command", required=True)

    profile_parser = subparsers.add_parser("profile", help="Profile the columns of a CSV file")
    profile_parser.add_argument("path", help="CSV file")
    profile_parser.set_defaults(func=command_profile)

    clean_parser = subparsers.add_parser("clean", help="Impute missing values and drop duplicates")
    clean_parser.add_argument("path", help="CSV file")
    _add_cleaning_arguments(clean_parser, required=True)
    clean_parser.add_argument("--output", help="Write the cleaned table to this path")
    clean_parser.set_defaults(func=command_clean)

    train_parser = subparsers.add_parser("train", help="Train a linear regression on a CSV file")
    train_parser.add_argument("path", help="CSV file")
    train_parser.add_argument("--target", required=True, help="Target column")
    train_parser.add_argument("--features", nargs="+", required=True, help="Feature columns")
    train_parser.add_argument("--split", type=float, default=0.8, help="Training share of the rows")
    train_parser.add_argument("--epochs", type=int, default=500, help="Passes over the training rows")
    train_parser.add_argument("--learning-rate", dest="learning_rate", type=float, default=1e-4, help="SGD step size")
    _add_cleaning_arguments(train_parser, required=False)
    train_parser.set_defaults(func=command_train)

    return parser


def main(argv: list[str] | None = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)
    args.func(args)


if __name__ == "__main__":
    main()

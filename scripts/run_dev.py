"""Run the AutoML wizard API with Flask's development server."""

import argparse
import os

from app import create_app


def _env_port() -> int:
    value = os.getenv("AUTOML_WIZARD_PORT") or os.getenv("PORT") or "5001"
    try:
        return int(value)
    except ValueError as exc:
        raise SystemExit(f"Invalid port '{value}'. Set AUTOML_WIZARD_PORT to a number.") from exc


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--host", default=os.getenv("AUTOML_WIZARD_HOST", "127.0.0.1"))
    parser.add_argument("--port", type=int, default=None, help="defaults to AUTOML_WIZARD_PORT, PORT or 5001")
    parser.add_argument("--config", default=None, choices=["BaseConfig", "TestingConfig"])
    parser.add_argument("--debug", action="store_true")
    return parser


def main(argv: list[str] | None = None) -> None:
    args = build_parser().parse_args(argv)
    app = create_app(args.config)
    port = args.port if args.port is not None else _env_port()
    app.run(host=args.host, port=port, debug=args.debug)


if __name__ == "__main__":
    main()

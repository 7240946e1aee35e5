"""Run the todo list service with uvicorn."""

from __future__ import annotations

import argparse
import os

import uvicorn

from todo_service.config import ConfigError, load_config
from todo_service.logging_setup import setup_logging
from todo_service.main import create_app

DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 3000


def _default_port() -> int:
    raw_port = os.getenv("PORT", "").strip()
    return int(raw_port) if raw_port else DEFAULT_PORT


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(
        prog="todo_service", description="Serve Markdown todo lists over HTTP."
    )
    parser.add_argument(
        "workspace",
        nargs="?",
        help="Directory holding the list files (defaults to PRO_TODO_WORKSPACE).",
    )
    parser.add_argument("--host", default=DEFAULT_HOST)
    parser.add_argument("--port", type=int, default=None)
    args = parser.parse_args(argv)

    try:
        config = load_config(args.workspace)
    except ConfigError as exc:
        parser.error(str(exc))

    setup_logging()
    port = args.port if args.port is not None else _default_port()
    uvicorn.run(create_app(config), host=args.host, port=port, log_config=None)


if __name__ == "__main__":
    main()

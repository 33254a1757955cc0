"""CLI entry point for the SearchGate server."""

from __future__ import annotations

import argparse
import json
import os
import sys
from pathlib import Path
from typing import Any


def main(argv: list[str] | None = None) -> None:
    """Main CLI entry point for the SearchGate server."""
    parser = argparse.ArgumentParser(
        prog="searchgate",
        description="SearchGate — Service-layer gateway for an Elasticsearch cluster",
    )
    parser.add_argument(
        "--config",
        "-c",
        type=str,
        default=None,
        help="Path to YAML configuration file",
    )
    parser.add_argument(
        "--host",
        type=str,
        default=None,
        help="Server bind address (overrides config)",
    )
    parser.add_argument(
        "--port",
        "-p",
        type=int,
        default=None,
        help="Server port (overrides config)",
    )
    parser.add_argument(
        "--workers",
        "-w",
        type=int,
        default=None,
        help="Number of worker processes",
    )
    parser.add_argument(
        "--reload",
        action="store_true",
        help="Enable auto-reload for development",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        choices=["debug", "info", "warning", "error"],
        default=None,
        help="Log level (overrides config)",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"SearchGate {_get_version()}",
    )

    args = parser.parse_args(argv)

    from searchgate.api.app import CONFIG_FILE_ENV, OVERRIDES_ENV
    from searchgate.config.settings import Settings
    from searchgate.observability.logging import setup_logging

    # Settings the workers must see; they rebuild settings through the app factory
    overrides: dict[str, Any] = {}
    if args.log_level:
        overrides["observability"] = {"log_level": args.log_level}
    os.environ[OVERRIDES_ENV] = json.dumps(overrides)

    if args.config:
        config_path = Path(args.config)
        if not config_path.exists():
            print(f"Error: Config file not found: {config_path}", file=sys.stderr)
            sys.exit(1)
        os.environ[CONFIG_FILE_ENV] = str(config_path.resolve())
        settings = Settings.from_yaml(config_path, overrides)
    else:
        settings = Settings(**overrides)

    # Server options only matter to this launcher
    if args.host:
        settings.server.host = args.host
    if args.port:
        settings.server.port = args.port
    if args.workers:
        settings.server.workers = args.workers

    setup_logging(settings.observability, service=settings.app_name)

    import uvicorn

    uvicorn.run(
        "searchgate.api.app:create_app",
        factory=True,
        host=settings.server.host,
        port=settings.server.port,
        workers=settings.server.workers if not args.reload else 1,
        reload=args.reload,
        log_level=settings.observability.log_level,
    )


def _get_version() -> str:
    """Get the package version."""
    try:
        from searchgate import __version__

        return __version__
    except ImportError:
        return "unknown"


if __name__ == "__main__":
    main()

#!/usr/bin/env python3
"""
Bank Demo Service Entry Point

Starts the FastAPI server with the configured bank store. Command-line flags
override BANK_DEMO_* environment settings.
"""

import argparse
import logging
import sys

import uvicorn

from bank_demo.api import create_app
from bank_demo.config import get_config
from bank_demo.logging_config import setup_logging
from bank_demo.store import create_bank_store


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Bank demo HTTP service")
    backend = parser.add_mutually_exclusive_group()
    backend.add_argument(
        "--in-memory",
        action="store_true",
        help="Keep accounts in memory (default)"
    )
    backend.add_argument(
        "--sqlite",
        metavar="PATH",
        help="Persist accounts in the given SQLite database file"
    )
    parser.add_argument("--host", help="Listen address")
    parser.add_argument("--port", type=int, help="Listen port")
    parser.add_argument("--log-level", help="DEBUG, INFO, WARNING or ERROR")
    return parser.parse_args(argv)


def main(argv=None) -> int:
    args = parse_args(argv)
    config = get_config()

    if args.in_memory:
        config.storage_backend = "memory"
    elif args.sqlite:
        config.storage_backend = "sqlite"
        config.database_path = args.sqlite
    if args.host:
        config.api_host = args.host
    if args.port:
        config.api_port = args.port
    if args.log_level:
        config.log_level = args.log_level

    try:
        logger = setup_logging(config.log_level, config.log_format)
    except ValueError as e:
        print(f"Error starting server: {e}", file=sys.stderr)
        return 1

    try:
        store = create_bank_store(config)
    except ValueError as e:
        logger.error("Finishing application: %s", e)
        return 1

    app = create_app(store)
    logger.info(
        "Server listening on %s:%s (%s store)",
        config.api_host, config.api_port, store.backend_name
    )

    try:
        uvicorn.run(
            app,
            host=config.api_host,
            port=config.api_port,
            log_level=logging.getLevelName(logger.level).lower()
        )
    except KeyboardInterrupt:
        pass
    logger.info("Server stopped")
    return 0


if __name__ == "__main__":
    sys.exit(main())

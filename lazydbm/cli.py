#!/usr/bin/env python3
"""lazydbm - A terminal UI for browsing SQL databases."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from . import __version__
from .domains.connections.store.connections import CONFIG_SAMPLE, load_connections
from .shared.core.errors import ConfigError
from .shared.core.log_setup import LOG_FILENAME, setup_logging
from .shared.core.store import CONFIG_DIR

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="lazydbm",
        description="A terminal UI for browsing SQL databases",
        epilog=f"Connections are read from JSON, for example:\n\n{CONFIG_SAMPLE}",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--config",
        metavar="PATH",
        type=Path,
        help=f"Extra connections file (read after {CONFIG_DIR / 'connections.json'})",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def main(argv: list[str] | None = None) -> int:
    """Entry point for the CLI."""
    args = build_parser().parse_args(argv)

    with setup_logging(CONFIG_DIR / LOG_FILENAME):
        try:
            connections = load_connections(args.config)
        except ConfigError as e:
            logger.error("configuration error: %s", e)
            print(f"Error: {e}", file=sys.stderr)
            return 1

        from .domains.shell.app.main import LazyDBMApp

        app = LazyDBMApp(connections)
        app.run()
        logger.info("exiting with status %s", app.return_code)
        return app.return_code or 0


if __name__ == "__main__":
    sys.exit(main())

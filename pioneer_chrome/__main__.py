"""Entry point for the Pioneer CLI."""

from __future__ import annotations

import argparse
import logging
from pathlib import Path

from . import __version__
from .log import logger
from .preferences import load_preferences


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(
        prog="pioneer",
        description="Tabbed browser chrome driven by a host bridge",
    )
    parser.add_argument(
        "--prefs",
        type=Path,
        default=None,
        help="preferences file (default: ~/.pioneer/preferences.yaml)",
    )
    parser.add_argument(
        "--data-dir",
        type=Path,
        default=None,
        help="where bookmarks and history are stored",
    )
    parser.add_argument(
        "--log-file",
        type=Path,
        default=None,
        help="write debug logs to this file",
    )
    parser.add_argument(
        "url",
        nargs="*",
        help="addresses or search terms to open, one tab each",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    args = parser.parse_args(argv)

    if args.log_file:
        logging.basicConfig(
            filename=str(args.log_file),
            level=logging.DEBUG,
            format="%(asctime)s %(name)s %(levelname)s %(message)s",
        )

    prefs = load_preferences(args.prefs)
    if args.data_dir:
        prefs.data_dir = args.data_dir.expanduser()

    # Import lazily so --help and --version stay fast
    from .app import PioneerApp

    app = PioneerApp(prefs=prefs, initial_urls=args.url)
    logger.debug("starting Pioneer with data dir %s", prefs.data_dir)
    app.run()


if __name__ == "__main__":
    main()

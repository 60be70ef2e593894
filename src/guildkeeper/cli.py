"""Command line entry point."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from .config import DEFAULT_CONFIG_PATH, ConfigLoadError, ConfigStore

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="guildkeeper", description="Run the guildkeeper Discord bot.")
    parser.add_argument(
        "--config",
        type=Path,
        default=DEFAULT_CONFIG_PATH,
        help="Path to the TOML configuration file (default: %(default)s)",
    )
    parser.add_argument(
        "--check-config",
        action="store_true",
        help="Validate the configuration and exit without connecting to Discord",
    )
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        store = ConfigStore.from_file(args.config)
    except ConfigLoadError as exc:
        logger.error("%s", exc)
        return 2

    missing = store.current.missing()
    if args.check_config:
        if missing:
            logger.error("Missing required settings: %s", ", ".join(missing))
            return 1
        logger.info("Configuration %s is valid", args.config)
        return 0

    if missing:
        logger.warning("Missing settings: %s", ", ".join(missing))

    from .clients import disc

    return disc.run(store)


if __name__ == "__main__":
    sys.exit(main())

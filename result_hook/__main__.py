"""Entry point for Result Hook.

Usage:
    python -m result_hook       Watch the folder named in ./config.json
"""

import logging
import sys

from result_hook.app import LOG_FORMAT, App, setup_logging
from result_hook.config import Config, ConfigError

logger = logging.getLogger("result_hook")


def main() -> None:
    """Load config, then run the watcher until interrupted."""
    try:
        config = Config.load()
    except ConfigError as exc:
        logging.basicConfig(level=logging.INFO, format=LOG_FORMAT)
        logger.critical("%s", exc)
        sys.exit(1)

    setup_logging(config)
    try:
        App(config).run()
    except FileNotFoundError as exc:
        logger.critical("Cannot start: %s", exc)
        sys.exit(1)


if __name__ == "__main__":
    main()

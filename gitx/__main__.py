"""Main entry point for direct module execution."""

import sys
import logging

from .cli import cli
from .config import LOG_FORMAT, get_config_dir, get_log_path
from .exceptions import GitxError
from .ui import print_error

logger = logging.getLogger(__name__)


def configure_logging() -> None:
    """Log to the gitx log file.

    The console only shows log records under ``--debug``; otherwise each
    failure reaches the user once, through the CLI's own output.
    """
    logging.basicConfig(
        level=logging.INFO,
        format=LOG_FORMAT,
        handlers=[logging.FileHandler(get_log_path())],
    )


def main() -> None:
    """Main entry point."""
    try:
        # Ensure the config directory exists before the log file is opened
        get_config_dir().mkdir(parents=True, exist_ok=True)
        configure_logging()

        logger.debug("Starting gitx")
        cli()
    except GitxError as e:
        print_error(str(e))
        sys.exit(1)
    except Exception as e:
        logger.error("Fatal error", exc_info=True)
        print_error(f"Unexpected error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()

"""Logging setup for the command-line interface."""

import logging
import sys

LOG_LEVEL_ENV_VAR = "ROUTEFIN_LOG_LEVEL"
DEFAULT_LOG_LEVEL = "WARNING"


def configure_logging(level: str | None = None) -> None:
    """Configure application logging.

    Sets up logging for the routefin application with:
    - Output on stderr so report output on stdout stays clean
    - Configurable log level for routefin modules
    - WARNING level for SQLAlchemy statement logging
    """
    level_name = (level or DEFAULT_LOG_LEVEL).upper()
    log_level = getattr(logging, level_name, logging.WARNING)

    logging.basicConfig(
        level=log_level,
        format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        stream=sys.stderr,
        force=True,
    )
    logging.getLogger("routefin").setLevel(log_level)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)

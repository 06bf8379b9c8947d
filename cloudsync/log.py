"""Console logging for applications embedding cloudsync."""
from __future__ import annotations

import logging
import os
from typing import Optional

from rich.logging import RichHandler


def _resolve_level(debug: bool, log_level: Optional[str]) -> Optional[int]:
    """Requested level, or None when nothing asks for output."""
    if debug:
        return logging.DEBUG
    name = log_level or os.getenv("LOG_LEVEL")
    if not name:
        return None
    return getattr(logging, name.upper(), logging.INFO)


def setup_logging(
    debug: bool = False,
    silent: bool = False,
    log_level: Optional[str] = None,
    logger_name: Optional[str] = None,
) -> str:
    """
    Send cloudsync's walk and upload logs to a rich console handler.

    Silent unless debug, log_level or the LOG_LEVEL environment variable
    asks for output. Calling it again replaces the rich handler installed
    by a previous call; other handlers are left alone.

    Args:
        debug: Force DEBUG level
        silent: Disable output regardless of the other arguments
        log_level: Level name such as "INFO"
        logger_name: Logger to configure (default: root)

    Returns:
        "silent" or the effective level name
    """
    target = logging.getLogger(logger_name)
    for handler in list(target.handlers):
        if isinstance(handler, RichHandler):
            target.removeHandler(handler)

    logging.disable(logging.NOTSET)

    level = None if silent else _resolve_level(debug, log_level)
    if level is None:
        logging.disable(logging.CRITICAL)
        target.setLevel(logging.CRITICAL + 1)
        return "silent"

    handler = RichHandler(rich_tracebacks=True, show_time=False, show_path=False)
    handler.setFormatter(logging.Formatter("%(name)s: %(message)s"))
    target.addHandler(handler)
    target.setLevel(level)
    return logging.getLevelName(level)

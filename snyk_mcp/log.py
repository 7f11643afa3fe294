from __future__ import annotations

import logging
import sys
from typing import Optional

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

_HANDLER: Optional[logging.Handler] = None


def configure_logging(level: str = "INFO") -> logging.Logger:
    """Send the package's operational log to stderr.

    stdout carries the stdio transport and must stay free of log lines.
    """
    global _HANDLER
    logger = logging.getLogger("snyk_mcp")
    logger.setLevel(getattr(logging, str(level).upper(), logging.INFO))

    if _HANDLER is None:
        _HANDLER = logging.StreamHandler(sys.stderr)
        _HANDLER.setFormatter(logging.Formatter(LOG_FORMAT))
    if _HANDLER not in logger.handlers:
        logger.addHandler(_HANDLER)

    return logger

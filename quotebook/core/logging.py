"""Logging setup for the API process and the operator scripts."""
from __future__ import annotations

import logging
import sys

LOG_FORMAT = "[%(levelname)s][%(asctime)s][%(name)s] - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

_HANDLER_NAME = "quotebook-console"


def configure_logging(level: str = "INFO") -> None:
    """Attach a console handler to the root logger once and set its level."""
    root = logging.getLogger()
    root.setLevel(getattr(logging, (level or "INFO").upper(), logging.INFO))
    if any(h.get_name() == _HANDLER_NAME for h in root.handlers):
        return
    handler = logging.StreamHandler(sys.stdout)
    handler.set_name(_HANDLER_NAME)
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
    root.addHandler(handler)

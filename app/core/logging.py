"""
Logging setup.

Modules log through ``logging.getLogger(__name__)``; this configures the
root handler once at startup.
"""

import logging
import sys

LOG_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"


def configure_logging(level: str = "INFO") -> None:
    """Install a single stream handler on the root logger."""
    root = logging.getLogger()
    root.setLevel(level)

    # Idempotent: uvicorn reload and tests call this more than once
    for handler in root.handlers:
        if getattr(handler, "_endevera", False):
            handler.setLevel(level)
            return

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    handler.setLevel(level)
    handler._endevera = True
    root.addHandler(handler)

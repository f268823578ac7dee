"""
Logging setup.

Modules log through ``logging.getLogger(__name__)``; this only configures the
root logger once at startup.
"""

from __future__ import annotations

import logging

LOG_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(level=level.upper(), format=LOG_FORMAT)
    # Uvicorn installs its own handlers; keep our level consistent with it.
    logging.getLogger("campaigns").setLevel(level.upper())

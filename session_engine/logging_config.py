"""
Process-wide logging setup.

Modules only ever call ``logging.getLogger(__name__)``; this is the single
place that attaches a handler to the root logger.
"""

import logging
from typing import Optional

from session_engine.settings import Settings, get_settings

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


class EngineLogHandler(logging.StreamHandler):
    """Root handler installed by configure_logging."""


def configure_logging(settings: Optional[Settings] = None) -> None:
    """
    Configure the root logger from settings.

    Safe to call more than once; later calls only adjust the level.

    Args:
        settings: Settings to read ``log_level`` from (defaults to get_settings())
    """
    settings = settings or get_settings()
    root = logging.getLogger()
    root.setLevel(settings.log_level)

    if not any(isinstance(h, EngineLogHandler) for h in root.handlers):
        handler = EngineLogHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        root.addHandler(handler)

    # Third-party HTTP clients are noisy at INFO
    for name in ("httpx", "httpcore", "hpack"):
        logging.getLogger(name).setLevel(max(logging.WARNING, root.level))

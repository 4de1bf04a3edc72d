"""Optional file logging for the ``tessera.term`` loggers.

Nothing is configured at import time.  A host that wants a render log
calls :func:`configure_logging` with a :class:`RenderConfig` whose
``log_path`` is set (usually from ``TESSERA_LOG_PATH``).  Writing to the
terminal's own stream would corrupt the rendered frames, so records only
ever go to the file.
"""

from __future__ import annotations

import logging

from tessera.term.config import RenderConfig

LOGGER_NAME = "tessera.term"

# Finer than DEBUG: per-frame detail.
VERBOSE = 5
logging.addLevelName(VERBOSE, "VERBOSE")

_LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"

_handler: logging.FileHandler | None = None


def configure_logging(config: RenderConfig) -> logging.FileHandler | None:
    """Attach a file handler for *config*, replacing any previous one.

    Returns the handler, or ``None`` when ``config.log_path`` is empty.
    """
    global _handler
    shutdown_logging()
    if not config.log_path:
        return None

    level = VERBOSE if config.log_level == "verbose" else logging.DEBUG
    handler = logging.FileHandler(config.log_path, mode="a", encoding="utf-8")
    handler.setFormatter(logging.Formatter(_LOG_FORMAT))
    handler.setLevel(level)

    logger = logging.getLogger(LOGGER_NAME)
    logger.addHandler(handler)
    logger.setLevel(level)
    _handler = handler
    return handler


def shutdown_logging() -> None:
    """Detach and close the handler installed by :func:`configure_logging`."""
    global _handler
    if _handler is None:
        return
    logging.getLogger(LOGGER_NAME).removeHandler(_handler)
    _handler.close()
    _handler = None

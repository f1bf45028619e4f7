# core/logging_config.py
import logging

from core.config import settings

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
LOGGER_NAME = "condo"

# supabase-py talks through httpx; its per-request lines drown ours
CHATTY_LOGGERS = ("httpx", "httpcore", "hpack")


def resolve_log_level(env: str, override=None) -> int:
    """LOG_LEVEL wins when it names a real level; otherwise DEBUG only in development."""
    if override:
        level = logging.getLevelName(str(override).upper())
        if isinstance(level, int):
            return level
    return logging.DEBUG if env == "development" else logging.INFO


def setup_logger() -> logging.Logger:
    logger = logging.getLogger(LOGGER_NAME)

    # Avoid duplicate handlers in dev reload
    if logger.handlers:
        return logger

    level = resolve_log_level(settings.ENV, settings.LOG_LEVEL)
    logger.setLevel(level)

    stream_handler = logging.StreamHandler()
    stream_handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(stream_handler)

    for name in CHATTY_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))

    return logger


logger = setup_logger()

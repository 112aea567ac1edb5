import logging
import os
import sys

LOG_FORMAT = "%(asctime)s - %(levelname)s - %(name)s:%(lineno)d - %(message)s"


def _level_from_env() -> int:
    explicit = os.getenv("LOG_LEVEL")
    if explicit:
        level = logging.getLevelName(explicit.upper())
        if isinstance(level, int):
            return level

    mode = os.getenv("ENV", "dev").lower()
    return logging.INFO if mode == "prod" else logging.DEBUG


def get_logger(name: str) -> logging.Logger:
    logger = logging.getLogger(name.split(".")[-1])
    logger.setLevel(_level_from_env())

    # Called at import time by every module, so only attach the handler once
    if not logger.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)

    return logger

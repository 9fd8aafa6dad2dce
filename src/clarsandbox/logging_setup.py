import logging
from logging.handlers import RotatingFileHandler
from .config import LOG_LEVEL, LOG_PATH

def get_logger(name="clar"):
    """Return a logger configured for the sandbox component."""
    logger = logging.getLogger(name)
    if getattr(logger, "_configured", False):
        return logger

    logger.setLevel(getattr(logging, LOG_LEVEL, logging.WARNING))
    fmt = logging.Formatter("%(asctime)s | %(levelname)s | %(message)s")

    if LOG_PATH is not None:
        LOG_PATH.parent.mkdir(parents=True, exist_ok=True)
        fh = RotatingFileHandler(LOG_PATH, maxBytes=2_000_000, backupCount=3, encoding="utf-8")
        fh.setFormatter(fmt)
        logger.addHandler(fh)

    ch = logging.StreamHandler()
    ch.setFormatter(fmt)
    logger.addHandler(ch)

    logger._configured = True
    return logger

import logging
import os

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

VERBOSE_FMT = "[%(asctime)s] [%(levelname)s] [%(name)s] %(message)s"
DATE_FMT = "%Y-%m-%d %H:%M:%S"

_configured = False


def configure_logging(level: str = LOG_LEVEL) -> None:
    """Console logging for the whole process; safe to call more than once."""
    global _configured
    root = logging.getLogger()
    root.setLevel(level)
    if _configured:
        return
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(VERBOSE_FMT, datefmt=DATE_FMT))
    root.addHandler(handler)
    _configured = True

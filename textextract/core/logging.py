import logging
import sys

from textextract.config import settings

LOG_FORMAT = "%(asctime)s %(levelname)-8s [%(name)s] %(message)s"


def setup_logging(level: str | None = None) -> None:
    """Configure the root logger. Existing handlers (uvicorn, pytest) are left in place."""
    numeric_level = getattr(logging, (level or settings.log_level).upper(), logging.INFO)
    root = logging.getLogger()
    root.setLevel(numeric_level)

    # httpx logs every request URL at INFO
    logging.getLogger("httpx").setLevel(logging.WARNING)

    if root.handlers:
        return

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
    root.addHandler(handler)


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)

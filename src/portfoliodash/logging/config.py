import logging
from typing import TextIO

_VERBOSITY_LEVELS = {
    0: logging.WARNING,  # Default: quiet
    1: logging.INFO,  # -v: per-transaction metrics
    2: logging.DEBUG,  # -vv and above: joins and parsing details
}

_SHORT_LEVEL_NAMES = {
    logging.DEBUG: "DBG",
    logging.INFO: "INF",
    logging.WARNING: "WRN",
    logging.ERROR: "ERR",
    logging.CRITICAL: "CRT",
}

_LINE_FORMAT = "%(asctime)s | %(shortlevel)-3s | %(name)s | %(message)s"


class ProfessionalFormatter(logging.Formatter):
    """One line per record with a three-letter level tag."""

    def __init__(self, datefmt: str = "%Y-%m-%d %H:%M:%S"):
        super().__init__(fmt=_LINE_FORMAT, datefmt=datefmt)

    def format(self, record: logging.LogRecord) -> str:
        record.shortlevel = _SHORT_LEVEL_NAMES.get(record.levelno, "???")
        return super().format(record)


def verbosity_to_level(verbose: int) -> int:
    """Map a ``-v`` count to a logging level."""
    return _VERBOSITY_LEVELS.get(min(max(verbose, 0), 2), logging.WARNING)


def configure_logging(
    level=logging.WARNING, stream: TextIO | None = None
) -> logging.Logger:
    """Install the dashboard formatter on the root logger and return it.

    Calling this more than once only adjusts the level; the handler is added
    the first time.
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    if not root_logger.handlers:
        handler = logging.StreamHandler(stream)
        handler.setFormatter(ProfessionalFormatter())
        root_logger.addHandler(handler)
    return root_logger

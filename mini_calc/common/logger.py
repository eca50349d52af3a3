"""Shared logger for the calculator."""
import logging


LOG_FORMAT: str = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"

logger: logging.Logger = logging.getLogger("mini_calc")


def configure_logging(level: int = logging.INFO) -> None:
    """Send the calculator's log records to stderr; called once by the command-line entry point."""
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)
    logger.setLevel(level)

# ------------------------------
# Logging
# ------------------------------
#
# Command results go to stdout as JSON/CSV, so log records go to stderr.

import logging
import sys
import time
from contextlib import contextmanager
from typing import Union

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")


def resolve_level(level: Union[str, int]) -> int:
    """Map a level name (any case) or a logging constant to its numeric value."""
    if isinstance(level, int) and not isinstance(level, bool):
        if level not in {getattr(logging, name) for name in LOG_LEVELS}:
            raise ValueError(f"unknown log level {level}")
        return level
    if isinstance(level, str) and level.strip().upper() in LOG_LEVELS:
        return getattr(logging, level.strip().upper())
    raise ValueError(f"log level must be one of {', '.join(LOG_LEVELS)}, got {level!r}")


class EPDLogger:
    """Package logger for geometry queries and CLI commands"""

    def __init__(self, level: Union[str, int] = "INFO"):
        self.logger = logging.getLogger("epdgeom")
        self.logger.setLevel(resolve_level(level))

        if not self.logger.handlers:
            handler = logging.StreamHandler(sys.stderr)
            handler.setFormatter(logging.Formatter("%(name)s [%(levelname)s] %(message)s"))
            self.logger.addHandler(handler)

    @property
    def level(self) -> int:
        return self.logger.level

    def set_level(self, level: Union[str, int]) -> None:
        """Raises ValueError for names outside LOG_LEVELS."""
        self.logger.setLevel(resolve_level(level))

    def debug(self, message: str) -> None:
        self.logger.debug(message)

    def info(self, message: str) -> None:
        self.logger.info(message)

    def warning(self, message: str) -> None:
        self.logger.warning(message)

    def error(self, message: str) -> None:
        self.logger.error(message)

    @contextmanager
    def operation(self, name: str, **context):
        """
        Time a block. Keyword context (tile=..., n=...) is appended to every
        record; failures are logged with the exception type and re-raised.
        """
        detail = " ".join(f"{k}={v}" for k, v in context.items())
        label = f"{name} ({detail})" if detail else name
        self.debug(f"{label}: start")
        start = time.perf_counter()
        try:
            yield
        except Exception as e:
            self.error(f"{label}: {type(e).__name__}: {e}")
            raise
        self.info(f"{label}: done in {1000.0 * (time.perf_counter() - start):.1f} ms")


logger = EPDLogger()


def get_logger() -> EPDLogger:
    return logger

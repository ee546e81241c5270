import logging
import os
from logging.handlers import RotatingFileHandler
from collections import deque
from typing import Any, Deque, Dict, List


LOG_DIR = os.getenv("LOG_DIR", os.path.join(os.getcwd(), "logs"))
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
RING_BUFFER_SIZE = int(os.getenv("RING_BUFFER_SIZE", "2000"))
LOG_FILE_NAME = "mapkernel.log"


class RingBufferHandler(logging.Handler):
    def __init__(self, maxlen: int = 2000):
        super().__init__()
        self.buffer: Deque[Dict[str, Any]] = deque(maxlen=maxlen)

    def emit(self, record: logging.LogRecord) -> None:
        try:
            self.buffer.append({
                "ts": record.created,
                "level": record.levelname,
                "levelno": record.levelno,
                "name": record.name,
                "message": record.getMessage(),
                "pathname": record.pathname,
                "lineno": record.lineno,
            })
        except Exception:
            self.handleError(record)

    def get_recent(self, limit: int = 500, min_level: int = logging.NOTSET) -> List[Dict[str, Any]]:
        """Most recent records, oldest first; limit <= 0 returns all of them."""
        records = [r for r in self.buffer if r["levelno"] >= min_level]
        if limit <= 0:
            return records
        return records[-limit:]

    def clear(self) -> None:
        self.buffer.clear()


_ring_handler: RingBufferHandler | None = None


def get_ring_handler() -> RingBufferHandler:
    global _ring_handler
    if _ring_handler is None:
        _ring_handler = RingBufferHandler(maxlen=RING_BUFFER_SIZE)
    return _ring_handler


def init_logging(log_dir: str | None = None, logger_name: str = "mapkernel") -> logging.Logger:
    """
    Attach a rotating file handler and the in-memory ring buffer to the kernel logger.

    Host processes call this once; importing the kernel never configures logging.
    Calling it again does not duplicate handlers.
    """
    target_dir = log_dir or LOG_DIR
    os.makedirs(target_dir, exist_ok=True)

    fmt = logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s")

    logger = logging.getLogger(logger_name)
    # Preserve any level previously set by the host; otherwise, apply env level
    if logger.level == logging.NOTSET:
        logger.setLevel(getattr(logging, LOG_LEVEL, logging.INFO))

    log_file = os.path.abspath(os.path.join(target_dir, LOG_FILE_NAME))
    has_file_handler = any(
        isinstance(h, RotatingFileHandler) and getattr(h, "baseFilename", None) == log_file
        for h in logger.handlers
    )
    if not has_file_handler:
        file_handler = RotatingFileHandler(
            log_file,
            maxBytes=5_000_000,
            backupCount=5,
            encoding="utf-8",
        )
        file_handler.setFormatter(fmt)
        logger.addHandler(file_handler)

    ring = get_ring_handler()
    ring.setFormatter(fmt)
    min_level_name = os.getenv("RING_BUFFER_MIN_LEVEL", "INFO").upper()
    ring.setLevel(getattr(logging, min_level_name, logging.WARNING))
    if ring not in logger.handlers:
        logger.addHandler(ring)

    # pyproj logs every PROJ network/database lookup at DEBUG
    logging.getLogger("pyproj").setLevel(logging.WARNING)

    return logger

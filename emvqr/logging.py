import logging
import threading
from collections import deque
from typing import Any, Deque, Dict, List, Optional

from emvqr.config import get_settings

LOGGER_NAME = "emvqr"

# Merchant contact data and whole payloads never reach the event buffer.
REDACTED_KEYS = frozenset({"payload", "merchant_phone_number", "82"})


class CodecEventBuffer(logging.Handler):
    """Keeps the most recent codec events in memory, details already redacted."""

    def __init__(self, capacity: int = 200):
        super().__init__()
        self._entries: Deque[Dict[str, Any]] = deque(maxlen=capacity)
        self._lock = threading.Lock()

    @property
    def capacity(self) -> Optional[int]:
        return self._entries.maxlen

    def emit(self, record: logging.LogRecord) -> None:
        entry = {
            "event": record.getMessage(),
            "level": record.levelname,
            "logger": record.name,
            "ts": record.created,
            "details": redact(getattr(record, "details", None)),
        }
        with self._lock:
            self._entries.append(entry)

    def events(self, name: Optional[str] = None) -> List[Dict[str, Any]]:
        with self._lock:
            return [entry for entry in self._entries if name is None or entry["event"] == name]

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()


def attach_event_buffer(name: str, capacity: int, level: int | str = logging.INFO) -> logging.Logger:
    """Give logger ``name`` an event buffer; a logger that already has one is returned as is."""
    logger = logging.getLogger(name)
    if event_buffer(logger) is None:
        logger.addHandler(CodecEventBuffer(capacity))
        logger.setLevel(level)
        logger.propagate = False
    return logger


def get_logger() -> logging.Logger:
    settings = get_settings()
    return attach_event_buffer(LOGGER_NAME, settings.log_ring_size, settings.log_level)


def event_buffer(logger: logging.Logger) -> Optional[CodecEventBuffer]:
    for handler in logger.handlers:
        if isinstance(handler, CodecEventBuffer):
            return handler
    return None


def redact(details: Optional[dict]) -> dict:
    if not details:
        return {}
    cleaned = {}
    for key, value in details.items():
        if key in REDACTED_KEYS:
            cleaned[key] = "***"
        elif isinstance(value, dict):
            cleaned[key] = redact(value)
        else:
            cleaned[key] = value
    return cleaned


def log_event(logger: logging.Logger, level: int, event: str, details: Optional[dict] = None) -> None:
    if logger.isEnabledFor(level):
        logger.log(level, event, extra={"details": details or {}})

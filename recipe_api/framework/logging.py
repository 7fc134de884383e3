import contextvars
import json
import logging
import sys
import time
import uuid
from datetime import datetime, timezone

from recipe_api.config import get_config

_span_stack = contextvars.ContextVar("span_stack", default=[])
current_trace_id = contextvars.ContextVar("trace_id", default=str(uuid.uuid4()))


LOG_FORMAT = "[%(asctime)s] [%(levelname)s] %(message)s"
config = get_config()


class TraceIDFilter(logging.Filter):
    """Injects trace_id into log records if available."""

    def filter(self, record):
        record.trace_id = current_trace_id.get() or "-"
        return True


def setup_logging():
    """
    Configure the service logger with a StreamHandler and a custom formatter.
    Also, adds a TraceIDFilter to inject trace_id into log records.
    """
    logger = logging.getLogger(config.title)
    if logger.handlers:
        return logger

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))

    logger.setLevel(logging.INFO)
    logger.addHandler(handler)
    logger.addFilter(TraceIDFilter())

    return logger


logger = setup_logging()


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def log_span(event: str, **fields):
    """
    Logs a structured span event.
    A span represents an operation or unit of work within a trace.
    It automatically includes the current trace ID and timestamp.
    """
    trace_id = current_trace_id.get()
    payload = {
        "ts": _now(),
        "trace_id": trace_id,
        "event": event,
        **fields,
    }
    logger.info(json.dumps(payload, default=str))


class Span:
    """
    A context manager for logging spans.
    """

    def __init__(self, name, **fields):
        self.name = name
        self.fields = fields

    def __enter__(self):
        self.start = time.time()
        log_span(f"span_start_{self.name}", name=self.name, **self.fields)
        stack = _span_stack.get()
        _span_stack.set(stack + [self.name])
        return self

    def __exit__(self, exc_type, exc_val, tb):
        stack = _span_stack.get()[:-1]
        _span_stack.set(stack)
        duration = round((time.time() - self.start) * 1000, 2)
        extra = {"error": repr(exc_val)} if exc_val is not None else {}
        log_span(
            f"span_end_{self.name}",
            name=self.name,
            duration_ms=duration,
            **self.fields,
            **extra,
        )


def log_event(event: str, level: int = logging.INFO, **data):
    """
    Logs a structured event with additional data.
    The current trace ID is automatically included.
    """
    payload = {
        "ts": _now(),
        "trace_id": current_trace_id.get(),
        "event": event,
        **data,
    }
    logger.log(level, json.dumps(payload, default=str))

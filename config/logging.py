import json
import logging
import random
from datetime import datetime, timezone

# Attributes every LogRecord carries; anything else arrived through ``extra``
_RECORD_ATTRS = frozenset(vars(logging.LogRecord("", logging.INFO, "", 0, "", (), None))) | {"message", "asctime"}


class JsonFormatter(logging.Formatter):
    """JSON formatter for production logs.

    - Base fields are time (ISO-8601 UTC), level, logger name and message.
    - Attributes passed via ``extra`` (``event``, ``item_id``, ``duration_ms``...)
      are merged in; values that are not JSON-serializable are stringified.
    - A formatted traceback is added under ``exc`` when the record carries one.
    """

    def format(self, record: logging.LogRecord) -> str:  # type: ignore[override]
        payload = {
            "time": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat().replace("+00:00", "Z"),
            "level": record.levelname,
            "name": record.name,
            "message": record.getMessage(),
        }
        for key, value in record.__dict__.items():
            if key in _RECORD_ATTRS:
                continue
            try:
                json.dumps(value)
                payload.setdefault(key, value)
            except TypeError:
                payload.setdefault(key, str(value))
        if record.exc_info:
            payload["exc"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False)


class SamplingFilter(logging.Filter):
    """Probabilistically drop logs to reduce noise while keeping signal.

    - ``rate``: fraction of matching records to allow, in [0.0, 1.0].
    - ``levels``: level names sampling applies to; other levels always pass.
    - ``allow_events``: event names that are never sampled, matched against
      the record's ``event`` extra or, failing that, its message.
    """

    def __init__(self, rate: float = 1.0, levels: list[str] | None = None, allow_events: list[str] | None = None):
        super().__init__()
        self.rate = min(max(float(rate), 0.0), 1.0)
        self.levels = set(levels or ["INFO"])
        self.allow_events = set(allow_events or [])

    def filter(self, record: logging.LogRecord) -> bool:  # type: ignore[override]
        if record.levelname not in self.levels:
            return True
        event = getattr(record, "event", None) or record.msg
        if event in self.allow_events:
            return True
        if self.rate >= 1.0:
            return True
        if self.rate <= 0.0:
            return False
        return random.random() < self.rate

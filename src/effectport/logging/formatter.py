"""Plaintext rendering of effectport's JSON log events."""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from typing import Any, Optional

from .schema import DEFAULT_EVENT_KEY_ORDER, EVENT_KEY_ORDER


def _record_time_utc(record: logging.LogRecord) -> str:
    stamp = datetime.fromtimestamp(record.created, tz=timezone.utc)
    return stamp.isoformat(timespec="microseconds").replace("+00:00", "Z")


def _event_payload(message: str) -> Optional[dict[str, Any]]:
    if not (message.startswith("{") and message.endswith("}")):
        return None
    try:
        payload = json.loads(message)
    except json.JSONDecodeError:
        return None
    return payload if isinstance(payload, dict) else None


class StructuredTextFormatter(logging.Formatter):
    """Render each record as an ``=== event ===`` block of ``key: value`` lines.

    Records whose message is a JSON object (see ``log_event``) are expanded
    field by field; any other record becomes a block named after its logger.
    Blocks after the first are preceded by a blank line.
    """

    def __init__(self, *args: Any, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self._blocks_written = 0

    @staticmethod
    def _render_value(value: Any) -> str:
        if isinstance(value, (dict, list)):
            text = json.dumps(value, ensure_ascii=False)
        else:
            text = str(value)
        # One field per line.
        return text.replace("\r", "\\r").replace("\n", "\\n")

    @staticmethod
    def _ordered_keys(event_name: str, fields: dict[str, Any]) -> list[str]:
        present = {key for key, value in fields.items() if value is not None}
        preferred = EVENT_KEY_ORDER.get(event_name, DEFAULT_EVENT_KEY_ORDER)
        leading = [key for key in preferred if key in present]
        return leading + sorted(present.difference(preferred))

    def format(self, record: logging.LogRecord) -> str:
        message = record.getMessage()
        fields: dict[str, Any] = {
            "ts_utc": _record_time_utc(record),
            "level": record.levelname,
            "logger": record.name,
        }
        payload = _event_payload(message)
        if payload is None:
            event_name = record.name
            fields["message"] = message
        else:
            fields.update(payload)
            event_name = str(fields.pop("event", record.name))

        lines = [f"=== {event_name} ==="]
        lines.extend(
            f"{key}: {self._render_value(fields[key])}"
            for key in self._ordered_keys(event_name, fields)
        )
        if record.exc_info:
            lines.append("traceback:")
            lines.append(self.formatException(record.exc_info))

        block = "\n".join(lines)
        self._blocks_written += 1
        return block if self._blocks_written == 1 else "\n" + block

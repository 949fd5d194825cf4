"""
loadavg.logging
AUTHOR: carter-vin

Structured JSON event logging for the sampler

Contract:
- One JSON object per line to stdout
- Stable event vocabulary (allowlist)
- UTC timestamps only
- Silent by default (library use); LOADAVG_EVENTS=1 or configure_events(True)
"""

from __future__ import annotations

import json
from datetime import datetime, timezone
from typing import Any

from loadavg.config import PACKAGE_VERSION, events_enabled_from_env

# Event types
VALID_EVENT_TYPES = {
    "sampler_start",
    "sampler_tick",
    "source_init_failed",
    "source_read_failed",
    "fallback_failed",
    "source_close_failed",
    "sampler_stop",
}

_events_enabled: bool | None = None


def configure_events(enabled: bool | None) -> None:
    """
    Force event emission on/off

    None -> defer to LOADAVG_EVENTS again
    """
    global _events_enabled
    _events_enabled = enabled


def events_enabled() -> bool:
    if _events_enabled is None:
        return events_enabled_from_env()
    return _events_enabled


def _truncate_message(value: str, *, limit: int = 200) -> str:
    """
    Cap message length to keep events compact
    """
    if len(value) <= limit:
        return value
    return value[:limit] + f"...[truncated {len(value) - limit} chars]"


# Time: current in UTC ISO 8601
def utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def emit_event(event_type: str, **fields: Any) -> None:
    """
    Emit structured event line to stdout

    Rules:
    - event_type in VALID_EVENT_TYPES (checked even when emission is off)
    - event_type, version, timestamp always present
    - sort_keys + compact separators for format
    """
    if event_type not in VALID_EVENT_TYPES:
        raise ValueError(f"invalid event_type: {event_type}")

    if not events_enabled():
        return

    if "message" in fields and isinstance(fields["message"], str):
        # Avoid emitting long strings in event fields
        fields["message"] = _truncate_message(fields["message"])

    payload: dict[str, Any] = {
        "event_type": event_type,
        "utc_now": utc_now_iso(),
        "version": PACKAGE_VERSION,
        **fields,
    }

    print(
        json.dumps(
            payload,
            sort_keys=True,
            separators=(",", ":"),
            ensure_ascii=False,
        ),
        flush=True,
    )


def emit_error_event(event_type: str, error: BaseException, **fields: Any) -> None:
    """
    Emit a failure event with error_type + message fields
    """
    emit_event(
        event_type,
        error_type=type(error).__name__,
        message=str(error),
        **fields,
    )

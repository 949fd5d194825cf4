"""
loadavg.model
AUTHOR: carter-vin

Snapshot types + deterministic serialization primitives.

Design goals:
- Immutable values handed to callers (frozen dataclasses)
- Explicit structure (no accidental serialization via __dict__)
- Stable key order in JSON output
"""

from __future__ import annotations

import enum
import json
import math
from dataclasses import dataclass
from typing import Any, Iterable


@dataclass(frozen=True)
class LoadSnapshot:
    """
    Smoothed load averages
    - load1 / load5 / load15: EWMA over 1, 5 and 15 minute windows
    """

    load1: float = 0.0
    load5: float = 0.0
    load15: float = 0.0

    def to_dict(self) -> dict[str, Any]:
        # Explicit key mapping for stability
        return {
            "load1": self.load1,
            "load5": self.load5,
            "load15": self.load15,
        }

    def as_tuple(self) -> tuple[float, float, float]:
        # Same order as os.getloadavg()
        return (self.load1, self.load5, self.load15)


ZERO_SNAPSHOT = LoadSnapshot()


@dataclass(frozen=True)
class MiscStat:
    """
    Extended process statistics

    Never populated on platforms emulating load; misc() returns the empty value.
    """

    procs_total: int = 0
    procs_created: int = 0
    procs_running: int = 0
    procs_blocked: int = 0
    ctxt: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "procs_total": self.procs_total,
            "procs_created": self.procs_created,
            "procs_running": self.procs_running,
            "procs_blocked": self.procs_blocked,
            "ctxt": self.ctxt,
        }


@dataclass(frozen=True)
class DecayFactors:
    """
    Per-window decay constants, each exp(-period / window)

    Longer windows -> factor closer to 1 -> slower decay
    """

    load1: float
    load5: float
    load15: float

    @classmethod
    def from_period(cls, period_s: float, windows_s: Iterable[float]) -> "DecayFactors":
        windows = tuple(windows_s)
        if len(windows) != 3:
            raise ValueError("windows_s must hold exactly 3 window lengths")
        if period_s <= 0:
            raise ValueError("period_s must be > 0")
        if any(w <= 0 for w in windows):
            raise ValueError("window lengths must be > 0")

        f1, f5, f15 = (math.exp(-period_s / w) for w in windows)
        return cls(load1=f1, load5=f5, load15=f15)


class SamplerRunState(enum.Enum):
    NOT_STARTED = "not_started"
    RUNNING = "running"


def validate_snapshot(snapshot: LoadSnapshot) -> None:
    """
    Validate snapshot values

    Raises ValueError on negative or non-finite averages
    """
    for name, value in snapshot.to_dict().items():
        if not math.isfinite(value):
            raise ValueError(f"{name} must be finite")
        if value < 0:
            raise ValueError(f"{name} must be >= 0")


def snapshot_to_json(snapshot: LoadSnapshot, error: BaseException | None = None) -> str:
    """
    Serialize a snapshot (+ optional error) to a single JSON object string

    Rules:
    - sort_keys=True ensures stable key order
    - separators remove whitespace to avoid formatting drift
    - error is null on success, else {"type": ..., "message": ...}
    """
    # Never serialize invalid snapshots
    validate_snapshot(snapshot)

    payload: dict[str, Any] = snapshot.to_dict()
    payload["error"] = (
        None
        if error is None
        else {"type": type(error).__name__, "message": str(error)}
    )

    return json.dumps(
        payload,
        sort_keys=True,
        separators=(",", ":"),
        ensure_ascii=False,
    )

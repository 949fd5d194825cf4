"""
loadavg.sources.base
AUTHOR: carter-vin

Source contracts + light result wrapper -> source errors never crash the sampler
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Optional, Protocol


class CounterSource(Protocol):
    """
    Opened queue length counter

    read() returns the instantaneous queue depth, raises on failure
    """

    def read(self) -> float: ...


class FallbackSource(Protocol):
    """
    Instantaneous CPU utilization as a fraction in [0, 1]
    """

    def utilization(self) -> float: ...


# Factory that opens a counter; raises SourceInitError on failure
CounterFactory = Callable[[], CounterSource]


@dataclass(frozen=True)
class SourceOutcome:
    """
    Normalized source result
    - ok: false=failure, exception kept in error field
    - value: source result if ok=true
    """

    name: str
    ok: bool
    value: Optional[Any] = None
    error: Optional[BaseException] = None


def run_source(name: str, fn, *args, **kwargs) -> SourceOutcome:
    """
    Run source call & collect failure as data
    """
    try:
        v = fn(*args, **kwargs)
        return SourceOutcome(name=name, ok=True, value=v, error=None)
    except Exception as e:
        return SourceOutcome(name=name, ok=False, value=None, error=e)

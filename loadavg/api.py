"""
loadavg.api
AUTHOR: carter-vin

Accessor surface

Key contract:
- avg() starts the sampler on first use, exactly once, then never blocks
- errors are returned next to a best-effort value, never raised
- misc() is a stub on this platform
"""

from __future__ import annotations

import threading
from typing import Any, Optional

from loadavg.errors import LoadNotImplementedError
from loadavg.model import LoadSnapshot, MiscStat, SamplerRunState
from loadavg.sampler import Sampler
from loadavg.sources.base import run_source


class LoadAverage:
    """
    Handle to one sampler + its state store

    Construct with an explicit Sampler to control sources (tests, CLI);
    otherwise the platform default counter is used.
    """

    def __init__(self, sampler: Optional[Sampler] = None) -> None:
        self.sampler = sampler if sampler is not None else Sampler()
        self._start_guard = threading.Lock()
        self._start_requested = False

    def _claim_start(self) -> bool:
        """
        Compare-and-set the start flag; True for exactly one caller
        """
        with self._start_guard:
            if self._start_requested:
                return False
            self._start_requested = True
            return True

    @property
    def run_state(self) -> SamplerRunState:
        with self._start_guard:
            started = self._start_requested
        return SamplerRunState.RUNNING if started else SamplerRunState.NOT_STARTED

    def avg(self, ctx: Any = None) -> tuple[LoadSnapshot, Optional[BaseException]]:
        """
        Current 1/5/15 minute averages + latest sampler error

        ctx is accepted for call-site compatibility and ignored: no wait for a
        fresh sample, no cancellation. Before the first tick this is {0,0,0}.
        """
        if self._claim_start():
            started = run_source("sampler", self.sampler.start)
            if not started.ok:
                # No retry: same permanent degraded mode as a counter init failure
                self.sampler.fail_start(started.error)

        return self.sampler.store.read()

    def misc(self, ctx: Any = None) -> tuple[MiscStat, BaseException]:
        return MiscStat(), LoadNotImplementedError()


_default: Optional[LoadAverage] = None
_default_lock = threading.Lock()


def default_load_average() -> LoadAverage:
    """
    Process-wide accessor, created on first use
    """
    global _default
    with _default_lock:
        if _default is None:
            _default = LoadAverage()
        return _default


def avg(ctx: Any = None) -> tuple[LoadSnapshot, Optional[BaseException]]:
    return default_load_average().avg(ctx)


def misc(ctx: Any = None) -> tuple[MiscStat, BaseException]:
    return default_load_average().misc(ctx)

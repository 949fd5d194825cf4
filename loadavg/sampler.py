"""
loadavg.sampler
AUTHOR: carter-vin

Background poll -> smooth -> publish loop

Lifecycle:
- open(): acquire the queue length counter once
  - failure is permanent: error published, loop never starts ticking
- tick(): one sampling step (see loadavg.smoothing for the math)
  - read failure: error published, previous snapshot kept
  - success: new snapshot published, error cleared
  - any other tick failure: published as SourceReadError, loop keeps going
- the loop ticks immediately, then once per period until stop() (tests / CLI)
- stop() closes the counter once the thread has exited

Locking:
- every computation runs on sampler-private values
- the store's write lock is held only while publishing
"""

from __future__ import annotations

import threading
import time
from typing import Optional

from loadavg.config import SAMPLING_PERIOD_S, WINDOWS_S
from loadavg.errors import SourceInitError, SourceReadError, as_error_kind
from loadavg.logging import emit_error_event, emit_event
from loadavg.model import ZERO_SNAPSHOT, DecayFactors, LoadSnapshot
from loadavg.smoothing import apply_decay, seed_from_fallback
from loadavg.sources.base import (
    CounterFactory,
    CounterSource,
    FallbackSource,
    run_source,
)
from loadavg.sources.cpu import PsutilCpuFallback
from loadavg.sources.queue_length import open_default_counter
from loadavg.state import StateStore


class Sampler:
    """
    Owns the queue length counter, the decay factors and the private
    working snapshot; the StateStore is the only thing readers touch.
    """

    def __init__(
        self,
        open_counter: CounterFactory = open_default_counter,
        fallback: Optional[FallbackSource] = None,
        *,
        store: Optional[StateStore] = None,
        period_s: float = SAMPLING_PERIOD_S,
        windows_s: tuple[float, float, float] = WINDOWS_S,
    ) -> None:
        self.factors = DecayFactors.from_period(period_s, windows_s)
        self.period_s = period_s
        self.store = store if store is not None else StateStore()

        self._open_counter = open_counter
        self._fallback = fallback
        self._counter: Optional[CounterSource] = None
        self._current: LoadSnapshot = ZERO_SNAPSHOT

        self.init_error: Optional[SourceInitError] = None
        self.ticks = 0

        self._thread: Optional[threading.Thread] = None
        self._stop = threading.Event()
        self._published = threading.Event()

    # -----------------------------
    # THREAD CONTROL
    # -----------------------------
    def start(self) -> None:
        """
        Spawn the sampler thread (daemon; lives until process exit or stop())
        """
        if self._thread is not None:
            raise RuntimeError("sampler already started")

        self._thread = threading.Thread(
            target=self._run,
            name="loadavg-sampler",
            daemon=True,
        )
        self._thread.start()

    def stop(self, timeout: Optional[float] = None) -> None:
        """
        Halt the loop, then release the counter if it has a close()

        A counter still in use by a thread that did not exit in time stays open.
        """
        self._stop.set()
        if self._thread is not None and self._thread.is_alive():
            self._thread.join(timeout=timeout)

        if self.alive or self._counter is None:
            return

        close = getattr(self._counter, "close", None)
        self._counter = None
        if close is not None:
            closed = run_source("counter", close)
            if not closed.ok:
                emit_error_event("source_close_failed", closed.error, source="counter")

    def fail_start(self, error: BaseException) -> SourceInitError:
        """
        Record a thread that could not be started as a permanent init failure
        """
        init_error = as_error_kind(error, SourceInitError)
        self.init_error = init_error
        self.store.record_error(init_error)
        self._published.set()
        emit_error_event("source_init_failed", init_error, source="sampler")
        return init_error

    @property
    def alive(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def wait_published(self, timeout: Optional[float] = None) -> bool:
        """
        Block until the first tick outcome (or init failure) is in the store
        """
        return self._published.wait(timeout)

    # -----------------------------
    # SAMPLING STEPS
    # -----------------------------
    def open(self) -> bool:
        """
        Acquire the counter (and default fallback) once

        Returns False when the sampler must stay in degraded mode.
        """
        opened = run_source("counter", self._open_counter)
        if not opened.ok:
            error = as_error_kind(opened.error, SourceInitError)
            self.init_error = error
            self.store.record_error(error)
            self._published.set()
            emit_error_event("source_init_failed", error, source="counter")
            return False

        self._counter = opened.value

        if self._fallback is None:
            fb = run_source("fallback", PsutilCpuFallback)
            if fb.ok:
                self._fallback = fb.value
            else:
                emit_error_event("fallback_failed", fb.error, source="fallback")

        return True

    def _fallback_fraction(self) -> Optional[float]:
        if self._fallback is None:
            return None

        fallback = self._fallback
        outcome = run_source("fallback", lambda: float(fallback.utilization()))
        if not outcome.ok:
            # No fallback this tick; counter value 0 is used as-is
            emit_error_event("fallback_failed", outcome.error, source="fallback")
            return None
        return outcome.value

    def tick(self) -> None:
        """
        Run one sampling step and publish its outcome
        """
        if self._counter is None:
            raise RuntimeError("sampler counter not opened")

        self.ticks += 1
        counter = self._counter
        read = run_source("counter", lambda: float(counter.read()))

        if not read.ok:
            error = as_error_kind(read.error, SourceReadError)
            self.store.record_error(error)
            self._published.set()
            emit_error_event("source_read_failed", error, source="counter", tick=self.ticks)
            return

        value = read.value
        current = self._current

        if value == 0:
            fraction = self._fallback_fraction()
            if fraction is not None:
                value = fraction
                current = seed_from_fallback(current, fraction)

        self._current = apply_decay(current, self.factors, value)
        self.store.publish(self._current, None)
        self._published.set()

        emit_event(
            "sampler_tick",
            tick=self.ticks,
            value=value,
            **self._current.to_dict(),
        )

    # -----------------------------
    # LOOP
    # -----------------------------
    def _run(self) -> None:
        emit_event("sampler_start", period_s=self.period_s)

        try:
            if not self.open():
                return

            while not self._stop.is_set():
                start = time.monotonic()
                ticked = run_source("tick", self.tick)
                if not ticked.ok:
                    # Keep running; the failure is published like a read error
                    error = as_error_kind(ticked.error, SourceReadError)
                    self.store.record_error(error)
                    self._published.set()
                    emit_error_event("source_read_failed", error, source="sampler", tick=self.ticks)

                elapsed = time.monotonic() - start
                sleep_s = max(0.0, self.period_s - elapsed)
                if self._stop.wait(sleep_s):
                    break

        finally:
            emit_event("sampler_stop", ticks=self.ticks)

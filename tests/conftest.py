"""
Shared fakes for sampler tests

Sources are injected through the Sampler constructor; no test touches the
real queue length counter or psutil unless it says so.
"""

from __future__ import annotations

import threading

import pytest

from loadavg.logging import configure_events


class ScriptedCounter:
    """
    Returns queued readings in order; Exception entries are raised.
    The last entry repeats once the script runs out.
    """

    def __init__(self, readings) -> None:
        self._readings = list(readings)
        self._index = 0
        self.reads = 0

    def read(self) -> float:
        self.reads += 1
        item = self._readings[min(self._index, len(self._readings) - 1)]
        self._index += 1
        if isinstance(item, BaseException):
            raise item
        return item


class ScriptedFallback:
    """
    Same as ScriptedCounter, for CPU utilization fractions
    """

    def __init__(self, fractions) -> None:
        self._fractions = list(fractions)
        self._index = 0
        self.calls = 0

    def utilization(self) -> float:
        self.calls += 1
        item = self._fractions[min(self._index, len(self._fractions) - 1)]
        self._index += 1
        if isinstance(item, BaseException):
            raise item
        return item


class CountingFactory:
    """
    Counter factory with a start-count probe
    """

    def __init__(self, counter=None, error: BaseException | None = None) -> None:
        self._counter = counter if counter is not None else ScriptedCounter([1.0])
        self._error = error
        self._lock = threading.Lock()
        self.opens = 0

    def __call__(self):
        with self._lock:
            self.opens += 1
        if self._error is not None:
            raise self._error
        return self._counter


@pytest.fixture(autouse=True)
def _quiet_events(monkeypatch):
    monkeypatch.delenv("LOADAVG_EVENTS", raising=False)
    monkeypatch.delenv("LOADAVG_FAIL_COUNTER", raising=False)
    configure_events(None)
    yield
    configure_events(None)


@pytest.fixture
def scripted_counter():
    return ScriptedCounter


@pytest.fixture
def scripted_fallback():
    return ScriptedFallback


@pytest.fixture
def counting_factory():
    return CountingFactory

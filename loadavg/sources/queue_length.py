"""
loadavg.sources.queue_length
AUTHOR: carter-vin

Queue length counters (the raw signal the sampler smooths)
- Windows: PDH "\\System\\Processor Queue Length" via pywin32
- Linux: procs_running from /proc/stat
- anything else: no counter -> SourceInitError (sampler runs degraded)
"""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Optional

from loadavg.config import PDH_QUEUE_LENGTH_PATH, PROC_STAT, counter_failure_requested
from loadavg.errors import SourceInitError, SourceReadError
from loadavg.sources.base import CounterSource


class PdhQueueLengthCounter:
    """
    Processor queue length through the Performance Data Helper API

    Query handle is opened once and reused for every read.
    """

    def __init__(self, path: str = PDH_QUEUE_LENGTH_PATH) -> None:
        try:
            import win32pdh
        except ImportError as e:
            raise SourceInitError(f"win32pdh unavailable: {e}") from e

        self._pdh = win32pdh
        try:
            self._query = win32pdh.OpenQuery()
            self._counter = win32pdh.AddEnglishCounter(self._query, path)
        except Exception as e:
            raise SourceInitError(f"cannot open PDH counter {path}: {e}") from e

    def read(self) -> float:
        try:
            self._pdh.CollectQueryData(self._query)
            _, value = self._pdh.GetFormattedCounterValue(
                self._counter, self._pdh.PDH_FMT_DOUBLE
            )
        except Exception as e:
            raise SourceReadError(f"PDH read failed: {e}") from e
        return float(value)

    def close(self) -> None:
        self._pdh.CloseQuery(self._query)


def _parse_procs_running(contents: str) -> Optional[int]:
    """
    Pull the procs_running value out of /proc/stat contents
    """
    for line in contents.splitlines():
        parts = line.split()
        if len(parts) < 2 or parts[0] != "procs_running":
            continue
        try:
            return int(parts[1])
        except ValueError:
            return None
    return None


class ProcRunQueueCounter:
    """
    Runnable task count from /proc/stat

    Counts the reading thread itself, so it rarely drops to 0.
    """

    def __init__(self, path: Path = PROC_STAT) -> None:
        self._path = path
        try:
            contents = path.read_text(encoding="utf-8")
        except OSError as e:
            raise SourceInitError(f"cannot read {path}: {e}") from e

        if _parse_procs_running(contents) is None:
            raise SourceInitError(f"procs_running missing in {path}")

    def read(self) -> float:
        try:
            contents = self._path.read_text(encoding="utf-8")
        except OSError as e:
            raise SourceReadError(f"cannot read {self._path}: {e}") from e

        value = _parse_procs_running(contents)
        if value is None:
            raise SourceReadError(f"procs_running missing in {self._path}")
        return float(value)


def open_default_counter() -> CounterSource:
    """
    Open the queue length counter for the running platform

    Raises SourceInitError when none is available
    """
    if counter_failure_requested():
        raise SourceInitError("Simulated queue length counter failure")

    if sys.platform == "win32":
        return PdhQueueLengthCounter()

    if sys.platform.startswith("linux"):
        return ProcRunQueueCounter()

    raise SourceInitError(f"no queue length counter available on {sys.platform}")


def counter_backend() -> str:
    """
    Name of the counter open_default_counter() would use, without opening it
    """
    if counter_failure_requested():
        return "unavailable"
    if sys.platform == "win32":
        return "pdh"
    if sys.platform.startswith("linux"):
        return "proc_stat"
    return "unavailable"

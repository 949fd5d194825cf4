"""loadavg.sources package exports."""

from loadavg.sources.base import CounterSource, FallbackSource, SourceOutcome, run_source
from loadavg.sources.cpu import PsutilCpuFallback
from loadavg.sources.queue_length import (
    PdhQueueLengthCounter,
    ProcRunQueueCounter,
    open_default_counter,
)

__all__ = [
    "CounterSource",
    "FallbackSource",
    "PdhQueueLengthCounter",
    "ProcRunQueueCounter",
    "PsutilCpuFallback",
    "SourceOutcome",
    "open_default_counter",
    "run_source",
]

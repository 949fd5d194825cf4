"""
loadavg.config
AUTHOR: carter-vin

Fixed sampler constants + environment switches

Decay factors are derived from SAMPLING_PERIOD_S once, at sampler construction.
"""

from __future__ import annotations

import os
from pathlib import Path

PACKAGE_VERSION = "0.1.0"

# Seconds between counter polls
SAMPLING_PERIOD_S = 5.0

# Window lengths (seconds) for load1 / load5 / load15
WINDOWS_S = (60.0, 5 * 60.0, 15 * 60.0)

# Windows PDH counter path (English counter names)
PDH_QUEUE_LENGTH_PATH = r"\System\Processor Queue Length"

# Linux fallback counter: "procs_running N" line
PROC_STAT = Path("/proc/stat")

# Env switches
EVENTS_ENV = "LOADAVG_EVENTS"
FAIL_COUNTER_ENV = "LOADAVG_FAIL_COUNTER"


def events_enabled_from_env() -> bool:
    """
    True when LOADAVG_EVENTS is set to a truthy value
    """
    return os.getenv(EVENTS_ENV, "").strip().lower() in {"1", "true", "yes", "on"}


def counter_failure_requested() -> bool:
    # Test hook for validation of degraded mode
    return os.getenv(FAIL_COUNTER_ENV) == "1"

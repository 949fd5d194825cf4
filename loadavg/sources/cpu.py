"""
loadavg.sources.cpu
AUTHOR: carter-vin

CPU utilization fallback
- only consulted when the queue length counter reads exactly 0
- psutil, non-blocking (interval=None compares against the previous call)
"""

from __future__ import annotations

import psutil


class PsutilCpuFallback:
    def __init__(self) -> None:
        # Prime psutil's baseline; the first interval=None call is meaningless
        psutil.cpu_percent(interval=None)

    def utilization(self) -> float:
        """
        System-wide CPU utilization as a fraction in [0, 1]
        """
        percent = psutil.cpu_percent(interval=None)
        return min(1.0, max(0.0, float(percent) / 100.0))

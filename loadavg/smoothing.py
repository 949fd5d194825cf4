"""
loadavg.smoothing
AUTHOR: carter-vin

Pure smoothing steps applied by the sampler each tick

Tick order:
1) seed_from_fallback  (only when the counter read exactly 0)
2) apply_decay         (always, on a successful read)
"""

from __future__ import annotations

from loadavg.model import DecayFactors, LoadSnapshot


def seed_from_fallback(current: LoadSnapshot, fraction: float) -> LoadSnapshot:
    """
    Give still-zero windows a starting value from CPU utilization

    load1 <- f, load5 <- f/2, load15 <- f/3, each only while exactly 0.
    A window that already moved off 0 is never reseeded.
    """
    return LoadSnapshot(
        load1=fraction if current.load1 == 0 else current.load1,
        load5=fraction / 2 if current.load5 == 0 else current.load5,
        load15=fraction / 3 if current.load15 == 0 else current.load15,
    )


def apply_decay(current: LoadSnapshot, factors: DecayFactors, value: float) -> LoadSnapshot:
    """
    One EWMA step per window: avg * factor + value * (1 - factor)
    """
    return LoadSnapshot(
        load1=current.load1 * factors.load1 + value * (1 - factors.load1),
        load5=current.load5 * factors.load5 + value * (1 - factors.load5),
        load15=current.load15 * factors.load15 + value * (1 - factors.load15),
    )

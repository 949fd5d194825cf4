"""
loadavg.main
------------
AUTHOR: carter-vin

Operator CLI around the load average emulation

Key contract:
- `loadavg --help` shows a Commands section.
- `loadavg oneshot` prints one snapshot JSON line; exit 1 if the counter
  could not be opened (permanent degraded mode).
- `loadavg watch` prints one snapshot JSON line per sampling period.
"""

from __future__ import annotations

import platform
import sys
import time
from dataclasses import dataclass

import typer

from loadavg.api import LoadAverage
from loadavg.config import PACKAGE_VERSION, SAMPLING_PERIOD_S, WINDOWS_S
from loadavg.errors import SourceInitError
from loadavg.logging import configure_events
from loadavg.model import snapshot_to_json
from loadavg.sampler import Sampler
from loadavg.sources.cpu import PsutilCpuFallback
from loadavg.sources.queue_length import counter_backend, open_default_counter

# Explicit multi-command CLI
app = typer.Typer(
    add_completion=False,
    help="loadavg: emulated 1/5/15 minute load averages",
)


# -----------------------------
# DATA CLASSES
# -----------------------------
@dataclass(frozen=True)
class SamplerInfo:
    """
    What the sampler would run with on this host
    - counter_backend: "pdh" | "proc_stat" | "unavailable"
    """

    counter_backend: str
    period_s: float
    windows_s: tuple[float, ...]
    platform: str
    python_version: str


def collect_sampler_info() -> SamplerInfo:
    return SamplerInfo(
        counter_backend=counter_backend(),
        period_s=SAMPLING_PERIOD_S,
        windows_s=tuple(WINDOWS_S),
        platform=f"{sys.platform} ({platform.system()} {platform.release()})",
        python_version=platform.python_version(),
    )


def build_load_average() -> LoadAverage:
    """
    Accessor wired to the platform sources (names resolved at call time)
    """
    sampler = Sampler(
        open_counter=open_default_counter,
        fallback=PsutilCpuFallback(),
    )
    return LoadAverage(sampler)


# -----------------------------
# ROOT COMMAND BEHAVIOR
# -----------------------------
@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    events: bool = typer.Option(
        False,
        "--events",
        help="Emit structured sampler events (JSON lines) to stdout.",
    ),
) -> None:
    """
    Root command behavior.

    If no subcommand is provided, print a short hint and exit 0.
    """
    if events:
        configure_events(True)

    if ctx.invoked_subcommand is None:
        typer.echo("No command provided. Try: loadavg --help")


# -----------------------------
# CLI COMMANDS
# -----------------------------
@app.command()
def version() -> None:
    """
    Print package version + the sampler setup for this host
    """
    info = collect_sampler_info()
    windows = "/".join(f"{w:g}s" for w in info.windows_s)

    typer.echo(f"loadavg v{PACKAGE_VERSION}")
    typer.echo(f"counter={info.counter_backend}")
    typer.echo(f"period={info.period_s:g}s windows={windows}")
    typer.echo(f"platform={info.platform}")
    typer.echo(f"python={info.python_version}")


@app.command("oneshot")
def oneshot(
    timeout: float = typer.Option(
        SAMPLING_PERIOD_S * 2,
        help="Seconds to wait for the first sample.",
        min=0.0,
    ),
) -> None:
    """
    Take the first sample, print it and exit

    A single tick only moves each average a fraction of the way from 0;
    use `watch` to see the averages settle.
    """
    load = build_load_average()

    try:
        load.avg()
        load.sampler.wait_published(timeout)
        snapshot, error = load.avg()
        typer.echo(snapshot_to_json(snapshot, error))

    finally:
        load.sampler.stop(timeout=1.0)

    if isinstance(error, SourceInitError):
        raise typer.Exit(code=1)


@app.command("watch")
def watch(
    count: int = typer.Option(
        0,
        help="Number of snapshots to print (0 = until Ctrl+C).",
        min=0,
    ),
) -> None:
    """
    Print one snapshot per sampling period
    """
    load = build_load_average()
    printed = 0

    try:
        load.avg()
        load.sampler.wait_published(SAMPLING_PERIOD_S * 2)

        while True:
            start = time.monotonic()

            snapshot, error = load.avg()
            typer.echo(snapshot_to_json(snapshot, error))
            printed += 1

            if count and printed >= count:
                break

            elapsed = time.monotonic() - start
            time.sleep(max(0.0, SAMPLING_PERIOD_S - elapsed))

    except KeyboardInterrupt:
        # Graceful shutdown on Ctrl+C
        pass

    finally:
        load.sampler.stop(timeout=1.0)


if __name__ == "__main__":
    app()

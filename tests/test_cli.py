"""
Contract tests for the operator CLI
"""

import json
import math

import pytest
from typer.testing import CliRunner

import loadavg.main as cli
from loadavg.main import app


class _ConstantCounter:
    def read(self) -> float:
        return 2.0


class _IdleFallback:
    def utilization(self) -> float:
        return 0.0


@pytest.fixture
def patched_sources(monkeypatch):
    monkeypatch.setattr(cli, "PsutilCpuFallback", _IdleFallback)
    monkeypatch.setattr(cli, "open_default_counter", _ConstantCounter)


def test_version_command() -> None:
    result = CliRunner().invoke(app, ["version"])

    assert result.exit_code == 0
    assert result.output.startswith("loadavg v")
    assert "period=5s windows=60s/300s/900s" in result.output


def test_version_reports_counter_backend(monkeypatch) -> None:
    """
    version names the queue length counter the sampler would open
    """
    monkeypatch.setattr(cli, "counter_backend", lambda: "pdh")

    result = CliRunner().invoke(app, ["version"])

    assert result.exit_code == 0
    assert "counter=pdh\n" in result.output


def test_version_reports_simulated_counter_failure() -> None:
    result = CliRunner().invoke(app, ["version"], env={"LOADAVG_FAIL_COUNTER": "1"})

    assert "counter=unavailable" in result.output


def test_oneshot_prints_first_sample(patched_sources) -> None:
    """
    One tick of c=2.0 from zero -> 2 * (1 - factor) per window
    """
    result = CliRunner().invoke(app, ["oneshot"])

    assert result.exit_code == 0
    payload = json.loads(result.output.strip().splitlines()[-1])

    assert payload["error"] is None
    assert payload["load1"] == pytest.approx(2.0 * (1 - math.exp(-5 / 60)))
    assert payload["load15"] == pytest.approx(2.0 * (1 - math.exp(-5 / 900)))


def test_oneshot_exits_nonzero_on_counter_failure(monkeypatch) -> None:
    """
    Counter that cannot be opened -> zero snapshot, SourceInitError, exit 1
    """
    monkeypatch.setattr(cli, "PsutilCpuFallback", _IdleFallback)

    result = CliRunner().invoke(app, ["oneshot"], env={"LOADAVG_FAIL_COUNTER": "1"})

    assert result.exit_code == 1
    payload = json.loads(result.output.strip().splitlines()[-1])

    assert payload["load1"] == 0.0
    assert payload["error"]["type"] == "SourceInitError"


def test_watch_honors_count(patched_sources, monkeypatch) -> None:
    monkeypatch.setattr(cli.time, "sleep", lambda _s: None)

    result = CliRunner().invoke(app, ["watch", "--count", "2"])

    assert result.exit_code == 0
    lines = result.output.strip().splitlines()
    assert len(lines) == 2
    assert all(json.loads(line)["error"] is None for line in lines)

"""
Contract tests for sampler event lines (vocabulary, switch, payload shape)
"""

import json

import pytest

from loadavg.errors import SourceReadError
from loadavg.logging import VALID_EVENT_TYPES, configure_events, emit_event
from loadavg.sampler import Sampler


@pytest.mark.parametrize("enabled", [False, True])
def test_unknown_sampler_event_rejected(enabled, capsys) -> None:
    """
    Typos in event names fail loudly whether or not lines are printed
    """
    configure_events(enabled)

    with pytest.raises(ValueError, match="invalid event_type: sampler_tik"):
        emit_event("sampler_tik", tick=1)

    assert capsys.readouterr().out == ""


def test_every_sampler_event_accepted(capsys) -> None:
    configure_events(True)

    for event_type in sorted(VALID_EVENT_TYPES):
        emit_event(event_type)

    lines = [json.loads(line) for line in capsys.readouterr().out.splitlines()]
    assert [line["event_type"] for line in lines] == sorted(VALID_EVENT_TYPES)


def test_events_silent_by_default(capsys) -> None:
    emit_event("sampler_start", period_s=5.0)

    assert capsys.readouterr().out == ""


def test_env_switch_enables_events(monkeypatch, capsys) -> None:
    monkeypatch.setenv("LOADAVG_EVENTS", "1")

    emit_event("sampler_stop", ticks=3)

    payload = json.loads(capsys.readouterr().out.strip())
    assert payload["event_type"] == "sampler_stop"
    assert payload["ticks"] == 3
    assert "utc_now" in payload
    assert "version" in payload


def test_long_messages_truncated(capsys) -> None:
    configure_events(True)

    emit_event("fallback_failed", message="x" * 500)

    payload = json.loads(capsys.readouterr().out.strip())
    assert payload["message"].startswith("x" * 200)
    assert payload["message"].endswith("[truncated 300 chars]")


def test_tick_and_read_failure_events(scripted_counter, scripted_fallback, capsys) -> None:
    """
    sampler_tick carries the smoothed values; read failures carry error_type
    """
    configure_events(True)
    sampler = Sampler(
        lambda: scripted_counter([2.0, SourceReadError("flaky")]),
        scripted_fallback([0.5]),
    )
    assert sampler.open()

    sampler.tick()
    sampler.tick()

    lines = [json.loads(line) for line in capsys.readouterr().out.splitlines()]
    tick, failed = lines

    assert tick["event_type"] == "sampler_tick"
    assert tick["tick"] == 1
    assert set(tick) >= {"load1", "load5", "load15", "value"}

    assert failed["event_type"] == "source_read_failed"
    assert failed["error_type"] == "SourceReadError"
    assert failed["message"] == "flaky"
    assert failed["tick"] == 2

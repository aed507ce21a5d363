"""Tests for the named task scheduler."""

import pytest

from conftest import run_for


def test_call_later_runs_once(scheduler, clock):
    calls = []
    scheduler.call_later("once", 0.5, lambda: calls.append(clock.t))
    assert scheduler.run_pending() == 0
    run_for(scheduler, clock, 1.0)
    assert len(calls) == 1
    assert not scheduler.is_scheduled("once")


def test_call_every_repeats(scheduler, clock):
    calls = []
    scheduler.call_every("tick", 0.1, lambda: calls.append(clock.t))
    run_for(scheduler, clock, 1.0)
    assert 9 <= len(calls) <= 10
    assert scheduler.is_scheduled("tick")


def test_call_every_with_zero_delay_runs_immediately(scheduler):
    calls = []
    scheduler.call_every("now", 1.0, lambda: calls.append(1), delay=0.0)
    assert scheduler.run_pending() == 1
    assert calls == [1]


def test_rejects_non_positive_interval(scheduler):
    with pytest.raises(ValueError):
        scheduler.call_every("bad", 0.0, lambda: None)


def test_same_name_replaces(scheduler, clock):
    calls = []
    scheduler.call_later("job", 0.1, lambda: calls.append("old"))
    scheduler.call_later("job", 0.2, lambda: calls.append("new"))
    run_for(scheduler, clock, 0.5)
    assert calls == ["new"]


def test_cancel(scheduler, clock):
    calls = []
    scheduler.call_every("tick", 0.1, lambda: calls.append(1))
    assert scheduler.cancel("tick") is True
    assert scheduler.cancel("tick") is False
    run_for(scheduler, clock, 1.0)
    assert calls == []


def test_cancel_prefix(scheduler):
    scheduler.call_later("session.a", 1.0, lambda: None)
    scheduler.call_later("session.b", 1.0, lambda: None)
    scheduler.call_later("runner.poll", 1.0, lambda: None)
    assert scheduler.cancel_prefix("session.") == 2
    assert scheduler.names() == ["runner.poll"]
    scheduler.cancel_all()
    assert scheduler.names() == []


def test_due_order_and_cancel_during_pass(scheduler, clock):
    calls = []

    def first():
        calls.append("first")
        scheduler.cancel("second")

    scheduler.call_later("second", 0.2, lambda: calls.append("second"))
    scheduler.call_later("first", 0.1, first)
    scheduler.call_later("third", 0.3, lambda: calls.append("third"))
    clock.advance(1.0)
    scheduler.run_pending()
    assert calls == ["first", "third"]


def test_callback_errors_propagate(scheduler, clock):
    def boom():
        raise RuntimeError("boom")

    scheduler.call_later("boom", 0.0, boom)
    with pytest.raises(RuntimeError):
        scheduler.run_pending()
    assert not scheduler.is_scheduled("boom")

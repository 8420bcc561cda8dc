"""Pytest unit tests for ``ecostat.accumulator``."""

# ruff: noqa: S101

from __future__ import annotations

from datetime import UTC, datetime, timedelta

import pytest

from ecostat.accumulator import SessionAccumulator
from ecostat.events import parse_event
from ecostat.models import UsageSnapshot


def _snap(**fields: float) -> UsageSnapshot:
    return UsageSnapshot(**fields)


@pytest.fixture
def accumulator(clock) -> SessionAccumulator:
    return SessionAccumulator(clock=clock)


def test_user_messages_are_ignored(accumulator: SessionAccumulator) -> None:
    accumulator.apply_update("s1", "m1", "user", _snap(input=100), "gpt-4o", "openai")

    assert accumulator.get("s1") is None
    assert len(accumulator) == 0


def test_first_update_creates_session(accumulator: SessionAccumulator, clock) -> None:
    accumulator.apply_update(
        "s1",
        "m1",
        "assistant",
        _snap(input=1000, output=500, cache_read=30, cache_write=7, cost=0.01),
        "claude-haiku-4-5",
        "anthropic",
    )

    stats = accumulator.get("s1")
    assert stats is not None
    assert stats.input_tokens == 1000
    assert stats.output_tokens == 500
    assert stats.cache_read_tokens == 30
    assert stats.cache_write_tokens == 7
    assert stats.cost == pytest.approx(0.01)
    assert stats.messages == 1
    assert stats.models == {"claude-haiku-4-5"}
    assert stats.providers == {"anthropic"}
    assert stats.first_seen == clock.now
    assert stats.total_tokens == 1500


def test_duplicate_update_is_idempotent(accumulator: SessionAccumulator) -> None:
    snapshot = _snap(input=200, output=80, reasoning=5, cost=0.002)
    accumulator.apply_update("s1", "m1", "assistant", snapshot, "gpt-4o", "openai")
    once = accumulator.get("s1")

    accumulator.apply_update("s1", "m1", "assistant", snapshot, "gpt-4o", "openai")
    twice = accumulator.get("s1")

    assert once is not None and twice is not None
    assert twice.model_dump(exclude={"last_updated"}) == once.model_dump(
        exclude={"last_updated"}
    )


def test_cumulative_snapshots_apply_deltas(accumulator: SessionAccumulator) -> None:
    seen = []
    for value in (0, 50, 120):
        accumulator.apply_update("s1", "m1", "assistant", _snap(input=value))
        stats = accumulator.get("s1")
        assert stats is not None
        seen.append(stats.input_tokens)

    assert seen == [0, 50, 120]
    assert [b - a for a, b in zip(seen, seen[1:])] == [50, 70]


def test_unchanged_second_update(accumulator: SessionAccumulator) -> None:
    accumulator.apply_update("s1", "m1", "assistant", _snap(input=200))
    accumulator.apply_update("s1", "m1", "assistant", _snap(input=200))

    stats = accumulator.get("s1")
    assert stats is not None
    assert stats.input_tokens == 200
    assert stats.messages == 1


def test_message_count_is_per_distinct_message(accumulator: SessionAccumulator) -> None:
    for message in range(4):
        for step in range(1, 4):
            accumulator.apply_update(
                "s1", f"m{message}", "assistant", _snap(output=step * 10)
            )

    stats = accumulator.get("s1")
    assert stats is not None
    assert stats.messages == 4
    assert stats.output_tokens == 4 * 30
    assert accumulator.tracked_messages("s1") == 4


def test_sessions_are_isolated(accumulator: SessionAccumulator) -> None:
    accumulator.apply_update("s1", "m1", "assistant", _snap(input=10), "gpt-4o", "openai")
    accumulator.apply_update(
        "s2", "m1", "assistant", _snap(input=99), "claude-opus-4", "anthropic"
    )

    s1 = accumulator.get("s1")
    s2 = accumulator.get("s2")
    assert s1 is not None and s2 is not None
    assert s1.input_tokens == 10
    assert s2.input_tokens == 99
    assert s1.models == {"gpt-4o"}
    assert "s1" in accumulator and "s2" in accumulator


def test_model_and_provider_sets(accumulator: SessionAccumulator) -> None:
    accumulator.apply_update("s1", "m1", "assistant", _snap(), "gpt-4o", "openai")
    accumulator.apply_update("s1", "m2", "assistant", _snap(), "gpt-4o", "openai")
    accumulator.apply_update("s1", "m3", "assistant", _snap(), "claude-opus-4", "anthropic")
    accumulator.apply_update("s1", "m4", "assistant", _snap(), None, None)

    stats = accumulator.get("s1")
    assert stats is not None
    assert stats.models == {"gpt-4o", "claude-opus-4"}
    assert stats.providers == {"openai", "anthropic"}
    assert stats.messages == 4


def test_get_returns_a_copy(accumulator: SessionAccumulator) -> None:
    accumulator.apply_update("s1", "m1", "assistant", _snap(input=5), "gpt-4o", "openai")

    stats = accumulator.get("s1")
    assert stats is not None
    stats.input_tokens = 1_000_000
    stats.models.add("tampered")

    fresh = accumulator.get("s1")
    assert fresh is not None
    assert fresh.input_tokens == 5
    assert fresh.models == {"gpt-4o"}


def test_non_monotonic_snapshot_unclamped(accumulator: SessionAccumulator) -> None:
    accumulator.apply_update("s1", "m1", "assistant", _snap(input=300, cost=0.3))
    accumulator.apply_update("s1", "m1", "assistant", _snap(input=100, cost=0.1))

    stats = accumulator.get("s1")
    assert stats is not None
    assert stats.input_tokens == 100
    assert stats.cost == pytest.approx(0.1)


def test_non_monotonic_snapshot_clamped(clock) -> None:
    accumulator = SessionAccumulator(clamp_negative_deltas=True, clock=clock)
    accumulator.apply_update("s1", "m1", "assistant", _snap(input=300, cost=0.3))
    accumulator.apply_update("s1", "m1", "assistant", _snap(input=100, cost=0.1))
    accumulator.apply_update("s1", "m1", "assistant", _snap(input=150, cost=0.1))

    stats = accumulator.get("s1")
    assert stats is not None
    # The smaller snapshot becomes the new baseline, so 100 -> 150 adds 50.
    assert stats.input_tokens == 350
    assert stats.cost == pytest.approx(0.3)


def test_negative_delta_is_logged(
    accumulator: SessionAccumulator, caplog: pytest.LogCaptureFixture
) -> None:
    accumulator.apply_update("s1", "m1", "assistant", _snap(output=40))
    with caplog.at_level("WARNING", logger="ecostat.accumulator"):
        accumulator.apply_update("s1", "m1", "assistant", _snap(output=10))

    assert any("went backwards" in record.getMessage() for record in caplog.records)


def test_end_session_evicts_snapshots(accumulator: SessionAccumulator) -> None:
    accumulator.apply_update("s1", "m1", "assistant", _snap(input=10))

    assert accumulator.end_session("s1") is True
    assert accumulator.get("s1") is None
    assert accumulator.tracked_messages("s1") == 0
    assert accumulator.end_session("s1") is False

    accumulator.apply_update("s1", "m1", "assistant", _snap(input=10))
    stats = accumulator.get("s1")
    assert stats is not None
    assert stats.messages == 1
    assert stats.input_tokens == 10


def test_evict_idle(accumulator: SessionAccumulator, clock) -> None:
    accumulator.apply_update("old", "m1", "assistant", _snap(input=1))
    clock.advance(hours=2)
    accumulator.apply_update("fresh", "m1", "assistant", _snap(input=1))
    clock.advance(minutes=30)

    evicted = accumulator.evict_idle(timedelta(hours=1))

    assert evicted == ["old"]
    assert "old" not in accumulator
    assert "fresh" in accumulator


def test_sessions_sorted_by_last_update(accumulator: SessionAccumulator, clock) -> None:
    accumulator.apply_update("a", "m1", "assistant", _snap(input=1))
    clock.advance(seconds=5)
    accumulator.apply_update("b", "m1", "assistant", _snap(input=1))
    clock.advance(seconds=5)
    accumulator.apply_update("a", "m2", "assistant", _snap(input=1))

    assert [stats.session_id for stats in accumulator.sessions()] == ["a", "b"]


def test_handle_event_message_updated(
    accumulator: SessionAccumulator, message_event
) -> None:
    accumulator.handle_event(parse_event(message_event(input=0)))
    accumulator.handle_event(parse_event(message_event(input=200, output=10)))
    accumulator.handle_event(parse_event(message_event(role="user", input=999)))

    stats = accumulator.get("ses_1")
    assert stats is not None
    assert stats.input_tokens == 200
    assert stats.output_tokens == 10
    assert stats.messages == 1


def test_handle_event_session_deleted(
    accumulator: SessionAccumulator, message_event
) -> None:
    accumulator.handle_event(parse_event(message_event(input=5)))
    accumulator.handle_event(
        parse_event({"type": "session.deleted", "properties": {"info": {"id": "ses_1"}}})
    )

    assert "ses_1" not in accumulator


def test_session_deleted_kept_when_eviction_disabled(message_event, clock) -> None:
    accumulator = SessionAccumulator(evict_on_session_end=False, clock=clock)
    accumulator.handle_event(parse_event(message_event(input=5)))
    accumulator.handle_event(
        parse_event({"type": "session.deleted", "properties": {"info": {"id": "ses_1"}}})
    )

    assert "ses_1" in accumulator


def test_handle_event_ignores_none(accumulator: SessionAccumulator) -> None:
    accumulator.handle_event(None)
    assert len(accumulator) == 0


def test_update_time_overrides_clock(accumulator: SessionAccumulator, clock) -> None:
    start = datetime(2025, 9, 30, 12, 0, tzinfo=UTC)
    accumulator.apply_update("s", "m1", "assistant", _snap(input=1), at=start)
    accumulator.apply_update(
        "s", "m2", "assistant", _snap(input=1), at=start + timedelta(minutes=45)
    )

    stats = accumulator.get("s")
    assert stats is not None
    assert stats.first_seen == start
    assert stats.last_updated == start + timedelta(minutes=45)
    assert stats.last_updated != clock.now


def test_out_of_order_update_times(accumulator: SessionAccumulator) -> None:
    start = datetime(2025, 9, 30, 12, 0, tzinfo=UTC)
    accumulator.apply_update(
        "s", "m2", "assistant", _snap(input=1), at=start + timedelta(minutes=10)
    )
    accumulator.apply_update("s", "m1", "assistant", _snap(input=1), at=start)

    stats = accumulator.get("s")
    assert stats is not None
    assert stats.first_seen == start
    assert stats.last_updated == start + timedelta(minutes=10)


def test_handle_event_uses_event_time_when_enabled(message_event, clock) -> None:
    accumulator = SessionAccumulator(clock=clock, use_event_time=True)
    clock.advance(days=3)
    accumulator.handle_event(
        parse_event(message_event(input=5, completed=1759309260000))
    )

    stats = accumulator.get("ses_1")
    assert stats is not None
    assert stats.first_seen == datetime(2025, 10, 1, 9, 1, tzinfo=UTC)


def test_handle_event_uses_clock_by_default(
    accumulator: SessionAccumulator, message_event, clock
) -> None:
    clock.advance(days=3)
    accumulator.handle_event(parse_event(message_event(input=5)))

    stats = accumulator.get("ses_1")
    assert stats is not None
    assert stats.first_seen == clock.now

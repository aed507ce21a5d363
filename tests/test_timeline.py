"""Tests for mission entries and the once-only timeline."""

import pytest

from errors import MissionDataError
from gestures import GestureKind
from mission_timeline import MissionEntry, MissionTimeline, clamp_time_limit, normalize_gesture


def _timeline(*offsets, cutoff=None):
    return MissionTimeline([MissionEntry(o, GestureKind.JUMP, f"m{o}") for o in offsets], cutoff=cutoff)


def test_dodge_with_direction_normalizes():
    a = MissionEntry.from_record({"timestamp": 5, "missionType": "dodge", "direction": "left", "prompt": "Go"})
    b = MissionEntry.from_record({"timestamp": 5, "missionType": "dodge_left", "prompt": "Go"})
    assert a.gesture == GestureKind.DODGE_LEFT
    assert a == b


@pytest.mark.parametrize("kind,direction", [("dodge", None), ("dodge", "up"), ("teleport", None)])
def test_normalize_rejects(kind, direction):
    with pytest.raises(ValueError):
        normalize_gesture(kind, direction)


def test_from_record_defaults_and_clamp():
    entry = MissionEntry.from_record({"timestamp": 1.5, "missionType": "JUMP"})
    assert entry.gesture == GestureKind.JUMP
    assert entry.time_limit == 3.0
    assert entry.prompt == ""

    clamped = MissionEntry.from_record({"timestamp": 2, "missionType": "push", "timeLimit": 9}, clamp=True)
    assert clamped.time_limit == 4.0
    assert clamp_time_limit(0.5) == 2.0


@pytest.mark.parametrize(
    "record",
    [
        {"missionType": "jump"},
        {"timestamp": 1, "missionType": "moonwalk"},
        {"timestamp": 1, "missionType": "dodge"},
        {"timestamp": "soon", "missionType": "jump"},
    ],
)
def test_from_record_malformed(record):
    with pytest.raises(MissionDataError):
        MissionEntry.from_record(record)


def test_non_positive_time_limit_rejected():
    with pytest.raises(ValueError):
        MissionEntry(1.0, GestureKind.JUMP, "", 0.0)


def test_record_round_trip_keys():
    entry = MissionEntry(4.0, GestureKind.CATCH, "Catch!", 2.5)
    assert entry.to_record() == {"timestamp": 4.0, "missionType": "catch", "prompt": "Catch!", "timeLimit": 2.5}


def test_entries_sorted():
    timeline = _timeline(9.0, 2.0, 5.0)
    assert [e.time_offset for e in timeline] == [2.0, 5.0, 9.0]


def test_each_entry_fires_once():
    timeline = _timeline(2.0, 5.0)
    assert timeline.claim_due(1.0) is None
    first = timeline.claim_due(2.1)
    assert first.time_offset == 2.0
    assert timeline.claim_due(2.2) is None
    assert timeline.claim_due(4.9) is None
    assert timeline.claim_due(6.0).time_offset == 5.0
    assert timeline.claim_due(100.0) is None
    assert timeline.is_exhausted()


def test_late_poll_fires_in_order():
    timeline = _timeline(1.0, 2.0, 3.0)
    assert timeline.claim_due(10.0).time_offset == 1.0
    assert timeline.claim_due(10.0).time_offset == 2.0
    assert timeline.claim_due(10.0).time_offset == 3.0


def test_next_due_does_not_mark():
    timeline = _timeline(1.0)
    entry = timeline.next_due(1.0)
    assert entry is not None
    assert timeline.next_due(1.0) is entry
    assert timeline.claim_due(1.0) is entry
    assert timeline.next_due(1.0) is None
    assert timeline.remaining() == []


def test_cutoff_drops_late_entries():
    timeline = _timeline(10.0, 59.9, 60.0, 75.0, cutoff=60.0)
    assert [e.time_offset for e in timeline] == [10.0, 59.9]


def test_duplicate_offsets_first_wins():
    entries = [
        MissionEntry(3.0, GestureKind.JUMP, "first"),
        MissionEntry(3.0, GestureKind.PUSH, "second"),
    ]
    timeline = MissionTimeline(entries)
    assert len(timeline) == 1
    assert timeline.entries[0].prompt == "first"


def test_reset_clears_fired():
    timeline = _timeline(1.0, 2.0)
    timeline.claim_due(5.0)
    timeline.claim_due(5.0)
    assert timeline.remaining() == []
    timeline.reset()
    assert len(timeline.remaining()) == 2
    assert not timeline.is_exhausted()

import threading

import pytest

from pediasync.queue import (
    ActionType,
    Event,
    PressureQueue,
    QueueClosedError,
    pressure_events,
)

A, U, D = ActionType.ADDED, ActionType.UPDATED, ActionType.DELETED


@pytest.mark.parametrize(
    "older, newer, expected",
    [
        (Event(A, "Object1", 1), Event(U, "Object2", 2), Event(A, "Object2", 2)),
        (Event(A, "Object3", 3), None, Event(A, "Object3", 3)),
        (None, Event(U, "Object4", 4), Event(U, "Object4", 4)),
        (Event(A, "Object5", 5), Event(D, "Object6", 6), Event(D, "Object6", 6)),
        (Event(U, "Object7", 7), Event(A, "Object8", 8), Event(A, "Object8", 8)),
        (Event(D, "Object9", 9), Event(U, "Object10", 10), Event(D, "Object9", 9)),
        (Event(U, "Object11", 11), Event(U, "Object12", 12), Event(U, "Object12", 12)),
        (Event(D, "Object13", 13), Event(A, "Object14", 14), Event(U, "Object14", 14)),
        (Event(A, "Object15", 15), Event(A, "Object16", 16), Event(A, "Object16", 16)),
    ],
)
def test_pressure_events(older, newer, expected):
    result = pressure_events(older, newer)
    assert result.reput_count == expected.reput_count
    assert result.action == expected.action
    assert result.object == expected.object


def test_pressure_events_both_none():
    assert pressure_events(None, None) is None


def _key(obj):
    return obj["name"]


def obj(name, value=0):
    return {"name": name, "value": value}


def test_requires_key_func():
    with pytest.raises(ValueError):
        PressureQueue(None)


def test_events_for_same_key_are_folded():
    q = PressureQueue(_key)
    q.add(obj("a", 1))
    q.update(obj("a", 2))
    assert len(q) == 1
    event = q.pop()
    assert event.action is A
    assert event.object["value"] == 2


def test_pop_keeps_fifo_order():
    q = PressureQueue(_key)
    for name in ["a", "b", "c"]:
        q.add(obj(name))
    assert [q.pop().object["name"] for _ in range(3)] == ["a", "b", "c"]


def test_processing_key_waits_for_done():
    q = PressureQueue(_key)
    q.add(obj("a"))
    event = q.pop()
    q.update(obj("a", 5))
    assert len(q) == 0
    q.done(event)
    assert len(q) == 1
    nxt = q.pop()
    assert nxt.action is U
    assert nxt.object["value"] == 5


def test_done_without_pending_does_not_requeue():
    q = PressureQueue(_key)
    q.add(obj("a"))
    q.done(q.pop())
    assert len(q) == 0


def test_reput_increments_count_and_requeues():
    q = PressureQueue(_key)
    q.add(obj("a"))
    event = q.pop()
    q.reput(event)
    again = q.pop()
    assert again is event
    assert again.reput_count == 1


def test_reput_none_is_ignored():
    q = PressureQueue(_key)
    q.reput(None)
    assert len(q) == 0


def test_closed_empty_queue_raises():
    q = PressureQueue(_key)
    q.close()
    with pytest.raises(QueueClosedError):
        q.pop()
    with pytest.raises(QueueClosedError):
        q.pop_all()


def test_closed_queue_still_drains():
    q = PressureQueue(_key)
    q.add(obj("a"))
    q.close()
    assert q.pop().object["name"] == "a"
    with pytest.raises(QueueClosedError):
        q.pop()


def test_pop_blocks_until_close():
    q = PressureQueue(_key)
    timer = threading.Timer(0.05, q.close)
    timer.start()
    with pytest.raises(QueueClosedError):
        q.pop()
    timer.join()


def test_pop_blocks_until_add():
    q = PressureQueue(_key)
    timer = threading.Timer(0.05, lambda: q.add(obj("late")))
    timer.start()
    assert q.pop().object["name"] == "late"
    timer.join()


def test_pop_all():
    q = PressureQueue(_key)
    assert q.pop_all() == []
    q.add(obj("a"))
    q.delete(obj("b"))
    events = q.pop_all()
    assert [(e.action, e.object["name"]) for e in events] == [(A, "a"), (D, "b")]
    assert len(q) == 0


def test_discard_and_retain():
    q = PressureQueue(_key)
    for name in ["a", "b", "c", "d"]:
        q.add(obj(name))
    assert q.discard_and_retain(4) is False
    assert q.discard_and_retain(2) is True
    assert len(q) == 2
    assert [q.pop().object["name"] for _ in range(2)] == ["a", "b"]


def test_key_func_error_propagates():
    q = PressureQueue(_key)
    with pytest.raises(KeyError):
        q.add({})
"""Unit tests for ref history tracking."""

import threading

import pytest
from plumb.core.events import EventBus
from plumb.core.history import RefHistoryTracker
from plumb.core.refs import RefManager

A, B, C = 'a' * 40, 'b' * 40, 'c' * 40


def test_history_append_order(history):
    history.record_change('main', A, B, 'update')
    history.record_change('main', B, C, 'update')

    changes = history.history_for('main')
    assert [(c.old_target, c.new_target) for c in changes] == [(A, B), (B, C)]
    assert changes[0].sequence < changes[1].sequence


def test_record_change_returns_entry(history):
    change = history.record_change('HEAD', '', A, 'commit')
    assert change.ref_name == 'HEAD'
    assert change.operation == 'commit'
    assert change.timestamp > 0
    assert history.history_for('HEAD') == [change]


def test_history_for_unknown_ref(history):
    assert history.history_for('nope') == []


def test_history_for_returns_copy(history):
    history.record_change('main', A, B, 'update')
    history.history_for('main').clear()
    assert len(history.history_for('main')) == 1


def test_all_history(history):
    history.record_change('main', '', A, 'create')
    history.record_change('dev', '', B, 'create')
    history.record_change('main', A, C, 'update')

    all_history = history.all_history()
    assert set(all_history) == {'main', 'dev'}
    assert [c.new_target for c in all_history['main']] == [A, C]


def test_recent_changes(history):
    history.record_change('main', '', A, 'create')
    history.record_change('dev', '', B, 'create')
    last = history.record_change('main', A, C, 'update')

    assert history.recent_changes(1) == [last]
    assert [c.new_target for c in history.recent_changes(10)] == [C, B, A]
    assert history.recent_changes(0) == []


def test_recent_changes_ties_ordered_by_sequence(history, monkeypatch):
    monkeypatch.setattr('plumb.core.history.time.time', lambda: 1000.0)
    first = history.record_change('x', '', A, 'create')
    second = history.record_change('y', '', B, 'create')
    assert history.recent_changes(2) == [second, first]


def test_recent_changes_negative_limit(history):
    with pytest.raises(ValueError):
        history.recent_changes(-1)


def test_record_change_publishes_event():
    bus = EventBus()
    tracker = RefHistoryTracker(bus)
    tracker.record_change('refs/heads/main', A, B, 'update')

    events = bus.events_by_type('reference')
    assert len(events) == 1
    assert (events[0].ref_name, events[0].old_sha, events[0].new_sha) == ('refs/heads/main', A, B)


def test_failing_listener_does_not_fail_ref_update():
    bus = EventBus()

    def broken(event):
        raise RuntimeError("listener exploded")

    bus.subscribe('reference', broken)
    refs = RefManager(RefHistoryTracker(bus))

    assert refs.create_branch('main', A) is True
    assert refs.resolve_ref('main') == A
    assert refs.history.history_for('refs/heads/main')[0].new_target == A


def test_concurrent_records_same_ref(history):
    def worker():
        for _ in range(100):
            history.record_change('main', A, B, 'update')

    threads = [threading.Thread(target=worker) for _ in range(5)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    changes = history.history_for('main')
    assert len(changes) == 500
    sequences = [c.sequence for c in changes]
    assert sequences == sorted(sequences)


def test_recent_changes_ignore_clock_going_backwards(history, monkeypatch):
    clock = iter([2000.0, 1000.0, 500.0])
    monkeypatch.setattr('plumb.core.history.time.time', lambda: next(clock))
    first = history.record_change('x', '', A, 'create')
    second = history.record_change('y', '', B, 'create')
    third = history.record_change('x', A, C, 'update')
    assert history.recent_changes(3) == [third, second, first]


def test_listener_can_update_refs_from_another_thread():
    bus = EventBus()
    refs = RefManager(RefHistoryTracker(bus))
    finished = []

    def mirror(event):
        if event.ref_name != 'refs/heads/main':
            return
        worker = threading.Thread(target=lambda: finished.append(refs.create_branch('mirror', event.new_sha)))
        worker.start()
        worker.join(timeout=5)

    bus.subscribe('reference', mirror)
    refs.create_branch('main', A)

    assert finished == [True]
    assert refs.resolve_ref('mirror') == A

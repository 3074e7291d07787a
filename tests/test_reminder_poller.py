# tests/test_reminder_poller.py

import threading
import time

from modules.reminders.poller import ReminderPoller

from .conftest import NOW, due_in
from .fakes import make_task


class Collector:

    def __init__(self):
        self.items = []
        self.lock = threading.Lock()

    def __call__(self, reminder):
        with self.lock:
            self.items.append(reminder)

    def __len__(self):
        with self.lock:
            return len(self.items)


def test_watch_scans_immediately() -> None:
    got = Collector()
    poller = ReminderPoller(got, interval_seconds=3600, clock=lambda: NOW)
    try:
        poller.watch([make_task(due_date=due_in(minutes=15))])
        assert len(got) == 1
        assert got.items[0].threshold == 15
        assert poller.running
    finally:
        poller.cancel()
    assert not poller.running


def test_interval_rescans_without_memory() -> None:
    got = Collector()
    poller = ReminderPoller(got, interval_seconds=0.02, clock=lambda: NOW)
    try:
        poller.watch([make_task(due_date=due_in(minutes=5))])
        time.sleep(0.2)
    finally:
        poller.cancel()
    # The clock is frozen on the threshold, so every poll fires again
    assert len(got) >= 3


def test_suppress_repeats_fires_each_threshold_once() -> None:
    got = Collector()
    poller = ReminderPoller(got, interval_seconds=0.02, clock=lambda: NOW, suppress_repeats=True)
    try:
        poller.watch([make_task(due_date=due_in(minutes=5))])
        time.sleep(0.2)
    finally:
        poller.cancel()
    assert len(got) == 1


def test_cancel_releases_the_timer() -> None:
    got = Collector()
    poller = ReminderPoller(got, interval_seconds=0.02, clock=lambda: NOW)
    poller.watch([make_task(due_date=due_in(minutes=30))])
    poller.cancel()
    seen = len(got)
    time.sleep(0.15)
    assert len(got) == seen == 1
    assert not poller.running


def test_watch_replaces_the_snapshot() -> None:
    got = Collector()
    poller = ReminderPoller(got, interval_seconds=3600, clock=lambda: NOW)
    try:
        poller.watch([make_task(id='a', due_date=due_in(minutes=60))])
        poller.watch([make_task(id='b', due_date=due_in(minutes=30))])
        assert [r.task_id for r in got.items] == ['a', 'b']
        assert [r.task_id for r in poller.poll()] == ['b']
    finally:
        poller.cancel()


def test_failing_emit_does_not_stop_the_scan() -> None:
    seen = []

    def emit(reminder):
        seen.append(reminder.task_id)
        raise RuntimeError('toast area gone')

    poller = ReminderPoller(emit, interval_seconds=3600, clock=lambda: NOW)
    try:
        poller.watch([
            make_task(id='a', due_date=due_in(minutes=60)),
            make_task(id='b', due_date=due_in(minutes=15)),
        ])
    finally:
        poller.cancel()
    assert seen == ['a', 'b']

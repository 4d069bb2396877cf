"""Tests for the threading.Timer single-slot scheduler."""
import sys
import os
import threading
import time

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from actionlog.scheduler import TimerScheduler


def test_reschedule_replaces_pending_callback():
    sched = TimerScheduler()
    fired = []
    done = threading.Event()

    sched.schedule(0.05, lambda: fired.append("first"))
    sched.schedule(0.05, lambda: (fired.append("second"), done.set()))
    assert done.wait(2.0)
    time.sleep(0.1)
    assert fired == ["second"]
    assert not sched.pending


def test_cancel_prevents_fire():
    sched = TimerScheduler()
    fired = []
    sched.schedule(0.05, lambda: fired.append(1))
    assert sched.pending
    sched.cancel()
    time.sleep(0.15)
    assert fired == []
    assert not sched.pending


def test_join_waits_for_fired_callback():
    sched = TimerScheduler()
    started = threading.Event()
    finished = []

    def slow():
        started.set()
        time.sleep(0.2)
        finished.append(1)

    sched.schedule(0.01, slow)
    assert started.wait(2.0)
    assert not sched.pending
    sched.join()
    assert finished == [1]


def test_fired_callbacks_do_not_overlap():
    sched = TimerScheduler()
    active = []
    overlaps = []
    done = threading.Event()

    def run(tag):
        active.append(tag)
        if len(active) > 1:
            overlaps.append(tag)
        time.sleep(0.15)
        active.remove(tag)
        if tag == "second":
            done.set()

    sched.schedule(0.01, lambda: run("first"))
    time.sleep(0.05)  # first is now running
    sched.schedule(0.01, lambda: run("second"))
    assert done.wait(2.0)
    assert overlaps == []

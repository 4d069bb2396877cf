"""Shared fakes: a manual scheduler and a fixed clock."""
import sys
import os
from datetime import datetime, timezone

import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))


class FakeScheduler:
    """Single pending slot; tests fire it explicitly."""

    def __init__(self):
        self.callback = None
        self.delay_s = None
        self.scheduled = 0
        self.joined = 0

    def schedule(self, delay_s, callback):
        self.delay_s = delay_s
        self.callback = callback
        self.scheduled += 1

    def cancel(self):
        self.callback = None

    def join(self, timeout=None):
        self.joined += 1

    @property
    def pending(self):
        return self.callback is not None

    def fire(self):
        callback, self.callback = self.callback, None
        assert callback is not None, "nothing scheduled"
        return callback()


class FakeClock:
    def __init__(self, moment=None):
        self.moment = moment or datetime(2024, 5, 1, 12, 0, 0, tzinfo=timezone.utc)

    def __call__(self):
        return self.moment


@pytest.fixture
def scheduler():
    return FakeScheduler()


@pytest.fixture
def clock():
    return FakeClock()

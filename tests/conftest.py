"""
Shared fixtures: sample datasets and a virtual clock for debounce tests.
"""

import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent))

from dataset import build_dataset
from tests.fixtures.sample_data import RECORDS, SCENARIO_RECORDS, TAGS


class ManualTimer:
    """Timer handle of the virtual clock."""

    def __init__(self, when, callback):
        self.when = when
        self.callback = callback
        self.cancelled = False
        self.fired = False

    def cancel(self):
        self.cancelled = True


class ManualClock:
    """
    Scheduler driven by explicit advance() calls.

    Time is in seconds, like the debouncer's interval.
    """

    def __init__(self):
        self.now = 0.0
        self.timers = []

    def call_later(self, delay, callback):
        timer = ManualTimer(self.now + delay, callback)
        self.timers.append(timer)
        return timer

    @property
    def pending(self):
        return [t for t in self.timers if not t.cancelled and not t.fired]

    def advance(self, seconds):
        target = self.now + seconds
        while True:
            due = [t for t in self.pending if t.when <= target + 1e-9]
            if not due:
                break
            timer = min(due, key=lambda t: t.when)
            self.now = timer.when
            timer.fired = True
            timer.callback()
        self.now = target


@pytest.fixture
def clock():
    return ManualClock()


@pytest.fixture
def sample_dataset():
    return build_dataset(RECORDS, TAGS)


@pytest.fixture
def scenario_dataset():
    return build_dataset(SCENARIO_RECORDS)

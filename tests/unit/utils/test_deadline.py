"""Unit tests for the Deadline cancellation signal."""
from lfm.utils.deadline import Deadline


class FakeClock:
    def __init__(self, now=100.0):
        self.now = now

    def __call__(self):
        return self.now


def test_unbounded_deadline_never_expires():
    deadline = Deadline()
    assert not deadline.expired()


def test_timeout_expires():
    clock = FakeClock()
    deadline = Deadline(timeout=2.0, clock=clock)
    clock.now += 1.5
    assert not deadline.expired()
    clock.now += 0.5
    assert deadline.expired()


def test_cancel():
    deadline = Deadline(timeout=60.0)
    deadline.cancel()
    assert deadline.cancelled
    assert deadline.expired()

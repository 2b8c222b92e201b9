"""Tests for the single-slot fallback notification scheduler."""

from __future__ import annotations

import pytest

from pomodoro.constants import NOTIFICATION_ID, NOTIFICATION_TITLE
from pomodoro.notifications import NotificationScheduler


@pytest.fixture
def shown():
    return []


@pytest.fixture
def scheduler(qapp, shown):
    s = NotificationScheduler(lambda title, body: shown.append((title, body)))
    yield s
    s.cancel()


class TestScheduling:
    def test_nothing_pending_initially(self, scheduler):
        assert scheduler.pending is False
        assert scheduler.pending_message is None
        assert scheduler.identifier == NOTIFICATION_ID

    def test_schedule_arms_single_shot(self, scheduler):
        scheduler.schedule(1500, "Focus finished. Time for a break.")
        assert scheduler.pending is True
        assert scheduler.pending_message == "Focus finished. Time for a break."
        assert scheduler._timer.isSingleShot()
        assert scheduler._timer.interval() == 1500 * 1000

    def test_schedule_replaces_previous(self, scheduler):
        scheduler.schedule(1500, "first")
        scheduler.schedule(300, "second")
        assert scheduler.pending_message == "second"
        assert scheduler._timer.interval() == 300 * 1000

    @pytest.mark.parametrize("seconds", [0, -1])
    def test_non_positive_delay_schedules_nothing(self, scheduler, seconds):
        scheduler.schedule(100, "old")
        scheduler.schedule(seconds, "new")
        assert scheduler.pending is False

    def test_cancel(self, scheduler):
        scheduler.schedule(60, "msg")
        scheduler.cancel()
        assert scheduler.pending is False
        assert not scheduler._timer.isActive()

    def test_cancel_when_idle_is_noop(self, scheduler):
        scheduler.cancel()
        assert scheduler.pending is False


class TestDelivery:
    def test_deliver_shows_once(self, scheduler, shown):
        scheduler.schedule(60, "Break finished. Back to focus.")
        scheduler._timer.stop()
        scheduler._deliver()
        scheduler._deliver()
        assert shown == [(NOTIFICATION_TITLE, "Break finished. Back to focus.")]
        assert scheduler.pending is False

    def test_cancelled_request_is_not_shown(self, scheduler, shown):
        scheduler.schedule(60, "msg")
        scheduler.cancel()
        scheduler._deliver()
        assert shown == []

    def test_show_errors_are_swallowed(self, qapp):
        def boom(title, body):
            raise RuntimeError("permission denied")

        s = NotificationScheduler(boom)
        s.schedule(60, "msg")
        s._deliver()
        assert s.pending is False

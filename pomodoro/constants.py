"""Shared enums and constants for Pomodoro."""

from __future__ import annotations

from enum import Enum


class Phase(Enum):
    FOCUS = "Focus"
    BREAK = "Break"

    @property
    def other(self) -> "Phase":
        """The phase that follows this one."""
        return Phase.BREAK if self is Phase.FOCUS else Phase.FOCUS


class AlarmSound(Enum):
    ALARM_1 = "Alarm 1"
    ALARM_2 = "Alarm 2"
    ALERT_1 = "Alert 1"
    ALERT_2 = "Alert 2"


# ── defaults ──────────────────────────────────────────────────────────────

DEFAULT_FOCUS_MINUTES = 25
DEFAULT_BREAK_MINUTES = 5
DEFAULT_SOUND = AlarmSound.ALARM_2

# Stepper ranges offered to the user (minutes, inclusive)
DURATION_LIMITS: dict[Phase, tuple[int, int]] = {
    Phase.FOCUS: (1, 120),
    Phase.BREAK: (1, 60),
}

# ── notifications ─────────────────────────────────────────────────────────

NOTIFICATION_ID = "pomodoro.timer.done"
NOTIFICATION_TITLE = "Pomodoro"

COMPLETION_MESSAGES: dict[Phase, str] = {
    Phase.FOCUS: "Focus finished. Time for a break.",
    Phase.BREAK: "Break finished. Back to focus.",
}

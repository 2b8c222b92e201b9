"""Timer package."""

from .engine import (
    TimerEngine,
    TimerStatus,
    TICK_INTERVAL_MS,
    FEEDBACK_INTERVAL_MS,
    FEEDBACK_PULSES,
    PHASE_SWITCH_DELAY_MS,
)

__all__ = [
    "TimerEngine",
    "TimerStatus",
    "TICK_INTERVAL_MS",
    "FEEDBACK_INTERVAL_MS",
    "FEEDBACK_PULSES",
    "PHASE_SWITCH_DELAY_MS",
]

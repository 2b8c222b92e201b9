"""Shared test helpers for Pomodoro."""

from pomodoro.constants import AlarmSound
from pomodoro.timer.engine import FEEDBACK_PULSES, TimerEngine


class SignalCollector:
    """Utility to capture pyqtSignal emissions into a list."""

    def __init__(self):
        self.items: list = []

    def slot(self, *args):
        self.items.append(args if len(args) > 1 else args[0] if args else None)

    def __call__(self, *args):
        self.slot(*args)

    def __len__(self):
        return len(self.items)

    def __getitem__(self, idx):
        return self.items[idx]

    @property
    def last(self):
        return self.items[-1] if self.items else None

    def clear(self):
        self.items.clear()


class FakeClock:
    """Wall clock under test control."""

    def __init__(self, start: float = 1_000_000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeFeedbackPlayer:
    def __init__(self):
        self.sounds: list[AlarmSound] = []
        self.haptics = 0

    def play_sound(self, sound: AlarmSound) -> None:
        self.sounds.append(sound)

    def play_haptic(self) -> None:
        self.haptics += 1


class FakeNotifier:
    """Records requests; ``pending`` mirrors the single notification slot."""

    def __init__(self):
        self.pending: tuple[int, str] | None = None
        self.scheduled: list[tuple[int, str]] = []
        self.cancels = 0

    def schedule(self, after_seconds: int, message: str) -> None:
        self.pending = (after_seconds, message) if after_seconds > 0 else None
        self.scheduled.append((after_seconds, message))

    def cancel(self) -> None:
        self.pending = None
        self.cancels += 1


def run_for(engine: TimerEngine, clock: FakeClock, seconds: float, step: float = 0.5) -> None:
    """Advance the clock in *step* increments, ticking after each one."""
    elapsed = 0.0
    while elapsed < seconds:
        clock.advance(step)
        elapsed += step
        engine._on_tick()


def complete_phase(engine: TimerEngine, clock: FakeClock) -> None:
    """Start (if needed) and count the current phase down to zero."""
    if not engine.is_running:
        engine.start()
    run_for(engine, clock, engine.remaining_seconds)


def drain_feedback(engine: TimerEngine) -> None:
    """Fire every remaining feedback pulse the way the pulse timer would."""
    for _ in range(FEEDBACK_PULSES):
        if not engine._feedback_timer.isActive():
            break
        engine._on_feedback_pulse()


def finish_window(engine: TimerEngine) -> None:
    """Play out the feedback pulses, then fire the deferred phase switch."""
    drain_feedback(engine)
    engine._on_phase_switch()

"""Timer state machine for Pomodoro.

States
------
IDLE        Not started — settings editable, phase selectable.
RUNNING     Counting down towards the end timestamp.
PAUSED      Started but frozen; remaining time is kept.
FINISHING   Phase reached 00:00; feedback pulses play and the phase
            flips to the other one 3 s later.

Transitions
-----------
IDLE → RUNNING                 (start / toggle)
RUNNING ⇄ PAUSED               (pause / start / toggle)
RUNNING → FINISHING            (end timestamp reached)
FINISHING → IDLE (next phase)  (3 s after completion)
Any → IDLE                     (stop_and_reset / reset_to)

Phase (Focus / Break) is orthogonal to the states above.

Countdown
---------
Remaining time is recomputed from an absolute end timestamp on every
tick, never decremented, so a delayed or suspended event loop cannot
make the timer drift.
"""

from __future__ import annotations

import dataclasses
import logging
import math
import time
from enum import Enum
from typing import Callable

from PyQt6.QtCore import QObject, QTimer, Qt, pyqtSignal

from ..constants import COMPLETION_MESSAGES, DURATION_LIMITS, AlarmSound, Phase
from ..interfaces import IFeedbackPlayer, INotificationScheduler, ISettingsStore
from ..settings import Settings, SettingsStore

logger = logging.getLogger(__name__)


# ── enums ─────────────────────────────────────────────────────────────────


class TimerStatus(Enum):
    IDLE = "idle"
    RUNNING = "running"
    PAUSED = "paused"
    FINISHING = "finishing"


# ── constants ─────────────────────────────────────────────────────────────

TICK_INTERVAL_MS = 500
FEEDBACK_INTERVAL_MS = 600
FEEDBACK_PULSES = 5
PHASE_SWITCH_DELAY_MS = 3000


# ── engine ────────────────────────────────────────────────────────────────


class TimerEngine(QObject):
    """Qt-based Focus/Break timer with finishing feedback, a fallback
    notification and persisted preferences.

    Collaborators are injected: *store* persists settings, *feedback*
    plays sound/haptic cues, *notifier* owns the single fallback
    notification and *clock* returns wall-clock epoch seconds.

    Signals
    -------
    tick(remaining_seconds: int)
        Emitted whenever the remaining time changes.
    state_changed(status: TimerStatus)
        Emitted on every status transition.
    phase_changed(phase: Phase)
        Emitted when the current phase flips or is selected.
    phase_finished(phase: Phase)
        Emitted once when a phase counts down to zero.
    feedback_changed(active: bool)
        Emitted when the finishing-feedback sequence starts or ends.
    settings_changed(settings: Settings)
        Emitted after settings were persisted.
    """

    tick = pyqtSignal(int)
    state_changed = pyqtSignal(object)
    phase_changed = pyqtSignal(object)
    phase_finished = pyqtSignal(object)
    feedback_changed = pyqtSignal(bool)
    settings_changed = pyqtSignal(object)

    def __init__(
        self,
        parent: QObject | None = None,
        *,
        store: ISettingsStore | None = None,
        feedback: IFeedbackPlayer | None = None,
        notifier: INotificationScheduler | None = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        super().__init__(parent)

        # ── collaborators ─────────────────────────────────────────────
        self._store: ISettingsStore = store if store is not None else SettingsStore()
        self._feedback = feedback
        self._notifier = notifier
        self._clock = clock

        # ── configuration ─────────────────────────────────────────────
        self._settings: Settings = self._store.load()

        # ── timer state ───────────────────────────────────────────────
        self._phase: Phase = self._settings.last_phase
        self._is_running: bool = False
        self._has_started: bool = False
        self._is_finishing_feedback: bool = False
        self._total: int = self._settings.minutes_for(self._phase) * 60
        self._remaining: int = self._total
        self._end_timestamp: float | None = None
        self._feedback_count: int = 0
        self._status: TimerStatus = TimerStatus.IDLE

        # ── Qt timers ─────────────────────────────────────────────────
        self._ticker = QTimer(self)
        self._ticker.setInterval(TICK_INTERVAL_MS)
        self._ticker.timeout.connect(self._on_tick)

        self._feedback_timer = QTimer(self)
        self._feedback_timer.setTimerType(Qt.TimerType.PreciseTimer)
        self._feedback_timer.setInterval(FEEDBACK_INTERVAL_MS)
        self._feedback_timer.timeout.connect(self._on_feedback_pulse)

        self._phase_switch_timer = QTimer(self)
        self._phase_switch_timer.setTimerType(Qt.TimerType.PreciseTimer)
        self._phase_switch_timer.setSingleShot(True)
        self._phase_switch_timer.setInterval(PHASE_SWITCH_DELAY_MS)
        self._phase_switch_timer.timeout.connect(self._on_phase_switch)

        self.reset_to(self._phase)
        self._ticker.start()

    # ══════════════════════════════════════════════════════════════════
    #  PUBLIC PROPERTIES
    # ══════════════════════════════════════════════════════════════════

    @property
    def phase(self) -> Phase:
        return self._phase

    @property
    def is_running(self) -> bool:
        return self._is_running

    @property
    def has_started(self) -> bool:
        return self._has_started

    @property
    def is_finishing_feedback(self) -> bool:
        return self._is_finishing_feedback

    @property
    def remaining_seconds(self) -> int:
        return self._remaining

    @property
    def total_seconds(self) -> int:
        return self._total

    @property
    def end_timestamp(self) -> float | None:
        """Absolute end time (epoch seconds); ``None`` unless running."""
        return self._end_timestamp

    @property
    def feedback_pulses(self) -> int:
        """Pulses fired so far by the active feedback sequence."""
        return self._feedback_count

    @property
    def phase_switch_pending(self) -> bool:
        return self._phase_switch_timer.isActive()

    @property
    def status(self) -> TimerStatus:
        if self._is_running:
            return TimerStatus.RUNNING
        if self._is_finishing_feedback or self.phase_switch_pending:
            return TimerStatus.FINISHING
        if self._has_started:
            return TimerStatus.PAUSED
        return TimerStatus.IDLE

    @property
    def progress(self) -> float:
        """0.0 → 1.0 progress through the current phase."""
        if self._total <= 0:
            return 0.0
        return max(0.0, min(1.0, 1.0 - self._remaining / self._total))

    @property
    def settings(self) -> Settings:
        """A copy of the current preferences; edit through the setters."""
        return dataclasses.replace(self._settings)

    # ══════════════════════════════════════════════════════════════════
    #  CONTROLS
    # ══════════════════════════════════════════════════════════════════

    def toggle_start_pause(self) -> None:
        """The main button: silences feedback, then pauses or starts."""
        self._stop_finishing_feedback()
        if self._is_running:
            self.pause()
        else:
            self.start()

    def start(self) -> None:
        """Run (or resume) the countdown.  No-op while running or while
        a finished phase is waiting for its switch."""
        self._stop_finishing_feedback()
        if self._is_running or self.phase_switch_pending:
            self._sync_state()
            return

        self._is_running = True
        self._has_started = True
        if self._end_timestamp is None:
            self._end_timestamp = self._clock() + self._remaining
        self._schedule_notification()
        logger.debug("%s started with %ss left", self._phase.value, self._remaining)
        self._sync_state()
        self._on_tick()

    def pause(self) -> None:
        """Freeze the countdown at its last computed value."""
        self._stop_finishing_feedback()
        if not self._is_running:
            self._sync_state()
            return

        self._is_running = False
        self._end_timestamp = None
        self._cancel_notification()
        logger.debug("%s paused at %ss", self._phase.value, self._remaining)
        self._sync_state()

    def stop_and_reset(self) -> None:
        """Abandon the session and show the current phase's full time."""
        self._halt()
        self._load_phase_duration()
        self._has_started = False
        self._sync_state()

    def reset_to(self, phase: Phase | None = None) -> None:
        """Like :meth:`stop_and_reset`, optionally selecting *phase*
        first.  Persists settings, committing the phase choice."""
        self._halt()
        if phase is not None:
            self._set_phase(phase)
        self._load_phase_duration()
        self._has_started = False
        self._save_settings()
        self._sync_state()

    def apply_durations(self) -> None:
        """Pick up edited durations.  Only an idle timer is updated; the
        edit is persisted either way."""
        if (
            not self._has_started
            and not self._is_running
            and not self._is_finishing_feedback
        ):
            self._load_phase_duration()
        self._save_settings()
        self._sync_state()

    def apply_feedback_settings(self) -> None:
        self._save_settings()

    def shutdown(self) -> None:
        """Teardown: stop every timer and withdraw the notification."""
        self._ticker.stop()
        self._stop_finishing_feedback()
        self._phase_switch_timer.stop()
        self._cancel_notification()

    # ── settings intents ──────────────────────────────────────────────

    def set_duration(self, phase: Phase, minutes: int) -> None:
        """Set a phase's length, clamped to the stepper range."""
        low, high = DURATION_LIMITS[phase]
        minutes = max(low, min(high, int(minutes)))
        if phase is Phase.FOCUS:
            self._settings.focus_minutes = minutes
        else:
            self._settings.break_minutes = minutes
        self.apply_durations()

    def set_alarm_enabled(self, enabled: bool) -> None:
        self._settings.alarm_enabled = bool(enabled)
        self.apply_feedback_settings()

    def set_haptic_enabled(self, enabled: bool) -> None:
        self._settings.haptic_enabled = bool(enabled)
        self.apply_feedback_settings()

    def select_sound(self, sound: AlarmSound) -> None:
        self._settings.selected_sound = AlarmSound(sound)
        self.apply_feedback_settings()

    # ══════════════════════════════════════════════════════════════════
    #  INTERNAL — countdown
    # ══════════════════════════════════════════════════════════════════

    def _on_tick(self) -> None:
        if not self._is_running:
            return
        if self._end_timestamp is None:
            # Running without an end time should not happen; repair it
            self._end_timestamp = self._clock() + self._remaining
            return

        seconds_left = math.ceil(self._end_timestamp - self._clock())
        self._set_remaining(max(0, min(self._total, seconds_left)))

        if self._remaining == 0:
            self._on_timer_finished()

    def _on_timer_finished(self) -> None:
        finished = self._phase
        self._is_running = False
        self._end_timestamp = None
        self._cancel_notification()
        self._set_remaining(0)

        logger.info("%s finished", finished.value)
        self.phase_finished.emit(finished)

        self._start_finishing_feedback()
        self._phase_switch_timer.start()
        self._sync_state()

    def _on_phase_switch(self) -> None:
        self._phase_switch_timer.stop()
        self._stop_finishing_feedback()
        self._set_phase(self._phase.other)
        self._load_phase_duration()
        self._has_started = False
        self._save_settings()
        logger.info("Switched to %s (%ss)", self._phase.value, self._total)
        self._sync_state()

    # ══════════════════════════════════════════════════════════════════
    #  INTERNAL — finishing feedback
    # ══════════════════════════════════════════════════════════════════

    def _start_finishing_feedback(self) -> None:
        self._stop_finishing_feedback()
        if not (self._settings.alarm_enabled or self._settings.haptic_enabled):
            return

        self._is_finishing_feedback = True
        self._feedback_count = 0
        self.feedback_changed.emit(True)
        # First pulse right away so all of them land inside the 3 s window
        self._on_feedback_pulse()
        if self._feedback_count < FEEDBACK_PULSES:
            self._feedback_timer.start()

    def _on_feedback_pulse(self) -> None:
        if not self._is_finishing_feedback:
            self._feedback_timer.stop()
            return

        self._feedback_count += 1
        if self._feedback is not None:
            if self._settings.alarm_enabled:
                self._feedback.play_sound(self._settings.selected_sound)
            if self._settings.haptic_enabled:
                self._feedback.play_haptic()

        if self._feedback_count >= FEEDBACK_PULSES:
            self._feedback_timer.stop()

    def _stop_finishing_feedback(self) -> None:
        self._feedback_timer.stop()
        self._feedback_count = 0
        if self._is_finishing_feedback:
            self._is_finishing_feedback = False
            self.feedback_changed.emit(False)

    # ══════════════════════════════════════════════════════════════════
    #  INTERNAL — helpers
    # ══════════════════════════════════════════════════════════════════

    def _halt(self) -> None:
        """Stop everything in flight without touching phase or duration."""
        self._stop_finishing_feedback()
        self._phase_switch_timer.stop()
        self._is_running = False
        self._end_timestamp = None
        self._cancel_notification()

    def _load_phase_duration(self) -> None:
        self._total = self._settings.minutes_for(self._phase) * 60
        self._set_remaining(self._total)

    def _set_remaining(self, value: int) -> None:
        if value != self._remaining:
            self._remaining = value
            self.tick.emit(value)

    def _set_phase(self, phase: Phase) -> None:
        if phase is not self._phase:
            self._phase = phase
            self.phase_changed.emit(phase)

    def _sync_state(self) -> None:
        status = self.status
        if status is not self._status:
            self._status = status
            self.state_changed.emit(status)

    def _save_settings(self) -> None:
        self._settings.last_phase = self._phase
        self._store.save(self._settings)
        self.settings_changed.emit(self.settings)

    def _schedule_notification(self) -> None:
        if self._notifier is not None:
            self._notifier.schedule(self._remaining, COMPLETION_MESSAGES[self._phase])

    def _cancel_notification(self) -> None:
        if self._notifier is not None:
            self._notifier.cancel()

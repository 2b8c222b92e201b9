"""Capability contracts the timer engine depends on."""

from __future__ import annotations

from typing import Protocol

from .constants import AlarmSound
from .settings import Settings


class ISettingsStore(Protocol):
    """Load and persist the user's preferences as one record."""

    def load(self) -> Settings: ...
    def save(self, settings: Settings) -> None: ...


class IFeedbackPlayer(Protocol):
    """Best-effort sound and haptic cues. Must never raise."""

    def play_sound(self, sound: AlarmSound) -> None: ...
    def play_haptic(self) -> None: ...


class INotificationScheduler(Protocol):
    """A single, silent, cancellable delayed notification slot."""

    def schedule(self, after_seconds: int, message: str) -> None: ...
    def cancel(self) -> None: ...

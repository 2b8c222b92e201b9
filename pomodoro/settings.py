"""User preferences with key-value persistence.

The six preferences are stored as rows of the ``settings`` table, one key
per field, and always written together in a single transaction.

Usage::

    store = SettingsStore()
    settings = store.load()
    settings.focus_minutes = 50
    store.save(settings)
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass

from sqlalchemy.exc import SQLAlchemyError

from .constants import (
    AlarmSound,
    Phase,
    DEFAULT_BREAK_MINUTES,
    DEFAULT_FOCUS_MINUTES,
    DEFAULT_SOUND,
)
from .database.db import get_session
from .database.models import SettingEntry

logger = logging.getLogger(__name__)


# Storage keys for each field
KEY_FOCUS_MINUTES = "settings.focusMinutes"
KEY_BREAK_MINUTES = "settings.breakMinutes"
KEY_PHASE = "settings.phase"
KEY_ALARM_ON = "settings.alarmOn"
KEY_HAPTIC_ON = "settings.hapticOn"
KEY_ALARM_SOUND = "settings.alarmSound"


@dataclass
class Settings:
    """All user-configurable preferences."""

    # ── timer ─────────────────────────────────────────────────────────
    focus_minutes: int = DEFAULT_FOCUS_MINUTES
    break_minutes: int = DEFAULT_BREAK_MINUTES
    last_phase: Phase = Phase.FOCUS

    # ── feedback ──────────────────────────────────────────────────────
    alarm_enabled: bool = True
    haptic_enabled: bool = False
    selected_sound: AlarmSound = DEFAULT_SOUND

    def minutes_for(self, phase: Phase) -> int:
        if phase is Phase.FOCUS:
            return self.focus_minutes
        return self.break_minutes

    def to_record(self) -> dict[str, object]:
        """Flat key-value form written to storage."""
        return {
            KEY_FOCUS_MINUTES: self.focus_minutes,
            KEY_BREAK_MINUTES: self.break_minutes,
            KEY_PHASE: self.last_phase.value,
            KEY_ALARM_ON: self.alarm_enabled,
            KEY_HAPTIC_ON: self.haptic_enabled,
            KEY_ALARM_SOUND: self.selected_sound.value,
        }

    @classmethod
    def from_record(cls, record: dict[str, object]) -> "Settings":
        """Build settings from stored values, keeping the default for any
        field that is absent or invalid."""
        settings = cls()

        focus = record.get(KEY_FOCUS_MINUTES)
        if _is_positive_int(focus):
            settings.focus_minutes = focus
        brk = record.get(KEY_BREAK_MINUTES)
        if _is_positive_int(brk):
            settings.break_minutes = brk

        try:
            settings.last_phase = Phase(record.get(KEY_PHASE))
        except ValueError:
            pass
        try:
            settings.selected_sound = AlarmSound(record.get(KEY_ALARM_SOUND))
        except ValueError:
            pass

        alarm = record.get(KEY_ALARM_ON)
        if isinstance(alarm, bool):
            settings.alarm_enabled = alarm
        haptic = record.get(KEY_HAPTIC_ON)
        if isinstance(haptic, bool):
            settings.haptic_enabled = haptic

        return settings


def _is_positive_int(value: object) -> bool:
    # bool is an int subclass; True must not pass as a one-minute duration
    return isinstance(value, int) and not isinstance(value, bool) and value > 0


class SettingsStore:
    """Persists :class:`Settings` through the application database."""

    def load(self) -> Settings:
        """Load settings, falling back to defaults field by field."""
        record: dict[str, object] = {}
        try:
            with get_session() as db:
                for entry in db.query(SettingEntry).all():
                    try:
                        record[entry.key] = json.loads(entry.value)
                    except ValueError:
                        logger.debug("Ignoring malformed value for %s", entry.key)
        except SQLAlchemyError:
            logger.warning("Could not read settings; using defaults", exc_info=True)
        return Settings.from_record(record)

    def save(self, settings: Settings) -> None:
        """Write all fields in one transaction."""
        try:
            with get_session() as db:
                for key, value in settings.to_record().items():
                    db.merge(SettingEntry(key=key, value=json.dumps(value)))
        except SQLAlchemyError:
            logger.warning("Could not save settings", exc_info=True)

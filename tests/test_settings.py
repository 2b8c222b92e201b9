"""Tests for the settings record and its key-value store."""

from __future__ import annotations

import json

import pytest

from pomodoro.constants import AlarmSound, Phase
from pomodoro.database.db import configure_engine, get_session
from pomodoro.database.models import SettingEntry
from pomodoro.settings import (
    Settings,
    SettingsStore,
    KEY_ALARM_ON,
    KEY_ALARM_SOUND,
    KEY_BREAK_MINUTES,
    KEY_FOCUS_MINUTES,
    KEY_HAPTIC_ON,
    KEY_PHASE,
)


def _write_raw(values: dict[str, str]) -> None:
    with get_session() as db:
        for key, value in values.items():
            db.merge(SettingEntry(key=key, value=value))


class TestSettingsDefaults:
    def test_defaults(self):
        s = Settings()
        assert s.focus_minutes == 25
        assert s.break_minutes == 5
        assert s.alarm_enabled is True
        assert s.haptic_enabled is False
        assert s.selected_sound == AlarmSound.ALARM_2
        assert s.last_phase == Phase.FOCUS

    def test_minutes_for(self):
        s = Settings(focus_minutes=40, break_minutes=10)
        assert s.minutes_for(Phase.FOCUS) == 40
        assert s.minutes_for(Phase.BREAK) == 10

    def test_empty_store_returns_defaults(self, store):
        assert store.load() == Settings()


class TestSettingsStore:
    def test_round_trip(self, store):
        original = Settings(
            focus_minutes=50,
            break_minutes=10,
            alarm_enabled=False,
            haptic_enabled=True,
            selected_sound=AlarmSound.ALERT_1,
            last_phase=Phase.BREAK,
        )
        store.save(original)
        assert store.load() == original

    def test_writes_all_six_keys(self, store):
        store.save(Settings())
        with get_session() as db:
            keys = {e.key for e in db.query(SettingEntry).all()}
        assert keys == {
            KEY_FOCUS_MINUTES, KEY_BREAK_MINUTES, KEY_PHASE,
            KEY_ALARM_ON, KEY_HAPTIC_ON, KEY_ALARM_SOUND,
        }

    def test_save_overwrites(self, store):
        store.save(Settings(focus_minutes=30))
        store.save(Settings(focus_minutes=45))
        assert store.load().focus_minutes == 45
        with get_session() as db:
            assert db.query(SettingEntry).count() == 6

    def test_enums_stored_by_value(self, store):
        store.save(Settings(selected_sound=AlarmSound.ALERT_2, last_phase=Phase.BREAK))
        with get_session() as db:
            assert json.loads(db.get(SettingEntry, KEY_ALARM_SOUND).value) == "Alert 2"
            assert json.loads(db.get(SettingEntry, KEY_PHASE).value) == "Break"


class TestFallbacks:
    @pytest.mark.parametrize("raw", ["0", "-5", "2.5", '"25"', "true", "null"])
    def test_invalid_duration_keeps_default(self, store, raw):
        _write_raw({KEY_FOCUS_MINUTES: raw, KEY_BREAK_MINUTES: raw})
        s = store.load()
        assert s.focus_minutes == 25
        assert s.break_minutes == 5

    def test_unknown_enum_values(self, store):
        _write_raw({KEY_PHASE: '"Nap"', KEY_ALARM_SOUND: '"Siren"'})
        s = store.load()
        assert s.last_phase == Phase.FOCUS
        assert s.selected_sound == AlarmSound.ALARM_2

    def test_non_bool_toggles(self, store):
        _write_raw({KEY_ALARM_ON: "0", KEY_HAPTIC_ON: '"yes"'})
        s = store.load()
        assert s.alarm_enabled is True
        assert s.haptic_enabled is False

    def test_malformed_json_only_affects_its_field(self, store):
        _write_raw({KEY_FOCUS_MINUTES: "NOT JSON", KEY_BREAK_MINUTES: "12"})
        s = store.load()
        assert s.focus_minutes == 25
        assert s.break_minutes == 12

    def test_unknown_keys_ignored(self, store):
        _write_raw({"settings.future": "1", KEY_HAPTIC_ON: "true"})
        s = store.load()
        assert s.haptic_enabled is True
        assert not hasattr(s, "future")

    def test_partial_record(self, store):
        _write_raw({KEY_BREAK_MINUTES: "15"})
        s = store.load()
        assert s.break_minutes == 15
        assert s.focus_minutes == 25


class TestStorageFailures:
    def test_load_without_tables_returns_defaults(self):
        configure_engine("sqlite:///:memory:")  # no init_db
        assert SettingsStore().load() == Settings()

    def test_save_without_tables_does_not_raise(self):
        configure_engine("sqlite:///:memory:")
        SettingsStore().save(Settings(focus_minutes=30))

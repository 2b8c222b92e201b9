"""Shared pytest fixtures for Pomodoro tests."""

import os
import sys
import pytest

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

from PyQt6.QtWidgets import QApplication

from pomodoro.database.db import configure_engine, init_db
from pomodoro.settings import SettingsStore
from pomodoro.timer.engine import TimerEngine

from helpers import FakeClock, FakeFeedbackPlayer, FakeNotifier


@pytest.fixture(scope="session")
def qapp():
    """A single QApplication instance shared across the entire test run."""
    app = QApplication.instance() or QApplication(sys.argv)
    yield app


@pytest.fixture(autouse=True)
def test_db():
    """Point every test at a fresh in-memory SQLite database."""
    configure_engine("sqlite:///:memory:")
    init_db()
    yield


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def feedback():
    return FakeFeedbackPlayer()


@pytest.fixture
def notifier():
    return FakeNotifier()


@pytest.fixture
def store():
    return SettingsStore()


@pytest.fixture
def engine(qapp, store, feedback, notifier, clock):
    """Fresh TimerEngine on default settings, driven by a fake clock."""
    e = TimerEngine(
        parent=None, store=store, feedback=feedback, notifier=notifier, clock=clock,
    )
    yield e
    e.shutdown()

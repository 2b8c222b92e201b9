"""Pomodoro — a two-phase Focus/Break interval timer."""

__version__ = "0.1.0"

"""Main window: renders engine state and forwards user intents."""

from __future__ import annotations

import logging

from PyQt6.QtCore import Qt, QTimer
from PyQt6.QtGui import QColor, QIcon, QImage, QPainter, QPen, QPixmap
from PyQt6.QtWidgets import (
    QCheckBox, QComboBox, QHBoxLayout, QLabel, QMainWindow, QPushButton,
    QSpinBox, QSystemTrayIcon, QVBoxLayout, QWidget,
)

from .audio.sounds import FeedbackPlayer
from .constants import DURATION_LIMITS, AlarmSound, Phase
from .notifications import NotificationScheduler
from .timer.engine import TimerEngine, TimerStatus

logger = logging.getLogger(__name__)

LONG_PRESS_MS = 600


# ── tray-icon image generation ────────────────────────────────────────────


def _make_tray_icon(status: TimerStatus) -> QIcon:
    """32×32 template icon: outline when idle, filled while running,
    pause bars when paused, outline + dot while finishing."""
    size = 64  # draw at 2× for Retina
    img = QImage(size, size, QImage.Format.Format_ARGB32_Premultiplied)
    img.fill(Qt.GlobalColor.transparent)
    p = QPainter(img)
    p.setRenderHint(QPainter.RenderHint.Antialiasing)
    colour = QColor(0, 0, 0, 220)
    cx, cy, r = size // 2, size // 2, size // 2 - 4

    if status == TimerStatus.RUNNING:
        p.setPen(Qt.PenStyle.NoPen)
        p.setBrush(colour)
        p.drawEllipse(cx - r, cy - r, r * 2, r * 2)
    elif status == TimerStatus.PAUSED:
        p.setPen(Qt.PenStyle.NoPen)
        p.setBrush(colour)
        bar_w, bar_h, gap = 8, 28, 6
        y = cy - bar_h // 2
        p.drawRoundedRect(cx - gap - bar_w, y, bar_w, bar_h, 3, 3)
        p.drawRoundedRect(cx + gap, y, bar_w, bar_h, 3, 3)
    else:
        p.setPen(QPen(colour, 4))
        p.setBrush(Qt.BrushStyle.NoBrush)
        p.drawEllipse(cx - r, cy - r, r * 2, r * 2)
        if status == TimerStatus.FINISHING:
            p.setPen(Qt.PenStyle.NoPen)
            p.setBrush(colour)
            p.drawEllipse(cx - 6, cy - 6, 12, 12)

    p.end()
    img.setDevicePixelRatio(2.0)
    return QIcon(QPixmap.fromImage(img))


def _fmt_time(seconds: int) -> str:
    m, s = divmod(max(0, seconds), 60)
    return f"{m:02d}:{s:02d}"


class PomodoroWindow(QMainWindow):
    """Single-screen timer window."""

    def __init__(self) -> None:
        super().__init__()
        self.setWindowTitle("Pomodoro")
        self.setMinimumSize(360, 480)

        # ── tray + collaborators ──────────────────────────────────────
        self._status = TimerStatus.IDLE
        self._tray_icon = QSystemTrayIcon(self)
        self._tray_icon.setIcon(_make_tray_icon(self._status))
        self._tray_icon.setToolTip("Pomodoro")
        if QSystemTrayIcon.isSystemTrayAvailable():
            self._tray_icon.show()
        else:
            logger.info("No system tray; fallback notifications disabled")

        self._notifier = NotificationScheduler(self._show_notification, self)
        self._feedback = FeedbackPlayer(parent=self)
        self._engine = TimerEngine(
            self, feedback=self._feedback, notifier=self._notifier,
        )

        # ── central widget ────────────────────────────────────────────
        central = QWidget()
        self.setCentralWidget(central)
        root = QVBoxLayout(central)
        root.setContentsMargins(18, 18, 18, 18)
        root.setSpacing(12)

        self._phase_label = QLabel(alignment=Qt.AlignmentFlag.AlignCenter)
        root.addWidget(self._phase_label)

        # Main button: click toggles, hold stops and resets
        self._main_button = QPushButton()
        self._main_button.setMinimumHeight(160)
        self._main_button.setStyleSheet("font-size: 48px; font-weight: bold;")
        self._main_button.pressed.connect(self._on_main_pressed)
        self._main_button.released.connect(self._on_main_released)
        root.addWidget(self._main_button)

        self._long_press_timer = QTimer(self)
        self._long_press_timer.setSingleShot(True)
        self._long_press_timer.setInterval(LONG_PRESS_MS)
        self._long_press_timer.timeout.connect(self._on_long_press)
        self._long_pressed = False

        self._settings_panel = self._build_settings_panel()
        root.addWidget(self._settings_panel)
        root.addStretch()

        # ── wire signals ──────────────────────────────────────────────
        self._engine.tick.connect(lambda _: self._refresh())
        self._engine.state_changed.connect(self._on_state_changed)
        self._engine.phase_changed.connect(lambda _: self._refresh())
        self._engine.feedback_changed.connect(lambda _: self._refresh())
        self._refresh()

    # ══════════════════════════════════════════════════════════════════
    #  BUILDERS
    # ══════════════════════════════════════════════════════════════════

    def _build_settings_panel(self) -> QWidget:
        panel = QWidget(self)
        layout = QVBoxLayout(panel)
        settings = self._engine.settings

        phase_row = QHBoxLayout()
        for phase in Phase:
            btn = QPushButton(phase.value)
            btn.clicked.connect(lambda _=False, p=phase: self._engine.reset_to(p))
            phase_row.addWidget(btn)
        layout.addLayout(phase_row)

        for phase in Phase:
            row = QHBoxLayout()
            row.addWidget(QLabel(phase.value))
            spin = QSpinBox()
            spin.setRange(*DURATION_LIMITS[phase])
            spin.setSuffix(" m")
            spin.setValue(settings.minutes_for(phase))
            spin.valueChanged.connect(
                lambda value, p=phase: self._engine.set_duration(p, value)
            )
            row.addWidget(spin)
            layout.addLayout(row)

        feedback_row = QHBoxLayout()
        alarm = QCheckBox("Alarm")
        alarm.setChecked(settings.alarm_enabled)
        alarm.toggled.connect(self._engine.set_alarm_enabled)
        feedback_row.addWidget(alarm)

        self._sound_combo = QComboBox()
        for sound in AlarmSound:
            self._sound_combo.addItem(sound.value, sound)
        self._sound_combo.setCurrentIndex(list(AlarmSound).index(settings.selected_sound))
        self._sound_combo.setEnabled(settings.alarm_enabled)
        self._sound_combo.currentIndexChanged.connect(
            lambda idx: self._engine.select_sound(self._sound_combo.itemData(idx))
        )
        alarm.toggled.connect(self._sound_combo.setEnabled)
        feedback_row.addWidget(self._sound_combo)

        haptic = QCheckBox("Haptic")
        haptic.setChecked(settings.haptic_enabled)
        haptic.toggled.connect(self._engine.set_haptic_enabled)
        feedback_row.addWidget(haptic)
        layout.addLayout(feedback_row)
        return panel

    # ══════════════════════════════════════════════════════════════════
    #  INTENTS
    # ══════════════════════════════════════════════════════════════════

    def _on_main_pressed(self) -> None:
        self._long_pressed = False
        self._long_press_timer.start()

    def _on_main_released(self) -> None:
        self._long_press_timer.stop()
        if not self._long_pressed:
            self._engine.toggle_start_pause()

    def _on_long_press(self) -> None:
        self._long_pressed = True
        self._engine.stop_and_reset()

    # ══════════════════════════════════════════════════════════════════
    #  RENDERING
    # ══════════════════════════════════════════════════════════════════

    def _on_state_changed(self, status: TimerStatus) -> None:
        self._status = status
        self._tray_icon.setIcon(_make_tray_icon(status))
        self._refresh()

    def _refresh(self) -> None:
        e = self._engine
        self._phase_label.setText(e.phase.value.upper())
        glyph = "⏸" if e.is_running else "▶"
        self._main_button.setText(f"{_fmt_time(e.remaining_seconds)}  {glyph}")
        self._settings_panel.setVisible(
            not e.has_started and not e.is_finishing_feedback
        )
        self._tray_icon.setToolTip(
            f"Pomodoro — {e.phase.value} {_fmt_time(e.remaining_seconds)}"
        )

    def _show_notification(self, title: str, body: str) -> None:
        if not self._tray_icon.isVisible():
            return
        self._tray_icon.showMessage(
            title, body, QSystemTrayIcon.MessageIcon.NoIcon, 5000,
        )

    def closeEvent(self, event) -> None:  # type: ignore[override]
        self._engine.shutdown()
        self._tray_icon.hide()
        event.accept()

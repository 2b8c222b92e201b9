"""Alarm cue synthesis and playback using numpy + QSoundEffect.

Every cue is generated programmatically as a WAV file using sine-wave
synthesis with ADSR envelopes.  Files are cached to disk so subsequent
launches skip synthesis.  All cues stay shorter than the 0.6 s pulse
interval of the finishing-feedback sequence so pulses never overlap.

Cues
----
- ``Alarm 1``  — alternating two-tone beep
- ``Alarm 2``  — ascending three-note chime (default)
- ``Alert 1``  — short soft bell
- ``Alert 2``  — gentle double-tap
- haptic pulse — 55 Hz thump, the desktop stand-in for a heavy impact
"""

from __future__ import annotations

import io
import logging
import wave
from pathlib import Path
from typing import Callable

import numpy as np

from PyQt6.QtCore import QObject, QUrl
from PyQt6.QtMultimedia import QSoundEffect

from ..constants import AlarmSound
from ..database.db import app_support_dir

logger = logging.getLogger(__name__)

SAMPLE_RATE = 44100
HAPTIC_NAME = "haptic_pulse"


def sound_filename(sound: AlarmSound) -> str:
    """Cache file name for a cue, e.g. ``alarm_2.wav``."""
    return f"{sound.name.lower()}.wav"


# ═══════════════════════════════════════════════════════════════════════════
#  WAV SYNTHESIS HELPERS
# ═══════════════════════════════════════════════════════════════════════════


def _make_envelope(
    length: int,
    attack: int = 200,
    decay: int = 400,
    sustain_level: float = 0.7,
    release: int = 800,
) -> np.ndarray:
    """ADSR envelope (all durations in samples)."""
    env = np.ones(length, dtype=np.float64)
    # Attack
    a = min(attack, length)
    if a > 0:
        env[:a] = np.linspace(0.0, 1.0, a)
    # Decay
    d_end = min(a + decay, length)
    if decay > 0 and d_end > a:
        env[a:d_end] = np.linspace(1.0, sustain_level, d_end - a)
    # Sustain
    s_end = max(length - release, d_end)
    if s_end > d_end:
        env[d_end:s_end] = sustain_level
    # Release
    if release > 0 and s_end < length:
        env[s_end:] = np.linspace(sustain_level, 0.0, length - s_end)
    return env


def _sine(freq: float, duration_s: float) -> np.ndarray:
    """Pure sine wave at *freq* Hz for *duration_s* seconds."""
    t = np.linspace(0, duration_s, int(SAMPLE_RATE * duration_s), endpoint=False)
    return np.sin(2 * np.pi * freq * t)


def _silence(duration_s: float) -> np.ndarray:
    return np.zeros(int(SAMPLE_RATE * duration_s))


def _to_wav_bytes(samples: np.ndarray) -> bytes:
    """Convert a float64 numpy array (-1..1) to 16-bit PCM WAV bytes."""
    samples = np.clip(samples, -1.0, 1.0)
    int_samples = (samples * 32767).astype(np.int16)

    buf = io.BytesIO()
    with wave.open(buf, "wb") as wf:
        wf.setnchannels(1)
        wf.setsampwidth(2)
        wf.setframerate(SAMPLE_RATE)
        wf.writeframes(int_samples.tobytes())
    return buf.getvalue()


# ═══════════════════════════════════════════════════════════════════════════
#  CUE GENERATORS
# ═══════════════════════════════════════════════════════════════════════════


def _generate_two_tone() -> bytes:
    """Alarm 1 — classic alternating beep (A5 / E5), two pairs."""
    parts: list[np.ndarray] = []
    for freq in (880.0, 659.25, 880.0, 659.25):
        tone = _sine(freq, 0.09) * 0.5
        env = _make_envelope(len(tone), attack=60, decay=200, sustain_level=0.8, release=300)
        parts.append(tone * env)
        parts.append(_silence(0.02))
    return _to_wav_bytes(np.concatenate(parts))


def _generate_chime() -> bytes:
    """Alarm 2 — 3 ascending notes (C5→E5→G5), uplifting."""
    notes = [523.25, 659.25, 783.99]  # C5, E5, G5
    parts: list[np.ndarray] = []
    for freq in notes:
        tone = _sine(freq, 0.12) * 0.6
        env = _make_envelope(len(tone), attack=100, decay=200, sustain_level=0.4, release=300)
        parts.append(tone * env)
        parts.append(_silence(0.03))
    parts.append(_silence(0.05))
    return _to_wav_bytes(np.concatenate(parts))


def _generate_bell() -> bytes:
    """Alert 1 — soft bell (A4, 440Hz) with a quick decay."""
    duration = 0.5
    combined = _sine(440.0, duration) * 0.4 + _sine(880.0, duration) * 0.1
    env = _make_envelope(
        len(combined),
        attack=int(SAMPLE_RATE * 0.02),
        decay=int(SAMPLE_RATE * 0.15),
        sustain_level=0.3,
        release=int(SAMPLE_RATE * 0.3),
    )
    return _to_wav_bytes(combined * env)


def _generate_double_tap() -> bytes:
    """Alert 2 — gentle double-tap (800Hz), 80ms apart."""
    tap = _sine(800.0, 0.04) * 0.45
    env = _make_envelope(len(tap), attack=40, decay=100, sustain_level=0.2, release=200)
    tap = tap * env
    return _to_wav_bytes(np.concatenate([tap, _silence(0.08), tap, _silence(0.05)]))


def _generate_thump() -> bytes:
    """Haptic pulse — very low, short and strong."""
    thump = _sine(55.0, 0.08) * 0.9 + _sine(110.0, 0.08) * 0.2
    env = _make_envelope(len(thump), attack=30, decay=600, sustain_level=0.5, release=1800)
    return _to_wav_bytes(np.concatenate([thump * env, _silence(0.03)]))


_GENERATORS: dict[str, Callable[[], bytes]] = {
    sound_filename(AlarmSound.ALARM_1): _generate_two_tone,
    sound_filename(AlarmSound.ALARM_2): _generate_chime,
    sound_filename(AlarmSound.ALERT_1): _generate_bell,
    sound_filename(AlarmSound.ALERT_2): _generate_double_tap,
    f"{HAPTIC_NAME}.wav": _generate_thump,
}


# ═══════════════════════════════════════════════════════════════════════════
#  FEEDBACK PLAYER
# ═══════════════════════════════════════════════════════════════════════════


class FeedbackPlayer(QObject):
    """Plays alarm cues and haptic pulses.  Fire-and-forget: any failure
    is logged and swallowed so the timer never notices.

    Usage::

        player = FeedbackPlayer(parent=self)
        player.play_sound(AlarmSound.ALARM_2)
        player.play_haptic()
    """

    def __init__(
        self,
        parent: QObject | None = None,
        *,
        sounds_dir: Path | None = None,
    ) -> None:
        super().__init__(parent)
        self._enabled = True
        self._volume = 0.8  # 0.0–1.0
        self._sounds_dir = sounds_dir or app_support_dir() / "sounds"
        self._effects: dict[str, QSoundEffect] = {}

        self._ensure_wav_files()
        self._load_effects()

    # ── public API ────────────────────────────────────────────────────

    def play_sound(self, sound: AlarmSound) -> None:
        self._play(sound_filename(sound))

    def play_haptic(self) -> None:
        self._play(f"{HAPTIC_NAME}.wav")

    def set_enabled(self, enabled: bool) -> None:
        self._enabled = enabled

    def set_volume(self, level: int) -> None:
        """Set volume (0-100).  Updates all loaded effects."""
        self._volume = max(0, min(level, 100)) / 100.0
        for effect in self._effects.values():
            effect.setVolume(self._volume)

    @property
    def enabled(self) -> bool:
        return self._enabled

    @property
    def volume(self) -> int:
        return round(self._volume * 100)

    @property
    def sounds_dir(self) -> Path:
        return self._sounds_dir

    # ── internal ──────────────────────────────────────────────────────

    def _play(self, filename: str) -> None:
        if not self._enabled:
            return
        effect = self._effects.get(filename)
        if effect is None:
            return
        try:
            effect.play()
        except Exception:
            logger.debug("Playback of %s failed", filename, exc_info=True)

    def _ensure_wav_files(self) -> None:
        """Generate any missing WAV files to the cache directory."""
        try:
            self._sounds_dir.mkdir(parents=True, exist_ok=True)
            for filename, gen_fn in _GENERATORS.items():
                path = self._sounds_dir / filename
                if not path.exists():
                    path.write_bytes(gen_fn())
        except OSError:
            logger.warning("Could not write sound cache in %s", self._sounds_dir, exc_info=True)

    def _load_effects(self) -> None:
        """Create QSoundEffect instances from cached WAV files."""
        for filename in _GENERATORS:
            path = self._sounds_dir / filename
            if path.exists():
                effect = QSoundEffect(self)
                effect.setSource(QUrl.fromLocalFile(str(path)))
                effect.setVolume(self._volume)
                self._effects[filename] = effect

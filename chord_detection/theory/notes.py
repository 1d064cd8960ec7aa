"""
chord_detection.theory.notes
~~~~~~~~~~~~~~~~~~~~~~~~~~~~

MIDI note numbers, pitch-class names and note ↔ frequency conversion.

Note numbers follow the MIDI convention (A4 = 69 = 440 Hz, C4 = 60), and
frequencies are 12-tone equal temperament. The gromagram's ``start_note``
is expressed in these numbers.
"""

from __future__ import annotations

from typing import Final

import librosa
import numpy as np

from chord_detection.config import A4_MIDI, N_CHROMA

# ── Pitch classes ────────────────────────────────────────────────────
PITCH_CLASS_NAMES: Final[list[str]] = [
    "C", "C#", "D", "D#", "E", "F",
    "F#", "G", "G#", "A", "A#", "B",
]
"""Chroma bin labels in bin order."""

# ── Frequently used MIDI note numbers ────────────────────────────────
A0: Final[int] = 21
A1: Final[int] = 33
E2: Final[int] = 40
"""Lowest string of a guitar in standard tuning (82.41 Hz)."""
A2: Final[int] = 45
C3: Final[int] = 48
A3: Final[int] = 57
C4: Final[int] = 60
"""Middle C."""
A4: Final[int] = A4_MIDI
C5: Final[int] = 72


def note_to_hz(note: int | float | np.ndarray) -> float | np.ndarray:
    """Frequency in Hz of a (possibly fractional) MIDI note number.

    Parameters
    ----------
    note : int | float | np.ndarray
        MIDI note number(s).

    Returns
    -------
    float | np.ndarray
        ``440 * 2 ** ((note - 69) / 12)``.
    """
    hz = librosa.midi_to_hz(note)
    if np.ndim(hz) == 0:
        return float(hz)
    return hz


def note_name(note: int) -> str:
    """Scientific pitch name of a MIDI note number, e.g. ``45 -> 'A2'``."""
    return librosa.midi_to_note(note, unicode=False)


def note_number(name: str) -> int:
    """MIDI note number of a scientific pitch name, e.g. ``'A2' -> 45``.

    Raises
    ------
    librosa.util.exceptions.ParameterError
        If *name* is not a valid note name.
    """
    return int(librosa.note_to_midi(name))


def pitch_class(note: int) -> str:
    """Pitch-class name of a MIDI note number (octave discarded)."""
    return PITCH_CLASS_NAMES[note % N_CHROMA]

"""
chord_detection.config
~~~~~~~~~~~~~~~~~~~~~~

Global constants for audio analysis and classification.
Centralises all magic numbers so they can be imported once and
shared across every submodule.
"""

from typing import Final

# ── Audio ────────────────────────────────────────────────────────────
SR: Final[int] = 44_100
"""Default sample rate in Hz."""

I16_MAX: Final[int] = 32_767
"""Full-scale value of a signed 16-bit sample."""

# ── Gromagram ────────────────────────────────────────────────────────
DEFAULT_WINDOW_SIZE: Final[int] = 1024
"""Samples held in the gromagram's circular buffer."""

DEFAULT_START_NOTE: Final[int] = 28
"""MIDI index of the lowest tracked note."""

DEFAULT_NOTES_COUNT: Final[int] = 12
"""Number of consecutive semitones tracked (one octave)."""

A4_MIDI: Final[int] = 69
"""MIDI index of the tuning reference."""

# ── Chromagram ───────────────────────────────────────────────────────
CHROMA_BUFFER_SIZE: Final[int] = 4096
"""Length of the shifting analysis buffer (and FFT size)."""

CHROMA_CALCULATION_INTERVAL: Final[int] = 4096
"""Input samples between two chromagram calculations."""

DEFAULT_FRAME_SIZE: Final[int] = 256
"""Samples per incoming chromagram frame."""

N_CHROMA: Final[int] = 12
"""Number of chroma bins (one per pitch class)."""

NUM_HARMONICS: Final[int] = 2
"""Harmonics summed per pitch class."""

NUM_OCTAVES: Final[int] = 2
"""Octaves summed per pitch class."""

NUM_BINS_TO_SEARCH: Final[int] = 2
"""Half-width of the peak search, multiplied by the harmonic number."""

DOWN_SAMPLING_FACTOR: Final[int] = 1
"""Default decimation factor applied after the low-pass filter."""

CHROMA_REFERENCE_HZ: Final[float] = 196.0 / 4.0
"""Frequency of the lowest chroma reference note (C3 of the chroma table)."""

# Low-pass filter applied before decimation. Kept verbatim, negative zero included.
LOWPASS_B: Final[tuple[float, float, float]] = (0.2929, 0.5858, 0.2929)
LOWPASS_A: Final[tuple[float, float, float]] = (1.0, -0.0000, 0.1716)

# ── Classifier ───────────────────────────────────────────────────────
CONFIDENCE_THRESHOLD: Final[float] = 0.9
"""Posterior a label must strictly exceed to be reported by ``detect``."""

TRAINING_STEP_DIVISOR: Final[int] = 4
"""Training windows advance by ``window_size // TRAINING_STEP_DIVISOR``."""

VAR_SMOOTHING: Final[float] = 1e-9
"""Fraction of the largest feature variance added to every variance."""

"""
chord_detection.analysis.gromagram
~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~

Per-note energy over a sliding window ("gromagram").

Every incoming frame is down-mixed, written into a circular buffer, and
then each tracked note's energy is re-estimated over the *whole* buffer
with a Goertzel filter tuned to that note. Work per frame is
``O(window_size * notes_count)``; with the usual few dozen notes this is
cheap next to the frame period.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

import numpy as np
from numpy.typing import ArrayLike

from chord_detection.config import (
    DEFAULT_NOTES_COUNT,
    DEFAULT_START_NOTE,
    DEFAULT_WINDOW_SIZE,
    SR,
)
from chord_detection.dsp.buffer import CircularBuffer
from chord_detection.dsp.goertzel import GoertzelParameters
from chord_detection.dsp.mixing import make_mono
from chord_detection.errors import ConfigurationError
from chord_detection.theory.notes import note_to_hz

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GromagramConfig:
    """Construction parameters for :class:`Gromagram`.

    Invariants (checked by :meth:`validate`):
        window_size > 0, sample_rate > 0, channel_count >= 1,
        start_note >= 0, notes_count >= 1,
        highest tracked note below the Nyquist frequency.
    """

    window_size: int = DEFAULT_WINDOW_SIZE
    """Mono samples held in the analysis window."""

    sample_rate: int = SR
    """Input sample rate in Hz."""

    channel_count: int = 1
    """Interleaved channels per incoming frame."""

    start_note: int = DEFAULT_START_NOTE
    """MIDI number of the lowest tracked note."""

    notes_count: int = DEFAULT_NOTES_COUNT
    """Number of consecutive semitones tracked."""

    def validate(self) -> None:
        """Raise :class:`ConfigurationError` on an unusable configuration."""
        if self.window_size <= 0:
            raise ConfigurationError(f"window_size must be positive, got {self.window_size}")
        if self.sample_rate <= 0:
            raise ConfigurationError(f"sample_rate must be positive, got {self.sample_rate}")
        if self.channel_count < 1:
            raise ConfigurationError(f"channel_count must be >= 1, got {self.channel_count}")
        if self.start_note < 0:
            raise ConfigurationError(f"start_note must be >= 0, got {self.start_note}")
        if self.notes_count < 1:
            raise ConfigurationError(f"notes_count must be >= 1, got {self.notes_count}")

        highest = note_to_hz(self.start_note + self.notes_count - 1)
        if highest >= self.sample_rate / 2:
            raise ConfigurationError(
                f"highest tracked note ({highest:.1f} Hz) is not below the "
                f"Nyquist frequency ({self.sample_rate / 2:.1f} Hz)"
            )


class Gromagram:
    """Sliding-window note energy analyzer.

    Parameters
    ----------
    props : GromagramConfig
        Fixed configuration. Defaults to one octave from MIDI note 28 at 44.1 kHz.

    Attributes
    ----------
    gromagram : np.ndarray, shape ``(notes_count,)``
        Energy per tracked note after the latest frame. Updated in place.

    Raises
    ------
    ConfigurationError
        If *props* fails :meth:`GromagramConfig.validate`.
    """

    def __init__(self, props: GromagramConfig | None = None) -> None:
        self.props = props if props is not None else GromagramConfig()
        self.props.validate()

        self.buffer = CircularBuffer(self.props.window_size, dtype=np.int16)
        self.gromagram = np.zeros(self.props.notes_count, dtype=np.float64)

        notes = np.arange(self.props.start_note, self.props.start_note + self.props.notes_count)
        self.note_frequencies: np.ndarray = note_to_hz(notes)
        self.note_frequencies.setflags(write=False)
        self._estimators = [
            GoertzelParameters(freq, self.props.sample_rate, self.props.window_size)
            for freq in self.note_frequencies
        ]
        logger.debug(
            "gromagram: %d notes from MIDI %d (%.2f Hz), window %d @ %d Hz",
            self.props.notes_count,
            self.props.start_note,
            self.note_frequencies[0],
            self.props.window_size,
            self.props.sample_rate,
        )

    def process_audio_frame(self, frame: ArrayLike) -> np.ndarray:
        """Absorb one interleaved int16 frame and refresh :attr:`gromagram`.

        Parameters
        ----------
        frame : ArrayLike
            Interleaved samples; length must be a multiple of
            ``channel_count``. Any length is accepted, frames longer than
            the window simply leave only their tail in the buffer.

        Returns
        -------
        np.ndarray
            :attr:`gromagram` (the same array, not a copy).
        """
        mono = make_mono(frame, self.props.channel_count)
        self.buffer.write(mono)

        older, newer = self.buffer.halves()
        for i, params in enumerate(self._estimators):
            self.gromagram[i] = params.start().add(older).add(newer).finish_mag()
        return self.gromagram

    def reset(self) -> None:
        """Clear the window; configuration is kept."""
        self.buffer.reset()

    def normalize(self) -> np.ndarray:
        """Scale :attr:`gromagram` in place so its entries sum to one.

        An all-zero vector (silence) is left untouched instead of being
        turned into NaNs.
        """
        total = self.gromagram.sum()
        if total > 0.0:
            self.gromagram /= total
        return self.gromagram

    @property
    def window_size(self) -> int:
        return self.props.window_size

    @property
    def channel_count(self) -> int:
        return self.props.channel_count

    def __len__(self) -> int:
        return self.props.notes_count

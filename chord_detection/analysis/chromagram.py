"""
chord_detection.analysis.chromagram
~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~

Real-time 12-bin chromagram from a windowed FFT.

Incoming frames are low-pass filtered, optionally decimated, and shifted
into a 4096-sample window. Every 4096 input samples the window is
Hamming-weighted and transformed; each pitch class then collects the
strongest bin around its fundamental and second harmonic over two
octaves. Searching a few bins either side absorbs the coarse FFT
resolution, and summing harmonics favours pitch classes whose overtones
are present too.

After the chord detector and chromagram of Adam Stark (Queen Mary
University of London).
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Final

import numpy as np
from numpy.typing import ArrayLike
from scipy.signal import lfilter

from chord_detection.config import (
    CHROMA_BUFFER_SIZE,
    CHROMA_CALCULATION_INTERVAL,
    CHROMA_REFERENCE_HZ,
    DEFAULT_FRAME_SIZE,
    DOWN_SAMPLING_FACTOR,
    LOWPASS_A,
    LOWPASS_B,
    N_CHROMA,
    NUM_BINS_TO_SEARCH,
    NUM_HARMONICS,
    NUM_OCTAVES,
    SR,
)
from chord_detection.dsp.buffer import ShiftBuffer
from chord_detection.dsp.mixing import make_mono
from chord_detection.dsp.spectrum import hamming_window
from chord_detection.errors import ConfigurationError

logger = logging.getLogger(__name__)

# ── Constant tables (built once at import time) ─────────────────────
NOTE_FREQUENCIES: Final[np.ndarray] = CHROMA_REFERENCE_HZ * 2.0 ** (
    np.arange(N_CHROMA, dtype=np.float64) / N_CHROMA
)
"""Reference frequency of each pitch class, C first."""
NOTE_FREQUENCIES.setflags(write=False)

HAMMING_WINDOW: Final[np.ndarray] = hamming_window(CHROMA_BUFFER_SIZE)

N_MAGNITUDE_BINS: Final[int] = CHROMA_BUFFER_SIZE // 2 + 1

_LOWPASS_B = np.array(LOWPASS_B)
_LOWPASS_A = np.array(LOWPASS_A)


@dataclass(frozen=True)
class ChromagramConfig:
    """Construction parameters for :class:`Chromagram`."""

    frame_size: int = DEFAULT_FRAME_SIZE
    """Samples per channel in every incoming frame."""

    sample_rate: int = SR
    """Input sample rate in Hz."""

    channel_count: int = 1
    """Interleaved channels per incoming frame."""

    down_sampling_factor: int = DOWN_SAMPLING_FACTOR
    """Keep every n-th filtered sample."""

    def validate(self) -> None:
        """Raise :class:`ConfigurationError` on an unusable configuration."""
        if self.frame_size <= 0:
            raise ConfigurationError(f"frame_size must be positive, got {self.frame_size}")
        if self.sample_rate <= 0:
            raise ConfigurationError(f"sample_rate must be positive, got {self.sample_rate}")
        if self.channel_count < 1:
            raise ConfigurationError(f"channel_count must be >= 1, got {self.channel_count}")
        if self.down_sampling_factor < 1:
            raise ConfigurationError(
                f"down_sampling_factor must be >= 1, got {self.down_sampling_factor}"
            )
        if self.frame_size % self.down_sampling_factor:
            raise ConfigurationError(
                f"frame_size {self.frame_size} is not divisible by "
                f"down_sampling_factor {self.down_sampling_factor}"
            )
        if self.frame_size // self.down_sampling_factor > CHROMA_BUFFER_SIZE:
            raise ConfigurationError(
                f"a decimated frame of {self.frame_size // self.down_sampling_factor} "
                f"samples does not fit the {CHROMA_BUFFER_SIZE}-sample buffer"
            )


def _search_ranges(props: ChromagramConfig) -> list[list[tuple[int, int, int]]]:
    """``[(lo, hi, harmonic), ...]`` per pitch class, ``hi`` exclusive."""
    divisor_ratio = props.sample_rate / props.down_sampling_factor / CHROMA_BUFFER_SIZE

    ranges = []
    for freq in NOTE_FREQUENCIES:
        note_ranges = []
        for octave in range(1, NUM_OCTAVES + 1):
            for harmonic in range(1, NUM_HARMONICS + 1):
                center = math.floor(freq * octave * harmonic / divisor_ratio + 0.5)
                lo = center - NUM_BINS_TO_SEARCH * harmonic
                hi = center + NUM_BINS_TO_SEARCH * harmonic
                if lo < 0 or hi > N_MAGNITUDE_BINS:
                    raise ConfigurationError(
                        f"sample rate {props.sample_rate} Hz puts the search window "
                        f"[{lo}, {hi}) for {freq * octave * harmonic:.1f} Hz outside "
                        f"the {N_MAGNITUDE_BINS}-bin magnitude spectrum"
                    )
                note_ranges.append((lo, hi, harmonic))
        ranges.append(note_ranges)
    return ranges


class Chromagram:
    """Streaming 12-bin chroma analyzer.

    Parameters
    ----------
    props : ChromagramConfig
        Fixed configuration. Defaults to 256-sample mono frames at 44.1 kHz.

    Attributes
    ----------
    chromagram : np.ndarray, shape ``(12,)``
        Energy per pitch class from the latest calculation.
    magnitude_spectrum : np.ndarray, shape ``(2049,)``
        Compressed magnitude ``sqrt(|X_k|)`` from the latest calculation.

    Raises
    ------
    ConfigurationError
        If *props* is invalid or its sample rate pushes a search window
        outside the magnitude spectrum.
    """

    def __init__(self, props: ChromagramConfig | None = None) -> None:
        self.props = props if props is not None else ChromagramConfig()
        self.props.validate()
        self._search = _search_ranges(self.props)

        self.buffer = ShiftBuffer(CHROMA_BUFFER_SIZE)
        self.chromagram = np.zeros(N_CHROMA, dtype=np.float64)
        self.magnitude_spectrum = np.zeros(N_MAGNITUDE_BINS, dtype=np.float64)
        self._frame = np.zeros(self.props.frame_size, dtype=np.float64)
        self._windowed = np.zeros(CHROMA_BUFFER_SIZE, dtype=np.float64)
        self._filter_state = np.zeros(2, dtype=np.float64)

        self.num_samples_since_last_calculation = 0
        self.chroma_calculation_interval = CHROMA_CALCULATION_INTERVAL
        self._ready = False
        logger.debug(
            "chromagram: frames of %d @ %d Hz, decimation %d",
            self.props.frame_size,
            self.props.sample_rate,
            self.props.down_sampling_factor,
        )

    def process_audio_frame(self, frame: ArrayLike) -> np.ndarray:
        """Absorb one frame; recalculate once enough samples have arrived.

        Parameters
        ----------
        frame : ArrayLike
            ``frame_size * channel_count`` interleaved samples.

        Returns
        -------
        np.ndarray
            :attr:`chromagram` (unchanged unless a calculation ran).

        Raises
        ------
        ValueError
            If the frame does not hold exactly ``frame_size`` samples per
            channel.
        """
        mono = make_mono(frame, self.props.channel_count)
        if mono.shape[0] != self.props.frame_size:
            raise ValueError(
                f"expected {self.props.frame_size} samples per channel, got {mono.shape[0]}"
            )
        self._frame[:] = mono
        self._down_sample_frame()

        self.num_samples_since_last_calculation += self.props.frame_size
        if self.num_samples_since_last_calculation >= self.chroma_calculation_interval:
            self.calculate_chromagram()
            self.num_samples_since_last_calculation = 0
        return self.chromagram

    def is_ready(self) -> bool:
        """Whether at least one chromagram has been calculated."""
        return self._ready

    def calculate_chromagram(self) -> np.ndarray:
        """Fold the current window's spectrum into :attr:`chromagram`."""
        self._calculate_magnitude_spectrum()

        spectrum = self.magnitude_spectrum
        for n, note_ranges in enumerate(self._search):
            chroma_sum = 0.0
            for lo, hi, harmonic in note_ranges:
                chroma_sum += spectrum[lo:hi].max() / harmonic
            self.chromagram[n] = chroma_sum

        self._ready = True
        return self.chromagram

    def reset(self) -> None:
        """Forget all audio; the latest chromagram and ready flag stay."""
        self.buffer.reset()
        self._filter_state.fill(0.0)
        self.num_samples_since_last_calculation = 0

    def _calculate_magnitude_spectrum(self) -> None:
        np.multiply(self.buffer.data, HAMMING_WINDOW, out=self._windowed)
        fft_out = np.fft.rfft(self._windowed)
        np.sqrt(np.abs(fft_out), out=self.magnitude_spectrum)

    def _down_sample_frame(self) -> None:
        filtered, self._filter_state = lfilter(
            _LOWPASS_B, _LOWPASS_A, self._frame, zi=self._filter_state
        )
        self.buffer.push(filtered[:: self.props.down_sampling_factor])

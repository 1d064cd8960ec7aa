"""
chord_detection
~~~~~~~~~~~~~~~

Real-time note/chord features from PCM audio and a trainable classifier.

Quick-start::

    import chord_detection as cd

    # Per-note energy over a sliding window
    ggram = cd.Gromagram(cd.GromagramConfig(start_note=cd.A1, notes_count=24))
    for frame in frames:
        ggram.process_audio_frame(frame)
        energies = ggram.gromagram

    # 12-bin chroma from a windowed FFT
    chroma = cd.Chromagram(cd.ChromagramConfig(frame_size=512))
    chroma.process_audio_frame(frame)
    if chroma.is_ready():
        print(chroma.chromagram)

    # Classifier
    detector = cd.ChordDetector(ggram, labels=["A", "D", "E"])
    detector.train(cd.load_pcm16("a.wav"), "A")
    ...
    detector.finish_training()
    label = detector.detect(detector.extract_features(window))

Subpackages
-----------
analysis  Gromagram and chromagram analyzers.
dsp       Goertzel estimator, sample buffers, down-mixing, spectra.
models    Gaussian naive Bayes.
data      Audio loading, frame slicing, labelled clip datasets.
theory    MIDI note numbers and pitch-class names.
"""

from __future__ import annotations

import logging

__version__: str = "0.1.0"

# ── Core pipeline ────────────────────────────────────────────────────
from chord_detection.core import predict, stream_chromagram, stream_gromagram

# ── Analyzers ────────────────────────────────────────────────────────
from chord_detection.analysis import Chromagram, ChromagramConfig, Gromagram, GromagramConfig

# ── Classifier ───────────────────────────────────────────────────────
from chord_detection.detector import ChordDetector
from chord_detection.models.naive_bayes import GaussianNaiveBayes

# ── DSP ──────────────────────────────────────────────────────────────
from chord_detection.dsp import (
    CircularBuffer,
    GoertzelParameters,
    calculate_spectrum,
    goertzel_mag,
    make_mono,
)

# ── Data ─────────────────────────────────────────────────────────────
from chord_detection.data import LabeledClipDataset, fit_detector, iter_frames, load_pcm16

# ── Theory ───────────────────────────────────────────────────────────
from chord_detection.theory import A1, A2, A4, C4, E2, PITCH_CLASS_NAMES, note_name, note_to_hz

# ── Errors ───────────────────────────────────────────────────────────
from chord_detection.errors import (
    ChordDetectionError,
    ConfigurationError,
    NotTrainedError,
    UnknownLabelError,
)

# ── Config (re-export constants for convenience) ─────────────────────
from chord_detection.config import CONFIDENCE_THRESHOLD, SR

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__: list[str] = [
    # pipeline
    "predict",
    "stream_chromagram",
    "stream_gromagram",
    # analyzers
    "Chromagram",
    "ChromagramConfig",
    "Gromagram",
    "GromagramConfig",
    # classifier
    "ChordDetector",
    "GaussianNaiveBayes",
    # dsp
    "CircularBuffer",
    "GoertzelParameters",
    "calculate_spectrum",
    "goertzel_mag",
    "make_mono",
    # data
    "LabeledClipDataset",
    "fit_detector",
    "iter_frames",
    "load_pcm16",
    # theory
    "A1",
    "A2",
    "A4",
    "C4",
    "E2",
    "PITCH_CLASS_NAMES",
    "note_name",
    "note_to_hz",
    # errors
    "ChordDetectionError",
    "ConfigurationError",
    "NotTrainedError",
    "UnknownLabelError",
    # config
    "CONFIDENCE_THRESHOLD",
    "SR",
]

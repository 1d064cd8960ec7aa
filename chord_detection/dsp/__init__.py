"""chord_detection.dsp — Goertzel estimator, sample buffers and spectrum helpers."""

from chord_detection.dsp.buffer import CircularBuffer, ShiftBuffer
from chord_detection.dsp.goertzel import Goertzel, GoertzelParameters, goertzel_mag
from chord_detection.dsp.mixing import make_mono
from chord_detection.dsp.spectrum import calculate_spectrum, hamming_window

__all__: list[str] = [
    "CircularBuffer",
    "ShiftBuffer",
    "Goertzel",
    "GoertzelParameters",
    "goertzel_mag",
    "make_mono",
    "calculate_spectrum",
    "hamming_window",
]

"""chord_detection.theory — MIDI note numbers and pitch-class names."""

from chord_detection.theory.notes import (
    A1,
    A2,
    A4,
    C4,
    E2,
    PITCH_CLASS_NAMES,
    note_name,
    note_number,
    note_to_hz,
    pitch_class,
)

__all__: list[str] = [
    "A1",
    "A2",
    "A4",
    "C4",
    "E2",
    "PITCH_CLASS_NAMES",
    "note_name",
    "note_number",
    "note_to_hz",
    "pitch_class",
]

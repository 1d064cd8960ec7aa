"""chord_detection.analysis — Gromagram and chromagram feature extractors."""

from chord_detection.analysis.chromagram import Chromagram, ChromagramConfig
from chord_detection.analysis.gromagram import Gromagram, GromagramConfig

__all__: list[str] = [
    "Chromagram",
    "ChromagramConfig",
    "Gromagram",
    "GromagramConfig",
]

"""chord_detection.data — Clip loading, frame slicing and labelled datasets."""

from chord_detection.data.dataset import LabeledClipDataset, fit_detector
from chord_detection.data.preprocess import get_frame_times, iter_frames, load_pcm16

__all__: list[str] = [
    "LabeledClipDataset",
    "fit_detector",
    "get_frame_times",
    "iter_frames",
    "load_pcm16",
]

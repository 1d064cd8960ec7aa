"""
chord_detection.errors
~~~~~~~~~~~~~~~~~~~~~~

Exception hierarchy shared by the analyzers and the classifier.
"""

from __future__ import annotations


class ChordDetectionError(Exception):
    """Base class for every error raised by :mod:`chord_detection`."""


class ConfigurationError(ChordDetectionError, ValueError):
    """An analyzer was constructed with parameters it cannot honour."""


class NotTrainedError(ChordDetectionError, RuntimeError):
    """The classifier was queried before ``finish_training`` was called."""


class UnknownLabelError(ChordDetectionError, KeyError):
    """A label outside the closed label set was passed to ``train``."""

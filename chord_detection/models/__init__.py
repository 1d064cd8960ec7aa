"""chord_detection.models — Statistical models fitted on extracted features."""

from chord_detection.models.naive_bayes import GaussianNaiveBayes

__all__: list[str] = ["GaussianNaiveBayes"]

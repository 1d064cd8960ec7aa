"""
Tests for models/naive_bayes.py — closed-form Gaussian naive Bayes.
"""

import numpy as np
import pytest
import torch

from chord_detection.models.naive_bayes import GaussianNaiveBayes


def _clusters(n_per_class: int = 50, seed: int = 0):
    rng = np.random.default_rng(seed)
    a = rng.normal([0.0, 0.0, 1.0], 0.1, size=(n_per_class, 3))
    b = rng.normal([1.0, 1.0, 0.0], 0.1, size=(n_per_class, 3))
    x = torch.from_numpy(np.vstack([a, b]))
    y = torch.zeros(2 * n_per_class, 3, dtype=torch.float64)
    y[:n_per_class, 0] = 1.0
    y[n_per_class:, 1] = 1.0
    return x, y


class TestFit:
    def test_means_and_priors(self):
        x, y = _clusters()
        model = GaussianNaiveBayes(3, 3).fit(x, y)
        assert model.fitted
        np.testing.assert_allclose(model.theta[0].numpy(), x[:50].mean(dim=0).numpy())
        assert model.log_prior[0].item() == pytest.approx(np.log(0.5))
        assert model.class_count.tolist() == [50.0, 50.0, 0.0]

    def test_variances_are_positive(self):
        x, y = _clusters()
        model = GaussianNaiveBayes(3, 3).fit(x, y)
        assert (model.var > 0).all()

    def test_constant_feature_is_smoothed(self):
        x = torch.tensor([[1.0, 0.0], [1.0, 1.0], [1.0, 0.2], [1.0, 0.9]], dtype=torch.float64)
        y = torch.tensor([[1.0, 0.0], [0.0, 1.0], [1.0, 0.0], [0.0, 1.0]], dtype=torch.float64)
        model = GaussianNaiveBayes(2, 2).fit(x, y)
        assert (model.var[:, 0] > 0).all()
        assert torch.isfinite(model(x)).all()

    def test_shape_mismatch_rejected(self):
        x, y = _clusters()
        with pytest.raises(ValueError):
            GaussianNaiveBayes(4, 3).fit(x, y)
        with pytest.raises(ValueError):
            GaussianNaiveBayes(3, 2).fit(x, y)


class TestPredict:
    def test_posteriors_sum_to_one(self):
        x, y = _clusters()
        model = GaussianNaiveBayes(3, 3).fit(x, y)
        probs = model(x)
        assert probs.shape == (100, 3)
        np.testing.assert_allclose(probs.sum(dim=1).numpy(), 1.0)

    def test_separates_clusters(self):
        x, y = _clusters()
        model = GaussianNaiveBayes(3, 3).fit(x, y)
        probs = model(torch.tensor([[0.05, -0.02, 0.97], [0.98, 1.03, 0.01]]))
        assert probs.argmax(dim=1).tolist() == [0, 1]
        assert probs[0, 0] > 0.99

    def test_class_without_examples_never_wins(self):
        x, y = _clusters()
        model = GaussianNaiveBayes(3, 3).fit(x, y)
        assert (model(x)[:, 2] == 0).all()

    def test_single_vector_is_batched(self):
        x, y = _clusters()
        model = GaussianNaiveBayes(3, 3).fit(x, y)
        assert model(x[0]).shape == (1, 3)

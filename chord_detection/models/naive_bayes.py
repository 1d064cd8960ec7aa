"""
chord_detection.models.naive_bayes
~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~

Gaussian naive Bayes over feature vectors, fitted in closed form.
"""

from __future__ import annotations

import math

import torch
import torch.nn as nn

from chord_detection.config import VAR_SMOOTHING


class GaussianNaiveBayes(nn.Module):
    """Per-class, per-feature Gaussian model with class priors.

    Fitted once with :meth:`fit`; the forward pass returns the posterior
    probability of each class.

    Parameters
    ----------
    n_features : int
        Length of each feature vector.
    n_classes : int
        Number of classes (width of the one-hot targets).
    var_smoothing : float
        Fraction of the largest feature variance added to every variance,
        so features that never vary within a class stay usable.
    """

    def __init__(
        self,
        n_features: int,
        n_classes: int,
        var_smoothing: float = VAR_SMOOTHING,
    ) -> None:
        super().__init__()
        self.n_features = n_features
        self.n_classes = n_classes
        self.var_smoothing = var_smoothing

        self.register_buffer("theta", torch.zeros(n_classes, n_features, dtype=torch.float64))
        self.register_buffer("var", torch.ones(n_classes, n_features, dtype=torch.float64))
        self.register_buffer("log_prior", torch.zeros(n_classes, dtype=torch.float64))
        self.register_buffer("class_count", torch.zeros(n_classes, dtype=torch.float64))
        self.fitted = False

    @torch.no_grad()
    def fit(self, inputs: torch.Tensor, targets: torch.Tensor) -> GaussianNaiveBayes:
        """Estimate means, variances and priors in one pass.

        Parameters
        ----------
        inputs : Tensor, shape ``(N, n_features)``
            Feature vectors.
        targets : Tensor, shape ``(N, n_classes)``
            One-hot class encodings.

        Returns
        -------
        GaussianNaiveBayes
            *self*.

        Raises
        ------
        ValueError
            On shape mismatches or an empty batch.
        """
        x = inputs.to(torch.float64)
        y = targets.to(torch.float64)
        if x.ndim != 2 or x.shape[1] != self.n_features:
            raise ValueError(f"inputs must be (N, {self.n_features}), got {tuple(x.shape)}")
        if y.shape != (x.shape[0], self.n_classes):
            raise ValueError(f"targets must be ({x.shape[0]}, {self.n_classes}), got {tuple(y.shape)}")
        if x.shape[0] == 0:
            raise ValueError("cannot fit on an empty batch")

        counts = y.sum(dim=0)
        present = counts > 0
        safe_counts = counts.clamp(min=1.0).unsqueeze(1)

        theta = (y.T @ x) / safe_counts
        var = (y.T @ (x * x)) / safe_counts - theta * theta
        var = var.clamp(min=0.0) + self.var_smoothing * x.var(dim=0, correction=0).max()
        # Classes without examples can never win.
        var[~present] = 1.0
        var = var.clamp(min=torch.finfo(torch.float64).tiny)

        log_prior = torch.full_like(counts, -math.inf)
        log_prior[present] = torch.log(counts[present] / counts.sum())

        self.theta.copy_(theta)
        self.var.copy_(var)
        self.log_prior.copy_(log_prior)
        self.class_count.copy_(counts)
        self.fitted = True
        return self

    def joint_log_likelihood(self, inputs: torch.Tensor) -> torch.Tensor:
        """``log P(c) + sum_i log N(x_i | theta_ci, var_ci)``, shape ``(N, n_classes)``."""
        x = inputs.to(torch.float64)
        if x.ndim == 1:
            x = x.unsqueeze(0)
        diff = x.unsqueeze(1) - self.theta.unsqueeze(0)
        log_norm = -0.5 * torch.log(2.0 * math.pi * self.var).sum(dim=1)
        log_exp = -0.5 * (diff * diff / self.var.unsqueeze(0)).sum(dim=2)
        return self.log_prior + log_norm + log_exp

    def forward(self, inputs: torch.Tensor) -> torch.Tensor:
        """Posterior probabilities, shape ``(N, n_classes)``, rows sum to one."""
        return torch.softmax(self.joint_log_likelihood(inputs), dim=1)

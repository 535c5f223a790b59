"""
Moment diagnostics: empirical vs. true moments, PSD checks and the mean
non-stationarity budget.
"""

from __future__ import annotations

from typing import Dict, Tuple

import numpy as np


def empirical_moments(samples: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
    """
    Sample mean and covariance of a (d, n_samples) epoch.

    Returns:
        mean of shape (d,), covariance of shape (d, d)
    """
    X = np.asarray(samples, dtype=float)
    if X.ndim == 1:
        X = X.reshape(1, -1)
    if X.shape[1] < 2:
        raise ValueError(f"Need at least 2 samples, got {X.shape[1]}")
    mean = np.mean(X, axis=1)
    cov = np.atleast_2d(np.cov(X))
    return mean, cov


def moment_errors(samples: np.ndarray, cov: np.ndarray, mean: np.ndarray) -> Dict[str, float]:
    """
    Distance between the empirical moments of ``samples`` and the true ones.

    ``covariance_error`` is relative in Frobenius norm; ``mean_error`` is the
    Euclidean distance scaled by sqrt(trace(cov)).
    """
    cov = np.asarray(cov, dtype=float)
    mean = np.asarray(mean, dtype=float).reshape(-1)
    emp_mean, emp_cov = empirical_moments(samples)

    if emp_cov.shape != cov.shape:
        raise ValueError(f"Dimension mismatch: samples have covariance {emp_cov.shape}, "
                         f"reference is {cov.shape}")

    scale = np.sqrt(max(np.trace(cov), np.finfo(float).tiny))
    return {
        'covariance_error': float(np.linalg.norm(emp_cov - cov) / np.linalg.norm(cov)),
        'mean_error': float(np.linalg.norm(emp_mean - mean) / scale),
    }


def min_eigenvalue(cov: np.ndarray) -> float:
    cov = np.asarray(cov, dtype=float)
    if cov.size == 0:
        return 0.0
    return float(np.linalg.eigvalsh(0.5 * (cov + cov.T))[0])


def is_psd(cov: np.ndarray, atol: float = 1e-10) -> bool:
    return min_eigenvalue(cov) >= -atol


def nonstationary_log_det(cov: np.ndarray, ds: int) -> float:
    """log det of the n-block cov[ds:, ds:] (0.0 if the block is empty)."""
    block = np.asarray(cov, dtype=float)[ds:, ds:]
    sign, logdet = np.linalg.slogdet(block)
    if sign <= 0 and block.size > 0:
        raise ValueError("Non-stationary block is not positive definite")
    return float(logdet)


def mean_budget(means: np.ndarray, covariances: np.ndarray, ds: int) -> Tuple[float, float]:
    """
    Both sides of the mean non-stationarity budget.

    Args:
        means: (d, n) source means
        covariances: (n, d, d) source covariances

    Returns:
        (sum_i ||mu_i||^2, sum_i |log det(cov_i[ds:, ds:])|)
    """
    means = np.asarray(means, dtype=float)
    covariances = np.asarray(covariances, dtype=float)
    if means.shape[1] != covariances.shape[0]:
        raise ValueError(f"Got {means.shape[1]} means but {covariances.shape[0]} covariances")

    energy = float(np.sum(means ** 2))
    total_log_det = float(sum(abs(nonstationary_log_det(c, ds)) for c in covariances))
    return energy, total_log_det

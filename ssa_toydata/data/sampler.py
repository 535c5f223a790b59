"""
Sampling of the observed epochs.
"""

from __future__ import annotations

import warnings
from typing import List, Sequence

import numpy as np
from tqdm.auto import tqdm

# Eigenvalues above -PSD_RTOL * max|eigenvalue| count as non-negative.
PSD_RTOL = 1e-10


class NumericalDegeneracy(np.linalg.LinAlgError):
    """Raised when a covariance cannot be made positive semi-definite."""


def ensure_psd(cov: np.ndarray, rtol: float = PSD_RTOL) -> np.ndarray:
    """
    Return ``cov`` unchanged if it is numerically PSD, otherwise shift its
    diagonal by the smallest amount that makes it PSD.
    """
    cov = np.asarray(cov, dtype=float)
    if cov.size == 0:
        return cov
    if not np.all(np.isfinite(cov)):
        raise NumericalDegeneracy("Covariance matrix contains non-finite entries")

    sym = 0.5 * (cov + cov.T)
    eigval = np.linalg.eigvalsh(sym)
    tol = rtol * max(1.0, float(np.max(np.abs(eigval))))
    if eigval[0] >= -tol:
        return cov

    shift = -eigval[0] + tol
    warnings.warn(
        f"Covariance matrix is not PSD (min eigenvalue {eigval[0]:.3e}); "
        f"adding {shift:.3e} to the diagonal",
        RuntimeWarning,
    )
    regularised = sym + shift * np.eye(sym.shape[0])
    if np.linalg.eigvalsh(regularised)[0] < -tol:
        raise NumericalDegeneracy(
            f"Diagonal regularisation by {shift:.3e} did not restore positive semi-definiteness"
        )
    return regularised


def sample_epoch(mean: np.ndarray, cov: np.ndarray, n_samples: int, rng: np.random.Generator) -> np.ndarray:
    """
    Draw n_samples vectors from N(mean, cov).

    Returns:
        Array of shape (d, n_samples)
    """
    cov = ensure_psd(cov)
    # eigh tolerates singular covariances (e.g. a collapsed block)
    X = rng.multivariate_normal(mean, cov, size=int(n_samples), method='eigh', check_valid='ignore')
    return X.T


def sample_epochs(
    covariances: np.ndarray,
    means: np.ndarray,
    samples_per_epoch: Sequence[int],
    rng: np.random.Generator,
    progress: bool = False,
) -> List[np.ndarray]:
    """
    Draw the samples of every epoch.

    Args:
        covariances: (n, d, d) observed covariances
        means: (d, n) observed means
        samples_per_epoch: one count per epoch

    Returns:
        List of n arrays, the i-th of shape (d, samples_per_epoch[i])
    """
    n = covariances.shape[0]
    if len(samples_per_epoch) != n:
        raise ValueError(f"Expected {n} sample counts, got {len(samples_per_epoch)}")

    X = []
    for i in tqdm(range(n), desc='Sampling epochs', unit='epoch', disable=not progress):
        X.append(sample_epoch(means[:, i], covariances[i], samples_per_epoch[i], rng))
    return X

"""
Source-space moments of the SSA mixing model.

For epoch i the sources are [X^s; X^n_i] with X^s ~ N(0, I) and
X^n_i = C_i^T X^s + Y^n_i, Y^n_i ~ N(mu_i, Bn diag(E_i) Bn^T), which gives
the block covariance

    [[ I,     C_i                            ],
     [ C_i^T, C_i^T C_i + Bn diag(E_i) Bn^T  ]]
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Tuple

import numpy as np

from .config import ToyDataConfig
from .profile import NonstationarityProfile
from .rotations import random_rotation


@dataclass(frozen=True)
class SourceMoments:
    # (n, d, d)
    covariances: np.ndarray
    # (d, n)
    means: np.ndarray
    # per-epoch (Bs, Bn) bases of the s- and n-subspaces
    bases: List[Tuple[np.ndarray, np.ndarray]]


def cross_covariance_scales(ratios: np.ndarray, corr: float) -> np.ndarray:
    """
    Scale of the cross-covariance per canonical direction.

    With variance ratio e and cross term c, the canonical correlation of that
    direction is c / sqrt(c^2 + e); solving for c at correlation ``corr``
    gives c = sqrt(e / (corr^-2 - 1)). A zero target yields exactly zero.
    """
    ratios = np.asarray(ratios, dtype=float)
    if corr == 0:
        return np.zeros_like(ratios)
    return np.sqrt(ratios / (corr ** -2 - 1.0))


def cross_covariance(scales: np.ndarray, ds: int, dn: int, Bs: np.ndarray, Bn: np.ndarray) -> np.ndarray:
    """
    Cross-covariance block Cov(X^s, X^n) of shape (ds, dn).

    Only the first min(ds, dn) diagonal entries are non-zero; the larger side
    is zero-padded before rotating into the bases Bs and Bn.
    """
    k = min(ds, dn)
    C = np.zeros((ds, dn))
    C[np.arange(k), np.arange(k)] = scales[:k]
    return Bs @ C @ Bn.T


def build_source_covariances(
    config: ToyDataConfig,
    profile: NonstationarityProfile,
    rng: np.random.Generator,
) -> Tuple[np.ndarray, List[Tuple[np.ndarray, np.ndarray]]]:
    """
    Returns:
        covariances of shape (n, d, d) and the per-epoch (Bs, Bn) bases
    """
    ds = config.stationary_dim
    dn = config.nonstationary_dim
    d = config.dim
    n = config.epoch_count

    Bs = np.eye(ds)
    Bn = np.eye(dn)

    covariances = np.tile(np.eye(d), (n, 1, 1))
    bases = []
    for i in range(n):
        if config.randomize_basis:
            Bn = random_rotation(dn, rng)
            Bs = random_rotation(ds, rng)

        E_i = profile.variance_ratios[:, i]
        scales = cross_covariance_scales(E_i[:min(ds, dn)], profile.correlations[i])
        C = cross_covariance(scales, ds, dn, Bs, Bn)

        covariances[i, :ds, ds:] = C
        covariances[i, ds:, :ds] = C.T
        covariances[i, ds:, ds:] = C.T @ C + Bn @ np.diag(E_i) @ Bn.T
        bases.append((Bs, Bn))

    return covariances, bases


def nonstationary_log_dets(covariances: np.ndarray, ds: int) -> np.ndarray:
    """Absolute log-determinant of the n-block of each epoch's covariance."""
    n = covariances.shape[0]
    out = np.zeros(n)
    for i in range(n):
        _, logdet = np.linalg.slogdet(covariances[i, ds:, ds:])
        out[i] = abs(logdet)
    return out


def build_source_means(
    config: ToyDataConfig,
    covariances: np.ndarray,
    rng: np.random.Generator,
) -> np.ndarray:
    """
    Epoch means of the sources, shape (d, n).

    The s-part is zero. The n-part has random entries in [-0.5, 0.5] and is
    rescaled so that sum_i ||mu_i||^2 equals
    mean_nonstationarity * sum_i |log det(cov_i[ds:, ds:])|, split over
    epochs by normalised uniform weights.
    """
    ds = config.stationary_dim
    dn = config.nonstationary_dim
    n = config.epoch_count

    mean_n = rng.random((dn, n)) - 0.5
    weights = rng.random(n)

    if dn == 0 or config.mean_nonstationarity == 0:
        mean_n = np.zeros((dn, n))
    else:
        budget = config.mean_nonstationarity * np.sum(nonstationary_log_dets(covariances, ds))
        shares = weights / np.sum(weights) * budget
        mean_n = mean_n * np.sqrt(shares / np.sum(mean_n ** 2, axis=0))

    return np.vstack([np.zeros((ds, n)), mean_n])


def build_source_moments(
    config: ToyDataConfig,
    profile: NonstationarityProfile,
    rng: np.random.Generator,
) -> SourceMoments:
    # Means need the log-determinants of every epoch, so all covariances come first.
    covariances, bases = build_source_covariances(config, profile, rng)
    means = build_source_means(config, covariances, rng)
    return SourceMoments(covariances=covariances, means=means, bases=bases)

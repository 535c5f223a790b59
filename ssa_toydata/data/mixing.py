"""
Mixing matrix and the map from source moments to observed moments.
"""

from typing import Tuple

import numpy as np

from .rotations import random_rotation


def build_mixing_matrix(d: int, orthogonal: bool, rng: np.random.Generator) -> np.ndarray:
    """
    Random d x d mixing matrix.

    Either a random rotation, or i.i.d. entries uniform on [-0.5, 0.5] with
    every column normalised to unit Euclidean norm.
    """
    if orthogonal:
        return random_rotation(d, rng)

    A = rng.random((d, d)) - 0.5
    return A / np.linalg.norm(A, axis=0, keepdims=True)


def transform_moments(
    mixing: np.ndarray,
    covariances: np.ndarray,
    means: np.ndarray,
) -> Tuple[np.ndarray, np.ndarray]:
    """
    Apply the mixing matrix to source moments.

    Args:
        mixing: (d, d)
        covariances: (n, d, d) source covariances
        means: (d, n) source means

    Returns:
        Observed covariances A S_i A^T of shape (n, d, d) and observed means
        A mu_i of shape (d, n)
    """
    A = np.asarray(mixing, dtype=float)
    cov_epo = np.einsum('ij,njk,lk->nil', A, covariances, A)
    # A S A^T is symmetric in exact arithmetic only
    cov_epo = 0.5 * (cov_epo + np.transpose(cov_epo, (0, 2, 1)))
    mean_epo = A @ means
    return cov_epo, mean_epo

"""
Random orthogonal matrices from the exponential of a skew-symmetric matrix.
"""

import numpy as np
from scipy.linalg import expm


def random_rotation(k: int, rng: np.random.Generator) -> np.ndarray:
    """
    Draw a random k x k orthogonal matrix.

    The generator M has i.i.d. entries uniform on [-50, 50] and is made
    skew-symmetric, M <- (M - M^T) / 2, so that expm(M) is orthogonal.

    Returns:
        Array of shape (k, k)
    """
    if k <= 1:
        return np.eye(k)

    M = 100.0 * (rng.random((k, k)) - 0.5)
    M = 0.5 * (M - M.T)
    return expm(M)

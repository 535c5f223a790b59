"""
Canonical correlations between the stationary and non-stationary blocks of a
covariance matrix.
"""

import numpy as np
from scipy.linalg import cholesky, solve_triangular


def canonical_correlations(cov: np.ndarray, ds: int) -> np.ndarray:
    """
    Canonical correlations between the first ``ds`` and the remaining
    coordinates of a Gaussian with covariance ``cov``, in decreasing order.

    These are the singular values of Ls^-1 S_sn Ln^-T where Ls, Ln are the
    Cholesky factors of the diagonal blocks.

    Returns:
        Array of length min(ds, d - ds)
    """
    cov = np.asarray(cov, dtype=float)
    if cov.ndim != 2 or cov.shape[0] != cov.shape[1]:
        raise ValueError(f"Covariance must be a square matrix, got shape {cov.shape}")
    d = cov.shape[0]
    if not 0 <= ds <= d:
        raise ValueError(f"ds must be in [0, {d}], got {ds}")
    if ds == 0 or ds == d:
        return np.zeros(0)

    Ls = cholesky(cov[:ds, :ds], lower=True)
    Ln = cholesky(cov[ds:, ds:], lower=True)
    M = solve_triangular(Ls, cov[:ds, ds:], lower=True)
    M = solve_triangular(Ln, M.T, lower=True).T
    return np.linalg.svd(M, compute_uv=False)


def leading_canonical_correlation(cov: np.ndarray, ds: int) -> float:
    rho = canonical_correlations(cov, ds)
    if rho.size == 0:
        return 0.0
    return float(rho[0])

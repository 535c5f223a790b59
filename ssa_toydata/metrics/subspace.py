"""
Subspace errors for scoring an SSA estimate against the true mixing matrix.
"""

from __future__ import annotations

import numpy as np
from scipy.linalg import subspace_angles


def subspace_angle(estimated: np.ndarray, reference: np.ndarray, degrees: bool = True) -> float:
    """
    Largest principal angle between span(estimated) and span(reference).

    Both arguments are (d, k) bases with basis vectors as columns.
    """
    estimated = np.asarray(estimated, dtype=float)
    reference = np.asarray(reference, dtype=float)
    if estimated.ndim == 1:
        estimated = estimated.reshape(-1, 1)
    if reference.ndim == 1:
        reference = reference.reshape(-1, 1)

    if estimated.shape[0] != reference.shape[0]:
        raise ValueError(f"Dimension mismatch: estimated has {estimated.shape[0]} rows, "
                         f"reference has {reference.shape[0]} rows")
    if estimated.shape[1] == 0 or reference.shape[1] == 0:
        return 0.0

    theta = float(np.max(subspace_angles(estimated, reference)))
    return float(np.degrees(theta)) if degrees else theta


def nonstationary_subspace_error(estimated: np.ndarray, mixing: np.ndarray, ds: int, degrees: bool = True) -> float:
    """Angle between an estimated n-subspace basis and the columns A[:, ds:]."""
    return subspace_angle(estimated, np.asarray(mixing)[:, ds:], degrees=degrees)


def stationary_subspace_error(estimated: np.ndarray, mixing: np.ndarray, ds: int, degrees: bool = True) -> float:
    """Angle between an estimated s-subspace basis and the columns A[:, :ds]."""
    return subspace_angle(estimated, np.asarray(mixing)[:, :ds], degrees=degrees)

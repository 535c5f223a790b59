"""
Diagnostics of a generated dataset against its own ground truth: achieved
canonical correlations, PSD-ness, mixing properties, the mean budget and the
distance between empirical and true epoch moments.
"""

from __future__ import annotations

from typing import Dict, List, Optional

import numpy as np

from .data import GroundTruth
from .metrics import (
    leading_canonical_correlation,
    mean_budget,
    min_eigenvalue,
    moment_errors,
)


def compute_ground_truth_metrics(
    ground_truth: GroundTruth,
    samples: Optional[List[np.ndarray]] = None,
) -> Dict[str, float]:
    cfg = ground_truth.config
    ds = cfg.stationary_dim
    d = cfg.dim
    A = ground_truth.mixing

    results: Dict[str, float] = {}

    if ds > 0 and cfg.nonstationary_dim > 0:
        achieved = np.array([
            leading_canonical_correlation(S, ds) for S in ground_truth.sources.covariances
        ])
        results['max_canonical_correlation_error'] = float(
            np.max(np.abs(achieved - ground_truth.profile.correlations))
        )
        results['mean_canonical_correlation'] = float(np.mean(achieved))

    results['min_observed_eigenvalue'] = float(min(min_eigenvalue(C) for C in ground_truth.covariances))
    results['max_symmetry_error'] = float(max(
        np.max(np.abs(C - C.T)) for C in ground_truth.covariances
    ))

    if cfg.orthogonal_mixing:
        results['mixing_orthogonality_error'] = float(np.max(np.abs(A @ A.T - np.eye(d))))
    else:
        results['mixing_column_norm_error'] = float(np.max(np.abs(np.linalg.norm(A, axis=0) - 1.0)))

    energy, total_log_det = mean_budget(ground_truth.sources.means, ground_truth.sources.covariances, ds)
    results['mean_energy'] = energy
    results['total_abs_log_det'] = total_log_det
    if total_log_det > 0:
        results['mean_budget_ratio'] = energy / total_log_det

    if samples is not None:
        cov_err = []
        mean_err = []
        for i, X in enumerate(samples):
            if X.shape[1] < 2:
                continue
            errs = moment_errors(X, ground_truth.covariances[i], ground_truth.means[:, i])
            cov_err.append(errs['covariance_error'])
            mean_err.append(errs['mean_error'])
    if samples is not None and cov_err:
        results['mean_covariance_error'] = float(np.mean(cov_err))
        results['max_covariance_error'] = float(np.max(cov_err))
        results['mean_mean_error'] = float(np.mean(mean_err))
        results['max_mean_error'] = float(np.max(mean_err))

    return results

"""
Evaluation metrics for SSA toy data and SSA estimates.
"""

from .canonical import canonical_correlations, leading_canonical_correlation
from .subspace import subspace_angle, nonstationary_subspace_error, stationary_subspace_error
from .moments import (
    empirical_moments,
    moment_errors,
    min_eigenvalue,
    is_psd,
    nonstationary_log_det,
    mean_budget,
)

__all__ = [
    'canonical_correlations',
    'leading_canonical_correlation',
    'subspace_angle',
    'nonstationary_subspace_error',
    'stationary_subspace_error',
    'empirical_moments',
    'moment_errors',
    'min_eigenvalue',
    'is_psd',
    'nonstationary_log_det',
    'mean_budget',
]

"""
Per-epoch non-stationarity profile: variance ratios of the n-sources and
target canonical correlations between s- and n-sources.
"""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from .config import ToyDataConfig


@dataclass(frozen=True)
class NonstationarityProfile:
    # (dn, n): variance ratio of n-source j in epoch i
    variance_ratios: np.ndarray
    # (n,): target leading canonical correlation of epoch i
    correlations: np.ndarray


def sample_nonstationarity_profile(config: ToyDataConfig, rng: np.random.Generator) -> NonstationarityProfile:
    """
    Sample variance ratios and canonical-correlation targets.

    Log-ratios are uniform on [log(v_min), log(v_max)]; each one keeps its
    sign with probability ``prob_variance_larger`` and is negated otherwise,
    so the ratios are uniform on [v_min, v_max] or on [1/v_max, 1/v_min].
    """
    dn = config.nonstationary_dim
    n = config.epoch_count

    log_min = np.log(config.variance_ratio_min)
    log_max = np.log(config.variance_ratio_max)
    E = log_min + (log_max - log_min) * rng.random((dn, n))

    flip = rng.random((dn, n)) > config.prob_variance_larger
    E[flip] = -E[flip]
    E = np.exp(E)

    corrs = config.correlation_min + (config.correlation_max - config.correlation_min) * rng.random(n)

    return NonstationarityProfile(variance_ratios=E, correlations=corrs)

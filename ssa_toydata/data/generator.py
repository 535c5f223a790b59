"""
Toy data for Stationary Subspace Analysis.

Each epoch X_i is a mixture of stationary and non-stationary sources,

    X_i = A [X^s; X^n_i],

with X^s ~ N(0, I) fixed across epochs and X^n_i = C_i^T X^s + Y^n_i
correlated with the s-sources. The canonical correlation between X^s and
X^n_i is drawn from [correlation_min, correlation_max]; the conditional
covariance of Y^n_i has eigenvalues that are either larger or smaller than
one by a ratio uniform on [variance_ratio_min, variance_ratio_max]; the means
of Y^n_i carry a share of non-stationarity proportional to the total
log-determinant change of the n-block, scaled by mean_nonstationarity.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, List, NamedTuple, Optional

import numpy as np

from .config import ToyDataConfig, config_from_dict
from .mixing import build_mixing_matrix, transform_moments
from .moments import SourceMoments, build_source_moments
from .profile import NonstationarityProfile, sample_nonstationarity_profile
from .sampler import sample_epochs


class ToyDataset(NamedTuple):
    # n arrays of shape (d, samples_per_epoch[i])
    samples: List[np.ndarray]
    # (d, d)
    mixing: np.ndarray
    # (n, d, d)
    covariances: np.ndarray
    # (d, n)
    means: np.ndarray


@dataclass(frozen=True)
class GroundTruth:
    config: ToyDataConfig
    profile: NonstationarityProfile
    sources: SourceMoments
    mixing: np.ndarray
    covariances: np.ndarray
    means: np.ndarray


class SSAToyDataGenerator:

    def __init__(
        self,
        config: ToyDataConfig,
        seed: Optional[int] = None,
        rng: Optional[np.random.Generator] = None,
        progress: bool = False,
    ):
        """
        Initialise the generator.

        Pass either ``seed`` or an existing ``rng``; all random draws come
        from that single source so a fixed seed reproduces the output.
        """
        if seed is not None and rng is not None:
            raise ValueError("Provide either seed or rng, not both")
        self.config = config
        self.rng = rng if rng is not None else np.random.default_rng(seed)
        self.progress = progress
        self.ground_truth: Optional[GroundTruth] = None

    def generate_model(self) -> GroundTruth:
        """Draw the mixing model and the per-epoch moments, without samples."""
        cfg = self.config
        profile = sample_nonstationarity_profile(cfg, self.rng)
        sources = build_source_moments(cfg, profile, self.rng)
        A = build_mixing_matrix(cfg.dim, cfg.orthogonal_mixing, self.rng)
        cov_epo, mean_epo = transform_moments(A, sources.covariances, sources.means)
        return GroundTruth(
            config=cfg,
            profile=profile,
            sources=sources,
            mixing=A,
            covariances=cov_epo,
            means=mean_epo,
        )

    def sample(self, ground_truth: GroundTruth) -> List[np.ndarray]:
        return sample_epochs(
            ground_truth.covariances,
            ground_truth.means,
            self.config.samples_per_epoch,
            self.rng,
            progress=self.progress,
        )

    def generate(self) -> ToyDataset:
        gt = self.generate_model()
        X = self.sample(gt)
        self.ground_truth = gt
        return ToyDataset(samples=X, mixing=gt.mixing, covariances=gt.covariances, means=gt.means)


def ssa_toydata(n: int, ds: int, dn: int, seed: Optional[int] = None, **options: Any) -> ToyDataset:
    """
    Generate toy data for SSA.

    Example:
        X, A, cov_epo, mean_epo = ssa_toydata(10, 2, 2, seed=0)

    Options are ToyDataConfig fields or their short names (n_samples, v_min,
    v_max, corr_min, corr_max, p_nv_larger, rand_ndir, orth_mixing,
    mean_nonstat).
    """
    config = config_from_dict(options, epoch_count=n, stationary_dim=ds, nonstationary_dim=dn)
    return SSAToyDataGenerator(config, seed=seed).generate()

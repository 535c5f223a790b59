"""
Data generation module for SSA toy data.

Provides:
1. Configuration and validation of the mixing model
2. Per-epoch source moments with controlled canonical correlation and
   non-stationarity in covariance and mean
3. Random mixing and Gaussian sampling of the observed epochs
"""

from .config import (
    InvalidConfiguration,
    ToyDataConfig,
    config_from_dict,
    validate_config,
)
from .generator import GroundTruth, SSAToyDataGenerator, ToyDataset, ssa_toydata
from .mixing import build_mixing_matrix, transform_moments
from .moments import (
    SourceMoments,
    build_source_covariances,
    build_source_means,
    build_source_moments,
    cross_covariance,
    cross_covariance_scales,
)
from .profile import NonstationarityProfile, sample_nonstationarity_profile
from .rotations import random_rotation
from .sampler import NumericalDegeneracy, ensure_psd, sample_epochs

__all__ = [
    'InvalidConfiguration',
    'ToyDataConfig',
    'config_from_dict',
    'validate_config',
    'GroundTruth',
    'SSAToyDataGenerator',
    'ToyDataset',
    'ssa_toydata',
    'build_mixing_matrix',
    'transform_moments',
    'SourceMoments',
    'build_source_covariances',
    'build_source_means',
    'build_source_moments',
    'cross_covariance',
    'cross_covariance_scales',
    'NonstationarityProfile',
    'sample_nonstationarity_profile',
    'random_rotation',
    'NumericalDegeneracy',
    'ensure_psd',
    'sample_epochs',
]

"""
Toy data for Stationary Subspace Analysis.

This package contains:
- data/: the SSA mixing model and the per-epoch Gaussian sampler
- metrics/: canonical correlations, subspace errors and moment diagnostics
"""

from . import metrics
from . import data
from .data import ToyDataConfig, SSAToyDataGenerator, ToyDataset, ssa_toydata

__all__ = ['metrics', 'data', 'ToyDataConfig', 'SSAToyDataGenerator', 'ToyDataset', 'ssa_toydata']

"""
Visualisation utilities for saved SSA toy datasets.
"""

from __future__ import annotations

import os
from typing import Dict, List, Optional

import numpy as np
import matplotlib.pyplot as plt

from .metrics import nonstationary_log_det


def _ensure_dir(path: str) -> None:
    os.makedirs(path, exist_ok=True)


def _load_run_arrays(run_dir: str) -> Dict[str, np.ndarray]:
    path = os.path.join(run_dir, 'dataset.npz')
    if not os.path.exists(path):
        raise FileNotFoundError(f"Missing required arrays in {run_dir}. Expected 'dataset.npz'")
    with np.load(path) as data:
        return {k: data[k] for k in data.files}


def _epoch_samples(arrays: Dict[str, np.ndarray]) -> List[np.ndarray]:
    keys = sorted(k for k in arrays if k.startswith('X_'))
    return [arrays[k] for k in keys]


def _set_pub_style() -> None:
    plt.rcParams.update({
        'figure.dpi': 300,
        'savefig.dpi': 300,
        'font.size': 12,
        'font.family': 'serif',
        'font.serif': ['Times New Roman', 'Times', 'STIX', 'DejaVu Serif'],
        'mathtext.fontset': 'stix',
        'axes.titlesize': 13,
        'axes.labelsize': 12,
        'legend.fontsize': 11,
        'xtick.labelsize': 11,
        'ytick.labelsize': 11,
        'axes.spines.top': False,
        'axes.spines.right': False,
        'axes.grid': False,
    })


def _save(fig, out_base: str) -> None:
    fig.tight_layout()
    fig.savefig(out_base + '.png')
    fig.savefig(out_base + '.pdf')
    plt.close(fig)


def plot_variance_ratios(ax, variance_ratios: np.ndarray) -> None:
    dn, n = variance_ratios.shape
    epochs = np.arange(1, n + 1)
    for j in range(dn):
        ax.plot(epochs, variance_ratios[j], marker='o', linewidth=1.2, markersize=4, label=f'n-source {j + 1}')
    ax.axhline(1.0, color='0.4', linestyle='--', linewidth=0.8)
    ax.set_yscale('log')
    ax.set_xlabel('Epoch')
    ax.set_ylabel('Variance ratio')
    if dn > 0:
        ax.legend(frameon=True, framealpha=0.9, fancybox=False, loc='best')
    ax.grid(True, alpha=0.15, linestyle='--', linewidth=0.6)


def plot_nonstationarity(ax, source_covariances: np.ndarray, source_means: np.ndarray, ds: int) -> None:
    n = source_covariances.shape[0]
    epochs = np.arange(1, n + 1)
    log_dets = np.array([abs(nonstationary_log_det(S, ds)) for S in source_covariances])
    mean_sq = np.sum(source_means ** 2, axis=0)

    width = 0.4
    ax.bar(epochs - width / 2, log_dets, width=width, color='#1f77b4', alpha=0.7, label='|log det| (n-block)')
    ax.bar(epochs + width / 2, mean_sq, width=width, color='#d62728', alpha=0.7, label='squared mean norm')
    ax.set_xlabel('Epoch')
    ax.legend(frameon=True, framealpha=0.9, fancybox=False, loc='best')
    ax.grid(True, alpha=0.15, linestyle='--', linewidth=0.6)


def plot_epoch_scatter(ax, samples: List[np.ndarray], max_points: int = 200) -> None:
    cmap = plt.get_cmap('viridis', max(len(samples), 1))
    for i, X in enumerate(samples):
        pts = X[:, :max_points]
        if X.shape[0] >= 2:
            ax.scatter(pts[0], pts[1], s=4, alpha=0.5, color=cmap(i))
        else:
            ax.scatter(pts[0], np.full(pts.shape[1], i + 1), s=4, alpha=0.5, color=cmap(i))
    ax.set_xlabel(r'$x_1$')
    ax.set_ylabel(r'$x_2$' if samples and samples[0].shape[0] >= 2 else 'Epoch')
    ax.grid(True, alpha=0.15, linestyle='--', linewidth=0.6)


def visualise_single_run(run_dir: str) -> None:
    figures_dir = os.path.join(run_dir, 'figures')
    _ensure_dir(figures_dir)

    arrays = _load_run_arrays(run_dir)
    ds = int(arrays['stationary_dim'])

    _set_pub_style()

    fig, ax = plt.subplots(figsize=(6.5, 4.0))
    plot_variance_ratios(ax, arrays['variance_ratios'])
    ax.set_title('Variance Ratios of the Non-stationary Sources')
    _save(fig, os.path.join(figures_dir, 'variance_ratios'))

    fig, ax = plt.subplots(figsize=(6.5, 4.0))
    plot_nonstationarity(ax, arrays['source_covariances'], arrays['source_means'], ds)
    ax.set_title('Non-stationarity per Epoch')
    _save(fig, os.path.join(figures_dir, 'nonstationarity'))

    fig, ax = plt.subplots(figsize=(6.5, 4.0))
    plot_epoch_scatter(ax, _epoch_samples(arrays))
    ax.set_title('Observed Samples by Epoch')
    _save(fig, os.path.join(figures_dir, 'epoch_scatter'))


def visualise_parent_batch(parent_dir: str, n_runs: Optional[int] = None) -> None:
    run_dirs = [os.path.join(parent_dir, d) for d in os.listdir(parent_dir) if d.startswith('run_')]
    run_dirs = sorted(run_dirs)
    if n_runs is not None:
        run_dirs = run_dirs[: int(n_runs)]
    for rd in run_dirs:
        try:
            visualise_single_run(rd)
        except Exception as e:
            print(f"[visualise_parent_batch] Skipping {rd}: {e}")


__all__ = [
    'visualise_single_run',
    'visualise_parent_batch',
]

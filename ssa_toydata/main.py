"""
Main entry point for generating SSA toy datasets from a YAML config.
"""

from __future__ import annotations

import argparse
import json
import os
import sys
from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple

import numpy as np
import yaml
from tqdm.auto import tqdm

from .data import GroundTruth, SSAToyDataGenerator, ToyDataConfig, ToyDataset, config_from_dict
from .ground_truth import compute_ground_truth_metrics
from .visualise import visualise_parent_batch, visualise_single_run


def _ensure_dir(path: str) -> None:
    os.makedirs(path, exist_ok=True)


def _load_config(cfg_path: str) -> Dict[str, Any]:
    with open(cfg_path, 'r') as f:
        return yaml.safe_load(f) or {}


def _output_root(cfg: Dict[str, Any], cfg_path: str) -> str:
    out = cfg.get('output_dir')
    if out is None:
        out = os.path.join(os.path.dirname(cfg_path), '..', 'results')
    elif not os.path.isabs(out):
        out = os.path.join(os.path.dirname(cfg_path), out)
    return os.path.abspath(out)


def _build_config(cfg: Dict[str, Any]) -> ToyDataConfig:
    return config_from_dict(cfg.get('data', {}) or {})


def _save_dataset(out_dir: str, dataset: ToyDataset, gt: GroundTruth) -> None:
    arrays = {
        'mixing': dataset.mixing,
        'covariances': dataset.covariances,
        'means': dataset.means,
        'source_covariances': gt.sources.covariances,
        'source_means': gt.sources.means,
        'variance_ratios': gt.profile.variance_ratios,
        'correlations': gt.profile.correlations,
        'stationary_dim': np.array(gt.config.stationary_dim),
    }
    for i, X in enumerate(dataset.samples):
        arrays[f'X_{i:03d}'] = X
    np.savez(os.path.join(out_dir, 'dataset.npz'), **arrays)


def _summary_lines(
    exp_name: str,
    timestamp: str,
    seed: int,
    config: ToyDataConfig,
    metrics: Dict[str, float],
) -> List[str]:
    lines = [
        f"Experiment: {exp_name}",
        f"Timestamp: {timestamp}",
        f"Seed: {seed}",
        f"Epochs: {config.epoch_count}",
        f"Dimension: {config.dim} (stationary {config.stationary_dim}, non-stationary {config.nonstationary_dim})",
        f"Samples per epoch: {min(config.samples_per_epoch)}-{max(config.samples_per_epoch)}",
        f"Mixing: {'orthogonal' if config.orthogonal_mixing else 'random, unit-norm columns'}",
        "",
        "Ground-truth diagnostics:",
    ]
    for k, v in metrics.items():
        lines.append(f"  - {k}: {v:.6g}")
    return lines


def _generate(config: ToyDataConfig, seed: int, progress: bool) -> Tuple[ToyDataset, GroundTruth, Dict[str, float]]:
    gen = SSAToyDataGenerator(config, seed=seed, progress=progress)
    dataset = gen.generate()
    metrics = compute_ground_truth_metrics(gen.ground_truth, dataset.samples)
    return dataset, gen.ground_truth, metrics


def run_experiment(cfg_path: str, seed: Optional[int] = None) -> str:
    cfg = _load_config(cfg_path)

    seed = int(cfg.get('seed', 42)) if seed is None else int(seed)
    config = _build_config(cfg)
    dataset, gt, metrics = _generate(config, seed, progress=bool(cfg.get('progress', True)))

    exp_name = cfg.get('experiment_name', 'ssa_toydata')
    timestamp = datetime.now().strftime('%Y%m%d_%H%M%S')
    out_dir = os.path.join(_output_root(cfg, cfg_path), f"{exp_name}_{timestamp}")
    _ensure_dir(out_dir)

    cfg_used = dict(cfg)
    cfg_used['seed'] = seed
    cfg_used['data'] = config.to_dict()
    with open(os.path.join(out_dir, 'config_used.yaml'), 'w') as f:
        yaml.safe_dump(cfg_used, f, sort_keys=False)

    _save_dataset(out_dir, dataset, gt)

    results: Dict[str, Any] = {
        'experiment_name': exp_name,
        'seed': seed,
        'timestamp': timestamp,
        'config': config.to_dict(),
        'metrics': metrics,
        'notes': 'Diagnostics compare the generated data with its own generating model.',
    }
    with open(os.path.join(out_dir, 'results.json'), 'w') as f:
        json.dump(results, f, indent=2)

    lines = _summary_lines(exp_name, timestamp, seed, config, metrics)
    with open(os.path.join(out_dir, 'summary.txt'), 'w') as f:
        f.write('\n'.join(lines) + '\n')

    print('\n'.join(lines))
    print(f"\nSaved outputs to: {out_dir}")

    if bool(cfg.get('visualise', True)):
        try:
            visualise_single_run(out_dir)
        except Exception as e:
            print(f"[visualise] Failed to generate figures for {out_dir}: {e}")
    return out_dir


def _aggregate(stats_list: List[Dict[str, float]]) -> Tuple[Dict[str, float], Dict[str, float]]:
    if not stats_list:
        return {}, {}
    keys = sorted({k for dct in stats_list for k in dct.keys()})
    means: Dict[str, float] = {}
    stds: Dict[str, float] = {}
    for k in keys:
        vals = np.array([dct[k] for dct in stats_list if k in dct], dtype=float)
        if vals.size == 0:
            continue
        means[k] = float(np.mean(vals))
        stds[k] = float(np.std(vals, ddof=1)) if vals.size > 1 else 0.0
    return means, stds


def run_multi(cfg_path: str, n_runs: int, seed: Optional[int] = None) -> str:
    cfg = _load_config(cfg_path)

    base_seed = int(cfg.get('seed', 42)) if seed is None else int(seed)
    exp_name = cfg.get('experiment_name', 'ssa_toydata')
    timestamp = datetime.now().strftime('%Y%m%d_%H%M%S')
    config = _build_config(cfg)

    parent_dir = os.path.join(_output_root(cfg, cfg_path), f"{exp_name}_multi_{timestamp}")
    _ensure_dir(parent_dir)

    with open(os.path.join(parent_dir, 'config_used.yaml'), 'w') as f:
        yaml.safe_dump(dict(cfg, data=config.to_dict()), f, sort_keys=False)

    per_run_metrics: List[Dict[str, float]] = []
    run_seeds: List[int] = []

    for run_idx in tqdm(range(int(n_runs)), desc='Runs', unit='run'):
        run_seed = base_seed + run_idx
        run_seeds.append(run_seed)
        dataset, gt, metrics = _generate(config, run_seed, progress=False)
        per_run_metrics.append(metrics)

        out_dir_run = os.path.join(parent_dir, f"run_{run_idx:03d}")
        _ensure_dir(out_dir_run)

        cfg_with_run = dict(cfg, data=config.to_dict())
        cfg_with_run['seed'] = run_seed
        cfg_with_run['run_index'] = run_idx
        with open(os.path.join(out_dir_run, 'config_used.yaml'), 'w') as f:
            yaml.safe_dump(cfg_with_run, f, sort_keys=False)

        with open(os.path.join(out_dir_run, 'results.json'), 'w') as f:
            json.dump({
                'experiment_name': exp_name,
                'seed': run_seed,
                'timestamp_batch': timestamp,
                'run_index': run_idx,
                'metrics': metrics,
            }, f, indent=2)

        lines = _summary_lines(exp_name, timestamp, run_seed, config, metrics)
        with open(os.path.join(out_dir_run, 'summary.txt'), 'w') as f:
            f.write('\n'.join(lines) + '\n')

        _save_dataset(out_dir_run, dataset, gt)

    if bool(cfg.get('visualise', True)):
        visualise_parent_batch(parent_dir)

    mean_metrics, std_metrics = _aggregate(per_run_metrics)
    aggregate: Dict[str, Any] = {
        'experiment_name': exp_name,
        'timestamp': timestamp,
        'n_runs': int(n_runs),
        'base_seed': base_seed,
        'run_seeds': run_seeds,
        'config': config.to_dict(),
        'metrics': {
            'mean': mean_metrics,
            'std': std_metrics,
        },
    }
    with open(os.path.join(parent_dir, 'aggregate_results.json'), 'w') as f:
        json.dump(aggregate, f, indent=2)

    lines = [
        f"Experiment (multi-run): {exp_name}",
        f"Timestamp: {timestamp}",
        f"Runs: {int(n_runs)}",
        f"Base seed: {base_seed}",
        "",
        "Ground-truth diagnostics: mean ± std",
    ]
    for k in sorted(mean_metrics.keys()):
        lines.append(f"  - {k}: {mean_metrics[k]:.6g} ± {std_metrics.get(k, 0.0):.6g}")
    with open(os.path.join(parent_dir, 'summary.txt'), 'w') as f:
        f.write('\n'.join(lines) + '\n')

    print('\n'.join(lines))
    print(f"\nSaved multi-run outputs to: {parent_dir}")
    return parent_dir


def parse_args(argv=None):
    p = argparse.ArgumentParser(description='Generate SSA toy data from config')
    p.add_argument('--config', '-c', type=str, required=True, help='Path to YAML config file')
    p.add_argument('--n_runs', type=int, default=1, help='Number of independent runs with different seeds')
    p.add_argument('--seed', type=int, default=None, help='Override the seed from the config')
    return p.parse_args(argv)


def main(argv=None) -> int:
    args = parse_args(argv)
    if args.n_runs <= 1:
        run_experiment(args.config, seed=args.seed)
    else:
        run_multi(args.config, args.n_runs, seed=args.seed)
    return 0


if __name__ == '__main__':
    sys.exit(main())

"""
Configuration of the SSA toy-data generator.
"""

from __future__ import annotations

import numbers
import warnings
from dataclasses import dataclass, fields
from typing import Any, Dict, Mapping, Optional, Sequence, Tuple, Union


class InvalidConfiguration(ValueError):
    """Raised when a configuration value is out of range; ``field`` names it."""

    def __init__(self, field: str, message: str):
        super().__init__(f"{field}: {message}")
        self.field = field


# Short option names accepted as aliases of the field names.
OPTION_ALIASES = {
    'n': 'epoch_count',
    'ds': 'stationary_dim',
    'dn': 'nonstationary_dim',
    'n_samples': 'samples_per_epoch',
    'v_min': 'variance_ratio_min',
    'v_max': 'variance_ratio_max',
    'corr_min': 'correlation_min',
    'corr_max': 'correlation_max',
    'p_nv_larger': 'prob_variance_larger',
    'rand_ndir': 'randomize_basis',
    'orth_mixing': 'orthogonal_mixing',
    'mean_nonstat': 'mean_nonstationarity',
}


def _is_int(value: Any) -> bool:
    return isinstance(value, numbers.Integral) and not isinstance(value, bool)


def _is_real(value: Any) -> bool:
    return isinstance(value, numbers.Real) and not isinstance(value, bool)


def _resolve_samples(samples_per_epoch, epoch_count: int) -> Tuple[int, ...]:
    if _is_int(samples_per_epoch):
        counts = [samples_per_epoch]
    else:
        try:
            counts = list(samples_per_epoch)
        except TypeError:
            raise InvalidConfiguration(
                'samples_per_epoch', f"must be an integer or a sequence of integers, got {samples_per_epoch!r}"
            ) from None

    if len(counts) not in (1, epoch_count):
        raise InvalidConfiguration(
            'samples_per_epoch',
            f"must have length 1 or epoch_count={epoch_count}, got {len(counts)}",
        )
    for c in counts:
        if not _is_int(c) or c <= 0:
            raise InvalidConfiguration('samples_per_epoch', f"counts must be positive integers, got {c!r}")

    if len(counts) == 1:
        counts = counts * epoch_count
    return tuple(int(c) for c in counts)


def validate_config(config: 'ToyDataConfig') -> Tuple[int, ...]:
    """
    Check every range constraint of ``config``.

    Returns the per-epoch sample counts (a scalar count is broadcast to all
    epochs). Raises InvalidConfiguration on the first violation found.
    """
    n = config.epoch_count
    ds = config.stationary_dim
    dn = config.nonstationary_dim

    if not _is_int(n) or n <= 0:
        raise InvalidConfiguration('epoch_count', f"must be a positive integer, got {n!r}")
    if not _is_int(ds) or ds < 0:
        raise InvalidConfiguration('stationary_dim', f"must be a non-negative integer, got {ds!r}")
    if not _is_int(dn) or dn < 0:
        raise InvalidConfiguration('nonstationary_dim', f"must be a non-negative integer, got {dn!r}")
    if ds + dn <= 0:
        raise InvalidConfiguration('nonstationary_dim', "stationary_dim + nonstationary_dim must be positive")

    for name in ('variance_ratio_min', 'variance_ratio_max', 'correlation_min', 'correlation_max',
                 'prob_variance_larger', 'mean_nonstationarity'):
        value = getattr(config, name)
        if not _is_real(value):
            raise InvalidConfiguration(name, f"must be a real number, got {value!r}")

    if not config.variance_ratio_min > 1:
        raise InvalidConfiguration('variance_ratio_min', f"must be > 1, got {config.variance_ratio_min}")
    if not config.variance_ratio_max > config.variance_ratio_min:
        raise InvalidConfiguration(
            'variance_ratio_max',
            f"must be > variance_ratio_min={config.variance_ratio_min}, got {config.variance_ratio_max}",
        )
    if not config.correlation_min >= 0:
        raise InvalidConfiguration('correlation_min', f"must be >= 0, got {config.correlation_min}")
    if not config.correlation_max > config.correlation_min:
        raise InvalidConfiguration(
            'correlation_max',
            f"must be > correlation_min={config.correlation_min}, got {config.correlation_max}",
        )
    if not config.correlation_max <= 1:
        raise InvalidConfiguration('correlation_max', f"must be <= 1, got {config.correlation_max}")
    if not 0 <= config.prob_variance_larger <= 1:
        raise InvalidConfiguration(
            'prob_variance_larger', f"must be in [0, 1], got {config.prob_variance_larger}"
        )
    if not config.mean_nonstationarity >= 0:
        raise InvalidConfiguration(
            'mean_nonstationarity', f"must be >= 0, got {config.mean_nonstationarity}"
        )
    for name in ('randomize_basis', 'orthogonal_mixing'):
        if not isinstance(getattr(config, name), bool):
            raise InvalidConfiguration(name, f"must be a bool, got {getattr(config, name)!r}")

    return _resolve_samples(config.samples_per_epoch, n)


@dataclass(frozen=True)
class ToyDataConfig:
    """
    Parameters of the SSA mixing model.

    ``samples_per_epoch`` may be given as a single integer; after construction
    it is always a tuple with one count per epoch.
    """

    epoch_count: int
    stationary_dim: int
    nonstationary_dim: int
    samples_per_epoch: Union[int, Sequence[int]] = 500
    variance_ratio_min: float = 1.2
    variance_ratio_max: float = 1.4
    correlation_min: float = 0.0
    correlation_max: float = 0.5
    prob_variance_larger: float = 0.5
    randomize_basis: bool = True
    orthogonal_mixing: bool = False
    mean_nonstationarity: float = 0.0

    def __post_init__(self):
        counts = validate_config(self)
        object.__setattr__(self, 'samples_per_epoch', counts)

    @property
    def dim(self) -> int:
        return self.stationary_dim + self.nonstationary_dim

    def to_dict(self) -> Dict[str, Any]:
        out = {f.name: getattr(self, f.name) for f in fields(self)}
        out['samples_per_epoch'] = list(self.samples_per_epoch)
        return out


def config_from_dict(
    options: Optional[Mapping[str, Any]] = None,
    epoch_count: Optional[int] = None,
    stationary_dim: Optional[int] = None,
    nonstationary_dim: Optional[int] = None,
) -> ToyDataConfig:
    """
    Build a ToyDataConfig from a plain mapping such as a YAML ``data:`` section.

    Keys may be field names or the short names in OPTION_ALIASES. Missing
    keys keep their defaults; unknown keys are reported with a warning and
    ignored. Explicit ``epoch_count``/``stationary_dim``/``nonstationary_dim``
    arguments take precedence over the mapping.
    """
    valid = {f.name for f in fields(ToyDataConfig)}
    kwargs: Dict[str, Any] = {}
    for key, value in (options or {}).items():
        name = OPTION_ALIASES.get(key, key)
        if name not in valid:
            warnings.warn(f"Ignoring unknown option '{key}': it does not have a valid default option")
            continue
        if name in kwargs:
            raise InvalidConfiguration(name, f"given more than once (as '{key}')")
        kwargs[name] = value

    for name, value in (('epoch_count', epoch_count),
                        ('stationary_dim', stationary_dim),
                        ('nonstationary_dim', nonstationary_dim)):
        if value is not None:
            kwargs[name] = value

    for name in ('epoch_count', 'stationary_dim', 'nonstationary_dim'):
        if name not in kwargs:
            raise InvalidConfiguration(name, "is required")

    return ToyDataConfig(**kwargs)

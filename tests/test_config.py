import warnings

import pytest

from ssa_toydata.data import InvalidConfiguration, ToyDataConfig, config_from_dict


def test_defaults_and_broadcast():
    cfg = ToyDataConfig(epoch_count=10, stationary_dim=2, nonstationary_dim=2)
    assert cfg.dim == 4
    assert cfg.samples_per_epoch == (500,) * 10
    assert cfg.variance_ratio_min == 1.2
    assert cfg.variance_ratio_max == 1.4
    assert cfg.correlation_min == 0.0
    assert cfg.correlation_max == 0.5
    assert cfg.prob_variance_larger == 0.5
    assert cfg.randomize_basis is True
    assert cfg.orthogonal_mixing is False
    assert cfg.mean_nonstationarity == 0.0


def test_per_epoch_sample_counts():
    cfg = ToyDataConfig(epoch_count=3, stationary_dim=1, nonstationary_dim=1, samples_per_epoch=[10, 20, 30])
    assert cfg.samples_per_epoch == (10, 20, 30)

    cfg = ToyDataConfig(epoch_count=3, stationary_dim=1, nonstationary_dim=1, samples_per_epoch=[7])
    assert cfg.samples_per_epoch == (7, 7, 7)


def test_config_is_immutable():
    cfg = ToyDataConfig(epoch_count=2, stationary_dim=1, nonstationary_dim=1)
    with pytest.raises(Exception):
        cfg.epoch_count = 5


@pytest.mark.parametrize("kwargs, field", [
    (dict(epoch_count=0), 'epoch_count'),
    (dict(epoch_count=2.5), 'epoch_count'),
    (dict(stationary_dim=-1), 'stationary_dim'),
    (dict(nonstationary_dim=-1), 'nonstationary_dim'),
    (dict(stationary_dim=0, nonstationary_dim=0), 'nonstationary_dim'),
    (dict(variance_ratio_min=1.0), 'variance_ratio_min'),
    (dict(variance_ratio_min=1.5, variance_ratio_max=1.4), 'variance_ratio_max'),
    (dict(variance_ratio_min=1.4, variance_ratio_max=1.4), 'variance_ratio_max'),
    (dict(correlation_min=-0.1), 'correlation_min'),
    (dict(correlation_min=0.5, correlation_max=0.5), 'correlation_max'),
    (dict(correlation_max=1.5), 'correlation_max'),
    (dict(prob_variance_larger=1.1), 'prob_variance_larger'),
    (dict(prob_variance_larger=-0.1), 'prob_variance_larger'),
    (dict(mean_nonstationarity=-1.0), 'mean_nonstationarity'),
    (dict(samples_per_epoch=[100, 100]), 'samples_per_epoch'),
    (dict(samples_per_epoch=0), 'samples_per_epoch'),
    (dict(samples_per_epoch=[10, -1, 10]), 'samples_per_epoch'),
    (dict(randomize_basis='yes'), 'randomize_basis'),
])
def test_invalid_configuration_names_field(kwargs, field):
    base = dict(epoch_count=3, stationary_dim=2, nonstationary_dim=2)
    base.update(kwargs)
    with pytest.raises(InvalidConfiguration) as excinfo:
        ToyDataConfig(**base)
    assert excinfo.value.field == field
    assert isinstance(excinfo.value, ValueError)


def test_zero_dimension_blocks_are_valid():
    assert ToyDataConfig(epoch_count=2, stationary_dim=0, nonstationary_dim=3).dim == 3
    assert ToyDataConfig(epoch_count=2, stationary_dim=3, nonstationary_dim=0).dim == 3


def test_config_from_dict_aliases():
    cfg = config_from_dict({
        'n': 4, 'ds': 1, 'dn': 3,
        'n_samples': 50,
        'v_min': 2.0, 'v_max': 3.0,
        'corr_min': 0.1, 'corr_max': 0.2,
        'p_nv_larger': 1.0,
        'rand_ndir': False,
        'orth_mixing': True,
        'mean_nonstat': 0.5,
    })
    assert cfg.epoch_count == 4
    assert cfg.stationary_dim == 1
    assert cfg.nonstationary_dim == 3
    assert cfg.samples_per_epoch == (50,) * 4
    assert cfg.variance_ratio_min == 2.0
    assert cfg.correlation_max == 0.2
    assert cfg.randomize_basis is False
    assert cfg.orthogonal_mixing is True
    assert cfg.mean_nonstationarity == 0.5


def test_config_from_dict_warns_on_unknown_key():
    with pytest.warns(UserWarning, match='colour'):
        cfg = config_from_dict({'colour': 'g'}, epoch_count=2, stationary_dim=1, nonstationary_dim=1)
    assert cfg.epoch_count == 2


def test_config_from_dict_explicit_arguments_win():
    with warnings.catch_warnings():
        warnings.simplefilter('error')
        cfg = config_from_dict({'epoch_count': 3, 'ds': 1, 'dn': 1}, epoch_count=5)
    assert cfg.epoch_count == 5


def test_config_from_dict_duplicate_and_missing():
    with pytest.raises(InvalidConfiguration):
        config_from_dict({'v_min': 1.2, 'variance_ratio_min': 1.3}, epoch_count=2, stationary_dim=1, nonstationary_dim=1)
    with pytest.raises(InvalidConfiguration) as excinfo:
        config_from_dict({'ds': 1, 'dn': 1})
    assert excinfo.value.field == 'epoch_count'


def test_to_dict_round_trip():
    cfg = ToyDataConfig(epoch_count=2, stationary_dim=1, nonstationary_dim=2, samples_per_epoch=[3, 4])
    assert config_from_dict(cfg.to_dict()) == cfg

import numpy as np
import pytest

from ssa_toydata import SSAToyDataGenerator, ToyDataConfig, ToyDataset, ssa_toydata
from ssa_toydata.data import InvalidConfiguration
from ssa_toydata.metrics import leading_canonical_correlation, mean_budget


def test_default_scenario_shapes():
    X, A, cov_epo, mean_epo = ssa_toydata(10, 2, 2, seed=0)

    assert len(X) == 10
    assert all(x.shape == (4, 500) for x in X)
    assert A.shape == (4, 4)
    np.testing.assert_allclose(np.linalg.norm(A, axis=0), np.ones(4), atol=1e-12)
    assert cov_epo.shape == (10, 4, 4)
    assert mean_epo.shape == (4, 10)
    assert np.all(mean_epo == 0.0)


def test_returns_named_four_tuple():
    out = ssa_toydata(3, 1, 1, seed=0, n_samples=20)
    assert isinstance(out, ToyDataset)
    assert len(out) == 4
    assert out.mixing is out[1]


def test_observed_covariances_symmetric_psd():
    cfg = ToyDataConfig(epoch_count=15, stationary_dim=3, nonstationary_dim=4, samples_per_epoch=50,
                        correlation_max=0.95, variance_ratio_min=1.5, variance_ratio_max=4.0)
    _, _, cov_epo, _ = SSAToyDataGenerator(cfg, seed=5).generate()
    for C in cov_epo:
        np.testing.assert_array_equal(C, C.T)
        assert np.linalg.eigvalsh(C)[0] >= -1e-10


def test_observed_moments_are_mixed_source_moments():
    cfg = ToyDataConfig(epoch_count=5, stationary_dim=2, nonstationary_dim=2, samples_per_epoch=10,
                        mean_nonstationarity=2.0)
    gen = SSAToyDataGenerator(cfg, seed=1)
    _, A, cov_epo, mean_epo = gen.generate()
    gt = gen.ground_truth
    for i in range(5):
        np.testing.assert_allclose(cov_epo[i], A @ gt.sources.covariances[i] @ A.T, atol=1e-12)
        np.testing.assert_allclose(mean_epo[:, i], A @ gt.sources.means[:, i], atol=1e-12)
        assert leading_canonical_correlation(gt.sources.covariances[i], 2) == pytest.approx(
            gt.profile.correlations[i], abs=1e-8)

    energy, total_log_det = mean_budget(gt.sources.means, gt.sources.covariances, 2)
    assert energy == pytest.approx(2.0 * total_log_det, rel=1e-10)


def test_orthogonal_mixing_option():
    _, A, _, _ = ssa_toydata(4, 2, 3, seed=2, orth_mixing=True, n_samples=10)
    np.testing.assert_allclose(A @ A.T, np.eye(5), atol=1e-8)


def test_variable_sample_counts():
    X, _, _, _ = ssa_toydata(3, 1, 2, seed=0, n_samples=[5, 50, 500])
    assert [x.shape for x in X] == [(3, 5), (3, 50), (3, 500)]


def test_fixed_seed_is_reproducible():
    a = ssa_toydata(6, 2, 2, seed=123, mean_nonstat=1.0, n_samples=30)
    b = ssa_toydata(6, 2, 2, seed=123, mean_nonstat=1.0, n_samples=30)
    for xa, xb in zip(a.samples, b.samples):
        np.testing.assert_array_equal(xa, xb)
    np.testing.assert_array_equal(a.mixing, b.mixing)
    np.testing.assert_array_equal(a.covariances, b.covariances)
    np.testing.assert_array_equal(a.means, b.means)

    c = ssa_toydata(6, 2, 2, seed=124, mean_nonstat=1.0, n_samples=30)
    assert not np.allclose(a.mixing, c.mixing)


def test_stationary_dim_zero():
    gen = SSAToyDataGenerator(ToyDataConfig(epoch_count=4, stationary_dim=0, nonstationary_dim=3,
                                            samples_per_epoch=20), seed=0)
    X, A, cov_epo, mean_epo = gen.generate()
    assert all(x.shape == (3, 20) for x in X)
    assert A.shape == (3, 3)
    gt = gen.ground_truth
    for i, S in enumerate(gt.sources.covariances):
        np.testing.assert_allclose(np.linalg.eigvalsh(S), np.sort(gt.profile.variance_ratios[:, i]), atol=1e-10)


def test_nonstationary_dim_zero():
    X, A, cov_epo, mean_epo = ssa_toydata(3, 2, 0, seed=0, n_samples=20, mean_nonstat=1.0)
    for C in cov_epo:
        np.testing.assert_allclose(C, A @ A.T, atol=1e-12)
    assert np.all(mean_epo == 0.0)


def test_invalid_configuration_before_sampling():
    with pytest.raises(InvalidConfiguration):
        ssa_toydata(0, 2, 2)
    with pytest.raises(InvalidConfiguration):
        ssa_toydata(3, 2, 2, v_min=0.9)


def test_unknown_option_warns():
    with pytest.warns(UserWarning, match='bogus'):
        ssa_toydata(2, 1, 1, seed=0, n_samples=5, bogus=True)


def test_seed_and_rng_are_exclusive():
    cfg = ToyDataConfig(epoch_count=2, stationary_dim=1, nonstationary_dim=1)
    with pytest.raises(ValueError):
        SSAToyDataGenerator(cfg, seed=1, rng=np.random.default_rng(1))


def test_empirical_moments_approach_true_moments():
    cfg = ToyDataConfig(epoch_count=2, stationary_dim=2, nonstationary_dim=2, samples_per_epoch=[200, 40000],
                        mean_nonstationarity=1.0)
    X, _, cov_epo, mean_epo = SSAToyDataGenerator(cfg, seed=3).generate()
    assert X[0].shape == (4, 200)
    err = np.linalg.norm(np.cov(X[1]) - cov_epo[1]) / np.linalg.norm(cov_epo[1])
    assert err < 0.05
    assert np.linalg.norm(X[1].mean(axis=1) - mean_epo[:, 1]) < 0.05

import numpy as np
import pytest
import scipy.integrate as sci

from covshrink.utils.kernel import (
    EPAN_1,
    SQRT5,
    effective_n_observations,
    epanechnikov,
    epanechnikov_hilbert_transform,
    kernel_bandwidth,
    spectral_density_estimates,
)


def test_epanechnikov():
    assert epanechnikov(0.0) == pytest.approx(3 / (4 * np.sqrt(5)))
    np.testing.assert_array_equal(
        epanechnikov(np.array([-3.0, -SQRT5, SQRT5, 10.0])), np.zeros(4)
    )
    np.testing.assert_almost_equal(epanechnikov(1.2), epanechnikov(-1.2))


def test_epanechnikov_is_a_density():
    area, _ = sci.quad(epanechnikov, -SQRT5, SQRT5)
    assert area == pytest.approx(1.0)


@pytest.mark.parametrize("x", [-2.0, -1.5, 0.3, 0.7, 1.9])
def test_epanechnikov_hilbert_transform_principal_value(x):
    # (1 / pi) * p.v. integral of K(t) / (t - x)
    pv, _ = sci.quad(
        lambda t: float(epanechnikov(t)), -SQRT5, SQRT5, weight="cauchy", wvar=x
    )
    assert epanechnikov_hilbert_transform(x) == pytest.approx(pv / np.pi, rel=1e-6)


def test_epanechnikov_hilbert_transform_properties():
    assert epanechnikov_hilbert_transform(0.0) == 0.0
    assert isinstance(epanechnikov_hilbert_transform(1.0), float)
    x = np.array([0.4, 1.1, 2.0, 3.5])
    np.testing.assert_almost_equal(
        epanechnikov_hilbert_transform(-x), -epanechnikov_hilbert_transform(x)
    )
    # decays like -1 / (pi x)
    assert epanechnikov_hilbert_transform(100.0) == pytest.approx(
        -1 / (np.pi * 100.0), rel=1e-3
    )


def test_epanechnikov_hilbert_transform_at_poles():
    x = np.array([-SQRT5, 0.0, SQRT5])
    res = epanechnikov_hilbert_transform(x)
    assert np.all(np.isfinite(res))
    np.testing.assert_almost_equal(res, -0.3 / np.pi * x)

    # within the pole tolerance, the limit is used
    x_near = SQRT5 * (1 + 1e-10)
    assert epanechnikov_hilbert_transform(x_near) == pytest.approx(-0.3 / np.pi * x_near)


def test_epanechnikov_hilbert_transform_continuous_around_poles():
    limit = -0.3 / np.pi * SQRT5
    for dx in [1e-4, 1e-6, -1e-6, -1e-4]:
        assert epanechnikov_hilbert_transform(SQRT5 + dx) == pytest.approx(
            limit, abs=1e-3
        )


def test_effective_n_observations():
    assert effective_n_observations(100, 10) == 100
    assert effective_n_observations(20, 20) == 19
    assert effective_n_observations(20, 50) == 19


def test_kernel_bandwidth():
    assert kernel_bandwidth(1000) == pytest.approx(0.1)


def test_spectral_density_estimates_shape():
    eigenvalues = np.linspace(0.5, 3.0, 10)
    f_tilde, hf_tilde = spectral_density_estimates(eigenvalues, eta=100)
    assert f_tilde.shape == (10,)
    assert hf_tilde.shape == (10,)
    assert np.all(f_tilde >= 0)

    f_tilde, hf_tilde = spectral_density_estimates(np.linspace(0.5, 3.0, 50), eta=19)
    assert f_tilde.shape == (19,)
    assert hf_tilde.shape == (19,)


def test_spectral_density_estimates_flat_spectrum():
    eta = 100
    f_tilde, hf_tilde = spectral_density_estimates(np.ones(8), eta=eta)
    np.testing.assert_almost_equal(f_tilde, EPAN_1 / kernel_bandwidth(eta))
    np.testing.assert_almost_equal(hf_tilde, np.zeros(8))


def test_spectral_density_estimates_uses_top_eigenvalues():
    top = np.linspace(1.0, 4.0, 19)
    f_1, hf_1 = spectral_density_estimates(np.concatenate([np.zeros(31), top]), 19)
    f_2, hf_2 = spectral_density_estimates(np.concatenate([np.full(31, 1e-3), top]), 19)
    np.testing.assert_array_equal(f_1, f_2)
    np.testing.assert_array_equal(hf_1, hf_2)


def test_spectral_density_estimates_grid_on_pole():
    # x = (lambda_i - lambda_j) / (h * lambda_j) = sqrt(5) for i=1, j=0
    eta = 1000
    h = kernel_bandwidth(eta)
    eigenvalues = np.array([1.0, 1.0 + h * SQRT5])
    f_tilde, hf_tilde = spectral_density_estimates(eigenvalues, eta)
    assert np.all(np.isfinite(f_tilde))
    assert np.all(np.isfinite(hf_tilde))


def test_spectral_density_estimates_errors():
    with pytest.raises(ValueError, match="1D array"):
        spectral_density_estimates(np.ones((2, 2)), eta=10)
    with pytest.raises(ValueError, match="positive integer"):
        spectral_density_estimates(np.ones(3), eta=0)

import numpy as np
import pytest

from covshrink.covariance import (
    OAS,
    AnalyticalNonlinearShrinkage,
    BaseCovariance,
    EmpiricalCovariance,
    LedoitWolf,
)
from covshrink.exceptions import NonPositiveVarianceError
from covshrink.utils.stats import corr_to_cov, is_cholesky_dec


def test_base_covariance_is_abstract():
    with pytest.raises(TypeError):
        BaseCovariance()


@pytest.mark.parametrize(
    "estimator", [EmpiricalCovariance(), LedoitWolf(), AnalyticalNonlinearShrinkage()]
)
def test_estimate_returns_copy(estimator, X):
    covariance = estimator.estimate(X)
    covariance[0, 0] = -1.0
    assert estimator.covariance_[0, 0] > 0


def test_set_covariance_nearest():
    std = np.array([0.5, 2.0, 3.0])
    corr = np.array([[1.0, 0.9, 0.9], [0.9, 1.0, -0.9], [0.9, -0.9, 1.0]])
    covariance = corr_to_cov(corr, std)
    assert not is_cholesky_dec(covariance)

    model = EmpiricalCovariance()
    model._set_covariance(covariance)
    np.testing.assert_array_equal(model.covariance_, covariance)

    model = EmpiricalCovariance(nearest=True)
    with pytest.warns(UserWarning, match="Clipping"):
        model._set_covariance(covariance)
    assert is_cholesky_dec(model.covariance_)
    np.testing.assert_almost_equal(np.diag(model.covariance_), std**2)


@pytest.mark.parametrize("estimator", [AnalyticalNonlinearShrinkage, OAS])
def test_nearest_positive_definite_unchanged(estimator, X_high_dim):
    covariance = estimator().estimate(X_high_dim)
    np.testing.assert_array_equal(
        estimator(nearest=True).estimate(X_high_dim), covariance
    )


@pytest.mark.parametrize("estimator", [AnalyticalNonlinearShrinkage, LedoitWolf])
def test_small_scale_observations(estimator, X):
    covariance = estimator().estimate(1e-8 * X)
    assert np.all(np.diag(covariance) > 0)
    np.testing.assert_allclose(
        covariance * 1e16, estimator().estimate(X), rtol=1e-7, atol=1e-12
    )


def test_sanity_check_relative_to_largest_variance():
    model = EmpiricalCovariance()
    model._sanity_check(np.diag([1e-20, 3e-20]))
    with pytest.raises(NonPositiveVarianceError, match=r"\[1\]"):
        model._sanity_check(np.diag([1e-20, 0.0]))
    with pytest.raises(NonPositiveVarianceError, match=r"\[0, 1\]"):
        model._sanity_check(np.zeros((2, 2)))

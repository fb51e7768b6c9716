import numpy as np
import pandas as pd
import pytest

from covshrink.covariance import LedoitWolfTarget
from covshrink.utils.tools import check_dims, check_shrinkage, orient_observations


def test_auto_enum():
    assert LedoitWolfTarget.CONSTANT_CORRELATION.value == "constant_correlation"
    assert LedoitWolfTarget("scaled_identity") == LedoitWolfTarget.SCALED_IDENTITY
    assert LedoitWolfTarget.has("scaled_identity")
    assert not LedoitWolfTarget.has("identity")
    assert repr(LedoitWolfTarget.SCALED_IDENTITY) == "SCALED_IDENTITY"


@pytest.mark.parametrize("dims", [1, 2])
def test_check_dims(dims):
    assert check_dims(dims) == dims


@pytest.mark.parametrize("dims", [0, 3, -1, True, 1.5, "1"])
def test_check_dims_error(dims):
    with pytest.raises(ValueError, match="can only be 1 or 2"):
        check_dims(dims)


def test_orient_observations():
    X = np.arange(12.0).reshape(4, 3)
    assert orient_observations(X, dims=1) is X
    np.testing.assert_array_equal(orient_observations(X, dims=2), X.T)
    np.testing.assert_array_equal(orient_observations(X.tolist(), dims=2), X.T)
    with pytest.raises(ValueError):
        orient_observations(X, dims=3)


def test_orient_observations_dataframe():
    X = pd.DataFrame(np.arange(12.0).reshape(3, 4), index=["a", "b", "c"])
    res = orient_observations(X, dims=2)
    assert isinstance(res, pd.DataFrame)
    assert list(res.columns) == ["a", "b", "c"]
    assert res.shape == (4, 3)


@pytest.mark.parametrize("shrinkage", ["auto", 0, 0.3, 1.0, np.float64(0.5)])
def test_check_shrinkage(shrinkage):
    assert check_shrinkage(shrinkage) == shrinkage


@pytest.mark.parametrize("shrinkage", ["optimal", -0.1, 1.1, True, [0.5], None])
def test_check_shrinkage_error(shrinkage):
    with pytest.raises(ValueError):
        check_shrinkage(shrinkage)

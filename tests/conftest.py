"""conftest module."""

import numpy as np
import pandas as pd
import pytest


def pytest_configure(config):
    # globally turn off scientific notation in every test session
    np.set_printoptions(suppress=True, precision=6)


@pytest.fixture(scope="module")
def X():
    """Correlated observations with more observations than variables (100, 10)."""
    rng = np.random.default_rng(seed=42)
    mixing = rng.normal(size=(10, 10)) / np.sqrt(10) + np.diag(np.linspace(0.5, 2, 10))
    return rng.standard_normal((100, 10)) @ mixing


@pytest.fixture(scope="module")
def X_df(X):
    return pd.DataFrame(X, columns=[f"var_{i}" for i in range(X.shape[1])])


@pytest.fixture(scope="module")
def X_high_dim():
    """Standard normal observations with more variables than observations (20, 50)."""
    rng = np.random.default_rng(seed=7)
    return rng.standard_normal((20, 50))


@pytest.fixture(scope="module")
def X_two_variables():
    """Standard normal observations of two variables (20, 2)."""
    rng = np.random.default_rng(seed=3)
    return rng.standard_normal((20, 2))


@pytest.fixture(scope="module")
def X_spherical():
    """Centered observations whose biased sample covariance is exactly I / 3."""
    return np.vstack([np.eye(3), -np.eye(3)])

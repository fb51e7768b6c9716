import numpy as np
import pytest

from covshrink.utils.stats import (
    assert_is_square,
    assert_is_symmetric,
    corr_to_cov,
    cov_nearest,
    cov_to_corr,
    is_cholesky_dec,
    is_positive_definite,
    reconstruct_from_spectrum,
    symmetric_eigh,
)


def _norm_frobenious(x, y):
    return np.sqrt(((x - y) ** 2).sum())


@pytest.fixture(scope="module")
def cov():
    rng = np.random.default_rng(seed=11)
    a = rng.normal(size=(6, 6))
    return a @ a.T + 0.1 * np.eye(6)


@pytest.fixture(scope="module")
def non_psd_corr():
    return np.array(
        [
            [1.0, 0.477, 0.644, 0.478, 0.651, 0.826],
            [0.477, 1.0, 0.516, 0.233, 0.682, 0.75],
            [0.644, 0.516, 1.0, 0.599, 0.581, 0.742],
            [0.478, 0.233, 0.599, 1.0, 0.741, 0.8],
            [0.651, 0.682, 0.581, 0.741, 1.0, 0.798],
            [0.826, 0.75, 0.742, 0.8, 0.798, 1.0],
        ]
    )


def test_assert_is_square():
    assert_is_square(np.ones((3, 3)))
    with pytest.raises(ValueError, match="square"):
        assert_is_square(np.ones((3, 2)))
    with pytest.raises(ValueError, match="square"):
        assert_is_square(np.ones(3))


def test_assert_is_symmetric(cov):
    assert_is_symmetric(cov)
    x = cov.copy()
    x[0, 1] += 1.0
    with pytest.raises(ValueError, match="symmetric"):
        assert_is_symmetric(x)


def test_cov_to_corr(cov):
    corr, std = cov_to_corr(cov)
    np.testing.assert_almost_equal(np.diag(corr), np.ones(6))
    np.testing.assert_almost_equal(std, np.sqrt(np.diag(cov)))
    np.testing.assert_almost_equal(corr_to_cov(corr, std), cov)


def test_is_cholesky_dec(cov):
    assert is_cholesky_dec(cov)
    assert is_positive_definite(cov)
    x = np.array([[1.0, 2.0], [2.0, 1.0]])
    assert not is_cholesky_dec(x)
    assert not is_positive_definite(x)


def test_cov_nearest_psd(cov):
    x = np.array([[1, -0.2, -0.9], [-0.2, 1, -0.2], [-0.9, -0.2, 1]])
    np.testing.assert_almost_equal(cov_nearest(x, higham=True), x)
    np.testing.assert_almost_equal(cov_nearest(x, higham=False), x)
    np.testing.assert_array_equal(cov_nearest(cov), cov)


@pytest.mark.parametrize("higham", [False, True])
def test_cov_nearest_non_psd(non_psd_corr, higham):
    assert not is_cholesky_dec(non_psd_corr)
    y = cov_nearest(non_psd_corr, higham=higham)
    assert is_cholesky_dec(y)
    np.testing.assert_almost_equal(np.diag(y), np.ones(6))
    np.testing.assert_almost_equal(y, y.T)
    assert _norm_frobenious(non_psd_corr, y) < 0.1


def test_cov_nearest_non_psd_clipping(non_psd_corr):
    y = cov_nearest(non_psd_corr, higham=False)
    np.testing.assert_almost_equal(
        _norm_frobenious(non_psd_corr, y), 0.08390962832371579
    )


def test_cov_nearest_keeps_variances():
    std = np.array([0.5, 2.0, 3.0])
    corr = np.array([[1.0, 0.9, 0.9], [0.9, 1.0, -0.9], [0.9, -0.9, 1.0]])
    cov = corr_to_cov(corr, std)
    assert not is_cholesky_dec(cov)
    with pytest.warns(UserWarning, match="not positive definite"):
        y = cov_nearest(cov, warn=True)
    assert is_cholesky_dec(y)
    np.testing.assert_almost_equal(np.diag(y), std**2)


def test_symmetric_eigh(cov):
    eigenvalues, eigenvectors = symmetric_eigh(cov)
    assert np.all(np.diff(eigenvalues) >= 0)
    np.testing.assert_almost_equal(eigenvectors.T @ eigenvectors, np.eye(6))
    np.testing.assert_almost_equal(cov @ eigenvectors, eigenvectors * eigenvalues)


def test_symmetric_eigh_decomposition(cov):
    eigenvalues, eigenvectors = np.linalg.eigh(cov)
    # descending order is sorted back to ascending
    res_values, res_vectors = symmetric_eigh(
        cov, decomposition=(eigenvalues[::-1], eigenvectors[:, ::-1])
    )
    np.testing.assert_array_equal(res_values, eigenvalues)
    np.testing.assert_array_equal(res_vectors, eigenvectors)


def test_symmetric_eigh_decomposition_errors(cov):
    eigenvalues, eigenvectors = np.linalg.eigh(cov)
    with pytest.raises(ValueError, match="tuple"):
        symmetric_eigh(cov, decomposition=eigenvalues)
    with pytest.raises(ValueError, match="6 eigenvalues"):
        symmetric_eigh(cov, decomposition=(eigenvalues[1:], eigenvectors))
    with pytest.raises(ValueError, match="6 eigenvalues"):
        symmetric_eigh(cov, decomposition=(eigenvalues, eigenvectors[:, 1:]))


def test_reconstruct_from_spectrum(cov):
    eigenvalues, eigenvectors = symmetric_eigh(cov)
    x = reconstruct_from_spectrum(eigenvalues, eigenvectors)
    np.testing.assert_almost_equal(x, cov)
    np.testing.assert_array_equal(x, x.T)

    x = reconstruct_from_spectrum(np.ones(6), eigenvectors)
    np.testing.assert_almost_equal(x, np.eye(6))

"""Analytical Nonlinear Shrinkage Covariance Estimator."""

# Copyright (c) 2025 The covshrink developers
# SPDX-License-Identifier: BSD-3-Clause

import warnings

import numpy as np
import numpy.typing as npt
import sklearn.utils.validation as skv

from covshrink.covariance._base import BaseCovariance
from covshrink.covariance._empirical_covariance import sample_covariance
from covshrink.exceptions import DegenerateSpectrumWarning, InsufficientSamplesError
from covshrink.utils.kernel import (
    INV_PI,
    SQRT5,
    effective_n_observations,
    kernel_bandwidth,
    spectral_density_estimates,
)
from covshrink.utils.stats import (
    assert_is_symmetric,
    reconstruct_from_spectrum,
    symmetric_eigh,
)

__all__ = [
    "MIN_OBSERVATIONS",
    "AnalyticalNonlinearShrinkage",
    "analytical_nonlinear_shrinkage",
    "shrink_eigenvalues",
]

# below this the kernel bandwidth is too wide for the estimates to be meaningful
MIN_OBSERVATIONS = 12

_EPS = np.finfo(np.float64).eps


def _null_hilbert_transform(lambda_: np.ndarray, h: float) -> float:
    """Hilbert transform of the density estimate at zero, used for the null block
    of the spectrum when `p >= n`."""
    hs5 = h * SQRT5
    hf_tilde_0 = 0.3 / h**2 + 0.75 / hs5 * (1.0 - 0.2 / h**2) * np.log(
        np.abs((1.0 + hs5) / (1.0 - hs5))
    )
    return hf_tilde_0 * np.mean(INV_PI / lambda_)


def _guard_denominator(
    numerator: np.ndarray, denominator: np.ndarray, fallback: np.ndarray
) -> np.ndarray:
    """Divide, replacing entries whose denominator is not above machine epsilon by
    `fallback`.

    `denominator` must be dimensionless so that the test does not depend on the
    scale of the observations.
    """
    degenerate = ~(denominator > _EPS)
    if not np.any(degenerate):
        return numerator / denominator
    warnings.warn(
        f"The shrinkage denominator vanished for {np.sum(degenerate)} eigenvalue(s); "
        "the sample eigenvalue is kept for those.",
        DegenerateSpectrumWarning,
        stacklevel=3,
    )
    safe_denominator = np.where(degenerate, 1.0, denominator)
    return np.where(degenerate, fallback, numerator / safe_denominator)


def shrink_eigenvalues(
    eigenvalues: np.ndarray,
    f_tilde: np.ndarray,
    hf_tilde: np.ndarray,
    n_observations: int,
) -> np.ndarray:
    r"""Nonlinear shrinkage of the sample eigenvalues.

    With :math:`\gamma = p / \eta`:

    * when `p < n`, every eigenvalue is shrunk with

      .. math:: \tilde{d}_i = \frac{\lambda_i}{(\pi\gamma\lambda_i\tilde{f}_i)^2
          + (1 - \gamma - \pi\gamma\lambda_i\mathcal{H}\tilde{f}_i)^2}

    * when `p >= n`, the `p - eta` null eigenvalues share the value
      :math:`\tilde{d}_0 = 1 / (\pi(\gamma - 1)\mathcal{H}\tilde{f}_0)` and the
      retained ones are shrunk with
      :math:`\tilde{d}_i = 1 / (\pi^2\lambda_i(\tilde{f}_i^2 + \mathcal{H}\tilde{f}_i^2))`.

    Entries whose denominator is not above machine epsilon keep their sample
    eigenvalue and a :class:`~covshrink.exceptions.DegenerateSpectrumWarning` is
    emitted.

    Parameters
    ----------
    eigenvalues : ndarray of shape (p,)
        Sample eigenvalues sorted in ascending order.

    f_tilde : ndarray of shape (m,)
        Density estimates at the retained eigenvalues, `m = min(p, eta)`.

    hf_tilde : ndarray of shape (m,)
        Hilbert transform estimates at the retained eigenvalues.

    n_observations : int
        Number of observations `n`.

    Returns
    -------
    shrunk_eigenvalues : ndarray of shape (p,)
        Shrunk eigenvalues, in the order of `eigenvalues`.
    """
    eigenvalues = np.asarray(eigenvalues, dtype=float)
    f_tilde = np.asarray(f_tilde, dtype=float)
    hf_tilde = np.asarray(hf_tilde, dtype=float)
    n_variables = len(eigenvalues)
    eta = effective_n_observations(n_observations, n_variables)
    lambda_ = eigenvalues[max(0, n_variables - eta) :]
    if f_tilde.shape != lambda_.shape or hf_tilde.shape != lambda_.shape:
        raise ValueError(
            f"`f_tilde` and `hf_tilde` must have {len(lambda_)} elements, got "
            f"{f_tilde.shape} and {hf_tilde.shape}"
        )
    gamma = n_variables / eta
    pi_lambda = np.pi * lambda_

    if n_variables < n_observations:
        pi_gamma_lambda = gamma * pi_lambda
        denominator = (pi_gamma_lambda * f_tilde) ** 2 + (
            1.0 - gamma - pi_gamma_lambda * hf_tilde
        ) ** 2
        return _guard_denominator(lambda_, denominator, fallback=lambda_)

    h = kernel_bandwidth(eta)
    d_tilde_0 = INV_PI / ((gamma - 1.0) * _null_hilbert_transform(lambda_, h))
    # 1 / (pi^2 lambda (f^2 + Hf^2)) written as lambda over a dimensionless term
    denominator = pi_lambda**2 * (f_tilde**2 + hf_tilde**2)
    d_tilde_1 = _guard_denominator(lambda_, denominator, fallback=lambda_)
    return np.concatenate([np.full(n_variables - eta, d_tilde_0), d_tilde_1])


def _shrunk_spectrum(
    covariance: np.ndarray,
    n_observations: int,
    decomposition: tuple[np.ndarray, np.ndarray] | None = None,
) -> tuple[np.ndarray, np.ndarray, np.ndarray]:
    """Sample eigenvalues, shrunk eigenvalues and eigenvectors, all in ascending
    order of the sample eigenvalues."""
    if n_observations < MIN_OBSERVATIONS:
        raise InsufficientSamplesError(n_observations, MIN_OBSERVATIONS)
    assert_is_symmetric(covariance)
    n_variables = covariance.shape[0]
    eigenvalues, eigenvectors = symmetric_eigh(covariance, decomposition=decomposition)

    eta = effective_n_observations(n_observations, n_variables)
    retained = eigenvalues[max(0, n_variables - eta) :]
    if np.any(retained <= 0):
        raise ValueError(
            f"The {len(retained)} largest sample eigenvalues must be strictly "
            "positive; the observations are degenerate"
        )
    f_tilde, hf_tilde = spectral_density_estimates(eigenvalues, eta)
    shrunk_eigenvalues = shrink_eigenvalues(
        eigenvalues, f_tilde, hf_tilde, n_observations
    )
    return eigenvalues, shrunk_eigenvalues, eigenvectors


def analytical_nonlinear_shrinkage(
    covariance: npt.ArrayLike,
    n_observations: int,
    decomposition: tuple[np.ndarray, np.ndarray] | None = None,
) -> np.ndarray:
    """Analytical nonlinear shrinkage of a sample covariance matrix [1]_.

    Parameters
    ----------
    covariance : array-like of shape (n_variables, n_variables)
        Sample covariance matrix.

    n_observations : int
        Number of observations used to compute `covariance`. Must be at least 12.

    decomposition : tuple[ndarray of shape (n_variables,), ndarray of shape (n_variables, n_variables)], optional
        Precomputed `(eigenvalues, eigenvectors)` of `covariance`. The default
        (`None`) is to decompose `covariance`.

    Returns
    -------
    shrunk_covariance : ndarray of shape (n_variables, n_variables)
        Shrunk covariance matrix.

    References
    ----------
    .. [1] "Analytical Nonlinear Shrinkage of Large-Dimensional Covariance Matrices".
        The Annals of Statistics.
        Ledoit & Wolf (2020).
    """
    covariance = np.asarray(covariance, dtype=float)
    _, shrunk_eigenvalues, eigenvectors = _shrunk_spectrum(
        covariance, n_observations, decomposition=decomposition
    )
    return reconstruct_from_spectrum(shrunk_eigenvalues, eigenvectors)


class AnalyticalNonlinearShrinkage(BaseCovariance):
    r"""Analytical Nonlinear Shrinkage Covariance Estimator.

    The sample eigenvalues are replaced by nonlinearly shrunk eigenvalues while the
    sample eigenvectors are kept [1]_. The shrinkage formula is computed from a
    kernel estimate of the limiting spectral density and of its Hilbert transform,
    using the Epanechnikov kernel with the locally adaptive bandwidth
    :math:`h\lambda_j`, :math:`h = \eta^{-1/3}`.

    The effective sample size :math:`\eta` is `n` when `p < n` and `n - 1`
    otherwise. When `p >= n`, only the `eta` largest sample eigenvalues are
    informative; the other `p - eta` share a common shrunk value, so the estimate
    is always positive definite even though the sample covariance is singular.

    The time complexity is :math:`O(np^2 + p^3)`, dominated by the sample
    covariance and its eigen-decomposition.

    Parameters
    ----------
    corrected : bool, default=False
        If this is set to True, the sample covariance is computed with Bessel's
        correction (divide by `n - 1`), otherwise it is divided by `n`.

    decomposition : tuple[ndarray of shape (n_variables,), ndarray of shape (n_variables, n_variables)], optional
        Precomputed `(eigenvalues, eigenvectors)` of the sample covariance, for
        example when it has already been decomposed elsewhere. It must correspond to
        the sample covariance computed with the same `corrected` and
        `assume_centered`. The default (`None`) is to decompose it during `fit`.

    assume_centered : bool, default=False
        If True, data will not be centered before computation.

    nearest : bool, default=False
        If this is set to True, the covariance is replaced by the nearest covariance
        matrix that is positive definite and with a Cholesky decomposition than can be
        computed. The variance is left unchanged.
        For more details, see :func:`~covshrink.utils.stats.cov_nearest`.
        The default is `False`.

    higham : bool, default=False
        If this is set to True, the Higham (2002) algorithm is used to find the
        nearest PD covariance, otherwise the eigenvalues are clipped to a threshold
        above zeros (1e-13).

    higham_max_iteration : int, default=100
        Maximum number of iterations of the Higham (2002) algorithm.
        The default value is `100`.

    Attributes
    ----------
    covariance_ : ndarray of shape (n_variables, n_variables)
        Estimated covariance.

    sample_eigenvalues_ : ndarray of shape (n_variables,)
        Eigenvalues of the sample covariance, in ascending order.

    shrunk_eigenvalues_ : ndarray of shape (n_variables,)
        Shrunk eigenvalues, in the order of `sample_eigenvalues_`.

    eigenvectors_ : ndarray of shape (n_variables, n_variables)
        Eigenvectors of the sample covariance stored as columns, in the order of
        `sample_eigenvalues_`.

    effective_n_observations_ : int
        Effective sample size `eta`.

    n_features_in_ : int
        Number of variables seen during `fit`.

    feature_names_in_ : ndarray of shape (`n_features_in_`,)
        Names of variables seen during `fit`. Defined only when `X`
        has variables names that are all strings.

    References
    ----------
    .. [1] "Analytical Nonlinear Shrinkage of Large-Dimensional Covariance Matrices".
        The Annals of Statistics.
        Ledoit & Wolf (2020).

    Examples
    --------
    >>> import numpy as np
    >>> from covshrink.covariance import AnalyticalNonlinearShrinkage
    >>> rng = np.random.default_rng(0)
    >>> X = rng.standard_normal((20, 50))
    >>> covariance = AnalyticalNonlinearShrinkage().estimate(X)
    >>> bool(np.all(np.linalg.eigvalsh(covariance) > 0))
    True
    """

    sample_eigenvalues_: np.ndarray
    shrunk_eigenvalues_: np.ndarray
    eigenvectors_: np.ndarray
    effective_n_observations_: int

    def __init__(
        self,
        corrected: bool = False,
        decomposition: tuple[np.ndarray, np.ndarray] | None = None,
        assume_centered: bool = False,
        nearest: bool = False,
        higham: bool = False,
        higham_max_iteration: int = 100,
    ):
        super().__init__(
            nearest=nearest,
            higham=higham,
            higham_max_iteration=higham_max_iteration,
        )
        self.corrected = corrected
        self.decomposition = decomposition
        self.assume_centered = assume_centered

    def fit(self, X: npt.ArrayLike, y=None) -> "AnalyticalNonlinearShrinkage":
        """Fit the Analytical Nonlinear Shrinkage estimator.

        Parameters
        ----------
        X : array-like of shape (n_observations, n_variables)
           Observations.

        y : Ignored
            Not used, present for API consistency by convention.

        Returns
        -------
        self : AnalyticalNonlinearShrinkage
            Fitted estimator.
        """
        X = skv.validate_data(self, X)
        n_observations, n_variables = X.shape
        if n_observations < MIN_OBSERVATIONS:
            raise InsufficientSamplesError(n_observations, MIN_OBSERVATIONS)

        covariance, _, _ = sample_covariance(
            X, corrected=self.corrected, assume_centered=self.assume_centered
        )
        eigenvalues, shrunk_eigenvalues, eigenvectors = _shrunk_spectrum(
            covariance, n_observations, decomposition=self.decomposition
        )
        self.sample_eigenvalues_ = eigenvalues
        self.shrunk_eigenvalues_ = shrunk_eigenvalues
        self.eigenvectors_ = eigenvectors
        self.effective_n_observations_ = effective_n_observations(
            n_observations, n_variables
        )
        self._set_covariance(
            reconstruct_from_spectrum(shrunk_eigenvalues, eigenvectors)
        )
        return self

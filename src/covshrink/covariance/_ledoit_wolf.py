"""LedoitWolf Covariance Estimators."""

# Copyright (c) 2023-2025
# Author: Hugo Delatte <delatte.hugo@gmail.com>
# SPDX-License-Identifier: BSD-3-Clause
# Implementation derived from:
# scikit-learn, Copyright (c) 2007-2010 David Cournapeau, Fabian Pedregosa, Olivier
# Grisel Licensed under BSD 3 clause.
# PyPortfolioOpt, Copyright (c) 2018 Robert Andrew Martin, Licensed under MIT.

from enum import auto

import numpy as np

from covshrink.covariance._linear_shrinkage import (
    BaseLinearShrinkage,
    resolve_shrinkage,
    scaled_identity_target,
)
from covshrink.utils.tools import AutoEnum


class LedoitWolfTarget(AutoEnum):
    """Enumeration of the Ledoit-Wolf shrinkage targets.

    Parameters
    ----------
    CONSTANT_CORRELATION : str
        Sample variances on the diagonal and the average sample correlation for all
        pairs of variables.

    SCALED_IDENTITY : str
        Identity scaled by the average sample variance.
    """

    CONSTANT_CORRELATION = auto()
    SCALED_IDENTITY = auto()


def constant_correlation_target(covariance: np.ndarray) -> tuple[np.ndarray, float]:
    """Constant correlation shrinkage target.

    Parameters
    ----------
    covariance : ndarray of shape (n_variables, n_variables)
        Sample covariance `S`.

    Returns
    -------
    target, r_bar : tuple[ndarray of shape (n_variables, n_variables), float]
        Target `F` with `F_ii = S_ii` and `F_ij = r_bar * sqrt(S_ii * S_jj)`, and the
        average off-diagonal sample correlation `r_bar`.
    """
    n_variables = covariance.shape[0]
    std = np.sqrt(np.diag(covariance))
    std_prod = np.outer(std, std)
    if n_variables > 1:
        r_bar = (np.sum(covariance / std_prod) - n_variables) / (
            n_variables * (n_variables - 1)
        )
    else:
        r_bar = 0.0
    target = r_bar * std_prod
    np.fill_diagonal(target, np.diag(covariance))
    return target, float(r_bar)


class LedoitWolf(BaseLinearShrinkage):
    r"""LedoitWolf Covariance Estimator.

    Ledoit-Wolf is a particular form of shrinkage, where the shrinkage
    coefficient is computed using O. Ledoit and M. Wolf's formula.

    With the default constant correlation target [1]_, the optimal shrinkage is:

    .. math:: \delta = \max\left(0, \min\left(1,
        \frac{\hat{\pi} - \hat{\rho}}{n\hat{\gamma}}\right)\right)

    where :math:`\hat{\pi}` is the sum of the asymptotic variances of the entries of
    the sample covariance, :math:`\hat{\rho}` the sum of their asymptotic
    covariances with the target entries and :math:`\hat{\gamma}` the squared
    Frobenius distance between the target and the sample covariance.
    With the scaled identity target [2]_, :math:`\hat{\rho} = 0`.

    When :math:`\hat{\gamma}` is not above machine epsilon relative to the squared
    Frobenius norm of the sample covariance, for example with two
    variables and the constant correlation target which then equals the sample
    covariance, the intensity is resolved to 0 if :math:`\hat{\pi} \le \hat{\rho}`
    and 1 otherwise.

    Parameters
    ----------
    shrinkage : "auto" or float, default="auto"
        Shrinkage intensity. With `"auto"`, the Ledoit-Wolf optimal intensity is
        computed, otherwise it must be a float in [0, 1].

    target : LedoitWolfTarget, default=LedoitWolfTarget.CONSTANT_CORRELATION
        Shrinkage target.

    assume_centered : bool, default=False
        If True, data will not be centered before computation.
        Useful when working with data whose mean is almost, but not exactly
        zero.
        If False (default), data will be centered before computation.

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

    location_ : ndarray of shape (n_variables,)
        Estimated location, i.e. the estimated mean.

    target_ : ndarray of shape (n_variables, n_variables)
        Shrinkage target.

    shrinkage_ : float
        Coefficient in the convex combination used for the computation
        of the shrunk estimate. Range is [0, 1].

    n_features_in_ : int
       Number of variables seen during `fit`.

    feature_names_in_ : ndarray of shape (`n_features_in_`,)
       Names of features seen during `fit`. Defined only when `X`
       has feature names that are all strings.

    References
    ----------
    .. [1]  "Honey, I Shrunk the Sample Covariance Matrix".
        The Journal of Portfolio Management, 30(4), 110-119.
        Ledoit and Wolf (2004).

    .. [2]  "A Well-Conditioned Estimator for Large-Dimensional Covariance Matrices".
        Ledoit and Wolf, Journal of Multivariate Analysis, Volume 88, Issue 2.
        February 2004, pages 365-41.
    """

    def __init__(
        self,
        shrinkage: str | float = "auto",
        target: LedoitWolfTarget = LedoitWolfTarget.CONSTANT_CORRELATION,
        assume_centered: bool = False,
        nearest: bool = False,
        higham: bool = False,
        higham_max_iteration: int = 100,
    ):
        super().__init__(
            shrinkage=shrinkage,
            assume_centered=assume_centered,
            nearest=nearest,
            higham=higham,
            higham_max_iteration=higham_max_iteration,
        )
        self.target = target

    def _target(self, X: np.ndarray, covariance: np.ndarray) -> np.ndarray:
        target = LedoitWolfTarget(self.target)
        if target == LedoitWolfTarget.SCALED_IDENTITY:
            return scaled_identity_target(covariance)
        target, _ = constant_correlation_target(covariance)
        return target

    def _optimal_shrinkage(
        self, X: np.ndarray, covariance: np.ndarray, target: np.ndarray
    ) -> float:
        n_observations = X.shape[0]
        # asymptotic variances of the sample covariance entries
        pi_mat = (X**2).T @ (X**2) / n_observations - covariance**2
        pi_hat = np.sum(pi_mat)

        if LedoitWolfTarget(self.target) == LedoitWolfTarget.SCALED_IDENTITY:
            rho_hat = 0.0
        else:
            _, r_bar = constant_correlation_target(covariance)
            std = np.sqrt(np.diag(covariance))
            theta_mat = (X**3).T @ X / n_observations - (
                np.diag(covariance)[:, np.newaxis] * covariance
            )
            ratio = std[np.newaxis, :] / std[:, np.newaxis]
            np.fill_diagonal(theta_mat, 0.0)
            rho_hat = np.trace(pi_mat) + r_bar * np.sum(theta_mat * ratio)

        gamma_hat = np.sum((target - covariance) ** 2)
        return resolve_shrinkage(
            pi_hat - rho_hat,
            gamma_hat,
            reference=np.sum(covariance**2),
            scale=n_observations,
        )

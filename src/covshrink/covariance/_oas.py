"""Oracle Approximating Shrinkage Covariance Estimators."""

# Copyright (c) 2023-2025
# Author: Hugo Delatte <delatte.hugo@gmail.com>
# SPDX-License-Identifier: BSD-3-Clause
# Implementation derived from:
# scikit-learn, Copyright (c) 2007-2010 David Cournapeau, Fabian Pedregosa, Olivier
# Grisel Licensed under BSD 3 clause.

import numpy as np

from covshrink.covariance._linear_shrinkage import (
    BaseLinearShrinkage,
    resolve_shrinkage,
    scaled_identity_target,
)


class OAS(BaseLinearShrinkage):
    r"""Oracle Approximating Shrinkage Estimator as proposed in [1]_.

    Parameters
    ----------
    shrinkage : "auto" or float, default="auto"
        Shrinkage intensity. With `"auto"`, the OAS intensity is computed,
        otherwise it must be a float in [0, 1].

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
        Shrinkage target `trace(S) / p * I`.

    shrinkage_ : float
        Coefficient in the convex combination used for the computation
        of the shrunk estimate. Range is [0, 1].

    n_features_in_ : int
       Number of variables seen during `fit`.

    feature_names_in_ : ndarray of shape (`n_features_in_`,)
       Names of features seen during `fit`. Defined only when `X`
       has feature names that are all strings.

    Notes
    -----
    The regularised covariance is:

    (1 - shrinkage) * cov + shrinkage * mu * np.identity(n_features),

    where mu = trace(cov) / n_features and shrinkage is given by Eq. 23 of [1]_:

    .. math:: \rho = \min\left(1, \frac{(1 - 2/p)\operatorname{tr}(S^2)
        + \operatorname{tr}^2(S)}{(n + 1 - 2/p)\left(\operatorname{tr}(S^2)
        - \frac{\operatorname{tr}^2(S)}{p}\right)}\right)

    References
    ----------
    .. [1] "Shrinkage algorithms for MMSE covariance estimation".
        Chen, Y., Wiesel, A., Eldar, Y. C., & Hero, A. O.
        IEEE Transactions on Signal Processing, 58(10), 5016-5029, 2010.
    """

    def __init__(
        self,
        shrinkage: str | float = "auto",
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

    def _target(self, X: np.ndarray, covariance: np.ndarray) -> np.ndarray:
        return scaled_identity_target(covariance)

    def _optimal_shrinkage(
        self, X: np.ndarray, covariance: np.ndarray, target: np.ndarray
    ) -> float:
        n_observations, n_variables = X.shape
        tr_s2 = np.sum(covariance**2)
        tr2_s = np.trace(covariance) ** 2
        numerator = (1.0 - 2.0 / n_variables) * tr_s2 + tr2_s
        return resolve_shrinkage(
            numerator,
            tr_s2 - tr2_s / n_variables,
            reference=tr_s2,
            scale=n_observations + 1.0 - 2.0 / n_variables,
        )

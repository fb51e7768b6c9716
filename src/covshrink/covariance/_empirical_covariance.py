"""Empirical Covariance Estimators."""

# Copyright (c) 2023-2025
# Author: Hugo Delatte <delatte.hugo@gmail.com>
# SPDX-License-Identifier: BSD-3-Clause
# Implementation derived from:
# scikit-learn, Copyright (c) 2007-2010 David Cournapeau, Fabian Pedregosa, Olivier
# Grisel Licensed under BSD 3 clause.

import numpy as np
import numpy.typing as npt
import sklearn.utils.validation as skv

from covshrink.covariance._base import BaseCovariance
from covshrink.utils.tools import orient_observations


def _center_observations(
    X: np.ndarray, assume_centered: bool = False
) -> tuple[np.ndarray, np.ndarray]:
    """Remove the column means of `X` unless the data is assumed centered.

    Returns the centered data and the location (zeros when `assume_centered`).
    """
    if assume_centered:
        return X, np.zeros(X.shape[1])
    location = X.mean(axis=0)
    return X - location, location


def sample_covariance(
    X: npt.ArrayLike,
    dims: int = 1,
    corrected: bool = False,
    assume_centered: bool = False,
) -> tuple[np.ndarray, int, int]:
    """Compute the sample covariance matrix.

    Parameters
    ----------
    X : array-like of shape (n_observations, n_variables) or (n_variables, n_observations)
        Observations.

    dims : int, default=1
        The dimension along which the variables are organized.
        When `dims=1`, the variables are columns with observations in rows;
        when `dims=2`, the variables are rows with observations in columns.

    corrected : bool, default=False
        If this is set to True, the sum of squares is divided by `n - 1`
        (Bessel's correction), otherwise by `n`.

    assume_centered : bool, default=False
        If True, data will not be centered before computation.

    Returns
    -------
    covariance, n_observations, n_variables : tuple[ndarray, int, int]
        Sample covariance of shape (n_variables, n_variables), number of observations
        and number of variables.
    """
    X = np.asarray(orient_observations(X, dims=dims), dtype=float)
    if X.ndim != 2:
        raise ValueError(f"`X` must be a 2D array, got a {X.ndim}D array")
    n_observations, n_variables = X.shape
    divisor = n_observations - 1 if corrected else n_observations
    if divisor < 1:
        raise ValueError(
            f"Not enough observations to compute a covariance (given: {n_observations})"
        )
    X, _ = _center_observations(X, assume_centered=assume_centered)
    covariance = X.T @ X / divisor
    return covariance, n_observations, n_variables


class EmpiricalCovariance(BaseCovariance):
    """Empirical Covariance estimator.

    The unshrunk sample covariance exposed through the estimator interface, see
    :func:`sample_covariance`.

    Parameters
    ----------
    corrected : bool, default=False
        If this is set to True, the sum of squares is divided by `n - 1`
        (Bessel's correction), otherwise by `n`.

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
        above zeros (1e-13). The default is `False` and uses the clipping method as the
        Higham algorithm can be slow for large datasets.

    higham_max_iteration : int, default=100
        Maximum number of iterations of the Higham (2002) algorithm.
        The default value is `100`.

    Attributes
    ----------
    covariance_ : ndarray of shape (n_variables, n_variables)
        Estimated covariance matrix.

    location_ : ndarray of shape (n_variables,)
        Estimated location, i.e. the estimated mean.

    n_features_in_ : int
        Number of variables seen during `fit`.

    feature_names_in_ : ndarray of shape (`n_features_in_`,)
        Names of variables seen during `fit`. Defined only when `X`
        has variables names that are all strings.
    """

    location_: np.ndarray

    def __init__(
        self,
        corrected: bool = False,
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
        self.assume_centered = assume_centered

    def fit(self, X: npt.ArrayLike, y=None) -> "EmpiricalCovariance":
        """Fit the empirical covariance estimator.

        Parameters
        ----------
        X : array-like of shape (n_observations, n_variables)
           Observations.

        y : Ignored
            Not used, present for API consistency by convention.

        Returns
        -------
        self : EmpiricalCovariance
            Fitted estimator.
        """
        X = skv.validate_data(self, X, dtype=np.float64)
        X, self.location_ = _center_observations(
            X, assume_centered=self.assume_centered
        )
        covariance, _, _ = sample_covariance(
            X, corrected=self.corrected, assume_centered=True
        )
        self._set_covariance(covariance)
        return self

"""Base Linear Shrinkage Covariance Estimators."""

# Copyright (c) 2025 The covshrink developers
# SPDX-License-Identifier: BSD-3-Clause
# Implementation derived from:
# scikit-learn, Copyright (c) 2007-2010 David Cournapeau, Fabian Pedregosa, Olivier
# Grisel Licensed under BSD 3 clause.

from abc import ABC, abstractmethod

import numpy as np
import numpy.typing as npt
import sklearn.utils.validation as skv

from covshrink.covariance._base import BaseCovariance
from covshrink.covariance._empirical_covariance import _center_observations
from covshrink.utils.tools import check_shrinkage

_EPS = np.finfo(np.float64).eps


def scaled_identity_target(covariance: np.ndarray) -> np.ndarray:
    """Shrinkage target `trace(S) / p * I`.

    Parameters
    ----------
    covariance : ndarray of shape (n_variables, n_variables)
        Sample covariance `S`.

    Returns
    -------
    target : ndarray of shape (n_variables, n_variables)
        Scaled identity target.
    """
    n_variables = covariance.shape[0]
    return np.trace(covariance) / n_variables * np.eye(n_variables)


def shrunk_covariance(
    covariance: np.ndarray, target: np.ndarray, shrinkage: float
) -> np.ndarray:
    """Convex combination `(1 - shrinkage) * S + shrinkage * F`."""
    return (1.0 - shrinkage) * covariance + shrinkage * target


def resolve_shrinkage(
    numerator: float, distance: float, reference: float, scale: float = 1.0
) -> float:
    """Shrinkage intensity `numerator / (scale * distance)` clipped to [0, 1].

    `distance` is the squared Frobenius distance between the target and the sample
    covariance and `reference` the squared Frobenius norm of the sample covariance.
    When `distance` is not above machine epsilon relative to `reference`, the ratio
    is not computed and the intensity is resolved to 0 or 1 from the sign of the
    numerator.
    """
    if distance <= _EPS * reference:
        return 0.0 if numerator <= 0 else 1.0
    return float(np.clip(numerator / (scale * distance), 0.0, 1.0))


class BaseLinearShrinkage(BaseCovariance, ABC):
    """Base class for the linear shrinkage covariance estimators.

    The estimate is `(1 - shrinkage) * S + shrinkage * F` where `S` is the sample
    covariance normalized by `n_observations` and `F` a structured target.

    Parameters
    ----------
    shrinkage : "auto" or float, default="auto"
        Shrinkage intensity. With `"auto"`, the optimal intensity of the estimator
        is computed, otherwise it must be a float in [0, 1].

    assume_centered : bool, default=False
        If True, data will not be centered before computation.
        Useful when working with data whose mean is almost, but not exactly
        zero.
        If False (default), data will be centered before computation.

    nearest : bool, default=False
        See :class:`~covshrink.covariance.BaseCovariance`.

    higham : bool, default=False
        See :class:`~covshrink.covariance.BaseCovariance`.

    higham_max_iteration : int, default=100
        See :class:`~covshrink.covariance.BaseCovariance`.

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
    """

    location_: np.ndarray
    target_: np.ndarray
    shrinkage_: float

    @abstractmethod
    def __init__(
        self,
        shrinkage: str | float = "auto",
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
        self.shrinkage = shrinkage
        self.assume_centered = assume_centered

    @abstractmethod
    def _target(self, X: np.ndarray, covariance: np.ndarray) -> np.ndarray:
        """Shrinkage target computed from the centered observations and the sample
        covariance."""

    @abstractmethod
    def _optimal_shrinkage(
        self, X: np.ndarray, covariance: np.ndarray, target: np.ndarray
    ) -> float:
        """Optimal shrinkage intensity in [0, 1]."""

    def fit(self, X: npt.ArrayLike, y=None):
        """Fit the shrunk covariance model to X.

        Parameters
        ----------
        X : array-like of shape (n_observations, n_variables)
         Observations.

        y : Ignored
          Not used, present for API consistency by convention.

        Returns
        -------
        self : BaseLinearShrinkage
          Fitted estimator.
        """
        shrinkage = check_shrinkage(self.shrinkage)
        X = skv.validate_data(self, X, dtype=np.float64)
        n_observations = X.shape[0]
        X, self.location_ = _center_observations(
            X, assume_centered=self.assume_centered
        )
        covariance = X.T @ X / n_observations
        self._sanity_check(covariance)
        self.target_ = self._target(X, covariance)
        if shrinkage == "auto":
            shrinkage = self._optimal_shrinkage(X, covariance, self.target_)
        self.shrinkage_ = shrinkage
        self._set_covariance(shrunk_covariance(covariance, self.target_, shrinkage))
        return self

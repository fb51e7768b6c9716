"""Tools module."""

# Copyright (c) 2023-2025
# Author: Hugo Delatte <delatte.hugo@gmail.com>
# SPDX-License-Identifier: BSD-3-Clause
# Implementation derived from:
# scikit-learn, Copyright (c) 2007-2010 David Cournapeau, Fabian Pedregosa, Olivier
# Grisel Licensed under BSD 3 clause.

from enum import Enum
from typing import Any

import numpy as np
import numpy.typing as npt
import pandas as pd

__all__ = [
    "AutoEnum",
    "check_dims",
    "check_shrinkage",
    "orient_observations",
]


class AutoEnum(str, Enum):
    """Base Enum class used in `covshrink`."""

    @staticmethod
    def _generate_next_value_(
        name: str, start: int, count: int, last_values: Any
    ) -> str:
        """Overriding `auto()`."""
        return name.lower()

    @classmethod
    def has(cls, value: str) -> bool:
        """Check if a value is in the Enum.

        Parameters
        ----------
        value : str
            Input value.

        Returns
        -------
        x : bool
            True if the value is in the Enum, False otherwise.
        """
        return value in cls._value2member_map_

    def __repr__(self) -> str:
        """Representation of the Enum."""
        return self.name


def check_dims(dims: int) -> int:
    """Check that `dims` is a valid data orientation.

    Parameters
    ----------
    dims : int
        `1` when variables are columns and observations are rows, `2` when
        variables are rows and observations are columns.

    Returns
    -------
    dims : int
        The validated orientation.
    """
    if isinstance(dims, bool) or dims not in (1, 2):
        raise ValueError(f"Argument `dims` can only be 1 or 2 (given: {dims})")
    return int(dims)


def orient_observations(X: npt.ArrayLike, dims: int = 1) -> npt.ArrayLike:
    """Return `X` with observations in rows and variables in columns.

    DataFrames are transposed as DataFrames so that variable names survive the
    re-orientation.

    Parameters
    ----------
    X : array-like of shape (n_observations, n_variables) or (n_variables, n_observations)
        Input data.

    dims : int, default=1
        Orientation of `X`, see :func:`check_dims`.

    Returns
    -------
    X : array-like of shape (n_observations, n_variables)
        Re-oriented data.
    """
    dims = check_dims(dims)
    if dims == 1:
        return X
    if isinstance(X, pd.DataFrame):
        return X.T
    return np.asarray(X).T


def check_shrinkage(shrinkage: str | float) -> str | float:
    """Check that `shrinkage` is `"auto"` or a number in [0, 1].

    Parameters
    ----------
    shrinkage : "auto" or float
        Shrinkage intensity.

    Returns
    -------
    shrinkage : "auto" or float
        The validated shrinkage.
    """
    if isinstance(shrinkage, str):
        if shrinkage != "auto":
            raise ValueError(
                f"`shrinkage` must be 'auto' or a float in [0, 1], got '{shrinkage}'"
            )
        return shrinkage
    if isinstance(shrinkage, bool) or not np.isscalar(shrinkage):
        raise ValueError(
            f"`shrinkage` must be 'auto' or a float in [0, 1], got {shrinkage!r}"
        )
    if not 0.0 <= shrinkage <= 1.0:
        raise ValueError(f"`shrinkage` must be in [0, 1], got {shrinkage}")
    return float(shrinkage)

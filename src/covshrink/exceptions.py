"""
The :mod:`covshrink.exceptions` module includes all custom warnings and error
classes used across covshrink.
"""

# Copyright (c) 2023-2025
# Author: Hugo Delatte <delatte.hugo@gmail.com>
# SPDX-License-Identifier: BSD-3-Clause

__all__ = [
    "DegenerateSpectrumWarning",
    "InsufficientSamplesError",
    "NonPositiveVarianceError",
]


class InsufficientSamplesError(ValueError):
    """Not enough observations for the estimator."""

    def __init__(self, n_observations: int, min_observations: int):
        self.n_observations = n_observations
        self.min_observations = min_observations
        super().__init__(
            f"The number of observations must be at least {min_observations} "
            f"(given: {n_observations})."
        )


class NonPositiveVarianceError(Exception):
    """Variance negative or null."""


class DegenerateSpectrumWarning(UserWarning):
    """Shrinkage denominator vanished for some eigenvalues."""

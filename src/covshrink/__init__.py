"""covshrink package."""

# Author: Hugo Delatte <delatte.hugo@gmail.com>
# SPDX-License-Identifier: BSD-3-Clause
import importlib.metadata

from covshrink.covariance import (
    OAS,
    AnalyticalNonlinearShrinkage,
    BaseCovariance,
    EmpiricalCovariance,
    LedoitWolf,
    LedoitWolfTarget,
    RaoBlackwellLedoitWolf,
    analytical_nonlinear_shrinkage,
    sample_covariance,
)

__version__ = importlib.metadata.version("covshrink")

__all__ = [
    "OAS",
    "AnalyticalNonlinearShrinkage",
    "BaseCovariance",
    "EmpiricalCovariance",
    "LedoitWolf",
    "LedoitWolfTarget",
    "RaoBlackwellLedoitWolf",
    "analytical_nonlinear_shrinkage",
    "sample_covariance",
]

"""Covariance module."""

from covshrink.covariance._analytical_nonlinear_shrinkage import (
    AnalyticalNonlinearShrinkage,
    analytical_nonlinear_shrinkage,
    shrink_eigenvalues,
)
from covshrink.covariance._base import BaseCovariance
from covshrink.covariance._empirical_covariance import (
    EmpiricalCovariance,
    sample_covariance,
)
from covshrink.covariance._ledoit_wolf import LedoitWolf, LedoitWolfTarget
from covshrink.covariance._linear_shrinkage import BaseLinearShrinkage
from covshrink.covariance._oas import OAS
from covshrink.covariance._rao_blackwell_ledoit_wolf import RaoBlackwellLedoitWolf

__all__ = [
    "OAS",
    "AnalyticalNonlinearShrinkage",
    "BaseCovariance",
    "BaseLinearShrinkage",
    "EmpiricalCovariance",
    "LedoitWolf",
    "LedoitWolfTarget",
    "RaoBlackwellLedoitWolf",
    "analytical_nonlinear_shrinkage",
    "sample_covariance",
    "shrink_eigenvalues",
]

"""Kernel estimates of a sample spectrum."""

# Copyright (c) 2025 The covshrink developers
# SPDX-License-Identifier: BSD-3-Clause

import numpy as np

__all__ = [
    "effective_n_observations",
    "epanechnikov",
    "epanechnikov_hilbert_transform",
    "kernel_bandwidth",
    "spectral_density_estimates",
]

SQRT5 = np.sqrt(5.0)
INV_PI = 1.0 / np.pi
EPAN_1 = 3.0 / (4.0 * SQRT5)
EPAN_2 = EPAN_1 * INV_PI
EPAN_3 = 0.3 * INV_PI

# relative tolerance used to detect the poles at |x| = sqrt(5)
_POLE_RTOL = np.sqrt(np.finfo(np.float64).eps)


def epanechnikov(x: np.ndarray | float) -> np.ndarray | float:
    r"""Epanechnikov kernel.

    .. math:: K(x) = \frac{3}{4\sqrt{5}} \max\left(0, 1 - \frac{x^2}{5}\right)

    Parameters
    ----------
    x : float or ndarray
        Kernel argument.

    Returns
    -------
    value : float or ndarray
        Kernel evaluated at `x`.
    """
    return EPAN_1 * np.maximum(0.0, 1.0 - np.square(x) / 5.0)


def epanechnikov_hilbert_transform(x: np.ndarray | float) -> np.ndarray | float:
    r"""Hilbert transform of the Epanechnikov kernel.

    .. math:: \mathcal{H}_K(x) = -\frac{3x}{10\pi}
        + \frac{3}{4\sqrt{5}\pi}\left(1 - \frac{x^2}{5}\right)
        \log\left|\frac{\sqrt{5} - x}{\sqrt{5} + x}\right|

    At :math:`|x| = \sqrt{5}` the logarithm diverges but its product with
    :math:`1 - x^2/5` vanishes, so the transform is replaced by its limit
    :math:`-3x/(10\pi)`. Arguments within a relative tolerance of
    `sqrt(machine epsilon)` of the poles take the limit as well.

    Parameters
    ----------
    x : float or ndarray
        Kernel argument.

    Returns
    -------
    value : float or ndarray
        Hilbert transform evaluated at `x`.
    """
    is_scalar = np.ndim(x) == 0
    x = np.asarray(x, dtype=float)
    limit = -EPAN_3 * x
    with np.errstate(divide="ignore", invalid="ignore"):
        value = limit + EPAN_2 * (1.0 - np.square(x) / 5.0) * np.log(
            np.abs((SQRT5 - x) / (SQRT5 + x))
        )
    poles = np.isclose(np.abs(x), SQRT5, rtol=_POLE_RTOL, atol=0.0)
    value = np.where(poles, limit, value)
    if is_scalar:
        return float(value)
    return value


def effective_n_observations(n_observations: int, n_variables: int) -> int:
    """Effective sample size: `n` when `p < n`, `n - 1` otherwise.

    Parameters
    ----------
    n_observations : int
        Number of observations `n`.

    n_variables : int
        Number of variables `p`.

    Returns
    -------
    eta : int
        Effective sample size.
    """
    if n_variables < n_observations:
        return n_observations
    return n_observations - 1


def kernel_bandwidth(eta: int) -> float:
    """Global bandwidth `eta ** (-1/3)`."""
    return eta ** (-1.0 / 3.0)


def spectral_density_estimates(
    eigenvalues: np.ndarray, eta: int
) -> tuple[np.ndarray, np.ndarray]:
    r"""Kernel estimates of the limiting spectral density and of its Hilbert
    transform at each retained sample eigenvalue.

    Only the top `min(p, eta)` eigenvalues are retained. The grid is
    :math:`x_{ij} = (\lambda_i - \lambda_j) / (h \lambda_j)` with the locally
    adaptive bandwidth :math:`h\lambda_j`, :math:`h = \eta^{-1/3}`, and:

    .. math:: \tilde{f}_i = \frac{1}{m}\sum_j \frac{K(x_{ij})}{h\lambda_j},
        \qquad \mathcal{H}\tilde{f}_i = \frac{1}{m}\sum_j
        \frac{\mathcal{H}_K(x_{ij})}{h\lambda_j}

    Parameters
    ----------
    eigenvalues : ndarray of shape (p,)
        Sample eigenvalues sorted in ascending order.

    eta : int
        Effective sample size.

    Returns
    -------
    f_tilde, hf_tilde : tuple[ndarray of shape (m,), ndarray of shape (m,)]
        Density and Hilbert transform estimates, `m = min(p, eta)`.
    """
    eigenvalues = np.asarray(eigenvalues, dtype=float)
    if eigenvalues.ndim != 1:
        raise ValueError(
            f"`eigenvalues` must be a 1D array, got a {eigenvalues.ndim}D array"
        )
    if eta < 1:
        raise ValueError(f"`eta` must be a positive integer, got {eta}")
    n_variables = len(eigenvalues)
    lambda_ = eigenvalues[max(0, n_variables - eta) :]

    h = kernel_bandwidth(eta)
    bandwidths = h * lambda_[np.newaxis, :]
    x = (lambda_[:, np.newaxis] - lambda_[np.newaxis, :]) / bandwidths

    f_tilde = np.mean(epanechnikov(x) / bandwidths, axis=1)
    hf_tilde = np.mean(epanechnikov_hilbert_transform(x) / bandwidths, axis=1)
    return f_tilde, hf_tilde

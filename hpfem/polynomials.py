"""Legendre and Jacobi polynomials on [0, 1] and their integrals.

All polynomials are evaluated with three-term recurrences and accept scalars or
arrays for ``x``. The integrated polynomials follow the convention of the
hierarchic bases, i.e. the integral of degree ``n`` is the antiderivative of the
polynomial of degree ``n - 1`` vanishing at 0, with the degree 0 integral fixed to -1.

The Jacobi polynomials are the shifted polynomials :math:`P_n^{(\\alpha, 0)}(2x - 1)`
and the integrated Jacobi polynomials are taken from `Fuentes et al.
    <https://arxiv.org/pdf/1504.03025.pdf>`.
"""

import numpy as np


def legendre(n: int, x: np.ndarray) -> np.ndarray:
    """Evaluate the shifted Legendre polynomial of degree n.

    :param n: The degree of the polynomial.
    :param x: The points in [0, 1] at which to evaluate the polynomial.

    :returns: The values of the polynomial at the points.
    """
    x = 2.0 * np.asarray(x, dtype=float) - 1.0

    L_prev = np.ones_like(x)
    if n == 0:
        return L_prev

    L = x
    for j in range(1, n):
        L_prev, L = L, ((2 * j + 1) * x * L - j * L_prev) / (j + 1)

    return L


def integrated_legendre(n: int, x: np.ndarray) -> np.ndarray:
    """Evaluate the integrated shifted Legendre polynomial of degree n.

    :param n: The degree of the integrated polynomial.
    :param x: The points in [0, 1] at which to evaluate the polynomial.

    :returns: The values of the integrated polynomial at the points.
    """
    x = np.asarray(x, dtype=float)
    if n == 0:
        return -np.ones_like(x)
    if n == 1:
        return x.copy()

    x = 2.0 * x - 1.0

    # Run the Legendre recurrence up to degree n, keeping the last three terms
    L_prev2 = np.ones_like(x)
    L_prev = x
    L = (3.0 * x**2 - 1.0) / 2.0
    for j in range(2, n):
        L_prev2, L_prev, L = L_prev, L, ((2 * j + 1) * x * L - j * L_prev) / (j + 1)

    return (L - L_prev2) / (4 * n - 2)


def _jacobi_step(j: int, alpha: float, x: np.ndarray, P: np.ndarray, P_prev):
    """Advance the Jacobi recurrence from degree j to degree j + 1."""
    k = j + 1
    a = 2 * k * (k + alpha) * (2 * k + alpha - 2)
    b = 2 * k + alpha - 1
    c = (2 * k + alpha) * (2 * k + alpha - 2)
    d = 2 * (k + alpha - 1) * (k - 1) * (2 * k + alpha)
    return (b * (c * (2.0 * x - 1.0) + alpha**2) * P - d * P_prev) / a


def jacobi(n: int, alpha: float, x: np.ndarray) -> np.ndarray:
    """Evaluate the shifted Jacobi polynomial of degree n.

    :param n: The degree of the polynomial.
    :param alpha: The Jacobi parameter, must be non-negative.
    :param x: The points in [0, 1] at which to evaluate the polynomial.

    :returns: The values of the polynomial at the points.
    """
    x = np.asarray(x, dtype=float)

    P_prev = np.ones_like(x)
    if n == 0:
        return P_prev

    P = (2.0 + alpha) * x - 1.0
    for j in range(1, n):
        P_prev, P = P, _jacobi_step(j, alpha, x, P, P_prev)

    return P


def integrated_jacobi(n: int, alpha: float, x: np.ndarray) -> np.ndarray:
    """Evaluate the integrated shifted Jacobi polynomial of degree n.

    :param n: The degree of the integrated polynomial.
    :param alpha: The Jacobi parameter, must be non-negative.
    :param x: The points in [0, 1] at which to evaluate the polynomial.

    :returns: The values of the integrated polynomial at the points.
    """
    x = np.asarray(x, dtype=float)
    if n == 0:
        return -np.ones_like(x)
    if n == 1:
        return x.copy()

    P_prev2 = np.ones_like(x)
    P_prev = (2.0 + alpha) * x - 1.0
    P = _jacobi_step(1, alpha, x, P_prev, P_prev2)
    for j in range(2, n):
        P_prev2, P_prev, P = P_prev, P, _jacobi_step(j, alpha, x, P, P_prev)

    a = (n + alpha) / ((2 * n + alpha - 1) * (2 * n + alpha))
    b = alpha / ((2 * n + alpha - 2) * (2 * n + alpha))
    c = (n - 1) / ((2 * n + alpha - 2) * (2 * n + alpha - 1))
    return a * P + b * P_prev - c * P_prev2


def chebyshev_nodes(n: int) -> np.ndarray:
    """Compute the n interior Chebyshev nodes of the second kind on [0, 1].

    These are the extrema of the Chebyshev polynomial of degree n + 1 with the
    endpoints removed, in increasing order.

    :param n: The number of nodes.

    :returns: An array of shape (n,) containing the nodes.
    """
    if n <= 0:
        return np.zeros(0)
    k = np.arange(1, n + 1)
    return (1.0 - np.cos(k * np.pi / (n + 1))) / 2.0

"""Gauss quadrature rules for reference elements."""

from .exceptions import InvalidArgumentError
from .reference_elements import (
    ReferenceCell,
    ReferenceInterval,
    ReferencePoint,
    ReferenceQuadrilateral,
    ReferenceTriangle,
)
from numpy.polynomial.legendre import leggauss
import numpy as np


def gauss_quadrature(cell: ReferenceCell, degree: int) -> tuple[np.ndarray, np.ndarray]:
    """Compute the Gauss quadrature points and weights.

    :param cell: The :class:`~reference_elements.ReferenceCell` on which to compute
        the quadrature points.
    :param degree: The degree of polynomials the rule integrates exactly.

    :returns: A tuple containing an array of shape (q, cell.dim) with the quadrature
        points and an array of shape (q,) with the weights.
    """
    if degree < 0:
        raise InvalidArgumentError(f"Quadrature degree {degree} is negative")

    if cell == ReferencePoint:
        points = np.zeros((1, 0))
        weights = np.ones(1)

    elif cell == ReferenceInterval:
        # Map the quadrature points from [-1, 1] to [0, 1]
        npoints = degree // 2 + 1

        points, weights = leggauss(npoints)

        points = (points + 1.0) / 2.0
        weights = weights / 2.0

        points = points[:, np.newaxis]

    elif cell == ReferenceQuadrilateral:
        p1, w1 = gauss_quadrature(ReferenceInterval, degree)

        # The x coordinate varies fastest
        points = np.array([(p[0], q[0]) for q in p1 for p in p1])
        weights = np.array([v * w for w in w1 for v in w1])

    elif cell == ReferenceTriangle:
        # Collapse the square onto the triangle, y shrinks with 1 - x
        x1, w1 = gauss_quadrature(ReferenceInterval, degree + 1)
        x2, w2 = gauss_quadrature(ReferenceInterval, degree)

        X, Y = np.meshgrid(x1[:, 0], x2[:, 0], indexing="ij")
        points = np.stack([X.ravel(), (Y * (1 - X)).ravel()], axis=-1)
        weights = (np.outer(w1, w2) * (1 - X)).ravel()

    else:
        raise InvalidArgumentError(f"Unknown reference cell {cell!r}")

    return points, weights

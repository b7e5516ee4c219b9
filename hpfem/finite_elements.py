"""Hierarchic finite elements of arbitrary degree on reference cells.

The shape functions are taken from `Fuentes et al.
    <https://arxiv.org/pdf/1504.03025.pdf>`.

Shape functions are numbered by sub-entity: first one per vertex, then the
interior functions of each edge, then the interior functions of the cell. Edge
functions depend on the relative orientation of the edge. With a negative
orientation the edge parameter is reversed and the modes of the edge are stored
in reverse order, so that cells sharing an edge agree on every edge function.
"""

from .constants import RANK_TOLERANCE
from .exceptions import (
    InvalidArgumentError,
    NumericalDegeneracyError,
    UnsupportedOperationError,
)
from .polynomials import (
    chebyshev_nodes,
    integrated_jacobi,
    integrated_legendre,
    jacobi,
    legendre,
)
from .reference_elements import (
    Orientation,
    ReferenceCell,
    ReferenceInterval,
    ReferencePoint,
    ReferenceQuadrilateral,
    ReferenceTriangle,
)
from typing import Callable, Optional, Sequence
import logging
import numpy as np
import scipy.linalg

logger = logging.getLogger(__name__)

# Gradients of the barycentric coordinates on the reference triangle
_BARYCENTRIC_GRADIENTS = np.array([[-1.0, -1.0], [1.0, 0.0], [0.0, 1.0]])


def edge_nodes(cell: ReferenceCell, edge: int, ts: np.ndarray) -> np.ndarray:
    """Map parameters in [0, 1] onto an edge of a reference cell.

    :param cell: The :class:`~reference_elements.ReferenceCell` owning the edge.
    :param edge: The local index of the edge.
    :param ts: An array of shape (k,) containing the edge parameters.

    :returns: An array of shape (k, cell.dim) containing the points.
    """
    start, end = cell.edge_vertices(edge)
    return start + np.outer(ts, end - start)


class HierarchicFiniteElement:
    """A hierarchic finite element on a reference cell."""

    def __init__(
        self,
        cell: ReferenceCell,
        degree: int,
        rel_orient: Optional[Sequence[Orientation]] = None,
    ):
        """Initialise the finite element.

        :param cell: The :class:`~reference_elements.ReferenceCell` of the finite
            element.
        :param degree: The degree of the finite element.
        :param rel_orient: The relative orientations of the edges of the cell.
            Defaults to all positive.
        """
        if int(degree) != degree or degree < self.min_degree:
            raise InvalidArgumentError(
                f"{type(self).__name__} requires an integer degree of at least "
                f"{self.min_degree}, got {degree}"
            )

        num_edges = cell.num_sub_entities(1) if cell.dim == 2 else 0
        if rel_orient is None:
            rel_orient = [Orientation.POSITIVE] * num_edges
        if len(rel_orient) != num_edges:
            raise InvalidArgumentError(
                f"Expected {num_edges} relative orientations, got {len(rel_orient)}"
            )
        try:
            rel_orient = tuple(Orientation(o) for o in rel_orient)
        except ValueError as e:
            raise InvalidArgumentError(f"Invalid relative orientation: {e}") from e

        self.cell = cell
        self.degree = int(degree)
        self.rel_orient = rel_orient

        # An array of shape (n, cell.dim) containing the evaluation nodes
        self.nodes = self._compute_nodes()
        self.nodes.flags.writeable = False

        logger.debug("Constructed %r", self)

    min_degree = 1

    def __repr__(self):
        orient = ", ".join(o.name for o in self.rel_orient)
        return f"{type(self).__name__}(degree={self.degree}, rel_orient=[{orient}])"

    @property
    def ref_el(self) -> ReferenceCell:
        """The reference cell of the finite element."""
        return self.cell

    def _num_interior(self, codim: int) -> int:
        """The number of shape functions in the interior of one sub-entity."""
        raise NotImplementedError

    def _compute_nodes(self) -> np.ndarray:
        raise NotImplementedError

    def _eval(self, refcoords: np.ndarray) -> np.ndarray:
        raise NotImplementedError

    def _gradients(self, refcoords: np.ndarray) -> np.ndarray:
        """Return an array of shape (n, m, cell.dim)."""
        raise NotImplementedError

    def num_ref_shape_functions(
        self, codim: Optional[int] = None, subidx: Optional[int] = None
    ) -> int:
        """The number of shape functions, in total or per sub-entity.

        :param codim: If given, count only the shape functions associated with the
            interior of a single sub-entity of this codimension.
        :param subidx: The local index of the sub-entity. All sub-entities of the
            same codimension carry the same number of shape functions.

        :returns: The number of shape functions.
        """
        if codim is None:
            return sum(
                self.cell.num_sub_entities(c) * self._num_interior(c)
                for c in range(self.cell.dim + 1)
            )

        num_sub = self.cell.num_sub_entities(codim)
        if subidx is not None and not 0 <= subidx < num_sub:
            raise InvalidArgumentError(
                f"Sub-entity index {subidx} out of range for codimension {codim}"
            )
        return self._num_interior(codim)

    def shape_function_indices(self, codim: int, subidx: int) -> np.ndarray:
        """The local indices of the shape functions of a sub-entity.

        :param codim: The codimension of the sub-entity.
        :param subidx: The local index of the sub-entity.

        :returns: An array containing the indices in increasing order.
        """
        count = self.num_ref_shape_functions(codim, subidx)
        # Sub-entities of higher codimension are numbered first
        offset = sum(
            self.cell.num_sub_entities(c) * self._num_interior(c)
            for c in range(codim + 1, self.cell.dim + 1)
        )
        return np.arange(offset + subidx * count, offset + (subidx + 1) * count)

    def _edge_slots(self, edge: int) -> np.ndarray:
        """The local indices receiving the modes of an edge, in mode order."""
        slots = self.shape_function_indices(self.cell.dim - 1, edge)
        if self.rel_orient[edge] is Orientation.NEGATIVE:
            return slots[::-1]
        return slots

    def _check_refcoords(self, refcoords: np.ndarray) -> np.ndarray:
        refcoords = np.asarray(refcoords, dtype=float)
        if refcoords.ndim != 2 or refcoords.shape[0] != self.cell.dim:
            raise InvalidArgumentError(
                f"Reference coordinates must have shape ({self.cell.dim}, m), "
                f"got {refcoords.shape}"
            )
        return refcoords

    def eval_reference_shape_functions(self, refcoords: np.ndarray) -> np.ndarray:
        """Evaluate the shape functions at points of the reference cell.

        :param refcoords: An array of shape (cell.dim, m) whose columns are the
            points.

        :returns: An array of shape (n, m) containing the shape function values.
        """
        return self._eval(self._check_refcoords(refcoords))

    def gradients_reference_shape_functions(self, refcoords: np.ndarray) -> np.ndarray:
        """Evaluate the gradients of the shape functions at points of the reference
        cell.

        :param refcoords: An array of shape (cell.dim, m) whose columns are the
            points.

        :returns: An array of shape (n, cell.dim * m) in which the columns
            ``cell.dim * i`` to ``cell.dim * (i + 1) - 1`` hold the gradients at
            the i-th point.
        """
        refcoords = self._check_refcoords(refcoords)
        grads = self._gradients(refcoords)
        return grads.reshape(grads.shape[0], -1)

    def evaluation_nodes(self) -> np.ndarray:
        """The evaluation nodes of the finite element.

        :returns: An array of shape (cell.dim, n) whose columns are the nodes.
        """
        return self.nodes.T.copy()

    def num_evaluation_nodes(self) -> int:
        """The number of evaluation nodes, equal to the number of shape functions."""
        return self.nodes.shape[0]

    def nodal_values_to_dofs(self, nodevals: np.ndarray) -> np.ndarray:
        """Compute the coefficients of the expansion interpolating nodal values.

        The system ``V^T c = v`` with ``V`` the shape functions tabulated at the
        evaluation nodes is solved with a column pivoted QR decomposition.

        :param nodevals: An array of shape (n,) or (k, n) containing values at the
            evaluation nodes.

        :returns: An array of the same shape containing the coefficients.
        """
        nodevals = np.asarray(nodevals, dtype=float)
        n = self.num_evaluation_nodes()
        if nodevals.ndim not in (1, 2) or nodevals.shape[-1] != n:
            raise InvalidArgumentError(
                f"Expected values at {n} evaluation nodes, got shape {nodevals.shape}"
            )

        vand = self.eval_reference_shape_functions(self.evaluation_nodes())
        q, r, piv = scipy.linalg.qr(vand.T, pivoting=True)

        pivots = np.abs(np.diag(r))
        if pivots[-1] <= RANK_TOLERANCE * pivots[0]:
            raise NumericalDegeneracyError(
                f"Evaluation nodes of {self!r} are degenerate"
            )
        logger.debug("Node matrix pivot ratio %.3e", pivots[-1] / pivots[0])

        z = scipy.linalg.solve_triangular(r, q.T @ nodevals.T)
        coefs = np.empty_like(z)
        coefs[piv] = z
        return coefs.T

    def tabulate(self, points: np.ndarray, grad: bool = False) -> np.ndarray:
        """Tabulate the basis functions at the specified points.

        :param points: An array of shape (m, cell.dim) containing the coordinates of
            the points at which to evaluate the basis functions.
        :param grad: If True, return the gradient of the basis functions.

        :returns: If grad is False, an array of shape (m, n) containing the
            basis functions. If grad is True, an array of shape (m, n, cell.dim)
            containing the gradients of the basis functions.
        """
        refcoords = self._check_refcoords(np.asarray(points, dtype=float).T)
        if grad:
            return self._gradients(refcoords).transpose(1, 0, 2)
        return self._eval(refcoords).T

    def interpolate(self, fn: Callable) -> np.ndarray:
        """Interpolate the specified function onto the finite element.

        :param fn: A function that takes a point and returns a scalar value.

        :returns: An array of shape (n,) containing the basis function coefficients.
        """
        return self.nodal_values_to_dofs(np.array([fn(node) for node in self.nodes]))

    @property
    def cell_jacobian(self) -> np.ndarray:
        """The gradients of the vertex functions at the origin.

        For a cell with vertices ``X`` of shape (num_nodes, dim) the Jacobian of the
        affine map from the reference cell is ``X.T @ cell_jacobian``.

        :returns: An array of shape (cell.num_nodes, cell.dim).
        """
        return self.tabulate(np.zeros((1, self.cell.dim)), grad=True)[
            0, : self.cell.num_nodes
        ]


class HierarchicPoint(HierarchicFiniteElement):
    """The constant shape function on a point."""

    min_degree = 0

    def __init__(self, degree: int = 0, rel_orient=None):
        super().__init__(ReferencePoint, degree, rel_orient)

    def _num_interior(self, codim):
        return 1

    def _compute_nodes(self):
        return np.zeros((1, 0))

    def _eval(self, refcoords):
        return np.ones((1, refcoords.shape[1]))

    def _gradients(self, refcoords):
        raise UnsupportedOperationError("Gradients are not defined on a point")


class HierarchicSegment(HierarchicFiniteElement):
    """Hierarchic shape functions of arbitrary degree on the reference interval.

    The vertex functions are the hat functions ``1 - x`` and ``x``, the interior
    functions the integrated Legendre polynomials of degree 2 to p.
    """

    def __init__(self, degree: int, rel_orient=None):
        super().__init__(ReferenceInterval, degree, rel_orient)

    def _num_interior(self, codim):
        return self.degree - 1 if codim == 0 else 1

    def _compute_nodes(self):
        nodes = np.concatenate([[0.0, 1.0], chebyshev_nodes(self.degree - 1)])
        return nodes[:, np.newaxis]

    def _eval(self, refcoords):
        x = refcoords[0]
        bubbles = [integrated_legendre(i + 2, x) for i in range(self.degree - 1)]
        return np.vstack([1.0 - x, x, *bubbles])

    def _gradients(self, refcoords):
        x = refcoords[0]
        bubbles = [legendre(i + 1, x) for i in range(self.degree - 1)]
        grads = np.vstack([-np.ones_like(x), np.ones_like(x), *bubbles])
        return grads[:, :, np.newaxis]


class HierarchicTriangle(HierarchicFiniteElement):
    """Hierarchic shape functions of arbitrary degree on the reference triangle.

    The vertex functions are the barycentric coordinates. The modes of the edge
    joining the vertices with barycentric coordinates ``la`` and ``lb`` are
    ``(la + lb)**(i + 2) * L_{i+2}(lb / (la + lb))`` with ``L`` the integrated
    Legendre polynomials. The cell bubbles multiply the modes of the second edge
    by integrated Jacobi polynomials in the first barycentric coordinate.
    """

    def __init__(self, degree: int, rel_orient: Optional[Sequence[Orientation]] = None):
        super().__init__(ReferenceTriangle, degree, rel_orient)

    def _num_interior(self, codim):
        p = self.degree
        if codim == 0:
            return (p - 2) * (p - 1) // 2 if p > 2 else 0
        if codim == 1:
            return p - 1
        return 1

    def _compute_nodes(self):
        p = self.degree
        cheb = chebyshev_nodes(p - 1)

        nodes = [self.cell.vertices]
        nodes += [edge_nodes(self.cell, e, cheb) for e in range(3)]
        nodes.append(
            np.array(
                [[cheb[j], cheb[i]] for i in range(p - 2) for j in range(p - 2 - i)]
            ).reshape(-1, 2)
        )
        return np.vstack(nodes)

    def _edge_modes(self, lam: np.ndarray, edge: int) -> tuple:
        """Evaluate the modes of an edge and their gradients.

        :param lam: An array of shape (3, m) containing the barycentric coordinates.
        :param edge: The local index of the edge.

        :returns: A tuple containing an array of shape (p - 1, m) with the values
            and an array of shape (p - 1, m, 2) with the gradients, in mode order.
        """
        a, b = (self.cell.sub_sub_entity_to_sub_entity(1, edge, 1, v) for v in (0, 1))
        if self.rel_orient[edge] is Orientation.NEGATIVE:
            a, b = b, a

        s = lam[a] + lam[b]
        grad_s = _BARYCENTRIC_GRADIENTS[a] + _BARYCENTRIC_GRADIENTS[b]

        # The ratio is undefined at the vertex opposite to the edge, set it to zero
        degenerate = s == 0
        with np.errstate(divide="ignore", invalid="ignore"):
            ratio = np.where(degenerate, 0.0, lam[b] / s)
            grad_ratio = np.where(
                degenerate[:, np.newaxis],
                0.0,
                (
                    np.outer(s, _BARYCENTRIC_GRADIENTS[b])
                    - np.outer(lam[b], grad_s)
                )
                / (s**2)[:, np.newaxis],
            )

        values = np.empty((self.degree - 1, lam.shape[1]))
        grads = np.empty((self.degree - 1, lam.shape[1], 2))
        for i in range(self.degree - 1):
            inte = integrated_legendre(i + 2, ratio)
            values[i] = s ** (i + 2) * inte
            grads[i] = np.outer((i + 2) * s ** (i + 1) * inte, grad_s) + (
                (s ** (i + 2) * legendre(i + 1, ratio))[:, np.newaxis] * grad_ratio
            )
        return values, grads

    def _eval_and_gradients(self, refcoords: np.ndarray) -> tuple:
        p = self.degree
        m = refcoords.shape[1]
        lam = np.vstack([1.0 - refcoords[0] - refcoords[1], refcoords[0], refcoords[1]])

        values = np.empty((self.num_ref_shape_functions(), m))
        grads = np.empty((self.num_ref_shape_functions(), m, 2))

        values[:3] = lam
        grads[:3] = _BARYCENTRIC_GRADIENTS[:, np.newaxis, :]

        edge_modes = [self._edge_modes(lam, e) for e in range(3)]
        for e, (edge_values, edge_grads) in enumerate(edge_modes):
            slots = self._edge_slots(e)
            values[slots] = edge_values
            grads[slots] = edge_grads

        # Cell bubbles, the modes of the second edge times integrated Jacobi
        # polynomials in the first barycentric coordinate
        edge_values, edge_grads = edge_modes[1]
        idx = 3 * p
        for i in range(p - 2):
            alpha = 2 * i + 4
            for j in range(p - 2 - i):
                jac_inte = integrated_jacobi(j + 1, alpha, lam[0])
                jac_eval = jacobi(j, alpha, lam[0])
                values[idx] = edge_values[i] * jac_inte
                grads[idx] = jac_inte[:, np.newaxis] * edge_grads[i] + np.outer(
                    edge_values[i] * jac_eval, _BARYCENTRIC_GRADIENTS[0]
                )
                idx += 1

        return values, grads

    def _eval(self, refcoords):
        return self._eval_and_gradients(refcoords)[0]

    def _gradients(self, refcoords):
        return self._eval_and_gradients(refcoords)[1]


class HierarchicQuadrilateral(HierarchicFiniteElement):
    """Hierarchic shape functions of arbitrary degree on the reference square.

    All shape functions are tensor products of the shape functions of
    :class:`HierarchicSegment` in the two coordinate directions.
    """

    def __init__(self, degree: int, rel_orient: Optional[Sequence[Orientation]] = None):
        super().__init__(ReferenceQuadrilateral, degree, rel_orient)
        self.fe1d = HierarchicSegment(degree)

    def _num_interior(self, codim):
        p = self.degree
        if codim == 0:
            return (p - 1) ** 2
        if codim == 1:
            return p - 1
        return 1

    def _compute_nodes(self):
        p = self.degree
        cheb = chebyshev_nodes(p - 1)

        nodes = [self.cell.vertices]
        nodes += [edge_nodes(self.cell, e, cheb) for e in range(4)]
        nodes.append(
            np.array([[cheb[j], cheb[i]] for i in range(p - 1) for j in range(p - 1)])
            .reshape(-1, 2)
        )
        return np.vstack(nodes)

    def _eval_and_gradients(self, refcoords: np.ndarray) -> tuple:
        p = self.degree
        m = refcoords.shape[1]

        # 1D shape functions and derivatives along each axis, shape (2, p + 1, m)
        sf = np.stack([self.fe1d._eval(refcoords[[k]]) for k in range(2)])
        dsf = np.stack([self.fe1d._gradients(refcoords[[k]])[..., 0] for k in range(2)])

        values = np.empty((self.num_ref_shape_functions(), m))
        grads = np.empty((self.num_ref_shape_functions(), m, 2))

        # The 1D vertex function of a vertex coordinate c is 1 - x for c = 0 and
        # x for c = 1
        for v, (cx, cy) in enumerate(self.cell.vertices.astype(int)):
            values[v] = sf[0, cx] * sf[1, cy]
            grads[v, :, 0] = dsf[0, cx] * sf[1, cy]
            grads[v, :, 1] = sf[0, cx] * dsf[1, cy]

        for e in range(4):
            start, end = self.cell.edge_vertices(e)
            axis = int(np.flatnonzero(start != end)[0])
            other = 1 - axis
            # The edge parameter runs against the axis if exactly one of the
            # edge direction and the orientation is reversed
            flip = (end[axis] < start[axis]) != (
                self.rel_orient[e] is Orientation.NEGATIVE
            )
            t = 1.0 - refcoords[axis] if flip else refcoords[axis]
            dt = -1.0 if flip else 1.0

            sf_t = self.fe1d._eval(t[np.newaxis])
            dsf_t = self.fe1d._gradients(t[np.newaxis])[..., 0]
            c = int(start[other])

            slots = self._edge_slots(e)
            for i, slot in enumerate(slots):
                values[slot] = sf_t[i + 2] * sf[other, c]
                grads[slot, :, axis] = dt * dsf_t[i + 2] * sf[other, c]
                grads[slot, :, other] = sf_t[i + 2] * dsf[other, c]

        for i in range(p - 1):
            for j in range(p - 1):
                idx = 4 * p + (p - 1) * i + j
                values[idx] = sf[0, j + 2] * sf[1, i + 2]
                grads[idx, :, 0] = dsf[0, j + 2] * sf[1, i + 2]
                grads[idx, :, 1] = sf[0, j + 2] * dsf[1, i + 2]

        return values, grads

    def _eval(self, refcoords):
        return self._eval_and_gradients(refcoords)[0]

    def _gradients(self, refcoords):
        return self._eval_and_gradients(refcoords)[1]

"""Reference elements and their sub-entity topology."""

from .exceptions import InvalidArgumentError
from enum import Enum
import numpy as np


class RefElType(Enum):
    """The kinds of reference element."""

    POINT = 0
    SEGMENT = 1
    TRIANGLE = 2
    QUADRILATERAL = 3


class Orientation(Enum):
    """Relative orientation of an edge with respect to its canonical direction."""

    POSITIVE = 1
    NEGATIVE = -1


# Local vertices of each edge, edge i runs from the first to the second vertex
_EDGE_VERTICES = {
    RefElType.TRIANGLE: ((0, 1), (1, 2), (2, 0)),
    RefElType.QUADRILATERAL: ((0, 1), (1, 2), (2, 3), (3, 0)),
}


class ReferenceCell:
    """A reference cell."""

    def __init__(self, ref_el_type: RefElType, vertices: np.ndarray):
        """Initialise the reference cell.

        :param ref_el_type: The :class:`RefElType` of the cell.
        :param vertices: An array of shape (n, d) containing the vertices of the cell.
        """
        self.ref_el_type = ref_el_type
        self.vertices = vertices
        self.vertices.flags.writeable = False
        self.dim = self.vertices.shape[1]
        self.num_nodes = self.vertices.shape[0]

    def __eq__(self, other):
        if not isinstance(other, ReferenceCell):
            return NotImplemented
        return self.ref_el_type is other.ref_el_type

    def __hash__(self):
        return hash(self.ref_el_type)

    def __repr__(self):
        return f"ReferenceCell({self.ref_el_type.name})"

    def _check_codim(self, codim: int) -> None:
        if codim < 0:
            raise InvalidArgumentError(f"Codimension {codim} is negative")
        if codim > self.dim:
            raise InvalidArgumentError(
                f"Codimension {codim} exceeds the dimension of {self!r}"
            )

    def _check_index(self, codim: int, index: int) -> None:
        self._check_codim(codim)
        if not 0 <= index < self.num_sub_entities(codim):
            raise InvalidArgumentError(
                f"Sub-entity index {index} out of range for codimension {codim} "
                f"of {self!r}"
            )

    def num_sub_entities(self, codim: int) -> int:
        """The number of sub-entities of the specified codimension.

        :param codim: The codimension of the sub-entities.

        :returns: The number of sub-entities.
        """
        self._check_codim(codim)
        if codim == 0:
            return 1
        # Vertices and edges of a polygon come in equal numbers
        return self.num_nodes

    def sub_type(self, codim: int, index: int) -> "ReferenceCell":
        """The reference cell of a sub-entity.

        :param codim: The codimension of the sub-entity.
        :param index: The local index of the sub-entity.

        :returns: The :class:`ReferenceCell` of the sub-entity.
        """
        self._check_index(codim, index)
        if codim == 0:
            return self
        if codim == self.dim:
            return ReferencePoint
        return ReferenceInterval

    def sub_sub_entity_to_sub_entity(
        self, codim: int, index: int, sub_codim: int, sub_index: int
    ) -> int:
        """Resolve a sub-entity of a sub-entity to its local index in this cell.

        :param codim: The codimension of the sub-entity.
        :param index: The local index of the sub-entity.
        :param sub_codim: The codimension of the sub-sub-entity, relative to the
            sub-entity.
        :param sub_index: The index of the sub-sub-entity local to the sub-entity.

        :returns: The index of the sub-sub-entity among the sub-entities of
            codimension ``codim + sub_codim`` of this cell.
        """
        self._check_index(codim, index)
        sub_cell = self.sub_type(codim, index)
        sub_cell._check_index(sub_codim, sub_index)

        if self.ref_el_type is RefElType.POINT:
            return 0
        if codim == 0:
            return sub_index
        if codim == self.dim:
            return index
        # The sub-entity is an edge of a polygon
        return _EDGE_VERTICES[self.ref_el_type][index][sub_index]

    def edge_vertices(self, index: int) -> np.ndarray:
        """The coordinates of the start and end vertex of an edge.

        :param index: The local index of the edge.

        :returns: An array of shape (2, d) containing the vertices.
        """
        return self.vertices[
            [
                self.sub_sub_entity_to_sub_entity(self.dim - 1, index, 1, v)
                for v in range(2)
            ]
        ]


ReferencePoint = ReferenceCell(RefElType.POINT, np.zeros((1, 0)))
ReferenceInterval = ReferenceCell(RefElType.SEGMENT, np.array([[0.0], [1.0]]))
ReferenceTriangle = ReferenceCell(
    RefElType.TRIANGLE, np.array([[0.0, 0.0], [1.0, 0.0], [0.0, 1.0]])
)
ReferenceQuadrilateral = ReferenceCell(
    RefElType.QUADRILATERAL,
    np.array([[0.0, 0.0], [1.0, 0.0], [1.0, 1.0], [0.0, 1.0]]),
)

REFERENCE_CELLS = {
    cell.ref_el_type: cell
    for cell in (
        ReferencePoint,
        ReferenceInterval,
        ReferenceTriangle,
        ReferenceQuadrilateral,
    )
}

"""Shape function layouts of a hierarchic finite element space."""

from .exceptions import InvalidArgumentError
from .finite_elements import (
    HierarchicFiniteElement,
    HierarchicPoint,
    HierarchicQuadrilateral,
    HierarchicSegment,
    HierarchicTriangle,
)
from .reference_elements import (
    Orientation,
    RefElType,
    ReferenceCell,
    REFERENCE_CELLS,
)
from collections import defaultdict
from typing import Optional, Sequence
import logging

logger = logging.getLogger(__name__)

ELEMENT_TYPES = {
    RefElType.POINT: HierarchicPoint,
    RefElType.SEGMENT: HierarchicSegment,
    RefElType.TRIANGLE: HierarchicTriangle,
    RefElType.QUADRILATERAL: HierarchicQuadrilateral,
}

# Cells of a 2D mesh by number of vertices
POLYGONS = {
    3: REFERENCE_CELLS[RefElType.TRIANGLE],
    4: REFERENCE_CELLS[RefElType.QUADRILATERAL],
}


def shape_function_layout(
    cell: ReferenceCell,
    degree: int,
    rel_orient: Optional[Sequence[Orientation]] = None,
) -> HierarchicFiniteElement:
    """Construct the hierarchic finite element of a mesh entity.

    :param cell: The :class:`~reference_elements.ReferenceCell` of the entity.
    :param degree: The polynomial degree of the finite element space.
    :param rel_orient: The relative orientations of the edges of the entity.

    :returns: The finite element.
    """
    return ELEMENT_TYPES[cell.ref_el_type](degree, rel_orient)


def rsf_layout(degree: int) -> dict[ReferenceCell, int]:
    """The number of interior shape functions of each kind of mesh entity.

    This is the layout consumed by a uniform degree of freedom handler.

    :param degree: The polynomial degree of the finite element space.

    :returns: A dictionary mapping each reference cell to the number of shape
        functions associated with the interior of an entity of that kind.
    """
    return {
        cell: shape_function_layout(cell, degree).num_ref_shape_functions(0)
        for cell in REFERENCE_CELLS.values()
    }


def check_orientations(
    cells: Sequence[Sequence[int]], rel_orients: Sequence[Sequence[Orientation]]
) -> None:
    """Check that relative orientations are consistent across shared edges.

    Every edge must be seen with a positive orientation by exactly one of the
    cells containing it, and every other cell must traverse it in the opposite
    direction.

    :param cells: The global vertex numbers of each cell, in local vertex order.
    :param rel_orients: The relative orientations of the edges of each cell.

    :raises InvalidArgumentError: If the orientations are inconsistent.
    """
    # Maps each edge to the (start, end, orientation) of every cell traversing it
    traversals = defaultdict(list)
    for c, (vertices, orient) in enumerate(zip(cells, rel_orients)):
        if len(vertices) not in POLYGONS:
            raise InvalidArgumentError(
                f"Cell {c} has {len(vertices)} vertices, expected 3 or 4"
            )
        cell = POLYGONS[len(vertices)]
        if len(orient) != cell.num_sub_entities(1):
            raise InvalidArgumentError(
                f"Cell {c} has {len(orient)} orientations for "
                f"{cell.num_sub_entities(1)} edges"
            )
        for e, o in enumerate(orient):
            start, end = (
                vertices[cell.sub_sub_entity_to_sub_entity(1, e, 1, v)] for v in (0, 1)
            )
            traversals[frozenset((start, end))].append((start, end, Orientation(o)))

    for edge, traversal in traversals.items():
        positive = [(s, e) for s, e, o in traversal if o is Orientation.POSITIVE]
        if len(positive) != 1:
            raise InvalidArgumentError(
                f"Edge {sorted(edge)} is positively oriented in {len(positive)} cells"
            )
        canonical = positive[0]
        for s, e, o in traversal:
            if o is Orientation.NEGATIVE and (e, s) != canonical:
                raise InvalidArgumentError(
                    f"Edge {sorted(edge)} is negatively oriented in a cell "
                    "traversing it in the canonical direction"
                )

    logger.debug("Orientations of %d edges are consistent", len(traversals))

"""Tests for the reference element topology."""

from hpfem.exceptions import InvalidArgumentError
from hpfem.reference_elements import (
    RefElType,
    ReferenceCell,
    ReferenceInterval,
    ReferencePoint,
    ReferenceQuadrilateral,
    ReferenceTriangle,
)
import numpy as np
import pytest

CELLS = [ReferencePoint, ReferenceInterval, ReferenceTriangle, ReferenceQuadrilateral]


@pytest.mark.parametrize(
    "cell, dim, num_nodes", list(zip(CELLS, [0, 1, 2, 2], [1, 2, 3, 4]))
)
def test_dimension_and_nodes(cell, dim, num_nodes):
    assert cell.dim == dim
    assert cell.num_nodes == num_nodes
    assert cell.vertices.shape == (num_nodes, dim)


def test_num_sub_entities():
    assert ReferencePoint.num_sub_entities(0) == 1
    assert [ReferenceInterval.num_sub_entities(c) for c in range(2)] == [1, 2]
    assert [ReferenceTriangle.num_sub_entities(c) for c in range(3)] == [1, 3, 3]
    assert [ReferenceQuadrilateral.num_sub_entities(c) for c in range(3)] == [1, 4, 4]


@pytest.mark.parametrize("cell", CELLS)
def test_invalid_codim(cell):
    with pytest.raises(InvalidArgumentError):
        cell.num_sub_entities(-1)
    with pytest.raises(InvalidArgumentError):
        cell.num_sub_entities(cell.dim + 1)


@pytest.mark.parametrize("cell", CELLS)
def test_sub_type(cell):
    """Codim 0 is the cell itself, codim dim a point and codim dim - 1 a segment."""
    assert cell.sub_type(0, 0) == cell
    for i in range(cell.num_sub_entities(cell.dim)):
        assert cell.sub_type(cell.dim, i) == ReferencePoint
    if cell.dim == 2:
        for i in range(cell.num_sub_entities(1)):
            assert cell.sub_type(1, i) == ReferenceInterval


def test_sub_type_invalid_index():
    with pytest.raises(InvalidArgumentError):
        ReferenceTriangle.sub_type(1, 3)
    with pytest.raises(InvalidArgumentError):
        ReferenceQuadrilateral.sub_type(2, -1)


@pytest.mark.parametrize(
    "cell, edges",
    [
        (ReferenceTriangle, [(0, 1), (1, 2), (2, 0)]),
        (ReferenceQuadrilateral, [(0, 1), (1, 2), (2, 3), (3, 0)]),
    ],
)
def test_edge_vertex_table(cell, edges):
    for e, vertices in enumerate(edges):
        assert (
            tuple(cell.sub_sub_entity_to_sub_entity(1, e, 1, v) for v in range(2))
            == vertices
        )


def test_sub_sub_entity_trivial_cases():
    assert ReferencePoint.sub_sub_entity_to_sub_entity(0, 0, 0, 0) == 0
    # The sub-entity is the whole cell
    assert ReferenceTriangle.sub_sub_entity_to_sub_entity(0, 0, 1, 2) == 2
    assert ReferenceQuadrilateral.sub_sub_entity_to_sub_entity(0, 0, 2, 3) == 3
    # The sub-entity is a vertex
    assert ReferenceTriangle.sub_sub_entity_to_sub_entity(2, 1, 0, 0) == 1
    assert ReferenceInterval.sub_sub_entity_to_sub_entity(1, 1, 0, 0) == 1


def test_sub_sub_entity_out_of_range():
    with pytest.raises(InvalidArgumentError):
        ReferenceTriangle.sub_sub_entity_to_sub_entity(1, 0, 1, 2)
    with pytest.raises(InvalidArgumentError):
        ReferenceTriangle.sub_sub_entity_to_sub_entity(1, 0, 2, 0)
    with pytest.raises(InvalidArgumentError):
        ReferenceQuadrilateral.sub_sub_entity_to_sub_entity(1, 4, 1, 0)


def test_edge_vertices():
    assert np.allclose(ReferenceTriangle.edge_vertices(2), [[0.0, 1.0], [0.0, 0.0]])
    assert np.allclose(
        ReferenceQuadrilateral.edge_vertices(2), [[1.0, 1.0], [0.0, 1.0]]
    )


def test_equality_by_type():
    """Reference cells compare by their type only."""
    copy = ReferenceCell(RefElType.TRIANGLE, ReferenceTriangle.vertices.copy())

    assert copy == ReferenceTriangle
    assert hash(copy) == hash(ReferenceTriangle)
    assert ReferenceTriangle != ReferenceQuadrilateral
    assert len(set(CELLS)) == 4

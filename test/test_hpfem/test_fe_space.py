"""Tests for the shape function layouts of a finite element space."""

from hpfem.exceptions import InvalidArgumentError
from hpfem.fe_space import check_orientations, rsf_layout, shape_function_layout
from hpfem.finite_elements import (
    HierarchicPoint,
    HierarchicQuadrilateral,
    HierarchicSegment,
    HierarchicTriangle,
    edge_nodes,
)
from hpfem.reference_elements import (
    Orientation,
    ReferenceInterval,
    ReferencePoint,
    ReferenceQuadrilateral,
    ReferenceTriangle,
)
import numpy as np
import pytest

P, N = Orientation.POSITIVE, Orientation.NEGATIVE

# Two triangles sharing the edge between vertices 1 and 2
MESH_NODES = np.array([[0.0, 0.0], [1.0, 0.0], [0.0, 1.0], [1.0, 1.0]])
MESH_CELLS = [[0, 1, 2], [1, 3, 2]]
MESH_ORIENTATIONS = [[P, P, P], [P, P, N]]


def test_shape_function_layout():
    assert isinstance(shape_function_layout(ReferencePoint, 3), HierarchicPoint)
    assert isinstance(shape_function_layout(ReferenceInterval, 3), HierarchicSegment)
    fe = shape_function_layout(ReferenceTriangle, 3, [P, N, P])
    assert isinstance(fe, HierarchicTriangle)
    assert fe.rel_orient == (P, N, P)
    assert isinstance(
        shape_function_layout(ReferenceQuadrilateral, 3), HierarchicQuadrilateral
    )


@pytest.mark.parametrize("p", range(1, 7))
def test_rsf_layout(p):
    layout = rsf_layout(p)

    assert layout[ReferencePoint] == 1
    assert layout[ReferenceInterval] == p - 1
    assert layout[ReferenceTriangle] == max(0, (p - 2) * (p - 1) // 2)
    assert layout[ReferenceQuadrilateral] == (p - 1) ** 2


@pytest.mark.parametrize("cell", [ReferenceTriangle, ReferenceQuadrilateral])
@pytest.mark.parametrize("p", range(1, 7))
def test_rsf_layout_counts_all_shape_functions(cell, p):
    """The interior shape functions of all sub-entities make up the element."""
    layout = rsf_layout(p)
    total = sum(
        layout[cell.sub_type(c, i)]
        for c in range(cell.dim + 1)
        for i in range(cell.num_sub_entities(c))
    )

    assert total == shape_function_layout(cell, p).num_ref_shape_functions()


def test_check_orientations():
    check_orientations(MESH_CELLS, MESH_ORIENTATIONS)


@pytest.mark.parametrize(
    "orientations",
    [
        [[P, P, P], [P, P, P]],  # Shared edge positive twice
        [[P, N, P], [P, P, N]],  # Shared edge never positive
        [[P, P, P], [P, P]],  # Too few orientations
    ],
)
def test_check_orientations_inconsistent(orientations):
    with pytest.raises(InvalidArgumentError):
        check_orientations(MESH_CELLS, orientations)


def test_check_orientations_same_direction():
    """A negative orientation must traverse the edge against the canonical one."""
    cells = [[0, 1, 2], [1, 2, 3]]

    with pytest.raises(InvalidArgumentError):
        check_orientations(cells, [[P, P, P], [N, P, P]])


def test_check_orientations_invalid_cell():
    with pytest.raises(InvalidArgumentError):
        check_orientations([[0, 1]], [[P]])


@pytest.mark.parametrize("p", range(2, 7))
def test_continuity_across_shared_edge(p):
    """Both cells produce the same global edge functions on the shared edge."""
    fe0, fe1 = (
        shape_function_layout(ReferenceTriangle, p, orient)
        for orient in MESH_ORIENTATIONS
    )
    ts = np.linspace(0.0, 1.0, 11)

    # The shared edge is local edge 1 (1 -> 2) of the first cell and local edge
    # 2 (2 -> 1) of the second
    ref0 = edge_nodes(ReferenceTriangle, 1, ts)
    ref1 = edge_nodes(ReferenceTriangle, 2, 1.0 - ts)
    values0 = fe0.eval_reference_shape_functions(ref0.T)
    values1 = fe1.eval_reference_shape_functions(ref1.T)

    # Both reference points map to the same physical point
    J0 = MESH_NODES[MESH_CELLS[0]].T @ fe0.cell_jacobian
    J1 = MESH_NODES[MESH_CELLS[1]].T @ fe1.cell_jacobian
    X0 = MESH_NODES[0] + ref0 @ J0.T
    X1 = MESH_NODES[1] + ref1 @ J1.T
    assert np.allclose(X0, X1)

    # The global edge dofs in canonical order
    dofs0 = fe0.shape_function_indices(1, 1)
    dofs1 = fe1.shape_function_indices(1, 2)[::-1]

    assert np.allclose(values0[dofs0], values1[dofs1])
    # Vertex functions of the shared vertices agree as well
    assert np.allclose(values0[[1, 2]], values1[[0, 2]])

#! /usr/bin/env python

"""Plot the shape functions of a hierarchic finite element."""

from hpfem.constants import DEFAULT_DEGREE, PLOT_RESOLUTION
from hpfem.fe_space import shape_function_layout
from hpfem.reference_elements import Orientation, RefElType, REFERENCE_CELLS

from alive_progress import alive_it
from argparse import ArgumentParser
import logging
import matplotlib.pyplot as plt
import numpy as np
import os
from pathlib import Path

logger = logging.getLogger(__name__)

CELLS = {
    "segment": RefElType.SEGMENT,
    "triangle": RefElType.TRIANGLE,
    "quad": RefElType.QUADRILATERAL,
}


def sample_points(cell, resolution: int) -> np.ndarray:
    """Sample points covering a reference cell.

    :param cell: The :class:`~hpfem.reference_elements.ReferenceCell` to sample.
    :param resolution: The number of points along each axis.

    :returns: An array of shape (m, cell.dim) containing the points.
    """
    x = np.linspace(0.0, 1.0, resolution)
    if cell.dim == 1:
        return x[:, np.newaxis]

    X, Y = np.meshgrid(x, x)
    points = np.stack([X.ravel(), Y.ravel()], axis=-1)
    if cell.ref_el_type is RefElType.TRIANGLE:
        points = points[points.sum(axis=1) <= 1.0 + 1e-12]
    return points


def plot_shape_functions(fe, out_dir: Path, resolution: int) -> None:
    """Save one figure per shape function of a finite element.

    :param fe: The :class:`~hpfem.finite_elements.HierarchicFiniteElement` to plot.
    :param out_dir: The directory to save the figures to.
    :param resolution: The number of sample points along each axis.
    """
    points = sample_points(fe.cell, resolution)
    phi = fe.tabulate(points)
    nodes = fe.nodes

    if not os.path.exists(out_dir):
        os.makedirs(out_dir)

    for i in alive_it(range(phi.shape[1]), title="Plotting shape functions..."):
        plt.figure(figsize=(6, 5))
        if fe.cell.dim == 1:
            plt.plot(points[:, 0], phi[:, i], "k-")
            plt.plot(nodes[:, 0], np.zeros(len(nodes)), "ro", label="Nodes")
            plt.xlabel(r"$x$")
        else:
            plt.tricontourf(points[:, 0], points[:, 1], phi[:, i], levels=20)
            plt.colorbar()
            plt.plot(nodes[:, 0], nodes[:, 1], "ro", label="Nodes")
            plt.xlabel(r"$x$")
            plt.ylabel(r"$y$")
            plt.gca().set_aspect("equal")
        plt.title(f"Shape function {i} of {fe!r}")
        plt.legend()

        path = out_dir / f"shape_function_{i:03d}.png"
        plt.savefig(path, dpi=150)
        plt.close()
        logger.debug("Saved %s", path)

    logger.info("Saved %d figures to %s", phi.shape[1], out_dir)


def main():
    parser = ArgumentParser(description="Plot the shape functions of an element.")
    parser.add_argument(
        "cell", choices=list(CELLS), help="The reference cell of the element."
    )
    parser.add_argument(
        "--degree", type=int, default=DEFAULT_DEGREE, help="The polynomial degree."
    )
    parser.add_argument(
        "--negative",
        type=int,
        nargs="*",
        default=[],
        help="Local indices of the edges with negative relative orientation.",
    )
    parser.add_argument(
        "--resolution",
        type=int,
        default=PLOT_RESOLUTION,
        help="The number of sample points along each axis.",
    )
    parser.add_argument(
        "--out", type=str, default="shape_functions", help="The output directory."
    )
    parser.add_argument("--verbose", action="store_true", help="Log debug output.")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )

    cell = REFERENCE_CELLS[CELLS[args.cell]]
    rel_orient = None
    if cell.dim == 2:
        rel_orient = [
            Orientation.NEGATIVE if e in args.negative else Orientation.POSITIVE
            for e in range(cell.num_sub_entities(1))
        ]

    fe = shape_function_layout(cell, args.degree, rel_orient)
    plot_shape_functions(fe, Path(args.out), args.resolution)


if __name__ == "__main__":
    main()

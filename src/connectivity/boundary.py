"""Face-node maps of tagged boundary-condition categories."""

import logging
from typing import Dict, NamedTuple

import numpy as np

from meshing import BoundaryConditions, MalformedMeshError

from .grid import Grid
from .node_maps import face_offsets

log = logging.getLogger(__name__)


class BoundaryMaps(NamedTuple):
    """Face-node positions (`map`) and global nodes (`vmap`) of one category."""

    map: np.ndarray
    vmap: np.ndarray


def boundary_condition_maps(grid: Grid, bc: BoundaryConditions) -> Dict[str, BoundaryMaps]:
    """
    Collect the face nodes of every boundary-condition category.

    Parameters
    ----------
    grid : Grid
        Grid built on the mesh the tags belong to
    bc : BoundaryConditions
        Face tags, shape (K, F)

    Returns
    -------
    dict
        Category name -> BoundaryMaps, positions in ascending order. Categories
        without tagged faces map to empty arrays.
    """
    if bc.face_tags.shape != grid.adjacency.etoe.shape:
        raise MalformedMeshError(
            f"Boundary tags have shape {bc.face_tags.shape}, "
            f"grid faces have shape {grid.adjacency.etoe.shape}"
        )

    starts = face_offsets(grid.elements)
    result = {}
    for name in bc.names:
        positions = [
            starts[k, f] + np.arange(len(grid.elements[k].fmask[f]))
            for k, f in bc.faces(name)
        ]
        positions = np.concatenate(positions) if positions else np.empty(0, dtype=np.int64)
        result[name] = BoundaryMaps(positions, grid.maps.interior[positions])
        log.debug(f"Boundary '{name}': {positions.size} face nodes")

    tagged_interior = (bc.face_tags > 0) & ~grid.adjacency.boundary
    if np.any(tagged_interior):
        log.warning(
            f"{np.count_nonzero(tagged_interior)} tagged faces have a neighbor element"
        )
    return result

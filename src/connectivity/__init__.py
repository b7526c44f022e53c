"""DG connectivity: element adjacency, face-node maps and grid assembly."""

from .adjacency import (
    adjacency_from_coincidence,
    coincidence_matrix,
    connect_1d,
    connect_2d,
    face_vertices,
)
from .boundary import BoundaryMaps, boundary_condition_maps
from .datastructures import BOUNDARY, AdjacencyTable, GridMetrics, Neighbor, NodeMaps
from .grid import Grid, Grid1D, Grid2D, build_grid, make_periodic_1d
from .node_maps import (
    TOL_1D,
    build_maps_1d,
    build_maps_2d,
    face_offsets,
    match_face_nodes,
    node_offsets,
)

__all__ = [
    # Data structures
    "AdjacencyTable",
    "Neighbor",
    "BOUNDARY",
    "NodeMaps",
    "GridMetrics",
    "BoundaryMaps",
    # Element connectivity
    "connect_1d",
    "connect_2d",
    "face_vertices",
    "coincidence_matrix",
    "adjacency_from_coincidence",
    # Face-node matching
    "TOL_1D",
    "build_maps_1d",
    "build_maps_2d",
    "match_face_nodes",
    "node_offsets",
    "face_offsets",
    # Grids
    "Grid",
    "Grid1D",
    "Grid2D",
    "build_grid",
    "make_periodic_1d",
    "boundary_condition_maps",
]

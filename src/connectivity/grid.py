"""Grid assembly: elements, node arena, adjacency and face-node maps."""

from abc import ABC, abstractmethod
import logging
import time
from typing import Union

import numpy as np

from elements import create_elements
from meshing import Mesh1D, Mesh2D

from .adjacency import connect_1d, connect_2d
from .datastructures import AdjacencyTable, GridMetrics, NodeMaps
from .node_maps import build_maps_1d, build_maps_2d, node_offsets

log = logging.getLogger(__name__)


class Grid(ABC):
    """Nodal DG grid built from a mesh at a uniform polynomial order.

    Handles:
    - Element construction (one per mesh element)
    - Node arena: all node coordinates in one (total, dim) array
    - Adjacency and face-node maps
    - Build metrics

    Subclasses must:
    - Implement _connect() and _build_maps()

    Attributes
    ----------
    mesh : Mesh1D or Mesh2D
        Source mesh
    order : int
        Polynomial order N
    elements : list of Element
        Elements in mesh order
    offsets : np.ndarray
        Global node number of each element's first node, length K+1
    x : np.ndarray
        Node coordinates, shape (total nodes, dim); node j of element k is
        row offsets[k] + j
    adjacency : AdjacencyTable
    maps : NodeMaps
    metrics : GridMetrics
    """

    def __init__(self, mesh: Union[Mesh1D, Mesh2D], order: int):
        time_start = time.time()
        self.mesh = mesh
        self.order = order

        self.elements = create_elements(mesh, order)
        self.offsets = node_offsets(self.elements)
        self.x = self._fill_arena()

        self.adjacency: AdjacencyTable = self._connect()
        self.maps: NodeMaps = self._build_maps()

        self.metrics = GridMetrics(
            n_elements=mesh.K,
            n_nodes=int(self.offsets[-1]),
            n_face_nodes=len(self.maps),
            n_boundary_faces=self.adjacency.n_boundary_faces,
            n_boundary_nodes=int(self.maps.boundary_nodes.size),
            build_seconds=time.time() - time_start,
        )
        log.info(
            f"Built {type(self).__name__}: K={mesh.K}, N={order}, "
            f"{self.metrics.n_nodes} nodes, {self.metrics.n_boundary_faces} boundary faces "
            f"in {self.metrics.build_seconds:.3f}s"
        )

    def _fill_arena(self) -> np.ndarray:
        x = np.empty((int(self.offsets[-1]), self.mesh.dim))
        for k, el in enumerate(self.elements):
            x[self.offsets[k] : self.offsets[k + 1]] = el.x
        x.setflags(write=False)
        return x

    @abstractmethod
    def _connect(self) -> AdjacencyTable:
        pass

    @abstractmethod
    def _build_maps(self) -> NodeMaps:
        pass

    @property
    def K(self) -> int:
        return self.mesh.K

    @property
    def n_nodes(self) -> int:
        return int(self.offsets[-1])

    def element_nodes(self, k: int) -> np.ndarray:
        """Global node numbers of element k."""
        return np.arange(self.offsets[k], self.offsets[k + 1])


class Grid1D(Grid):
    """Grid on a line mesh.

    Also exposes the inflow/outflow positions and nodes of the domain ends:
    map_in/map_out index face-node positions, vmap_in/vmap_out global nodes.
    """

    def _connect(self) -> AdjacencyTable:
        return connect_1d(self.mesh)

    def _build_maps(self) -> NodeMaps:
        return build_maps_1d(self.elements, self.adjacency)

    @property
    def map_in(self) -> int:
        return 0

    @property
    def map_out(self) -> int:
        return self.K * 2 - 1

    @property
    def vmap_in(self) -> int:
        return 0

    @property
    def vmap_out(self) -> int:
        return self.n_nodes - 1


class Grid2D(Grid):
    """Grid on a triangle or quadrilateral mesh."""

    def _connect(self) -> AdjacencyTable:
        return connect_2d(self.mesh)

    def _build_maps(self) -> NodeMaps:
        return build_maps_2d(self.mesh, self.elements, self.adjacency)


def build_grid(mesh: Union[Mesh1D, Mesh2D], order: int) -> Grid:
    """Build a Grid1D or Grid2D depending on the mesh dimension."""
    if mesh.dim == 1:
        return Grid1D(mesh, order)
    if mesh.dim == 2:
        return Grid2D(mesh, order)
    raise ValueError(f"Unsupported mesh dimension: {mesh.dim}")


def make_periodic_1d(maps: NodeMaps) -> NodeMaps:
    """
    Return 1D node maps with the two domain ends connected to each other.

    The first position (left end of the first element) gets the last node as
    its exterior partner and vice versa, so the result has no boundary
    positions when the input had exactly those two.

    Parameters
    ----------
    maps : NodeMaps
        Output of build_maps_1d

    Returns
    -------
    NodeMaps
        New maps; `maps` is left unchanged
    """
    exterior = np.array(maps.exterior)
    exterior_positions = np.array(maps.exterior_positions)
    last = len(maps) - 1

    exterior[0] = maps.interior[last]
    exterior[last] = maps.interior[0]
    exterior_positions[0] = last
    exterior_positions[last] = 0
    return NodeMaps(maps.interior, exterior, exterior_positions)

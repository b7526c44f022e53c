"""Element construction dispatched on the mesh's face count."""

import logging
from typing import List, Union

from meshing import Mesh1D, Mesh2D, UnsupportedTopologyError

from .base import Element
from .interval import build_interval
from .rectangle import build_rectangle
from .triangle import build_triangle

log = logging.getLogger(__name__)

_BUILDERS = {
    2: build_interval,
    3: build_triangle,
    4: build_rectangle,
}


def create_element(mesh: Union[Mesh1D, Mesh2D], k: int, order: int) -> Element:
    """
    Build element `k` of `mesh` at polynomial order `order`.

    The element kind follows the face count: 2 faces give an Interval,
    3 a Triangle and 4 a Rectangle (with equal orders in both directions).

    Raises
    ------
    ValueError
        If order < 1
    UnsupportedTopologyError
        If the mesh's face count has no element kind
    """
    if order < 1:
        raise ValueError(f"Polynomial order must be >= 1, got {order}")
    try:
        builder = _BUILDERS[mesh.n_faces]
    except KeyError:
        raise UnsupportedTopologyError(
            f"No element kind with {mesh.n_faces} faces"
        ) from None
    return builder(k, mesh, order)


def create_elements(mesh: Union[Mesh1D, Mesh2D], order: int) -> List[Element]:
    """Build every element of `mesh` in element order."""
    elements = [create_element(mesh, k, order) for k in range(mesh.K)]
    log.debug(f"Built {len(elements)} elements of order {order}")
    return elements

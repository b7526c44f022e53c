"""Face-node matching: interior/exterior node maps for DG flux evaluation.

Global node numbers are consecutive and element-major: node j of element k
is offsets[k] + j. Face-node positions are ordered element-major, then
face-major, then in face-mask order. On an interior face the exterior
node at each position is the neighbor's node at the same physical location;
on a boundary face it is the interior node itself.
"""

import logging
from typing import Callable, Sequence

import numpy as np

from elements import Element
from meshing import Mesh2D, NodeMatchAmbiguityError

from .datastructures import AdjacencyTable, NodeMaps

log = logging.getLogger(__name__)

# Squared-distance threshold for 1D node coincidence
TOL_1D = 1e5 * np.finfo(float).eps


def node_offsets(elements: Sequence[Element]) -> np.ndarray:
    """Start of each element's block in the global node numbering, length K+1."""
    offsets = np.zeros(len(elements) + 1, dtype=np.int64)
    offsets[1:] = np.cumsum([el.n_nodes for el in elements])
    return offsets


def face_offsets(elements: Sequence[Element]) -> np.ndarray:
    """Face-node position of the first node of each (element, face), shape (K, F)."""
    face_sizes = np.array([[len(mask) for mask in el.fmask] for el in elements])
    starts = np.zeros(face_sizes.size, dtype=np.int64)
    starts[1:] = np.cumsum(face_sizes.ravel())[:-1]
    return starts.reshape(face_sizes.shape)


def check_uniform_order(elements: Sequence[Element]):
    """Raise NodeMatchAmbiguityError unless all elements share order and node count."""
    signatures = {(el.order, el.n_nodes) for el in elements}
    if len(signatures) > 1:
        raise NodeMatchAmbiguityError(
            f"Elements have mixed polynomial orders (order, Np): {sorted(signatures)}"
        )


def match_face_nodes(
    x_interior: np.ndarray, x_exterior: np.ndarray, tol: float
) -> np.ndarray:
    """
    Pair the nodes of two coincident faces by position.

    Parameters
    ----------
    x_interior, x_exterior : np.ndarray
        Node coordinates of the two faces, shape (Nfp, dim)
    tol : float
        Squared-distance threshold below which two nodes coincide

    Returns
    -------
    np.ndarray
        perm with x_exterior[perm[i]] coincident with x_interior[i]

    Raises
    ------
    NodeMatchAmbiguityError
        If the faces differ in node count, or any node has zero or several
        coincident partners
    """
    if len(x_interior) != len(x_exterior):
        raise NodeMatchAmbiguityError(
            f"Faces have {len(x_interior)} and {len(x_exterior)} nodes"
        )
    d2 = np.sum((x_interior[:, None, :] - x_exterior[None, :, :]) ** 2, axis=-1)
    hits = d2 < tol
    per_row = hits.sum(axis=1)
    per_col = hits.sum(axis=0)
    if np.any(per_row != 1) or np.any(per_col != 1):
        i = int(np.flatnonzero(per_row != 1)[0]) if np.any(per_row != 1) else None
        raise NodeMatchAmbiguityError(
            f"Face nodes do not pair one-to-one (min squared distance "
            f"{d2.min(axis=1).max():.3e}, tolerance {tol:.3e}, first bad node {i})"
        )
    return hits.argmax(axis=1)


def _build_maps(
    elements: Sequence[Element],
    adjacency: AdjacencyTable,
    tolerance: Callable[[int, int], float],
) -> NodeMaps:
    check_uniform_order(elements)
    offsets = node_offsets(elements)

    face_start = face_offsets(elements)
    n_positions = sum(len(mask) for el in elements for mask in el.fmask)

    interior = np.empty(n_positions, dtype=np.int64)
    exterior = np.empty(n_positions, dtype=np.int64)
    exterior_positions = np.empty(n_positions, dtype=np.int64)

    for k, el in enumerate(elements):
        for f, mask in enumerate(el.fmask):
            rows = slice(face_start[k, f], face_start[k, f] + len(mask))
            own = offsets[k] + mask
            interior[rows] = own

            neighbor = adjacency.neighbor(k, f)
            if not neighbor:
                exterior[rows] = own
                exterior_positions[rows] = np.arange(rows.start, rows.stop)
                continue

            k2, f2 = neighbor
            other = elements[k2]
            try:
                perm = match_face_nodes(
                    el.face_coordinates(f), other.face_coordinates(f2), tolerance(k, f)
                )
            except NodeMatchAmbiguityError as exc:
                raise NodeMatchAmbiguityError(
                    f"Element {k} face {f} vs element {k2} face {f2}: {exc}"
                ) from exc
            exterior[rows] = offsets[k2] + other.fmask[f2][perm]
            exterior_positions[rows] = face_start[k2, f2] + perm

    maps = NodeMaps(interior, exterior, exterior_positions)
    log.debug(
        f"Matched {n_positions} face-node positions, "
        f"{int(np.count_nonzero(maps.boundary_mask))} on the boundary"
    )
    return maps


def build_maps_1d(elements: Sequence[Element], adjacency: AdjacencyTable) -> NodeMaps:
    """
    Build node maps for a 1D grid.

    Parameters
    ----------
    elements : sequence of Element
        Interval elements in mesh order
    adjacency : AdjacencyTable
        Output of connect_1d for the same mesh

    Returns
    -------
    NodeMaps
        Two positions per element (left end, right end)
    """
    return _build_maps(elements, adjacency, lambda k, f: TOL_1D)


def build_maps_2d(
    mesh: Mesh2D, elements: Sequence[Element], adjacency: AdjacencyTable
) -> NodeMaps:
    """
    Build node maps for a triangle or quadrilateral grid.

    The coincidence threshold on face f of element k is eps * refd**2, refd
    being the length of that face measured between its mesh vertices.
    """
    eps = np.finfo(float).eps
    F = mesh.n_faces

    def tolerance(k: int, f: int) -> float:
        v1, v2 = mesh.etov[k, f], mesh.etov[k, (f + 1) % F]
        refd = np.linalg.norm(mesh.vertices[v1] - mesh.vertices[v2])
        return eps * refd**2

    return _build_maps(elements, adjacency, tolerance)

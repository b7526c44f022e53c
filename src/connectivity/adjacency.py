"""Element-to-element connectivity from vertex incidence.

Two faces are neighbors iff they are spanned by the same global vertices.
Faces are grouped by their sorted vertex tuple, so the cost is that of a
sort over K*F keys rather than a K*F by K*F comparison.

Face numbering:
- Face f of a 1D element is its local vertex f.
- Face f of a 2D element spans local vertices f and (f + 1) % F.
- The global face number g = k * F + f decodes with divmod(g, F).
"""

import logging
from typing import Union

import numpy as np
import scipy.sparse as sp

from meshing import MalformedMeshError, Mesh1D, Mesh2D, NonManifoldAdjacencyError

from .datastructures import AdjacencyTable

log = logging.getLogger(__name__)


def face_vertices(mesh: Union[Mesh1D, Mesh2D]) -> np.ndarray:
    """
    Global vertices of every face, shape (K*F, nfv).

    Row g = k*F + f lists the vertices of face f of element k: one vertex
    in 1D, two in 2D (in the element's local orientation).
    """
    etov = mesh.etov
    if mesh.dim == 1:
        return etov.reshape(-1, 1)
    return np.stack([etov, np.roll(etov, -1, axis=1)], axis=-1).reshape(-1, 2)


def _connect(mesh: Union[Mesh1D, Mesh2D]) -> AdjacencyTable:
    K, F = mesh.K, mesh.n_faces
    keys = np.sort(face_vertices(mesh), axis=1)

    _, group, counts = np.unique(keys, axis=0, return_inverse=True, return_counts=True)
    group = group.reshape(-1)

    crowded = np.flatnonzero(counts > 2)
    if crowded.size:
        faces = np.flatnonzero(group == crowded[0])
        shared = [divmod(int(g), F) for g in faces]
        raise NonManifoldAdjacencyError(
            f"{counts[crowded[0]]} faces share vertices {keys[faces[0]].tolist()}: "
            f"(element, face) = {shared}"
        )

    # Each matched pair: the two global faces of a group of size two
    order = np.argsort(group, kind="stable")
    sorted_groups = group[order]
    first = np.flatnonzero(sorted_groups[:-1] == sorted_groups[1:])
    g1, g2 = order[first], order[first + 1]
    k1, f1 = np.divmod(g1, F)
    k2, f2 = np.divmod(g2, F)

    same = k1 == k2
    if np.any(same):
        i = np.flatnonzero(same)[0]
        raise MalformedMeshError(
            f"Faces {f1[i]} and {f2[i]} of element {k1[i]} share the same vertices"
        )

    etoe = np.repeat(np.arange(K)[:, None], F, axis=1)
    etof = np.repeat(np.arange(F)[None, :], K, axis=0)
    etoe[k1, f1], etof[k1, f1] = k2, f2
    etoe[k2, f2], etof[k2, f2] = k1, f1

    table = AdjacencyTable(etoe, etof)
    log.debug(
        f"Connected {K} elements: {g1.size} interior face pairs, "
        f"{table.n_boundary_faces} boundary faces"
    )
    return table


def connect_1d(mesh: Mesh1D) -> AdjacencyTable:
    """
    Build the adjacency table of a 1D mesh.

    Parameters
    ----------
    mesh : Mesh1D
        Line mesh

    Returns
    -------
    AdjacencyTable
        etoe/etof with self-references on the two outer end points
        (and on any vertex used by a single element)

    Raises
    ------
    NonManifoldAdjacencyError
        If a vertex is shared by more than two elements
    """
    return _connect(mesh)


def connect_2d(mesh: Mesh2D) -> AdjacencyTable:
    """
    Build the adjacency table of a triangle or quadrilateral mesh.

    Raises
    ------
    NonManifoldAdjacencyError
        If an edge is shared by more than two faces
    MalformedMeshError
        If two faces of one element span the same edge
    """
    return _connect(mesh)


def coincidence_matrix(mesh: Union[Mesh1D, Mesh2D]) -> sp.csr_matrix:
    """
    Sparse face-to-face coincidence counts FtoV FtoV^T - nfv I.

    Entry (g1, g2) counts the vertices shared by global faces g1 and g2, with
    the self-coincidence removed from the diagonal. Faces g1 != g2 are
    neighbors iff their entry equals the number of face vertices nfv.

    Parameters
    ----------
    mesh : Mesh1D or Mesh2D
        Source mesh

    Returns
    -------
    scipy.sparse.csr_matrix
        Square matrix of size K*F
    """
    fv = face_vertices(mesh)
    n_total, nfv = fv.shape
    rows = np.repeat(np.arange(n_total), nfv)
    FtoV = sp.csr_matrix(
        (np.ones(rows.size, dtype=np.int64), (rows, fv.ravel())),
        shape=(n_total, mesh.n_vertices),
    )
    return (FtoV @ FtoV.T - nfv * sp.identity(n_total, dtype=np.int64, format="csr")).tocsr()


def adjacency_from_coincidence(mesh: Union[Mesh1D, Mesh2D]) -> AdjacencyTable:
    """Adjacency table read off `coincidence_matrix`, for cross-checking."""
    K, F = mesh.K, mesh.n_faces
    nfv = 1 if mesh.dim == 1 else 2
    C = coincidence_matrix(mesh).tocoo()
    hit = (C.data == nfv) & (C.row != C.col)

    etoe = np.repeat(np.arange(K)[:, None], F, axis=1)
    etof = np.repeat(np.arange(F)[None, :], K, axis=0)
    k1, f1 = np.divmod(C.row[hit], F)
    k2, f2 = np.divmod(C.col[hit], F)
    etoe[k1, f1], etof[k1, f1] = k2, f2
    return AdjacencyTable(etoe, etof)

"""Quadrilateral elements on tensor-product Legendre-Gauss-Lobatto nodes.

Nodes are ordered with the r index outermost: node i*(m+1) + j sits at
(a_i, b_j), where a and b are the GL nodes of orders n and m. Local vertex i
of the mesh element is mapped from reference corner i of
(-1, -1), (1, -1), (1, 1), (-1, 1), so face f (vertex f to vertex f+1) is
s = -1, r = 1, s = 1, r = -1 for f = 0..3. Each face mask lists its nodes
running from vertex f towards vertex f+1.
"""

from dataclasses import dataclass
from functools import lru_cache
from typing import NamedTuple, Optional

import numpy as np

from meshing import MalformedMeshError, Mesh2D
from spectral import LegendreLobattoBasis

from .base import (
    Element2D,
    edge_mass_matrices,
    geometric_factors_2d,
    lift_matrix,
    straight_edge_normals,
)

REFERENCE_CORNERS = np.array([[-1.0, -1.0], [1.0, -1.0], [1.0, 1.0], [-1.0, 1.0]])


def face_mask_rectangle(n: int, m: int):
    """Local node indices of faces s = -1, r = 1, s = 1, r = -1."""
    stride = m + 1
    return (
        np.arange(n + 1) * stride,
        n * stride + np.arange(m + 1),
        np.arange(n, -1, -1) * stride + m,
        np.arange(m, -1, -1),
    )


class ReferenceRectangle(NamedTuple):
    r: np.ndarray
    s: np.ndarray
    V: np.ndarray
    Dr: np.ndarray
    Ds: np.ndarray
    fmask: tuple
    lift: np.ndarray


@lru_cache(maxsize=None)
def reference_rectangle(n: int, m: int) -> ReferenceRectangle:
    """Nodes, face masks and operators of the reference square with orders (n, m)."""
    if n < 1 or m < 1:
        raise ValueError(f"Rectangle elements need orders n, m >= 1, got ({n}, {m})")

    basis = LegendreLobattoBasis()
    a = basis.nodes(n + 1)
    b = basis.nodes(m + 1)
    r = np.repeat(a, m + 1)
    s = np.tile(b, n + 1)

    V = np.kron(basis.vandermonde(a), basis.vandermonde(b))
    Dr = np.kron(basis.diff_matrix(a), np.eye(m + 1))
    Ds = np.kron(np.eye(n + 1), basis.diff_matrix(b))

    fmask = face_mask_rectangle(n, m)
    face_coords = (r[fmask[0]], s[fmask[1]], r[fmask[2]], s[fmask[3]])
    lift = lift_matrix(V, fmask, edge_mass_matrices(face_coords))

    for array in (r, s, V, Dr, Ds, lift, *fmask):
        array.setflags(write=False)
    return ReferenceRectangle(r, s, V, Dr, Ds, fmask, lift)


def bilinear_map(corners: np.ndarray, r: np.ndarray, s: np.ndarray) -> np.ndarray:
    """Map reference points to the quadrilateral with the given corners."""
    shape = np.column_stack(
        [
            (1 - r) * (1 - s),
            (1 + r) * (1 - s),
            (1 + r) * (1 + s),
            (1 - r) * (1 + s),
        ]
    )
    return 0.25 * shape @ corners


@dataclass(frozen=True, eq=False)
class Rectangle(Element2D):
    """Straight-sided quadrilateral with (n+1)(m+1) nodes."""

    m: int = 0


def build_rectangle(
    index: int, mesh: Mesh2D, n: int, m: Optional[int] = None
) -> Rectangle:
    """
    Construct quadrilateral `index` of a 2D mesh.

    Parameters
    ----------
    index : int
        Element number
    mesh : Mesh2D
        Source mesh (n_faces=4)
    n : int
        Polynomial order along r
    m : int, optional
        Polynomial order along s, defaults to n

    Returns
    -------
    Rectangle
        Element with physical nodes from the bilinear map of the reference square
    """
    m = n if m is None else m
    ref = reference_rectangle(n, m)
    vertices = mesh.etov[index]
    corners = mesh.vertices[vertices]

    xy = bilinear_map(corners, ref.r, ref.s)
    x, y = xy[:, 0], xy[:, 1]
    rx, sx, ry, sy, J = geometric_factors_2d(x, y, ref.Dr, ref.Ds)
    if np.any(J <= 0):
        raise MalformedMeshError(
            f"Quadrilateral {index} is clockwise, degenerate or non-convex "
            f"(min Jacobian {J.min():.3e})"
        )

    normals, sJ = straight_edge_normals(corners, ref.fmask)
    return Rectangle(
        index=index,
        vertices=vertices,
        order=n,
        r=np.column_stack([ref.r, ref.s]),
        x=xy,
        fmask=ref.fmask,
        normals=normals,
        V=ref.V,
        lift=ref.lift,
        J=J,
        fscale=sJ / J[np.concatenate(ref.fmask)],
        Dr=ref.Dr,
        Ds=ref.Ds,
        rx=rx,
        sx=sx,
        ry=ry,
        sy=sy,
        sJ=sJ,
        m=m,
    )

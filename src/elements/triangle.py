"""Triangular elements on warp & blend nodes.

Reference triangle: vertices (-1, -1), (1, -1), (-1, 1). Face 0 is s = -1,
face 1 is r + s = 0, face 2 is r = -1, which matches the mesh convention that
face f spans local vertices f and (f + 1) % 3.

References
----------
Hesthaven & Warburton (2008), "Nodal Discontinuous Galerkin Methods", Ch. 6
Warburton (2006), "An explicit construction of interpolation nodes on the simplex"
"""

from dataclasses import dataclass
from functools import lru_cache
from typing import NamedTuple, Tuple

import numpy as np

from meshing import MalformedMeshError, Mesh2D
from spectral import grad_jacobi_p, jacobi_gauss_lobatto, jacobi_p, vandermonde

from .base import (
    NODETOL,
    Element2D,
    edge_mass_matrices,
    geometric_factors_2d,
    lift_matrix,
    straight_edge_normals,
)

# Optimised blending parameters for orders 1..15
ALPHA_OPT = (
    0.0000, 0.0000, 1.4152, 0.1001, 0.2751, 0.9800, 1.0999,
    1.2832, 1.3648, 1.4773, 1.4959, 1.5743, 1.5770, 1.6223, 1.6258,
)


def warp_factor(N: int, rout: np.ndarray) -> np.ndarray:
    """Scaled 1D warp from equidistant to GL nodes, evaluated at `rout`."""
    LGLr = jacobi_gauss_lobatto(0.0, 0.0, N)
    req = np.linspace(-1.0, 1.0, N + 1)

    # Lagrange interpolant of the displacement through equidistant nodes
    Veq = vandermonde(req)
    Pmat = np.array([jacobi_p(rout, 0.0, 0.0, i) for i in range(N + 1)])
    Lmat = np.linalg.solve(Veq.T, Pmat)
    warp = Lmat.T @ (LGLr - req)

    # Divide out the edge blend, leaving the vertices untouched
    zerof = (np.abs(rout) < 1.0 - 1e-10).astype(float)
    sf = 1.0 - (zerof * rout) ** 2
    return warp / sf + warp * (zerof - 1.0)


def nodes_2d(N: int) -> Tuple[np.ndarray, np.ndarray]:
    """
    Warp & blend nodes of order N on the equilateral triangle.

    Parameters
    ----------
    N : int
        Polynomial order, N >= 1

    Returns
    -------
    x, y : np.ndarray
        (N+1)(N+2)/2 node coordinates, ordered row by row from the bottom edge
    """
    alpha = ALPHA_OPT[N - 1] if N <= len(ALPHA_OPT) else 5.0 / 3.0

    # Equidistant barycentric coordinates
    L1, L3 = [], []
    for n in range(N + 1):
        for m in range(N + 1 - n):
            L1.append(n / N)
            L3.append(m / N)
    L1, L3 = np.array(L1), np.array(L3)
    L2 = 1.0 - L1 - L3

    x = -L2 + L3
    y = (-L2 - L3 + 2.0 * L1) / np.sqrt(3.0)

    blend1 = 4.0 * L2 * L3
    blend2 = 4.0 * L1 * L3
    blend3 = 4.0 * L1 * L2

    warp1 = blend1 * warp_factor(N, L3 - L2) * (1.0 + (alpha * L1) ** 2)
    warp2 = blend2 * warp_factor(N, L1 - L3) * (1.0 + (alpha * L2) ** 2)
    warp3 = blend3 * warp_factor(N, L2 - L1) * (1.0 + (alpha * L3) ** 2)

    x = x + warp1 + np.cos(2 * np.pi / 3) * warp2 + np.cos(4 * np.pi / 3) * warp3
    y = y + np.sin(2 * np.pi / 3) * warp2 + np.sin(4 * np.pi / 3) * warp3
    return x, y


def xy_to_rs(x: np.ndarray, y: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
    """Map equilateral-triangle coordinates to the reference (r, s) triangle."""
    L1 = (np.sqrt(3.0) * y + 1.0) / 3.0
    L2 = (-3.0 * x - np.sqrt(3.0) * y + 2.0) / 6.0
    L3 = (3.0 * x - np.sqrt(3.0) * y + 2.0) / 6.0
    return -L2 + L3 - L1, -L2 - L3 + L1


def rs_to_ab(r: np.ndarray, s: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
    """Collapse (r, s) to the square coordinates (a, b) of the Dubiner basis."""
    a = np.full_like(r, -1.0)
    top = np.abs(s - 1.0) > NODETOL
    a[top] = 2.0 * (1.0 + r[top]) / (1.0 - s[top]) - 1.0
    return a, s


def simplex_2d_p(a: np.ndarray, b: np.ndarray, i: int, j: int) -> np.ndarray:
    """Orthonormal Dubiner polynomial (i, j) at collapsed coordinates (a, b)."""
    h1 = jacobi_p(a, 0.0, 0.0, i)
    h2 = jacobi_p(b, 2.0 * i + 1.0, 0.0, j)
    return np.sqrt(2.0) * h1 * h2 * (1.0 - b) ** i


def grad_simplex_2d_p(a: np.ndarray, b: np.ndarray, i: int, j: int):
    """Derivatives (d/dr, d/ds) of the Dubiner polynomial (i, j)."""
    fa = jacobi_p(a, 0.0, 0.0, i)
    dfa = grad_jacobi_p(a, 0.0, 0.0, i)
    gb = jacobi_p(b, 2.0 * i + 1.0, 0.0, j)
    dgb = grad_jacobi_p(b, 2.0 * i + 1.0, 0.0, j)

    dmodedr = dfa * gb
    if i > 0:
        dmodedr = dmodedr * (0.5 * (1.0 - b)) ** (i - 1)

    dmodeds = dfa * (gb * (0.5 * (1.0 + a)))
    if i > 0:
        dmodeds = dmodeds * (0.5 * (1.0 - b)) ** (i - 1)

    tmp = dgb * (0.5 * (1.0 - b)) ** i
    if i > 0:
        tmp = tmp - 0.5 * i * gb * (0.5 * (1.0 - b)) ** (i - 1)
    dmodeds = dmodeds + fa * tmp

    scale = 2.0 ** (i + 0.5)
    return scale * dmodedr, scale * dmodeds


def vandermonde_2d(N: int, r: np.ndarray, s: np.ndarray) -> np.ndarray:
    """Orthonormal Vandermonde matrix on the reference triangle."""
    a, b = rs_to_ab(r, s)
    columns = [simplex_2d_p(a, b, i, j) for i in range(N + 1) for j in range(N + 1 - i)]
    return np.column_stack(columns)


def grad_vandermonde_2d(N: int, r: np.ndarray, s: np.ndarray):
    """Gradient Vandermonde matrices (Vr, Vs) on the reference triangle."""
    a, b = rs_to_ab(r, s)
    grads = [grad_simplex_2d_p(a, b, i, j) for i in range(N + 1) for j in range(N + 1 - i)]
    Vr = np.column_stack([g[0] for g in grads])
    Vs = np.column_stack([g[1] for g in grads])
    return Vr, Vs


def face_mask_triangle(r: np.ndarray, s: np.ndarray):
    """Local node indices on faces s = -1, r + s = 0, r = -1.

    Each mask runs from the face's first vertex to its second one.
    """
    return (
        np.flatnonzero(np.abs(s + 1.0) < NODETOL),
        np.flatnonzero(np.abs(r + s) < NODETOL),
        np.flatnonzero(np.abs(r + 1.0) < NODETOL)[::-1].copy(),
    )


class ReferenceTriangle(NamedTuple):
    r: np.ndarray
    s: np.ndarray
    V: np.ndarray
    Dr: np.ndarray
    Ds: np.ndarray
    fmask: tuple
    lift: np.ndarray


@lru_cache(maxsize=None)
def reference_triangle(N: int) -> ReferenceTriangle:
    """Nodes, face masks and operators of the order-N reference triangle."""
    if N < 1:
        raise ValueError(f"Triangle elements need order N >= 1, got {N}")

    r, s = xy_to_rs(*nodes_2d(N))
    V = vandermonde_2d(N, r, s)
    Vr, Vs = grad_vandermonde_2d(N, r, s)
    Dr = np.linalg.solve(V.T, Vr.T).T
    Ds = np.linalg.solve(V.T, Vs.T).T

    fmask = face_mask_triangle(r, s)
    face_coords = (r[fmask[0]], r[fmask[1]], s[fmask[2]])
    lift = lift_matrix(V, fmask, edge_mass_matrices(face_coords))

    for array in (r, s, V, Dr, Ds, lift, *fmask):
        array.setflags(write=False)
    return ReferenceTriangle(r, s, V, Dr, Ds, fmask, lift)


@dataclass(frozen=True, eq=False)
class Triangle(Element2D):
    """Straight-sided triangle with (N+1)(N+2)/2 nodes."""


def build_triangle(index: int, mesh: Mesh2D, order: int) -> Triangle:
    """
    Construct triangle `index` of a 2D mesh with order-`order` nodes.

    Parameters
    ----------
    index : int
        Element number
    mesh : Mesh2D
        Source mesh (n_faces=3)
    order : int
        Polynomial order N

    Returns
    -------
    Triangle
        Element with physical nodes from the affine map of the reference triangle
    """
    ref = reference_triangle(order)
    vertices = mesh.etov[index]
    corners = mesh.vertices[vertices]
    area = _signed_area(corners)
    if area <= 0:
        raise MalformedMeshError(
            f"Triangle {index} is clockwise or degenerate (signed area {area:.3e})"
        )

    r, s = ref.r, ref.s
    x = 0.5 * (-(r + s) * corners[0, 0] + (1 + r) * corners[1, 0] + (1 + s) * corners[2, 0])
    y = 0.5 * (-(r + s) * corners[0, 1] + (1 + r) * corners[1, 1] + (1 + s) * corners[2, 1])

    rx, sx, ry, sy, J = geometric_factors_2d(x, y, ref.Dr, ref.Ds)
    normals, sJ = straight_edge_normals(corners, ref.fmask)

    return Triangle(
        index=index,
        vertices=vertices,
        order=order,
        r=np.column_stack([r, s]),
        x=np.column_stack([x, y]),
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
    )


def _signed_area(corners: np.ndarray) -> float:
    x, y = corners[:, 0], corners[:, 1]
    return 0.5 * float(np.sum(x * np.roll(y, -1) - np.roll(x, -1) * y))

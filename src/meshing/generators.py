"""Structured mesh generators: uniform intervals and rectangle lattices."""

import logging

import numpy as np

from .mesh_data import Mesh1D, Mesh2D

log = logging.getLogger(__name__)


def unimesh_1d(xmin: float, xmax: float, K: int) -> Mesh1D:
    """
    Generate a uniform 1D mesh.

    Parameters
    ----------
    xmin, xmax : float
        Interval end points
    K : int
        Number of elements

    Returns
    -------
    Mesh1D
        K+1 equispaced vertices with etov[i] = (i, i+1)

    Examples
    --------
    >>> mesh = unimesh_1d(-1.0, 1.0, 4)
    >>> mesh.etov[0].tolist()
    [0, 1]
    """
    if K < 1:
        raise ValueError(f"Number of elements K must be positive, got {K}")
    if not xmax > xmin:
        raise ValueError(f"Empty interval [{xmin}, {xmax}]")

    vertices = np.arange(K + 1) / K * (xmax - xmin) + xmin
    etov = np.column_stack([np.arange(K), np.arange(1, K + 1)])
    return Mesh1D(K, vertices, etov)


def rectmesh_2d(
    xmin: float,
    xmax: float,
    ymin: float,
    ymax: float,
    K: int,
    L: int,
) -> Mesh2D:
    """
    Generate a 2D mesh of uniform rectangles.

    Parameters
    ----------
    xmin, xmax : float
        Bounds of the first dimension
    ymin, ymax : float
        Bounds of the second dimension
    K : int
        Number of divisions along x
    L : int
        Number of divisions along y

    Returns
    -------
    Mesh2D
        K*L quadrilaterals with n_faces=4

    Notes
    -----
    Vertex (ix, iy) has index ix*(L+1) + iy, i.e. the lattice is stored
    x-major. Element j = k*L + l covers the cell [x_k, x_k+1] x [y_l, y_l+1]
    and lists its corners counter-clockwise starting at the top-left one:

        etov[j] = (v + 1, v, w, w + 1),  v = l + (L+1)k,  w = l + (L+1)(k+1)

    so face 0 is the left edge, face 1 the bottom, face 2 the right and
    face 3 the top.
    """
    if K < 1 or L < 1:
        raise ValueError(f"Division counts must be positive, got K={K}, L={L}")

    vx = unimesh_1d(xmin, xmax, K).vertices
    vy = unimesh_1d(ymin, ymax, L).vertices

    X, Y = np.meshgrid(vx, vy, indexing="ij")
    vertices = np.column_stack([X.ravel(), Y.ravel()])

    k, l = np.meshgrid(np.arange(K), np.arange(L), indexing="ij")
    v = (l + (L + 1) * k).ravel()
    w = (l + (L + 1) * (k + 1)).ravel()
    etov = np.column_stack([v + 1, v, w, w + 1])

    log.debug(f"Rectangle mesh: {K}x{L} cells, {len(vertices)} vertices")
    return Mesh2D(K * L, vertices, etov, 4)

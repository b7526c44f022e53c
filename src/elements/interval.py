"""1D interval elements on Legendre-Gauss-Lobatto nodes."""

from dataclasses import dataclass

import numpy as np

from meshing import MalformedMeshError, Mesh1D
from spectral import LegendreLobattoBasis

from .base import NODETOL, Element


@dataclass(frozen=True, eq=False)
class Interval(Element):
    """Interval element: face 0 is the left end point, face 1 the right one."""

    Dr: np.ndarray
    rx: np.ndarray

    def gradient(self, u: np.ndarray) -> np.ndarray:
        """Physical derivative du/dx of nodal values `u`."""
        return self.rx * (self.Dr @ u)


def face_mask_1d(r: np.ndarray):
    """Return (left, right) local node indices of the reference end points."""
    left = np.flatnonzero(np.abs(r + 1) < NODETOL)
    right = np.flatnonzero(np.abs(r - 1) < NODETOL)
    return left, right


def build_interval(index: int, mesh: Mesh1D, order: int) -> Interval:
    """
    Construct interval `index` of a 1D mesh with order-`order` GL nodes.

    Parameters
    ----------
    index : int
        Element number
    mesh : Mesh1D
        Source mesh
    order : int
        Polynomial order N (N+1 nodes)

    Returns
    -------
    Interval
        Element with x = va + (r + 1)/2 (vb - va)
    """
    basis = LegendreLobattoBasis()
    r = basis.nodes(order + 1)
    vertices = mesh.etov[index]
    va, vb = mesh.vertices[vertices]
    if not vb > va:
        raise MalformedMeshError(
            f"Element {index} has non-positive length: vertices at {va} and {vb}"
        )

    x = va + 0.5 * (r + 1.0) * (vb - va)
    Dr = basis.diff_matrix(r)
    V = basis.vandermonde(r)
    J = Dr @ x

    fmask = face_mask_1d(r)
    E = np.zeros((r.size, 2))
    E[fmask[0], 0] = 1.0
    E[fmask[1], 1] = 1.0
    lift = V @ (V.T @ E)

    face_nodes = np.concatenate(fmask)
    return Interval(
        index=index,
        vertices=vertices,
        order=order,
        r=r[:, None],
        x=x[:, None],
        fmask=fmask,
        normals=np.array([[-1.0], [1.0]]),
        V=V,
        lift=lift,
        J=J,
        fscale=1.0 / J[face_nodes],
        Dr=Dr,
        rx=1.0 / J,
    )

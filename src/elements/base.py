"""Element data shared by interval, triangle and rectangle builders.

An element is created once from a mesh entry and a polynomial order and is
immutable afterwards. Face-node data (normals, fscale, lift columns) is laid
out face-major in face-mask order: all nodes of face 0, then face 1, ...
"""

from dataclasses import dataclass, fields
from typing import List, Sequence, Tuple

import numpy as np

from spectral import legendre_mass_matrix

# Reference-coordinate tolerance for locating face nodes
NODETOL = 1e-12


@dataclass(frozen=True, eq=False)
class Element:
    """Nodal DG element: GL nodes, face masks and reference operators.

    Attributes
    ----------
    index : int
        Element number in the mesh
    vertices : np.ndarray
        Global vertex indices, in the mesh's local order
    order : int
        Polynomial order N
    r : np.ndarray
        Reference coordinates of the nodes, shape (Np, reference dim)
    x : np.ndarray
        Physical coordinates of the nodes, shape (Np, dim)
    fmask : tuple of np.ndarray
        Local node indices on each face, in a fixed order along the face
    normals : np.ndarray
        Outward unit normal at every face node, shape (n_face_nodes, dim)
    V : np.ndarray
        Orthonormal Vandermonde matrix
    lift : np.ndarray
        Surface-to-volume lift matrix, shape (Np, n_face_nodes)
    J : np.ndarray
        Volume Jacobian at each node
    fscale : np.ndarray
        Ratio of face to volume Jacobian at each face node
    """

    index: int
    vertices: np.ndarray
    order: int
    r: np.ndarray
    x: np.ndarray
    fmask: Tuple[np.ndarray, ...]
    normals: np.ndarray
    V: np.ndarray
    lift: np.ndarray
    J: np.ndarray
    fscale: np.ndarray

    def __post_init__(self):
        for f in fields(self):
            value = getattr(self, f.name)
            if isinstance(value, np.ndarray):
                value.setflags(write=False)
        fmask = tuple(np.asarray(mask, dtype=np.int64) for mask in self.fmask)
        for mask in fmask:
            mask.setflags(write=False)
        object.__setattr__(self, "fmask", fmask)

    @property
    def n_nodes(self) -> int:
        return len(self.x)

    @property
    def n_faces(self) -> int:
        return len(self.fmask)

    @property
    def dim(self) -> int:
        return self.x.shape[1]

    def face_nodes(self, face: int) -> np.ndarray:
        """Local indices of the nodes on `face`."""
        return self.fmask[face]

    def face_coordinates(self, face: int) -> np.ndarray:
        """Physical coordinates of the nodes on `face`, shape (Nfp, dim)."""
        return self.x[self.fmask[face]]

    def face_slice(self, face: int) -> slice:
        """Rows of the face-node arrays (normals, fscale) that belong to `face`."""
        start = sum(len(mask) for mask in self.fmask[:face])
        return slice(start, start + len(self.fmask[face]))


@dataclass(frozen=True, eq=False)
class Element2D(Element):
    """Planar element with reference derivative matrices and metric terms."""

    Dr: np.ndarray
    Ds: np.ndarray
    rx: np.ndarray
    sx: np.ndarray
    ry: np.ndarray
    sy: np.ndarray
    sJ: np.ndarray

    def gradient(self, u: np.ndarray):
        """Physical gradient (du/dx, du/dy) of nodal values `u`."""
        ur, us = self.Dr @ u, self.Ds @ u
        return self.rx * ur + self.sx * us, self.ry * ur + self.sy * us


def lift_matrix(
    V: np.ndarray,
    fmask: Sequence[np.ndarray],
    face_mass: Sequence[np.ndarray],
) -> np.ndarray:
    """
    Return the lift matrix V V^T E.

    Parameters
    ----------
    V : np.ndarray
        Orthonormal Vandermonde matrix of the element
    fmask : sequence of np.ndarray
        Local node indices per face
    face_mass : sequence of np.ndarray
        Mass matrix of each face in face-mask order

    Returns
    -------
    np.ndarray
        Lift matrix of shape (Np, total face nodes)
    """
    n_face_nodes = sum(len(mask) for mask in fmask)
    E = np.zeros((V.shape[0], n_face_nodes))
    col = 0
    for mask, mass in zip(fmask, face_mass):
        E[np.ix_(mask, np.arange(col, col + len(mask)))] = mass
        col += len(mask)
    return V @ (V.T @ E)


def edge_mass_matrices(face_coords: Sequence[np.ndarray]) -> List[np.ndarray]:
    """1D Legendre mass matrix for each face's reference coordinates."""
    return [legendre_mass_matrix(coords) for coords in face_coords]


def geometric_factors_2d(x: np.ndarray, y: np.ndarray, Dr: np.ndarray, Ds: np.ndarray):
    """
    Metric terms of the map from (r, s) to (x, y).

    Returns
    -------
    rx, sx, ry, sy, J : np.ndarray
        Inverse metric and Jacobian at each node
    """
    xr, xs = Dr @ x, Ds @ x
    yr, ys = Dr @ y, Ds @ y
    J = xr * ys - xs * yr
    return ys / J, -yr / J, -xs / J, xr / J, J


def straight_edge_normals(corners: np.ndarray, fmask: Sequence[np.ndarray]):
    """
    Outward normals and face Jacobians of a counter-clockwise straight-sided polygon.

    Face f runs from corners[f] to corners[(f + 1) % n_faces].

    Returns
    -------
    normals : np.ndarray
        Unit normal per face node, shape (total face nodes, 2)
    sJ : np.ndarray
        Face Jacobian (half edge length) per face node
    """
    n_faces = len(corners)
    normals, sJ = [], []
    for f, mask in enumerate(fmask):
        edge = corners[(f + 1) % n_faces] - corners[f]
        length = np.hypot(edge[0], edge[1])
        normals.append(np.tile([edge[1] / length, -edge[0] / length], (len(mask), 1)))
        sJ.append(np.full(len(mask), 0.5 * length))
    return np.vstack(normals), np.concatenate(sJ)

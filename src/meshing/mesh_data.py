"""
Mesh1D / Mesh2D: vertex list and element-to-vertex incidence for nodal DG grids.

A mesh carries no GL points; it is the combinatorial and geometric skeleton
that element builders and the connectivity engine work from.

Indexing Conventions:
- Vertices, elements and faces are 0-based.
- etov[k, :] lists the global vertices of element k (counter-clockwise in 2D).
- Face f of a 2D element spans local vertices f and (f + 1) % n_faces.
- Face f of a 1D element is local vertex f (0 = left end, 1 = right end).

Lifetime:
- Built once by a generator or reader, read-only afterwards. All arrays are
  copied and frozen on construction.

Boundary Condition Metadata:
- BoundaryConditions.face_tags[k, f] = 0 for untagged faces, c > 0 for faces
  in category names[c - 1].
"""

import logging
from dataclasses import dataclass
from typing import Tuple

import numpy as np

from .errors import MalformedMeshError, UnsupportedTopologyError

log = logging.getLogger(__name__)

SUPPORTED_FACE_COUNTS_2D = (3, 4)


def _frozen(values, dtype) -> np.ndarray:
    array = np.array(values, dtype=dtype)
    array.setflags(write=False)
    return array


def _check_incidence(K: int, etov: np.ndarray, n_vertices: int, n_faces: int):
    """Validate shape, vertex range and distinctness of an element-to-vertex table."""
    if K < 1:
        raise MalformedMeshError("Mesh has no elements")
    if etov.ndim != 2 or etov.shape != (K, n_faces):
        raise MalformedMeshError(
            f"Element-to-vertex table has shape {etov.shape}, expected ({K}, {n_faces})"
        )

    out_of_range = (etov < 0) | (etov >= n_vertices)
    if np.any(out_of_range):
        k, i = np.argwhere(out_of_range)[0]
        raise MalformedMeshError(
            f"Element {k} references vertex {etov[k, i]}, mesh has {n_vertices} vertices"
        )

    # An element listing a vertex twice would make one of its faces degenerate
    rows = np.sort(etov, axis=1)
    repeated = np.any(rows[:, 1:] == rows[:, :-1], axis=1)
    if np.any(repeated):
        raise MalformedMeshError(
            f"Element {np.flatnonzero(repeated)[0]} lists a vertex twice: {etov[repeated][0]}"
        )


@dataclass(frozen=True, eq=False)
class Mesh1D:
    """Line mesh: K intervals over a list of vertex positions."""

    K: int
    vertices: np.ndarray
    etov: np.ndarray
    n_faces: int = 2

    dim = 1

    def __post_init__(self):
        if self.n_faces != 2:
            raise UnsupportedTopologyError(
                f"1D elements have 2 faces, got n_faces={self.n_faces}"
            )
        vertices = _frozen(np.ravel(self.vertices), np.float64)
        etov = _frozen(self.etov, np.int64)
        _check_incidence(self.K, etov, vertices.size, self.n_faces)

        object.__setattr__(self, "vertices", vertices)
        object.__setattr__(self, "etov", etov)

    @property
    def n_vertices(self) -> int:
        return self.vertices.size


@dataclass(frozen=True, eq=False)
class Mesh2D:
    """Planar mesh of triangles (n_faces=3) or quadrilaterals (n_faces=4).

    The face count is uniform across elements; mixed topologies are not
    supported.
    """

    K: int
    vertices: np.ndarray
    etov: np.ndarray
    n_faces: int

    dim = 2

    def __post_init__(self):
        if self.n_faces not in SUPPORTED_FACE_COUNTS_2D:
            raise UnsupportedTopologyError(
                f"2D elements must have 3 or 4 faces, got n_faces={self.n_faces}"
            )
        vertices = _frozen(self.vertices, np.float64)
        if vertices.ndim != 2 or vertices.shape[1] != 2:
            raise MalformedMeshError(
                f"2D vertices must have shape (Nv, 2), got {vertices.shape}"
            )
        etov = _frozen(self.etov, np.int64)
        _check_incidence(self.K, etov, len(vertices), self.n_faces)

        object.__setattr__(self, "vertices", vertices)
        object.__setattr__(self, "etov", etov)

    @property
    def n_vertices(self) -> int:
        return len(self.vertices)

    def signed_areas(self) -> np.ndarray:
        """Shoelace area of every element; negative for clockwise vertex order."""
        x = self.vertices[self.etov, 0]
        y = self.vertices[self.etov, 1]
        x_next = np.roll(x, -1, axis=1)
        y_next = np.roll(y, -1, axis=1)
        return 0.5 * np.sum(x * y_next - x_next * y, axis=1)

    def counterclockwise(self) -> "Mesh2D":
        """Return a mesh with every clockwise element reordered counter-clockwise.

        The first vertex is kept and the rest reversed, so old face f becomes
        new face n_faces - 1 - f.
        """
        clockwise = self.signed_areas() < 0
        if not np.any(clockwise):
            return self

        log.debug(f"Reordering {np.count_nonzero(clockwise)} clockwise elements")
        etov = np.array(self.etov)
        etov[clockwise] = np.roll(etov[clockwise][:, ::-1], 1, axis=1)
        return Mesh2D(self.K, self.vertices, etov, self.n_faces)


@dataclass(frozen=True, eq=False)
class BoundaryConditions:
    """Named boundary-condition categories attached to element faces."""

    names: Tuple[str, ...]
    face_tags: np.ndarray

    def __post_init__(self):
        object.__setattr__(self, "names", tuple(self.names))
        face_tags = _frozen(self.face_tags, np.int64)
        if face_tags.ndim != 2:
            raise MalformedMeshError(
                f"Boundary tags must be a (K, n_faces) table, got shape {face_tags.shape}"
            )
        if face_tags.size and (face_tags.min() < 0 or face_tags.max() > len(self.names)):
            raise MalformedMeshError(
                f"Boundary tag codes must lie in [0, {len(self.names)}]"
            )
        object.__setattr__(self, "face_tags", face_tags)

    def code(self, name: str) -> int:
        """Tag value used for category `name` in face_tags."""
        try:
            return self.names.index(name) + 1
        except ValueError:
            raise KeyError(f"Unknown boundary condition: {name}") from None

    def faces(self, name: str) -> np.ndarray:
        """Return the (element, face) pairs tagged with `name`, shape (n, 2)."""
        return np.argwhere(self.face_tags == self.code(name))

"""Data structures produced by the connectivity engine.

Structure:
- AdjacencyTable: element-to-element / element-to-face neighbor tables
- NodeMaps: position-aligned interior/exterior face-node indices
- GridMetrics: build summary (logged to MLflow by the driver)
"""

from dataclasses import asdict, dataclass
from typing import NamedTuple, Union

import numpy as np
import pandas as pd


# ========================================================
# Element adjacency
# ========================================================


class Neighbor(NamedTuple):
    """Element and local face on the far side of an interior face."""

    element: int
    face: int


class _Boundary:
    """Sentinel for a face with no neighbor."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self):
        return "BOUNDARY"

    def __bool__(self):
        return False


BOUNDARY = _Boundary()


@dataclass(frozen=True, eq=False)
class AdjacencyTable:
    """Face-to-face adjacency of a mesh.

    Boundary faces refer to themselves: etoe[k, f] == k and etof[k, f] == f.
    Use `neighbor` to ask for a face's neighbor without decoding that
    convention by hand.

    Attributes
    ----------
    etoe : np.ndarray
        (K, F) neighbor element of each face
    etof : np.ndarray
        (K, F) neighbor's local face of each face
    boundary : np.ndarray
        (K, F) mask of faces without a neighbor
    """

    etoe: np.ndarray
    etof: np.ndarray

    def __post_init__(self):
        etoe = np.array(self.etoe, dtype=np.int64)
        etof = np.array(self.etof, dtype=np.int64)
        etoe.setflags(write=False)
        etof.setflags(write=False)
        object.__setattr__(self, "etoe", etoe)
        object.__setattr__(self, "etof", etof)

    @property
    def K(self) -> int:
        return self.etoe.shape[0]

    @property
    def n_faces(self) -> int:
        return self.etoe.shape[1]

    @property
    def boundary(self) -> np.ndarray:
        own_element = np.arange(self.K)[:, None]
        own_face = np.arange(self.n_faces)[None, :]
        return (self.etoe == own_element) & (self.etof == own_face)

    @property
    def n_boundary_faces(self) -> int:
        return int(np.count_nonzero(self.boundary))

    def neighbor(self, k: int, f: int) -> Union[Neighbor, _Boundary]:
        """Return the Neighbor across face f of element k, or BOUNDARY."""
        k2, f2 = int(self.etoe[k, f]), int(self.etof[k, f])
        if k2 == k and f2 == f:
            return BOUNDARY
        return Neighbor(k2, f2)

    def to_dataframe(self) -> pd.DataFrame:
        """One row per (element, face)."""
        K, F = self.etoe.shape
        return pd.DataFrame(
            {
                "element": np.repeat(np.arange(K), F),
                "face": np.tile(np.arange(F), K),
                "neighbor_element": self.etoe.ravel(),
                "neighbor_face": self.etof.ravel(),
                "boundary": self.boundary.ravel(),
            }
        )


# ========================================================
# Face-node maps
# ========================================================


@dataclass(frozen=True, eq=False)
class NodeMaps:
    """Interior/exterior face-node correspondence.

    Position i is one face node of one element face, concatenated
    element-major then face-major in face-mask order.

    Attributes
    ----------
    interior : np.ndarray
        Global index of the node on the own side
    exterior : np.ndarray
        Global index of the coincident node on the neighbor side
        (equal to interior on boundary faces)
    exterior_positions : np.ndarray
        Position of the matched neighbor face node within `interior`
    """

    interior: np.ndarray
    exterior: np.ndarray
    exterior_positions: np.ndarray

    def __post_init__(self):
        for name in ("interior", "exterior", "exterior_positions"):
            array = np.array(getattr(self, name), dtype=np.int64)
            array.setflags(write=False)
            object.__setattr__(self, name, array)

    def __len__(self) -> int:
        return self.interior.size

    @property
    def boundary_mask(self) -> np.ndarray:
        return self.interior == self.exterior

    @property
    def boundary_positions(self) -> np.ndarray:
        """Face-node positions on the boundary (mapB of the DG literature)."""
        return np.flatnonzero(self.boundary_mask)

    @property
    def boundary_nodes(self) -> np.ndarray:
        """Global nodes on the boundary (vmapB)."""
        return self.interior[self.boundary_mask]

    def to_dataframe(self) -> pd.DataFrame:
        """One row per face-node position."""
        return pd.DataFrame(
            {
                "interior": self.interior,
                "exterior": self.exterior,
                "exterior_position": self.exterior_positions,
                "boundary": self.boundary_mask,
            }
        )


# ========================================================
# Metrics
# ========================================================


@dataclass
class GridMetrics:
    """Grid build summary."""

    n_elements: int = 0
    n_nodes: int = 0
    n_face_nodes: int = 0
    n_boundary_faces: int = 0
    n_boundary_nodes: int = 0
    build_seconds: float = 0.0

    def to_dataframe(self):
        return pd.DataFrame([asdict(self)])

    def to_mlflow(self) -> dict:
        """Metric name -> value, for mlflow.log_metrics."""
        return {k: float(v) for k, v in asdict(self).items()}

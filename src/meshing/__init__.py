"""Mesh data model, generators and readers."""

from .errors import (
    MeshError,
    MalformedMeshError,
    NonManifoldAdjacencyError,
    NodeMatchAmbiguityError,
    UnsupportedTopologyError,
)
from .mesh_data import BoundaryConditions, Mesh1D, Mesh2D
from .generators import rectmesh_2d, unimesh_1d
from .gambit import read_gambit_2d

__all__ = [
    # Data model
    "Mesh1D",
    "Mesh2D",
    "BoundaryConditions",
    # Generators and readers
    "unimesh_1d",
    "rectmesh_2d",
    "read_gambit_2d",
    # Errors
    "MeshError",
    "MalformedMeshError",
    "NonManifoldAdjacencyError",
    "NodeMatchAmbiguityError",
    "UnsupportedTopologyError",
]

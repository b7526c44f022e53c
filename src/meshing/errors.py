"""Mesh construction failures.

Every error here is fatal for the mesh build: a wrong connectivity map gives
a silently wrong DG solution, so nothing downstream tries to recover.
"""


class MeshError(ValueError):
    """Base class for all mesh construction failures."""


class MalformedMeshError(MeshError):
    """Element-to-vertex table is inconsistent with the vertex list or face count."""


class NonManifoldAdjacencyError(MeshError):
    """A face is shared by more than two elements."""


class NodeMatchAmbiguityError(MeshError):
    """A face node has zero or several coincident nodes on the neighbor face."""


class UnsupportedTopologyError(MeshError):
    """Element face count is not one the element builders support."""

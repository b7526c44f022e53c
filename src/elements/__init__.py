"""Nodal DG elements: intervals, triangles and rectangles."""

from .base import NODETOL, Element, Element2D
from .factory import create_element, create_elements
from .interval import Interval, build_interval
from .rectangle import Rectangle, build_rectangle, reference_rectangle
from .triangle import Triangle, build_triangle, nodes_2d, reference_triangle

__all__ = [
    "NODETOL",
    # Element types
    "Element",
    "Element2D",
    "Interval",
    "Triangle",
    "Rectangle",
    # Builders
    "create_element",
    "create_elements",
    "build_interval",
    "build_triangle",
    "build_rectangle",
    # Reference data
    "nodes_2d",
    "reference_triangle",
    "reference_rectangle",
]

"""Tests for face-node matching."""

from dataclasses import replace

import numpy as np
import pytest

from connectivity import (
    build_maps_1d,
    build_maps_2d,
    connect_1d,
    connect_2d,
    match_face_nodes,
    node_offsets,
)
from elements import create_element, create_elements
from meshing import NodeMatchAmbiguityError, rectmesh_2d, unimesh_1d


def _maps(mesh, order):
    elements = create_elements(mesh, order)
    if mesh.dim == 1:
        adjacency = connect_1d(mesh)
        return elements, adjacency, build_maps_1d(elements, adjacency)
    adjacency = connect_2d(mesh)
    return elements, adjacency, build_maps_2d(mesh, elements, adjacency)


def _coordinates(elements):
    return np.vstack([el.x for el in elements])


class TestMaps1D:
    """Line meshes."""

    def test_two_elements(self):
        _, _, maps = _maps(unimesh_1d(0.0, 1.0, 2), 2)
        # Element 0 holds nodes 0..2, element 1 nodes 3..5
        assert maps.interior.tolist() == [0, 2, 3, 5]
        assert maps.exterior.tolist() == [0, 3, 2, 5]
        assert maps.exterior_positions.tolist() == [0, 2, 1, 3]
        assert maps.boundary_nodes.tolist() == [0, 5]
        assert maps.boundary_positions.tolist() == [0, 3]

    def test_single_element_all_boundary(self):
        _, _, maps = _maps(unimesh_1d(0.0, 1.0, 1), 4)
        assert maps.boundary_mask.all()
        assert maps.boundary_nodes.tolist() == [0, 4]

    def test_mixed_order_rejected(self, line_mesh):
        elements = create_elements(line_mesh, 2)
        elements[2] = create_element(line_mesh, 2, 3)
        with pytest.raises(NodeMatchAmbiguityError, match="mixed polynomial orders"):
            build_maps_1d(elements, connect_1d(line_mesh))

    def test_displaced_element_has_no_partner(self, line_mesh):
        elements = create_elements(line_mesh, 2)
        elements[1] = replace(elements[1], x=elements[1].x + 0.1)
        with pytest.raises(NodeMatchAmbiguityError, match="Element 0 face 1"):
            build_maps_1d(elements, connect_1d(line_mesh))


class TestMaps2D:
    """Quadrilateral and triangle meshes."""

    def test_two_by_two_linear(self):
        elements, _, maps = _maps(rectmesh_2d(0.0, 1.0, 0.0, 1.0, 2, 2), 1)
        assert len(maps) == 4 * 4 * 2
        # Right edge of element 0 against the left edge of element 2
        # (offset 8), traversed in the opposite direction
        assert maps.exterior[4:6].tolist() == [10, 8]
        # Four cells of four faces: 8 boundary faces of 2 nodes
        assert np.count_nonzero(maps.boundary_mask) == 16

    @pytest.mark.parametrize("N", [1, 2, 4])
    def test_exterior_coordinates_coincide(self, rect_mesh, N):
        elements, _, maps = _maps(rect_mesh, N)
        x = _coordinates(elements)
        assert np.allclose(x[maps.interior], x[maps.exterior], atol=1e-12)

    @pytest.mark.parametrize("N", [1, 3, 6])
    def test_triangle_coordinates_coincide(self, triangle_fan, N):
        elements, _, maps = _maps(triangle_fan, N)
        x = _coordinates(elements)
        assert np.allclose(x[maps.interior], x[maps.exterior], atol=1e-12)

    def test_two_triangles(self, square_triangles):
        elements, _, maps = _maps(square_triangles, 3)
        # 2 elements x 3 faces x 4 nodes, the diagonal is the only shared face
        assert len(maps) == 24
        assert np.count_nonzero(~maps.boundary_mask) == 8

    def test_exterior_positions_are_an_involution(self, rect_mesh):
        _, _, maps = _maps(rect_mesh, 3)
        p = maps.exterior_positions
        assert np.array_equal(p[p], np.arange(len(maps)))
        assert np.array_equal(maps.interior[p], maps.exterior)

    def test_single_element_all_boundary(self):
        _, _, maps = _maps(rectmesh_2d(0.0, 1.0, 0.0, 1.0, 1, 1), 3)
        assert maps.boundary_mask.all()
        assert np.array_equal(maps.exterior_positions, np.arange(len(maps)))

    def test_displaced_element_has_no_partner(self, square_triangles):
        elements = create_elements(square_triangles, 2)
        elements[1] = replace(elements[1], x=elements[1].x + 0.1)
        with pytest.raises(NodeMatchAmbiguityError):
            build_maps_2d(square_triangles, elements, connect_2d(square_triangles))


class TestBoundaryCount:
    """Boundary positions equal boundary faces times nodes per face."""

    @pytest.mark.parametrize(
        "mesh, N",
        [
            (unimesh_1d(0.0, 2.0, 7), 3),
            (rectmesh_2d(0.0, 1.0, 0.0, 1.0, 3, 4), 2),
            (rectmesh_2d(0.0, 4.0, 0.0, 1.0, 5, 1), 5),
        ],
    )
    def test_structured(self, mesh, N):
        _, adjacency, maps = _maps(mesh, N)
        nfp = 1 if mesh.dim == 1 else N + 1
        assert np.count_nonzero(maps.boundary_mask) == adjacency.n_boundary_faces * nfp

    def test_triangles(self, triangle_fan):
        _, adjacency, maps = _maps(triangle_fan, 4)
        assert np.count_nonzero(maps.boundary_mask) == adjacency.n_boundary_faces * 5


class TestDeterminism:
    """Repeated builds give identical output."""

    def test_rebuild_identical(self, rect_mesh):
        elements = create_elements(rect_mesh, 3)
        adjacency = connect_2d(rect_mesh)
        first = build_maps_2d(rect_mesh, elements, adjacency)
        second = build_maps_2d(rect_mesh, elements, adjacency)
        assert np.array_equal(first.interior, second.interior)
        assert np.array_equal(first.exterior, second.exterior)
        assert np.array_equal(first.exterior_positions, second.exterior_positions)


class TestMatchFaceNodes:
    """Pairwise coincidence."""

    def test_reversed_face(self):
        a = np.array([[0.0, 0.0], [0.5, 0.0], [1.0, 0.0]])
        assert match_face_nodes(a, a[::-1], 1e-20).tolist() == [2, 1, 0]

    def test_duplicate_partner(self):
        a = np.array([[0.0, 0.0], [1.0, 0.0]])
        b = np.array([[0.0, 0.0], [0.0, 0.0]])
        with pytest.raises(NodeMatchAmbiguityError):
            match_face_nodes(a, b, 1e-20)

    def test_size_mismatch(self):
        with pytest.raises(NodeMatchAmbiguityError, match="3 and 2 nodes"):
            match_face_nodes(np.zeros((3, 2)), np.zeros((2, 2)), 1e-20)

    def test_node_offsets(self, line_mesh):
        offsets = node_offsets(create_elements(line_mesh, 3))
        assert offsets.tolist() == [0, 4, 8, 12, 16]

"""Tests for the Gambit neutral file reader."""

import numpy as np
import pytest

from meshing import MalformedMeshError, read_gambit_2d


class TestReadGambit:
    """Reading a small triangulated square."""

    def test_counts(self, gambit_square):
        mesh, _ = read_gambit_2d(gambit_square)
        assert mesh.K == 2
        assert mesh.n_vertices == 4
        assert mesh.n_faces == 3

    def test_vertices(self, gambit_square):
        mesh, _ = read_gambit_2d(gambit_square)
        assert np.allclose(mesh.vertices, [[0, 0], [1, 0], [1, 1], [0, 1]])

    def test_indices_zero_based(self, gambit_square):
        mesh, _ = read_gambit_2d(gambit_square)
        assert mesh.etov.min() == 0
        assert mesh.etov[0].tolist() == [0, 1, 2]

    def test_clockwise_element_reoriented(self, gambit_square):
        mesh, _ = read_gambit_2d(gambit_square)
        # Listed as 1 4 3 in the file
        assert mesh.etov[1].tolist() == [0, 2, 3]
        assert np.all(mesh.signed_areas() > 0)

    def test_boundary_names(self, gambit_square):
        _, bc = read_gambit_2d(gambit_square)
        assert bc.names == ("Wall", "Outflow")
        assert bc.code("Outflow") == 2

    def test_boundary_tags_follow_reorientation(self, gambit_square):
        _, bc = read_gambit_2d(gambit_square)
        # Element 2's left edge was face 1 in the file, face 2 after reordering
        assert bc.face_tags.tolist() == [[1, 2, 0], [0, 2, 1]]
        assert bc.faces("Wall").tolist() == [[0, 0], [1, 2]]

    def test_unknown_boundary_name(self, gambit_square):
        _, bc = read_gambit_2d(gambit_square)
        with pytest.raises(KeyError):
            bc.code("Inflow")


class TestMalformedGambit:
    """Structural errors raise MalformedMeshError."""

    def _write(self, tmp_path, text):
        path = tmp_path / "bad.neu"
        path.write_text(text)
        return path

    def test_truncated_header(self, tmp_path):
        path = self._write(tmp_path, "CONTROL INFO\n** GAMBIT\n")
        with pytest.raises(MalformedMeshError):
            read_gambit_2d(path)

    def test_short_vertex_block(self, tmp_path, gambit_text):
        text = gambit_text.replace(
            "         4         2         1", "         5         2         1"
        )
        with pytest.raises(MalformedMeshError, match="ends after 4 of 5"):
            read_gambit_2d(self._write(tmp_path, text))

    def test_non_numeric_coordinate(self, tmp_path, gambit_text):
        text = gambit_text.replace("1.0000000000e+00   0.0000000000e+00", "one   0.0", 1)
        with pytest.raises(MalformedMeshError):
            read_gambit_2d(self._write(tmp_path, text))

    def test_missing_elements_section(self, tmp_path, gambit_text):
        text = gambit_text.replace("ELEMENTS/CELLS", "CELLS")
        with pytest.raises(MalformedMeshError, match="ELEMENTS/CELLS"):
            read_gambit_2d(self._write(tmp_path, text))

    def test_boundary_face_out_of_range(self, tmp_path, gambit_text):
        text = gambit_text.replace("         2        3       2\n", "         2        3       9\n")
        with pytest.raises(MalformedMeshError, match="outside the mesh"):
            read_gambit_2d(self._write(tmp_path, text))

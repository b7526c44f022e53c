"""Pytest configuration and fixtures for mesh and connectivity tests."""

import sys
from pathlib import Path

import numpy as np
import pytest

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))


@pytest.fixture
def legendre_basis():
    """Legendre-Gauss-Lobatto basis on [0, 1]."""
    from spectral import LegendreLobattoBasis

    return LegendreLobattoBasis(domain=(0.0, 1.0))


@pytest.fixture
def line_mesh():
    """Four uniform intervals on [0, 1]."""
    from meshing import unimesh_1d

    return unimesh_1d(0.0, 1.0, 4)


@pytest.fixture
def rect_mesh():
    """3x2 rectangles on [0, 1] x [0, 2]."""
    from meshing import rectmesh_2d

    return rectmesh_2d(0.0, 1.0, 0.0, 2.0, 3, 2)


@pytest.fixture
def square_triangles():
    """Unit square split into two counter-clockwise triangles along (0,0)-(1,1)."""
    from meshing import Mesh2D

    vertices = np.array([[0.0, 0.0], [1.0, 0.0], [1.0, 1.0], [0.0, 1.0]])
    etov = np.array([[0, 1, 2], [0, 2, 3]])
    return Mesh2D(2, vertices, etov, 3)


@pytest.fixture
def triangle_fan():
    """Six counter-clockwise triangles around a centre vertex (hexagon)."""
    from meshing import Mesh2D

    angles = np.arange(6) * np.pi / 3
    ring = np.column_stack([np.cos(angles), np.sin(angles)])
    vertices = np.vstack([[0.0, 0.0], ring])
    etov = np.array([[0, 1 + i, 1 + (i + 1) % 6] for i in range(6)])
    return Mesh2D(6, vertices, etov, 3)


GAMBIT_SQUARE = """\
        CONTROL INFO 2.4.6
** GAMBIT NEUTRAL FILE
square
PROGRAM:                Gambit     VERSION:  2.4.6
Jan 2026
     NUMNP     NELEM     NGRPS    NBSETS     NDFCD     NDFVL
         4         2         1         2         2         2
ENDOFSECTION
   NODAL COORDINATES 2.4.6
         1   0.0000000000e+00   0.0000000000e+00
         2   1.0000000000e+00   0.0000000000e+00
         3   1.0000000000e+00   1.0000000000e+00
         4   0.0000000000e+00   1.0000000000e+00
ENDOFSECTION
      ELEMENTS/CELLS 2.4.6
         1    3    3         1         2         3
         2    3    3         1         4         3
ENDOFSECTION
       ELEMENT GROUP 2.4.6
GROUP:          1 ELEMENTS:          2 MATERIAL:          2 NFLAGS:          1
                           fluid
       0
         1         2
ENDOFSECTION
 BOUNDARY CONDITIONS 2.4.6
                                Wall       1       2       0       6
         1        3       1
         2        3       1
ENDOFSECTION
 BOUNDARY CONDITIONS 2.4.6
                                Outflow       1       2       0       6
         1        3       2
         2        3       2
ENDOFSECTION
"""


@pytest.fixture
def gambit_square(tmp_path):
    """Gambit file of the unit square; element 2 is listed clockwise."""
    path = tmp_path / "square.neu"
    path.write_text(GAMBIT_SQUARE)
    return path


@pytest.fixture
def gambit_text():
    """Contents of the Gambit square file, for building malformed variants."""
    return GAMBIT_SQUARE

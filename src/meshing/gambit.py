"""Reader for Gambit neutral (.neu) 2D mesh files.

Layout consumed:

- line 7 holds the counts ``NUMNP NELEM NGRPS NBSETS NDFCD NDFVL``
- ``NODAL COORDINATES`` section: ``id x y`` per vertex
- ``ELEMENTS/CELLS`` section: ``id type n_vertices v1 ... vn`` per element
- optional ``BOUNDARY CONDITIONS`` sections: a header line whose first token
  names the category, then ``element type face`` entries

Every section ends with an ``ENDOFSECTION`` line. Indices in the file are
1-based and converted to 0-based on read.
"""

import logging
from pathlib import Path
from typing import List, Tuple, Union

import numpy as np

from .errors import MalformedMeshError
from .mesh_data import BoundaryConditions, Mesh2D

log = logging.getLogger(__name__)

COUNTS_LINE = 6
END_OF_SECTION = "ENDOFSECTION"


def _find_sections(lines: List[str], title: str) -> List[int]:
    return [i for i, line in enumerate(lines) if title in line]


def _numbers(line: str, kind, lineno: int) -> list:
    try:
        return [kind(token) for token in line.split()]
    except ValueError as exc:
        raise MalformedMeshError(f"Line {lineno + 1}: {exc}") from exc


def _section_rows(lines: List[str], start: int, count: int, kind) -> List[list]:
    """Parse `count` numeric rows following the section header at `start`."""
    rows = []
    for i in range(start + 1, start + 1 + count):
        if i >= len(lines) or END_OF_SECTION in lines[i]:
            raise MalformedMeshError(
                f"Section at line {start + 1} ends after {len(rows)} of {count} rows"
            )
        rows.append(_numbers(lines[i], kind, i))
    return rows


def _read_counts(lines: List[str]) -> Tuple[int, int]:
    if len(lines) <= COUNTS_LINE:
        raise MalformedMeshError("File too short for a Gambit header")
    counts = _numbers(lines[COUNTS_LINE], int, COUNTS_LINE)
    if len(counts) < 2:
        raise MalformedMeshError(
            f"Line {COUNTS_LINE + 1} should start with vertex and element counts"
        )
    return counts[0], counts[1]


def _read_boundary_conditions(lines: List[str], K: int, n_faces: int) -> BoundaryConditions:
    names: List[str] = []
    face_tags = np.zeros((K, n_faces), dtype=np.int64)

    for start in _find_sections(lines, "BOUNDARY CONDITIONS"):
        if start + 1 >= len(lines) or not lines[start + 1].split():
            raise MalformedMeshError(f"Boundary section at line {start + 1} has no name")
        name = lines[start + 1].split()[0]
        if name not in names:
            names.append(name)
        code = names.index(name) + 1

        i = start + 2
        while i < len(lines) and END_OF_SECTION not in lines[i]:
            entry = _numbers(lines[i], int, i)
            if len(entry) < 3:
                raise MalformedMeshError(f"Line {i + 1}: expected 'element type face'")
            k, f = entry[0] - 1, entry[2] - 1
            if not (0 <= k < K and 0 <= f < n_faces):
                raise MalformedMeshError(
                    f"Line {i + 1}: boundary face ({entry[0]}, {entry[2]}) is outside the mesh"
                )
            face_tags[k, f] = code
            i += 1

    return BoundaryConditions(tuple(names), face_tags)


def read_gambit_2d(path: Union[str, Path]) -> Tuple[Mesh2D, BoundaryConditions]:
    """
    Read a 2D Gambit neutral file.

    Parameters
    ----------
    path : str or Path
        Location of the .neu file

    Returns
    -------
    mesh : Mesh2D
        Mesh with counter-clockwise elements
    bc : BoundaryConditions
        Face tags aligned with the returned mesh's face numbering
    """
    path = Path(path)
    lines = path.read_text().splitlines()
    n_vertices, K = _read_counts(lines)

    nodal = _find_sections(lines, "NODAL COORDINATES")
    if not nodal:
        raise MalformedMeshError(f"{path.name}: no NODAL COORDINATES section")
    rows = _section_rows(lines, nodal[0], n_vertices, float)
    if any(len(row) < 3 for row in rows):
        raise MalformedMeshError(f"{path.name}: vertex rows must read 'id x y'")
    vertices = np.array([row[1:3] for row in rows])

    cells = _find_sections(lines, "ELEMENTS/CELLS")
    if not cells:
        raise MalformedMeshError(f"{path.name}: no ELEMENTS/CELLS section")
    rows = _section_rows(lines, cells[0], K, int)
    face_counts = {row[2] if len(row) > 2 else -1 for row in rows}
    if len(face_counts) != 1:
        raise MalformedMeshError(
            f"{path.name}: mixed element vertex counts {sorted(face_counts)}"
        )
    n_faces = face_counts.pop()
    if any(len(row) != 3 + n_faces for row in rows):
        raise MalformedMeshError(f"{path.name}: element rows do not list {n_faces} vertices")
    etov = np.array([row[3:] for row in rows]) - 1

    mesh = Mesh2D(K, vertices, etov, n_faces)
    bc = _read_boundary_conditions(lines, K, n_faces)

    # Reordering element vertices renumbers faces f -> n_faces - 1 - f
    clockwise = mesh.signed_areas() < 0
    if np.any(clockwise):
        face_tags = np.array(bc.face_tags)
        face_tags[clockwise] = face_tags[clockwise][:, ::-1]
        bc = BoundaryConditions(bc.names, face_tags)
        mesh = mesh.counterclockwise()

    log.info(
        f"Read {path.name}: {mesh.n_vertices} vertices, {mesh.K} elements, "
        f"boundary conditions {list(bc.names)}"
    )
    return mesh, bc

import numpy as np
from typing import Callable, Dict, Iterator, List, Tuple

from pyfemtransfer.core.topology import Cell, Face, UNASSIGNED, is_unassigned
from pyfemtransfer.errors import InvalidBoundaryIndicator


class Mesh:
    """
    Conforming mesh of intervals (1-D), quadrilaterals or triangles (2-D).

    Only corner vertices are stored; higher-order support points are
    generated by the :class:`~pyfemtransfer.core.dofhandler.DofHandler` from
    the reference element.  Faces are vertices in 1-D and edges in 2-D. Each
    face records its owning ("left") cell, the local face index inside that
    cell, the neighbour across it and a boundary indicator.  Interior faces
    carry :data:`UNASSIGNED`; boundary faces start with indicator ``0``.
    """
    # Local-corner indices forming each face, in CCW order for 2-D cells.
    _FACE_TABLE = {
        'interval': ((0,), (1,)),
        'tri':  ((0, 1), (1, 2), (2, 0)),
        'quad': ((0, 1), (1, 2), (2, 3), (3, 0)),
    }
    _DIM = {'interval': 1, 'tri': 2, 'quad': 2}

    def __init__(self, vertices: np.ndarray, cells: np.ndarray, *, element_type: str = 'quad'):
        if element_type not in self._FACE_TABLE:
            raise KeyError(element_type)
        vertices = np.asarray(vertices, dtype=float)
        if vertices.ndim == 1:
            vertices = vertices[:, None]
        self.element_type = element_type
        self.spatial_dim = self._DIM[element_type]
        if vertices.shape[1] != self.spatial_dim:
            raise ValueError(f"'{element_type}' meshes need {self.spatial_dim}-D vertices, "
                             f"got shape {vertices.shape}.")
        self.vertices: np.ndarray = vertices
        self.cell_connectivity: np.ndarray = np.asarray(cells, dtype=int)
        self.cells_list: List[Cell] = []
        self.faces_list: List[Face] = []
        self._face_dict: Dict[Tuple[int, ...], Face] = {}
        self._build_topology()

    def _build_topology(self):
        face_defs = self._FACE_TABLE[self.element_type]
        cell_faces: List[List[int]] = []

        for cid, corners in enumerate(self.cell_connectivity):
            gids = []
            for lid, local in enumerate(face_defs):
                verts = tuple(int(corners[k]) for k in local)
                key = tuple(sorted(verts))
                face = self._face_dict.get(key)
                if face is None:
                    face = Face(gid=len(self.faces_list), vertices=verts, left=cid,
                                right=None, lid=lid)
                    self.faces_list.append(face)
                    self._face_dict[key] = face
                elif face.right is None:
                    face.right = cid
                else:
                    raise ValueError(f"Face {key} is shared by more than two cells.")
                gids.append(face.gid)
            cell_faces.append(gids)

        for face in self.faces_list:
            if face.right is None:
                face.boundary_id = 0

        for cid, corners in enumerate(self.cell_connectivity):
            neighbors = []
            for gid in cell_faces[cid]:
                f = self.faces_list[gid]
                neighbors.append(f.right if f.left == cid else f.left)
            self.cells_list.append(Cell(id=cid,
                                        vertices=tuple(int(v) for v in corners),
                                        element_type=self.element_type,
                                        faces=tuple(cell_faces[cid]),
                                        neighbors=tuple(neighbors)))

    # --- Public API ---
    @property
    def n_active_cells(self) -> int:
        return len(self.cells_list)

    @property
    def n_vertices(self) -> int:
        return len(self.vertices)

    def active_cells(self) -> Iterator[Cell]:
        """Cells in traversal order; the index of a cell is its id."""
        return iter(self.cells_list)

    def cell_vertex_coords(self, cell_id: int) -> np.ndarray:
        return self.vertices[self.cell_connectivity[cell_id]]

    def face(self, face_id: int) -> Face:
        if not 0 <= face_id < len(self.faces_list):
            raise IndexError(f"Face ID {face_id} out of range.")
        return self.faces_list[face_id]

    def boundary_faces(self) -> Iterator[Face]:
        return (f for f in self.faces_list if f.at_boundary)

    def face_midpoint(self, face: Face) -> np.ndarray:
        return self.vertices[list(face.vertices)].mean(axis=0)

    def boundary_ids(self) -> List[int]:
        """Sorted list of indicators present on boundary faces."""
        return sorted({int(f.boundary_id) for f in self.boundary_faces()})

    def tag_boundary_faces(self, tag_functions: Dict[int, Callable[[np.ndarray], bool]]):
        """Assigns boundary indicators from predicates on the face midpoint.

        The first matching predicate wins; unmatched faces keep their id.
        """
        for bid in tag_functions:
            if is_unassigned(bid):
                raise InvalidBoundaryIndicator(
                    "UNASSIGNED is reserved for interior faces and cannot tag the boundary.")
        for face in self.boundary_faces():
            midpoint = self.face_midpoint(face)
            for bid, func in tag_functions.items():
                if func(midpoint):
                    face.boundary_id = int(bid)
                    break

    def measures(self) -> np.ndarray:
        """Length (1-D) or area (2-D) of each cell."""
        out = np.zeros(self.n_active_cells)
        for cell in self.cells_list:
            X = self.cell_vertex_coords(cell.id)
            if self.element_type == 'interval':
                out[cell.id] = abs(X[1, 0] - X[0, 0])
            else:
                x, y = X[:, 0], X[:, 1]
                out[cell.id] = 0.5 * abs(np.dot(x, np.roll(y, -1)) - np.dot(y, np.roll(x, -1)))
        return out

    def __repr__(self):
        return (f"<Mesh n_vertices={self.n_vertices}, "
                f"n_cells={self.n_active_cells}, "
                f"n_faces={len(self.faces_list)}, "
                f"elem_type='{self.element_type}'>")


__all__ = ["Mesh", "UNASSIGNED"]

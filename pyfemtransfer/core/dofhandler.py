# dofhandler.py

from __future__ import annotations

import logging
from typing import Dict, Iterable, Iterator, List, Tuple

import numpy as np
import scipy.sparse as sp

from pyfemtransfer.core.mesh import Mesh
from pyfemtransfer.core.topology import Face, is_unassigned
from pyfemtransfer.errors import InvalidBoundaryIndicator
from pyfemtransfer.fem.element import FiniteElement
from pyfemtransfer.fem import transform

logger = logging.getLogger(__name__)


class DofHandler:
    """Continuous (CG) dof numbering of a :class:`FiniteElement` on a :class:`Mesh`."""

    # .........................................................................
    def __init__(self, mesh: Mesh, element: FiniteElement, *, tol: float = 1e-10):
        """
        Build the global numbering.

        Parameters
        ----------
        mesh : Mesh
            Mesh whose active cells carry the element.
        element : FiniteElement
            Element used on every cell; its reference type must match the mesh.
        tol : float, default 1e-10
            Coordinates closer than ``tol`` are one support point.

        Attributes set
        --------------
        element_maps : ndarray of shape (n_cells, dofs_per_cell)
            Local -> global dof index for each cell.
        total_dofs : int
            Number of global dofs.
        _dof_coords : ndarray of shape (total_dofs, dim)
            Physical support point of each global dof.
        _dof_component : ndarray of shape (total_dofs,)
            Field component each global dof represents.

        Notes
        -----
        Numbering is geometry based: two local dofs of the same component
        share a global index iff their physical support points coincide.
        Global indices are handed out in cell traversal order.
        """
        if element.element_type != mesh.element_type:
            raise ValueError(f"Element on '{element.element_type}' cells cannot live on a "
                             f"'{mesh.element_type}' mesh.")
        self.mesh: Mesh = mesh
        self.element: FiniteElement = element
        self._tol = tol
        self._build_maps_cg()

    def _build_maps_cg(self) -> None:
        fe = self.element
        n_cells = self.mesh.n_active_cells
        self.element_maps = np.empty((n_cells, fe.dofs_per_cell), dtype=int)
        self._cell_support_points: List[np.ndarray] = []
        lookup: Dict[Tuple, int] = {}
        coords: List[np.ndarray] = []
        comps: List[int] = []
        ndp = max(0, int(round(-np.log10(self._tol))))
        unit_points = fe.unit_support_points

        for cell in self.mesh.active_cells():
            X = transform.x_mapping(self.mesh, cell.id, unit_points)
            self._cell_support_points.append(X)
            for i in range(fe.dofs_per_cell):
                c = int(fe.component_of_dof[i])
                key = (c,) + tuple(np.round(X[i], ndp) + 0.0)
                gd = lookup.get(key)
                if gd is None:
                    gd = len(coords)
                    lookup[key] = gd
                    coords.append(X[i])
                    comps.append(c)
                self.element_maps[cell.id, i] = gd

        self.total_dofs: int = len(coords)
        self._dof_coords = np.array(coords, dtype=float).reshape(-1, self.mesh.spatial_dim)
        self._dof_component = np.array(comps, dtype=int)
        logger.debug(f"DofHandler: {self.total_dofs} dofs on {n_cells} cells ({fe!r}).")

    # ------------------------------------------------------------------
    # Space description
    # ------------------------------------------------------------------
    @property
    def n_dofs(self) -> int:
        return self.total_dofs

    @property
    def n_components(self) -> int:
        return self.element.n_components

    @property
    def dofs_per_cell(self) -> int:
        return self.element.dofs_per_cell

    @property
    def spatial_dim(self) -> int:
        return self.mesh.spatial_dim

    def active_cells(self) -> Iterator[int]:
        """Cell ids in traversal order."""
        return iter(range(self.mesh.n_active_cells))

    def get_elemental_dofs(self, element_id: int) -> np.ndarray:
        return self.element_maps[element_id]

    def element_dof_coords(self, element_id: int) -> np.ndarray:
        """Physical support points of the cell's local dofs, (dofs_per_cell, dim)."""
        return self._cell_support_points[element_id]

    def get_dof_coords(self) -> np.ndarray:
        return self._dof_coords

    def get_dof_components(self) -> np.ndarray:
        return self._dof_component

    # ------------------------------------------------------------------
    # Faces
    # ------------------------------------------------------------------
    def boundary_faces(self, boundary_ids: Iterable[int] | None = None) -> Iterator[Face]:
        """Boundary faces, optionally restricted to a set of indicators."""
        if boundary_ids is None:
            return self.mesh.boundary_faces()
        wanted = set(_checked_boundary_ids(boundary_ids))
        return (f for f in self.mesh.boundary_faces() if f.boundary_id in wanted)

    def face_local_dofs(self, face: Face) -> np.ndarray:
        """Indices, local to ``face.left``, of the dofs on the face."""
        return self.element.face_dofs(face.lid)

    def face_dofs(self, face: Face) -> np.ndarray:
        return self.element_maps[face.left][self.face_local_dofs(face)]

    def face_dof_coords(self, face: Face) -> np.ndarray:
        return self._cell_support_points[face.left][self.face_local_dofs(face)]

    def map_dof_to_boundary_indices(self, boundary_ids: Iterable[int]) -> Tuple[np.ndarray, int]:
        """
        Compact numbering of the dofs on faces with the given indicators.

        Returns ``(mapping, n_boundary_dofs)`` where ``mapping[g]`` is the
        boundary index of global dof ``g`` or ``-1`` if it is not on such a
        face.  Boundary indices follow increasing global index.
        """
        on_boundary = np.zeros(self.total_dofs, dtype=bool)
        for face in self.boundary_faces(boundary_ids):
            on_boundary[self.face_dofs(face)] = True
        mapping = np.full(self.total_dofs, -1, dtype=int)
        n_boundary = int(on_boundary.sum())
        mapping[on_boundary] = np.arange(n_boundary)
        return mapping, n_boundary

    # ------------------------------------------------------------------
    # Sparsity hints
    # ------------------------------------------------------------------
    def _incidence(self) -> sp.csr_matrix:
        rows = np.repeat(np.arange(self.mesh.n_active_cells), self.dofs_per_cell)
        cols = self.element_maps.ravel()
        data = np.ones(rows.size)
        return sp.csr_matrix((data, (rows, cols)),
                             shape=(self.mesh.n_active_cells, self.total_dofs))

    def max_couplings_between_dofs(self) -> int:
        """Largest number of dofs any dof shares a cell with (itself included)."""
        incidence = self._incidence()
        pattern = (incidence.T @ incidence).tocsr()
        return int(np.diff(pattern.indptr).max()) if self.total_dofs else 0

    def max_couplings_between_boundary_dofs(self) -> int:
        """Upper bound on couplings within one boundary face."""
        return self.element.dofs_per_face * (2 if self.spatial_dim > 1 else 1)

    def __repr__(self) -> str:
        return f"<DofHandler n_dofs={self.total_dofs}, element={self.element!r}>"


def _checked_boundary_ids(boundary_ids: Iterable[int]) -> List[int]:
    out = []
    for bid in boundary_ids:
        if is_unassigned(bid):
            raise InvalidBoundaryIndicator(
                "UNASSIGNED marks interior faces and is not a boundary component.")
        out.append(int(bid))
    return out

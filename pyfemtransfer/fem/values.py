"""pyfemtransfer.fem.values
Per-cell and per-face evaluation of shape functions at quadrature points.

Reference data (basis values and gradients at the rule's points) is
tabulated once per object; :meth:`reinit` only recomputes geometry.
"""
import numpy as np

from pyfemtransfer.fem import transform
from pyfemtransfer.integration.quadrature import QuadratureRule, face_to_cell
from pyfemtransfer.core.mesh import Mesh


class CellValues:
    """Shape values, physical gradients, points and JxW on one cell at a time."""

    def __init__(self, dof_handler, quadrature: QuadratureRule, *, update_gradients: bool = False):
        self.dof_handler = dof_handler
        self.mesh = dof_handler.mesh
        self.fe = dof_handler.element
        self.quadrature = quadrature
        self.update_gradients = update_gradients
        self.n_quadrature_points = quadrature.n_points
        self._ref_points = quadrature.points
        self.shape_values = self.fe.shape_values(self._ref_points)          # (nq, ndofs)
        self._ref_grads = self.fe.shape_grads(self._ref_points) if update_gradients else None
        # one-hot (ndofs, ncomp): which component each local dof feeds
        self._component_matrix = np.eye(self.fe.n_components)[self.fe.component_of_dof]
        self.cell_id = None

    def reinit(self, cell_id: int) -> "CellValues":
        self.cell_id = cell_id
        self.dof_indices = self.dof_handler.get_elemental_dofs(cell_id)
        J = transform.jacobians(self.mesh, cell_id, self._ref_points)
        self.quadrature_points = transform.x_mapping(self.mesh, cell_id, self._ref_points)
        self.JxW = self.quadrature.weights * np.abs(np.linalg.det(J))
        if self.update_gradients:
            self.shape_grads = transform.map_grads(self._ref_grads, J)
        return self

    def _local(self, vec):
        return np.asarray(vec)[self.dof_indices][:, None] * self._component_matrix

    def function_values(self, vec: np.ndarray) -> np.ndarray:
        """Discrete field at the quadrature points, (nq, n_components)."""
        return self.shape_values @ self._local(vec)

    def function_gradients(self, vec: np.ndarray) -> np.ndarray:
        """Physical gradient of each component, (nq, n_components, dim)."""
        if not self.update_gradients:
            raise RuntimeError("CellValues was built without update_gradients=True.")
        return np.einsum('qid,ic->qcd', self.shape_grads, self._local(vec))


class FaceValues:
    """Cell shape functions restricted to a face of the cell that owns it."""

    def __init__(self, dof_handler, face_quadrature: QuadratureRule):
        self.dof_handler = dof_handler
        self.mesh = dof_handler.mesh
        self.fe = dof_handler.element
        self.quadrature = face_quadrature
        self.n_quadrature_points = face_quadrature.n_points
        self._per_face = {}
        face_table = Mesh._FACE_TABLE[self.mesh.element_type]
        for lid, local in enumerate(face_table):
            pts, tangent = face_to_cell(self.mesh.element_type, local, face_quadrature)
            self._per_face[lid] = (pts, tangent, self.fe.shape_values(pts))

    def reinit(self, face) -> "FaceValues":
        pts, tangent, shape = self._per_face[face.lid]
        J = transform.jacobians(self.mesh, face.left, pts)
        self.face = face
        self.dof_indices = self.dof_handler.get_elemental_dofs(face.left)
        self.face_local_dofs = self.dof_handler.face_local_dofs(face)
        self.quadrature_points = transform.x_mapping(self.mesh, face.left, pts)
        self.JxW = self.quadrature.weights * transform.face_measure(J, tangent)
        self.shape_values = shape
        return self

"""
FiniteElement: ``n_components`` copies of one scalar Lagrange element.

Local dofs are blocked per component, ``i = c * n_scalar + k``, so the local
vector of a two-component Q1 element reads ``[u0 u1 u2 u3 | v0 v1 v2 v3]``.
The same reference support point therefore appears once per component,
which is what the interpolation routines deduplicate.
"""
from functools import cached_property
from typing import List, Tuple

import numpy as np

from pyfemtransfer.core.mesh import Mesh
from pyfemtransfer.fem.reference import get_reference, REFERENCE_VERTICES


class FiniteElement:
    """Vector-valued Lagrange element of a single polynomial degree.

    Parameters
    ----------
    element_type
        ``'interval'``, ``'quad'`` or ``'tri'``.
    degree
        Polynomial degree of every component (>= 1).
    n_components
        Number of field components.
    """

    def __init__(self, element_type: str, degree: int = 1, n_components: int = 1):
        if degree < 1:
            raise ValueError("Lagrange elements need degree >= 1.")
        if n_components < 1:
            raise ValueError("'n_components' must be positive.")
        self.element_type = element_type
        self.degree = int(degree)
        self.n_components = int(n_components)
        self.ref = get_reference(element_type, self.degree)
        self.dim = self.ref.dim
        self.n_scalar = self.ref.n_basis
        self.dofs_per_cell = self.n_components * self.n_scalar
        self.component_of_dof = np.repeat(np.arange(self.n_components), self.n_scalar)

    def system_to_component_index(self, i: int) -> Tuple[int, int]:
        """(component, scalar basis index) of local dof ``i``."""
        return divmod(int(i), self.n_scalar)

    @property
    def unit_support_points(self) -> np.ndarray:
        """Reference support point of every local dof, (dofs_per_cell, dim)."""
        return np.tile(self.ref.nodes, (self.n_components, 1))

    # ..................................................................
    @cached_property
    def _face_scalar_dofs(self) -> List[np.ndarray]:
        corners = REFERENCE_VERTICES[self.element_type]
        nodes = self.ref.nodes
        out = []
        for local in Mesh._FACE_TABLE[self.element_type]:
            if len(local) == 1:
                on_face = np.all(nodes == corners[local[0]], axis=1)
            else:
                a, b = corners[local[0]], corners[local[1]]
                d = b - a
                rel = nodes - a
                cross = rel[:, 0] * d[1] - rel[:, 1] * d[0]
                t = rel @ d / (d @ d)
                on_face = (np.abs(cross) < 1e-12) & (t > -1e-12) & (t < 1 + 1e-12)
            out.append(np.flatnonzero(on_face))
        return out

    def face_dofs(self, face_no: int) -> np.ndarray:
        """Local indices of the dofs supported on reference face ``face_no``."""
        scalar = self._face_scalar_dofs[face_no]
        return np.concatenate([scalar + c * self.n_scalar for c in range(self.n_components)])

    @property
    def dofs_per_face(self) -> int:
        return len(self.face_dofs(0))

    # ..................................................................
    def shape_values(self, points: np.ndarray) -> np.ndarray:
        """Value of the scalar basis attached to every local dof, (n_points, dofs_per_cell)."""
        return np.tile(self.ref.shape_at(points), (1, self.n_components))

    def shape_grads(self, points: np.ndarray) -> np.ndarray:
        """Reference gradients per local dof, (n_points, dofs_per_cell, dim)."""
        return np.tile(self.ref.grad_at(points), (1, self.n_components, 1))

    @property
    def has_exact_mass_matrix(self) -> bool:
        """Cells with an affine geometry map admit a symbolically exact mass matrix."""
        return self.element_type in ('interval', 'tri')

    def exact_mass_matrix(self) -> np.ndarray:
        """Reference-cell mass matrix, block diagonal over components."""
        M = self.ref.mass_matrix()
        return np.kron(np.eye(self.n_components), M)

    def __repr__(self):
        kind = {'interval': 'P', 'tri': 'P', 'quad': 'Q'}[self.element_type]
        return f"<FiniteElement {kind}{self.degree}^{self.n_components} on '{self.element_type}'>"

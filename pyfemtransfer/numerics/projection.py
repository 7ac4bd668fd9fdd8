"""pyfemtransfer.numerics.projection
L2 projection of continuous fields: mass matrices, load vectors,
elimination of prescribed values and the CG solve.
"""
from __future__ import annotations

import enum
import logging
from typing import Dict, Mapping, Optional

import numpy as np
import scipy.sparse as sp

from pyfemtransfer.errors import ContractViolation, DimensionMismatch, Unimplemented
from pyfemtransfer.fem import transform
from pyfemtransfer.fem.reference import REFERENCE_VERTICES
from pyfemtransfer.fem.values import CellValues, FaceValues
from pyfemtransfer.integration.quadrature import QuadratureRule, face
from pyfemtransfer.linalg.constraints import AffineConstraints
from pyfemtransfer.linalg.solvers import LinearSolverParameters, solve_cg
from pyfemtransfer.numerics._checks import check_components
from pyfemtransfer.numerics.boundary_values import zero_boundary_values, project_boundary_values

logger = logging.getLogger(__name__)


class BoundaryPolicy(enum.Enum):
    """How :func:`project` treats boundary dofs."""
    NONE = "none"            # no prescribed values
    ZERO = "zero"            # homogeneous values on every boundary dof
    PROJECT = "project"      # L2 projection of the trace first


def _field_values(function, points, n_components):
    if n_components == 1:
        return function.value_list(points, 0)[:, None]
    return function.vector_value_list(points)


def _coo_to_csr(rows, cols, data, n):
    if not rows:
        return sp.csr_matrix((n, n))
    return sp.csr_matrix((np.concatenate(data), (np.concatenate(rows), np.concatenate(cols))),
                         shape=(n, n))


# ----------------------------------------------------------------------------
#  Mass matrices
# ----------------------------------------------------------------------------
def _assemble_mass_exact(dof_handler) -> sp.csr_matrix:
    fe = dof_handler.element
    mesh = dof_handler.mesh
    M_ref = fe.exact_mass_matrix()
    centroid = REFERENCE_VERTICES[mesh.element_type].mean(axis=0)
    rows, cols, data = [], [], []
    for cell_id in dof_handler.active_cells():
        detJ = abs(transform.det_jacobian(mesh, cell_id, centroid))
        gdofs = dof_handler.get_elemental_dofs(cell_id)
        rows.append(np.repeat(gdofs, len(gdofs)))
        cols.append(np.tile(gdofs, len(gdofs)))
        data.append((detJ * M_ref).ravel())
    return _coo_to_csr(rows, cols, data, dof_handler.n_dofs)


def _assemble_mass_quadrature(dof_handler, quadrature: QuadratureRule) -> sp.csr_matrix:
    fe = dof_handler.element
    same_component = fe.component_of_dof[:, None] == fe.component_of_dof[None, :]
    values = CellValues(dof_handler, quadrature)
    rows, cols, data = [], [], []
    for cell_id in dof_handler.active_cells():
        values.reinit(cell_id)
        phi = values.shape_values
        Ke = ((phi * values.JxW[:, None]).T @ phi) * same_component
        gdofs = values.dof_indices
        rows.append(np.repeat(gdofs, len(gdofs)))
        cols.append(np.tile(gdofs, len(gdofs)))
        data.append(Ke.ravel())
    return _coo_to_csr(rows, cols, data, dof_handler.n_dofs)


def create_mass_matrix(dof_handler, quadrature: Optional[QuadratureRule] = None) -> sp.csr_matrix:
    """
    Global mass matrix.

    Without ``quadrature`` the element must support exact integration
    (``element.has_exact_mass_matrix``); with it, the matrix is integrated
    numerically.
    """
    if quadrature is None:
        if not dof_handler.element.has_exact_mass_matrix:
            raise ContractViolation(f"{dof_handler.element!r} has no exact mass matrix; "
                                    f"pass a quadrature rule.")
        return _assemble_mass_exact(dof_handler)
    return _assemble_mass_quadrature(dof_handler, quadrature)


def create_right_hand_side(dof_handler, quadrature: QuadratureRule, function) -> np.ndarray:
    """Load vector b_i = (f, phi_i) integrated with ``quadrature``."""
    check_components(dof_handler, function)
    fe = dof_handler.element
    rhs = np.zeros(dof_handler.n_dofs)
    values = CellValues(dof_handler, quadrature)
    components = fe.component_of_dof
    for cell_id in dof_handler.active_cells():
        values.reinit(cell_id)
        f = _field_values(function, values.quadrature_points, fe.n_components)   # (nq, ncomp)
        local = np.einsum('q,qi,qi->i', values.JxW, values.shape_values, f[:, components])
        np.add.at(rhs, values.dof_indices, local)
    return rhs


def create_boundary_mass_matrix(dof_handler, q_face: QuadratureRule,
                                boundary_functions: Mapping[int, object],
                                dof_to_boundary: np.ndarray, n_boundary: int):
    """
    Boundary mass matrix and load vector in the compact boundary numbering.

    Only faces whose indicator is a key of ``boundary_functions`` contribute;
    each uses its own field for the load vector.
    """
    fe = dof_handler.element
    components = fe.component_of_dof
    values = FaceValues(dof_handler, q_face)
    rhs = np.zeros(n_boundary)
    rows, cols, data = [], [], []
    for f in dof_handler.boundary_faces(boundary_functions.keys()):
        values.reinit(f)
        local = values.face_local_dofs
        bdofs = dof_to_boundary[values.dof_indices[local]]
        phi = values.shape_values[:, local]
        comps = components[local]
        Ke = ((phi * values.JxW[:, None]).T @ phi) * (comps[:, None] == comps[None, :])
        g = _field_values(boundary_functions[f.boundary_id], values.quadrature_points,
                          fe.n_components)
        np.add.at(rhs, bdofs, np.einsum('q,qi,qi->i', values.JxW, phi, g[:, comps]))
        rows.append(np.repeat(bdofs, len(bdofs)))
        cols.append(np.tile(bdofs, len(bdofs)))
        data.append(Ke.ravel())
    return _coo_to_csr(rows, cols, data, n_boundary), rhs


# ----------------------------------------------------------------------------
#  Prescribed values
# ----------------------------------------------------------------------------
def apply_boundary_values(boundary_values: Mapping[int, float], matrix,
                          solution: np.ndarray, rhs: np.ndarray) -> sp.csr_matrix:
    """
    Eliminate prescribed dofs from ``matrix x = rhs``.

    Rows and columns of prescribed dofs become identity rows/columns, their
    couplings are moved to the right-hand side, and ``rhs`` / ``solution``
    hold the prescribed value there.  ``rhs`` and ``solution`` are changed
    in place; the modified matrix is returned.
    """
    A = sp.csr_matrix(matrix)
    n = A.shape[0]
    if len(rhs) != n:
        raise DimensionMismatch(len(rhs), n)
    if len(solution) != n:
        raise DimensionMismatch(len(solution), n)
    if not boundary_values:
        return A
    rows = np.fromiter(boundary_values.keys(), dtype=int, count=len(boundary_values))
    vals = np.fromiter(boundary_values.values(), dtype=float, count=len(boundary_values))

    g = np.zeros(n)
    g[rows] = vals
    rhs -= A @ g

    keep = np.ones(n)
    keep[rows] = 0.0
    K = sp.diags(keep)
    A = (K @ A @ K + sp.diags(1.0 - keep)).tocsr()
    rhs[rows] = vals
    solution[rows] = vals
    return A


# ----------------------------------------------------------------------------
#  Projection
# ----------------------------------------------------------------------------
def project(dof_handler, constraints: Optional[AffineConstraints], quadrature: QuadratureRule,
            function, *,
            boundary: BoundaryPolicy = BoundaryPolicy.NONE,
            q_boundary: Optional[QuadratureRule] = None,
            solver_parameters: Optional[LinearSolverParameters] = None,
            vec: Optional[np.ndarray] = None) -> np.ndarray:
    """
    L2 projection of ``function`` onto the space of ``dof_handler``.

    Parameters
    ----------
    constraints : AffineConstraints or None
        Closed constraints condensed into the system and distributed into
        the solution.
    quadrature : QuadratureRule
        Cell rule for the load vector (and the mass matrix when the element
        has no exact one).
    boundary : BoundaryPolicy
        ``NONE``, ``ZERO`` (homogeneous values on all boundary dofs) or
        ``PROJECT`` (boundary trace projected first, on every boundary id).
    q_boundary : QuadratureRule, optional
        Face rule for ``PROJECT``; defaults to ``degree + 1`` Gauss points.
    solver_parameters : LinearSolverParameters, optional
        CG tolerance, iteration cap and SSOR relaxation.

    Raises
    ------
    ComponentMismatch
        Field and space have different component counts.
    Unimplemented
        On 1-D meshes.
    SolverNonconvergence
        CG hit its iteration cap.
    """
    check_components(dof_handler, function)
    mesh = dof_handler.mesh
    if mesh.spatial_dim == 1:
        raise Unimplemented("L2 projection on 1-D meshes is not implemented.")
    if vec is not None and len(vec) != dof_handler.n_dofs:
        raise DimensionMismatch(len(vec), dof_handler.n_dofs)
    constraints = constraints if constraints is not None else AffineConstraints()
    fe = dof_handler.element

    boundary_values: Dict[int, float] = {}
    if boundary is BoundaryPolicy.ZERO:
        zero_boundary_values(dof_handler, boundary_values=boundary_values)
    elif boundary is BoundaryPolicy.PROJECT:
        if q_boundary is None:
            q_boundary = face(mesh.element_type, fe.degree + 1)
        boundary_functions = {bid: function for bid in mesh.boundary_ids()}
        project_boundary_values(dof_handler, boundary_functions, q_boundary,
                                boundary_values=boundary_values,
                                solver_parameters=solver_parameters)

    logger.info("Assembling mass matrix...")
    logger.debug(f"project: {dof_handler.n_dofs} dofs, "
                 f"<= {dof_handler.max_couplings_between_dofs()} couplings per dof")
    if fe.has_exact_mass_matrix:
        mass = _assemble_mass_exact(dof_handler)
    else:
        mass = _assemble_mass_quadrature(dof_handler, quadrature)
    logger.info("Assembling RHS vector...")
    rhs = create_right_hand_side(dof_handler, quadrature, function)

    mass = constraints.condense(mass)
    constraints.condense_vector(rhs)

    solution = np.zeros(dof_handler.n_dofs)
    if boundary_values:
        logger.info(f"Applying {len(boundary_values)} boundary values...")
        mass = apply_boundary_values(boundary_values, mass, solution, rhs)

    logger.info("Solving projection system...")
    solution = solve_cg(mass, rhs, x0=solution, params=solver_parameters)
    constraints.distribute(solution)

    if vec is None:
        return solution
    vec[:] = solution
    return vec

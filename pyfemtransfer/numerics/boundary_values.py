"""pyfemtransfer.numerics.boundary_values
Prescribed values on boundary dofs: ``{global_dof -> value}`` maps.
"""
from __future__ import annotations

import logging
from typing import Dict, Iterable, Mapping, Optional, Sequence

import numpy as np

from pyfemtransfer.core.topology import is_unassigned
from pyfemtransfer.errors import InvalidBoundaryIndicator, Unimplemented, ContractViolation
from pyfemtransfer.linalg.solvers import LinearSolverParameters, solve_cg
from pyfemtransfer.numerics._checks import check_components, component_mask_or_all

logger = logging.getLogger(__name__)


def _require_real_boundary_id(boundary_id) -> int:
    if is_unassigned(boundary_id):
        raise InvalidBoundaryIndicator(
            "UNASSIGNED marks interior faces and is not a boundary component.")
    return int(boundary_id)


def zero_boundary_values(dof_handler,
                         component_mask: Optional[Sequence[bool]] = None,
                         boundary_ids: Optional[Iterable[int]] = None,
                         boundary_values: Optional[Dict[int, float]] = None) -> Dict[int, float]:
    """
    Homogeneous values on every boundary dof.

    Parameters
    ----------
    component_mask : sequence of bool, optional
        Components to constrain; ``None`` means all of them.
    boundary_ids : iterable of int, optional
        Restrict to faces with these indicators; ``None`` means every
        boundary face whatever its indicator.
    boundary_values : dict, optional
        Map to extend; a new one is created otherwise.
    """
    mask = component_mask_or_all(dof_handler, component_mask)
    if boundary_ids is not None:
        boundary_ids = [_require_real_boundary_id(b) for b in boundary_ids]
    out = {} if boundary_values is None else boundary_values
    components = dof_handler.element.component_of_dof
    for face in dof_handler.boundary_faces(boundary_ids):
        local = dof_handler.face_local_dofs(face)
        gdofs = dof_handler.get_elemental_dofs(face.left)[local]
        for i, gd in zip(local, gdofs):
            if mask[components[i]]:
                out[int(gd)] = 0.0
    return out


def interpolate_boundary_values(dof_handler, boundary_id: int, function,
                                boundary_values: Optional[Dict[int, float]] = None,
                                component_mask: Optional[Sequence[bool]] = None) -> Dict[int, float]:
    """
    Nodal values of ``function`` on the faces with indicator ``boundary_id``.

    Face dofs are already one per (point, component) pair, so the field is
    evaluated once per face support point without deduplication.  Dofs of
    components outside ``component_mask`` are skipped.
    """
    boundary_id = _require_real_boundary_id(boundary_id)
    check_components(dof_handler, function)
    mask = component_mask_or_all(dof_handler, component_mask)

    fe = dof_handler.element
    fe_is_system = fe.n_components != 1
    out = {} if boundary_values is None else boundary_values
    components = fe.component_of_dof
    for face in dof_handler.boundary_faces([boundary_id]):
        local = dof_handler.face_local_dofs(face)
        gdofs = dof_handler.get_elemental_dofs(face.left)[local]
        locations = dof_handler.face_dof_coords(face)
        if fe_is_system:
            values = function.vector_value_list(locations)
            for k, (i, gd) in enumerate(zip(local, gdofs)):
                c = components[i]
                if mask[c]:
                    out[int(gd)] = float(values[k, c])
        else:
            values = function.value_list(locations, 0)
            for gd, v in zip(gdofs, values):
                out[int(gd)] = float(v)
    return out


def project_boundary_values(dof_handler, boundary_functions: Mapping[int, object], q_face,
                            boundary_values: Optional[Dict[int, float]] = None,
                            solver_parameters: Optional[LinearSolverParameters] = None
                            ) -> Dict[int, float]:
    """
    L2 projection of the boundary trace onto the boundary dofs.

    ``boundary_functions`` maps boundary indicators to the field to project
    on those faces.  The system lives on the compact boundary numbering of
    :meth:`DofHandler.map_dof_to_boundary_indices`.

    Raises
    ------
    Unimplemented
        For ambient dimension >= 3: constraints would have to be condensed
        in the boundary numbering, which is not supported.
    """
    from pyfemtransfer.numerics.projection import create_boundary_mass_matrix

    if dof_handler.mesh.spatial_dim >= 3:
        raise Unimplemented("Boundary projection needs constraint handling in the boundary "
                            "numbering, which is only available for dim < 3.")
    if not boundary_functions:
        raise ContractViolation("No boundary functions given.")
    for bid, func in boundary_functions.items():
        _require_real_boundary_id(bid)
        check_components(dof_handler, func)

    mapping, n_boundary = dof_handler.map_dof_to_boundary_indices(boundary_functions.keys())
    out = {} if boundary_values is None else boundary_values
    if n_boundary == 0:
        return out
    logger.debug(f"project_boundary_values: {n_boundary} boundary dofs, "
                 f"<= {dof_handler.max_couplings_between_boundary_dofs()} couplings per dof")

    mass, rhs = create_boundary_mass_matrix(dof_handler, q_face, boundary_functions, mapping,
                                            n_boundary)
    projection = solve_cg(mass, rhs, params=solver_parameters)

    for gd in np.flatnonzero(mapping >= 0):
        out[int(gd)] = float(projection[mapping[gd]])
    return out

"""pyfemtransfer.numerics.interpolation
Nodal interpolation of continuous fields and cell-local basis transfer.
"""
from __future__ import annotations

import logging

import numpy as np

from pyfemtransfer.numerics._checks import check_components
from pyfemtransfer.numerics.support_points import find_representative_dofs
from pyfemtransfer.errors import DimensionMismatch

logger = logging.getLogger(__name__)


def interpolate(dof_handler, function, vec: np.ndarray | None = None) -> np.ndarray:
    """
    Nodal interpolant of ``function`` in the space of ``dof_handler``.

    Every global dof receives the field's value, in the component the dof
    represents, at the dof's support point.  Each cell evaluates the field
    once per distinct support point; multi-component spaces use
    ``vector_value_list``, scalar spaces ``value_list``.

    Parameters
    ----------
    dof_handler : DofHandler
    function : Function
        Must have as many components as the element.
    vec : ndarray, optional
        Output vector of length ``n_dofs``.  It is only written after every
        cell succeeded; if evaluation raises, it is left untouched.

    Returns
    -------
    ndarray
        ``vec`` (or a new vector) holding the interpolant.
    """
    check_components(dof_handler, function)
    if vec is not None and len(vec) != dof_handler.n_dofs:
        raise DimensionMismatch(len(vec), dof_handler.n_dofs)

    fe = dof_handler.element
    fe_is_system = fe.n_components != 1
    # the reference pattern is the same on every cell
    rep_dofs, dof_to_rep = find_representative_dofs(fe.unit_support_points)
    components = fe.component_of_dof
    logger.debug(f"interpolate: {len(rep_dofs)} representative points for "
                 f"{fe.dofs_per_cell} local dofs")

    work = np.empty(dof_handler.n_dofs, dtype=float)
    written = np.zeros(dof_handler.n_dofs, dtype=bool)
    for cell_id in dof_handler.active_cells():
        rep_points = dof_handler.element_dof_coords(cell_id)[rep_dofs]
        if fe_is_system:
            values = function.vector_value_list(rep_points)              # (n_rep, n_comp)
            local = values[dof_to_rep, components]
        else:
            local = function.value_list(rep_points, 0)[dof_to_rep]
        gdofs = dof_handler.get_elemental_dofs(cell_id)
        fresh = ~written[gdofs]
        work[gdofs[fresh]] = local[fresh]
        written[gdofs] = True

    if vec is None:
        return work
    vec[:] = work
    return vec


def interpolate_transfer(source_handler, target_handler, transfer: np.ndarray,
                         source_vec: np.ndarray, target_vec: np.ndarray | None = None) -> np.ndarray:
    """
    Move coefficients between two spaces on the same cells.

    For each pair of cells (taken in traversal order from both handlers),
    the source cell's local coefficients are multiplied by ``transfer``
    (``target.dofs_per_cell x source.dofs_per_cell``) and added into the
    target numbering, so a dof shared by k cells receives the sum of k
    cell contributions.  ``target_vec`` is accumulated into, not cleared.
    Both handlers must enumerate the same cells in the same order; this is
    not checked.
    """
    transfer = np.asarray(transfer, dtype=float)
    expected = (target_handler.dofs_per_cell, source_handler.dofs_per_cell)
    if transfer.shape != expected:
        raise DimensionMismatch(transfer.shape[0] * transfer.shape[1], expected[0] * expected[1])
    if len(source_vec) != source_handler.n_dofs:
        raise DimensionMismatch(len(source_vec), source_handler.n_dofs)
    if target_vec is not None and len(target_vec) != target_handler.n_dofs:
        raise DimensionMismatch(len(target_vec), target_handler.n_dofs)

    out = np.zeros(target_handler.n_dofs) if target_vec is None else target_vec
    for src_cell, dst_cell in zip(source_handler.active_cells(), target_handler.active_cells()):
        cell_source = np.asarray(source_vec)[source_handler.get_elemental_dofs(src_cell)]
        np.add.at(out, target_handler.get_elemental_dofs(dst_cell), transfer @ cell_source)
    return out

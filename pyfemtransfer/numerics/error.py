"""pyfemtransfer.numerics.error
Cellwise norms of the difference between a continuous field and a discrete one.
"""
from __future__ import annotations

import enum
import logging
from typing import Optional

import numpy as np

from pyfemtransfer.errors import DimensionMismatch, MissingCapability, NotUseful, ContractViolation
from pyfemtransfer.fem.values import CellValues
from pyfemtransfer.integration.quadrature import QuadratureRule
from pyfemtransfer.numerics._checks import check_components

logger = logging.getLogger(__name__)


class NormType(enum.Enum):
    mean = "mean"
    L1_norm = "L1_norm"
    L2_norm = "L2_norm"
    Linfty_norm = "Linfty_norm"
    H1_seminorm = "H1_seminorm"
    H1_norm = "H1_norm"

    @property
    def needs_gradients(self) -> bool:
        return self in (NormType.H1_seminorm, NormType.H1_norm)

    @property
    def needs_values(self) -> bool:
        return self is not NormType.H1_seminorm


def integrate_difference(dof_handler, fe_function: np.ndarray, exact, quadrature: QuadratureRule,
                         norm: NormType, weight=None) -> np.ndarray:
    """
    One value per active cell of ``norm(exact - u_h)``.

    With ``psi = exact - u_h`` at the quadrature points:

    ============  ===========================================
    mean          sum_q (sum_c psi_c) JxW
    L1_norm       sum_q |psi| JxW
    L2_norm       sqrt(sum_q |psi|^2 JxW)
    Linfty_norm   max_q |psi|^2            (squared, no root)
    H1_seminorm   sqrt(sum_q sum_c |grad psi_c|^2 JxW)
    H1_norm       sqrt(L2 integral + H1 seminorm integral)
    ============  ===========================================

    ``weight``, a scalar field, multiplies the pointwise kernel before the
    cell reduction.  The result is ``float32`` in active-cell order.
    """
    norm = NormType(norm)
    fe = dof_handler.element
    if norm is NormType.mean and fe.n_components == 1:
        raise NotUseful("The mean norm is not defined on a single-component space.")
    check_components(dof_handler, exact)
    if norm.needs_gradients and not exact.provides_gradients:
        raise MissingCapability(f"{norm.value} needs gradients of the exact field; "
                                f"{type(exact).__name__} does not provide them.")
    if weight is not None and weight.n_components != 1:
        raise ContractViolation("The weight must be a scalar field.")
    fe_function = np.asarray(fe_function, dtype=float)
    if fe_function.shape != (dof_handler.n_dofs,):
        raise DimensionMismatch(fe_function.size, dof_handler.n_dofs)

    values = CellValues(dof_handler, quadrature, update_gradients=norm.needs_gradients)
    out = np.zeros(dof_handler.mesh.n_active_cells, dtype=np.float32)

    for idx, cell_id in enumerate(dof_handler.active_cells()):
        values.reinit(cell_id)
        pts = values.quadrature_points
        w = values.JxW
        if weight is not None:
            wq = weight.value_list(pts, 0)
        else:
            wq = 1.0

        if norm.needs_values:
            psi = exact.vector_value_list(pts) - values.function_values(fe_function)   # (nq, ncomp)
        if norm.needs_gradients:
            dpsi = exact.vector_gradient_list(pts) - values.function_gradients(fe_function)

        if norm is NormType.mean:
            out[idx] = np.sum(wq * psi.sum(axis=1) * w)
        elif norm is NormType.L1_norm:
            out[idx] = np.sum(wq * np.linalg.norm(psi, axis=1) * w)
        elif norm is NormType.Linfty_norm:
            out[idx] = np.max(wq * np.sum(psi**2, axis=1))
        else:
            squared = 0.0
            if norm.needs_values:
                squared += np.sum(wq * np.sum(psi**2, axis=1) * w)
            if norm.needs_gradients:
                squared += np.sum(wq * np.sum(dpsi**2, axis=(1, 2)) * w)
            out[idx] = np.sqrt(squared)

    logger.debug(f"integrate_difference[{norm.value}]: {len(out)} cells, "
                 f"max cell value {float(out.max()) if len(out) else 0.0:.3e}")
    return out

"""Field transfer operations on a :class:`~pyfemtransfer.core.DofHandler`."""
from pyfemtransfer.numerics.support_points import find_representative_dofs
from pyfemtransfer.numerics.interpolation import interpolate, interpolate_transfer
from pyfemtransfer.numerics.boundary_values import (
    zero_boundary_values,
    interpolate_boundary_values,
    project_boundary_values,
)
from pyfemtransfer.numerics.projection import (
    BoundaryPolicy,
    apply_boundary_values,
    create_mass_matrix,
    create_right_hand_side,
    project,
)
from pyfemtransfer.numerics.error import NormType, integrate_difference
from pyfemtransfer.numerics.mean_value import subtract_mean_value

__all__ = [
    "find_representative_dofs", "interpolate", "interpolate_transfer",
    "zero_boundary_values", "interpolate_boundary_values", "project_boundary_values",
    "BoundaryPolicy", "apply_boundary_values", "create_mass_matrix",
    "create_right_hand_side", "project",
    "NormType", "integrate_difference", "subtract_mean_value",
]

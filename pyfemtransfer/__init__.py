"""pyfemtransfer - transfer between continuous fields and Lagrange finite
element spaces: interpolation, L2 projection and error norms."""
from pyfemtransfer.core import Mesh, DofHandler, UNASSIGNED
from pyfemtransfer.fem.element import FiniteElement
from pyfemtransfer.integration.quadrature import QuadratureRule, volume, face
from pyfemtransfer.linalg import AffineConstraints, LinearSolverParameters
from pyfemtransfer.numerics import (
    find_representative_dofs,
    interpolate,
    interpolate_transfer,
    zero_boundary_values,
    interpolate_boundary_values,
    project_boundary_values,
    BoundaryPolicy,
    project,
    NormType,
    integrate_difference,
    subtract_mean_value,
)

__version__ = "0.1.0"

__all__ = [
    "Mesh", "DofHandler", "UNASSIGNED", "FiniteElement",
    "QuadratureRule", "volume", "face",
    "AffineConstraints", "LinearSolverParameters",
    "find_representative_dofs", "interpolate", "interpolate_transfer",
    "zero_boundary_values", "interpolate_boundary_values",
    "project_boundary_values", "BoundaryPolicy", "project",
    "NormType", "integrate_difference", "subtract_mean_value",
]

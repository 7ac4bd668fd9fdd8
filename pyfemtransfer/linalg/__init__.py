from .constraints import AffineConstraints
from .solvers import LinearSolverParameters, ssor_preconditioner, solve_cg

__all__ = ["AffineConstraints", "LinearSolverParameters", "ssor_preconditioner", "solve_cg"]

"""pyfemtransfer.linalg.solvers
Preconditioned conjugate gradients for the SPD mass systems.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass

import numpy as np
import scipy.sparse as sp
import scipy.sparse.linalg as spla

from pyfemtransfer.errors import SolverNonconvergence

logger = logging.getLogger(__name__)


@dataclass
class LinearSolverParameters:
    """CG settings for the projection solves."""

    tol: float = 1e-16                  # relative residual reduction target
    maxit: int = 1000                   # hard iteration cap
    relaxation: float = 1.2             # SSOR relaxation factor, 0 < omega < 2

    def __post_init__(self):
        if not 0.0 < self.relaxation < 2.0:
            raise ValueError(f"SSOR needs 0 < relaxation < 2, got {self.relaxation}.")
        if self.maxit < 1:
            raise ValueError("'maxit' must be positive.")


def ssor_preconditioner(A, omega: float = 1.2) -> spla.LinearOperator:
    """
    Symmetric successive over-relaxation preconditioner of an SPD matrix.

    Applies M^{-1} with M = omega/(2-omega) (D/omega + L) D^{-1} (D/omega + U)
    by one forward and one backward triangular sweep.
    """
    A = sp.csr_matrix(A)
    d = A.diagonal()
    if np.any(d <= 0.0):
        raise ValueError("SSOR needs a strictly positive diagonal.")
    lower = (sp.tril(A, k=-1) + sp.diags(d / omega)).tocsr()
    upper = (sp.triu(A, k=1) + sp.diags(d / omega)).tocsr()
    scale = (2.0 - omega) / omega

    def apply(r):
        y = spla.spsolve_triangular(lower, np.ravel(r), lower=True)
        y *= scale * d
        return spla.spsolve_triangular(upper, y, lower=False)

    return spla.LinearOperator(A.shape, matvec=apply, dtype=float)


def solve_cg(A, b: np.ndarray, x0: np.ndarray | None = None,
             params: LinearSolverParameters | None = None) -> np.ndarray:
    """
    Solve ``A x = b`` with SSOR-preconditioned CG.

    Raises
    ------
    SolverNonconvergence
        If the residual target is not met within ``params.maxit`` iterations.
    """
    params = params or LinearSolverParameters()
    M = ssor_preconditioner(A, params.relaxation)
    n_iter = 0

    def _count(_xk):
        nonlocal n_iter
        n_iter += 1

    x, info = spla.cg(A, b, x0=x0, rtol=params.tol, atol=0.0, maxiter=params.maxit,
                      M=M, callback=_count)
    residual = float(np.linalg.norm(b - A @ x))
    if info > 0:
        raise SolverNonconvergence(info, residual, params.tol * float(np.linalg.norm(b)))
    if info < 0:
        raise ValueError(f"CG rejected its input (info={info}).")
    logger.debug(f"CG converged in {n_iter} iterations, |r| = {residual:.3e}")
    return x

import numpy as np
import pytest
import scipy.sparse as sp

from pyfemtransfer.errors import SolverNonconvergence
from pyfemtransfer.linalg import LinearSolverParameters, solve_cg, ssor_preconditioner


def laplacian_1d(n):
    return sp.diags([-np.ones(n - 1), 2 * np.ones(n), -np.ones(n - 1)], [-1, 0, 1]).tocsr()


def test_default_parameters():
    p = LinearSolverParameters()
    assert p.tol == 1e-16
    assert p.maxit == 1000
    assert p.relaxation == 1.2


@pytest.mark.parametrize("kwargs", [{"relaxation": 0.0}, {"relaxation": 2.0}, {"maxit": 0}])
def test_invalid_parameters(kwargs):
    with pytest.raises(ValueError):
        LinearSolverParameters(**kwargs)


def test_ssor_on_diagonal_matrix():
    d = np.array([1.0, 2.0, 4.0])
    M = ssor_preconditioner(sp.diags(d), omega=1.5)
    r = np.array([1.0, 1.0, 1.0])
    assert np.allclose(M.matvec(r), 1.5 * 0.5 * r / d)


def test_ssor_needs_positive_diagonal():
    with pytest.raises(ValueError):
        ssor_preconditioner(sp.diags([1.0, 0.0]))


def test_solve_cg():
    A = laplacian_1d(20)
    x_true = np.linspace(0.0, 1.0, 20)
    x = solve_cg(A, A @ x_true, params=LinearSolverParameters(tol=1e-12))
    assert np.allclose(x, x_true, atol=1e-8)


def test_iteration_cap_raises():
    A = laplacian_1d(50)
    with pytest.raises(SolverNonconvergence) as info:
        solve_cg(A, np.ones(50), params=LinearSolverParameters(tol=1e-12, maxit=2))
    assert info.value.iterations == 2
    assert info.value.residual > 0.0

# conftest.py
import pytest

from pyfemtransfer.core.dofhandler import DofHandler
from pyfemtransfer.fem.element import FiniteElement
from pyfemtransfer.linalg import LinearSolverParameters
from pyfemtransfer.utils.meshgen import structured_interval, structured_quad, structured_triangles


@pytest.fixture
def line_mesh():
    """Four unit cells on [0, 4]."""
    return structured_interval(4.0, 4)


@pytest.fixture
def quad_mesh():
    return structured_quad(1.0, 1.0, nx=2, ny=2)


@pytest.fixture
def tri_mesh():
    return structured_triangles(1.0, 1.0, nx=2, ny=2)


@pytest.fixture
def q1_space(quad_mesh):
    return DofHandler(quad_mesh, FiniteElement('quad', 1))


@pytest.fixture
def tight_solver():
    return LinearSolverParameters(tol=1e-13)

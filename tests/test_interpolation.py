import numpy as np
import pytest

from pyfemtransfer.core.dofhandler import DofHandler
from pyfemtransfer.errors import ComponentMismatch, DimensionMismatch
from pyfemtransfer.fem.element import FiniteElement
from pyfemtransfer.fields import Analytic, CallableFunction, ConstantFunction, x, y
from pyfemtransfer.numerics import interpolate, interpolate_transfer


def test_linear_field_on_line_is_exact(line_mesh):
    dh = DofHandler(line_mesh, FiniteElement('interval', 1))
    u = interpolate(dh, CallableFunction(lambda p: p[:, 0]))
    assert np.array_equal(u, dh.get_dof_coords()[:, 0])
    assert np.array_equal(np.sort(u), [0.0, 1.0, 2.0, 3.0, 4.0])


@pytest.mark.parametrize("element_type, degree", [('quad', 1), ('quad', 2), ('tri', 1), ('tri', 2)])
def test_nodal_values(quad_mesh, tri_mesh, element_type, degree):
    mesh = quad_mesh if element_type == 'quad' else tri_mesh
    dh = DofHandler(mesh, FiniteElement(element_type, degree))
    f = Analytic(1 + x * x - 3 * x * y)
    u = interpolate(dh, f)
    X = dh.get_dof_coords()
    assert np.allclose(u, 1 + X[:, 0] ** 2 - 3 * X[:, 0] * X[:, 1])


def test_vector_field_components(quad_mesh):
    dh = DofHandler(quad_mesh, FiniteElement('quad', 2, n_components=2))
    u = interpolate(dh, Analytic([x + 1, y * y]))
    X = dh.get_dof_coords()
    comps = dh.get_dof_components()
    expected = np.where(comps == 0, X[:, 0] + 1, X[:, 1] ** 2)
    assert np.allclose(u, expected)


def test_vector_field_evaluated_once_per_point(quad_mesh):
    calls = []

    def func(points):
        calls.append(len(points))
        return np.column_stack([points[:, 0], points[:, 1]])

    dh = DofHandler(quad_mesh, FiniteElement('quad', 1, n_components=2))
    interpolate(dh, CallableFunction(func, n_components=2))
    assert calls == [4] * quad_mesh.n_active_cells


@pytest.mark.parametrize("mesh_name, element_type", [
    ('line_mesh', 'interval'), ('tri_mesh', 'tri'), ('quad_mesh', 'quad')])
@pytest.mark.parametrize("degree", [1, 2])
@pytest.mark.parametrize("values", [[3.5], [1.0, -2.0], [0.5, 4.0, -1.5]])
def test_constant_field_on_any_mesh(request, mesh_name, element_type, degree, values):
    mesh = request.getfixturevalue(mesh_name)
    dh = DofHandler(mesh, FiniteElement(element_type, degree, n_components=len(values)))
    u = interpolate(dh, ConstantFunction(values))
    assert np.array_equal(u, np.asarray(values)[dh.get_dof_components()])


def test_writes_into_given_vector(q1_space):
    vec = np.zeros(q1_space.n_dofs)
    out = interpolate(q1_space, ConstantFunction(3.0), vec)
    assert out is vec
    assert np.all(vec == 3.0)


def test_component_mismatch(q1_space):
    with pytest.raises(ComponentMismatch):
        interpolate(q1_space, ConstantFunction([1.0, 2.0]))


def test_length_mismatch(q1_space):
    with pytest.raises(DimensionMismatch):
        interpolate(q1_space, ConstantFunction(1.0), np.zeros(3))


def test_vector_untouched_when_field_fails(line_mesh):
    dh = DofHandler(line_mesh, FiniteElement('interval', 1))

    def func(points):
        if np.any(points[:, 0] > 2.5):
            raise RuntimeError("outside the data range")
        return points[:, 0]

    vec = np.full(dh.n_dofs, 7.0)
    with pytest.raises(RuntimeError):
        interpolate(dh, CallableFunction(func), vec)
    assert np.all(vec == 7.0)


class TestTransfer:
    def test_p1_to_p2_on_line(self, line_mesh):
        src = DofHandler(line_mesh, FiniteElement('interval', 1))
        dst = DofHandler(line_mesh, FiniteElement('interval', 2))
        # T[i, j] = phi_j of the source at target node i
        T = src.element.shape_values(dst.element.unit_support_points)
        f = CallableFunction(lambda p: 2 * p[:, 0] - 1)
        u = interpolate_transfer(src, dst, T, interpolate(src, f))
        # vertex dofs collect one contribution per adjacent cell
        n_cells = np.bincount(dst.element_maps.ravel(), minlength=dst.n_dofs)
        assert np.allclose(u / n_cells, interpolate(dst, f))

    def test_shared_dofs_accumulate(self, q1_space):
        target = np.zeros(q1_space.n_dofs)
        interpolate_transfer(q1_space, q1_space, np.eye(4), np.ones(q1_space.n_dofs), target)
        X = q1_space.get_dof_coords()
        n_cells = np.bincount(q1_space.element_maps.ravel(), minlength=q1_space.n_dofs)
        assert np.array_equal(target, n_cells.astype(float))
        centre = np.flatnonzero(np.all(np.isclose(X, 0.5), axis=1))[0]
        assert target[centre] == 4.0
        corner = np.flatnonzero(np.all(np.isclose(X, 0.0), axis=1))[0]
        assert target[corner] == 1.0

    def test_adds_to_existing_target(self, q1_space):
        src = interpolate(q1_space, Analytic(x + y))
        target = np.full(q1_space.n_dofs, 100.0)
        once = interpolate_transfer(q1_space, q1_space, np.eye(4), src)
        interpolate_transfer(q1_space, q1_space, 2 * np.eye(4), src, target)
        assert np.allclose(target, 100.0 + 2 * once)

    def test_shape_checked(self, q1_space):
        with pytest.raises(DimensionMismatch):
            interpolate_transfer(q1_space, q1_space, np.eye(3), np.zeros(q1_space.n_dofs))
        with pytest.raises(DimensionMismatch):
            interpolate_transfer(q1_space, q1_space, np.eye(4), np.zeros(2))

    @pytest.mark.parametrize("length", [3, 20])
    def test_target_length_checked(self, q1_space, length):
        target = np.full(length, 5.0)
        with pytest.raises(DimensionMismatch):
            interpolate_transfer(q1_space, q1_space, np.eye(4), np.ones(q1_space.n_dofs), target)
        assert np.all(target == 5.0)

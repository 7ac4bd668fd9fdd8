import numpy as np
import pytest

from pyfemtransfer.errors import MissingCapability
from pyfemtransfer.fields import Analytic, CallableFunction, ConstantFunction, Function, ZeroFunction, x, y


class Ramp(Function):
    """Pointwise-only field: f = x0."""

    def value(self, point, component=0):
        return float(point[0])


def test_analytic_values_and_gradients():
    f = Analytic([x * y, x + y])
    pts = np.array([[2.0, 3.0], [1.0, -1.0]])
    assert f.n_components == 2
    assert np.allclose(f.vector_value_list(pts), [[6.0, 5.0], [-1.0, 0.0]])
    grads = f.vector_gradient_list(pts)
    assert grads.shape == (2, 2, 2)
    assert np.allclose(grads[0], [[3.0, 2.0], [1.0, 1.0]])


def test_analytic_constant_expression():
    f = Analytic(5)
    assert np.allclose(f.value_list(np.zeros((3, 2))), 5.0)
    assert np.allclose(f.gradient_list(np.zeros((3, 2))), 0.0)


def test_scalar_vector_forms_share_path():
    f = Analytic(x * x, dim=1)
    pts = np.array([[1.0], [2.0]])
    assert f.vector_value_list(pts).shape == (2, 1)
    assert np.allclose(f.vector_gradient_list(pts)[:, 0, 0], [2.0, 4.0])


def test_pointwise_defaults():
    f = Ramp()
    assert not f.provides_gradients
    assert np.allclose(f.value_list(np.array([[1.0, 0.0], [2.0, 0.0]])), [1.0, 2.0])
    with pytest.raises(MissingCapability):
        f.gradient_list(np.zeros((1, 2)))


def test_constant_and_zero():
    c = ConstantFunction([1.0, 2.0, 3.0])
    assert c.n_components == 3
    assert np.allclose(c.vector_value_list(np.zeros((2, 2))), [[1, 2, 3], [1, 2, 3]])
    assert ConstantFunction(2.0, n_components=2).n_components == 2
    z = ZeroFunction(2)
    assert np.all(z.vector_gradient_list(np.zeros((4, 2))) == 0.0)
    with pytest.raises(ValueError):
        ConstantFunction([1.0, 2.0], n_components=3)


def test_callable_function():
    f = CallableFunction(lambda p: np.column_stack([p[:, 0], -p[:, 1]]), n_components=2,
                         grad=lambda p: np.tile([[1.0, 0.0], [0.0, -1.0]], (len(p), 1, 1)))
    pts = np.array([[1.0, 2.0]])
    assert f.provides_gradients
    assert np.allclose(f.value_list(pts, 1), [-2.0])
    assert np.allclose(f.gradient_list(pts, 0), [[1.0, 0.0]])
    plain = CallableFunction(lambda p: p[:, 0])
    assert not plain.provides_gradients
    with pytest.raises(MissingCapability):
        plain.vector_gradient_list(pts)

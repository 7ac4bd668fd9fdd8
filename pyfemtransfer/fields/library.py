"""Simple concrete fields: constants and wrapped callables."""
import numpy as np

from pyfemtransfer.errors import MissingCapability
from pyfemtransfer.fields.base import Function


class ConstantFunction(Function):
    """Spatially constant field; ``values`` is a scalar or one value per component."""
    provides_gradients = True

    def __init__(self, values, n_components: int | None = None):
        values = np.atleast_1d(np.asarray(values, dtype=float))
        if n_components is None:
            n_components = len(values)
        elif len(values) == 1:
            values = np.repeat(values, n_components)
        if len(values) != n_components:
            raise ValueError(f"{len(values)} values given for {n_components} components.")
        super().__init__(n_components)
        self.values = values

    def value(self, point, component=0):
        return float(self.values[component])

    def value_list(self, points, component=0):
        return np.full(len(np.atleast_2d(points)), self.values[component])

    def vector_value_list(self, points):
        return np.tile(self.values, (len(np.atleast_2d(points)), 1))

    def gradient(self, point, component=0):
        return np.zeros(len(np.atleast_1d(point)))

    def gradient_list(self, points, component=0):
        return np.zeros_like(np.atleast_2d(points), dtype=float)


class ZeroFunction(ConstantFunction):
    def __init__(self, n_components: int = 1):
        super().__init__(0.0, n_components)


class CallableFunction(Function):
    """
    Field from vectorised callables.

    ``func(points)`` receives an (n, dim) array and returns (n,) for one
    component or (n, n_components). ``grad(points)``, if given, returns
    (n, dim) or (n, n_components, dim).
    """

    def __init__(self, func, n_components: int = 1, grad=None):
        super().__init__(n_components)
        self._func = func
        self._grad = grad
        self.provides_gradients = grad is not None

    def vector_value_list(self, points):
        points = np.atleast_2d(points)
        return np.asarray(self._func(points), dtype=float).reshape(len(points), self.n_components)

    def value_list(self, points, component=0):
        return self.vector_value_list(points)[:, component]

    def value(self, point, component=0):
        return float(self.value_list(np.atleast_2d(point), component)[0])

    def vector_gradient_list(self, points):
        if self._grad is None:
            raise MissingCapability("CallableFunction was built without 'grad'.")
        points = np.atleast_2d(points)
        return np.asarray(self._grad(points), dtype=float).reshape(
            len(points), self.n_components, points.shape[1])

    def gradient_list(self, points, component=0):
        return self.vector_gradient_list(points)[:, component, :]

    def gradient(self, point, component=0):
        return self.gradient_list(np.atleast_2d(point), component)[0]

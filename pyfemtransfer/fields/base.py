"""pyfemtransfer.fields.base
Continuous fields evaluated in batches at physical points.

A field offers four batched evaluations::

    value_list(points, component)      -> (n,)
    vector_value_list(points)          -> (n, n_components)
    gradient_list(points, component)   -> (n, dim)
    vector_gradient_list(points)       -> (n, n_components, dim)

Subclasses implement :meth:`value` (and :meth:`gradient` when they set
``provides_gradients``); the list forms default to loops over those, and the
vector forms of single-component fields go through the scalar path.
"""
import numpy as np

from pyfemtransfer.errors import MissingCapability


class Function:
    provides_gradients = False

    def __init__(self, n_components: int = 1):
        if n_components < 1:
            raise ValueError("'n_components' must be positive.")
        self.n_components = int(n_components)

    # -- pointwise ---------------------------------------------------------
    def value(self, point: np.ndarray, component: int = 0) -> float:
        raise NotImplementedError(f"{type(self).__name__} does not implement value().")

    def gradient(self, point: np.ndarray, component: int = 0) -> np.ndarray:
        raise MissingCapability(f"{type(self).__name__} does not provide gradients.")

    # -- batched -----------------------------------------------------------
    def value_list(self, points: np.ndarray, component: int = 0) -> np.ndarray:
        points = np.atleast_2d(points)
        return np.array([self.value(p, component) for p in points], dtype=float)

    def vector_value_list(self, points: np.ndarray) -> np.ndarray:
        points = np.atleast_2d(points)
        if self.n_components == 1:
            return self.value_list(points, 0)[:, None]
        return np.column_stack([self.value_list(points, c) for c in range(self.n_components)])

    def gradient_list(self, points: np.ndarray, component: int = 0) -> np.ndarray:
        points = np.atleast_2d(points)
        return np.array([self.gradient(p, component) for p in points], dtype=float).reshape(
            len(points), points.shape[1])

    def vector_gradient_list(self, points: np.ndarray) -> np.ndarray:
        points = np.atleast_2d(points)
        if self.n_components == 1:
            return self.gradient_list(points, 0)[:, None, :]
        return np.stack([self.gradient_list(points, c) for c in range(self.n_components)], axis=1)

    def __repr__(self):
        return f"<{type(self).__name__} n_components={self.n_components}>"

# pyfemtransfer.fem.reference
"""
Order-agnostic reference-element factory.

Every builder returns symbolic Lagrange bases; :class:`Ref` lambdifies them
once and keeps the symbolic form for exact integration.
"""
from functools import lru_cache
from importlib import import_module
import numpy as np
import sympy as sp

# Corner coordinates of each reference cell, in the mesh's local corner order.
REFERENCE_VERTICES = {
    'interval': np.array([[-1.0], [1.0]]),
    'tri':      np.array([[0.0, 0.0], [1.0, 0.0], [0.0, 1.0]]),
    'quad':     np.array([[-1.0, -1.0], [1.0, -1.0], [1.0, 1.0], [-1.0, 1.0]]),
}

_BUILDERS = {
    'interval': ("pyfemtransfer.fem.reference.interval_pn", "interval_pn"),
    'quad':     ("pyfemtransfer.fem.reference.quad_qn", "quad_qn"),
    'tri':      ("pyfemtransfer.fem.reference.tri_pn", "tri_pn"),
}


class Ref:
    def __init__(self, element_type, degree, symbols, basis, nodes):
        self.element_type = element_type
        self.degree = degree
        self.symbols = tuple(symbols)
        self.dim = len(self.symbols)
        self.basis = list(basis)
        self.n_basis = len(self.basis)
        # canonical nodal coordinates; equal nodes are bit-identical floats
        self.nodes = np.array([[float(c) for c in p] for p in nodes], dtype=float)
        B = sp.Matrix(self.basis)
        self._shape_lambda = sp.lambdify(self.symbols, B, "numpy")
        self._grad_lambda = sp.lambdify(self.symbols, B.jacobian(self.symbols), "numpy")

    @lru_cache(maxsize=None)
    def shape(self, *xi):
        return np.asarray(self._shape_lambda(*xi), dtype=float).reshape(self.n_basis)

    @lru_cache(maxsize=None)
    def grad(self, *xi):
        return np.asarray(self._grad_lambda(*xi), dtype=float).reshape(self.n_basis, self.dim)

    def shape_at(self, points: np.ndarray) -> np.ndarray:
        """Basis values at reference points, shape (n_points, n_basis)."""
        return np.array([self.shape(*map(float, p)) for p in np.atleast_2d(points)])

    def grad_at(self, points: np.ndarray) -> np.ndarray:
        """Reference gradients, shape (n_points, n_basis, dim)."""
        return np.array([self.grad(*map(float, p)) for p in np.atleast_2d(points)])

    @lru_cache(maxsize=None)
    def mass_matrix(self) -> np.ndarray:
        """Exact reference mass matrix; only simplices and intervals."""
        s = self.symbols
        if self.element_type == 'interval':
            integral = lambda f: sp.integrate(f, (s[0], -1, 1))
        elif self.element_type == 'tri':
            integral = lambda f: sp.integrate(f, (s[1], 0, 1 - s[0]), (s[0], 0, 1))
        else:
            raise ValueError(f"No exact integration on '{self.element_type}' cells.")
        M = np.empty((self.n_basis, self.n_basis))
        for i in range(self.n_basis):
            for j in range(i, self.n_basis):
                M[i, j] = M[j, i] = float(integral(self.basis[i] * self.basis[j]))
        return M


@lru_cache(maxsize=None)
def get_reference(element_type: str, poly_order: int = 1) -> Ref:
    try:
        module, func = _BUILDERS[element_type]
    except KeyError:
        raise KeyError(element_type) from None
    symbols, basis, nodes = getattr(import_module(module), func)(poly_order)
    return Ref(element_type, poly_order, symbols, basis, nodes)


@lru_cache(maxsize=None)
def get_geometry_reference(element_type: str) -> Ref:
    """Degree-1 element with basis k equal to one at reference corner k."""
    ref = get_reference(element_type, 1)
    corners = REFERENCE_VERTICES[element_type]
    perm = [int(np.flatnonzero(np.all(ref.nodes == c, axis=1))[0]) for c in corners]
    nodes = [tuple(ref.nodes[k]) for k in perm]
    return Ref(element_type, 1, ref.symbols, [ref.basis[k] for k in perm], nodes)

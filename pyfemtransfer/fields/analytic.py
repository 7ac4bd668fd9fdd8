# analytic.py
import sympy as sp
import numpy as np

from pyfemtransfer.fields.base import Function


class Analytic(Function):
    """
    Wraps SymPy expressions in the coordinates ``x, y, z``.

    ``expr`` is one expression (scalar field) or a sequence (one per
    component).  Gradients are differentiated symbolically, so every
    Analytic field provides them.
    """
    _coord_syms = sp.symbols("x y z")
    provides_gradients = True

    def __init__(self, expr, dim: int = 2):
        exprs = list(expr) if isinstance(expr, (list, tuple)) else [expr]
        super().__init__(len(exprs))
        self.dim = int(dim)
        coords = self._coord_syms[:self.dim]
        self.exprs = [sp.sympify(e) for e in exprs]
        self._funcs = [sp.lambdify(coords, e, "numpy") for e in self.exprs]
        self._grad_funcs = [[sp.lambdify(coords, sp.diff(e, c), "numpy") for c in coords]
                            for e in self.exprs]

    @staticmethod
    def _call(func, points):
        out = func(*[points[:, i] for i in range(points.shape[1])])
        # constant expressions lambdify to scalars
        return np.broadcast_to(np.asarray(out, dtype=float), (len(points),)).copy()

    def _points(self, points):
        points = np.asarray(points, dtype=float).reshape(-1, self.dim)
        return points

    def value(self, point, component=0):
        return float(self.value_list(point, component)[0])

    def value_list(self, points, component=0):
        return self._call(self._funcs[component], self._points(points))

    def gradient(self, point, component=0):
        return self.gradient_list(point, component)[0]

    def gradient_list(self, points, component=0):
        points = self._points(points)
        return np.column_stack([self._call(g, points) for g in self._grad_funcs[component]])


# helper to avoid typing Analytic._coord_syms all the time
x, y, z = Analytic._coord_syms

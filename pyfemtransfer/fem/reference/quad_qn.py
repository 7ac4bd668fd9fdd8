from functools import lru_cache
import sympy as sp

from pyfemtransfer.fem.reference.interval_pn import lagrange_basis_1d


@lru_cache(maxsize=None)
def quad_qn(n: int):
    """
    Tensor-product Q_n on [-1,1]^2.

    Stacking order is (eta outer, xi inner): index = j*(n+1) + i.
    Returns ``(symbols, basis, nodes)``.
    """
    if n < 1:
        raise ValueError("Polynomial order n must be at least 1.")
    xi, eta = sp.symbols('xi eta')
    nodes1d, Lx = lagrange_basis_1d(n, xi)
    _, Ly = lagrange_basis_1d(n, eta)
    basis = []
    nodes = []
    for j in range(n + 1):
        for i in range(n + 1):
            basis.append(sp.expand(Lx[i] * Ly[j]))
            nodes.append((nodes1d[i], nodes1d[j]))
    return (xi, eta), basis, nodes

from functools import lru_cache
import sympy as sp


def lagrange_basis_1d(n: int, x: sp.Symbol):
    """Symbolic 1-D Lagrange polynomials on n+1 equispaced nodes of [-1, 1]."""
    nodes = [sp.Rational(2 * i, n) - 1 for i in range(n + 1)]
    basis = []
    for i, xi in enumerate(nodes):
        num = sp.S(1)
        den = sp.S(1)
        for j, xj in enumerate(nodes):
            if i == j:
                continue
            num *= (x - xj)
            den *= (xi - xj)
        basis.append(sp.expand(num / den))
    return nodes, basis


@lru_cache(maxsize=None)
def interval_pn(n: int):
    """
    P_n on the reference interval [-1, 1].

    Returns ``(symbols, basis, nodes)``: the coordinate symbol tuple, the
    symbolic basis list and the nodal points as tuples, ordered from -1 to 1.
    """
    if n < 1:
        raise ValueError("Polynomial order n must be at least 1.")
    x = sp.symbols('xi')
    nodes, basis = lagrange_basis_1d(n, x)
    return (x,), basis, [(p,) for p in nodes]

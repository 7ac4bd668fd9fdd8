from functools import lru_cache
import sympy as sp


@lru_cache(maxsize=None)
def tri_pn(n: int):
    """
    P_n Lagrange element on the reference triangle (0,0)-(1,0)-(0,1).

    Args:
        n: Polynomial order, at least 1.

    Returns:
        tuple: (symbols, basis, nodes)
            - symbols: the (xi, eta) sympy symbols.
            - basis: symbolic Lagrange basis [phi_1, ..., phi_N].
            - nodes: nodal points as rational (xi, eta) tuples, rows of
              constant eta, xi increasing within a row.
    """
    if n < 1:
        raise ValueError("Polynomial order n must be at least 1.")
    xi_sym, eta_sym = sp.symbols("xi eta")

    # 1. Pn nodal points
    nodes = []
    for j_level in range(n + 1):
        for i_level in range(n + 1 - j_level):
            nodes.append((sp.Rational(i_level, n), sp.Rational(j_level, n)))
    num_nodes = len(nodes)

    # 2. Monomial basis of total degree <= n
    monomials = []
    for total_degree in range(n + 1):
        for pow_xi in range(total_degree + 1):
            monomials.append(xi_sym**pow_xi * eta_sym**(total_degree - pow_xi))

    if len(monomials) != num_nodes:
        raise RuntimeError(f"Internal error: {num_nodes} nodes but {len(monomials)} "
                           f"monomials for order n={n}.")

    # 3. Vandermonde matrix V[i, j] = m_j(node_i)
    V = sp.zeros(num_nodes, num_nodes)
    for i_node, (node_xi, node_eta) in enumerate(nodes):
        for j_mono, mono in enumerate(monomials):
            V[i_node, j_mono] = mono.subs({xi_sym: node_xi, eta_sym: node_eta})

    # 4. Lagrange coefficients: phi_k = sum_j C[k, j] m_j with phi_k(node_i) = delta_ik
    try:
        C = V.inv().T
    except ValueError as exc:
        raise RuntimeError(f"Vandermonde matrix is singular for tri_pn order n={n}.") from exc

    mono_col = sp.Matrix(monomials)
    basis = [sp.expand((C.row(k) * mono_col)[0, 0]) for k in range(num_nodes)]
    return (xi_sym, eta_sym), basis, nodes

import numpy as np
import pytest
import scipy.sparse as sp

from pyfemtransfer.errors import ContractViolation
from pyfemtransfer.linalg import AffineConstraints


def spd_matrix(n=4):
    return sp.diags([-np.ones(n - 1), 3 * np.ones(n), -np.ones(n - 1)], [-1, 0, 1]).tocsr()


def test_condense_and_distribute():
    cm = AffineConstraints()
    cm.add_line(3)
    cm.add_entry(3, 0, 0.5)
    cm.add_entry(3, 1, 0.5)
    cm.close()
    assert cm.is_constrained(3) and not cm.is_constrained(0)
    assert cm.constrained_dofs() == [3] and len(cm) == 1

    A = cm.condense(spd_matrix())
    dense = A.toarray()
    assert np.allclose(dense, dense.T)
    assert np.allclose(dense[3, :3], 0.0) and dense[3, 3] == 3.0

    b = np.array([1.0, 1.0, 1.0, 2.0])
    cm.condense_vector(b)
    assert np.allclose(b, [2.0, 2.0, 1.0, 0.0])

    x = np.array([2.0, 4.0, 0.0, 99.0])
    cm.distribute(x)
    assert x[3] == 3.0


def test_chains_resolved():
    cm = AffineConstraints()
    cm.add_line(2)
    cm.add_entry(2, 1, 2.0)
    cm.add_line(1)
    cm.add_entry(1, 0, 3.0)
    cm.close()
    x = np.array([1.0, 0.0, 0.0])
    cm.distribute(x)
    assert np.allclose(x, [1.0, 3.0, 6.0])


def test_cycle_rejected():
    cm = AffineConstraints()
    cm.add_line(0)
    cm.add_entry(0, 1, 1.0)
    cm.add_line(1)
    cm.add_entry(1, 0, 1.0)
    with pytest.raises(ContractViolation):
        cm.close()


def test_misuse():
    cm = AffineConstraints()
    with pytest.raises(ContractViolation):
        cm.add_entry(0, 1, 1.0)
    cm.add_line(0)
    with pytest.raises(ContractViolation):
        cm.add_entry(0, 0, 1.0)
    with pytest.raises(ContractViolation):
        cm.condense(spd_matrix())
    cm.add_entries(0, [(1, 1.0)])
    cm.close()
    with pytest.raises(ContractViolation):
        cm.add_line(2)


def test_empty_constraints_are_identity():
    cm = AffineConstraints()
    A = spd_matrix()
    assert np.allclose(cm.condense(A).toarray(), A.toarray())
    b = np.ones(4)
    cm.condense_vector(b)
    assert np.all(b == 1.0)

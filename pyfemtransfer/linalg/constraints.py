"""pyfemtransfer.linalg.constraints
Homogeneous affine constraints ``x_i = sum_j w_ij x_j`` (hanging nodes,
periodicity), eliminated before a solve and restored after it.
"""
from __future__ import annotations

from typing import Dict, Iterable, List, Tuple

import numpy as np
import scipy.sparse as sp

from pyfemtransfer.errors import ContractViolation


class AffineConstraints:
    """
    Usage::

        cm = AffineConstraints()
        cm.add_line(7)
        cm.add_entry(7, 0, 1.0)      # x_7 = x_0
        cm.close()
        A = cm.condense(A)
        cm.condense_vector(b)
        x = solve(A, b)
        cm.distribute(x)
    """

    def __init__(self):
        self._lines: Dict[int, Dict[int, float]] = {}
        self._closed = False

    # -- building ----------------------------------------------------------
    def add_line(self, line: int) -> None:
        if self._closed:
            raise ContractViolation("Cannot add constraints after close().")
        self._lines.setdefault(int(line), {})

    def add_entry(self, line: int, column: int, value: float) -> None:
        line, column = int(line), int(column)
        if line not in self._lines:
            raise ContractViolation(f"Line {line} was not added with add_line().")
        if line == column:
            raise ContractViolation(f"Dof {line} cannot be constrained to itself.")
        row = self._lines[line]
        row[column] = row.get(column, 0.0) + float(value)

    def add_entries(self, line: int, entries: Iterable[Tuple[int, float]]) -> None:
        for column, value in entries:
            self.add_entry(line, column, value)

    def close(self) -> None:
        """Resolve chains so that no constraint refers to a constrained dof."""
        for _ in range(len(self._lines) + 1):
            changed = False
            for line, row in self._lines.items():
                nested = [c for c in row if c in self._lines]
                if not nested:
                    continue
                changed = True
                for c in nested:
                    w = row.pop(c)
                    for cc, ww in self._lines[c].items():
                        if cc == line:
                            raise ContractViolation(f"Cyclic constraint through dof {line}.")
                        row[cc] = row.get(cc, 0.0) + w * ww
            if not changed:
                self._closed = True
                return
        raise ContractViolation("Constraints do not resolve; they contain a cycle.")

    # -- queries -----------------------------------------------------------
    def is_constrained(self, dof: int) -> bool:
        return int(dof) in self._lines

    def constrained_dofs(self) -> List[int]:
        return sorted(self._lines)

    def __len__(self) -> int:
        return len(self._lines)

    def _require_closed(self):
        if self._lines and not self._closed:
            raise ContractViolation("AffineConstraints must be closed before use.")

    def _elimination_matrix(self, n: int) -> sp.csr_matrix:
        """C with x = C x_free: identity on free dofs, weights on constrained rows."""
        rows, cols, vals = [], [], []
        for i in range(n):
            row = self._lines.get(i)
            if row is None:
                rows.append(i); cols.append(i); vals.append(1.0)
            else:
                for j, w in row.items():
                    rows.append(i); cols.append(j); vals.append(w)
        return sp.csr_matrix((vals, (rows, cols)), shape=(n, n))

    # -- elimination -------------------------------------------------------
    def condense(self, matrix) -> sp.csr_matrix:
        """
        Return C^T A C.  Constrained rows and columns are zero except the
        diagonal, which keeps the original entry (or 1 if that is zero), so
        the condensed matrix stays SPD.
        """
        self._require_closed()
        A = sp.csr_matrix(matrix)
        if not self._lines:
            return A
        n = A.shape[0]
        C = self._elimination_matrix(n)
        out = (C.T @ A @ C).tolil()
        diag = A.diagonal()
        for i in self._lines:
            out[i, i] = diag[i] if diag[i] != 0.0 else 1.0
        return out.tocsr()

    def condense_vector(self, vec: np.ndarray) -> None:
        """In place: b <- C^T b, zero on constrained entries."""
        self._require_closed()
        for i, row in self._lines.items():
            bi = vec[i]
            for j, w in row.items():
                vec[j] += w * bi
            vec[i] = 0.0

    def distribute(self, vec: np.ndarray) -> None:
        """In place: recover constrained entries from their masters."""
        self._require_closed()
        for i, row in self._lines.items():
            vec[i] = sum(w * vec[j] for j, w in row.items())

"""pyfemtransfer.numerics.support_points
Grouping of local dofs that share a reference support point.

Multi-component elements attach one dof per component to the same point.
Interpolation evaluates the field once per distinct point and fans the
result out to every dof attached to it.
"""
from typing import List, Tuple

import numpy as np


def find_representative_dofs(points: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
    """
    Group local dofs by exactly equal reference points.

    Parameters
    ----------
    points : (dofs_per_cell, dim) array
        Reference support point of each local dof.

    Returns
    -------
    representatives : (n_rep,) int array
        Local dof index of the first dof seen at each distinct point, in
        order of first occurrence.
    dof_to_rep : (dofs_per_cell,) int array
        Position in ``representatives`` of the point each dof sits on.

    Notes
    -----
    Equality is exact; reference points of standard elements are canonical
    values generated once per element. Candidates are scanned newest first,
    so dofs stacked on consecutive points are matched in O(1).
    """
    points = np.asarray(points, dtype=float)
    if points.ndim == 1:
        points = points[:, None]
    representatives: List[int] = []
    dof_to_rep = np.empty(len(points), dtype=int)
    for i, p in enumerate(points):
        for j in range(len(representatives) - 1, -1, -1):
            if np.array_equal(p, points[representatives[j]]):
                dof_to_rep[i] = j
                break
        else:
            dof_to_rep[i] = len(representatives)
            representatives.append(i)
    return np.array(representatives, dtype=int), dof_to_rep

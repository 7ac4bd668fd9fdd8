"""Shift a coefficient vector to zero mean over a selection of entries."""
from typing import Sequence

import numpy as np

from pyfemtransfer.errors import DimensionMismatch, EmptySelection


def subtract_mean_value(vec: np.ndarray, selection: Sequence[bool]) -> np.ndarray:
    """
    In place: subtract the arithmetic mean of ``vec[selection]`` from those
    entries.  Unselected entries are left untouched.
    """
    mask = np.asarray(selection, dtype=bool)
    if mask.shape != (len(vec),):
        raise DimensionMismatch(mask.size, len(vec))
    if not mask.any():
        raise EmptySelection("The selection mask selects no entry.")
    vec[mask] -= vec[mask].mean()
    return vec

"""Eager precondition checks shared by the numerics routines."""
from typing import Optional, Sequence

import numpy as np

from pyfemtransfer.errors import ComponentMismatch, DimensionMismatch


def check_components(dof_handler, function) -> None:
    expected = dof_handler.element.n_components
    if function.n_components != expected:
        raise ComponentMismatch(
            f"Field has {function.n_components} components, the space has {expected}.")


def component_mask_or_all(dof_handler, component_mask: Optional[Sequence[bool]]) -> np.ndarray:
    """Boolean mask over components; ``None`` means every component."""
    n = dof_handler.element.n_components
    if component_mask is None:
        return np.ones(n, dtype=bool)
    mask = np.asarray(component_mask, dtype=bool)
    if mask.shape != (n,):
        raise DimensionMismatch(mask.size, n)
    if not mask.any():
        raise ComponentMismatch("The component mask selects no component.")
    return mask

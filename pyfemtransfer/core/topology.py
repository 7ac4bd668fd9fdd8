import enum
import numpy as np
from dataclasses import dataclass, field
from typing import Tuple, Optional, Union


class _Unassigned(enum.Enum):
    """Boundary indicator of faces that are not on the boundary."""
    UNASSIGNED = 255

    def __repr__(self):
        return "UNASSIGNED"


UNASSIGNED = _Unassigned.UNASSIGNED

BoundaryId = Union[int, _Unassigned]


def is_unassigned(boundary_id) -> bool:
    """True for the sentinel and for its raw integer value 255."""
    if boundary_id is UNASSIGNED:
        return True
    return isinstance(boundary_id, (int, np.integer)) and int(boundary_id) == UNASSIGNED.value


@dataclass(slots=True)
class Face:
    gid: int
    vertices: Tuple[int, ...]     # global vertex ids, in the left cell's local order
    left: int                     # cell that owns the face
    right: Optional[int]          # neighbour across the face, None on the boundary
    lid: int                      # local face index within the left cell
    boundary_id: BoundaryId = UNASSIGNED

    @property
    def at_boundary(self) -> bool:
        return self.right is None


@dataclass(slots=True)
class Cell:
    id: int
    vertices: Tuple[int, ...]     # corner vertex ids, CCW in 2-D
    element_type: str = "quad"
    faces: Tuple[int, ...] = field(default_factory=tuple)
    neighbors: Tuple[Optional[int], ...] = field(default_factory=tuple)

from .topology import Cell, Face, UNASSIGNED
from .mesh import Mesh
from .dofhandler import DofHandler

__all__ = ['Cell', 'Face', 'UNASSIGNED', 'Mesh', 'DofHandler']

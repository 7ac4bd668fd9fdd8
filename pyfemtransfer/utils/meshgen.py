"""pyfemtransfer.utils.meshgen
Structured mesh generators for quick tests.
"""
from typing import Optional, Tuple

import numba
import numpy as np

from pyfemtransfer.core.mesh import Mesh

__all__ = ["structured_interval", "structured_quad", "structured_triangles"]


@numba.jit(nopython=True, cache=True)
def _grid_vertices(Lx: float, Ly: float, nx: int, ny: int):
    n_x = nx + 1
    coords = np.zeros((n_x * (ny + 1), 2), dtype=np.float64)
    for j in range(ny + 1):
        for i in range(n_x):
            coords[j * n_x + i, 0] = Lx * i / nx
            coords[j * n_x + i, 1] = Ly * j / ny
    return coords


@numba.jit(nopython=True, cache=True)
def _quad_connectivity(nx: int, ny: int):
    """Corner vertices of each cell, CCW from the bottom-left corner."""
    n_x = nx + 1
    cells = np.empty((nx * ny, 4), dtype=np.int64)
    for el in range(nx * ny):
        j = el // nx
        i = el % nx
        bl = j * n_x + i
        cells[el, 0] = bl
        cells[el, 1] = bl + 1
        cells[el, 2] = bl + 1 + n_x
        cells[el, 3] = bl + n_x
    return cells


@numba.jit(nopython=True, cache=True)
def _split_quads(quads):
    """Two CCW triangles per quad, cut along the bl-tr diagonal."""
    tris = np.empty((2 * quads.shape[0], 3), dtype=np.int64)
    for q in range(quads.shape[0]):
        bl, br, tr, tl = quads[q, 0], quads[q, 1], quads[q, 2], quads[q, 3]
        tris[2 * q, 0] = bl
        tris[2 * q, 1] = br
        tris[2 * q, 2] = tr
        tris[2 * q + 1, 0] = bl
        tris[2 * q + 1, 1] = tr
        tris[2 * q + 1, 2] = tl
    return tris


def structured_interval(L: float, n: int, offset: float = 0.0) -> Mesh:
    """``n`` equal cells on ``[offset, offset + L]``; boundary ids 0 (left), 1 (right)."""
    if n < 1:
        raise ValueError("'n' must be a positive integer.")
    vertices = offset + np.linspace(0.0, L, n + 1)
    cells = np.column_stack([np.arange(n), np.arange(1, n + 1)])
    mesh = Mesh(vertices[:, None], cells, element_type='interval')
    right = offset + L
    mesh.tag_boundary_faces({1: lambda p: np.isclose(p[0], right)})
    return mesh


def _grid(Lx, Ly, nx, ny, offset):
    if nx < 1 or ny < 1:
        raise ValueError("'nx' and 'ny' must be positive integers.")
    coords = _grid_vertices(float(Lx), float(Ly), int(nx), int(ny))
    if offset is not None:
        coords += np.asarray(offset, dtype=np.float64)
    return coords, _quad_connectivity(int(nx), int(ny))


def structured_quad(Lx: float, Ly: float, *, nx: int, ny: int,
                    offset: Optional[Tuple[float, float]] = None) -> Mesh:
    """``nx * ny`` axis-aligned quadrilaterals covering ``[0, Lx] x [0, Ly]``."""
    coords, quads = _grid(Lx, Ly, nx, ny, offset)
    return Mesh(coords, quads, element_type='quad')


def structured_triangles(Lx: float, Ly: float, *, nx: int, ny: int,
                         offset: Optional[Tuple[float, float]] = None) -> Mesh:
    """Each cell of :func:`structured_quad` split into two triangles."""
    coords, quads = _grid(Lx, Ly, nx, ny, offset)
    return Mesh(coords, _split_quads(quads), element_type='tri')

"""pyfemtransfer.integration.quadrature
Gauss rules for intervals, quads and triangles, plus face rules.
"""
import numpy as np
from functools import lru_cache
from typing import NamedTuple
from numpy.polynomial.legendre import leggauss

from pyfemtransfer.fem.reference import REFERENCE_VERTICES


class QuadratureRule(NamedTuple):
    """Ordered (point, weight) pairs on a reference cell or face.

    ``points`` has shape (n_points, dim); dim is 0 for the point rule used
    on the faces of 1-D cells.
    """
    points: np.ndarray
    weights: np.ndarray

    @property
    def n_points(self) -> int:
        return len(self.weights)

    @property
    def dim(self) -> int:
        return self.points.shape[1]


# -------------------------------------------------------------------------
# 1-D Gauss-Legendre
# -------------------------------------------------------------------------
def gauss_legendre(order: int):
    if order < 1:
        raise ValueError(order)
    return leggauss(order)  # (points, weights)


@lru_cache(maxsize=None)
def interval_rule(order: int) -> QuadratureRule:
    xi, wi = gauss_legendre(order)
    return QuadratureRule(xi[:, None], wi)


@lru_cache(maxsize=None)
def quad_rule(order: int) -> QuadratureRule:
    xi, wi = gauss_legendre(order)
    pts = np.array([[x, y] for x in xi for y in xi])
    wts = np.array([wx * wy for wx in wi for wy in wi])
    return QuadratureRule(pts, wts)


@lru_cache(maxsize=None)
def tri_rule(order: int) -> QuadratureRule:
    """Collapsed (Duffy) Gauss rule on the reference triangle."""
    xi, wi = gauss_legendre(order)
    u = 0.5 * (xi + 1.0)   # [0,1]
    w_u = 0.5 * wi
    pts = []
    wts = []
    for i, ui in enumerate(u):
        for j, vj in enumerate(u):
            pts.append([ui, vj * (1.0 - ui)])
            wts.append(w_u[i] * w_u[j] * (1.0 - ui))
    return QuadratureRule(np.array(pts), np.array(wts))


@lru_cache(maxsize=None)
def point_rule() -> QuadratureRule:
    return QuadratureRule(np.zeros((1, 0)), np.ones(1))


# -------------------------------------------------------------------------
# Public API
# -------------------------------------------------------------------------
def volume(element_type: str, order: int = 2) -> QuadratureRule:
    """Cell rule with ``order`` Gauss points per direction."""
    if element_type == 'interval':
        return interval_rule(order)
    if element_type == 'tri':
        return tri_rule(order)
    if element_type == 'quad':
        return quad_rule(order)
    raise KeyError(element_type)


def face(element_type: str, order: int = 2) -> QuadratureRule:
    """Rule on the reference face of a cell type: a point or [-1, 1]."""
    if element_type == 'interval':
        return point_rule()
    if element_type in ('tri', 'quad'):
        return interval_rule(order)
    raise KeyError(element_type)


def face_to_cell(element_type: str, face_vertices, rule: QuadratureRule):
    """
    Map a face rule onto the reference cell.

    Args:
        element_type: cell type.
        face_vertices: local corner indices of the face.
        rule: rule from :func:`face`.

    Returns:
        (points, tangent): reference-cell points of shape (n_points, dim) and
        the reference tangent d xi / d s of the face parametrisation
        (``None`` for point faces).
    """
    corners = REFERENCE_VERTICES[element_type][list(face_vertices)]
    if rule.dim == 0:
        return np.repeat(corners[:1], rule.n_points, axis=0), None
    a, b = corners
    s = rule.points[:, 0]
    pts = a[None, :] + 0.5 * (s + 1.0)[:, None] * (b - a)[None, :]
    return pts, 0.5 * (b - a)

"""pyfemtransfer.fem.transform
Reference -> physical mapping through the corner vertices (P1/Q1 geometry).
"""
import numpy as np

from pyfemtransfer.fem.reference import get_geometry_reference


def _cell_coords(mesh, cell_id):
    return mesh.cell_vertex_coords(cell_id)


def x_mapping(mesh, cell_id, points):
    """Physical coordinates of reference ``points`` (n, dim) -> (n, dim)."""
    geo = get_geometry_reference(mesh.element_type)
    return geo.shape_at(points) @ _cell_coords(mesh, cell_id)


def jacobians(mesh, cell_id, points):
    """J[q, a, b] = d x_a / d xi_b at every reference point."""
    geo = get_geometry_reference(mesh.element_type)
    X = _cell_coords(mesh, cell_id)
    dN = geo.grad_at(points)                       # (n, n_geo, dim)
    return np.einsum('ka,qkb->qab', X, dN)


def jacobian(mesh, cell_id, xi):
    return jacobians(mesh, cell_id, np.atleast_2d(xi))[0]


def det_jacobian(mesh, cell_id, xi):
    return np.linalg.det(jacobian(mesh, cell_id, xi))


def map_grads(grads_ref, J):
    """Push reference gradients (n_q, n_basis, dim) to physical space."""
    invJ = np.linalg.inv(J)                        # (n_q, dim, dim)
    return np.einsum('qib,qba->qia', grads_ref, invJ)


def face_measure(J, tangent):
    """Length element |J t| of a face parametrisation; 1 on point faces."""
    if tangent is None:
        return np.ones(len(J))
    return np.linalg.norm(J @ tangent, axis=1)

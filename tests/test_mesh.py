import numpy as np
import pytest

from pyfemtransfer.core.mesh import Mesh
from pyfemtransfer.core.topology import UNASSIGNED, is_unassigned
from pyfemtransfer.errors import InvalidBoundaryIndicator
from pyfemtransfer.utils.meshgen import structured_interval, structured_quad, structured_triangles


def test_structured_quad_topology(quad_mesh):
    assert quad_mesh.n_vertices == 9
    assert quad_mesh.n_active_cells == 4
    assert len(quad_mesh.faces_list) == 12
    assert len(list(quad_mesh.boundary_faces())) == 8
    assert np.isclose(quad_mesh.measures().sum(), 1.0)


def test_structured_triangles_are_ccw(tri_mesh):
    assert tri_mesh.n_active_cells == 8
    for cell in tri_mesh.active_cells():
        a, b, c = tri_mesh.cell_vertex_coords(cell.id)
        assert (b[0] - a[0]) * (c[1] - a[1]) - (b[1] - a[1]) * (c[0] - a[0]) > 0
    assert len(list(tri_mesh.boundary_faces())) == 8
    assert np.isclose(tri_mesh.measures().sum(), 1.0)


def test_interior_faces_are_unassigned(quad_mesh):
    for face in quad_mesh.faces_list:
        if face.at_boundary:
            assert face.boundary_id == 0
        else:
            assert face.boundary_id is UNASSIGNED
            assert face.right is not None


def test_neighbors(quad_mesh):
    cell = quad_mesh.cells_list[0]
    assert set(n for n in cell.neighbors if n is not None) == {1, 2}


def test_interval_boundary_ids(line_mesh):
    assert line_mesh.spatial_dim == 1
    assert line_mesh.boundary_ids() == [0, 1]
    by_id = {f.boundary_id: line_mesh.face_midpoint(f)[0] for f in line_mesh.boundary_faces()}
    assert by_id == {0: 0.0, 1: 4.0}


def test_offset_interval():
    mesh = structured_interval(2.0, 2, offset=-1.0)
    assert np.allclose(mesh.vertices[:, 0], [-1.0, 0.0, 1.0])
    assert mesh.boundary_ids() == [0, 1]


def test_tag_boundary_faces(quad_mesh):
    quad_mesh.tag_boundary_faces({1: lambda p: np.isclose(p[0], 0.0),
                                  2: lambda p: np.isclose(p[1], 1.0)})
    assert quad_mesh.boundary_ids() == [0, 1, 2]
    left = [f for f in quad_mesh.boundary_faces() if f.boundary_id == 1]
    assert len(left) == 2


@pytest.mark.parametrize("bad", [UNASSIGNED, 255])
def test_tag_with_unassigned_rejected(quad_mesh, bad):
    with pytest.raises(InvalidBoundaryIndicator):
        quad_mesh.tag_boundary_faces({bad: lambda p: True})


def test_is_unassigned():
    assert is_unassigned(UNASSIGNED)
    assert is_unassigned(255)
    assert is_unassigned(np.uint8(255))
    assert not is_unassigned(0)
    assert repr(UNASSIGNED) == "UNASSIGNED"


def test_face_shared_by_three_cells_rejected():
    vertices = np.array([[0.0], [1.0], [2.0]])
    cells = np.array([[0, 1], [1, 2], [2, 1]])
    with pytest.raises(ValueError):
        Mesh(vertices, cells, element_type='interval')


def test_vertex_dimension_checked():
    with pytest.raises(ValueError):
        Mesh(np.zeros((4, 3)), np.array([[0, 1, 2, 3]]), element_type='quad')


def test_offset_quad():
    mesh = structured_quad(1.0, 2.0, nx=1, ny=2, offset=(1.0, -1.0))
    assert np.allclose(mesh.vertices.min(axis=0), [1.0, -1.0])
    assert np.allclose(mesh.vertices.max(axis=0), [2.0, 1.0])
    tri = structured_triangles(1.0, 2.0, nx=1, ny=2)
    assert tri.n_active_cells == 4

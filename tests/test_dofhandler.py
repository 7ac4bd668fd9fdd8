import numpy as np
import pytest

from pyfemtransfer.core.dofhandler import DofHandler
from pyfemtransfer.core.topology import UNASSIGNED
from pyfemtransfer.errors import InvalidBoundaryIndicator
from pyfemtransfer.fem.element import FiniteElement


class TestDofHandlerCG:
    """Continuous numbering on the 2x2 unit-square meshes."""

    @pytest.mark.parametrize("element_type, degree, n_comp, expected", [
        ('quad', 1, 1, 9),
        ('quad', 2, 1, 25),
        ('quad', 1, 2, 18),
        ('tri', 1, 1, 9),
        ('tri', 2, 1, 25),
    ])
    def test_dof_counts(self, quad_mesh, tri_mesh, element_type, degree, n_comp, expected):
        mesh = quad_mesh if element_type == 'quad' else tri_mesh
        dh = DofHandler(mesh, FiniteElement(element_type, degree, n_comp))
        assert dh.n_dofs == expected
        assert dh.n_components == n_comp
        assert dh.get_dof_coords().shape == (expected, 2)

    def test_shared_dofs_have_one_location(self, quad_mesh):
        dh = DofHandler(quad_mesh, FiniteElement('quad', 2))
        coords = dh.get_dof_coords()
        for cid in dh.active_cells():
            assert np.allclose(coords[dh.get_elemental_dofs(cid)], dh.element_dof_coords(cid))

    def test_components_numbered_separately(self, quad_mesh):
        dh = DofHandler(quad_mesh, FiniteElement('quad', 1, n_components=2))
        comps = dh.get_dof_components()
        assert np.count_nonzero(comps == 0) == 9
        assert np.count_nonzero(comps == 1) == 9
        gdofs = dh.get_elemental_dofs(0)
        assert np.all(comps[gdofs[:4]] == 0) and np.all(comps[gdofs[4:]] == 1)

    def test_element_must_match_mesh(self, quad_mesh):
        with pytest.raises(ValueError):
            DofHandler(quad_mesh, FiniteElement('tri', 1))

    def test_boundary_index_map(self, q1_space):
        mapping, n_boundary = q1_space.map_dof_to_boundary_indices([0])
        assert n_boundary == 8
        centre = np.flatnonzero(np.all(np.isclose(q1_space.get_dof_coords(), 0.5), axis=1))
        assert mapping[centre[0]] == -1
        on = np.flatnonzero(mapping >= 0)
        # compact indices follow the global order
        assert list(mapping[on]) == list(range(n_boundary))

    def test_boundary_index_map_for_one_side(self, quad_mesh):
        quad_mesh.tag_boundary_faces({3: lambda p: np.isclose(p[1], 0.0)})
        dh = DofHandler(quad_mesh, FiniteElement('quad', 2))
        mapping, n_boundary = dh.map_dof_to_boundary_indices([3])
        assert n_boundary == 5
        assert np.allclose(dh.get_dof_coords()[mapping >= 0][:, 1], 0.0)

    def test_unassigned_rejected(self, q1_space):
        with pytest.raises(InvalidBoundaryIndicator):
            q1_space.map_dof_to_boundary_indices([UNASSIGNED])
        with pytest.raises(InvalidBoundaryIndicator):
            list(q1_space.boundary_faces([255]))

    def test_face_dofs(self, q1_space):
        for face in q1_space.boundary_faces():
            pts = q1_space.face_dof_coords(face)
            assert pts.shape == (2, 2)
            assert np.allclose(q1_space.get_dof_coords()[q1_space.face_dofs(face)], pts)

    def test_sparsity_hints(self, q1_space, line_mesh):
        # the centre vertex touches all four cells
        assert q1_space.max_couplings_between_dofs() == 9
        assert q1_space.max_couplings_between_boundary_dofs() == 4
        dh = DofHandler(line_mesh, FiniteElement('interval', 1))
        assert dh.max_couplings_between_dofs() == 3
        assert dh.max_couplings_between_boundary_dofs() == 1

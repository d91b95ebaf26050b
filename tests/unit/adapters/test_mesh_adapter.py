"""
Unit tests for the trimesh adapter.
"""

import numpy as np
import pytest

from treegrowth import Tree, TreePolicy
from treegrowth.adapters.mesh_adapter import export_tree_mesh, to_trimesh, tree_to_trimesh
from treegrowth.ops.mesh.synthesis import VERTEX_STRIDE, leaf_quad_vertices


@pytest.fixture
def grown_tree():
    tree = Tree(TreePolicy.from_params(10.0, 3, 45.0, 0.7, 0.7), seed=3)
    tree.generate()
    tree.update_growth(100.0)
    return tree


class TestToTrimesh:
    """Tests for buffer conversion."""

    def test_empty_buffer_gives_empty_mesh(self):
        mesh = to_trimesh(np.zeros(0, dtype=np.float32))
        assert len(mesh.faces) == 0

    def test_faces_are_consecutive_triples(self):
        rows = leaf_quad_vertices(np.zeros(3), np.array([0.0, 0.0, 1.0]), 0.3)
        mesh = to_trimesh(rows.ravel())
        assert len(mesh.vertices) == 12
        assert len(mesh.faces) == 4
        np.testing.assert_array_equal(mesh.faces[0], [0, 1, 2])
        np.testing.assert_allclose(mesh.vertices, rows[:, 0:3])


class TestTreeToTrimesh:
    """Tests for whole-tree conversion."""

    def test_counts_match_buffers(self, grown_tree):
        mesh = tree_to_trimesh(grown_tree)
        expected_vertices = grown_tree.get_branch_vertex_count() + grown_tree.get_leaf_vertex_count()
        assert len(mesh.vertices) == expected_vertices
        assert len(mesh.faces) == expected_vertices // 3

    def test_ungrown_tree_is_empty(self):
        tree = Tree(TreePolicy.from_params(10.0, 2, 45.0, 0.7, 0.7), seed=3)
        tree.generate()
        assert len(tree_to_trimesh(tree).faces) == 0


class TestExport:
    """Tests for writing mesh files."""

    def test_export_stl(self, grown_tree, tmp_path):
        path = export_tree_mesh(grown_tree, tmp_path / "out" / "tree.stl")
        assert path.exists()
        assert path.stat().st_size > 0

    def test_unsupported_format(self, grown_tree, tmp_path):
        with pytest.raises(ValueError, match="Unsupported mesh format"):
            export_tree_mesh(grown_tree, tmp_path / "tree.xyz")

    def test_vertex_stride(self):
        assert VERTEX_STRIDE == 9

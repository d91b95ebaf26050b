"""
Integration tests for the generate / update_growth / read-buffers loop.
"""

import numpy as np
import pytest

from treegrowth import Tree, TreePolicy, GrowthPolicy
from treegrowth.adapters.networkx_adapter import validate_tree


def _policy(max_generations=3, seed=None):
    return TreePolicy.from_params(
        max_growth_time=10.0,
        max_generations=max_generations,
        branch_angle_variance=45.0,
        length_reduction_factor=0.7,
        radius_reduction_factor=0.7,
        seed=seed,
    )


def _snapshot(tree):
    return [(b.start.tolist(), b.end.tolist(), b.radius) for b in tree.branches]


class TestTrunkOnly:
    """A tree with no generations beyond the trunk."""

    def test_single_branch_no_leaves(self):
        tree = Tree(_policy(max_generations=0), seed=1)
        tree.generate()
        assert tree.get_branch_count() == 1
        assert tree.get_leaf_count() == 0

    def test_zero_step_produces_nothing(self):
        tree = Tree(_policy(max_generations=0), seed=1)
        tree.generate()
        tree.update_growth(0.0)
        assert tree.branches[0].growth_progress == 0.0
        assert tree.get_branch_vertex_count() == 0
        assert tree.get_leaf_vertex_count() == 0

    def test_half_grown_trunk_reaches_midpoint(self):
        """Trunk duration is 0.4 * 10, so t=2 is half way."""
        tree = Tree(_policy(max_generations=0), seed=1)
        tree.generate()
        tree.update_growth(2.0)
        assert tree.branches[0].growth_progress == pytest.approx(0.5)
        np.testing.assert_allclose(tree.calculate_absolute_branch_end(0), [0.0, 1.5, 0.0], atol=1e-12)
        assert tree.get_branch_vertex_count() == 48


class TestFullGrowth:
    """Trees grown well past max_growth_time."""

    @pytest.fixture
    def tree(self):
        tree = Tree(_policy(), seed=21)
        tree.generate()
        tree.update_growth(100.0)
        return tree

    def test_everything_fully_grown(self, tree):
        assert all(b.growth_progress == 1.0 for b in tree.branches)
        assert all(leaf.growth_progress == 1.0 for leaf in tree.leaves)

    def test_vertex_counts(self, tree):
        assert tree.get_branch_vertex_count() == 48 * tree.get_branch_count()
        assert tree.get_leaf_vertex_count() == 12 * tree.get_leaf_count()

    def test_buffer_layout(self, tree):
        branch = tree.get_branch_vertices()
        leaf = tree.get_leaf_vertices()
        assert branch.dtype == np.float32
        assert branch.size % 9 == 0
        assert leaf.size % 9 == 0
        assert branch.size // 9 == tree.get_branch_vertex_count()
        np.testing.assert_array_equal(branch.reshape(-1, 9)[:, 3], 1.0)

    def test_buffers_are_read_only(self, tree):
        with pytest.raises(ValueError):
            tree.get_branch_vertices()[0] = 5.0

    def test_progress_is_not_clamped(self, tree):
        assert tree.get_growth_progress() == pytest.approx(10.0)

    def test_structure_stays_valid(self, tree):
        assert validate_tree(tree.structure) == []


class TestGrowthOrdering:
    """Visibility follows generation order while the clock advances."""

    def test_children_never_ahead_of_parents(self):
        tree = Tree(_policy(max_generations=4), seed=8)
        tree.generate()
        for _ in range(40):
            tree.update_growth(0.25)
            for branch in tree.branches[1:]:
                parent = tree.branches[branch.parent_index]
                if branch.growth_progress > 0.0:
                    assert parent.growth_progress > 0.6
            assert validate_tree(tree.structure) == []

    def test_vertex_counts_never_shrink(self):
        tree = Tree(_policy(), seed=8)
        tree.generate()
        previous = 0
        for _ in range(30):
            tree.update_growth(0.5)
            count = tree.get_branch_vertex_count() + tree.get_leaf_vertex_count()
            assert count >= previous
            previous = count

    def test_negative_step_rejected(self):
        tree = Tree(_policy(), seed=8)
        tree.generate()
        with pytest.raises(ValueError):
            tree.update_growth(-1.0)


class TestSeeding:
    """Reproducibility of generated trees."""

    def test_same_seed_same_tree(self):
        a = Tree(_policy(), seed=99)
        b = Tree(_policy(), seed=99)
        a.generate()
        b.generate()
        assert _snapshot(a) == _snapshot(b)
        assert a.get_leaf_count() == b.get_leaf_count()

    def test_consecutive_generations_differ(self):
        tree = Tree(_policy(), seed=99)
        tree.generate()
        first = _snapshot(tree)
        tree.generate()
        assert _snapshot(tree) != first

    def test_explicit_seed_reproduces(self):
        tree = Tree(_policy())
        tree.generate(seed=5)
        first = _snapshot(tree)
        tree.generate(seed=5)
        assert _snapshot(tree) == first

    def test_policy_seed_used_when_none_given(self):
        a = Tree(_policy(seed=13))
        b = Tree(_policy(seed=13))
        a.generate()
        b.generate()
        assert _snapshot(a) == _snapshot(b)


class TestRegenerate:
    """generate() resets the animation."""

    def test_clock_and_buffers_reset(self):
        tree = Tree(_policy(), seed=4)
        tree.generate()
        tree.update_growth(100.0)
        assert tree.get_branch_vertex_count() > 0

        tree.generate()
        assert tree.current_growth_time == 0.0
        assert tree.get_branch_vertex_count() == 0
        assert tree.get_leaf_vertex_count() == 0
        assert all(b.growth_progress == 0.0 for b in tree.branches)


class TestObserverAndValidation:
    """Observer callbacks and policy checks."""

    def test_events_emitted(self):
        events = []
        tree = Tree(_policy(), seed=2, observer=lambda name, payload: events.append((name, payload)))
        tree.generate()
        tree.update_growth(1.0)

        assert [name for name, _ in events] == ["tree_generated", "growth_updated"]
        assert events[0][1]["branch_count"] == tree.get_branch_count()
        assert events[1][1]["time"] == pytest.approx(1.0)
        assert events[1][1]["branch_vertex_count"] == tree.get_branch_vertex_count()

    def test_invalid_policy_rejected(self):
        with pytest.raises(ValueError, match="Invalid tree policy"):
            Tree(TreePolicy(growth=GrowthPolicy(max_growth_time=0.0)))

    def test_absolute_position_of_invalid_index_is_origin(self):
        tree = Tree(_policy(), seed=2)
        tree.generate()
        np.testing.assert_array_equal(tree.calculate_absolute_branch_start(10_000), [0.0, 0.0, 0.0])
        np.testing.assert_array_equal(tree.calculate_absolute_branch_end(-1), [0.0, 0.0, 0.0])


def _topology(tree):
    """Structure dictionary with the time-dependent progress fields removed."""
    d = tree.structure.to_dict()
    for entry in d["branches"] + d["leaves"]:
        entry.pop("growth_progress")
    return d


class TestUpdateInvariance:
    """update_growth changes progress and buffers only."""

    def test_zero_step_resynthesizes_identical_buffers(self):
        tree = Tree(_policy(), seed=17)
        tree.generate()
        tree.update_growth(3.7)
        branch = tree.get_branch_vertices().copy()
        leaf = tree.get_leaf_vertices().copy()
        progress = [b.growth_progress for b in tree.branches]

        tree.update_growth(0.0)

        np.testing.assert_array_equal(tree.get_branch_vertices(), branch)
        np.testing.assert_array_equal(tree.get_leaf_vertices(), leaf)
        assert [b.growth_progress for b in tree.branches] == progress
        assert tree.current_growth_time == pytest.approx(3.7)

    def test_topology_unchanged_while_growing(self):
        tree = Tree(_policy(), seed=17)
        tree.generate()
        before = _topology(tree)
        for dt in (0.0, 0.5, 1.25, 2.0, 0.0, 10.0, 100.0):
            tree.update_growth(dt)
            assert _topology(tree) == before

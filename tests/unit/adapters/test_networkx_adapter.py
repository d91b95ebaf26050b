"""
Unit tests for the NetworkX adapter and tree validation.
"""

import networkx as nx

from treegrowth.adapters.networkx_adapter import to_networkx_graph, validate_tree
from treegrowth.core.random_source import RandomSource
from treegrowth.core.structure import Branch, Leaf, TreeStructure
from treegrowth.ops.branching import BranchGenerator
from treegrowth.policies import BranchingPolicy


def _generated(seed=4, max_generations=3):
    s = TreeStructure()
    BranchGenerator(BranchingPolicy(max_generations=max_generations)).generate_tree(s, RandomSource(seed))
    return s


class TestToNetworkxGraph:
    """Tests for graph conversion."""

    def test_one_node_per_branch(self):
        s = _generated()
        G = to_networkx_graph(s)
        assert G.number_of_nodes() == len(s.branches)
        assert G.number_of_edges() == len(s.branches) - 1
        assert nx.is_arborescence(G)

    def test_node_attributes(self):
        s = _generated()
        G = to_networkx_graph(s)
        assert G.nodes[0]["generation"] == 0
        assert G.nodes[0]["leaf_count"] == 0
        assert sum(d["leaf_count"] for _, d in G.nodes(data=True)) == len(s.leaves)

    def test_edges_point_to_children(self):
        s = _generated()
        G = to_networkx_graph(s)
        assert sorted(G.successors(0)) == sorted(s.branches[0].children)


class TestValidateTree:
    """Tests for invariant checking."""

    def test_generated_tree_is_valid(self):
        assert validate_tree(_generated(seed=12, max_generations=4)) == []

    def test_empty_structure_is_valid(self):
        assert validate_tree(TreeStructure()) == []

    def test_generation_gap_detected(self):
        s = _generated()
        s.branches[1].generation = 3
        errors = validate_tree(s)
        assert any("generation 3" in e for e in errors)

    def test_leaf_on_shallow_branch_detected(self):
        s = _generated()
        s.add_leaf(Leaf((0, 3, 0), (0, 1, 0), 0.3, parent_branch_index=0))
        errors = validate_tree(s)
        assert any("attached to generation 0" in e for e in errors)

    def test_progress_out_of_range_detected(self):
        s = _generated()
        s.branches[0].growth_progress = 1.5
        assert any("growth_progress" in e for e in validate_tree(s))

    def test_forward_parent_reference_detected(self):
        s = TreeStructure()
        s.add_branch(Branch((0, 0, 0), (0, 3, 0), 0.2, 0))
        s.branches.append(Branch((0, 3, 0), (0, 4, 0), 0.1, 1, parent_index=5))
        assert any("not an earlier branch" in e for e in validate_tree(s))

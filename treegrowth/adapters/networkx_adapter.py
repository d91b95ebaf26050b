"""
NetworkX adapter for tree structures.

Converts the branch hierarchy into a directed graph (parent -> child) and
uses it to check the structural invariants of a generated tree.
"""

from typing import List
import networkx as nx

from ..core.structure import TreeStructure


def to_networkx_graph(structure: TreeStructure) -> nx.DiGraph:
    """
    Convert a tree structure to a directed NetworkX graph.

    Parameters
    ----------
    structure : TreeStructure
        Tree to convert

    Returns
    -------
    nx.DiGraph
        One node per branch index, carrying generation, radius, length,
        growth_progress and leaf_count attributes. Edges run from parent
        to child.
    """
    G = nx.DiGraph()

    leaf_counts = {}
    for leaf in structure.leaves:
        leaf_counts[leaf.parent_branch_index] = leaf_counts.get(leaf.parent_branch_index, 0) + 1

    for i, branch in enumerate(structure.branches):
        G.add_node(
            i,
            generation=branch.generation,
            radius=branch.radius,
            length=branch.length,
            growth_progress=branch.growth_progress,
            leaf_count=leaf_counts.get(i, 0),
        )

    for i, branch in enumerate(structure.branches):
        if branch.parent_index != -1:
            G.add_edge(branch.parent_index, i)

    return G


def validate_tree(structure: TreeStructure) -> List[str]:
    """
    Check the structural invariants of a tree.

    Parameters
    ----------
    structure : TreeStructure
        Tree to check

    Returns
    -------
    List[str]
        Violations found (empty if the tree is valid)
    """
    errors = []
    branches = structure.branches
    if not branches:
        return errors

    if branches[0].parent_index != -1:
        errors.append("Branch 0 is not the root")

    for i, branch in enumerate(branches):
        if (branch.generation == 0) != (branch.parent_index == -1):
            errors.append(
                f"Branch {i}: generation {branch.generation} with parent_index {branch.parent_index}"
            )
        if branch.parent_index != -1:
            if not 0 <= branch.parent_index < i:
                errors.append(f"Branch {i}: parent_index {branch.parent_index} is not an earlier branch")
                continue
            parent = branches[branch.parent_index]
            if branch.generation != parent.generation + 1:
                errors.append(
                    f"Branch {i}: generation {branch.generation} under parent "
                    f"generation {parent.generation}"
                )
            if i not in parent.children:
                errors.append(f"Branch {i}: missing from children of {branch.parent_index}")
        for child in branch.children:
            if not structure.is_valid_branch_index(child) or branches[child].parent_index != i:
                errors.append(f"Branch {i}: child {child} does not point back")
        if not 0.0 <= branch.growth_progress <= 1.0:
            errors.append(f"Branch {i}: growth_progress {branch.growth_progress} out of [0, 1]")

    G = to_networkx_graph(structure)
    if not nx.is_arborescence(G):
        errors.append("Branch graph is not a tree rooted at branch 0")

    for j, leaf in enumerate(structure.leaves):
        parent = structure.get_branch(leaf.parent_branch_index)
        if parent is None:
            errors.append(f"Leaf {j}: parent_branch_index {leaf.parent_branch_index} out of range")
        elif parent.generation < 2:
            errors.append(f"Leaf {j}: attached to generation {parent.generation} branch")
        if not 0.0 <= leaf.growth_progress <= 1.0:
            errors.append(f"Leaf {j}: growth_progress {leaf.growth_progress} out of [0, 1]")

    return errors


__all__ = ["to_networkx_graph", "validate_tree"]

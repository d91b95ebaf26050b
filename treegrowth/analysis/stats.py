"""
Structure and visibility statistics for generated trees.
"""

from dataclasses import dataclass, field, asdict
from typing import Dict, List, Tuple, Any

from ..core.structure import TreeStructure


@dataclass
class TreeSummary:
    """Counts describing a tree at one point of its growth."""

    branch_count: int
    leaf_count: int
    visible_branches: int
    visible_leaves: int
    branches_by_generation: Dict[int, int] = field(default_factory=dict)
    visibility_by_generation: Dict[int, Tuple[int, int]] = field(default_factory=dict)
    sample_branches: List[Dict[str, Any]] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def generation_counts(structure: TreeStructure) -> Dict[int, int]:
    """Number of branches per generation, ordered by generation."""
    counts: Dict[int, int] = {}
    for branch in structure.branches:
        counts[branch.generation] = counts.get(branch.generation, 0) + 1
    return dict(sorted(counts.items()))


def visibility_by_generation(structure: TreeStructure) -> Dict[int, Tuple[int, int]]:
    """
    Visible and total branch counts per generation.

    Returns
    -------
    dict
        generation -> (visible, total), where visible means growth_progress > 0
    """
    table: Dict[int, List[int]] = {}
    for branch in structure.branches:
        entry = table.setdefault(branch.generation, [0, 0])
        entry[1] += 1
        if branch.growth_progress > 0.0:
            entry[0] += 1
    return {gen: (v, t) for gen, (v, t) in sorted(table.items())}


def summarize_tree(structure: TreeStructure, sample_size: int = 10) -> TreeSummary:
    """
    Build a TreeSummary for the current state of a structure.

    Parameters
    ----------
    structure : TreeStructure
        Tree to summarize
    sample_size : int
        Number of leading branches to include in sample_branches

    Returns
    -------
    TreeSummary
    """
    samples = [
        {
            "index": i,
            "generation": b.generation,
            "length": b.length,
            "radius": b.radius,
            "growth_progress": b.growth_progress,
        }
        for i, b in enumerate(structure.branches[:sample_size])
    ]
    return TreeSummary(
        branch_count=len(structure.branches),
        leaf_count=len(structure.leaves),
        visible_branches=sum(1 for b in structure.branches if b.growth_progress > 0.0),
        visible_leaves=sum(1 for leaf in structure.leaves if leaf.growth_progress > 0.0),
        branches_by_generation=generation_counts(structure),
        visibility_by_generation=visibility_by_generation(structure),
        sample_branches=samples,
    )


__all__ = [
    "TreeSummary",
    "generation_counts",
    "visibility_by_generation",
    "summarize_tree",
]

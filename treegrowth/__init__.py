"""
Tree Growth - Procedural Tree Generation Library

This package generates randomized branching trees and animates their
growth over time, producing renderable vertex buffers every frame.

Main Entry Points:
    - Tree: generate(), update_growth(dt) and the vertex buffer getters
    - get_preset(): named shape/timing profiles
    - BranchGenerator, GrowthScheduler, MeshSynthesizer: the individual stages

Example:
    >>> from treegrowth import Tree, get_preset
    >>>
    >>> tree = Tree(get_preset("default"), seed=42)
    >>> tree.generate()
    >>> for _ in range(600):
    ...     tree.update_growth(1.0 / 60.0)
    >>> vertices = tree.get_branch_vertices()
"""

from .tree import Tree
from .policies import (
    BranchingPolicy,
    FoliagePolicy,
    GrowthPolicy,
    MeshSynthesisPolicy,
    TreePolicy,
    get_preset,
    list_presets,
)
from .core import Branch, Leaf, TreeStructure, RandomSource
from .ops import BranchGenerator, GrowthScheduler, MeshSynthesizer, VERTEX_STRIDE

__version__ = "0.1.0"

__all__ = [
    "Tree",
    # Policies
    "BranchingPolicy",
    "FoliagePolicy",
    "GrowthPolicy",
    "MeshSynthesisPolicy",
    "TreePolicy",
    "get_preset",
    "list_presets",
    # Core types
    "Branch",
    "Leaf",
    "TreeStructure",
    "RandomSource",
    # Operations
    "BranchGenerator",
    "GrowthScheduler",
    "MeshSynthesizer",
    "VERTEX_STRIDE",
]

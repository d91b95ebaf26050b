"""Core data structures for procedural trees."""

from .structure import Branch, Leaf, TreeStructure
from .random_source import RandomSource, SeedStream

__all__ = [
    "Branch",
    "Leaf",
    "TreeStructure",
    "RandomSource",
    "SeedStream",
]

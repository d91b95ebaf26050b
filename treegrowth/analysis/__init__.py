"""Analysis helpers for generated trees."""

from .stats import (
    TreeSummary,
    generation_counts,
    visibility_by_generation,
    summarize_tree,
)

__all__ = [
    "TreeSummary",
    "generation_counts",
    "visibility_by_generation",
    "summarize_tree",
]

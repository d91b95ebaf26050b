"""Adapters converting trees to third-party representations."""

from .networkx_adapter import to_networkx_graph, validate_tree
from .mesh_adapter import to_trimesh, tree_to_trimesh, export_tree_mesh

__all__ = [
    "to_networkx_graph",
    "validate_tree",
    "to_trimesh",
    "tree_to_trimesh",
    "export_tree_mesh",
]

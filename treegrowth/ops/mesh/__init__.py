"""
Mesh-level operations for procedural trees.

This module converts tree structures into flat vertex buffers.
"""

from .synthesis import (
    VERTEX_STRIDE,
    MeshBuffers,
    MeshSynthesizer,
    branch_frame,
    tapered_cylinder_vertices,
    leaf_quad_vertices,
)

__all__ = [
    "VERTEX_STRIDE",
    "MeshBuffers",
    "MeshSynthesizer",
    "branch_frame",
    "tapered_cylinder_vertices",
    "leaf_quad_vertices",
]

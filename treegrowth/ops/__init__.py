"""
Operations for generating, growing and meshing trees.
"""

from .branching import BranchGenerator, spherical_direction
from .growth import GrowthScheduler, clamp01
from .mesh import MeshSynthesizer, MeshBuffers, VERTEX_STRIDE

__all__ = [
    "BranchGenerator",
    "spherical_direction",
    "GrowthScheduler",
    "clamp01",
    "MeshSynthesizer",
    "MeshBuffers",
    "VERTEX_STRIDE",
]

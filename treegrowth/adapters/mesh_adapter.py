"""
Trimesh adapter for tree vertex buffers.

Converts the flat 9-float vertex buffers produced by mesh synthesis into
trimesh objects, so a growth frame can be inspected or written to disk.
"""

from pathlib import Path
from typing import Union, TYPE_CHECKING
import logging
import numpy as np
import trimesh

from ..ops.mesh.synthesis import VERTEX_STRIDE

if TYPE_CHECKING:
    from ..tree import Tree

logger = logging.getLogger(__name__)

SUPPORTED_FORMATS = ("obj", "ply", "stl", "glb")


def to_trimesh(vertices: np.ndarray) -> trimesh.Trimesh:
    """
    Convert a flat vertex buffer to a trimesh.

    Parameters
    ----------
    vertices : np.ndarray
        Flat buffer with 9 floats per vertex (x, y, z, w, u, v, nx, ny, nz)

    Returns
    -------
    trimesh.Trimesh
        Mesh with one face per consecutive vertex triple, vertex normals
        and UV texture visuals. Vertices are not merged.
    """
    rows = np.asarray(vertices, dtype=np.float64).reshape(-1, VERTEX_STRIDE)
    if len(rows) == 0:
        return trimesh.Trimesh()

    faces = np.arange(len(rows)).reshape(-1, 3)
    return trimesh.Trimesh(
        vertices=rows[:, 0:3],
        faces=faces,
        vertex_normals=rows[:, 6:9],
        visual=trimesh.visual.TextureVisuals(uv=rows[:, 4:6]),
        process=False,
    )


def tree_to_trimesh(tree: "Tree") -> trimesh.Trimesh:
    """Branch and leaf geometry of the current frame as one mesh."""
    # Both buffers share the layout, so join them before building faces
    return to_trimesh(np.concatenate([tree.get_branch_vertices(), tree.get_leaf_vertices()]))


def export_tree_mesh(tree: "Tree", path: Union[str, Path]) -> Path:
    """
    Write the current frame of a tree to a mesh file.

    Parameters
    ----------
    tree : Tree
        Tree whose current buffers are exported
    path : str or Path
        Output file; the suffix selects the format

    Returns
    -------
    Path
        Path that was written

    Raises
    ------
    ValueError
        If the suffix is not a supported format
    """
    path = Path(path)
    file_type = path.suffix.lstrip(".").lower()
    if file_type not in SUPPORTED_FORMATS:
        raise ValueError(
            f"Unsupported mesh format '{path.suffix}'. Use one of: {', '.join(SUPPORTED_FORMATS)}"
        )

    mesh = tree_to_trimesh(tree)
    path.parent.mkdir(parents=True, exist_ok=True)
    mesh.export(str(path), file_type=file_type)
    logger.info(f"Exported {len(mesh.faces)} faces to {path}")
    return path


__all__ = ["to_trimesh", "tree_to_trimesh", "export_tree_mesh", "SUPPORTED_FORMATS"]

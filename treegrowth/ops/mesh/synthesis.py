"""
Mesh synthesis from tree structures.

This module converts the visible part of a tree (elements with
growth_progress > 0) into flat triangle vertex buffers ready for upload
to a renderer.

VERTEX LAYOUT
-------------
Every vertex is 9 floats: x, y, z, w (=1), u, v, nx, ny, nz.
Triangles are emitted as independent vertex triples (no index buffer).
"""

from dataclasses import dataclass, field
from typing import Optional, Tuple
import logging
import numpy as np

from ...core.structure import TreeStructure
from ...policies import MeshSynthesisPolicy

logger = logging.getLogger(__name__)

VERTEX_STRIDE = 9

WORLD_UP = np.array([0.0, 1.0, 0.0])
WORLD_X = np.array([1.0, 0.0, 0.0])

_EPS = 1e-9
# Above this |cos| the branch is treated as vertical when building its frame
_PARALLEL_THRESHOLD = 0.9
_HORIZONTAL_MASK = np.array([1.0, 0.0, 1.0])

_QUAD_UV = np.array([[0.0, 0.0], [1.0, 0.0], [1.0, 1.0], [0.0, 1.0]])
_FRONT_ORDER = [0, 1, 2, 0, 2, 3]
_BACK_ORDER = [0, 2, 1, 0, 3, 2]


def _empty_buffer() -> np.ndarray:
    return np.zeros(0, dtype=np.float32)


def _normalize(v: np.ndarray) -> np.ndarray:
    n = np.linalg.norm(v)
    if n < _EPS:
        return v
    return v / n


def branch_frame(start: np.ndarray, end: np.ndarray) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
    """
    Orthonormal frame along a branch axis.

    Parameters
    ----------
    start, end : np.ndarray
        Axis endpoints (shape (3,))

    Returns
    -------
    direction, right, up : np.ndarray
        Unit vectors. direction points from start to end.
    """
    direction = end - start
    length = np.linalg.norm(direction)
    direction = WORLD_UP.copy() if length < _EPS else direction / length

    up = WORLD_UP
    if abs(np.dot(direction, up)) > _PARALLEL_THRESHOLD:
        up = WORLD_X

    right = _normalize(np.cross(direction, up))
    up = _normalize(np.cross(right, direction))
    return direction, right, up


def tapered_cylinder_vertices(
    start: np.ndarray,
    end: np.ndarray,
    start_radius: float,
    end_radius: float,
    segments: int = 8,
) -> np.ndarray:
    """
    Open tapered cylinder between two points.

    Each of the segments contributes two triangles (p1, p2, p3) and
    (p2, p4, p3), where p1/p2 lie on the base ring and p3/p4 on the tip
    ring. Normals are the radial direction with the vertical component
    dropped, which is a lighting approximation rather than the true
    surface normal.

    Parameters
    ----------
    start, end : np.ndarray
        Axis endpoints (shape (3,))
    start_radius, end_radius : float
        Ring radii at the base and tip
    segments : int
        Number of sides around the circumference

    Returns
    -------
    np.ndarray
        Vertex rows of shape (segments * 6, 9)
    """
    _, right, up = branch_frame(start, end)

    angles = 2.0 * np.pi * np.arange(segments + 1) / segments
    offsets = np.outer(np.cos(angles), right) + np.outer(np.sin(angles), up)

    base_ring = start + offsets * start_radius
    tip_ring = end + offsets * end_radius

    radial = offsets * _HORIZONTAL_MASK
    radial_len = np.linalg.norm(radial, axis=1, keepdims=True)
    normals = np.where(radial_len > 1e-6, radial / np.maximum(radial_len, _EPS), offsets)

    u = np.arange(segments + 1) / segments
    i = np.arange(segments)
    j = i + 1

    rows = np.empty((segments, 6, VERTEX_STRIDE))
    rows[:, :, 0:3] = np.stack(
        [base_ring[i], base_ring[j], tip_ring[i], base_ring[j], tip_ring[j], tip_ring[i]], axis=1
    )
    rows[:, :, 3] = 1.0
    rows[:, :, 4] = np.stack([u[i], u[j], u[i], u[j], u[j], u[i]], axis=1)
    rows[:, :, 5] = np.array([0.0, 0.0, 1.0, 0.0, 1.0, 1.0])
    rows[:, :, 6:9] = np.stack(
        [normals[i], normals[j], normals[i], normals[j], normals[j], normals[i]], axis=1
    )
    return rows.reshape(-1, VERTEX_STRIDE)


def leaf_quad_vertices(position: np.ndarray, normal: np.ndarray, size: float) -> np.ndarray:
    """
    Double-sided square billboard centered on position.

    The front face uses normal with counter-clockwise winding, the back
    face repeats the corners with reversed winding and -normal.

    Parameters
    ----------
    position : np.ndarray
        Quad center (shape (3,))
    normal : np.ndarray
        Unit facing direction (shape (3,))
    size : float
        Edge length

    Returns
    -------
    np.ndarray
        Vertex rows of shape (12, 9)
    """
    right = np.cross(normal, WORLD_UP)
    if np.linalg.norm(right) < 0.01:
        right = WORLD_X.copy()
    else:
        right = _normalize(right)
    up = _normalize(np.cross(right, normal))

    half_right = right * size * 0.5
    half_up = up * size * 0.5
    corners = np.array([
        position - half_right - half_up,
        position + half_right - half_up,
        position + half_right + half_up,
        position - half_right + half_up,
    ])

    rows = np.empty((12, VERTEX_STRIDE))
    order = _FRONT_ORDER + _BACK_ORDER
    rows[:, 0:3] = corners[order]
    rows[:, 3] = 1.0
    rows[:, 4:6] = _QUAD_UV[order]
    rows[:6, 6:9] = normal
    rows[6:, 6:9] = -normal
    return rows


@dataclass
class MeshBuffers:
    """Branch and leaf vertex buffers from one synthesis pass."""

    branch_vertices: np.ndarray = field(default_factory=_empty_buffer)
    leaf_vertices: np.ndarray = field(default_factory=_empty_buffer)

    @property
    def branch_vertex_count(self) -> int:
        return len(self.branch_vertices) // VERTEX_STRIDE

    @property
    def leaf_vertex_count(self) -> int:
        return len(self.leaf_vertices) // VERTEX_STRIDE


class MeshSynthesizer:
    """
    Builds vertex buffers for the visible part of a tree.

    Branches grow from a socket at their parent's current tip, so
    absolute positions are resolved through the parent chain on every
    pass. Nothing is cached between passes.

    Parameters
    ----------
    policy : MeshSynthesisPolicy, optional
        Ring resolution, taper ratio and minimum leaf size
    """

    def __init__(self, policy: Optional[MeshSynthesisPolicy] = None):
        self.policy = policy or MeshSynthesisPolicy()

    def calculate_absolute_branch_start(self, structure: TreeStructure, index: int) -> np.ndarray:
        """
        Current world-space start of a branch.

        The trunk starts at its stored start; every other branch starts
        at the current end of its parent. Invalid indices give the origin.
        """
        branch = structure.get_branch(index)
        if branch is None:
            return np.zeros(3)

        ancestors = []
        cursor = branch
        while cursor.parent_index != -1:
            parent = structure.get_branch(cursor.parent_index)
            if parent is None or len(ancestors) >= len(structure):
                position = np.zeros(3)
                break
            ancestors.append(parent)
            cursor = parent
        else:
            position = cursor.start.copy()

        for ancestor in reversed(ancestors):
            position = position + (ancestor.end - ancestor.start) * ancestor.growth_progress
        return position

    def calculate_absolute_branch_end(self, structure: TreeStructure, index: int) -> np.ndarray:
        """
        Current world-space end of a branch.

        Linear interpolation from the absolute start by growth_progress
        along the fully-grown branch vector. Invalid indices give the origin.
        """
        branch = structure.get_branch(index)
        if branch is None:
            return np.zeros(3)
        start = self.calculate_absolute_branch_start(structure, index)
        return start + (branch.end - branch.start) * branch.growth_progress

    def resolve_absolute_positions(self, structure: TreeStructure) -> Tuple[np.ndarray, np.ndarray]:
        """
        Absolute start and end of every branch for the current progress.

        Parents precede children in index order, so each branch reuses its
        parent's resolved end.

        Returns
        -------
        starts, ends : np.ndarray
            Arrays of shape (num_branches, 3)
        """
        n = len(structure)
        starts = np.zeros((n, 3))
        ends = np.zeros((n, 3))
        for i, branch in enumerate(structure.branches):
            if branch.parent_index == -1:
                starts[i] = branch.start
            elif 0 <= branch.parent_index < i:
                starts[i] = ends[branch.parent_index]
            else:
                starts[i] = self.calculate_absolute_branch_start(structure, i)
            ends[i] = starts[i] + (branch.end - branch.start) * branch.growth_progress
        return starts, ends

    def build_branch_vertices(
        self,
        structure: TreeStructure,
        positions: Optional[Tuple[np.ndarray, np.ndarray]] = None,
    ) -> np.ndarray:
        """Flat float32 buffer of tapered cylinders for visible branches."""
        starts, ends = positions if positions is not None else self.resolve_absolute_positions(structure)
        chunks = []
        for i, branch in enumerate(structure.branches):
            if branch.growth_progress <= 0.0:
                continue
            chunks.append(tapered_cylinder_vertices(
                starts[i],
                ends[i],
                branch.radius,
                branch.radius * self.policy.taper_ratio,
                self.policy.segments_per_circle,
            ))
        if not chunks:
            return _empty_buffer()
        return np.concatenate(chunks).astype(np.float32).ravel()

    def build_leaf_vertices(
        self,
        structure: TreeStructure,
        positions: Optional[Tuple[np.ndarray, np.ndarray]] = None,
    ) -> np.ndarray:
        """
        Flat float32 buffer of billboards for visible leaves.

        A leaf keeps its offset from the parent's fully-grown end and rides
        on the parent's current end.
        """
        _, ends = positions if positions is not None else self.resolve_absolute_positions(structure)
        min_size = self.policy.leaf_min_size
        chunks = []
        for leaf in structure.leaves:
            if leaf.growth_progress <= 0.0:
                continue
            parent = structure.get_branch(leaf.parent_branch_index)
            if parent is None:
                continue
            position = ends[leaf.parent_branch_index] + (leaf.position - parent.end)
            size = min_size + (leaf.size - min_size) * leaf.growth_progress
            chunks.append(leaf_quad_vertices(position, leaf.normal, size))
        if not chunks:
            return _empty_buffer()
        return np.concatenate(chunks).astype(np.float32).ravel()

    def synthesize(self, structure: TreeStructure) -> MeshBuffers:
        """
        Rebuild both vertex buffers from scratch.

        Parameters
        ----------
        structure : TreeStructure
            Tree to convert

        Returns
        -------
        MeshBuffers
        """
        positions = self.resolve_absolute_positions(structure)
        buffers = MeshBuffers(
            branch_vertices=self.build_branch_vertices(structure, positions),
            leaf_vertices=self.build_leaf_vertices(structure, positions),
        )
        logger.debug(
            f"Synthesized {buffers.branch_vertex_count} branch and "
            f"{buffers.leaf_vertex_count} leaf vertices"
        )
        return buffers


__all__ = [
    "VERTEX_STRIDE",
    "MeshBuffers",
    "MeshSynthesizer",
    "branch_frame",
    "tapered_cylinder_vertices",
    "leaf_quad_vertices",
]

"""
Core tree data structures.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Any
import numpy as np


def _as_point(value) -> np.ndarray:
    return np.asarray(value, dtype=float).reshape(3)


@dataclass
class Branch:
    """
    Branch in a tree.

    Positions describe the fully-grown extent. The animated extent is
    derived from growth_progress at synthesis time.
    """

    start: np.ndarray
    end: np.ndarray
    radius: float
    generation: int
    parent_index: int = -1  # -1 for the trunk
    growth_progress: float = 0.0
    children: List[int] = field(default_factory=list)

    def __post_init__(self):
        self.start = _as_point(self.start)
        self.end = _as_point(self.end)

    @property
    def length(self) -> float:
        """Fully-grown length."""
        return float(np.linalg.norm(self.end - self.start))

    @property
    def is_trunk(self) -> bool:
        return self.parent_index == -1

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            "start": self.start.tolist(),
            "end": self.end.tolist(),
            "radius": self.radius,
            "generation": self.generation,
            "parent_index": self.parent_index,
            "growth_progress": self.growth_progress,
            "children": list(self.children),
        }

    @classmethod
    def from_dict(cls, d: dict) -> "Branch":
        """Create from dictionary."""
        return cls(
            start=d["start"],
            end=d["end"],
            radius=d["radius"],
            generation=d["generation"],
            parent_index=d.get("parent_index", -1),
            growth_progress=d.get("growth_progress", 0.0),
            children=list(d.get("children", [])),
        )


@dataclass
class Leaf:
    """
    Leaf attached near the tip of a branch.

    position is in world space for the fully-grown tree, i.e. the parent
    branch end plus the cluster offset. Mesh synthesis re-applies that
    offset to the current end of the parent.
    """

    position: np.ndarray
    normal: np.ndarray
    size: float
    parent_branch_index: int
    spawn_delay: float = 0.0
    growth_progress: float = 0.0

    def __post_init__(self):
        self.position = _as_point(self.position)
        self.normal = _as_point(self.normal)

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            "position": self.position.tolist(),
            "normal": self.normal.tolist(),
            "size": self.size,
            "parent_branch_index": self.parent_branch_index,
            "spawn_delay": self.spawn_delay,
            "growth_progress": self.growth_progress,
        }

    @classmethod
    def from_dict(cls, d: dict) -> "Leaf":
        """Create from dictionary."""
        return cls(
            position=d["position"],
            normal=d["normal"],
            size=d["size"],
            parent_branch_index=d["parent_branch_index"],
            spawn_delay=d.get("spawn_delay", 0.0),
            growth_progress=d.get("growth_progress", 0.0),
        )


class TreeStructure:
    """
    Owned collection of branches and leaves.

    Branches live in a flat list and refer to each other by index. A
    branch's index is assigned when it is appended and never changes, and
    parents are always appended before their children.
    """

    def __init__(self):
        self.branches: List[Branch] = []
        self.leaves: List[Leaf] = []

    def __len__(self) -> int:
        return len(self.branches)

    def clear(self) -> None:
        """Drop every branch and leaf."""
        self.branches.clear()
        self.leaves.clear()

    def is_valid_branch_index(self, index: int) -> bool:
        return 0 <= index < len(self.branches)

    def get_branch(self, index: int) -> Optional[Branch]:
        """Get branch by index, or None if out of range."""
        if not self.is_valid_branch_index(index):
            return None
        return self.branches[index]

    def add_branch(self, branch: Branch) -> int:
        """
        Append a branch and link it to its parent.

        Parameters
        ----------
        branch : Branch
            Branch to append. Its parent_index must already exist, or be -1.

        Returns
        -------
        int
            Index of the new branch
        """
        index = len(self.branches)
        self.branches.append(branch)
        if branch.parent_index >= 0:
            parent = self.get_branch(branch.parent_index)
            if parent is not None:
                parent.children.append(index)
        return index

    def add_leaf(self, leaf: Leaf) -> int:
        """Append a leaf and return its index."""
        self.leaves.append(leaf)
        return len(self.leaves) - 1

    def leaves_of(self, branch_index: int) -> List[Leaf]:
        return [leaf for leaf in self.leaves if leaf.parent_branch_index == branch_index]

    @property
    def max_generation(self) -> int:
        if not self.branches:
            return -1
        return max(b.generation for b in self.branches)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "schema_version": "1.0",
            "branches": [b.to_dict() for b in self.branches],
            "leaves": [leaf.to_dict() for leaf in self.leaves],
        }

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "TreeStructure":
        """Create from dictionary."""
        structure = cls()
        structure.branches = [Branch.from_dict(b) for b in d.get("branches", [])]
        structure.leaves = [Leaf.from_dict(leaf) for leaf in d.get("leaves", [])]
        return structure


__all__ = ["Branch", "Leaf", "TreeStructure"]

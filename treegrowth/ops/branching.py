"""
Recursive branch and leaf generation.

The trunk is created first, then every branch spawns a fan of children
evenly spaced in azimuth with bounded jitter, shrinking by fixed
per-generation factors. Branches deep enough in the hierarchy carry a
cluster of leaves around their tip.
"""

from typing import Optional, Sequence
import math
import logging
import numpy as np

from ..core.structure import Branch, Leaf, TreeStructure
from ..core.random_source import RandomSource
from ..policies import BranchingPolicy, FoliagePolicy

logger = logging.getLogger(__name__)

WORLD_UP = np.array([0.0, 1.0, 0.0])


def spherical_direction(azimuth: float, elevation: float) -> np.ndarray:
    """
    Unit direction from azimuth around +Y and elevation above the XZ plane.

    Parameters
    ----------
    azimuth : float
        Angle around the vertical axis (radians), 0 points along +Z
    elevation : float
        Angle above the horizontal plane (radians)

    Returns
    -------
    np.ndarray
        Normalized direction, shape (3,)
    """
    direction = np.array([
        math.sin(azimuth) * math.cos(elevation),
        math.sin(elevation),
        math.cos(azimuth) * math.cos(elevation),
    ])
    return direction / np.linalg.norm(direction)


class BranchGenerator:
    """
    Populates a TreeStructure from a single trunk definition.

    Parameters
    ----------
    branching : BranchingPolicy
        Depth, fan-out, angles and reduction factors
    foliage : FoliagePolicy
        Leaf cluster counts, sizes and spawn delays
    """

    def __init__(
        self,
        branching: Optional[BranchingPolicy] = None,
        foliage: Optional[FoliagePolicy] = None,
    ):
        self.branching = branching or BranchingPolicy()
        self.foliage = foliage or FoliagePolicy()

    def generate_tree(self, structure: TreeStructure, rng: RandomSource) -> int:
        """
        Clear the structure and grow a full tree from the trunk.

        Parameters
        ----------
        structure : TreeStructure
            Structure to rebuild in place
        rng : RandomSource
            Random stream shared by the whole generation pass

        Returns
        -------
        int
            Index of the trunk (always 0)
        """
        structure.clear()
        return self.generate_branch(
            structure,
            rng,
            parent_index=-1,
            start=np.zeros(3),
            direction=WORLD_UP,
            length=self.branching.trunk_length,
            radius=self.branching.trunk_radius,
            generation=0,
        )

    def generate_branch(
        self,
        structure: TreeStructure,
        rng: RandomSource,
        parent_index: int,
        start: Sequence[float],
        direction: Sequence[float],
        length: float,
        radius: float,
        generation: int,
    ) -> int:
        """
        Create one branch, then recurse into its children and leaves.

        Parameters
        ----------
        structure : TreeStructure
            Structure receiving the new elements
        rng : RandomSource
            Random stream shared by the whole generation pass
        parent_index : int
            Index of the parent branch, -1 for the trunk
        start : array-like
            Fully-grown start point
        direction : array-like
            Unit growth direction
        length : float
            Branch length
        radius : float
            Base radius
        generation : int
            Depth in the hierarchy, 0 for the trunk

        Returns
        -------
        int
            Index of the created branch
        """
        start = np.asarray(start, dtype=float)
        end = start + np.asarray(direction, dtype=float) * length
        branch_index = structure.add_branch(Branch(
            start=start,
            end=end,
            radius=radius,
            generation=generation,
            parent_index=parent_index,
        ))

        if generation < self.branching.max_generations:
            self._generate_children(structure, rng, branch_index, end, length, radius, generation)

        if generation >= self.foliage.min_leaf_generation:
            self._generate_leaves(structure, rng, branch_index, end)

        return branch_index

    def _generate_children(
        self,
        structure: TreeStructure,
        rng: RandomSource,
        branch_index: int,
        end: np.ndarray,
        length: float,
        radius: float,
        generation: int,
    ) -> None:
        policy = self.branching
        num_children = rng.integer(policy.min_children, policy.max_children)
        variance = math.radians(policy.branch_angle_variance)

        child_length = length * policy.length_reduction_factor
        child_radius = radius * policy.radius_reduction_factor

        for i in range(num_children):
            base_azimuth = 2.0 * math.pi * i / num_children
            azimuth = base_azimuth + rng.signed_unit() * variance
            elevation_deg = policy.elevation_base_deg + rng.signed_unit() * policy.elevation_variance_deg
            child_direction = spherical_direction(azimuth, math.radians(elevation_deg))

            self.generate_branch(
                structure,
                rng,
                parent_index=branch_index,
                start=end,
                direction=child_direction,
                length=child_length,
                radius=child_radius,
                generation=generation + 1,
            )

    def _generate_leaves(
        self,
        structure: TreeStructure,
        rng: RandomSource,
        branch_index: int,
        end: np.ndarray,
    ) -> None:
        policy = self.foliage
        spread_x, spread_y, spread_z = policy.cluster_spread
        num_leaves = rng.integer(policy.min_leaves, policy.max_leaves)

        for _ in range(num_leaves):
            offset = np.array([
                rng.signed_unit() * spread_x,
                rng.signed_unit() * spread_y,
                rng.signed_unit() * spread_z,
            ])
            # Mostly upward facing: y in [0.8, 1.0]
            facing = np.array([
                rng.signed_unit() * 0.5,
                0.8 + abs(rng.signed_unit()) * 0.2,
                rng.signed_unit() * 0.5,
            ])
            structure.add_leaf(Leaf(
                position=end + offset,
                normal=facing / np.linalg.norm(facing),
                size=rng.uniform(policy.leaf_size_min, policy.leaf_size_max),
                parent_branch_index=branch_index,
                spawn_delay=rng.uniform(policy.spawn_delay_min, policy.spawn_delay_max),
            ))


__all__ = ["BranchGenerator", "spherical_direction", "WORLD_UP"]

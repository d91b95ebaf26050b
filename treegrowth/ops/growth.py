"""
Time-driven growth scheduling for branches and leaves.

A single growth clock drives every element. Each generation is scheduled
a fixed delay after the previous one, a branch only starts once its parent
is more than 60% grown, and leaves bud once their branch is 40% grown.
Progress is recomputed from the clock on every tick rather than
integrated, so it never depends on how the clock was advanced.
"""

from typing import Optional
import logging

from ..core.structure import Branch, Leaf, TreeStructure
from ..policies import GrowthPolicy
from ..analysis.stats import visibility_by_generation

logger = logging.getLogger(__name__)

# Fractions of max_growth_time
GENERATION_DELAY_FRACTION = 0.15
GROWTH_DURATION_FRACTION = 0.4
LEAF_START_OFFSET_FRACTION = 0.1
LEAF_GROWTH_DURATION_FRACTION = 0.1

# Parent progress a child waits for
BRANCH_PARENT_GATE = 0.6
LEAF_PARENT_GATE = 0.4


def clamp01(value: float) -> float:
    return min(1.0, max(0.0, value))


class GrowthScheduler:
    """
    Advances the growth clock and updates growth_progress in place.

    Parameters
    ----------
    policy : GrowthPolicy
        Clock length and diagnostic interval
    """

    def __init__(self, policy: Optional[GrowthPolicy] = None):
        self.policy = policy or GrowthPolicy()
        self.current_time = 0.0
        self._last_log_time = 0.0

    @property
    def max_growth_time(self) -> float:
        return self.policy.max_growth_time

    @property
    def generation_delay(self) -> float:
        return self.max_growth_time * GENERATION_DELAY_FRACTION

    @property
    def growth_duration(self) -> float:
        return self.max_growth_time * GROWTH_DURATION_FRACTION

    @property
    def leaf_start_offset(self) -> float:
        return self.max_growth_time * LEAF_START_OFFSET_FRACTION

    @property
    def leaf_growth_duration(self) -> float:
        return self.max_growth_time * LEAF_GROWTH_DURATION_FRACTION

    def reset(self) -> None:
        self.current_time = 0.0
        self._last_log_time = 0.0

    def completion(self) -> float:
        """Clock time over max_growth_time. Exceeds 1.0 once the clock passes it."""
        return self.current_time / self.max_growth_time

    def scheduled_start(self, generation: int) -> float:
        return generation * self.generation_delay

    def parent_gate_time(self, parent_generation: int) -> float:
        """Time a parent on its own schedule reaches the branch gate."""
        return BRANCH_PARENT_GATE * self.growth_duration + parent_generation * self.generation_delay

    def leaf_start(self, parent_generation: int, spawn_delay: float) -> float:
        return parent_generation * self.generation_delay + self.leaf_start_offset + spawn_delay

    def advance(self, structure: TreeStructure, delta_time: float) -> None:
        """
        Advance the clock by delta_time and refresh every growth_progress.

        Parameters
        ----------
        structure : TreeStructure
            Tree whose progress fields are updated
        delta_time : float
            Non-negative time step
        """
        if delta_time < 0:
            raise ValueError(f"delta_time must be >= 0, got {delta_time}")
        self.current_time += delta_time
        self.update(structure)
        self._log_progress(structure)

    def update(self, structure: TreeStructure) -> None:
        """Recompute progress for the current clock without advancing it."""
        for branch in structure.branches:
            self._update_branch(structure, branch)
        for leaf in structure.leaves:
            self._update_leaf(structure, leaf)

    def _update_branch(self, structure: TreeStructure, branch: Branch) -> None:
        t = self.current_time
        start_time = self.scheduled_start(branch.generation)
        if not t > start_time:
            return

        if branch.generation == 0:
            branch.growth_progress = clamp01((t - start_time) / self.growth_duration)
            return

        parent = structure.get_branch(branch.parent_index)
        if parent is None:
            return
        if parent.growth_progress > BRANCH_PARENT_GATE:
            actual_start = max(start_time, self.parent_gate_time(parent.generation))
            branch.growth_progress = clamp01((t - actual_start) / self.growth_duration)

    def _update_leaf(self, structure: TreeStructure, leaf: Leaf) -> None:
        parent = structure.get_branch(leaf.parent_branch_index)
        if parent is None or not parent.growth_progress > LEAF_PARENT_GATE:
            return

        t = self.current_time
        start_time = self.leaf_start(parent.generation, leaf.spawn_delay)
        if t > start_time:
            leaf.growth_progress = clamp01((t - start_time) / self.leaf_growth_duration)

    def _log_progress(self, structure: TreeStructure) -> None:
        if self.current_time - self._last_log_time <= self.policy.log_interval:
            return
        self._last_log_time = self.current_time
        if not logger.isEnabledFor(logging.DEBUG):
            return

        logger.debug(f"Growth time: {self.current_time:.2f} / {self.max_growth_time:.2f}")
        for generation, (visible, total) in visibility_by_generation(structure).items():
            logger.debug(f"  Gen {generation}: {visible}/{total} visible")


__all__ = [
    "GrowthScheduler",
    "clamp01",
    "BRANCH_PARENT_GATE",
    "LEAF_PARENT_GATE",
]

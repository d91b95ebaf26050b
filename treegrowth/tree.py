"""
Animated procedural tree.

Tree ties the generator, growth scheduler and mesh synthesizer together
behind the small frame-loop interface a renderer needs:

    >>> from treegrowth import Tree, get_preset
    >>> tree = Tree(get_preset("default"), seed=7)
    >>> tree.generate()
    >>> tree.update_growth(0.016)
    >>> buffer = tree.get_branch_vertices()
"""

from typing import Any, Callable, Dict, List, Optional
import logging
import numpy as np

from .core.structure import Branch, Leaf, TreeStructure
from .core.random_source import RandomSource, SeedStream
from .ops.branching import BranchGenerator
from .ops.growth import GrowthScheduler
from .ops.mesh.synthesis import MeshBuffers, MeshSynthesizer
from .analysis.stats import generation_counts
from .policies import TreePolicy

logger = logging.getLogger(__name__)

Observer = Callable[[str, Dict[str, Any]], None]


def _read_only(buffer: np.ndarray) -> np.ndarray:
    view = buffer.view()
    view.flags.writeable = False
    return view


class Tree:
    """
    Procedurally generated tree with a time-parameterized reveal.

    Parameters
    ----------
    policy : TreePolicy, optional
        Shape, foliage, timing and mesh configuration
    seed : int, optional
        Seed for the stream of trees produced by generate(). Falls back to
        policy.seed; None gives a fresh tree every run.
    observer : callable, optional
        Called as observer(event, payload) after "tree_generated" and
        "growth_updated" events

    Raises
    ------
    ValueError
        If the policy fails validation
    """

    def __init__(
        self,
        policy: Optional[TreePolicy] = None,
        seed: Optional[int] = None,
        observer: Optional[Observer] = None,
    ):
        self.policy = policy or TreePolicy()
        errors = self.policy.validate()
        if errors:
            raise ValueError(f"Invalid tree policy: {'; '.join(errors)}")

        self.structure = TreeStructure()
        self.generator = BranchGenerator(self.policy.branching, self.policy.foliage)
        self.scheduler = GrowthScheduler(self.policy.growth)
        self.synthesizer = MeshSynthesizer(self.policy.mesh)
        self.observer = observer

        self._seeds = SeedStream(seed if seed is not None else self.policy.seed)
        self._buffers = MeshBuffers()

    @property
    def branches(self) -> List[Branch]:
        return self.structure.branches

    @property
    def leaves(self) -> List[Leaf]:
        return self.structure.leaves

    @property
    def current_growth_time(self) -> float:
        return self.scheduler.current_time

    def generate(self, seed: Optional[int] = None) -> None:
        """
        Rebuild the whole tree and reset the growth clock.

        Parameters
        ----------
        seed : int, optional
            Seed for this tree only. Without it the next seed is taken from
            the tree's seed stream, so consecutive calls give different trees.
        """
        rng = RandomSource(seed) if seed is not None else self._seeds.next_source()

        self.scheduler.reset()
        self.generator.generate_tree(self.structure, rng)
        self._buffers = MeshBuffers()

        counts = generation_counts(self.structure)
        logger.info(
            f"Tree generated with {self.get_branch_count()} branches "
            f"and {self.get_leaf_count()} leaves"
        )
        for generation, count in counts.items():
            logger.debug(f"Generation {generation}: {count} branches")
        for i, branch in enumerate(self.structure.branches[:10]):
            logger.debug(
                f"Branch {i} - Gen: {branch.generation}, "
                f"Length: {branch.length:.3f}, Radius: {branch.radius:.3f}"
            )

        self._emit("tree_generated", {
            "branch_count": self.get_branch_count(),
            "leaf_count": self.get_leaf_count(),
            "branches_by_generation": counts,
        })

    def update_growth(self, delta_time: float) -> None:
        """
        Advance the growth clock and rebuild both vertex buffers.

        Parameters
        ----------
        delta_time : float
            Non-negative time step. Zero re-synthesizes the same mesh.
        """
        self.scheduler.advance(self.structure, delta_time)
        self._buffers = self.synthesizer.synthesize(self.structure)

        self._emit("growth_updated", {
            "time": self.scheduler.current_time,
            "progress": self.get_growth_progress(),
            "branch_vertex_count": self._buffers.branch_vertex_count,
            "leaf_vertex_count": self._buffers.leaf_vertex_count,
        })

    def get_branch_vertices(self) -> np.ndarray:
        """Read-only view of the branch vertex buffer (9 floats per vertex)."""
        return _read_only(self._buffers.branch_vertices)

    def get_leaf_vertices(self) -> np.ndarray:
        """Read-only view of the leaf vertex buffer (9 floats per vertex)."""
        return _read_only(self._buffers.leaf_vertices)

    def get_branch_vertex_count(self) -> int:
        return self._buffers.branch_vertex_count

    def get_leaf_vertex_count(self) -> int:
        return self._buffers.leaf_vertex_count

    def get_branch_count(self) -> int:
        return len(self.structure.branches)

    def get_leaf_count(self) -> int:
        return len(self.structure.leaves)

    def get_growth_progress(self) -> float:
        """Clock over max_growth_time, not clamped to 1."""
        return self.scheduler.completion()

    def calculate_absolute_branch_start(self, index: int) -> np.ndarray:
        return self.synthesizer.calculate_absolute_branch_start(self.structure, index)

    def calculate_absolute_branch_end(self, index: int) -> np.ndarray:
        return self.synthesizer.calculate_absolute_branch_end(self.structure, index)

    def _emit(self, event: str, payload: Dict[str, Any]) -> None:
        if self.observer is not None:
            self.observer(event, payload)


__all__ = ["Tree", "Observer"]

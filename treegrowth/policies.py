"""
Policy dataclasses for parameterizing tree generation and growth.

Every component of the library is configured through a policy object.
Policies are plain dataclasses so they can be serialized to JSON, loaded
from config files, and tuned without code changes.

Each policy includes:
- Default values defined here
- JSON schema docstring
- validate() helper returning a list of problems
"""

from dataclasses import dataclass, field, asdict
from pathlib import Path
from typing import Optional, Dict, Any, List, Tuple, Union
import json


def validate_policy(policy: Any, required_fields: Optional[List[str]] = None) -> List[str]:
    """
    Validate a policy object.

    Parameters
    ----------
    policy : Any
        Policy dataclass instance to validate
    required_fields : List[str], optional
        List of field names that must be non-None

    Returns
    -------
    List[str]
        List of validation error messages (empty if valid)
    """
    errors = []

    if required_fields:
        for field_name in required_fields:
            if not hasattr(policy, field_name):
                errors.append(f"Missing required field: {field_name}")
            elif getattr(policy, field_name) is None:
                errors.append(f"Required field is None: {field_name}")

    return errors


def _check_range(errors: List[str], name: str, low: float, high: float) -> None:
    if low > high:
        errors.append(f"{name}: minimum {low} exceeds maximum {high}")


@dataclass
class BranchingPolicy:
    """
    Policy for recursive branch generation.

    Controls tree depth, fan-out and how each generation shrinks
    relative to its parent.

    JSON Schema:
    {
        "max_generations": int,
        "branch_angle_variance": float (degrees),
        "length_reduction_factor": float (0-1),
        "radius_reduction_factor": float (0-1),
        "min_children": int,
        "max_children": int,
        "elevation_base_deg": float (degrees),
        "elevation_variance_deg": float (degrees),
        "trunk_length": float,
        "trunk_radius": float
    }
    """
    max_generations: int = 6
    branch_angle_variance: float = 45.0
    length_reduction_factor: float = 0.7
    radius_reduction_factor: float = 0.7
    min_children: int = 2
    max_children: int = 4
    elevation_base_deg: float = 30.0
    elevation_variance_deg: float = 20.0
    trunk_length: float = 3.0
    trunk_radius: float = 0.2

    def validate(self) -> List[str]:
        errors = validate_policy(self, [
            "max_generations",
            "branch_angle_variance",
            "length_reduction_factor",
            "radius_reduction_factor",
            "min_children",
            "max_children",
            "trunk_length",
            "trunk_radius",
        ])
        if errors:
            return errors
        if self.max_generations < 0:
            errors.append(f"max_generations must be >= 0, got {self.max_generations}")
        if not 0.0 < self.length_reduction_factor < 1.0:
            errors.append(
                f"length_reduction_factor must be in (0, 1), got {self.length_reduction_factor}"
            )
        if not 0.0 < self.radius_reduction_factor < 1.0:
            errors.append(
                f"radius_reduction_factor must be in (0, 1), got {self.radius_reduction_factor}"
            )
        if self.min_children < 1:
            errors.append(f"min_children must be >= 1, got {self.min_children}")
        _check_range(errors, "children", self.min_children, self.max_children)
        if self.trunk_length <= 0:
            errors.append(f"trunk_length must be positive, got {self.trunk_length}")
        if self.trunk_radius <= 0:
            errors.append(f"trunk_radius must be positive, got {self.trunk_radius}")
        return errors

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @staticmethod
    def from_dict(d: Dict[str, Any]) -> "BranchingPolicy":
        return BranchingPolicy(**{k: v for k, v in d.items() if k in BranchingPolicy.__dataclass_fields__})


@dataclass
class FoliagePolicy:
    """
    Policy for leaf clusters placed at branch tips.

    JSON Schema:
    {
        "min_leaf_generation": int,
        "min_leaves": int,
        "max_leaves": int,
        "leaf_size_min": float,
        "leaf_size_max": float,
        "spawn_delay_min": float (time units),
        "spawn_delay_max": float (time units),
        "cluster_spread": [float, float, float]
    }
    """
    min_leaf_generation: int = 2
    min_leaves: int = 6
    max_leaves: int = 14
    leaf_size_min: float = 0.28
    leaf_size_max: float = 0.45
    spawn_delay_min: float = 0.0
    spawn_delay_max: float = 4.0
    # Horizontal spread is wider than vertical
    cluster_spread: Tuple[float, float, float] = (0.4, 0.3, 0.4)

    def validate(self) -> List[str]:
        errors = validate_policy(self, [
            "min_leaf_generation",
            "min_leaves",
            "max_leaves",
            "leaf_size_min",
            "leaf_size_max",
            "spawn_delay_min",
            "spawn_delay_max",
            "cluster_spread",
        ])
        if errors:
            return errors
        if self.min_leaf_generation < 2:
            errors.append(
                f"min_leaf_generation must be >= 2, got {self.min_leaf_generation}"
            )
        if self.min_leaves < 0:
            errors.append(f"min_leaves must be >= 0, got {self.min_leaves}")
        _check_range(errors, "leaves", self.min_leaves, self.max_leaves)
        _check_range(errors, "leaf_size", self.leaf_size_min, self.leaf_size_max)
        _check_range(errors, "spawn_delay", self.spawn_delay_min, self.spawn_delay_max)
        if self.spawn_delay_min < 0:
            errors.append(f"spawn_delay_min must be >= 0, got {self.spawn_delay_min}")
        if len(self.cluster_spread) != 3:
            errors.append(f"cluster_spread must have 3 components, got {len(self.cluster_spread)}")
        return errors

    def to_dict(self) -> Dict[str, Any]:
        d = asdict(self)
        d["cluster_spread"] = list(self.cluster_spread)
        return d

    @staticmethod
    def from_dict(d: Dict[str, Any]) -> "FoliagePolicy":
        kwargs = {k: v for k, v in d.items() if k in FoliagePolicy.__dataclass_fields__}
        if kwargs.get("cluster_spread") is not None:
            kwargs["cluster_spread"] = tuple(float(v) for v in kwargs["cluster_spread"])
        return FoliagePolicy(**kwargs)


@dataclass
class GrowthPolicy:
    """
    Policy for the growth clock.

    JSON Schema:
    {
        "max_growth_time": float (time units),
        "log_interval": float (time units)
    }
    """
    max_growth_time: float = 10.0
    log_interval: float = 2.0

    def validate(self) -> List[str]:
        errors = validate_policy(self, ["max_growth_time", "log_interval"])
        if errors:
            return errors
        if self.max_growth_time <= 0:
            errors.append(f"max_growth_time must be positive, got {self.max_growth_time}")
        if self.log_interval <= 0:
            errors.append(f"log_interval must be positive, got {self.log_interval}")
        return errors

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @staticmethod
    def from_dict(d: Dict[str, Any]) -> "GrowthPolicy":
        return GrowthPolicy(**{k: v for k, v in d.items() if k in GrowthPolicy.__dataclass_fields__})


@dataclass
class MeshSynthesisPolicy:
    """
    Policy for converting the tree into vertex buffers.

    JSON Schema:
    {
        "segments_per_circle": int,
        "taper_ratio": float (0-1),
        "leaf_min_size": float
    }
    """
    segments_per_circle: int = 8
    taper_ratio: float = 0.7
    leaf_min_size: float = 0.05

    def validate(self) -> List[str]:
        errors = validate_policy(self, ["segments_per_circle", "taper_ratio", "leaf_min_size"])
        if errors:
            return errors
        if self.segments_per_circle < 3:
            errors.append(f"segments_per_circle must be >= 3, got {self.segments_per_circle}")
        if not 0.0 < self.taper_ratio <= 1.0:
            errors.append(f"taper_ratio must be in (0, 1], got {self.taper_ratio}")
        if self.leaf_min_size < 0:
            errors.append(f"leaf_min_size must be >= 0, got {self.leaf_min_size}")
        return errors

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @staticmethod
    def from_dict(d: Dict[str, Any]) -> "MeshSynthesisPolicy":
        return MeshSynthesisPolicy(**{k: v for k, v in d.items() if k in MeshSynthesisPolicy.__dataclass_fields__})


@dataclass
class TreePolicy:
    """
    Top-level policy bundling every tree component.

    JSON Schema:
    {
        "branching": BranchingPolicy,
        "foliage": FoliagePolicy,
        "growth": GrowthPolicy,
        "mesh": MeshSynthesisPolicy,
        "seed": int | null
    }
    """
    branching: BranchingPolicy = field(default_factory=BranchingPolicy)
    foliage: FoliagePolicy = field(default_factory=FoliagePolicy)
    growth: GrowthPolicy = field(default_factory=GrowthPolicy)
    mesh: MeshSynthesisPolicy = field(default_factory=MeshSynthesisPolicy)
    seed: Optional[int] = None

    @classmethod
    def from_params(
        cls,
        max_growth_time: float,
        max_generations: int,
        branch_angle_variance: float,
        length_reduction_factor: float,
        radius_reduction_factor: float,
        seed: Optional[int] = None,
    ) -> "TreePolicy":
        """Build a policy from the five core tuning parameters."""
        return cls(
            branching=BranchingPolicy(
                max_generations=max_generations,
                branch_angle_variance=branch_angle_variance,
                length_reduction_factor=length_reduction_factor,
                radius_reduction_factor=radius_reduction_factor,
            ),
            growth=GrowthPolicy(max_growth_time=max_growth_time),
            seed=seed,
        )

    def validate(self) -> List[str]:
        errors = []
        for name in ("branching", "foliage", "growth", "mesh"):
            errors.extend(f"{name}.{e}" for e in getattr(self, name).validate())
        return errors

    def to_dict(self) -> Dict[str, Any]:
        return {
            "branching": self.branching.to_dict(),
            "foliage": self.foliage.to_dict(),
            "growth": self.growth.to_dict(),
            "mesh": self.mesh.to_dict(),
            "seed": self.seed,
        }

    @staticmethod
    def from_dict(d: Dict[str, Any]) -> "TreePolicy":
        return TreePolicy(
            branching=BranchingPolicy.from_dict(d.get("branching", {})),
            foliage=FoliagePolicy.from_dict(d.get("foliage", {})),
            growth=GrowthPolicy.from_dict(d.get("growth", {})),
            mesh=MeshSynthesisPolicy.from_dict(d.get("mesh", {})),
            seed=d.get("seed"),
        )

    def to_json(self, indent: int = 2) -> str:
        return json.dumps(self.to_dict(), indent=indent)

    def to_json_file(self, path: Union[str, Path]) -> Path:
        path = Path(path)
        path.write_text(self.to_json(), encoding="utf-8")
        return path

    @staticmethod
    def from_json_file(path: Union[str, Path]) -> "TreePolicy":
        with open(path, "r", encoding="utf-8") as f:
            return TreePolicy.from_dict(json.load(f))


_PRESETS: Dict[str, Dict[str, Any]] = {
    "default": {
        "branching": {
            "max_generations": 6,
            "branch_angle_variance": 45.0,
            "length_reduction_factor": 0.7,
            "radius_reduction_factor": 0.7,
        },
        "growth": {"max_growth_time": 10.0},
    },
    "slow_growth": {
        "branching": {
            "max_generations": 5,
            "branch_angle_variance": 30.0,
            "length_reduction_factor": 0.8,
            "radius_reduction_factor": 0.75,
        },
        "growth": {"max_growth_time": 100.0, "log_interval": 10.0},
    },
}


def list_presets() -> List[str]:
    """Names accepted by get_preset()."""
    return sorted(_PRESETS)


def get_preset(name: str) -> TreePolicy:
    """
    Get a named tree profile.

    Parameters
    ----------
    name : str
        Preset name (see list_presets())

    Returns
    -------
    TreePolicy
        A fresh policy instance

    Raises
    ------
    ValueError
        If the preset name is unknown
    """
    if name not in _PRESETS:
        raise ValueError(f"Unknown preset '{name}'. Available: {', '.join(list_presets())}")
    return TreePolicy.from_dict(_PRESETS[name])


__all__ = [
    "validate_policy",
    "BranchingPolicy",
    "FoliagePolicy",
    "GrowthPolicy",
    "MeshSynthesisPolicy",
    "TreePolicy",
    "get_preset",
    "list_presets",
]

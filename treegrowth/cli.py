"""
Command-Line Interface

CLI for generating trees, simulating their growth and exporting meshes.
"""

import argparse
import json
import logging
import sys
from typing import Optional

from .tree import Tree
from .policies import TreePolicy, get_preset, list_presets
from .analysis.stats import summarize_tree


def _load_policy(args) -> TreePolicy:
    if args.config:
        return TreePolicy.from_json_file(args.config)
    return get_preset(args.preset)


def _build_tree(args) -> Tree:
    tree = Tree(_load_policy(args), seed=args.seed)
    tree.generate()
    return tree


def _fail(message: str) -> int:
    print(f"Error: {message}", file=sys.stderr)
    return 1


def cmd_simulate(args) -> int:
    if args.step <= 0:
        return _fail(f"--step must be positive, got {args.step}")
    if args.duration < 0:
        return _fail(f"--duration must be >= 0, got {args.duration}")
    try:
        tree = _build_tree(args)
    except ValueError as e:
        return _fail(str(e))
    segments = tree.policy.mesh.segments_per_circle

    print("=== Tree Growth Simulation ===")
    print(f"Total branches: {tree.get_branch_count()}")
    print(f"Total leaves: {tree.get_leaf_count()}")
    print()

    steps = int(args.duration // args.step) + 1
    for _ in range(steps):
        tree.update_growth(args.step)
        branch_vertices = tree.get_branch_vertex_count()
        leaf_vertices = tree.get_leaf_vertex_count()
        print(f"Time: {tree.current_growth_time:.1f} ({tree.get_growth_progress() * 100.0:.1f}% complete)")
        print(f"  Branch vertices: {branch_vertices} ({branch_vertices // (segments * 6)} branches)")
        print(f"  Leaf vertices: {leaf_vertices} ({leaf_vertices // 12} leaves)")
    return 0


def cmd_stats(args) -> int:
    try:
        tree = _build_tree(args)
    except ValueError as e:
        return _fail(str(e))
    if args.time > 0:
        tree.update_growth(args.time)
    summary = summarize_tree(tree.structure)

    if args.json:
        print(json.dumps(summary.to_dict(), indent=2))
        return 0

    print(f"Branches: {summary.branch_count} ({summary.visible_branches} visible)")
    print(f"Leaves: {summary.leaf_count} ({summary.visible_leaves} visible)")
    for generation, (visible, total) in summary.visibility_by_generation.items():
        print(f"  Gen {generation}: {visible}/{total}")
    return 0


def cmd_export(args) -> int:
    from .adapters.mesh_adapter import export_tree_mesh

    if args.time < 0:
        return _fail(f"--time must be >= 0, got {args.time}")
    try:
        tree = _build_tree(args)
        tree.update_growth(args.time)
        path = export_tree_mesh(tree, args.output)
    except ValueError as e:
        return _fail(str(e))
    print(f"Wrote {path}")
    return 0


def cmd_presets(args) -> int:
    for name in list_presets():
        print(name)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="treegrowth",
        description="Procedural tree generation with animated growth",
    )
    parser.add_argument("--verbose", "-v", action="count", default=0, help="Increase log verbosity")

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    def add_tree_args(sub):
        sub.add_argument(
            "--preset", "-p",
            type=str,
            default="default",
            choices=list_presets(),
            help="Tree profile (default: default)",
        )
        sub.add_argument(
            "--config", "-c",
            type=str,
            default=None,
            help="JSON policy file (overrides --preset)",
        )
        sub.add_argument(
            "--seed",
            type=int,
            default=None,
            help="Random seed for reproducibility",
        )

    sim_parser = subparsers.add_parser("simulate", help="Print a growth timeline")
    add_tree_args(sim_parser)
    sim_parser.add_argument("--step", type=float, default=6.0, help="Time step (default: 6.0)")
    sim_parser.add_argument("--duration", type=float, default=120.0, help="Total time (default: 120.0)")

    stats_parser = subparsers.add_parser("stats", help="Summarize the generated structure")
    add_tree_args(stats_parser)
    stats_parser.add_argument("--time", type=float, default=0.0, help="Grow for this long first")
    stats_parser.add_argument("--json", action="store_true", help="Print JSON")

    export_parser = subparsers.add_parser("export", help="Export a growth frame as a mesh")
    add_tree_args(export_parser)
    export_parser.add_argument("--time", "-t", type=float, default=100.0, help="Growth time (default: 100.0)")
    export_parser.add_argument("--output", "-O", type=str, required=True, help="Output mesh path")

    subparsers.add_parser("presets", help="List available presets")

    return parser


def main(argv: Optional[list] = None) -> int:
    """Main entry point for the CLI."""
    parser = build_parser()
    args = parser.parse_args(argv)

    level = logging.WARNING - 10 * min(args.verbose, 2)
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")

    commands = {
        "simulate": cmd_simulate,
        "stats": cmd_stats,
        "export": cmd_export,
        "presets": cmd_presets,
    }
    if args.command not in commands:
        parser.print_help()
        return 1
    return commands[args.command](args)


if __name__ == "__main__":
    sys.exit(main())

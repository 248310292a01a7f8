"""
Command-line interface for the 3D Game of Life.

Usage:
    python -m life3d.main --help
    python -m life3d.main --steps 100 --visualize
    python -m life3d.main --grid-size 30 --birth-rule 5 --save-frames output/
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Optional, Sequence

from .config import Config, MAX_GRID_SIZE, MIN_GRID_SIZE
from .logging_config import setup_logging
from .metrics import compute_all_metrics, generation_delta, print_metrics_summary
from .simulation import DEFAULT_DENSITY, Simulation

logger = logging.getLogger(__name__)


def create_parser() -> argparse.ArgumentParser:
    """Create argument parser with all options."""
    parser = argparse.ArgumentParser(
        description="3D Game of Life on a cubic lattice with 26-cell neighbourhoods",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )

    # Basic options
    parser.add_argument(
        "--steps", type=int, default=100,
        help="Number of generations to simulate"
    )
    parser.add_argument(
        "--seed", type=int, default=None,
        help="Random seed for reproducibility"
    )
    parser.add_argument(
        "--density", type=float, default=DEFAULT_DENSITY,
        help="Initial probability of a cell being alive"
    )
    parser.add_argument(
        "--config", type=str, default=None,
        help="JSON file with configuration values (flags override it)"
    )

    # Lattice and rule options
    parser.add_argument(
        "--grid-size", type=int, default=None, dest="grid_size",
        help="Lattice edge length (default 20)"
    )
    parser.add_argument(
        "--birth-rule", type=int, default=None, dest="birth_rule",
        help="Exact neighbour count for a birth (default 4)"
    )
    parser.add_argument(
        "--survival-min", type=int, default=None, dest="survival_min",
        help="Lowest neighbour count for survival (default 4)"
    )
    parser.add_argument(
        "--survival-max", type=int, default=None, dest="survival_max",
        help="Highest neighbour count for survival (default 5)"
    )
    parser.add_argument(
        "--open-boundaries", action="store_false", default=None, dest="periodic_boundaries",
        help="Clip the lattice at its faces instead of wrapping around"
    )

    # Visualization options
    parser.add_argument(
        "--visualize", action="store_true",
        help="Show live visualization"
    )
    parser.add_argument(
        "--interval", type=int, default=300,
        help="Milliseconds between generations in the live view"
    )
    parser.add_argument(
        "--save-frames", type=str, default=None,
        help="Directory to save frame images"
    )
    parser.add_argument(
        "--save-interval", type=int, default=10,
        help="Save frame every N steps"
    )
    parser.add_argument(
        "--save-animation", type=str, default=None,
        help="Path to save animation (mp4 or gif)"
    )

    # Analysis options
    parser.add_argument(
        "--print-metrics", action="store_true",
        help="Print all metrics at end"
    )
    parser.add_argument(
        "--save-metrics", type=str, default=None,
        help="Save metrics to JSON file"
    )

    # Logging
    parser.add_argument(
        "--log-level", type=str, default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging verbosity"
    )
    parser.add_argument(
        "--log-file", type=str, default=None,
        help="Also write log messages to this file"
    )

    return parser


def load_config(args: argparse.Namespace) -> Config:
    """
    Build config from an optional JSON file and command-line overrides.

    Raises:
        ValueError: If the resulting configuration is invalid
    """
    base = None
    if args.config:
        with open(args.config, encoding="utf-8") as f:
            base = Config.from_dict(json.load(f))

    config = Config.from_args(args, base=base)
    config.validate()
    return config


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Main entry point."""
    parser = create_parser()
    args = parser.parse_args(argv)

    if args.save_interval < 1:
        parser.error("--save-interval must be >= 1")

    try:
        setup_logging(getattr(logging, args.log_level), args.log_file)
        config = load_config(args)
    except (OSError, TypeError, ValueError) as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return 1

    if not MIN_GRID_SIZE <= config.grid_size <= MAX_GRID_SIZE:
        logger.warning(
            "grid_size %d is outside the usual range %d-%d",
            config.grid_size, MIN_GRID_SIZE, MAX_GRID_SIZE,
        )

    print("3D Game of Life")
    print(f"  Grid: {config.grid_size}³ ({config.cell_count} cells)")
    print(f"  Rule: {config.rule_string}")
    print(f"  Boundaries: {'periodic' if config.periodic_boundaries else 'open'}")
    print(f"  Steps: {args.steps}")
    print(f"  Seed: {args.seed if args.seed is not None else 'random'}")
    print()

    sim = Simulation(config, seed=args.seed, density=args.density)
    print(f"Initial live cells: {sim.alive_cells}")

    # Visualization mode
    if args.visualize or args.save_animation:
        from .visualization import Visualizer

        viz = Visualizer(sim, interval_ms=args.interval)
        if args.save_animation:
            viz.save_animation(args.save_animation, steps=args.steps)
        else:
            viz.show_live(steps=args.steps)
        return 0

    # Frame saving callback
    frame_callback = None
    if args.save_frames:
        from .visualization import save_state_images

        output_dir = Path(args.save_frames)
        output_dir.mkdir(parents=True, exist_ok=True)
        save_state_images(sim, str(output_dir))

        def frame_callback(s: Simulation) -> None:
            path = save_state_images(s, str(output_dir))
            logger.info("Saved frame at generation %d to %s", s.generation, path)

    print("Running simulation...")
    previous = sim.grid
    if args.steps > 0:
        sim.run(
            args.steps - 1,
            callback=frame_callback,
            callback_interval=args.save_interval,
            show_progress=True,
        )
        # Keep the second-to-last generation for birth/death counts
        previous = sim.grid
        sim.step()
        if frame_callback is not None and sim.generation % args.save_interval == 0:
            frame_callback(sim)
    print(f"Final live cells after {sim.generation} generations: {sim.alive_cells}")

    if args.print_metrics or args.save_metrics:
        metrics = compute_all_metrics(sim.grid)
        if sim.generation > 0:
            metrics["delta"] = generation_delta(previous, sim.grid)

        if args.print_metrics:
            print_metrics_summary(metrics)

        if args.save_metrics:
            with open(args.save_metrics, "w", encoding="utf-8") as f:
                json.dump(metrics, f, indent=2)
            print(f"Metrics saved to {args.save_metrics}")

    print("Simulation complete!")
    return 0


if __name__ == "__main__":
    sys.exit(main())

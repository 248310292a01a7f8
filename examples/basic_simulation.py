#!/usr/bin/env python3
"""
Basic 3D Game of Life example.

This script demonstrates:
1. Creating a simulation with a custom rule
2. Running it with a progress callback
3. Measuring the population
4. Saving a rendered frame
"""

from life3d import Config
from life3d.metrics import compute_all_metrics, generation_delta, print_metrics_summary
from life3d.simulation import Simulation
from life3d.visualization import save_state_images


def main():
    print("=" * 60)
    print("3D Game of Life")
    print("Basic Simulation Example")
    print("=" * 60)
    print()

    config = Config(
        grid_size=20,             # 8000 cells
        birth_rule=4,             # Dead cell with exactly 4 neighbours is born
        survival_min=4,           # Live cell survives with 4..5 neighbours
        survival_max=5,
        periodic_boundaries=True,
    )

    print("Configuration:")
    print(f"  Grid: {config.grid_size}³")
    print(f"  Rule: {config.rule_string}")
    print()

    sim = Simulation(config, seed=42, density=0.08)
    initial_alive = sim.alive_cells
    print(f"Initial live cells: {initial_alive}")
    print()

    print("Running simulation for 50 generations...")

    def progress_callback(s: Simulation):
        print(f"  Generation {s.generation}: alive={s.alive_cells}")

    sim.run(
        steps=49,
        callback=progress_callback,
        callback_interval=10,
        show_progress=True,
    )
    previous = sim.grid
    sim.step()
    print()

    metrics = compute_all_metrics(sim.grid)
    metrics["delta"] = generation_delta(previous, sim.grid)
    print_metrics_summary(metrics)

    print("=" * 60)
    print("Summary:")
    print("=" * 60)

    final_alive = metrics["population"]["alive"]
    if final_alive == 0:
        print("✗ Population died out")
    elif final_alive > initial_alive:
        print(f"✓ Population grew: {initial_alive} -> {final_alive}")
    else:
        print(f"✓ Population persisted: {initial_alive} -> {final_alive}")

    path = save_state_images(sim, "output")
    print(f"Saved final frame to {path}")

    print()
    print("To visualize, run:")
    print("  python -m life3d.main --visualize --steps 500")
    print()


if __name__ == "__main__":
    main()

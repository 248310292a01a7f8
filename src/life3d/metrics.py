"""
Population metrics for 3D Game of Life grids.

Snapshot statistics of one generation, optionally compared with the previous
one. No cycle or stability detection happens here.
"""

from typing import Optional

import numpy as np

from .grid import live_coordinates, living_cells


def density(grid: np.ndarray) -> float:
    """
    Fraction of live cells.

    Args:
        grid: Cell states

    Returns:
        Live cells divided by total cells (0 for an empty lattice)
    """
    if grid.size == 0:
        return 0.0
    return living_cells(grid) / grid.size


def generation_delta(previous: np.ndarray, current: np.ndarray) -> dict[str, int]:
    """
    Compare two successive generations.

    Args:
        previous: Grid before the step
        current: Grid after the step

    Returns:
        Dictionary with births, deaths and survivors
    """
    prev_alive = previous == 1
    curr_alive = current == 1
    return {
        "births": int(np.sum(curr_alive & ~prev_alive)),
        "deaths": int(np.sum(prev_alive & ~curr_alive)),
        "survivors": int(np.sum(prev_alive & curr_alive)),
    }


def layer_populations(grid: np.ndarray, axis: int = 2) -> list[int]:
    """Live cells in each slice perpendicular to ``axis``."""
    other_axes = tuple(a for a in range(3) if a != axis)
    return [int(n) for n in np.sum(grid, axis=other_axes, dtype=np.int64)]


def bounding_box(grid: np.ndarray) -> Optional[tuple[tuple[int, int, int], tuple[int, int, int]]]:
    """
    Smallest box containing every live cell.

    Returns:
        ((x_min, y_min, z_min), (x_max, y_max, z_max)) inclusive, or None when
        the grid is empty
    """
    coords = live_coordinates(grid)
    if len(coords) == 0:
        return None
    lo = coords.min(axis=0)
    hi = coords.max(axis=0)
    return (
        (int(lo[0]), int(lo[1]), int(lo[2])),
        (int(hi[0]), int(hi[1]), int(hi[2])),
    )


def center_of_mass(grid: np.ndarray) -> Optional[tuple[float, float, float]]:
    """Mean position of live cells (ignores wraparound), None when empty."""
    coords = live_coordinates(grid)
    if len(coords) == 0:
        return None
    mean = coords.mean(axis=0)
    return (float(mean[0]), float(mean[1]), float(mean[2]))


def compute_all_metrics(grid: np.ndarray, previous: Optional[np.ndarray] = None) -> dict:
    """
    Compute all available metrics.

    Args:
        grid: Current generation
        previous: Optional previous generation for birth/death counts

    Returns:
        Dictionary of metrics
    """
    metrics = {
        "population": {
            "alive": living_cells(grid),
            "total": int(grid.size),
            "density": density(grid),
        },
        "layers": {
            "x": layer_populations(grid, axis=0),
            "y": layer_populations(grid, axis=1),
            "z": layer_populations(grid, axis=2),
        },
        "extent": {
            "bounding_box": bounding_box(grid),
            "center_of_mass": center_of_mass(grid),
        },
    }

    if previous is not None:
        metrics["delta"] = generation_delta(previous, grid)

    return metrics


def print_metrics_summary(metrics: dict) -> None:
    """
    Print formatted metrics summary.

    Args:
        metrics: Output from compute_all_metrics
    """
    print("\n=== 3D Life Metrics Summary ===\n")

    population = metrics["population"]
    print("Population:")
    print(f"  Alive: {population['alive']} / {population['total']}")
    print(f"  Density: {population['density']:.4f}")

    if "delta" in metrics:
        delta = metrics["delta"]
        print("\nLast generation:")
        print(f"  Births: {delta['births']}")
        print(f"  Deaths: {delta['deaths']}")
        print(f"  Survivors: {delta['survivors']}")

    extent = metrics["extent"]
    print("\nExtent:")
    if extent["bounding_box"] is None:
        print("  (empty)")
    else:
        lo, hi = extent["bounding_box"]
        print(f"  Bounding box: {lo} - {hi}")
        cx, cy, cz = extent["center_of_mass"]
        print(f"  Center of mass: ({cx:.2f}, {cy:.2f}, {cz:.2f})")

    busiest = int(np.argmax(metrics["layers"]["z"])) if metrics["layers"]["z"] else 0
    print(f"\nBusiest z-layer: {busiest}")

    print()

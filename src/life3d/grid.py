"""
Grid representation and array-level helpers for the 3D Game of Life.

A grid is a cubic numpy array of dtype uint8 indexed ``grid[x, y, z]``.
Every cell holds exactly 0 (dead) or 1 (alive).
"""

from typing import Optional, Union

import numpy as np


CELL_DTYPE = np.uint8

# The 26 offsets of the Moore neighbourhood in 3D
NEIGHBOR_OFFSETS = tuple(
    (dx, dy, dz)
    for dx in (-1, 0, 1)
    for dy in (-1, 0, 1)
    for dz in (-1, 0, 1)
    if not (dx == 0 and dy == 0 and dz == 0)
)

RandomSource = Union[None, int, np.random.Generator]


def make_rng(seed: RandomSource = None) -> np.random.Generator:
    """
    Build a random generator.

    Args:
        seed: Existing generator (returned as is), integer seed, or None for
            fresh OS entropy

    Returns:
        numpy Generator
    """
    if isinstance(seed, np.random.Generator):
        return seed
    return np.random.default_rng(seed)


def empty_grid(size: int) -> np.ndarray:
    """Create a grid of dead cells with shape (size, size, size)."""
    return np.zeros((size, size, size), dtype=CELL_DTYPE)


def random_grid(size: int, density: float, rng: np.random.Generator) -> np.ndarray:
    """
    Create a grid where each cell is alive with probability ``density``.

    One uniform draw per cell. Densities outside [0, 1] need no special
    handling: <= 0 never fires and >= 1 always does.

    Args:
        size: Lattice edge length
        density: Probability of a cell being alive
        rng: Random generator

    Returns:
        New grid
    """
    draws = rng.random((size, size, size))
    return (draws < density).astype(CELL_DTYPE)


def in_bounds(size: int, x: int, y: int, z: int) -> bool:
    return 0 <= x < size and 0 <= y < size and 0 <= z < size


def neighbor_counts(grid: np.ndarray, periodic: bool) -> np.ndarray:
    """
    Count live neighbours of every cell at once.

    With periodic boundaries each axis wraps around (3-torus), so every cell
    sums exactly 26 positions. Small lattices alias: on a size-2 grid the -1
    and +1 offsets land on the same cell and it is counted twice, on a size-1
    grid the cell is its own 26 neighbours.

    With open boundaries positions outside the lattice are skipped.

    Args:
        grid: Cell states [N, N, N]
        periodic: Whether to wrap around the lattice edges

    Returns:
        Neighbour counts [N, N, N] as int
    """
    cells = grid.astype(np.int32)
    counts = np.zeros_like(cells)

    if periodic:
        for dx, dy, dz in NEIGHBOR_OFFSETS:
            # Rolling by -d brings cell (x+d) to position x
            counts += np.roll(cells, shift=(-dx, -dy, -dz), axis=(0, 1, 2))
        return counts

    # Zero padding makes out-of-lattice positions contribute nothing
    padded = np.pad(cells, 1, mode="constant", constant_values=0)
    nx, ny, nz = cells.shape
    for dx, dy, dz in NEIGHBOR_OFFSETS:
        counts += padded[
            1 + dx:1 + dx + nx,
            1 + dy:1 + dy + ny,
            1 + dz:1 + dz + nz,
        ]
    return counts


def living_cells(grid: np.ndarray) -> int:
    """Total number of live cells."""
    return int(np.sum(grid, dtype=np.int64))


def grids_equal(a: np.ndarray, b: np.ndarray) -> bool:
    """True when both grids have the same shape and identical cells."""
    return a.shape == b.shape and bool(np.array_equal(a, b))


def copy_grid(grid: np.ndarray) -> np.ndarray:
    """Deep copy of a grid."""
    return np.array(grid, dtype=CELL_DTYPE, copy=True)


def live_coordinates(grid: np.ndarray, mask: Optional[np.ndarray] = None) -> np.ndarray:
    """
    Coordinates of live cells (or of cells selected by ``mask``).

    Returns:
        Integer array [K, 3] of (x, y, z) rows
    """
    if mask is None:
        mask = grid == 1
    return np.argwhere(mask)

"""
Simulation engine for the 3D Game of Life.

The engine owns a configuration and turns grids into new grids. Every grid
operation is a pure function of its inputs and the configuration in effect at
call time; the engine never keeps references to the grids it sees.
"""

import logging
from dataclasses import replace
from typing import Any, Optional

import numpy as np

from .config import Config
from .grid import (
    CELL_DTYPE,
    NEIGHBOR_OFFSETS,
    RandomSource,
    copy_grid,
    empty_grid,
    grids_equal,
    in_bounds,
    living_cells,
    make_rng,
    neighbor_counts,
    random_grid,
)

logger = logging.getLogger(__name__)


class Engine:
    """
    3D Game of Life rule evaluator.

    Attributes:
        rng: Random generator used by ``create_random_grid``
    """

    def __init__(self, config: Optional[Config] = None, rng: RandomSource = None):
        """
        Initialize engine.

        Args:
            config: Rule and lattice configuration (defaults to ``Config()``)
            rng: numpy Generator or integer seed for reproducible random grids
        """
        self._config = replace(config) if config is not None else Config()
        self.rng = make_rng(rng)

    @property
    def grid_size(self) -> int:
        return self._config.grid_size

    def create_empty_grid(self) -> np.ndarray:
        """Creates a grid of dead cells sized by the current configuration."""
        return empty_grid(self._config.grid_size)

    def create_random_grid(self, density: float, rng: RandomSource = None) -> np.ndarray:
        """
        Creates a random grid with the specified density.

        Args:
            density: Probability of each cell being alive
            rng: Optional generator or seed overriding the engine's own

        Returns:
            New grid
        """
        generator = self.rng if rng is None else make_rng(rng)
        return random_grid(self._config.grid_size, density, generator)

    def count_neighbors(self, grid: np.ndarray, x: int, y: int, z: int) -> int:
        """
        Counts the living neighbours of the cell at (x, y, z).

        The coordinates must be inside the lattice.
        """
        size = self._config.grid_size
        periodic = self._config.periodic_boundaries
        count = 0

        for dx, dy, dz in NEIGHBOR_OFFSETS:
            nx, ny, nz = x + dx, y + dy, z + dz

            if periodic:
                nx = (nx + size) % size
                ny = (ny + size) % size
                nz = (nz + size) % size
            elif not in_bounds(size, nx, ny, nz):
                continue

            count += int(grid[nx, ny, nz])

        return count

    def apply_cell_rule(self, is_alive: bool, neighbor_count: int) -> bool:
        """
        Decides whether a cell is alive in the next generation.

        A live cell survives when its count is inside the survival range; a
        dead cell is born only on an exact birth count.
        """
        config = self._config
        if is_alive:
            return config.survival_min <= neighbor_count <= config.survival_max
        return neighbor_count == config.birth_rule

    def step(self, grid: np.ndarray) -> np.ndarray:
        """
        Advances the grid by one generation.

        All cells update simultaneously from the grid as passed in; the input
        is left unmodified.

        Args:
            grid: Current generation [N, N, N]

        Returns:
            Next generation as a new grid
        """
        config = self._config
        counts = neighbor_counts(grid, config.periodic_boundaries)
        alive = grid == 1

        survives = alive & (counts >= config.survival_min) & (counts <= config.survival_max)
        born = ~alive & (counts == config.birth_rule)

        return (survives | born).astype(CELL_DTYPE)

    def count_living_cells(self, grid: np.ndarray) -> int:
        return living_cells(grid)

    def grids_equal(self, a: np.ndarray, b: np.ndarray) -> bool:
        return grids_equal(a, b)

    def copy_grid(self, grid: np.ndarray) -> np.ndarray:
        return copy_grid(grid)

    def set_cell(self, grid: np.ndarray, x: int, y: int, z: int, value: int) -> None:
        """
        Writes ``value`` at (x, y, z); out-of-range coordinates are ignored.

        Any truthy value stores a live cell (1), anything else a dead one (0).
        """
        if in_bounds(self._config.grid_size, x, y, z):
            grid[x, y, z] = int(bool(value))

    def get_cell(self, grid: np.ndarray, x: int, y: int, z: int) -> int:
        """Reads the cell at (x, y, z), or 0 outside the lattice."""
        if in_bounds(self._config.grid_size, x, y, z):
            return int(grid[x, y, z])
        return 0

    def update_config(self, partial: Optional[dict[str, Any]] = None, **changes: Any) -> None:
        """
        Merges the given fields into the configuration.

        Only later calls see the change; grids already handed out keep their
        dimensions.
        """
        self._config = self._config.merged(partial, **changes)
        logger.debug("Engine configuration updated: %r", self._config)

    def get_config(self) -> Config:
        """Returns an independent copy of the current configuration."""
        return replace(self._config)

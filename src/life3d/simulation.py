"""
Simulation driver for the 3D Game of Life.

Holds the current grid and generation counter on top of a stateless engine,
keeps the presentation animation state in step with it, and can run itself on
a timer.
"""

import logging
import threading
from typing import Any, Callable, Optional

import numpy as np
from tqdm import tqdm

from .animation import CellAnimation
from .config import Config
from .engine import Engine
from .grid import copy_grid, in_bounds, make_rng
from .scheduler import PeriodicStepper

logger = logging.getLogger(__name__)

DEFAULT_DENSITY = 0.08


class Simulation:
    """
    3D Game of Life simulation manager.

    Attributes:
        engine: Rule evaluator
        grid: Current generation
        generation: Number of steps taken since the last reset
        density: Fill probability used when reseeding
        seed: Random seed (None for fresh entropy on every reset)
        animation: Per-cell presentation state matching ``grid``
    """

    def __init__(
        self,
        config: Optional[Config] = None,
        seed: Optional[int] = None,
        density: float = DEFAULT_DENSITY,
        initial_grid: Optional[np.ndarray] = None,
    ):
        """
        Initialize simulation.

        Args:
            config: Simulation configuration
            seed: Random seed for reproducibility
            density: Initial fill probability
            initial_grid: Optional pre-built grid (copied)
        """
        self.seed = seed
        self.density = density
        self.engine = Engine(config, rng=seed)
        self._lock = threading.RLock()
        self._stepper: Optional[PeriodicStepper] = None

        if initial_grid is not None:
            self.grid = copy_grid(initial_grid)
            self.generation = 0
            self.animation = CellAnimation.from_grid(self.grid)
        else:
            self.reset()

    @property
    def config(self) -> Config:
        return self.engine.get_config()

    @property
    def alive_cells(self) -> int:
        return self.engine.count_living_cells(self.grid)

    def step(self) -> None:
        """Advance simulation by one generation."""
        with self._lock:
            new_grid = self.engine.step(self.grid)
            self.animation = self.animation.advance(new_grid)
            self.grid = new_grid
            self.generation += 1

    def run(
        self,
        steps: int,
        callback: Optional[Callable[["Simulation"], None]] = None,
        callback_interval: int = 1,
        show_progress: bool = False,
    ) -> None:
        """
        Run simulation for multiple steps.

        Args:
            steps: Number of steps to run
            callback: Optional function called periodically
            callback_interval: How often to call callback
            show_progress: Whether to show progress bar
        """
        iterator = range(steps)
        if show_progress:
            iterator = tqdm(iterator, desc="Simulating", unit="gen")

        for i in iterator:
            self.step()

            if callback is not None and (i + 1) % callback_interval == 0:
                callback(self)

    def reset(self, randomize: bool = True, seed: Optional[int] = None) -> None:
        """
        Reset simulation to generation 0.

        Args:
            randomize: Seed a random grid at ``density``; otherwise start empty
            seed: New random seed (uses original if not provided)
        """
        with self._lock:
            if seed is not None:
                self.seed = seed
            if self.seed is not None:
                self.engine.rng = make_rng(self.seed)

            if randomize:
                self.grid = self.engine.create_random_grid(self.density)
            else:
                self.grid = self.engine.create_empty_grid()

            self.generation = 0
            self.animation = CellAnimation.from_grid(self.grid)

        logger.info(
            "Reset %d³ grid (%s): %d live cells",
            self.engine.grid_size, "random" if randomize else "empty", self.alive_cells,
        )

    def clear(self) -> None:
        """Reset to an empty grid."""
        self.reset(randomize=False)

    def set_density(self, density: float) -> None:
        """Set the fill probability used by the next reset."""
        self.density = density

    def update_config(self, **changes: Any) -> None:
        """
        Change rules or lattice size.

        A new grid size reseeds the simulation; rule changes apply from the
        next step on the current grid. The grid is reseeded even when
        stopping re-raises an earlier stepping error.
        """
        with self._lock:
            old_size = self.engine.grid_size
            self.engine.update_config(changes)
            resize = self.engine.grid_size != old_size

        if resize:
            try:
                self.stop()
            finally:
                logger.info("Grid resized to %d³, reseeding", self.engine.grid_size)
                self.reset()

    def toggle_cell(self, x: int, y: int, z: int) -> None:
        """Flip one cell; coordinates outside the lattice are ignored."""
        with self._lock:
            if not in_bounds(self.engine.grid_size, x, y, z):
                return
            alive = self.engine.get_cell(self.grid, x, y, z) == 0
            self.engine.set_cell(self.grid, x, y, z, int(alive))
            self.animation.paint(x, y, z, alive)

    @property
    def is_running(self) -> bool:
        return self._stepper is not None and self._stepper.is_running

    def start(self, interval: float = 0.3) -> None:
        """
        Step automatically every ``interval`` seconds in the background.

        Args:
            interval: Seconds between generations

        Raises:
            Exception: The error that stopped a previous run, if any
        """
        if self.is_running:
            self.set_speed(interval)
            return
        if self._stepper is not None:
            # Previous stepper died on a callback error
            self.stop()
        self._stepper = PeriodicStepper(self.step, interval)
        self._stepper.start()
        logger.info("Simulation running (every %.0f ms)", interval * 1000)

    def stop(self) -> None:
        """Pause automatic stepping."""
        stepper, self._stepper = self._stepper, None
        if stepper is not None:
            stepper.stop()
            logger.info("Simulation paused at generation %d", self.generation)

    def set_speed(self, interval: float) -> None:
        """Change the stepping interval, also while running."""
        if self._stepper is not None:
            self._stepper.interval = interval

    def snapshot(self) -> tuple[int, np.ndarray, CellAnimation]:
        """Consistent copy of (generation, grid, animation) for rendering."""
        with self._lock:
            return self.generation, copy_grid(self.grid), self.animation.clone()

    def get_state_dict(self) -> dict:
        """Get serializable state dictionary."""
        with self._lock:
            return {
                "generation": self.generation,
                "seed": self.seed,
                "density": self.density,
                "config": self.engine.get_config().to_dict(),
                "alive_cells": self.alive_cells,
                "grid": self.grid.tolist(),
            }

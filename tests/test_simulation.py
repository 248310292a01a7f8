"""
Tests for the simulation driver.
"""

import time

import numpy as np
import pytest

from life3d.config import Config
from life3d.simulation import Simulation


@pytest.fixture
def sim() -> Simulation:
    return Simulation(Config(grid_size=8), seed=42, density=0.3)


class TestSimulation:
    def test_initial_state(self, sim):
        """New simulation starts at generation 0 with a seeded grid."""
        assert sim.generation == 0
        assert sim.grid.shape == (8, 8, 8)
        assert 0 < sim.alive_cells < 512
        assert np.array_equal(sim.animation.scale > 0, sim.grid == 1)

    def test_reproducibility(self):
        """Same seed produces same grid."""
        a = Simulation(Config(grid_size=8), seed=7, density=0.3)
        b = Simulation(Config(grid_size=8), seed=7, density=0.3)

        assert np.array_equal(a.grid, b.grid)

    def test_initial_grid_is_copied(self):
        grid = np.zeros((5, 5, 5), dtype=np.uint8)
        grid[1, 1, 1] = 1
        sim = Simulation(Config(grid_size=5), initial_grid=grid)

        grid[2, 2, 2] = 1

        assert sim.alive_cells == 1

    def test_step(self, sim):
        """Stepping matches the engine and advances the counter."""
        expected = sim.engine.step(sim.grid)

        sim.step()

        assert sim.generation == 1
        assert np.array_equal(sim.grid, expected)

    def test_run_with_callback(self, sim):
        seen = []

        sim.run(6, callback=lambda s: seen.append(s.generation), callback_interval=2)

        assert sim.generation == 6
        assert seen == [2, 4, 6]

    def test_run_with_progress(self, sim):
        sim.run(2, show_progress=True)

        assert sim.generation == 2

    def test_reset_and_clear(self, sim):
        first = sim.grid.copy()
        sim.run(3)

        sim.reset()
        assert sim.generation == 0
        assert np.array_equal(sim.grid, first)

        sim.clear()
        assert sim.alive_cells == 0
        assert sim.generation == 0

    def test_reset_with_new_seed(self, sim):
        first = sim.grid.copy()

        sim.reset(seed=43)

        assert sim.seed == 43
        assert not np.array_equal(sim.grid, first)

    def test_set_density(self, sim):
        sim.set_density(1.0)
        sim.reset()

        assert sim.alive_cells == 512

    def test_rule_change_keeps_grid(self, sim):
        sim.run(1)
        grid = sim.grid.copy()

        sim.update_config(birth_rule=6)

        assert sim.config.birth_rule == 6
        assert sim.generation == 1
        assert np.array_equal(sim.grid, grid)

    def test_resize_reseeds(self, sim):
        sim.run(2)

        sim.update_config(grid_size=6)

        assert sim.grid.shape == (6, 6, 6)
        assert sim.animation.shape == (6, 6, 6)
        assert sim.generation == 0

    def test_toggle_cell(self):
        sim = Simulation(Config(grid_size=5), seed=1, density=0.0)

        sim.toggle_cell(1, 2, 3)
        assert sim.grid[1, 2, 3] == 1
        assert sim.animation.scale[1, 2, 3] == 1.0

        sim.toggle_cell(1, 2, 3)
        assert sim.grid[1, 2, 3] == 0

        sim.toggle_cell(-1, 9, 0)
        assert sim.alive_cells == 0

    def test_animation_follows_grid(self, sim):
        sim.run(3)

        visible = sim.animation.visible_mask(sim.grid)
        assert np.all(visible[sim.grid == 1])

    def test_snapshot_is_independent(self, sim):
        generation, grid, animation = sim.snapshot()
        grid[:] = 0

        assert generation == 0
        assert sim.alive_cells > 0

    def test_state_dict(self, sim):
        state = sim.get_state_dict()

        assert state["generation"] == 0
        assert state["seed"] == 42
        assert state["config"]["grid_size"] == 8
        assert state["alive_cells"] == sim.alive_cells
        assert np.array_equal(np.array(state["grid"]), sim.grid)

    def test_start_and_stop(self, sim):
        """Background stepping advances generations until stopped."""
        sim.start(interval=0.01)
        assert sim.is_running

        deadline = time.monotonic() + 2.0
        while sim.generation < 3 and time.monotonic() < deadline:
            time.sleep(0.005)
        sim.stop()

        assert sim.generation >= 3
        assert not sim.is_running
        stopped_at = sim.generation
        time.sleep(0.05)
        assert sim.generation == stopped_at

    def test_set_speed_while_running(self, sim):
        sim.start(interval=10.0)
        sim.set_speed(0.01)

        deadline = time.monotonic() + 2.0
        while sim.generation < 2 and time.monotonic() < deadline:
            time.sleep(0.005)
        sim.stop()

        assert sim.generation >= 2

    def test_resize_stops_running(self, sim):
        sim.start(interval=0.01)

        sim.update_config(grid_size=5)

        assert not sim.is_running
        assert sim.grid.shape == (5, 5, 5)

    def test_resize_after_stepping_error(self, sim, monkeypatch):
        """A failed background run still leaves a consistent grid after a resize."""
        def broken_step(grid):
            raise RuntimeError("step failed")

        monkeypatch.setattr(sim.engine, "step", broken_step)
        sim.start(interval=0.01)
        deadline = time.monotonic() + 2.0
        while sim.is_running and time.monotonic() < deadline:
            time.sleep(0.005)

        with pytest.raises(RuntimeError, match="step failed"):
            sim.update_config(grid_size=6)

        assert sim.engine.grid_size == 6
        assert sim.grid.shape == (6, 6, 6)
        assert sim.animation.shape == (6, 6, 6)

        before = int(sim.grid[5, 5, 5])
        sim.toggle_cell(5, 5, 5)
        assert sim.grid[5, 5, 5] == 1 - before

    def test_restart_surfaces_previous_error(self, sim, monkeypatch):
        def broken_step():
            raise RuntimeError("step failed")

        monkeypatch.setattr(sim, "step", broken_step)
        sim.start(interval=0.01)
        deadline = time.monotonic() + 2.0
        while sim.is_running and time.monotonic() < deadline:
            time.sleep(0.005)

        with pytest.raises(RuntimeError, match="step failed"):
            sim.start(interval=0.01)
        assert not sim.is_running

        monkeypatch.undo()
        sim.start(interval=0.01)
        sim.stop()

"""
Tests for matplotlib rendering helpers.
"""

import numpy as np

from life3d.animation import CellAnimation
from life3d.config import Config
from life3d.grid import empty_grid
from life3d.simulation import Simulation
from life3d.visualization import Visualizer, grid_to_points, save_grid_image, save_state_images


class TestGridToPoints:
    def test_positions_centered(self):
        grid = empty_grid(5)
        grid[0, 0, 0] = 1
        grid[4, 4, 4] = 1

        positions, sizes, colors = grid_to_points(grid, marker_size=10.0)

        assert positions.shape == (2, 3)
        assert np.allclose(positions.min(axis=0), -2.0)
        assert np.allclose(positions.max(axis=0), 2.0)
        assert np.allclose(sizes, 10.0)
        assert colors.shape == (2, 3)

    def test_fading_cells_included(self):
        """Dead cells that are still fading out are drawn, smaller."""
        grid = empty_grid(3)
        grid[1, 1, 1] = 1
        anim = CellAnimation.from_grid(grid).advance(empty_grid(3))

        positions, sizes, _ = grid_to_points(empty_grid(3), anim, marker_size=1.0)

        assert len(positions) == 1
        assert 0 < sizes[0] < 1

    def test_empty(self):
        positions, sizes, colors = grid_to_points(empty_grid(3))

        assert len(positions) == 0
        assert len(sizes) == 0


class TestImageExport:
    def test_save_grid_image(self, tmp_path):
        grid = empty_grid(4)
        grid[1, 2, 3] = 1
        path = tmp_path / "grid.png"

        save_grid_image(grid, str(path), title="test")

        assert path.exists()
        assert path.stat().st_size > 0

    def test_save_state_images(self, tmp_path):
        sim = Simulation(Config(grid_size=5), seed=3, density=0.2)
        sim.run(2)

        path = save_state_images(sim, str(tmp_path / "frames"))

        assert path.name == "frame_000002.png"
        assert path.exists()


class TestVisualizer:
    def test_update_steps_simulation(self, tmp_path):
        sim = Simulation(Config(grid_size=5), seed=3, density=0.3)
        viz = Visualizer(sim, interval_ms=50, rotate=False)

        viz._animation_update(0)
        viz.save_frame(str(tmp_path / "frame.png"))

        assert sim.generation == 1
        assert "Generation: 1" in viz.text.get_text()
        assert (tmp_path / "frame.png").exists()
        viz.close()

    def test_save_animation_steps_exactly(self, tmp_path):
        """The initial frame draws generation 0 without stepping."""
        sim = Simulation(Config(grid_size=5), seed=3, density=0.3)
        viz = Visualizer(sim, interval_ms=100, rotate=False)

        viz.save_animation(str(tmp_path / "life.gif"), steps=3)

        assert sim.generation == 3
        assert (tmp_path / "life.gif").exists()
        viz.close()

    def test_init_does_not_step(self):
        sim = Simulation(Config(grid_size=5), seed=3, density=0.3)
        viz = Visualizer(sim, rotate=False)

        viz._animation_init()

        assert sim.generation == 0
        assert "Generation: 0" in viz.text.get_text()
        viz.close()

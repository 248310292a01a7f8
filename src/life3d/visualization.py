"""
Visualization utilities for the 3D Game of Life.

Draws visible cells as a 3D scatter: marker size follows the animated scale,
colour follows cell age.
"""

from pathlib import Path
from typing import Optional

import numpy as np
import matplotlib.pyplot as plt
from matplotlib.animation import FuncAnimation

from .animation import CellAnimation
from .grid import live_coordinates

# Marker area (points²) of a fully grown cell on a 20³ lattice
BASE_MARKER_SIZE = 60.0


def grid_to_points(
    grid: np.ndarray,
    animation: Optional[CellAnimation] = None,
    marker_size: float = BASE_MARKER_SIZE,
) -> tuple[np.ndarray, np.ndarray, np.ndarray]:
    """
    Convert a grid into scatter data.

    Positions are centred on the origin. Without animation state every live
    cell is drawn at full size in the colour of a newborn cell.

    Args:
        grid: Cell states [N, N, N]
        animation: Optional presentation state for fading and ageing
        marker_size: Marker area of a fully grown cell

    Returns:
        (positions [K, 3], sizes [K], colors [K, 3])
    """
    if animation is None:
        animation = CellAnimation.from_grid(grid)

    mask = animation.visible_mask(grid)
    coords = live_coordinates(grid, mask)

    center_offset = -(grid.shape[0] - 1) / 2
    positions = coords.astype(np.float64) + center_offset

    sizes = animation.eased_scale()[mask] * marker_size
    colors = animation.colors()[mask]

    return positions, sizes, colors


def _setup_axes(ax, grid_size: int) -> None:
    half = grid_size / 2
    ax.set_xlim(-half, half)
    ax.set_ylim(-half, half)
    ax.set_zlim(-half, half)
    ax.set_box_aspect((1, 1, 1))
    ax.set_facecolor("black")
    ax.set_axis_off()


def _marker_size_for(grid_size: int) -> float:
    # Keep the lattice roughly the same visual density at any size
    return BASE_MARKER_SIZE * (20.0 / max(grid_size, 1)) ** 2


def save_grid_image(
    grid: np.ndarray,
    path: str,
    animation: Optional[CellAnimation] = None,
    title: Optional[str] = None,
) -> None:
    """
    Render one grid to an image file.

    Args:
        grid: Cell states
        path: Output file path (format from extension)
        animation: Optional presentation state
        title: Optional figure title
    """
    fig = plt.figure(figsize=(6, 6), facecolor="black")
    ax = fig.add_subplot(projection="3d")
    _setup_axes(ax, grid.shape[0])

    positions, sizes, colors = grid_to_points(grid, animation, _marker_size_for(grid.shape[0]))
    if len(positions):
        ax.scatter(positions[:, 0], positions[:, 1], positions[:, 2], s=sizes, c=colors, depthshade=False)

    if title:
        ax.set_title(title, color="white")

    fig.savefig(path, facecolor=fig.get_facecolor())
    plt.close(fig)


def save_state_images(
    simulation: "Simulation",
    output_dir: str,
    prefix: str = "frame",
) -> Path:
    """
    Save the simulation's current generation as a PNG.

    Args:
        simulation: Simulation to render
        output_dir: Output directory
        prefix: Filename prefix

    Returns:
        Path of the written image
    """
    output_path = Path(output_dir)
    output_path.mkdir(parents=True, exist_ok=True)

    generation, grid, animation = simulation.snapshot()
    image_path = output_path / f"{prefix}_{generation:06d}.png"
    save_grid_image(grid, str(image_path), animation, title=f"Generation {generation}")
    return image_path


class Visualizer:
    """
    Real-time visualization manager.

    Provides live display of simulation state using matplotlib.
    """

    def __init__(
        self,
        simulation: "Simulation",  # Forward reference
        interval_ms: int = 300,
        rotate: bool = True,
    ):
        """
        Initialize visualizer.

        Args:
            simulation: Simulation to visualize
            interval_ms: Milliseconds between generations
            rotate: Slowly orbit the camera around the lattice
        """
        self.sim = simulation
        self.interval_ms = interval_ms
        self.rotate = rotate
        self.azimuth = 30.0

        self.fig = plt.figure(figsize=(7, 7), facecolor="black")
        self.ax = self.fig.add_subplot(projection="3d")
        self.scatter = None

        self.text = self.fig.text(
            0.02, 0.98, "",
            fontsize=10,
            verticalalignment="top",
            color="white",
            bbox=dict(boxstyle="round", facecolor="black", alpha=0.5),
        )
        self._draw()

    def _draw(self) -> None:
        """Redraw scatter and counters from simulation state."""
        generation, grid, animation = self.sim.snapshot()
        grid_size = grid.shape[0]

        if self.scatter is not None:
            self.scatter.remove()
            self.scatter = None

        _setup_axes(self.ax, grid_size)
        positions, sizes, colors = grid_to_points(grid, animation, _marker_size_for(grid_size))
        if len(positions):
            self.scatter = self.ax.scatter(
                positions[:, 0], positions[:, 1], positions[:, 2],
                s=sizes, c=colors, depthshade=False,
            )

        if self.rotate:
            self.azimuth = (self.azimuth + 0.5) % 360
            self.ax.view_init(elev=25, azim=self.azimuth)

        config = self.sim.config
        self.text.set_text(
            f"Generation: {generation}\n"
            f"Alive: {int(np.sum(grid))}\n"
            f"Grid: {grid_size}³  Rule: {config.rule_string}"
        )

    def _animation_init(self) -> list:
        """Draw the current generation without stepping."""
        self._draw()
        return [self.text]

    def _animation_update(self, frame: int) -> list:
        """Update function for animation."""
        self.sim.step()
        self._draw()
        return [self.text]

    def show_live(self, steps: Optional[int] = None) -> None:
        """
        Display live animation.

        Args:
            steps: Number of steps to run (None for infinite)
        """
        anim = FuncAnimation(
            self.fig,
            self._animation_update,
            init_func=self._animation_init,
            frames=steps,
            interval=self.interval_ms,
            blit=False,
            cache_frame_data=False,
        )
        self._anim = anim
        plt.show()

    def save_frame(self, path: str) -> None:
        """
        Save current frame as image.

        Args:
            path: Output file path
        """
        self._draw()
        self.fig.savefig(path, facecolor=self.fig.get_facecolor())

    def save_animation(
        self,
        path: str,
        steps: int = 100,
        fps: Optional[int] = None,
    ) -> None:
        """
        Save animation to file.

        Args:
            path: Output file path (mp4, gif, etc.)
            steps: Number of frames
            fps: Frames per second (derived from interval_ms if not provided)
        """
        if fps is None:
            fps = max(1, round(1000 / self.interval_ms))

        anim = FuncAnimation(
            self.fig,
            self._animation_update,
            init_func=self._animation_init,
            frames=steps,
            interval=self.interval_ms,
            blit=False,
        )

        # Determine writer from extension
        suffix = Path(path).suffix.lower()
        if suffix == ".gif":
            anim.save(path, writer="pillow", fps=fps)
        else:
            anim.save(path, writer="ffmpeg", fps=fps)

        print(f"Animation saved to {path}")

    def close(self) -> None:
        plt.close(self.fig)

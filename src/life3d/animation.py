"""
Per-cell presentation state for rendering the 3D Game of Life.

Rendering needs more than alive/dead: cells fade in when born, fade out when
they die and change colour as they age. That state lives here, keyed by cell
coordinate, and is advanced by diffing successive logic grids. The engine
never sees it.
"""

from dataclasses import dataclass

import numpy as np
import matplotlib.colors as mcolors


MAX_AGE = 15
FADE_IN_SPEED = 0.08
FADE_OUT_SPEED = 0.12

# Birth scale for a cell that was invisible in the previous frame
BIRTH_SCALE = 0.1

# Below this scale a dying cell is no longer drawn
VISIBLE_THRESHOLD = 0.01

# Appearing cells at or above this scale settle into STABLE
SETTLE_THRESHOLD = 0.95

# Fade states
STABLE = 0
APPEARING = 1
DISAPPEARING = 2


@dataclass
class CellAnimation:
    """
    Animation state for every cell of a grid.

    All arrays have shape [N, N, N].

    Attributes:
        scale: Current drawn size in [0, 1]
        age: Generations alive, capped at MAX_AGE
        target_scale: Size the cell is heading to (1 alive, 0 dead)
        fade: One of STABLE, APPEARING, DISAPPEARING
    """

    scale: np.ndarray
    age: np.ndarray
    target_scale: np.ndarray
    fade: np.ndarray

    @property
    def shape(self) -> tuple[int, int, int]:
        return self.scale.shape

    @classmethod
    def empty(cls, size: int) -> "CellAnimation":
        """Nothing visible."""
        shape = (size, size, size)
        return cls(
            scale=np.zeros(shape, dtype=np.float32),
            age=np.zeros(shape, dtype=np.int32),
            target_scale=np.zeros(shape, dtype=np.float32),
            fade=np.full(shape, STABLE, dtype=np.int8),
        )

    @classmethod
    def from_grid(cls, grid: np.ndarray) -> "CellAnimation":
        """Start state for a freshly seeded grid: live cells fully shown."""
        anim = cls.empty(grid.shape[0])
        alive = grid == 1
        anim.scale[alive] = 1.0
        anim.age[alive] = 1
        anim.target_scale[alive] = 1.0
        return anim

    def clone(self) -> "CellAnimation":
        """Create a deep copy of the animation state."""
        return CellAnimation(
            scale=self.scale.copy(),
            age=self.age.copy(),
            target_scale=self.target_scale.copy(),
            fade=self.fade.copy(),
        )

    def paint(self, x: int, y: int, z: int, alive: bool) -> None:
        """Show or hide one cell immediately, e.g. after the user toggles it."""
        self.scale[x, y, z] = 1.0 if alive else 0.0
        self.target_scale[x, y, z] = 1.0 if alive else 0.0
        self.age[x, y, z] = 1 if alive else 0
        self.fade[x, y, z] = STABLE

    def advance(self, grid: np.ndarray) -> "CellAnimation":
        """
        Compute the animation state for the next logic grid.

        Transitions per cell:
            - alive, previously invisible: pop in at BIRTH_SCALE, APPEARING
            - alive, previously visible: grow by FADE_IN_SPEED; keep APPEARING
              while it was appearing below SETTLE_THRESHOLD, else STABLE
            - dead, still visible: shrink by FADE_OUT_SPEED, DISAPPEARING,
              age kept
            - dead, invisible: reset

        Live cells age by one generation up to MAX_AGE.

        Args:
            grid: Logic grid of the new generation

        Returns:
            New animation state (self is not modified)
        """
        alive = grid == 1
        was_hidden = self.scale == 0
        fading_out = ~alive & (self.scale > VISIBLE_THRESHOLD)

        nxt = CellAnimation.empty(grid.shape[0])

        born = alive & was_hidden
        growing = alive & ~was_hidden

        nxt.scale[born] = BIRTH_SCALE
        nxt.fade[born] = APPEARING

        nxt.scale[growing] = np.minimum(1.0, self.scale[growing] + FADE_IN_SPEED)
        still_appearing = growing & (self.fade == APPEARING) & (self.scale < SETTLE_THRESHOLD)
        nxt.fade[still_appearing] = APPEARING

        nxt.age[alive] = np.minimum(self.age[alive] + 1, MAX_AGE)
        nxt.target_scale[alive] = 1.0

        nxt.scale[fading_out] = np.maximum(0.0, self.scale[fading_out] - FADE_OUT_SPEED)
        nxt.age[fading_out] = self.age[fading_out]
        nxt.fade[fading_out] = DISAPPEARING

        return nxt

    def visible_mask(self, grid: np.ndarray) -> np.ndarray:
        """Cells worth drawing: alive, or dead but not yet faded out."""
        return (grid == 1) | (self.scale > VISIBLE_THRESHOLD)

    def eased_scale(self) -> np.ndarray:
        """Drawn size with quadratic easing while a cell fades."""
        fading = self.fade != STABLE
        return np.where(fading, self.scale * self.scale, self.scale)

    def colors(self) -> np.ndarray:
        """
        RGB colour of every cell from its age and fade state.

        Young cells are yellow and drift towards cyan as they age; fading
        cells lose saturation and lightness with their scale.

        Returns:
            Float RGB array [N, N, N, 3] in [0, 1]
        """
        age_ratio = np.minimum(self.age / MAX_AGE, 1.0)
        alpha = np.select(
            [self.fade == APPEARING, self.fade == DISAPPEARING],
            [self.scale, self.scale * 0.8],
            default=1.0,
        )

        hue = 0.15 + age_ratio * 0.4
        saturation = 0.8 * alpha
        lightness = (0.3 + age_ratio * 0.4) * alpha

        return hsl_to_rgb(hue, saturation, lightness)


def hsl_to_rgb(hue: np.ndarray, saturation: np.ndarray, lightness: np.ndarray) -> np.ndarray:
    """
    Convert HSL components to RGB via matplotlib's HSV conversion.

    Args:
        hue: Hue in [0, 1]
        saturation: HSL saturation in [0, 1]
        lightness: HSL lightness in [0, 1]

    Returns:
        RGB array with a trailing axis of size 3
    """
    hue = np.asarray(hue, dtype=np.float64)
    saturation = np.asarray(saturation, dtype=np.float64)
    lightness = np.asarray(lightness, dtype=np.float64)

    value = lightness + saturation * np.minimum(lightness, 1.0 - lightness)
    with np.errstate(divide="ignore", invalid="ignore"):
        hsv_saturation = np.where(value > 0, 2.0 * (1.0 - lightness / value), 0.0)

    hsv = np.stack(np.broadcast_arrays(hue, np.clip(hsv_saturation, 0, 1), np.clip(value, 0, 1)), axis=-1)
    return mcolors.hsv_to_rgb(hsv)

"""
Configuration dataclass for 3D Game of Life simulation parameters.

The engine itself is permissive: it never validates these values, so odd rule
combinations simply produce whatever the arithmetic implies. Callers that want
guard rails (the CLI does) call ``Config.validate`` explicitly.
"""

from dataclasses import dataclass, asdict, fields, replace
from typing import Any, Optional


# A cell in a 3x3x3 cube has 26 neighbours
MAX_NEIGHBORS = 26

# Usable lattice range for interactive use
MIN_GRID_SIZE = 5
MAX_GRID_SIZE = 50


@dataclass
class Config:
    """
    Rule and lattice configuration.

    Use ``merged`` to derive an updated configuration; the original is left
    untouched.

    Attributes:
        grid_size: Edge length of the cubic lattice (grid_size³ cells)
        birth_rule: Exact neighbour count for a dead cell to come alive
        survival_min: Lowest neighbour count at which a live cell survives
        survival_max: Highest neighbour count at which a live cell survives
        periodic_boundaries: Wrap the lattice into a 3-torus when True,
            otherwise positions outside the lattice are skipped
    """

    grid_size: int = 20
    birth_rule: int = 4
    survival_min: int = 4
    survival_max: int = 5
    periodic_boundaries: bool = True

    def merged(self, partial: Optional[dict[str, Any]] = None, **changes: Any) -> "Config":
        """
        Return a copy with the given fields overwritten.

        Omitted fields keep their current value. Unknown field names raise
        TypeError.
        """
        updates = dict(partial or {})
        updates.update(changes)
        return replace(self, **updates)

    def validate(self) -> None:
        """Check that all parameters are in valid ranges."""
        if self.grid_size < 1:
            raise ValueError(f"grid_size must be >= 1, got {self.grid_size}")

        for name in ("birth_rule", "survival_min", "survival_max"):
            value = getattr(self, name)
            if not 0 <= value <= MAX_NEIGHBORS:
                raise ValueError(f"{name} must be in [0, {MAX_NEIGHBORS}], got {value}")

        if self.survival_min > self.survival_max:
            raise ValueError(
                f"survival_min must be <= survival_max, "
                f"got {self.survival_min} > {self.survival_max}"
            )

    def with_survival_min(self, value: int) -> "Config":
        """Set the lower survival bound, raising the upper one if they cross."""
        return self.merged(survival_min=value, survival_max=max(value, self.survival_max))

    def with_survival_max(self, value: int) -> "Config":
        """Set the upper survival bound, lowering the lower one if they cross."""
        return self.merged(survival_max=value, survival_min=min(value, self.survival_min))

    @property
    def cell_count(self) -> int:
        return self.grid_size ** 3

    @property
    def rule_string(self) -> str:
        """Rule in B/S notation, e.g. ``B4/S4-5``."""
        if self.survival_min == self.survival_max:
            survival = str(self.survival_min)
        else:
            survival = f"{self.survival_min}-{self.survival_max}"
        return f"B{self.birth_rule}/S{survival}"

    def to_dict(self) -> dict[str, Any]:
        """Convert config to dictionary for serialization."""
        return asdict(self)

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> "Config":
        """Create config from dictionary."""
        return cls(**d)

    @classmethod
    def from_args(cls, args: Any, base: Optional["Config"] = None) -> "Config":
        """Create config from argparse namespace, overriding ``base``."""
        known_fields = {f.name for f in fields(cls)}
        config_dict = {k: v for k, v in vars(args).items() if k in known_fields and v is not None}
        return (base or cls()).merged(config_dict)

    def __repr__(self) -> str:
        boundaries = "periodic" if self.periodic_boundaries else "open"
        return (
            f"Config(grid_size={self.grid_size}, rule={self.rule_string}, "
            f"boundaries={boundaries})"
        )

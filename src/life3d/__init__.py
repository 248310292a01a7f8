"""
life3d - Three-dimensional Game of Life

A cellular automaton on a cubic lattice where every cell has 26 neighbours.
"""

__version__ = "0.1.0"

from .config import Config
from .engine import Engine
from .simulation import Simulation

__all__ = [
    "Config",
    "Engine",
    "Simulation",
    "__version__",
]

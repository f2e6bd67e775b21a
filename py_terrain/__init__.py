"""Diamond-square elevation grid generator."""

from .core import ElevationConfig, ElevationGenerator, ElevationGrid, Terrain, generate

__version__ = "0.1.0"

__all__ = ['ElevationConfig', 'ElevationGenerator', 'ElevationGrid', 'Terrain', 'generate']

"""
Core elevation generation functionality.
"""

from .alea_prng import AleaPRNG, RandomSource
from .elevation_generator import (
    BoundaryRule, ElevationConfig, ElevationGenerator, SmoothingMode,
    generate, initialize_grid, refine_grid, refinement_schedule, smooth_grid,
    validate_grid_size,
)
from .elevation_grid import ElevationGrid
from .errors import DegenerateNeighborhood, ElevationError, InvalidGridSize, TerrainNotGenerated
from .terrain import Terrain

__all__ = ['AleaPRNG', 'RandomSource',
           'BoundaryRule', 'ElevationConfig', 'ElevationGenerator', 'SmoothingMode',
           'generate', 'initialize_grid', 'refine_grid', 'refinement_schedule', 'smooth_grid',
           'validate_grid_size', 'ElevationGrid',
           'DegenerateNeighborhood', 'ElevationError', 'InvalidGridSize', 'TerrainNotGenerated',
           'Terrain']

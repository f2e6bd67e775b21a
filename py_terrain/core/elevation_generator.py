"""
Elevation grid generation using the diamond-square algorithm.

A generation run is a fixed, one-way pipeline over a single working array:

1. initialize_grid: seed the 9 anchor cells and force one corner to the floor
2. refine_grid: square and diamond steps over shrinking regions, with noise
   that tapers off every pass
3. smooth_grid: replace each cell with the mean of its Moore neighbors

Each stage takes the array, mutates it and hands it back. The finished array
is frozen into an ElevationGrid.
"""

from enum import Enum
from typing import List, Optional, Tuple, Union

import numpy as np
import structlog
from pydantic import BaseModel, Field, model_validator
from scipy import ndimage

from ..utils.random import make_random_source
from .alea_prng import RandomSource
from .elevation_grid import ElevationGrid
from .errors import DegenerateNeighborhood, InvalidGridSize

logger = structlog.get_logger()


class BoundaryRule(str, Enum):
    """Which neighbors take part in the square and diamond averages."""

    # Every neighbor inside [0, N-1] counts, for both steps
    SYMMETRIC = "symmetric"
    # Square step: 0 < c < N. Diamond step: 0 < c < N-1.
    REFERENCE = "reference"


class SmoothingMode(str, Enum):
    """How the smoothing pass reads neighbor values."""

    # Means computed from an untouched copy of the input
    SNAPSHOT = "snapshot"
    # Row-major in place, cells already visited are read smoothed
    IN_PLACE = "in_place"


class ElevationConfig(BaseModel):
    """Configuration for elevation generation."""

    size: int = Field(default=257, description="Grid side length, 2^k + 1")
    initial_variance_factor: float = Field(
        default=9.6, gt=0, description="Starting variance is int(size * factor)"
    )
    variance_decay_exponent: float = Field(
        default=0.65, gt=0, le=1, description="variance = int(variance ** exponent) per pass"
    )
    value_min: float = Field(default=0.0, description="Lower clamp bound")
    value_max: float = Field(default=100.0, description="Upper clamp bound")
    min_variance: int = Field(default=1, ge=1, description="Variance floor")
    anchor_bound: int = Field(
        default=100, ge=1, description="Anchors are drawn from [0, anchor_bound)"
    )
    boundary_rule: BoundaryRule = Field(default=BoundaryRule.SYMMETRIC)
    smoothing_mode: SmoothingMode = Field(default=SmoothingMode.SNAPSHOT)

    @model_validator(mode="after")
    def _check_value_range(self) -> "ElevationConfig":
        if self.value_min >= self.value_max:
            raise ValueError(
                f"value_min ({self.value_min}) must be below value_max ({self.value_max})"
            )
        return self

    @classmethod
    def from_settings(cls, settings) -> "ElevationConfig":
        """Build a config from application settings."""
        return cls(
            size=settings.default_grid_size,
            initial_variance_factor=settings.initial_variance_factor,
            variance_decay_exponent=settings.variance_decay_exponent,
            value_min=settings.value_min,
            value_max=settings.value_max,
            min_variance=settings.min_variance,
            boundary_rule=settings.boundary_rule,
            smoothing_mode=settings.smoothing_mode,
        )


def is_valid_grid_size(size) -> bool:
    """Check that size is 2^k + 1 with k >= 2."""
    if isinstance(size, bool) or not isinstance(size, (int, np.integer)):
        return False
    n = int(size) - 1
    return n >= 4 and (n & (n - 1)) == 0


def validate_grid_size(size) -> int:
    """Return size as an int or raise InvalidGridSize."""
    if not is_valid_grid_size(size):
        raise InvalidGridSize(size)
    return int(size)


def initial_region_size(size: int) -> int:
    return (size - 1) // 2


def initial_variance(size: int, config: ElevationConfig) -> int:
    return max(config.min_variance, int(size * config.initial_variance_factor))


def next_variance(variance: int, config: ElevationConfig) -> int:
    return max(config.min_variance, int(variance ** config.variance_decay_exponent))


def refinement_schedule(
    size: int, config: Optional[ElevationConfig] = None
) -> List[Tuple[int, int]]:
    """
    List the (region_size, variance) pairs the refiner runs passes with.

    The schedule depends only on the grid size and the variance tunables.
    """
    config = config or ElevationConfig()
    size = validate_grid_size(size)

    schedule = []
    region_size = initial_region_size(size)
    variance = initial_variance(size, config)
    while region_size > 2:
        schedule.append((region_size, variance))
        region_size = region_size // 2 + 1
        variance = next_variance(variance, config)
    return schedule


def _lim(value: float, config: ElevationConfig) -> float:
    """Limit a value to the configured range."""
    return np.clip(value, config.value_min, config.value_max)


def _noise(rng: RandomSource, variance: int) -> int:
    """Uniform integer in [-variance, variance)."""
    return rng.next_int(variance * 2) - variance


def _corner_inside(coord: int, size: int, rule: BoundaryRule) -> bool:
    if rule is BoundaryRule.REFERENCE:
        return 0 < coord < size
    return 0 <= coord <= size - 1


def _edge_inside(coord: int, size: int, rule: BoundaryRule) -> bool:
    if rule is BoundaryRule.REFERENCE:
        return 0 < coord < size - 1
    return 0 <= coord <= size - 1


def square_average(
    grid: np.ndarray,
    x: int,
    y: int,
    half: int,
    rule: BoundaryRule = BoundaryRule.SYMMETRIC,
) -> float:
    """
    Average the diagonal corners of the region centred on (x, y).

    Raises:
        DegenerateNeighborhood: if no corner lies inside the grid
    """
    size = grid.shape[0]
    total = 0.0
    count = 0
    for cx, cy in (
        (x - half, y + half),
        (x + half, y + half),
        (x - half, y - half),
        (x + half, y - half),
    ):
        if _corner_inside(cx, size, rule) and _corner_inside(cy, size, rule):
            total += grid[cx, cy]
            count += 1

    if count == 0:
        raise DegenerateNeighborhood(x, y, "square")
    return total / count


def diamond_average(
    grid: np.ndarray,
    x: int,
    y: int,
    half: int,
    rule: BoundaryRule = BoundaryRule.SYMMETRIC,
) -> float:
    """
    Average the orthogonal neighbors of (x, y) at distance half.

    Only the displaced coordinate of each neighbor is bounds-checked.

    Raises:
        DegenerateNeighborhood: if no neighbor lies inside the grid
    """
    size = grid.shape[0]
    total = 0.0
    count = 0
    if _edge_inside(x - half, size, rule):  # W
        total += grid[x - half, y]
        count += 1
    if _edge_inside(x + half, size, rule):  # E
        total += grid[x + half, y]
        count += 1
    if _edge_inside(y - half, size, rule):  # S
        total += grid[x, y - half]
        count += 1
    if _edge_inside(y + half, size, rule):  # N
        total += grid[x, y + half]
        count += 1

    if count == 0:
        raise DegenerateNeighborhood(x, y, "diamond")
    return total / count


def initialize_grid(
    grid: np.ndarray, rng: RandomSource, config: Optional[ElevationConfig] = None
) -> np.ndarray:
    """
    Seed the anchor cells the refiner interpolates from.

    Draws, in order, the N, S, E and W edge midpoints, the four corners and
    the center from [0, anchor_bound), clamped to the value range. Then one
    corner, picked by one binary draw per axis, is forced to value_min so
    every grid has a low point.

    Args:
        grid: Square working array, mutated in place
        rng: Random source
        config: Generation parameters

    Returns:
        The same array
    """
    config = config or ElevationConfig()
    end = grid.shape[0] - 1
    middle = end // 2
    bound = config.anchor_bound

    for x, y in (
        (middle, end),  # N
        (middle, 0),  # S
        (end, middle),  # E
        (0, middle),  # W
        (0, 0),
        (0, end),
        (end, end),
        (end, 0),
        (middle, middle),  # Center
    ):
        grid[x, y] = _lim(rng.next_int(bound), config)

    corner_x = end * rng.next_int(2)
    corner_y = end * rng.next_int(2)
    grid[corner_x, corner_y] = config.value_min

    return grid


def _refine_pass(
    grid: np.ndarray,
    rng: RandomSource,
    region_size: int,
    variance: int,
    config: ElevationConfig,
) -> None:
    size = grid.shape[0]
    half = region_size // 2
    step = region_size - 1
    rule = config.boundary_rule
    regions = size // step

    for x in range(regions):
        for y in range(regions):
            pos_x = half + x * step
            pos_y = half + y * step

            # Square step: region center from its corners
            noise = _noise(rng, variance)
            grid[pos_x, pos_y] = _lim(
                square_average(grid, pos_x, pos_y, half, rule) + noise, config
            )

            # Diamond step: N, S, E, W edge midpoints, one draw each
            for px, py in (
                (pos_x, step + y * step),
                (pos_x, y * step),
                (x * step, pos_y),
                (step + x * step, pos_y),
            ):
                noise = _noise(rng, variance)
                if not (0 <= px < size and 0 <= py < size):
                    # Only the first pass of a 9x9 grid overshoots the edge
                    continue
                grid[px, py] = _lim(
                    diamond_average(grid, px, py, half, rule) + noise, config
                )


def refine_grid(
    grid: np.ndarray,
    rng: RandomSource,
    region_size: int,
    variance: int,
    config: Optional[ElevationConfig] = None,
) -> np.ndarray:
    """
    Run diamond-square passes until the region size drops to 2 or below.

    Args:
        grid: Initialized working array, mutated in place
        rng: Random source
        region_size: Starting region size
        variance: Starting noise bound
        config: Generation parameters

    Returns:
        The same array
    """
    config = config or ElevationConfig()
    passes = 0

    while region_size > 2:
        _refine_pass(grid, rng, region_size, variance, config)
        passes += 1
        logger.debug(
            "Refinement pass complete",
            pass_number=passes,
            region_size=region_size,
            variance=variance,
        )
        region_size = region_size // 2 + 1
        variance = next_variance(variance, config)

    return grid


def smooth_grid(
    grid: np.ndarray, mode: SmoothingMode = SmoothingMode.SNAPSHOT
) -> np.ndarray:
    """
    Replace every cell with the mean of its existing Moore neighbors.

    Corner cells average 3 neighbors, edge cells 5 and interior cells 8.
    Values are not clamped again.

    Args:
        grid: Refined working array, overwritten
        mode: SNAPSHOT reads a copy of the input, IN_PLACE reads the array
            while it is being written in row-major order

    Returns:
        The same array
    """
    if SmoothingMode(mode) is SmoothingMode.IN_PLACE:
        return _smooth_in_place(grid)

    kernel = np.ones((3, 3), dtype=np.float64)
    kernel[1, 1] = 0.0
    sums = ndimage.convolve(grid, kernel, mode="constant", cval=0.0)
    counts = ndimage.convolve(np.ones_like(grid), kernel, mode="constant", cval=0.0)
    grid[...] = sums / counts
    return grid


def _smooth_in_place(grid: np.ndarray) -> np.ndarray:
    size = grid.shape[0]
    for x in range(size):
        for y in range(size):
            total = 0.0
            count = 0
            for dx in (-1, 0, 1):
                for dy in (-1, 0, 1):
                    if dx == 0 and dy == 0:
                        continue
                    nx, ny = x + dx, y + dy
                    if 0 <= nx < size and 0 <= ny < size:
                        total += grid[nx, ny]
                        count += 1
            grid[x, y] = total / count
    return grid


class ElevationGenerator:
    """
    Generates elevation grids with the diamond-square algorithm.

    Holds the configuration and the random source for a series of runs.
    Every call to generate() allocates a fresh working array.
    """

    def __init__(
        self,
        config: Optional[ElevationConfig] = None,
        rng: Union[RandomSource, str, int, None] = None,
    ):
        """
        Initialize the elevation generator.

        Args:
            config: Generation parameters, defaults to ElevationConfig()
            rng: Random source, or a seed to build an Alea PRNG from

        Raises:
            InvalidGridSize: if config.size is not 2^k + 1 with k >= 2
        """
        self.config = config or ElevationConfig()
        self.size = validate_grid_size(self.config.size)
        self.rng = make_random_source(rng)

    def initialize(self, grid: Optional[np.ndarray] = None) -> np.ndarray:
        if grid is None:
            # Cells the refiner never reaches keep the floor value
            grid = np.full((self.size, self.size), self.config.value_min, dtype=np.float64)
        return initialize_grid(grid, self.rng, self.config)

    def refine(self, grid: np.ndarray) -> np.ndarray:
        return refine_grid(
            grid,
            self.rng,
            initial_region_size(self.size),
            initial_variance(self.size, self.config),
            self.config,
        )

    def smooth(self, grid: np.ndarray) -> np.ndarray:
        return smooth_grid(grid, self.config.smoothing_mode)

    def generate(self) -> ElevationGrid:
        """
        Run the initialize, refine and smooth stages on a new grid.

        Returns:
            Finished, read-only elevation grid
        """
        logger.info(
            "Generating elevation grid",
            size=self.size,
            boundary_rule=self.config.boundary_rule.value,
            smoothing_mode=self.config.smoothing_mode.value,
        )
        grid = self.initialize()
        grid = self.refine(grid)
        grid = self.smooth(grid)

        elevation = ElevationGrid(grid)
        logger.info("Elevation grid generated", **elevation.statistics())
        return elevation


def generate(
    size: Optional[int] = None,
    rng: Union[RandomSource, str, int, None] = None,
    config: Optional[ElevationConfig] = None,
) -> ElevationGrid:
    """
    Generate an elevation grid.

    Args:
        size: Grid side length (2^k + 1), overrides config.size
        rng: Random source, or a seed to build an Alea PRNG from
        config: Generation parameters

    Returns:
        Initialized, refined and smoothed grid with values in
        [value_min, value_max]

    Raises:
        InvalidGridSize: if size is not 2^k + 1 with k >= 2
    """
    config = config or ElevationConfig()
    if size is not None:
        config = config.model_copy(update={"size": validate_grid_size(size)})
    return ElevationGenerator(config, rng).generate()

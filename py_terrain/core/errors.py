"""Exceptions raised while generating elevation grids."""


class ElevationError(ValueError):
    """Base class for elevation generation failures."""


class InvalidGridSize(ElevationError):
    """Grid side length is not of the form 2^k + 1 with k >= 2."""

    def __init__(self, size):
        self.size = size
        super().__init__(
            f"Grid size must be 2^k + 1 with k >= 2 (5, 9, 17, ...), got {size!r}"
        )


class DegenerateNeighborhood(ElevationError):
    """An averaging step found no neighbor to average."""

    def __init__(self, x: int, y: int, step: str):
        self.x = x
        self.y = y
        self.step = step
        super().__init__(f"No valid neighbors for {step} step at ({x}, {y})")


class TerrainNotGenerated(ElevationError):
    """Terrain elevation was requested before any grid was generated."""

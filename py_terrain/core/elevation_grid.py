"""Immutable square grid of elevation values."""

from typing import Dict, List, Tuple

import numpy as np


class ElevationGrid:
    """
    Finished elevation grid handed to consumers.

    Values are indexed as grid[x, y] for 0 <= x, y < size. The wrapped
    array is flagged read-only; use to_numpy() for a writable copy.
    """

    def __init__(self, values: np.ndarray):
        if values.ndim != 2 or values.shape[0] != values.shape[1]:
            raise ValueError(f"Elevation grid must be square, got shape {values.shape}")

        # Take ownership: no writable alias survives outside the grid
        self._values = np.array(values, dtype=np.float64, copy=True)
        self._values.flags.writeable = False

    @property
    def size(self) -> int:
        """Side length N."""
        return self._values.shape[0]

    @property
    def values(self) -> np.ndarray:
        """Read-only view of the underlying array."""
        return self._values

    def __getitem__(self, index: Tuple[int, int]) -> float:
        x, y = index
        if not (0 <= x < self.size and 0 <= y < self.size):
            raise IndexError(f"({x}, {y}) outside grid of size {self.size}")
        return float(self._values[x, y])

    def __len__(self) -> int:
        return self.size

    def __eq__(self, other) -> bool:
        if not isinstance(other, ElevationGrid):
            return NotImplemented
        return np.array_equal(self._values, other._values)

    __hash__ = None

    def __repr__(self) -> str:
        return (
            f"ElevationGrid(size={self.size}, "
            f"min={self.min():.2f}, max={self.max():.2f})"
        )

    def to_numpy(self) -> np.ndarray:
        """Return a writable copy of the values."""
        return self._values.copy()

    def min(self) -> float:
        return float(self._values.min())

    def max(self) -> float:
        return float(self._values.max())

    def mean(self) -> float:
        return float(self._values.mean())

    def std(self) -> float:
        return float(self._values.std())

    def histogram(self, bins: List[float] = None) -> Tuple[np.ndarray, np.ndarray]:
        """
        Count cells per elevation band.

        Args:
            bins: Band edges, defaults to ten bands over [0, 100]

        Returns:
            Tuple of (counts, edges) as returned by np.histogram
        """
        if bins is None:
            bins = np.linspace(0, 100, 11)
        return np.histogram(self._values, bins=bins)

    def statistics(self) -> Dict[str, float]:
        """Summary statistics for logging and display."""
        return {
            "size": self.size,
            "min": self.min(),
            "max": self.max(),
            "mean": self.mean(),
            "std": self.std(),
        }

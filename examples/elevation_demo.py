#!/usr/bin/env python3
"""
Simple demo script showing elevation grid generation.
"""

import numpy as np
from py_terrain.core import ElevationConfig, ElevationGenerator, refinement_schedule
from py_terrain.utils.logging import configure_logging


def print_distribution(grid):
    """Print a text histogram of elevation bands."""
    bins = [0, 10, 20, 30, 50, 70, 90, 100]
    hist, _ = grid.histogram(bins=bins)
    print("  Elevation distribution:")
    for i in range(len(bins) - 1):
        bar = '#' * int(hist[i] / max(hist.max(), 1) * 20)
        print(f"    {bins[i]:3d}-{bins[i+1]:3d}: {bar} ({hist[i]})")


def main():
    """Demonstrate elevation generation."""
    configure_logging("WARNING", "plain")

    print("Py-Terrain Elevation Generation Demo")
    print("=" * 40)

    size = 129
    print(f"\nRefinement schedule for a {size}x{size} grid:")
    for region_size, variance in refinement_schedule(size):
        print(f"  region size {region_size:4d}, variance {variance:5d}")

    for rule in ("symmetric", "reference"):
        print(f"\n{rule.upper()} boundary rule:")
        print("-" * 30)

        config = ElevationConfig(size=size, boundary_rule=rule)
        grid = ElevationGenerator(config, rng=f"{rule}_demo").generate()

        stats = grid.statistics()
        low = np.sum(grid.values < 20)
        print(f"  Total cells: {size * size}")
        print(f"  Low cells (<20): {low} ({low / (size * size) * 100:.1f}%)")
        print(f"  Elevation range: {stats['min']:.1f}-{stats['max']:.1f}")
        print(f"  Average elevation: {stats['mean']:.1f}")
        print_distribution(grid)

    print("\nDone!")


if __name__ == "__main__":
    main()

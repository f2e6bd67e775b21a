"""
Random number generation utilities.

Elevation code draws from an explicit random source that is passed in,
never from a process-wide generator. Python's random and NumPy's random
are not used so grids stay reproducible from a seed on every platform.
"""

from typing import Union

from ..core.alea_prng import AleaPRNG, RandomSource

DEFAULT_SEED = "default"


def make_random_source(
    seed: Union[RandomSource, str, int, float, None] = None,
) -> RandomSource:
    """
    Turn a seed into a random source.

    Objects that already provide next_int() are returned unchanged, so tests
    can inject a mock.

    Args:
        seed: Existing random source, seed string or number, or None for
            the default seed

    Returns:
        Random source ready for drawing
    """
    if hasattr(seed, "next_int"):
        return seed
    if seed is None:
        seed = DEFAULT_SEED
    return AleaPRNG(seed)

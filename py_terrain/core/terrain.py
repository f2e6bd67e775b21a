"""Terrain holder that swaps in finished elevation grids."""

from concurrent.futures import Executor, Future
from typing import Optional, Union

import structlog

from ..config import settings
from .alea_prng import RandomSource
from .elevation_generator import ElevationConfig, ElevationGenerator
from .elevation_grid import ElevationGrid
from .errors import TerrainNotGenerated

logger = structlog.get_logger()


class Terrain:
    """
    A piece of terrain backed by the latest generated elevation grid.

    A new grid replaces the current one only once its generation has
    finished, so readers never see a partially generated grid. Building
    meshes from the grid is left to consumers.
    """

    def __init__(
        self,
        config: Optional[ElevationConfig] = None,
        rng: Union[RandomSource, str, int, None] = None,
    ):
        if config is None:
            config = ElevationConfig.from_settings(settings)
        if rng is None:
            rng = settings.default_seed
        self.generator = ElevationGenerator(config, rng)
        self._elevation: Optional[ElevationGrid] = None
        self.generation_count = 0

    @property
    def elevation(self) -> ElevationGrid:
        """The current elevation grid."""
        if self._elevation is None:
            raise TerrainNotGenerated("Terrain has not been generated yet")
        return self._elevation

    @property
    def is_generated(self) -> bool:
        return self._elevation is not None

    def _install(self, elevation: ElevationGrid) -> ElevationGrid:
        self._elevation = elevation
        self.generation_count += 1
        return elevation

    def generate(self) -> ElevationGrid:
        """Generate a new grid and make it current."""
        try:
            elevation = self.generator.generate()
        except Exception as e:
            logger.error("Terrain generation failed", error=str(e))
            raise
        return self._install(elevation)

    def generate_in_background(self, executor: Executor) -> Future:
        """
        Generate a new grid on an executor.

        The current grid stays in place until the new one is finished.
        Callers must not start another generation before the returned
        future completes, the random source is not shared safely.

        Returns:
            Future resolving to the newly installed grid
        """
        logger.info("Submitting background terrain generation", size=self.generator.size)
        return executor.submit(self.generate)

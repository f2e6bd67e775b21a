from pathlib import Path
from dotenv import dotenv_values
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

import os

from ..core.elevation_generator import BoundaryRule, SmoothingMode

# Explicitly load .env for local/dev environments only if values are missing from the environment
BASE_DIR = Path(__file__).resolve().parent.parent.parent
env_file = BASE_DIR / ".env"

if env_file.exists():
    file_env = dotenv_values(env_file)
    missing_keys = {k: v for k, v in file_env.items() if k not in os.environ}
    for k, v in missing_keys.items():
        os.environ[k] = v


class Settings(BaseSettings):
    """Application settings pulled from PY_TERRAIN_* environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="PY_TERRAIN_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Generation Configuration
    default_grid_size: int = Field(default=257, description="Default grid side length (2^k + 1)")
    default_seed: str = Field(default="default", description="Seed used when none is given")
    initial_variance_factor: float = Field(default=9.6, gt=0, description="Starting variance per grid cell of side length")
    variance_decay_exponent: float = Field(default=0.65, gt=0, le=1, description="Variance decay exponent per pass")
    value_min: float = Field(default=0.0, description="Lowest elevation value")
    value_max: float = Field(default=100.0, description="Highest elevation value")
    min_variance: int = Field(default=1, ge=1, description="Variance floor")
    boundary_rule: BoundaryRule = Field(default=BoundaryRule.SYMMETRIC, description="Neighbor inclusion rule (symmetric, reference)")
    smoothing_mode: SmoothingMode = Field(default=SmoothingMode.SNAPSHOT, description="Smoothing pass mode (snapshot, in_place)")

    # Logging Configuration
    log_level: str = Field(default="INFO", description="Logging level")
    log_format: str = Field(default="json", description="Logging format (plain, json)")


# Instantiate singleton settings object
settings = Settings()

from pathlib import Path
from dotenv import dotenv_values
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

import os

# Explicitly load .env for local/dev environments only if values are missing from the environment
BASE_DIR = Path(__file__).resolve().parent.parent.parent
env_file = BASE_DIR / ".env"

if env_file.exists():
    file_env = dotenv_values(env_file)
    missing_keys = {k: v for k, v in file_env.items() if k not in os.environ}
    for k, v in missing_keys.items():
        os.environ[k] = v


class Settings(BaseSettings):
    """Application settings pulled from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # API Configuration
    api_host: str = Field(default="0.0.0.0", description="API host")
    api_port: int = Field(default=8000, description="API port")
    allowed_origins: str = Field(default="*", description="CORS allowed origins")

    # Logging Configuration
    log_level: str = Field(default="INFO", description="Logging level")
    log_format: str = Field(default="json", description="Logging format (plain or json)")

    # World Generation Configuration
    grid_size: int = Field(default=200, gt=0, description="Heightmap edge length in cells")
    max_grid_size: int = Field(default=400, gt=0, description="Largest grid the API accepts")
    lake_count_min: int = Field(default=2, ge=0, description="Minimum lakes requested")
    lake_count_max: int = Field(default=4, ge=0, description="Maximum lakes requested")
    max_peaks: int = Field(default=5, ge=0, description="Peaks kept per world")
    game_mode: str = Field(default="futuristic", description="Naming theme (earth or futuristic)")

    # Pathfinding Configuration
    path_max_expansions: int = Field(
        default=0, ge=0, description="A* node expansion cap (0 = grid cell count)"
    )
    path_time_budget_seconds: float = Field(
        default=0.0, ge=0.0, description="A* wall-clock budget (0 = unbounded)"
    )

    # Cache Configuration
    max_cached_worlds: int = Field(default=32, gt=0, description="Worlds kept in memory")

    @property
    def origins(self) -> list:
        """CORS origins as a list."""
        return [origin.strip() for origin in self.allowed_origins.split(",") if origin.strip()]


# Instantiate singleton settings object
settings = Settings()

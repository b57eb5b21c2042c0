"""Application configuration."""

from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from src.signal_planner.models import DemandOptions


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Application
    app_env: str = "development"
    debug: bool = False

    # Batch driver
    output_dir: str = "out"
    max_workers: Optional[int] = Field(default=None, ge=1)

    # Allocation
    max_green_time: Optional[int] = Field(default=None, ge=1)
    normalize_by_traversal_time: bool = False
    drop_worst_percent: float = Field(default=0.0, ge=0, le=100)

    def demand_options(self) -> DemandOptions:
        """Demand aggregation options configured for this environment."""
        return DemandOptions(
            normalize_by_traversal_time=self.normalize_by_traversal_time,
            drop_worst_percent=self.drop_worst_percent,
        )


settings = Settings()

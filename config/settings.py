"""
Centralized configuration using pydantic-settings.
Loads from .env file and provides typed access to all constants.
"""

from pathlib import Path
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings


class SimulationSettings(BaseSettings):
    """Simulation engine parameters."""

    seed: Optional[int] = Field(default=None, description="RNG seed (None = nondeterministic)")
    initial_congregation_size: int = Field(default=50, description="Members generated for a new game")
    candidate_expiry_weeks: int = Field(default=3, description="Weeks a candidate stays on the market")
    choice_event_expiry_weeks: int = Field(
        default=4, description="Weeks an unresolved choice event stays pending before it lapses"
    )
    news_limit: int = Field(default=50)
    event_history_limit: int = Field(default=50)
    financial_history_limit: int = Field(default=52, description="About one year of weekly records")
    policy_history_limit: int = Field(default=20)

    model_config = {"env_prefix": "SIM_", "env_file": ".env", "extra": "ignore"}


class PathSettings(BaseSettings):
    """File path configuration."""

    project_root: Path = Field(
        default_factory=lambda: Path(__file__).resolve().parent.parent
    )
    save_root: Optional[Path] = Field(
        default=None,
        description="Save slot directory (PATH_SAVE_ROOT overrides data/saves)",
    )

    model_config = {"env_prefix": "PATH_", "env_file": ".env", "extra": "ignore"}

    @property
    def data_dir(self) -> Path:
        return self.project_root / "data"

    @property
    def save_dir(self) -> Path:
        if self.save_root is not None:
            return self.save_root
        return self.data_dir / "saves"

    @property
    def output_dir(self) -> Path:
        return self.data_dir / "output"


class ApiSettings(BaseSettings):
    """HTTP API configuration."""

    title: str = Field(default="Sim Church: Weekly Simulation API")
    version: str = Field(default="0.1.0")
    save_slot: str = Field(default="simchurch_save", description="Default persistence slot")

    model_config = {"env_prefix": "API_", "env_file": ".env", "extra": "ignore"}


class Settings(BaseSettings):
    """Root settings aggregator."""

    simulation: SimulationSettings = Field(default_factory=SimulationSettings)
    paths: PathSettings = Field(default_factory=PathSettings)
    api: ApiSettings = Field(default_factory=ApiSettings)

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }


_settings: Optional[Settings] = None


def get_settings() -> Settings:
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def reset_settings() -> None:
    """Drop the cached settings so the next call re-reads the environment."""
    global _settings
    _settings = None

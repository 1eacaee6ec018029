"""Runtime settings, read from ``NPUSIM_*`` environment variables."""
from functools import lru_cache
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class SimulatorSettings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="NPUSIM_", env_file=".env", extra="ignore")

    max_workers: Optional[int] = Field(default=None, ge=1)  # None = one per CPU
    shutdown_timeout: float = Field(default=60.0, ge=0)
    time_scale: float = Field(default=0.001, ge=0)  # seconds per execution-time unit
    log_level: str = "INFO"
    json_logs: bool = False
    seed: Optional[int] = None


@lru_cache
def get_settings() -> SimulatorSettings:
    return SimulatorSettings()

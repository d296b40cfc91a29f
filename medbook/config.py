from enum import Enum
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class StoreAdapter(Enum):
    JSON = "json"
    MEMORY = "memory"


class StoreConfig(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="MEDBOOK_STORE_", env_file=".env", extra="ignore")

    adapter: StoreAdapter = StoreAdapter.JSON
    data_dir: Path = Path("data")


class SchedulingConfig(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="MEDBOOK_SCHEDULING_", env_file=".env", extra="ignore"
    )

    upcoming_horizon_hours: int = Field(default=24, gt=0)


class ServerConfig(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="MEDBOOK_SERVER_", env_file=".env", extra="ignore")

    host: str = "127.0.0.1"
    port: int = 3000


class AppConfig(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    store: StoreConfig = Field(default_factory=lambda: StoreConfig())
    scheduling: SchedulingConfig = Field(default_factory=lambda: SchedulingConfig())
    server: ServerConfig = Field(default_factory=lambda: ServerConfig())

import os
from pathlib import Path

from loguru import logger
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


def get_data_dir() -> Path:
    """Get the per-user data directory, honoring XDG_DATA_HOME."""
    xdg_data_home = os.getenv("XDG_DATA_HOME", "")
    if xdg_data_home:
        return Path(xdg_data_home)

    data_dir = Path.home() / ".local" / "share"
    logger.debug(f"XDG_DATA_HOME not set, using default data dir: {data_dir}")
    return data_dir


class Settings(BaseSettings):
    data_dir: Path = Field(default_factory=get_data_dir, validation_alias="FLOWTIME_DATA_DIR")
    statistics_file: str = Field(default="statistics.xml", validation_alias="FLOWTIME_STATISTICS_FILE")
    log_level: str = Field(default="INFO", validation_alias="FLOWTIME_LOG_LEVEL")
    log_file: str | None = Field(default=None, validation_alias="FLOWTIME_LOG_FILE")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="FLOWTIME_",
        extra="ignore",
        populate_by_name=True,
    )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, value: str) -> str:
        level = value.upper()
        if level not in {"TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Invalid log level: {value}")
        return level

    @property
    def statistics_path(self) -> Path:
        return self.data_dir / self.statistics_file


settings = Settings()

"""Configuration management for the container runtime."""

from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# Load environment variables
load_dotenv()


class Config(BaseSettings):
    """Runtime configuration, read from the environment and `.env`."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    # Host resource control
    cgroups_root: Path = Field(
        default=Path("/sys/fs/cgroup"), alias="CRUNTIME_CGROUPS_ROOT"
    )

    # Sandbox engine (Docker)
    docker_url: Optional[str] = Field(default=None, alias="CRUNTIME_DOCKER_URL")
    managed_label: str = Field(
        default="io.cruntime.managed", alias="CRUNTIME_MANAGED_LABEL"
    )
    stop_timeout: int = Field(default=10, alias="CRUNTIME_STOP_TIMEOUT")

    # Logging Configuration
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")
    log_file: Optional[str] = Field(default=None, alias="LOG_FILE")


# Global configuration instance, used by the command line front end
config = Config()

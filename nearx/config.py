"""Application settings — single file, Pydantic-based.

Every value can be overridden from the environment (NEARX_ prefix) or a .env
file in the working directory. Gas budgets and the unbonding delay are fixed
literals in the service modules and are deliberately not settings.
"""

from functools import lru_cache
from pathlib import Path

from dotenv import load_dotenv
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


def _ensure_env_loaded() -> None:
    """Load .env from the working directory. Idempotent."""
    candidate: Path = Path.cwd() / ".env"
    if candidate.exists():
        load_dotenv(candidate, override=False)


_ensure_env_loaded()


class EpochSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="NEARX_EPOCH_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    max_concurrency: int | None = Field(
        default=None,
        description="Upper bound on in-flight per-validator calls; unset means one call per validator at once",
    )
    max_iterations: int | None = Field(
        default=None,
        description="Cap on epoch stake/unstake drain loops; unset means run until the contract reports nothing left",
    )

    @field_validator("max_concurrency", "max_iterations")
    @classmethod
    def _positive(cls, value: int | None) -> int | None:
        if value is not None and value < 1:
            raise ValueError("must be a positive integer")
        return value


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="NEARX_",
        env_nested_delimiter="__",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    credentials_dir: Path = Field(
        default_factory=lambda: Path.home() / ".near-credentials",
        description="Root of the NEAR CLI key store (<root>/<network>/<account>.json)",
    )
    page_size: int = Field(default=50, ge=1, description="Accounts requested per snapshot page")
    log_level: str = Field(default="INFO")
    log_format: str = Field(default="console", description="console or json")

    epoch: EpochSettings = Field(default_factory=EpochSettings)


@lru_cache
def get_settings() -> Settings:
    return Settings()

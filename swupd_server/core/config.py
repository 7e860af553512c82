"""Configuration settings for the update server.

Values are read from ``SWUPD_``-prefixed environment variables (or a local
``.env`` file) and validated once at startup.
"""

from functools import lru_cache
from typing import Annotated, Any

from pydantic import DirectoryPath, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

Buckets = Annotated[tuple[float, ...], NoDecode]

KIB = 1024
MIB = 1024 * KIB
GIB = 1024 * MIB


class Settings(BaseSettings):
    """Update server settings.

    Attributes:
    ----------
        SERVE_ROOT (DirectoryPath): Directory holding the images and update content.
        HOST (str): Bind address of the artifact server.
        PORT (int): Port of the artifact server.
        METRICS_HOST (str): Bind address of the metrics sidecar.
        METRICS_PORT (int): Port of the metrics sidecar.
        LOG_LEVEL (str): Root log level.
        LOCAL_DEVELOPMENT (bool): Human-readable log output.
        DURATION_BUCKETS (tuple[float, ...]): Request duration histogram buckets, seconds.
        SIZE_BUCKETS (tuple[float, ...]): Response size histogram buckets, bytes.
        THROUGHPUT_BUCKETS (tuple[float, ...]): Throughput histogram buckets, bytes/second.
    """

    model_config = SettingsConfigDict(
        env_prefix="SWUPD_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        validate_default=True,
    )

    SERVE_ROOT: DirectoryPath = "/www"
    HOST: str = "0.0.0.0"
    PORT: int = 80
    METRICS_HOST: str = "0.0.0.0"
    METRICS_PORT: int = 9700

    LOG_LEVEL: str = "INFO"
    LOCAL_DEVELOPMENT: bool = False

    DURATION_BUCKETS: Buckets = (0.1, 1, 10, 60, 600)
    SIZE_BUCKETS: Buckets = (100 * KIB, MIB, 10 * MIB, 100 * MIB, GIB)
    THROUGHPUT_BUCKETS: Buckets = (KIB, 100 * KIB, MIB, 10 * MIB, 100 * MIB)

    @field_validator("DURATION_BUCKETS", "SIZE_BUCKETS", "THROUGHPUT_BUCKETS", mode="before")
    @classmethod
    def split_buckets(cls, v: Any) -> Any:
        """Accept ``"0.1,1,10"`` and ``"[0.1, 1, 10]"`` as well as sequences."""
        if isinstance(v, str):
            return tuple(part.strip() for part in v.strip("[] ").split(",") if part.strip())
        return v

    @field_validator("DURATION_BUCKETS", "SIZE_BUCKETS", "THROUGHPUT_BUCKETS")
    @classmethod
    def check_increasing(cls, v: tuple[float, ...]) -> tuple[float, ...]:
        """Histogram buckets must be non-empty and strictly increasing."""
        if not v:
            raise ValueError("at least one bucket boundary is required")
        if any(upper <= lower for lower, upper in zip(v, v[1:])):
            raise ValueError(f"bucket boundaries must be strictly increasing, got {v}")
        return v

    @field_validator("LOG_LEVEL")
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        return v.upper()


@lru_cache
def get_settings() -> Settings:
    """Return the process-wide settings, built on first use."""
    return Settings()

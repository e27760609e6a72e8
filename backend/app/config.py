"""Application configuration."""
from functools import lru_cache
from pathlib import Path

from pydantic import field_validator
from pydantic_settings import BaseSettings
from sqlalchemy.engine import make_url


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # App
    app_name: str = "Points Ledger"
    debug: bool = False
    log_level: str = "INFO"
    port: int = 3000
    cors_origins: list[str] = ["http://localhost:3000"]

    # Database
    database_url: str = "sqlite:///./data/points.db"
    database_ssl: bool | None = None  # None = auto-detect from the URL host

    # Auth
    bcrypt_rounds: int = 10

    # Paths
    static_dir: Path = Path("public")

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"

    @field_validator("bcrypt_rounds")
    @classmethod
    def validate_bcrypt_rounds(cls, value: int) -> int:
        """bcrypt only accepts log2 cost factors between 4 and 31."""
        if not 4 <= value <= 31:
            raise ValueError("BCRYPT_ROUNDS must be between 4 and 31.")
        return value

    @field_validator("log_level")
    @classmethod
    def normalize_log_level(cls, value: str) -> str:
        return value.upper()

    @property
    def use_database_ssl(self) -> bool:
        """Whether the store connection should require SSL."""
        if self.database_ssl is not None:
            return self.database_ssl

        url = make_url(self.database_url)
        return url.get_backend_name() == "postgresql" and "render.com" in (url.host or "")


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()

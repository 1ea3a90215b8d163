from pydantic import ConfigDict, field_validator
from pydantic_settings import BaseSettings

from app.constants import MAX_DIFFICULTY


class Settings(BaseSettings):
    model_config = ConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
    )

    # Key material (base64: raw 32-byte Ed25519 key or PEM)
    ironshield_private_key: str = ""
    ironshield_public_key: str = ""

    # Proof of Work
    challenge_difficulty: int = 50_000  # expected hashes per solve

    # Logging
    log_level: str = "info"
    log_format: str = "console"  # "json" in production

    # CORS
    cors_origins: list[str] | str = ["*"]

    @field_validator("cors_origins", mode="before")
    @classmethod
    def parse_cors_origins(cls, v):
        """Parse CORS origins from comma-separated string or list."""
        if isinstance(v, str):
            return [origin.strip() for origin in v.split(",") if origin.strip()]
        return v

    @field_validator("challenge_difficulty")
    @classmethod
    def validate_difficulty(cls, v: int) -> int:
        if v < 1:
            raise ValueError("challenge_difficulty must be at least 1")
        if v > MAX_DIFFICULTY:
            raise ValueError(f"challenge_difficulty must be at most {MAX_DIFFICULTY}")
        return v


settings = Settings()

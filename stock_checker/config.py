"""Application configuration settings."""
import os
from pathlib import Path

from dotenv import load_dotenv

# Load environment variables
load_dotenv(Path(__file__).parent.parent / ".env")


def _env_flag(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


class Settings:
    """Application settings loaded from environment variables."""

    # Upstream quote service
    QUOTE_API_URL: str = os.getenv(
        "QUOTE_API_URL",
        "https://stock-price-checker-proxy.freecodecamp.rocks/v1/stock/{symbol}/quote",
    )
    QUOTE_TIMEOUT: float = float(os.getenv("QUOTE_TIMEOUT", "5.0"))

    # Visitor identification
    TRUST_PROXY: bool = _env_flag("TRUST_PROXY", "true")

    # Server
    HOST: str = os.getenv("HOST", "0.0.0.0")
    PORT: int = int(os.getenv("PORT", "3000"))
    CORS_ORIGINS: str = os.getenv("CORS_ORIGINS", "*")
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    def __init__(self, **overrides):
        for key, value in overrides.items():
            if not hasattr(self, key):
                raise AttributeError(f"Unknown setting: {key}")
            setattr(self, key, value)

    @property
    def cors_origins(self) -> list:
        """Return allowed CORS origins as a list."""
        return [origin.strip() for origin in self.CORS_ORIGINS.split(",") if origin.strip()]


settings = Settings()

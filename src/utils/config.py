"""Process-wide configuration loaded from environment variables."""

import os
from dataclasses import dataclass
from functools import lru_cache

from dotenv import load_dotenv


@dataclass(frozen=True)
class Settings:
    jwt_secret: str | None = None
    mongo_uri: str | None = None
    database_name: str = 'auth'
    port: int = 8080
    cors_origins: str = '*'
    log_level: str = 'INFO'

    def require_jwt_secret(self) -> str:
        """Return the token signing secret.

        Raises:
            ValueError: JWT_ACCESS_TOKEN is not set
        """
        if not self.jwt_secret:
            raise ValueError(
                "JWT_ACCESS_TOKEN environment variable is required. "
                "Generate a secure key with: openssl rand -hex 32"
            )
        return self.jwt_secret


def load_settings() -> Settings:
    """Read settings from the environment (and a .env file, if present)."""
    load_dotenv()

    return Settings(
        jwt_secret=os.getenv('JWT_ACCESS_TOKEN') or None,
        mongo_uri=os.getenv('MONGO_URI'),
        database_name=os.getenv('MONGODB_DATABASE', 'auth'),
        port=int(os.getenv('PORT', 8080)),
        cors_origins=os.getenv('CORS_ORIGINS', '*'),
        log_level=os.getenv('LOG_LEVEL', 'INFO').upper(),
    )


@lru_cache
def get_settings() -> Settings:
    """Return the settings, loading them on first use only."""
    return load_settings()

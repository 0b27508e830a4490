"""Configuration settings for the Desert Pulse fitness app."""
import os
from typing import List, Literal


EnvironmentType = Literal["development", "staging", "production"]


class Settings:
    """Application settings."""

    # Environment
    ENVIRONMENT: EnvironmentType = "development"
    LOG_LEVEL: str = "INFO"

    # Session tokens
    JWT_SECRET: str = "dev-only-session-secret-change-me-in-production"
    JWT_ALGORITHM: str = "HS256"
    TOKEN_EXPIRE_DAYS: int = 7
    COOKIE_NAME: str = "token"
    COOKIE_SECURE: bool = False

    # Document store
    SUPABASE_URL: str | None = None
    SUPABASE_KEY: str | None = None

    # Profile defaults
    DEFAULT_AVAILABLE_TIME: int = 30

    CORS_ORIGINS: List[str] = ["http://localhost:3000"]

    def __init__(self):
        # Environment
        env = os.getenv("ENVIRONMENT", "development").lower()
        if env in ("development", "staging", "production"):
            self.ENVIRONMENT = env  # type: ignore
        else:
            self.ENVIRONMENT = "development"
        self.LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

        # Session tokens
        self.JWT_SECRET = os.getenv("JWT_SECRET", self.JWT_SECRET)
        self.JWT_ALGORITHM = os.getenv("JWT_ALGORITHM", "HS256")
        self.TOKEN_EXPIRE_DAYS = _int_env("TOKEN_EXPIRE_DAYS", 7)
        self.COOKIE_NAME = os.getenv("COOKIE_NAME", "token")
        # Secure cookies default on outside development
        secure_default = "false" if self.ENVIRONMENT == "development" else "true"
        self.COOKIE_SECURE = os.getenv("COOKIE_SECURE", secure_default).lower() == "true"

        # Document store
        self.SUPABASE_URL = os.getenv("SUPABASE_URL")
        self.SUPABASE_KEY = os.getenv("SUPABASE_SERVICE_ROLE_KEY") or os.getenv("SUPABASE_ANON_KEY")

        # Profile defaults
        self.DEFAULT_AVAILABLE_TIME = _int_env("DEFAULT_AVAILABLE_TIME", 30)

        origins = os.getenv("CORS_ORIGINS", "http://localhost:3000")
        self.CORS_ORIGINS = [o.strip() for o in origins.split(",") if o.strip()]


def _int_env(name: str, default: int) -> int:
    try:
        return int(os.getenv(name, str(default)))
    except ValueError:
        return default


settings = Settings()

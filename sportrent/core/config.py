"""
Application Configuration
Loads settings from .env file
"""
from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import List


class Settings(BaseSettings):
    """Application settings loaded from environment variables"""

    # ==================== Project Info ====================
    PROJECT_NAME: str = "SportRent API"
    VERSION: str = "1.0.0"
    API_PREFIX: str = "/api"

    # ==================== Database ====================
    DATABASE_URL: str = "sqlite:///sportrent_local.db"

    # ==================== Authentication ====================
    # "jwt" verifies provider tokens locally, "supabase" asks the auth API
    AUTH_PROVIDER: str = "jwt"
    JWT_ALGORITHM: str = "HS256"
    JWT_AUDIENCE: str = "authenticated"

    # ==================== Supabase ====================
    SUPABASE_URL: str = ""
    SUPABASE_KEY: str = ""
    SUPABASE_JWT_SECRET: str = ""

    # ==================== CORS ====================
    ALLOWED_ORIGINS: List[str] = [
        "http://localhost:3000",
        "http://localhost:5173",
        "http://127.0.0.1:5173",
    ]

    # ==================== Server ====================
    HOST: str = "0.0.0.0"
    PORT: int = 3000
    RUN_MIGRATIONS: bool = False

    # ==================== Features ====================
    DEBUG: bool = False
    TESTING: bool = False

    # ==================== Logging ====================
    LOG_LEVEL: str = "INFO"

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
        extra="allow"
    )


# Create settings singleton
settings = Settings()

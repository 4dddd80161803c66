"""Configuration management for the application."""
import os
from dotenv import load_dotenv

load_dotenv()


def _split_origins(value: str) -> list:
    return [origin.strip() for origin in value.split(",") if origin.strip()]


class Config:
    """Application configuration."""
    
    ENV: str = os.getenv("ENV", "development")
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")
    
    # Database (Supabase Postgres in production)
    DATABASE_URL: str = os.getenv("DATABASE_URL", "")
    AUTO_CREATE_TABLES: bool = os.getenv("AUTO_CREATE_TABLES", "").strip().lower() in {"1", "true", "yes", "on"}
    
    # Supabase Configuration
    SUPABASE_URL: str = os.getenv("SUPABASE_URL", "")
    SUPABASE_SERVICE_KEY: str = os.getenv("SUPABASE_SERVICE_KEY", "")
    SUPABASE_JWT_SECRET: str = os.getenv("SUPABASE_JWT_SECRET", "")
    
    # CORS
    ALLOWED_ORIGINS: list = _split_origins(os.getenv("ALLOWED_ORIGINS", "")) or [
        "http://localhost:3000",
        "http://localhost:5173",
    ]
    
    # Local settings cache (one JSON file per user)
    SETTINGS_CACHE_DIR: str = os.getenv("SETTINGS_CACHE_DIR", "data/settings")
    
    # Planner defaults
    DEFAULT_COMMISSION: str = "2.0"  # exchange commission, percent
    DEFAULT_THEME: str = "light"
    MONTHS_WINDOW: int = 12
    
    @classmethod
    def validate(cls) -> bool:
        """Validate that required environment variables are set."""
        if not cls.DATABASE_URL:
            raise ValueError("DATABASE_URL is not set in environment variables")
        if not cls.SUPABASE_URL:
            raise ValueError("SUPABASE_URL is not set in environment variables")
        if not cls.SUPABASE_SERVICE_KEY:
            raise ValueError("SUPABASE_SERVICE_KEY is not set in environment variables")
        if not cls.SUPABASE_JWT_SECRET:
            raise ValueError("SUPABASE_JWT_SECRET is not set in environment variables")
        return True

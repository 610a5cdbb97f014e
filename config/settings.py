# config/settings.py

from typing import List, Optional
from pydantic_settings import BaseSettings
from pydantic import Field, validator
from functools import lru_cache


class Settings(BaseSettings):
    # Application
    APP_NAME: str = "CleanSweep"
    DEBUG: bool = False
    ENVIRONMENT: str = Field(default="development", pattern="^(development|staging|production)$")

    # URLs
    BACKEND_URL: str = "http://localhost:8000"

    # CORS
    CORS_ORIGINS: str = "*"

    @property
    def cors_origins_list(self) -> List[str]:
        """Parse CORS origins from comma-separated string"""
        if not self.CORS_ORIGINS:
            return []
        return [s.strip() for s in self.CORS_ORIGINS.split(",") if s.strip()]

    # Database
    DATABASE_URL: str = "sqlite:///./cleansweep.db"
    DB_POOL_SIZE: int = Field(default=20, ge=5, le=100)
    DB_MAX_OVERFLOW: int = Field(default=30, ge=5, le=100)
    DB_POOL_RECYCLE: int = Field(default=3600, ge=300)

    # Image hosting
    IMAGE_HOST: str = "cloudinary"  # cloudinary | local
    CLOUDINARY_CLOUD_NAME: Optional[str] = None
    CLOUDINARY_API_KEY: Optional[str] = None
    CLOUDINARY_API_SECRET: Optional[str] = None
    UPLOAD_DIR: str = "uploads"
    MAX_FILE_SIZE: int = Field(default=10 * 1024 * 1024, ge=1024)

    # AI triage
    GEMINI_API_KEY: Optional[str] = None  # default key, the x-gemini-key header overrides it
    GEMINI_MODEL: str = "gemini-2.5-flash-preview-09-2025"
    GEMINI_API_URL: str = "https://generativelanguage.googleapis.com/v1beta/models"

    # Outbound HTTP
    REQUEST_TIMEOUT: int = Field(default=30, ge=1, le=300)

    # Clustering / stats
    DEDUP_RADIUS_KM: float = Field(default=0.05, gt=0)
    STATS_WINDOW_DAYS: int = Field(default=30, ge=1)

    # Caching
    REDIS_URL: Optional[str] = None
    CACHE_STATS_TTL: int = Field(default=60, ge=1)

    # Monitoring
    LOG_LEVEL: str = Field(default="INFO", pattern="^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$")

    # Server
    PORT: Optional[int] = Field(default=10000, ge=1, le=65535)

    @validator('DATABASE_URL')
    def validate_database_url(cls, v):
        """Validate database URL format"""
        if not v.startswith(('postgresql://', 'postgresql+psycopg2://', 'sqlite://')):
            raise ValueError('Unsupported database URL format')
        return v

    @validator('REDIS_URL')
    def validate_redis_url(cls, v):
        """Validate Redis URL format"""
        if v and not v.startswith(('redis://', 'rediss://')):
            raise ValueError('Invalid Redis URL format')
        return v or None

    @validator('IMAGE_HOST')
    def validate_image_host(cls, v):
        v = v.strip().lower()
        if v not in ("cloudinary", "local"):
            raise ValueError('IMAGE_HOST must be "cloudinary" or "local"')
        return v

    @property
    def is_sqlite(self) -> bool:
        return self.DATABASE_URL.startswith("sqlite")

    class Config:
        env_file = ".env"
        case_sensitive = True
        extra = "ignore"


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance"""
    return Settings()


# Global settings instance
settings = get_settings()

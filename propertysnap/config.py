from typing import List
from pydantic_settings import BaseSettings
from pydantic import Field, validator
from dotenv import load_dotenv
import logging
import sys

load_dotenv()
logger = logging.getLogger(__name__)

class Settings(BaseSettings):
    # Data stores
    MONGO_URI: str = Field(..., description="MongoDB connection URI")
    MONGO_DB_NAME: str = Field(default="propertysnap", description="Database holding reports, ads and cache configs")
    REDIS_URL: str = Field(..., description="Redis URL for janitor stats snapshots")

    # Bearer tokens are issued elsewhere; this service only verifies them
    JWT_SECRET: str = Field(..., min_length=32, description="Shared HS256 secret (minimum 32 characters)")
    ACCESS_TOKEN_EXPIRE_MINUTES: int = Field(default=15, ge=1, le=1440)

    # Share links
    PUBLIC_BASE_URL: str = Field(default="http://localhost:3000", description="Origin prepended to /share/{token}")
    CORS_ORIGINS: List[str] = Field(default=["*"])

    # In-memory cache and its janitor
    CACHE_DEFAULT_TTL_SECONDS: int = Field(default=300, ge=1)
    CACHE_CLEANUP_INTERVAL_SECONDS: int = Field(default=300, ge=1)
    CACHE_STATS_INTERVAL_SECONDS: int = Field(default=900, ge=1)

    ENVIRONMENT: str = Field(default="development")
    DEBUG: bool = Field(default=False)

    @validator('JWT_SECRET')
    def validate_jwt_secret(cls, v):
        if len(v) < 32:
            raise ValueError('JWT_SECRET must be at least 32 characters long')
        return v

    @validator('MONGO_URI')
    def validate_mongo_uri(cls, v):
        if not v.startswith(('mongodb://', 'mongodb+srv://')):
            raise ValueError('MONGO_URI must be a mongodb:// or mongodb+srv:// URI')
        return v

    @validator('REDIS_URL')
    def validate_redis_url(cls, v):
        if not v.startswith(('redis://', 'rediss://')):
            raise ValueError('REDIS_URL must be a redis:// or rediss:// URL')
        return v

    @validator('PUBLIC_BASE_URL')
    def validate_public_base_url(cls, v):
        if not v.startswith(('http://', 'https://')):
            raise ValueError('PUBLIC_BASE_URL must be an http(s) origin')
        return v.rstrip('/')

    @property
    def is_production(self) -> bool:
        return self.ENVIRONMENT == "production"

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = True

try:
    settings = Settings()
    logger.info(f"Configuration loaded ({settings.ENVIRONMENT})")
except Exception as e:
    logger.critical(f"Invalid Property Snap configuration: {str(e)}")
    sys.exit(1)

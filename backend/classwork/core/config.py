from functools import lru_cache
from pydantic_settings import BaseSettings
from typing import Optional


class Settings(BaseSettings):
    # Data source: "json", "sql" or "supabase"
    CLASSWORK_SOURCE: str = "json"
    CLASSWORK_DATA_FILE: str = "data/dummy-data.json"

    # Database
    DATABASE_URL: Optional[str] = None
    DATABASE_POOL_SIZE: int = 5

    # Supabase
    SUPABASE_URL: Optional[str] = None
    SUPABASE_SERVICE_ROLE_KEY: Optional[str] = None
    SUPABASE_ANON_KEY: Optional[str] = None

    # Frontend
    FRONTEND_URL: str = "http://localhost:5173"

    # Environment
    ENVIRONMENT: str = "development"
    LOG_LEVEL: str = "INFO"

    class Config:
        env_file = ".env"
        case_sensitive = True
        extra = "ignore"

    @property
    def supabase_key(self) -> Optional[str]:
        """Service role key when present, anon key otherwise"""
        return self.SUPABASE_SERVICE_ROLE_KEY or self.SUPABASE_ANON_KEY


@lru_cache
def get_settings() -> Settings:
    return Settings()

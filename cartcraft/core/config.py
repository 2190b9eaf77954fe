"""CartCraft Service Configuration"""

from typing import Optional
from pydantic_settings import BaseSettings
from functools import lru_cache


class Settings(BaseSettings):
    """Application settings loaded from environment"""

    # Application
    app_name: str = "CartCraft"
    debug: bool = False
    host: str = "0.0.0.0"
    port: int = 8000

    # Catalog storage
    data_file: str = "data/products.json"

    # Admin API key
    admin_api_key: Optional[str] = None
    # Accept the legacy built-in key when ADMIN_API_KEY is unset
    allow_default_api_key: bool = False

    # Page revalidation
    revalidate_base_url: Optional[str] = None
    revalidate_timeout: float = 10.0
    page_revalidate_seconds: int = 60

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = False
        extra = "ignore"

    @property
    def remote_revalidation(self) -> bool:
        """Check if revalidation goes through the HTTP endpoint"""
        return bool(self.revalidate_base_url)


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance"""
    return Settings()

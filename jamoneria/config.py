"""
Application configuration using pydantic-settings.
Loads from environment variables / .env file.
"""

from decimal import Decimal
from functools import lru_cache
from typing import Literal, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment."""
    
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )
    
    # Application
    app_name: str = "jamoneria"
    app_env: Literal["development", "staging", "production"] = "development"
    debug: bool = False
    
    # API Server
    host: str = "0.0.0.0"
    port: int = 3000
    
    # Public URL used to build payment return URLs (falls back to request host)
    public_base_url: Optional[str] = None
    
    # Database (SQLite by default, Postgres via postgresql+asyncpg://)
    database_url: str = "sqlite+aiosqlite:///./database.sqlite"
    
    # Telegram operator bot
    telegram_bot_token: str = ""
    admin_chat_id: str = ""
    notify_on_startup: bool = True
    
    # Dodo Payments
    dodo_payments_api_key: str = ""
    dodo_environment: Literal["test", "live"] = "test"
    dodo_product_id: str = ""
    dodo_webhook_secret: str = ""
    
    # Orders
    order_type_tag: str = "jamon_order"
    cod_surcharge: Decimal = Decimal("3.00")
    billing_country: str = "ES"
    
    @property
    def is_production(self) -> bool:
        return self.app_env == "production"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


settings = get_settings()

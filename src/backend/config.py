# src/backend/config.py
from typing import List, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",            # auto-load .env (optional; process env wins)
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    APP_NAME: str = "site-backend"
    API_PREFIX: str = "/api/v1"
    LOG_LEVEL: str = "INFO"

    # Database (DATABASE_URL wins over the individual parts)
    DATABASE_URL: Optional[str] = None
    DB_DRIVER: str = "postgresql+asyncpg"
    DB_USER: str = "postgres"
    DB_PASSWORD: str = ""
    DB_HOST: str = "127.0.0.1"
    DB_PORT: str = "5432"
    DB_NAME: str = "site"
    DB_ECHO: bool = False
    DB_POOL_SIZE: int = 10
    DB_MAX_OVERFLOW: int = 20
    DB_TIMEOUT: int = 30

    # JWT write guard for menu mutations
    AUTH_ENABLED: bool = True
    JWT_SECRET: str = "change-this-in-prod"
    JWT_ALG: str = "HS256"
    JWT_LEEWAY_SECONDS: int = 30
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 15
    MENU_ADMIN_ROLES: str = "admin_cabang,admin_wilayah,admin_pusat"

    # Position tree cache
    MENU_CACHE_ENABLED: bool = True
    MENU_CACHE_TTL_SECONDS: float = 300.0

    TIMEZONE: str = "Asia/Jakarta"
    CORS_ORIGINS: str = "*"

    @property
    def database_url(self) -> str:
        if self.DATABASE_URL:
            return self.DATABASE_URL
        return (
            f"{self.DB_DRIVER}://{self.DB_USER}:{self.DB_PASSWORD}"
            f"@{self.DB_HOST}:{self.DB_PORT}/{self.DB_NAME}"
        )

    @property
    def menu_admin_roles(self) -> List[str]:
        return [r.strip() for r in self.MENU_ADMIN_ROLES.split(",") if r.strip()]

    @property
    def cors_origins(self) -> List[str]:
        return [o.strip() for o in self.CORS_ORIGINS.split(",") if o.strip()]


settings = Settings()

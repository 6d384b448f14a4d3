from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict
from sqlalchemy.engine import URL


class Settings(BaseSettings):
    APP_NAME: str = "Task Tracker API"
    APP_ENV: str = "dev"
    LOG_LEVEL: str = "INFO"

    # Either a full URL or the individual parts below
    DATABASE_URL: Optional[str] = None
    DB_DRIVER: str = "postgresql+asyncpg"
    DB_HOST: str = "localhost"
    DB_PORT: int = 5432
    DB_NAME: str = "tasks"
    DB_USER: str = "postgres"
    DB_PASSWORD: str = "postgres"

    DB_POOL_SIZE: int = 5
    DB_MAX_OVERFLOW: int = 0
    DB_POOL_TIMEOUT: int = 30
    DB_POOL_RECYCLE: int = 1800
    DB_CREATE_TABLES: bool = True

    JWT_SECRET: str = "dev-secret-change-me"
    JWT_ALGORITHM: str = "HS256"
    JWT_ISSUER: str = "task-tracker-api"
    JWT_AUDIENCE: str = "task-tracker-api"
    JWT_EXPIRES_MINUTES: int = 60

    CORS_ORIGINS: list[str] = ["*"]

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False, extra="ignore")

    @property
    def database_url(self) -> str:
        """
        Store URL, preferring DATABASE_URL when set.
        """
        if self.DATABASE_URL:
            return self.DATABASE_URL
        return URL.create(
            self.DB_DRIVER,
            username=self.DB_USER,
            password=self.DB_PASSWORD,
            host=self.DB_HOST,
            port=self.DB_PORT,
            database=self.DB_NAME,
        ).render_as_string(hide_password=False)


settings = Settings()

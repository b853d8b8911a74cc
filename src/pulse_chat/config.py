from __future__ import annotations

from pydantic import ConfigDict
from pydantic_settings import BaseSettings

from pulse_chat.domain.value_objects.enums import AttachmentType


class Settings(BaseSettings):
    POSTGRES_USER: str
    POSTGRES_PASSWORD: str
    POSTGRES_DB: str
    DB_HOST: str = "localhost"
    DB_PORT: int = 5432

    DB_POOL_SIZE: int = 10
    DB_MAX_OVERFLOW: int = 20
    DB_POOL_RECYCLE: int = 300
    DB_ECHO: bool = False

    JWT_SECRET: str = ""
    JWT_ALGORITHM: str = "HS256"
    JWT_EXPIRES_MINUTES: int = 60 * 24

    CORS_ORIGINS: list[str] = ["*"]

    WS_HEARTBEAT_INTERVAL: float = 25.0
    WS_HEARTBEAT_TIMEOUT: float = 60.0

    MEDIA_ROOT: str = "uploads"
    MEDIA_URL: str = "/media"
    ATTACHMENT_MAX_BYTES: int = 10 * 1024 * 1024
    ATTACHMENT_ALLOWED_TYPES: list[str] = [t.value for t in AttachmentType]

    LOG_LEVEL: str = "INFO"
    HOST: str = "0.0.0.0"
    PORT: int = 5000

    @property
    def database_url(self) -> str:
        return (
            f"postgresql+asyncpg://{self.POSTGRES_USER}:{self.POSTGRES_PASSWORD}"
            f"@{self.DB_HOST}:{self.DB_PORT}/{self.POSTGRES_DB}"
        )

    model_config = ConfigDict(
        env_file=".env",
        extra="ignore",
    )


settings = Settings()  # type: ignore[call-arg]

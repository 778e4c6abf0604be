import logging
from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger("photolab")

class Settings(BaseSettings):
    APP_NAME: str = "Photolab Backend"
    HOST: str = "0.0.0.0"
    PORT: int = 5000
    CORS_ALLOW_ORIGINS: str = "*"
    STATIC_DIR: str = "public"
    UPLOAD_DIR: str = "uploads"
    PROCESS_MAX_CONCURRENCY: int = 4
    PREVIEW_MAX_WIDTH: int = 300
    DEFAULT_FORMAT: str = "jpeg"
    JPEG_QUALITY: int = 80
    MAX_UPLOAD_BYTES: int = 16 * 1024 * 1024
    MAX_PIXELS: int = 40_000_000
    UPLOAD_TTL_SECONDS: int = 3600
    LOG_LEVEL: str = "INFO"

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    @property
    def cors_origins(self) -> list[str]:
        if not self.CORS_ALLOW_ORIGINS:
            return ["*"]
        return [o.strip() for o in self.CORS_ALLOW_ORIGINS.split(",") if o.strip()]

def configure_logging(settings: Settings) -> None:
    logging.basicConfig(
        level=settings.LOG_LEVEL.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    logger.setLevel(settings.LOG_LEVEL.upper())

@lru_cache
def get_settings() -> Settings:
    return Settings()

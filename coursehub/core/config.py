from datetime import timedelta
from functools import lru_cache
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

BASE_DIR = Path(__file__).resolve().parent.parent.parent


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="COURSEHUB_",
        env_file=".env",
        extra="ignore",
    )

    PROJECT_NAME: str = "CourseHub"

    # Database
    DATABASE_URL: str = f"sqlite:///{BASE_DIR}/coursehub.db"

    # DEV ONLY default, override with COURSEHUB_SECRET_KEY
    SECRET_KEY: str = "change-me-in-production"
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60
    BCRYPT_ROUNDS: int = 12

    # Uploads
    UPLOAD_DIR: str = "uploads"
    UPLOAD_URL_PREFIX: str = "/uploads"
    ALLOWED_EXTENSIONS: set[str] = {
        ".pdf", ".doc", ".docx", ".ppt", ".pptx", ".txt", ".md",
        ".zip", ".py", ".png", ".jpg", ".jpeg",
    }

    LOG_LEVEL: str = "INFO"

    @property
    def access_token_expire(self) -> timedelta:
        return timedelta(minutes=self.ACCESS_TOKEN_EXPIRE_MINUTES)


@lru_cache()
def get_settings() -> Settings:
    return Settings()


settings = get_settings()

# app/core/config.py
import os
from pydantic_settings import BaseSettings
from pydantic import Field
from pydantic_settings import SettingsConfigDict
from typing import List
from functools import lru_cache

INSECURE_SECRET_KEY = "change-me-in-prod"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False, extra="ignore", populate_by_name=True)

    # Application Settings
    APP_NAME: str = "Account Auth API"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = False
    DOCS_ENABLED: bool = True
    ENVIRONMENT: str = os.environ.get("NODE_ENV", "development")

    # Server Settings
    HOST: str = "0.0.0.0"
    PORT: int = int(os.environ.get("PORT", 8000))

    # Database Settings
    DATABASE_URL: str = os.environ.get("DATABASE_URL", "sqlite:///./accounts.db")

    # Security Settings
    SECRET_KEY: str = Field(default=INSECURE_SECRET_KEY, alias="JWT_TOKEN_SECRET")
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60
    PASSWORD_HASH_ROUNDS: int = 10
    SESSION_COOKIE_NAME: str = "access_token"

    # OTP Settings
    OTP_EXPIRE_MINUTES: int = 5
    OTP_DELETE_AFTER_MINUTES: int = 10
    OTP_PURGE_INTERVAL_SECONDS: int = 60

    # CORS Settings
    ALLOWED_ORIGINS: str = os.environ.get("ALLOWED_ORIGINS", "*")
    ALLOWED_METHODS: str = os.environ.get("ALLOWED_METHODS", "GET,POST,PUT,PATCH,DELETE,OPTIONS")
    ALLOWED_HEADERS: str = os.environ.get("ALLOWED_HEADERS", "*")
    CORS_ALLOW_CREDENTIALS: bool = True

    # File Upload Settings
    MAX_FILE_SIZE: int = 10 * 1024 * 1024  # 10MB
    ALLOWED_IMAGE_TYPES: List[str] = ["image/jpeg", "image/png", "image/webp", "image/gif"]
    UPLOAD_DIR: str = "uploads"
    DEFAULT_UPLOAD_FOLDER: str = "photos"

    # Middleware settings
    GZIP_MIN_SIZE: int = 500

    # Email (Brevo) Settings
    BREVO_API_KEY: str = os.environ.get("BREVO_API_KEY", "")
    BREVO_SENDER_EMAIL: str = os.environ.get("BREVO_SENDER_EMAIL", "")
    BREVO_SENDER_NAME: str = os.environ.get("BREVO_SENDER_NAME", "Cliento")
    BREVO_API_URL: str = "https://api.brevo.com/v3/smtp/email"
    EMAIL_TIMEOUT_SECONDS: int = 15
    NOTIFICATION_QUEUE_SIZE: int = 1000

    # Logging Settings
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    # Base URL for uploaded file links
    BASE_URL: str = os.environ.get("BASE_URL", "http://localhost:8000")

    # Helper methods for list envs
    def _split_csv(self, value: str) -> List[str]:
        if value is None:
            return []
        value = value.strip()
        if value == "":
            return []
        return [item.strip() for item in value.split(",")]

    @property
    def allowed_origins_list(self) -> List[str]:
        return self._split_csv(self.ALLOWED_ORIGINS)

    @property
    def allowed_methods_list(self) -> List[str]:
        return self._split_csv(self.ALLOWED_METHODS)

    @property
    def allowed_headers_list(self) -> List[str]:
        return self._split_csv(self.ALLOWED_HEADERS)

    @property
    def is_production(self) -> bool:
        return self.ENVIRONMENT.lower() == "production"

    @property
    def uses_insecure_secret(self) -> bool:
        return not self.SECRET_KEY or self.SECRET_KEY == INSECURE_SECRET_KEY


@lru_cache()
def get_settings() -> Settings:
    s = Settings()
    # Normalize ALLOWED_ORIGINS if provided as comma-separated string env var CORS_ORIGINS
    cors_env = os.environ.get("CORS_ORIGINS")
    if cors_env:
        s.ALLOWED_ORIGINS = cors_env
    return s


settings: Settings = get_settings()

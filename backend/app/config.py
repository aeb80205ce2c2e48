# app/config.py
import os
from pydantic import BaseModel
from dotenv import load_dotenv

load_dotenv()  # Load environment variables from .env file


def _env_flag(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() in ("true", "1", "yes")


class Settings(BaseModel):
    # General app settings
    APP_NAME: str = "Social Posting API"
    env: str = os.getenv("ENV", "dev")
    log_level: str = os.getenv("LOG_LEVEL", "INFO")

    # Host & Port settings
    host: str = os.getenv("HOST", "0.0.0.0")
    port: int = int(os.getenv("PORT", "5000"))

    # CORS origins for the web client (comma separated)
    CORS_ORIGINS: list[str] = [
        o.strip() for o in os.getenv("CORS_ORIGIN", "http://localhost:3000").split(",") if o.strip()
    ]

    # Database (Tortoise URL format)
    database_url: str = os.getenv("DATABASE_URL", "sqlite://./social.sqlite3")
    generate_schemas: bool = _env_flag("GENERATE_SCHEMAS", "true")

    # Session tokens
    secret_key: str = os.getenv("SECRET_KEY", "dev-secret")
    access_token_expire_minutes: int = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", "60"))

    # Gemini moderation classifier
    gemini_api_key: str | None = os.getenv("GEMINI_API_KEY") or os.getenv("API_KEY")
    moderation_model: str = os.getenv("MODERATION_MODEL", "gemini-1.5-flash")
    moderation_api_base: str = os.getenv(
        "MODERATION_API_BASE", "https://generativelanguage.googleapis.com/v1beta"
    )
    moderation_timeout_seconds: float = float(os.getenv("MODERATION_TIMEOUT_SECONDS", "10"))

    # Media storage: "local" writes to upload_dir, "database" stores bytes in MediaObject rows
    media_backend: str = os.getenv("MEDIA_BACKEND", "local").lower()
    upload_dir: str = os.getenv("UPLOAD_DIR", "./uploads")


settings = Settings()  # Instantiate configuration

from functools import lru_cache
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        extra="ignore",
    )

    # ─────────── APP ───────────
    app_name: str = "PixelForge Nexus"
    environment: str = "dev"
    log_level: str = "INFO"

    # ─────────── API ───────────
    api_prefix: str = "/api"
    request_id_header: str = "X-Request-Id"
    frontend_url: str = "http://localhost:5173"

    # ─────────── DATABASE ───────────
    database_url: str

    # ─────────── JWT / AUTH ───────────
    jwt_secret_key: str
    jwt_algorithm: str = "HS256"
    jwt_access_token_minutes: int = 1440  # 24 hours
    bcrypt_rounds: int = 12

    # ─────────── UPLOADS ───────────
    upload_dir: str = "./uploads"
    max_upload_bytes: int = 10 * 1024 * 1024

    # ─────────── RATE LIMIT ───────────
    rate_limit_enabled: bool = True
    rate_limit_requests: int = 100
    rate_limit_window_seconds: int = 15 * 60


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()

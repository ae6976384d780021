"""
Application configuration using Pydantic-Settings.
All settings can be overridden via environment variables or .env file.
"""

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # ── Storage ───────────────────────────────────────────────────────────
    STORAGE_BACKEND: str = "sql"     # memory | file | sql
    DATABASE_URL: str = "sqlite:///./parking.db"
    DATA_FILE: str = "db.json"       # used by the file backend only

    # ── Uploads ───────────────────────────────────────────────────────────
    UPLOAD_DIR: str = "uploads"

    # ── Network ───────────────────────────────────────────────────────────
    BACKEND_IP: str = "0.0.0.0"
    BACKEND_PORT: int = 3000

    # ── Parking layout ────────────────────────────────────────────────────
    SPACE_CODES: list[str] = ["A1", "A2", "A3", "A4", "A5", "B1", "B2", "B3", "B4", "B5"]

    # ── Logging ───────────────────────────────────────────────────────────
    LOG_LEVEL: str = "INFO"
    LOG_DIR: str = "logs"

    class Config:
        env_file = ".env"
        extra = "ignore"


settings = Settings()

import os
from pathlib import Path
from typing import List

from dotenv import load_dotenv
from pydantic_settings import BaseSettings

# Always load .env from root
BASE_DIR = Path(__file__).resolve().parent.parent.parent
load_dotenv(BASE_DIR / ".env")


class Settings(BaseSettings):
    APP_NAME: str = "Contract Ledger API"
    APP_VERSION: str = "1.0.0"
    HOST: str = os.getenv("HOST", "0.0.0.0")
    PORT: int = int(os.getenv("PORT", 8002))
    RELOAD: bool = os.getenv("RELOAD", "False").lower() == "true"

    # Database
    DATA_DIR: Path = Path(os.getenv("DATA_DIR", str(BASE_DIR / "data")))
    DATABASE_URL: str = os.getenv(
        "DATABASE_URL", f"sqlite:///{BASE_DIR / 'data' / 'app.db'}")
    # transaction() takes the SQLite write lock up front (serialized read-modify-write)
    SERIALIZE_WRITES: bool = os.getenv(
        "SERIALIZE_WRITES", "True").lower() == "true"

    # Excel backups
    BACKUP_DIR: Path = Path(
        os.getenv("BACKUP_DIR", str(BASE_DIR / "data" / "backup")))

    # CORS
    CORS_ORIGINS: str = os.getenv(
        "CORS_ORIGINS", "http://localhost:8080,http://localhost:5173")

    # Email
    SMTP_HOST: str | None = os.getenv("SMTP_HOST")
    SMTP_PORT: int = int(os.getenv("SMTP_PORT", 587))
    SMTP_USERNAME: str | None = os.getenv("SMTP_USERNAME")
    SMTP_PASSWORD: str | None = os.getenv("SMTP_PASSWORD")
    SMTP_USE_SSL: bool = os.getenv("SMTP_USE_SSL", "False").lower() == "true"
    EMAIL_SENDER: str = os.getenv("EMAIL_SENDER", "noreply@localhost")

    # Notifications
    NOTIFY_EMAIL_TO: str | None = os.getenv("NOTIFY_EMAIL_TO")
    NOTIFY_CONTRACT_FULL: bool = os.getenv(
        "NOTIFY_CONTRACT_FULL", "True").lower() == "true"
    NOTIFY_COOLDOWN_HOURS: int = int(os.getenv("NOTIFY_COOLDOWN_HOURS", 24))

    @property
    def cors_origins_list(self) -> List[str]:
        """Parse CORS origins string into list"""
        return [origin.strip() for origin in self.CORS_ORIGINS.split(",") if origin.strip()]

    @property
    def notify_recipients(self) -> List[str]:
        if not self.NOTIFY_EMAIL_TO:
            return []
        return [email.strip() for email in self.NOTIFY_EMAIL_TO.split(",") if email.strip()]

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"


settings = Settings()

# Ensure data directories exist
settings.DATA_DIR.mkdir(parents=True, exist_ok=True)
settings.BACKUP_DIR.mkdir(parents=True, exist_ok=True)

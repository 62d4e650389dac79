from pathlib import Path
from typing import List
from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    BASE_DIR: Path = Path(__file__).resolve().parent.parent
    # Data Paths
    DATA_DIR: Path = BASE_DIR / "data"

    # File Names
    DATABASE_FILE: str = "matches.db"

    # Storage
    STORE_BACKEND: str = "local"  # "local" (SQLite file) or "supabase"
    DATABASE_URL: str = ""  # full SQLAlchemy URL, overrides DATABASE_FILE
    MATCHES_TABLE: str = "matches"

    # File Paths (computed properties)
    @property
    def DATABASE_PATH(self) -> Path:
        return self.DATA_DIR / self.DATABASE_FILE

    @property
    def STORE_URL(self) -> str:
        return self.DATABASE_URL or f"sqlite:///{self.DATABASE_PATH}"

    # Supabase (managed remote backend)
    SUPABASE_URL: str = Field(
        "", validation_alias=AliasChoices("SUPABASE_URL", "NEXT_PUBLIC_SUPABASE_URL")
    )
    SUPABASE_KEY: str = Field(
        "",
        validation_alias=AliasChoices(
            "SUPABASE_KEY", "SUPABASE_ANON_KEY", "NEXT_PUBLIC_SUPABASE_ANON_KEY"
        ),
    )

    # Update/Delete of an unknown id: 404 when on, silent success when off
    STRICT_EXISTENCE_CHECKING: bool = False

    # Application Settings
    API_HOST: str = "0.0.0.0"
    API_PORT: int = 8000
    APP_TITLE: str = "Match Tracker"
    VERSION: str = "1.0.0"
    CORS_ORIGINS: List[str] = ["*"]
    LOG_LEVEL: str = "INFO"

    # Dashboard
    API_BASE_URL: str = "http://127.0.0.1:8000"
    API_TIMEOUT: float = 10.0

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"  # Ignore extra variables in .env
    )

    def ensure_directories(self):
        """Create necessary directories if they don't exist."""
        self.DATA_DIR.mkdir(parents=True, exist_ok=True)


# Global settings instance
settings = Settings()
settings.ensure_directories()

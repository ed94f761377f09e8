from pathlib import Path
from typing import List, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


BASE_DIR = Path(__file__).resolve().parents[1]


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=BASE_DIR / ".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    # Server Settings
    host: str = Field(default="127.0.0.1", description="Server host")
    port: int = Field(default=8000, description="Server port")
    log_level: str = Field(default="INFO", description="Logging level")
    cors_allow_origins: List[str] = Field(
        default_factory=lambda: ["*"],
        description="Origins allowed by the CORS middleware",
    )

    # Caller identity
    caller_header: str = Field(
        default="X-Account",
        description="Request header carrying the authenticated account address",
    )

    # Asset ledger
    ledger_seed_path: Optional[Path] = Field(
        default=None,
        description="JSON file used to seed the in-memory asset ledger at startup",
    )

    @property
    def has_ledger_seed(self) -> bool:
        return self.ledger_seed_path is not None


# Global settings instance
settings = Settings()

"""Configuration management using Pydantic Settings"""

from pathlib import Path
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict

BUNDLED_RATE_TABLE = Path(__file__).resolve().parent / "data" / "state_rates.json"


class Settings(BaseSettings):
    """Application configuration loaded from environment variables"""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Service
    service_name: str = "ma-wc-engine"
    log_level: str = "INFO"

    # Rate table source
    rate_table_path: Path = BUNDLED_RATE_TABLE
    rate_table_url: Optional[str] = None  # published state_rates.json, overrides the file when set

    # HTTP Client
    http_timeout_seconds: float = 5.0
    rate_table_fetch_retries: int = 3
    rate_table_backoff_base: float = 1.0  # Exponential backoff base in seconds

    # Calculation defaults
    default_proration: str = "days"


settings = Settings()

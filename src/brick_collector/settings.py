from pathlib import Path
from typing import Literal, Optional, List

from pydantic import AnyHttpUrl, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class RebrickableSettings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="REBRICKABLE_", extra="ignore")
    api_key: SecretStr
    api_base_url: AnyHttpUrl = "https://rebrickable.com/api/v3/"

class Settings(BaseSettings):

    # ---- Local storage ----
    data_root: Path = Path("data")
    storage_path: Path = data_root / "brick_collector.json"
    export_dir: Path = data_root / "exports"

    # ---- app/runtime ----
    env: Literal["dev", "staging", "prod"] = "dev"
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    verify_ssl: bool = True
    request_timeout: float = 10.0

    # ---- API server configuration ----
    api_host: str = "127.0.0.1"
    api_port: int = 8000
    api_reload: bool = False
    cors_origins: List[str] = ["*"]

    model_config = SettingsConfigDict(
        env_file = ".env",
        env_prefix="APP_",      # APP_STORAGE_PATH, APP_LOG_LEVEL, etc.
        env_nested_delimiter='__',
        extra = "ignore"
    )

    # ---- integrations ----
    rebrickable: Optional[RebrickableSettings] = None  # filled from REBRICKABLE_* on demand


def get_settings() -> Settings:
    """Accessor kept as a function so tests can monkeypatch it."""
    return Settings()


def get_rebrickable_settings(cfg: Optional[Settings] = None) -> RebrickableSettings:
    """Return the Rebrickable credentials, reading REBRICKABLE_* when not nested in APP_*."""
    cfg = cfg or get_settings()
    if cfg.rebrickable is not None:
        return cfg.rebrickable
    return RebrickableSettings()

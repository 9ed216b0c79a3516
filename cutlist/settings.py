from pathlib import Path
from typing import List

from pydantic_settings import BaseSettings, SettingsConfigDict

ENV_PATH = Path(__file__).resolve().parent.parent / ".env"


class Settings(BaseSettings):
    # --- App ---
    app_name: str = "Cut List Optimizer"
    log_level: str = "INFO"
    cors_origins: List[str] = ["*"]

    # --- Optimizer defaults ---
    default_kerf: float = 0.125

    # --- Limits ---
    # total part + sheet unit items accepted per request
    max_units: int = 5000

    model_config = SettingsConfigDict(
        env_prefix="CUTLIST_",
        env_file=ENV_PATH,
        env_file_encoding="utf-8",
        extra="ignore"
    )


settings = Settings()

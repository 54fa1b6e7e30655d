"""
Menuplan - Configuration and settings.

Settings are read from the environment and an optional .env file.
"""

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import BaseModel
from pydantic_settings import BaseSettings, SettingsConfigDict


class OfferStore(BaseModel):
    """A supermarket whose promotional flyers are synced."""

    id: str
    name: str
    url: str


DEFAULT_OFFER_STORES = [
    OfferStore(
        id="008400",
        name="Conad Ponte Abbadesse",
        url="https://www.conad.it/ricerca-negozi/conad-piazzale-cardinal-bessarione-99-47521-cesena--008400",
    ),
    OfferStore(
        id="007226",
        name="Conad Montefiore",
        url="https://www.conad.it/ricerca-negozi/spazio-conad-via-leopoldo-lucchi-525-47521-cesena--007226",
    ),
]


class Settings(BaseSettings):
    """
    Application settings.

    Provider credentials, pool composition, storage location and the
    timing knobs of the rotation engine and the offer sync job.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Gemini through the OpenAI-compatible endpoint
    google_api_key: str = ""
    gemini_base_url: str = "https://generativelanguage.googleapis.com/v1beta/openai/"

    # Optional local provider, appended after the remote pool
    ollama_base_url: str = "http://localhost:11434"
    ollama_model: str | None = None
    ollama_timeout_seconds: float = 300.0

    # Provider pools
    chef_models: list[str] = [
        "gemini-2.0-flash",
        "gemini-flash-latest",
        "gemini-pro-latest",
        "gemini-3-flash-preview",
        "gemini-2.0-flash-exp",
    ]
    worker_models: list[str] = [
        "gemini-flash-latest",
        "gemini-flash-lite-latest",
        "gemini-2.0-flash-lite-preview",
    ]

    # Rotation timing
    rate_limit_retry_threshold_seconds: float = 60.0
    rate_limit_default_delay_seconds: float = 10.0
    inter_attempt_delay_seconds: float = 1.0

    # Storage
    data_file_path: Path = Path("tracker_data.json")

    # Catalog
    catalog_path: Path | None = None
    legacy_suffix_matching: bool = True

    # Recipe lookup
    recipe_search_url: str = "https://www.giallozafferano.it/ricerca-ricette/{query}"
    recipe_lookup_timeout_seconds: float = 5.0
    recipe_lookup_pause_seconds: float = 0.5

    # Offer sync
    offer_stores: list[OfferStore] = DEFAULT_OFFER_STORES
    offer_throttle_seconds: float = 6.0
    offer_min_text_length: int = 200
    sync_stale_after_seconds: float = 900.0

    # Application
    menuplan_env: Literal["development", "production"] = "development"
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    menuplan_log_prompts: bool = False
    session_cookie_name: str = "user_role"

    @property
    def is_development(self) -> bool:
        return self.menuplan_env == "development"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


class _SettingsProxy:
    """Lazy proxy for settings to avoid loading .env at import time."""

    _instance: Settings | None = None

    def __getattr__(self, name: str):
        if self._instance is None:
            self._instance = get_settings()
        return getattr(self._instance, name)


settings = _SettingsProxy()

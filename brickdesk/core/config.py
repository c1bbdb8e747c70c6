from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_API_BASE_URL = "http://localhost:5000"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_prefix="BD_", extra="ignore")

    app_name: str = "Brickdesk Order Engine"
    env: str = "dev"
    log_level: str = "INFO"

    api_base_url: str = DEFAULT_API_BASE_URL
    api_token: str | None = None
    api_timeout_seconds: int = 15

    # static is only meant for tests and offline quoting
    catalog_backend: Literal["http", "static"] = "http"
    stock_projection_backend: Literal["http", "catalog"] = "http"

    receipt_printing_enabled: bool = True
    allow_negative_totals: bool = Field(
        default=False,
        description="Accept orders whose discounts push a line or the order total below zero",
    )
    unit_price_places: int = Field(default=2, ge=0, le=6)

    def model_post_init(self, __context) -> None:
        if self.env.lower() == "dev":
            return
        if "localhost" in self.api_base_url or "127.0.0.1" in self.api_base_url:
            raise ValueError("BD_API_BASE_URL must point at the remote API outside dev mode")


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()

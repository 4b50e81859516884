# storefront/settings.py
from __future__ import annotations
from typing import List, Optional
from pydantic import Field, AliasChoices
from pydantic_settings import BaseSettings, SettingsConfigDict
import json
import os

DEFAULT_CORS_ORIGINS = ["*"]


def _parse_cors(v: Optional[str | List[str]]) -> List[str]:
    """
    Accept JSON array (e.g. '["http://localhost:5173"]') or
    comma-separated string ('http://localhost:5173,http://127.0.0.1:5173').
    """
    if v is None:
        return list(DEFAULT_CORS_ORIGINS)
    if isinstance(v, list):
        return v
    s = v.strip()
    if not s:
        return list(DEFAULT_CORS_ORIGINS)
    # try JSON first
    try:
        parsed = json.loads(s)
    except ValueError:
        parsed = None
    if isinstance(parsed, list) and all(isinstance(x, str) for x in parsed):
        return parsed
    # fallback: comma separated
    return [p.strip() for p in s.split(",") if p.strip()]


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_ignore_empty=True,
        extra="ignore",   # ignore unknown env keys instead of raising
    )

    # --- API ---
    cors_origins_raw: Optional[str | List[str]] = Field(
        default=None, validation_alias=AliasChoices("CORS_ORIGINS",)
    )
    log_level: str = Field(default="INFO", validation_alias=AliasChoices("LOG_LEVEL",))

    # --- Firebase ---
    firebase_project_id: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("FIREBASE_PROJECT_ID",)
    )
    google_application_credentials: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("GOOGLE_APPLICATION_CREDENTIALS",)
    )

    # --- Collections ---
    products_collection: str = Field(
        default="products", validation_alias=AliasChoices("PRODUCTS_COLLECTION",)
    )
    carts_collection: str = Field(
        default="carts", validation_alias=AliasChoices("CARTS_COLLECTION",)
    )
    orders_collection: str = Field(
        default="orders", validation_alias=AliasChoices("ORDERS_COLLECTION",)
    )

    # --- Checkout ---
    # off: unconditional decrements, stock may go negative
    # on: floor-checked decrements, short orders are rejected and compensated
    enforce_stock_floor: bool = Field(
        default=False, validation_alias=AliasChoices("ENFORCE_STOCK_FLOOR",)
    )

    @property
    def cors_origins(self) -> List[str]:
        return _parse_cors(self.cors_origins_raw)

# singleton
settings = Settings()

# Make sure GOOGLE_APPLICATION_CREDENTIALS is exported for firebase_admin
if settings.google_application_credentials:
    os.environ["GOOGLE_APPLICATION_CREDENTIALS"] = settings.google_application_credentials

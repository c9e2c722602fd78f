"""Application configuration."""

import os

from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")

DEFAULT_KITCHEN_SITES = ("berlin", "munich", "koln")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    supabase_url: str
    supabase_service_key: str
    daily_records_table: str = "daily_records"
    kitchen_records_table: str = "kitchen_records"
    kitchen_sites: str | None = None
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )


def parse_kitchen_sites(raw: str | None) -> tuple[str, ...]:
    """Parse the ordered list of kitchen sites from env."""
    if raw is None:
        return DEFAULT_KITCHEN_SITES
    sites: list[str] = []
    for chunk in raw.split(","):
        value = chunk.strip().lower()
        if value and value not in sites:
            sites.append(value)
    return tuple(sites) or DEFAULT_KITCHEN_SITES

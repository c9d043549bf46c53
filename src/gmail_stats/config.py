"""Application configuration utilities."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from functools import lru_cache
from pathlib import Path
from typing import Dict, Optional

from dotenv import load_dotenv

# Load secrets from a .env file if present. The file is expected at the project root.
PROJECT_ROOT = Path(__file__).resolve().parents[2]
load_dotenv(PROJECT_ROOT / ".env")


def _get_int(name: str, *, default: int) -> int:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError as exc:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from exc


def _get_float(name: str, *, default: float) -> float:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError as exc:
        raise ValueError(f"{name} must be a number, got {raw!r}") from exc


@dataclass(frozen=True)
class WeaviateSettings:
    """Connection parameters for the Weaviate instance holding the stats table."""

    host: str
    port: int
    grpc_port: int
    api_key: Optional[str] = None

    @property
    def headers(self) -> Optional[Dict[str, str]]:
        if not self.api_key:
            return None
        return {"X-API-KEY": self.api_key}


def load_weaviate_settings() -> WeaviateSettings:
    """Read Weaviate connection settings from the environment."""
    return WeaviateSettings(
        host=os.getenv("WEAVIATE_HOST", "localhost"),
        port=_get_int("WEAVIATE_PORT", default=8080),
        grpc_port=_get_int("WEAVIATE_GRPC_PORT", default=50051),
        api_key=os.getenv("WEAVIATE_API_KEY") or None,
    )


@dataclass(frozen=True)
class Settings:
    """Strongly typed configuration wrapper."""

    google_client_id: str = field(default_factory=lambda: os.getenv("GOOGLE_CLIENT_ID", ""))
    google_client_secret: str = field(default_factory=lambda: os.getenv("GOOGLE_CLIENT_SECRET", ""))
    google_refresh_token: str | None = field(default_factory=lambda: os.getenv("GOOGLE_REFRESH_TOKEN"))
    gmail_user_id: str = field(default_factory=lambda: os.getenv("GMAIL_USER_ID", "me"))
    stats_collection: str = field(default_factory=lambda: os.getenv("STATS_COLLECTION", "GmailHourlyStats"))
    provider_domain: str = field(default_factory=lambda: os.getenv("PROVIDER_DOMAIN", "gmail.com"))
    mx_host_marker: str = field(default_factory=lambda: os.getenv("MX_HOST_MARKER", "google.com"))
    dns_resolver_url: str = field(
        default_factory=lambda: os.getenv("DNS_RESOLVER_URL", "https://dns.google/resolve")
    )
    resolver_timeout: float = field(default_factory=lambda: _get_float("RESOLVER_TIMEOUT", default=5.0))
    weaviate: WeaviateSettings = field(default_factory=load_weaviate_settings)

    @property
    def google_scopes(self) -> tuple[str, ...]:
        """Return the OAuth scopes required for Gmail access."""
        return ("https://www.googleapis.com/auth/gmail.readonly",)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return cached settings instance."""
    return Settings()

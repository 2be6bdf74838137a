"""
Simple configuration management.

The ``Settings`` dataclass reads configuration directly from
environment variables.  Defaults are provided for all fields so the
API can be started locally without any setup.  In a production
deployment you should at least override ``SECRET_KEY`` and set
``ENVIRONMENT=production``.
"""

import os
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import List, Mapping


# Static exchange rates relative to USD.  Served by ``GET /rates`` and
# used whenever every external rate provider fails.  The mapping is
# read‑only; the rate aggregator receives it as a constructor argument.
FALLBACK_RATES: Mapping[str, float] = MappingProxyType({"USD": 1.0, "EUR": 0.92, "CNY": 7.3})


def _split_csv(value: str) -> List[str]:
    return [item.strip() for item in value.split(",") if item.strip()]


@dataclass
class Settings:
    """Application settings loaded from environment variables."""

    project_name: str = os.getenv("PROJECT_NAME", "Trip Planner API")
    api_version: str = os.getenv("API_VERSION", "1.0.0")
    # ``development`` exposes exception messages in 500 responses.
    environment: str = os.getenv("ENVIRONMENT", "production").lower()
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    log_file: str = os.getenv("LOG_FILE", "")

    secret_key: str = os.getenv("SECRET_KEY", "change_me")
    # Session tokens are valid for 7 days.
    access_token_expire_minutes: int = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", str(60 * 24 * 7)))
    algorithm: str = os.getenv("ALGORITHM", "HS256")
    password_hash_iterations: int = int(os.getenv("PASSWORD_HASH_ITERATIONS", "100000"))

    # Path for the SQLite database.  A relative path is resolved against
    # the project root by the ``db`` module; ``:memory:`` is passed
    # through unchanged.
    database_url: str = os.getenv("DATABASE_URL", "trip_planner.db")

    # Comma‑separated list of origins allowed by CORS.
    cors_origins: List[str] = field(
        default_factory=lambda: _split_csv(os.getenv("CORS_ORIGINS", "http://localhost:3000"))
    )

    # Request budgets per client address.  The global budget applies to
    # every API route, the auth budget additionally to register/login.
    rate_limit_window_seconds: int = int(os.getenv("RATE_LIMIT_WINDOW_SECONDS", str(15 * 60)))
    rate_limit_max_requests: int = int(os.getenv("RATE_LIMIT_MAX_REQUESTS", "100"))
    auth_rate_limit_max_requests: int = int(os.getenv("AUTH_RATE_LIMIT_MAX_REQUESTS", "5"))

    # Seconds granted to each external exchange‑rate provider.
    rate_provider_timeout: float = float(os.getenv("RATE_PROVIDER_TIMEOUT", "15"))
    fallback_rates: Mapping[str, float] = field(default_factory=lambda: FALLBACK_RATES)
    # Longest date range (in days, both ends included) ``/timeseries`` accepts.
    timeseries_max_days: int = int(os.getenv("TIMESERIES_MAX_DAYS", "366"))

    host: str = os.getenv("HOST", "0.0.0.0")
    port: int = int(os.getenv("PORT", "3000"))

    @property
    def debug(self) -> bool:
        return self.environment == "development"


# Instantiate settings once so other modules can import it without
# repeatedly reading environment variables.  Environment variables
# should therefore be set before importing this module.
settings = Settings()

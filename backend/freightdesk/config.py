from __future__ import annotations

import os
from functools import lru_cache
from pydantic import BaseModel
from dotenv import load_dotenv

# Load .env for local development
load_dotenv()


class Settings(BaseModel):
    app_env: str = os.getenv("APP_ENV", "local")
    cors_allowed_origins: str = os.getenv("CORS_ALLOWED_ORIGINS", "*")
    # Optional regex to allow wildcard subdomains (e.g., *.vercel.app)
    cors_allowed_origin_regex: str | None = os.getenv("CORS_ALLOWED_ORIGIN_REGEX")

    # Stored order records (shipped-orders REST endpoint)
    records_api_base_url: str | None = os.getenv("RECORDS_API_BASE_URL")
    records_api_timeout_seconds: float = float(
        os.getenv("RECORDS_API_TIMEOUT_SECONDS", "15"))

    # IANA zone used as the operator's local clock for pickup timestamps.
    # Unset means the host's local zone.
    local_timezone: str | None = os.getenv("LOCAL_TIMEZONE")

    log_level: str = os.getenv("LOG_LEVEL", "INFO")


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()

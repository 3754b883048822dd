from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Optional

class Settings(BaseSettings):
    # App Settings
    app_name: str = "Flight Compensation Eligibility"
    env: str = "development"
    log_level: str = "INFO"

    # Database
    database_url: str = "sqlite:///./compensation.db"
    reference_database_url: Optional[str] = None  # Static airports/airlines DB, defaults to database_url
    db_pool_size: int = 5
    db_max_overflow: int = 10

    # Cache
    redis_url: Optional[str] = None  # In-process TTL store when unset
    cache_ttl_seconds: int = 600

    # Outbound HTTP
    provider_timeout_seconds: float = 15.0

    # Third Party: OAG (provider A)
    oag_base_url: str = "https://api.oag.com"
    oag_subscription_key: str = ""

    # Third Party: FlightStats (provider B)
    flightstats_base_url: str = "https://api.flightstats.com"
    flightstats_app_id: str = ""
    flightstats_app_key: str = ""

    # Third Party: FlightAware AeroAPI (provider C)
    aeroapi_base_url: str = "https://aeroapi.flightaware.com/aeroapi"
    aeroapi_key: str = ""

    # CORS
    cors_origins: str = ""  # Comma-separated production origins

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

settings = Settings()

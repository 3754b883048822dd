from fastapi import Request
import httpx

from app.config import Settings
from app.database import ReferenceSessionLocal, SessionLocal
from app.services.eligibility_service import EligibilityService
from app.services.reference_service import ReferenceService
from flight_data.cache import EligibilityCache, InMemoryCacheStore, RedisCacheStore
from flight_data.providers import AeroApiProvider, FlightStatsProvider, OagProvider, ProviderManager


def build_cache(settings: Settings) -> EligibilityCache:
    store = RedisCacheStore(settings.redis_url) if settings.redis_url else InMemoryCacheStore()
    return EligibilityCache(store, ttl_seconds=settings.cache_ttl_seconds)


def build_provider_manager(settings: Settings, client: httpx.AsyncClient, reference: ReferenceService) -> ProviderManager:
    # Priority order matters: first validated record wins
    return ProviderManager([
        OagProvider(client, reference, settings.oag_base_url, settings.oag_subscription_key),
        FlightStatsProvider(client, settings.flightstats_base_url, settings.flightstats_app_id, settings.flightstats_app_key),
        AeroApiProvider(client, settings.aeroapi_base_url, settings.aeroapi_key),
    ])


def build_eligibility_service(settings: Settings, client: httpx.AsyncClient) -> EligibilityService:
    reference = ReferenceService(ReferenceSessionLocal)
    return EligibilityService(
        cache=build_cache(settings),
        manager=build_provider_manager(settings, client, reference),
        session_factory=SessionLocal,
        reference=reference,
    )


def get_eligibility_service(request: Request) -> EligibilityService:
    return request.app.state.eligibility_service

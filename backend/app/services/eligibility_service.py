import logging
from datetime import date
from typing import Callable, Optional

from fastapi.concurrency import run_in_threadpool
from sqlalchemy.orm import Session

from app.schemas.eligibility_schema import AirportResponse, EligibilityResponse, FlightDateResponse
from app.services.reference_service import ReferenceService
from flight_data.cache import EligibilityCache
from flight_data.canonical import CanonicalFlightRecord, FlightQuery
from flight_data.eligibility import evaluate
from flight_data.persistence import FlightRepository
from flight_data.providers.provider_manager import ProviderManager
from flight_data.single_flight import SingleFlight

logger = logging.getLogger("EligibilityService")


class EligibilityService:
    """
    Answers the compensation eligibility question for one flight.

    Flow: cache lookup -> (miss) airline code mapping -> provider failover
    -> cache write + dedup-checked persistence -> response.
    """

    def __init__(
        self,
        cache: EligibilityCache,
        manager: ProviderManager,
        session_factory: Callable[[], Session],
        reference: Optional[ReferenceService] = None,
    ):
        self._cache = cache
        self._manager = manager
        self._session_factory = session_factory
        self._reference = reference
        self._single_flight = SingleFlight()

    async def check(self, carrier_code: str, flight_code: str, flight_date: date) -> EligibilityResponse:
        carrier = carrier_code.upper()
        query = FlightQuery(flight_code=flight_code, carrier_code=carrier, date=flight_date)
        cache_key = EligibilityCache.key_for(query)

        cached = await self._cache.get(cache_key)
        if cached is not None:
            logger.info(f"Cache hit for {cache_key}")
            return build_response(cached)

        record = await self._single_flight.run(cache_key, lambda: self._resolve_and_store(query, cache_key))
        if record is None:
            return EligibilityResponse(is_eligible=False)
        return build_response(record)

    async def _resolve_and_store(self, query: FlightQuery, cache_key: str) -> Optional[CanonicalFlightRecord]:
        carrier = await run_in_threadpool(self._provider_carrier_code, query.carrier_code)
        provider_query = query.model_copy(update={"carrier_code": carrier})

        record = await self._manager.resolve(provider_query)
        if record is None:
            return None

        await self._cache.set(cache_key, record)
        await run_in_threadpool(self._persist, record, query.ident, query.date)
        return record

    def log_summary(self):
        self._manager.log_summary()

    async def aclose(self) -> None:
        await self._cache.aclose()

    def _provider_carrier_code(self, iata: str) -> str:
        """Providers are queried with the ICAO carrier code when the reference data knows it."""
        if self._reference is None:
            return iata
        try:
            airline = self._reference.lookup_airline_by_iata(iata)
        except Exception as e:
            logger.error(f"Airline lookup failed for {iata}: {e}")
            return iata
        return airline.icao if airline else iata

    def _persist(self, record: CanonicalFlightRecord, flight_number: str, flight_date: date) -> None:
        db = self._session_factory()
        try:
            FlightRepository(db).save_if_absent(record, flight_number, flight_date)
        except Exception as e:
            logger.error(f"Persisting flight {flight_number} on {flight_date} failed: {e}")
            db.rollback()
        finally:
            db.close()


def build_response(record: CanonicalFlightRecord) -> EligibilityResponse:
    outcome = evaluate(record)
    if not outcome.is_eligible:
        return EligibilityResponse(is_eligible=False)

    return EligibilityResponse(
        is_eligible=True,
        reason=outcome.reason,
        delay_minutes=outcome.delay_minutes,
        departure_date=FlightDateResponse(utc=record.departure_date_utc, local=record.departure_date_local),
        arrival_date=FlightDateResponse(utc=record.arrival_date_utc, local=record.arrival_date_local),
        departure_airport=AirportResponse(**record.departure_airport.model_dump()),
        arrival_airport=AirportResponse(**record.arrival_airport.model_dump()),
    )

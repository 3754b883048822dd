"""
Abstract base class for all flight status providers.
Every provider must map its payload into the canonical flight record
so the eligibility rule stays provider-agnostic.
"""
import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional, Protocol

import httpx

from flight_data.canonical import AirportRef, CanonicalFlightRecord, FlightQuery, validate_canonical
from flight_data.eligibility import outcome_for


class MappingError(Exception):
    """Provider payload cannot be mapped to the canonical shape."""


class ReferenceLookup(Protocol):
    def lookup_airport_by_icao(self, code: str) -> Optional[AirportRef]:
        ...


class FlightStatusProvider(ABC):
    """
    Contract that every flight status provider must satisfy.

    All providers MUST:
      - Return a validated CanonicalFlightRecord or None
      - Never raise from resolve(): network errors, non-2xx responses,
        malformed payloads and invalid mappings all become None
      - Handle their own authentication
    """

    logger = logging.getLogger("Provider")

    def __init__(self, client: httpx.AsyncClient):
        self._client = client

    @property
    @abstractmethod
    def provider_name(self) -> str:
        """Unique identifier for this provider (e.g. 'oag', 'flightstats', 'aeroapi')."""
        ...

    @abstractmethod
    def is_available(self) -> bool:
        """False if credentials are missing."""
        ...

    @abstractmethod
    async def _fetch(self, query: FlightQuery) -> Optional[Dict[str, Any]]:
        """
        Provider-specific lookup and mapping.

        Returns a canonical candidate dict, or None when the provider has
        no matching flight. May raise; resolve() converts any fault to None.
        """
        ...

    async def resolve(self, query: FlightQuery) -> Optional[CanonicalFlightRecord]:
        if not self.is_available():
            self.logger.debug(f"[{self.provider_name}] No credentials configured")
            return None

        try:
            candidate = await self._fetch(query)
        except httpx.HTTPStatusError as e:
            self.logger.error(f"[{self.provider_name}] HTTP {e.response.status_code} for {query.ident} on {query.date}")
            return None
        except httpx.HTTPError as e:
            self.logger.error(f"[{self.provider_name}] Transport error for {query.ident} on {query.date}: {e}")
            return None
        except MappingError as e:
            self.logger.warning(f"[{self.provider_name}] Unusable payload for {query.ident} on {query.date}: {e}")
            return None
        except Exception as e:
            self.logger.error(f"[{self.provider_name}] Error resolving {query.ident} on {query.date}: {e}")
            return None

        if candidate is None:
            self.logger.info(f"[{self.provider_name}] No flight found for {query.ident} on {query.date}")
            return None

        return validate_canonical(candidate, source=self.provider_name)

    async def _get_json(self, url: str, **kwargs) -> Any:
        response = await self._client.get(url, **kwargs)
        response.raise_for_status()
        return response.json()


def build_candidate(
    *,
    cancelled: bool,
    delay_minutes: int,
    departure_utc: Optional[str],
    departure_local: Optional[str],
    arrival_utc: Optional[str],
    arrival_local: Optional[str],
    departure_airport: Optional[Dict[str, Any]],
    arrival_airport: Optional[Dict[str, Any]],
) -> Dict[str, Any]:
    """Assemble a canonical candidate from one provider observation."""
    outcome = outcome_for(cancelled, delay_minutes)
    return {
        "isEligible": outcome.is_eligible,
        "reason": outcome.reason,
        "delayMinutes": outcome.delay_minutes,
        "arrivalDateUtc": arrival_utc,
        "arrivalDateLocal": arrival_local,
        "departureDateUtc": departure_utc,
        "departureDateLocal": departure_local,
        "departureAirport": departure_airport,
        "arrivalAirport": arrival_airport,
    }


def airport_payload(ref: Optional[AirportRef]) -> Optional[Dict[str, Any]]:
    return ref.model_dump() if ref is not None else None

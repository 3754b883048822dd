"""
FlightAware AeroAPI provider — last-resort source.

AeroAPI has no per-date flight lookup; it answers a time-range query
for an ident. We ask for the UTC day around the requested date and keep
the flight whose scheduled departure falls on that date.

Endpoint used:
  - GET /flights/{ident}?start={iso}&end={iso}
"""
import logging
from typing import Any, Dict, List, Optional

import httpx

from flight_data.canonical import FlightQuery
from flight_data.providers.base import FlightStatusProvider, MappingError, build_candidate
from flight_data.time_utils import is_same_utc_date, parse_iso, to_local, to_utc_iso, utc_day_window

logger = logging.getLogger("Provider.AeroAPI")


class AeroApiProvider(FlightStatusProvider):
    """Tertiary provider using the FlightAware AeroAPI v4 flights endpoint."""

    logger = logger

    def __init__(self, client: httpx.AsyncClient, base_url: str, api_key: str):
        super().__init__(client)
        self._base_url = base_url.rstrip("/")
        self._api_key = api_key

    @property
    def provider_name(self) -> str:
        return "aeroapi"

    def is_available(self) -> bool:
        return bool(self._api_key)

    async def _fetch(self, query: FlightQuery) -> Optional[Dict[str, Any]]:
        start, end = utc_day_window(query.date)
        data = await self._get_json(
            f"{self._base_url}/flights/{query.ident.upper()}",
            params={"start": start, "end": end},
            headers={"x-apikey": self._api_key, "Accept": "application/json"},
        )

        flights: List[Dict[str, Any]] = data.get("flights") or []
        match = next(
            (f for f in flights if is_same_utc_date(f.get("scheduled_out"), query.date)),
            None,
        )
        if match is None:
            return None

        return self._normalize_flight(match)

    def _normalize_flight(self, flight: Dict[str, Any]) -> Dict[str, Any]:
        origin = flight.get("origin")
        destination = flight.get("destination")
        if not isinstance(origin, dict) or not isinstance(destination, dict):
            raise MappingError("flight has no origin/destination block")

        departure_utc = _utc(flight.get("scheduled_out"))
        arrival_utc = _utc(flight.get("scheduled_in"))

        return build_candidate(
            cancelled=bool(flight.get("cancelled")),
            delay_minutes=_delay_minutes(flight.get("arrival_delay")),
            departure_utc=departure_utc,
            departure_local=to_local(departure_utc, origin.get("timezone")) if departure_utc else None,
            arrival_utc=arrival_utc,
            arrival_local=to_local(arrival_utc, destination.get("timezone")) if arrival_utc else None,
            departure_airport=_airport(origin),
            arrival_airport=_airport(destination),
        )


def _delay_minutes(delay_seconds: Any) -> int:
    """arrival_delay is reported in seconds; negative means early."""
    if delay_seconds is None:
        return 0
    return max(0, round(float(delay_seconds) / 60))


def _utc(value: Optional[str]) -> Optional[str]:
    dt = parse_iso(value)
    return to_utc_iso(dt) if dt else None


def _airport(block: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "name": block.get("name"),
        "city": block.get("city"),
        "icao": block.get("code_icao"),
        "iata": block.get("code_iata"),
    }

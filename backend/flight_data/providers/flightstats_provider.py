"""
FlightStats Flex provider — secondary source.

Single call to the flight status endpoint, keyed by carrier, flight
number and departure date. Airport names and cities come from the
response appendix, so no reference lookup is needed.
"""
import logging
from typing import Any, Dict, List, Optional

import httpx

from flight_data.canonical import FlightQuery
from flight_data.providers.base import FlightStatusProvider, MappingError, build_candidate
from flight_data.time_utils import minutes_between

logger = logging.getLogger("Provider.FlightStats")

# C = Cancelled, R = Redirected
CANCELLED_STATUSES = {"C", "R"}


class FlightStatsProvider(FlightStatusProvider):
    """Secondary provider using the FlightStats flight status API."""

    logger = logger

    def __init__(self, client: httpx.AsyncClient, base_url: str, app_id: str, app_key: str):
        super().__init__(client)
        self._base_url = base_url.rstrip("/")
        self._app_id = app_id
        self._app_key = app_key

    @property
    def provider_name(self) -> str:
        return "flightstats"

    def is_available(self) -> bool:
        return bool(self._app_id and self._app_key)

    async def _fetch(self, query: FlightQuery) -> Optional[Dict[str, Any]]:
        day = query.date
        url = (
            f"{self._base_url}/flex/flightstatus/rest/v2/json/flight/status/"
            f"{query.carrier_code}/{query.flight_code}/dep/{day.year}/{day.month}/{day.day}"
        )
        data = await self._get_json(url, params={"appId": self._app_id, "appKey": self._app_key})

        if "error" in data:
            logger.error(f"[FlightStats] API error for {query.ident}: {data['error']}")
            return None

        statuses = data.get("flightStatuses") or []
        if not statuses:
            return None

        airports = (data.get("appendix") or {}).get("airports") or []
        return self._normalize_status(statuses[0], airports)

    def _normalize_status(self, status: Dict[str, Any], airports: List[Dict[str, Any]]) -> Dict[str, Any]:
        departure_date = status.get("departureDate") or {}
        arrival_date = status.get("arrivalDate") or {}
        if not departure_date or not arrival_date:
            raise MappingError("status has no departureDate/arrivalDate")

        return build_candidate(
            cancelled=status.get("status") in CANCELLED_STATUSES,
            delay_minutes=_arrival_delay(status),
            departure_utc=departure_date.get("dateUtc"),
            departure_local=departure_date.get("dateLocal"),
            arrival_utc=arrival_date.get("dateUtc"),
            arrival_local=arrival_date.get("dateLocal"),
            departure_airport=_find_airport(airports, status.get("departureAirportFsCode")),
            arrival_airport=_find_airport(airports, status.get("arrivalAirportFsCode")),
        )


def _arrival_delay(status: Dict[str, Any]) -> int:
    """
    Provider delay field first; when it is zero or absent, diff the raw
    actual vs scheduled arrival timestamps (gate, then runway).
    """
    delay = (status.get("delays") or {}).get("arrivalGateDelayMinutes") or 0
    if delay:
        return int(delay)

    times = status.get("operationalTimes") or {}

    def _utc(key: str) -> Optional[str]:
        return (times.get(key) or {}).get("dateUtc")

    # Scheduled and actual must come from the same pair.
    for scheduled, actual in (("scheduledGateArrival", "actualGateArrival"),
                              ("scheduledRunwayArrival", "actualRunwayArrival")):
        diff = minutes_between(_utc(scheduled), _utc(actual))
        if diff is not None:
            return max(0, diff)
    return 0


def _find_airport(airports: List[Dict[str, Any]], fs_code: Optional[str]) -> Optional[Dict[str, Any]]:
    if not fs_code:
        return None
    for airport in airports:
        if airport.get("fs") == fs_code:
            return {
                "name": airport.get("name"),
                "city": airport.get("city"),
                "icao": airport.get("icao"),
                "iata": airport.get("iata"),
            }
    return None

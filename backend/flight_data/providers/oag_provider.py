"""
OAG Flight Info provider — primary source.

Two-step lookup:
  1. GET /flight-instances/?CarrierCode=..&FlightNumber=..&DepartureDateTime=..
     resolves the schedule instance key for the flight on that day.
  2. GET /flight-instances/?ScheduleInstanceKey=..
     returns the full instance with its status details.

OAG only gives ICAO/IATA codes for airports, so names and cities come
from the reference airport table.
"""
import asyncio
import logging
from typing import Any, Dict, List, Optional

import httpx

from flight_data.canonical import FlightQuery
from flight_data.providers.base import (
    FlightStatusProvider,
    MappingError,
    ReferenceLookup,
    airport_payload,
    build_candidate,
)
from flight_data.time_utils import combine_date_time, minutes_between

logger = logging.getLogger("Provider.OAG")

OAG_API_VERSION = "v2"


class OagProvider(FlightStatusProvider):
    """Primary provider using the OAG flight instances API."""

    logger = logger

    def __init__(self, client: httpx.AsyncClient, reference: ReferenceLookup, base_url: str, subscription_key: str):
        super().__init__(client)
        self._reference = reference
        self._base_url = base_url.rstrip("/")
        self._subscription_key = subscription_key

    @property
    def provider_name(self) -> str:
        return "oag"

    def is_available(self) -> bool:
        return bool(self._subscription_key)

    @property
    def _headers(self) -> Dict[str, str]:
        return {"Subscription-Key": self._subscription_key, "Cache-Control": "no-cache"}

    async def _fetch(self, query: FlightQuery) -> Optional[Dict[str, Any]]:
        key = await self._find_schedule_instance_key(query)
        if not key:
            return None

        data = await self._get_json(
            f"{self._base_url}/flight-instances/",
            params={"ScheduleInstanceKey": key, "version": OAG_API_VERSION},
            headers=self._headers,
        )
        instances = data.get("data") or []
        if not instances:
            return None

        # Airport names come from a synchronous SQLAlchemy session.
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, self._normalize_instance, instances[0])

    async def _find_schedule_instance_key(self, query: FlightQuery) -> Optional[str]:
        code_type = "ICAO" if len(query.carrier_code) == 3 else "IATA"
        data = await self._get_json(
            f"{self._base_url}/flight-instances/",
            params={
                "CarrierCode": query.carrier_code,
                "FlightNumber": query.flight_code,
                "DepartureDateTime": query.date.isoformat(),
                "CodeType": code_type,
                "version": OAG_API_VERSION,
            },
            headers=self._headers,
        )
        for instance in data.get("data") or []:
            key = instance.get("scheduleInstanceKey")
            if key:
                return key
        return None

    def _normalize_instance(self, instance: Dict[str, Any]) -> Dict[str, Any]:
        departure = instance.get("departure")
        arrival = instance.get("arrival")
        if not isinstance(departure, dict) or not isinstance(arrival, dict):
            raise MappingError("instance has no departure/arrival block")

        status_details: List[Dict[str, Any]] = instance.get("statusDetails") or []

        departure_utc = _scheduled(departure, "utc")
        arrival_utc = _scheduled(arrival, "utc")

        actual_arrival = _latest_actual_arrival(status_details)
        delay = minutes_between(arrival_utc, actual_arrival) if actual_arrival else None

        return build_candidate(
            cancelled=_is_cancelled(status_details),
            delay_minutes=delay or 0,
            departure_utc=departure_utc,
            departure_local=_scheduled(departure, "local"),
            arrival_utc=arrival_utc,
            arrival_local=_scheduled(arrival, "local"),
            departure_airport=self._lookup_airport(departure),
            arrival_airport=self._lookup_airport(arrival),
        )

    def _lookup_airport(self, leg: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        icao = (leg.get("airport") or {}).get("icao")
        if not icao:
            return None
        return airport_payload(self._reference.lookup_airport_by_icao(icao))


def _scheduled(leg: Dict[str, Any], zone: str) -> Optional[str]:
    day = (leg.get("date") or {}).get(zone)
    time_of_day = (leg.get("time") or {}).get(zone)
    return combine_date_time(day, time_of_day, utc=(zone == "utc"))


def _has_actual(detail: Dict[str, Any], side: str) -> bool:
    actual = ((detail.get(side) or {}).get("actualTime")) or {}
    return any(isinstance(v, dict) and v.get("utc") for v in actual.values())


def _is_cancelled(status_details: List[Dict[str, Any]]) -> bool:
    """No confirmed ground event on either side means the flight never operated."""
    has_arrival = any(_has_actual(d, "arrival") for d in status_details)
    has_departure = any(_has_actual(d, "departure") for d in status_details)
    return not has_arrival and not has_departure


def _latest_actual_arrival(status_details: List[Dict[str, Any]]) -> Optional[str]:
    for detail in reversed(status_details):
        actual = ((detail.get("arrival") or {}).get("actualTime")) or {}
        for event in ("inGate", "onGround"):
            utc = (actual.get(event) or {}).get("utc")
            if utc:
                return utc
    return None

import logging
from typing import Callable, Optional

from pydantic import BaseModel
from sqlalchemy.orm import Session

from app.models.airline import Airline
from app.models.airport import Airport
from flight_data.canonical import AirportRef

logger = logging.getLogger(__name__)


class AirlineRef(BaseModel):
    iata: str
    icao: str
    name: str


class ReferenceService:
    """Read-only lookups against the static airports/airlines tables."""

    def __init__(self, session_factory: Callable[[], Session]):
        self._session_factory = session_factory

    def lookup_airport_by_icao(self, code: str) -> Optional[AirportRef]:
        db = self._session_factory()
        try:
            row = db.query(Airport).filter(Airport.icao_code == code.upper()).first()
        finally:
            db.close()

        if not row or not all([row.name, row.city, row.icao_code, row.iata_code]):
            return None
        return AirportRef(name=row.name, city=row.city, icao=row.icao_code, iata=row.iata_code)

    def lookup_airline_by_iata(self, code: str) -> Optional[AirlineRef]:
        db = self._session_factory()
        try:
            row = (
                db.query(Airline)
                .filter(Airline.active == True, Airline.iata_code == code.upper())
                .first()
            )
        finally:
            db.close()

        if not row or not row.icao_code or not row.iata_code:
            return None
        return AirlineRef(iata=row.iata_code, icao=row.icao_code, name=row.name)

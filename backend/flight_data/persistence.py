import logging
from datetime import date
from typing import Optional

from sqlalchemy.orm import Session, selectinload

from app.models.flight import AirportType, CancellationReason, Flight, FlightAirport
from flight_data.canonical import AirportRef, CanonicalFlightRecord

logger = logging.getLogger("FlightRepository")


class FlightRepository:
    """Durable store for resolved flights, one row per (flight_number, date)."""

    def __init__(self, db: Session):
        self._db = db

    def find(self, flight_number: str, flight_date: date) -> Optional[Flight]:
        return (
            self._db.query(Flight)
            .options(selectinload(Flight.airports))
            .filter(Flight.flight_number == flight_number, Flight.date == flight_date)
            .first()
        )

    def save(self, record: CanonicalFlightRecord, flight_number: str, flight_date: date) -> Flight:
        flight = Flight(
            flight_number=flight_number,
            date=flight_date,
            is_eligible=record.is_eligible,
            reason=CancellationReason(record.reason) if record.reason else None,
            delay_minutes=record.delay_minutes,
            arrival_date_local=record.arrival_date_local,
            departure_date_local=record.departure_date_local,
            arrival_date_utc=record.arrival_date_utc,
            departure_date_utc=record.departure_date_utc,
            airports=[
                _airport_row(record.arrival_airport, AirportType.ARRIVAL),
                _airport_row(record.departure_airport, AirportType.DEPARTURE),
            ],
        )
        self._db.add(flight)
        self._db.commit()
        self._db.refresh(flight)
        return flight

    def save_if_absent(self, record: CanonicalFlightRecord, flight_number: str, flight_date: date) -> bool:
        """Insert only when no row exists for this flight identity. Returns True if a row was written."""
        if self.find(flight_number, flight_date) is not None:
            logger.info(f"Flight {flight_number} on {flight_date} already stored. Skipping.")
            return False
        self.save(record, flight_number, flight_date)
        logger.info(f"Stored flight {flight_number} on {flight_date}")
        return True


def _airport_row(airport: AirportRef, airport_type: AirportType) -> FlightAirport:
    return FlightAirport(
        type=airport_type,
        name=airport.name,
        city=airport.city,
        icao=airport.icao,
        iata=airport.iata,
    )

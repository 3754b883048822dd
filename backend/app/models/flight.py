import enum

from sqlalchemy import Column, Integer, String, Boolean, Date, DateTime, Enum, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from app.database import Base


class CancellationReason(str, enum.Enum):
    cancellation = "cancellation"
    delay = "delay"


class AirportType(str, enum.Enum):
    ARRIVAL = "ARRIVAL"
    DEPARTURE = "DEPARTURE"


class Flight(Base):
    __tablename__ = "flights"

    id = Column(Integer, primary_key=True, index=True)
    flight_number = Column(String(8), index=True, nullable=False)
    date = Column(Date, index=True, nullable=False)

    is_eligible = Column(Boolean, nullable=False)
    reason = Column(Enum(CancellationReason), nullable=True)
    delay_minutes = Column(Integer, nullable=False, default=0)

    arrival_date_local = Column(String(40), nullable=False)
    departure_date_local = Column(String(40), nullable=False)
    arrival_date_utc = Column(String(40), nullable=False)
    departure_date_utc = Column(String(40), nullable=False)

    created_at = Column(DateTime, server_default=func.current_timestamp(), nullable=False)

    airports = relationship("FlightAirport", back_populates="flight", cascade="all, delete-orphan")

    # One durable row per flight identity
    __table_args__ = (
        UniqueConstraint('flight_number', 'date', name='uq_flight_number_date'),
    )


class FlightAirport(Base):
    __tablename__ = "flight_airports"

    id = Column(Integer, primary_key=True, index=True)
    flight_id = Column(Integer, ForeignKey("flights.id", ondelete="CASCADE"), index=True, nullable=False)
    type = Column(Enum(AirportType), nullable=False)
    name = Column(String(200), nullable=False)
    city = Column(String(100), nullable=False)
    icao = Column(String(4), nullable=False)
    iata = Column(String(3), nullable=False)

    flight = relationship("Flight", back_populates="airports")

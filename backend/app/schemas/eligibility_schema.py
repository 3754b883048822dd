import re
from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

FLIGHT_NUMBER_PATTERN = re.compile(r"^([A-Z0-9]{2})([0-9]{1,4})$", re.IGNORECASE)
DATE_PATTERN = re.compile(r"^[0-9]{4}-[0-9]{2}-[0-9]{2}$")


class EligibilityQuery(BaseModel):
    flight_number: str = Field(..., alias="flightNumber", description='Carrier prefix + 1-4 digits, e.g. "AF1488"')
    flight_date: str = Field(..., alias="date", description="YYYY-MM-DD format")

    @field_validator("flight_number")
    def validate_flight_number(cls, v):
        if not FLIGHT_NUMBER_PATTERN.match(v.strip()):
            raise ValueError('Invalid flight number format. Expected like "AF1488"')
        return v.strip().upper()

    @field_validator("flight_date")
    def validate_date(cls, v):
        if not DATE_PATTERN.match(v):
            raise ValueError("Invalid date format. Expected yyyy-mm-dd")
        try:
            datetime.strptime(v, "%Y-%m-%d")
        except ValueError:
            raise ValueError("Invalid date value")
        return v

    @property
    def carrier_code(self) -> str:
        return FLIGHT_NUMBER_PATTERN.match(self.flight_number).group(1)

    @property
    def flight_code(self) -> str:
        return FLIGHT_NUMBER_PATTERN.match(self.flight_number).group(2)

    @property
    def departure_day(self) -> date:
        return datetime.strptime(self.flight_date, "%Y-%m-%d").date()


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class AirportResponse(_CamelModel):
    name: str
    city: str
    icao: str
    iata: str


class FlightDateResponse(_CamelModel):
    utc: str
    local: str


class EligibilityResponse(_CamelModel):
    is_eligible: bool
    reason: Optional[str] = None
    delay_minutes: Optional[int] = None
    departure_date: Optional[FlightDateResponse] = None
    arrival_date: Optional[FlightDateResponse] = None
    departure_airport: Optional[AirportResponse] = None
    arrival_airport: Optional[AirportResponse] = None

"""
Canonical flight record and the structural guard in front of it.

Every provider is mapped into CanonicalFlightRecord before anything else
looks at it. Provider payloads are untyped, so validation is strict: no
coercion, no partial airports, no missing timestamps. A candidate that
fails is treated exactly like a provider with no data.
"""
import logging
from datetime import date
from typing import Any, Dict, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError
from pydantic.alias_generators import to_camel

logger = logging.getLogger("CanonicalValidator")


class FlightQuery(BaseModel):
    """Immutable resolution input. `date` is a calendar day, not an instant."""
    model_config = ConfigDict(frozen=True)

    flight_code: str
    carrier_code: str
    date: date

    @property
    def ident(self) -> str:
        return f"{self.carrier_code}{self.flight_code}"


class _CanonicalModel(BaseModel):
    model_config = ConfigDict(
        strict=True,
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )


class AirportRef(_CanonicalModel):
    name: str = Field(..., min_length=1)
    city: str = Field(..., min_length=1)
    icao: str = Field(..., min_length=1)
    iata: str = Field(..., min_length=1)


class CanonicalFlightRecord(_CanonicalModel):
    is_eligible: bool
    reason: Optional[Literal["cancellation", "delay"]]
    delay_minutes: int = Field(..., ge=0)
    arrival_date_utc: str
    arrival_date_local: str
    departure_date_utc: str
    departure_date_local: str
    departure_airport: AirportRef
    arrival_airport: AirportRef

    def to_payload(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True)


def validate_canonical(candidate: Any, source: str = "unknown") -> Optional[CanonicalFlightRecord]:
    """Return the validated record, or None if any field is missing or mistyped."""
    if isinstance(candidate, CanonicalFlightRecord):
        return candidate
    if not isinstance(candidate, dict):
        logger.warning(f"[{source}] Discarding non-object flight candidate: {type(candidate).__name__}")
        return None
    try:
        return CanonicalFlightRecord.model_validate(candidate)
    except ValidationError as e:
        fields = ", ".join(".".join(str(p) for p in err["loc"]) for err in e.errors())
        logger.warning(f"[{source}] Candidate does not match canonical flight shape ({fields})")
        return None

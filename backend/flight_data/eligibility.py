"""Flat three-hour-delay-or-cancellation rule."""
from typing import Optional

from pydantic import BaseModel

from flight_data.canonical import CanonicalFlightRecord

DELAY_THRESHOLD_MINUTES = 180


class EligibilityOutcome(BaseModel):
    is_eligible: bool
    reason: Optional[str] = None
    delay_minutes: int = 0


def outcome_for(cancelled: bool, delay_minutes: int) -> EligibilityOutcome:
    delay = max(0, delay_minutes or 0)
    is_eligible = delay > DELAY_THRESHOLD_MINUTES or cancelled
    if cancelled:
        reason = "cancellation"
    elif is_eligible:
        reason = "delay"
    else:
        reason = None
    return EligibilityOutcome(is_eligible=is_eligible, reason=reason, delay_minutes=delay)


def evaluate(record: CanonicalFlightRecord) -> EligibilityOutcome:
    """A canonical record encodes a cancelled/redirected status as reason == "cancellation"."""
    return outcome_for(record.reason == "cancellation", record.delay_minutes)

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import ValidationError
from typing import Optional
import logging

from app.dependencies import get_eligibility_service
from app.schemas.eligibility_schema import EligibilityQuery, EligibilityResponse
from app.services.eligibility_service import EligibilityService

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/compensation",
    tags=["compensation"]
)


def parse_eligibility_query(
    flight_number: Optional[str] = Query(None, alias="flightNumber"),
    date: Optional[str] = Query(None),
) -> EligibilityQuery:
    """Reject malformed input before any provider is contacted."""
    try:
        return EligibilityQuery.model_validate({"flightNumber": flight_number, "date": date})
    except ValidationError as e:
        error = e.errors()[0]
        message = error["msg"].removeprefix("Value error, ")
        field = ".".join(str(p) for p in error["loc"])
        raise HTTPException(status_code=400, detail=f"{field}: {message}")


@router.get("/eligibility", response_model=EligibilityResponse, response_model_exclude_none=True, response_model_by_alias=True)
async def get_compensation_eligibility(
    query: EligibilityQuery = Depends(parse_eligibility_query),
    service: EligibilityService = Depends(get_eligibility_service),
):
    """
    Decide whether a flight qualifies for delay/cancellation compensation.
    Arrival delay over three hours, or a cancelled/redirected flight, is eligible.
    """
    try:
        return await service.check(query.carrier_code, query.flight_code, query.departure_day)
    except Exception as e:
        logger.error(f"Unexpected error checking eligibility for {query.flight_number} on {query.flight_date}: {e}")
        raise HTTPException(status_code=500, detail="Internal server error during eligibility check.")

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from sqlalchemy import func
from app.database import get_db
from app.models.flight import CancellationReason, Flight

router = APIRouter(prefix="/system-health", tags=["System"])

@router.get("")
def get_system_health(db: Session = Depends(get_db)):
    total_flights = db.query(func.count(Flight.id)).scalar() or 0
    eligible_flights = db.query(func.count(Flight.id)).filter(Flight.is_eligible == True).scalar() or 0
    cancelled_flights = db.query(func.count(Flight.id)).filter(Flight.reason == CancellationReason.cancellation).scalar() or 0

    last_stored = db.query(func.max(Flight.created_at)).scalar()

    return {
        "total_flights": total_flights,
        "eligible_flights": eligible_flights,
        "cancelled_flights": cancelled_flights,
        "last_stored_timestamp": last_stored.isoformat() if last_stored else None
    }

"""
Outcome routes (admin): record the slot a day's arrival happened in, or
remove it again. Both settle or reverse that day's wagers.
"""
import logging
from datetime import date as date_type

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session

from betpool.core.auth import require_admin
from betpool.core.database import get_db
from betpool.core.errors import PoolError
from betpool.services.pool_service import PoolService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/arrivals", tags=["arrivals"])


class RecordOutcomeRequest(BaseModel):
    date: date_type = Field(..., description="Day of the arrival (YYYY-MM-DD)")
    slot: str = Field(..., description="Slot the arrival fell in")


def _settlement_summary(result) -> dict:
    return {
        "date": result.date,
        "wagers": len(result.updates),
        "winners": len(result.winners),
        "paid": result.total_paid,
        "rollover_delta": result.rollover_delta,
    }


@router.post("")
async def record_outcome(
    payload: RecordOutcomeRequest,
    db: Session = Depends(get_db),
    _admin: str = Depends(require_admin)
):
    """Record (or overwrite) an outcome and settle the day's wagers."""
    service = PoolService(db)
    try:
        result = service.record_outcome(payload.date, payload.slot)
    except PoolError as e:
        raise HTTPException(status_code=e.status_code, detail=e.detail)
    except Exception as e:
        db.rollback()
        logger.error(f"Error recording outcome for {payload.date}: {e}")
        raise HTTPException(status_code=500, detail=str(e))

    return {
        "success": True,
        "settlement": _settlement_summary(result),
        "state": service.compose_state(),
    }


@router.delete("/{outcome_date}")
async def delete_outcome(
    outcome_date: str,
    db: Session = Depends(get_db),
    _admin: str = Depends(require_admin)
):
    """Delete an outcome and reopen the day's wagers."""
    service = PoolService(db)
    try:
        result = service.delete_outcome(outcome_date)
    except PoolError as e:
        raise HTTPException(status_code=e.status_code, detail=e.detail)
    except Exception as e:
        db.rollback()
        logger.error(f"Error deleting outcome for {outcome_date}: {e}")
        raise HTTPException(status_code=500, detail=str(e))

    return {
        "success": True,
        "reversal": _settlement_summary(result),
        "state": service.compose_state(),
    }

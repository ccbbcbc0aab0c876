"""
Wager routes: placing a bet and admin removal.
"""
import logging
from datetime import date as date_type
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Request
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session

from betpool.core.auth import require_admin
from betpool.core.database import get_db
from betpool.core.errors import PoolError
from betpool.core.rate_limit import limiter
from betpool.services.pool_service import PoolService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/bets", tags=["bets"])


class PlaceWagerRequest(BaseModel):
    """Request to place a wager."""
    bettor: str = Field(..., min_length=1, description="Name of the bettor")
    amount: float = Field(..., gt=0, allow_inf_nan=False, description="Stake, rounded to cents")
    slot: str = Field(..., description="Time slot label, e.g. 09:00")
    date: date_type = Field(..., description="Day the wager is for (YYYY-MM-DD)")
    topic: Optional[str] = Field(None, max_length=255, description="Optional topic reference")


class WagerResponse(BaseModel):
    id: str
    bettor: str
    amount: float
    slot: str
    date: str
    odds: float
    status: str
    payout: float
    created_at: str
    topic: Optional[str] = None


class PlaceWagerResponse(BaseModel):
    success: bool
    bet: WagerResponse
    state: dict


@router.post("", response_model=PlaceWagerResponse)
@limiter.limit("30/minute")
async def place_wager(
    request: Request,
    payload: PlaceWagerRequest,
    db: Session = Depends(get_db)
):
    """
    Place a wager at the current odds for its slot.

    The odds are stamped on the wager and used for its payout whatever happens
    to the board afterwards.
    """
    service = PoolService(db)
    try:
        wager = service.place_wager(
            bettor=payload.bettor,
            amount=payload.amount,
            slot=payload.slot,
            date=payload.date,
            topic=payload.topic,
        )
    except PoolError as e:
        raise HTTPException(status_code=e.status_code, detail=e.detail)
    except Exception as e:
        db.rollback()
        logger.error(f"Error placing wager for {payload.bettor}: {e}")
        raise HTTPException(status_code=500, detail=str(e))

    return {
        "success": True,
        "bet": wager.to_dict(),
        "state": service.compose_state(),
    }


@router.delete("/{wager_id}")
async def delete_wager(
    wager_id: str,
    db: Session = Depends(get_db),
    _admin: str = Depends(require_admin)
):
    """Remove a wager (admin). Settled days are re-settled without it."""
    service = PoolService(db)
    try:
        service.delete_wager(wager_id)
    except PoolError as e:
        raise HTTPException(status_code=e.status_code, detail=e.detail)
    except Exception as e:
        db.rollback()
        logger.error(f"Error deleting wager {wager_id}: {e}")
        raise HTTPException(status_code=500, detail=str(e))

    return {"success": True, "state": service.compose_state()}

"""
Board state: history, wagers, rollover, current odds and headline stats.
"""
import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from betpool.core.database import get_db
from betpool.services.pool_service import PoolService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["state"])


@router.get("/state")
async def get_state(db: Session = Depends(get_db)):
    """Everything the front end polls for."""
    try:
        return PoolService(db).compose_state()
    except Exception as e:
        logger.error(f"Error composing state: {e}")
        raise HTTPException(status_code=500, detail=str(e))

"""
Admin login check used by the front end before it stores the admin key.
"""
from typing import Optional

from fastapi import APIRouter
from pydantic import BaseModel

from betpool.core.auth import verify_admin_secret

router = APIRouter(tags=["auth"])


class LoginRequest(BaseModel):
    secret: Optional[str] = None


@router.post("/login")
async def login(payload: LoginRequest):
    verify_admin_secret(payload.secret)
    return {"success": True}

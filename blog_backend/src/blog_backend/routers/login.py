from __future__ import annotations

from fastapi import APIRouter, Depends

from .. import auth
from ..schemas import ErrorOut, LoginRequest, TokenOut
from ..settings import Settings, get_settings

router = APIRouter(
    prefix="/api",
    tags=["auth"],
)


# PUBLIC_INTERFACE
@router.post(
    "/login",
    response_model=TokenOut,
    summary="Admin Login",
    description="Exchange the shared admin password for a token valid for 24 hours.",
    responses={401: {"model": ErrorOut, "description": "Wrong password"}},
)
def login(payload: LoginRequest, settings: Settings = Depends(get_settings)) -> TokenOut:
    return TokenOut(token=auth.login(payload.password, settings))

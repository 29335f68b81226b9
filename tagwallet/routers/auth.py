from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Request
from pydantic import BaseModel

from tagwallet.core.logging import get_logger
from tagwallet.core.rate_limiter import rate_limit_ip
from tagwallet.services.session_service import get_auth_service

router = APIRouter(tags=["auth"])
logger = get_logger(__name__)

RATE_WINDOW_SECONDS = 60


class Credentials(BaseModel):
    email: Optional[str] = None
    password: Optional[str] = None


def _rate_limit(request: Request, scope: str) -> None:
    settings = get_auth_service(request).settings
    rate_limit_ip(
        request,
        scope,
        limit=settings.auth_rate_limit,
        window_seconds=RATE_WINDOW_SECONDS,
        trust_proxy=settings.trust_proxy,
    )


@router.post("/register", status_code=201)
def register(request: Request, payload: Credentials):
    logger.info("Register request: %s", payload.email)
    _rate_limit(request, "auth:register")
    get_auth_service(request).register(payload.email, payload.password)
    return {"message": "Registration successful"}


@router.post("/login")
def login(request: Request, payload: Credentials):
    logger.info("Login request: %s", payload.email)
    _rate_limit(request, "auth:login")
    result = get_auth_service(request).login(payload.email, payload.password)
    return {"token": result.token}

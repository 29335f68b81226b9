from __future__ import annotations

from fastapi import APIRouter, Request

from tagwallet.core.logging import get_logger
from tagwallet.services.reward_service import RewardService

router = APIRouter(prefix="/api", tags=["rewards"])
logger = get_logger(__name__)


def _get_reward_service(request: Request) -> RewardService:
    svc = getattr(getattr(request.app, "state", None), "reward_service", None)
    if not svc:
        raise RuntimeError("RewardService not configured")
    return svc


@router.get("/user/{tag_id}")
def get_user(tag_id: str, request: Request):
    return _get_reward_service(request).get_profile(tag_id)


@router.post("/checkin/{tag_id}")
def check_in(tag_id: str, request: Request):
    logger.info("Check-in request: tag_id=%s", tag_id)
    result = _get_reward_service(request).check_in(tag_id)
    return {
        "message": "Check-in successful",
        "pidoge_balance": result.pidoge_balance,
        "tlk_balance": result.tlk_balance,
    }

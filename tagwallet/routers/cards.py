from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, File, Form, Request, UploadFile

from tagwallet.core.logging import get_logger
from tagwallet.core.uploads import MAX_UPLOAD_BYTES, AvatarUpload
from tagwallet.services.card_service import CardService
from tagwallet.services.session_service import current_user_id

router = APIRouter(prefix="/cards", tags=["cards"])
logger = get_logger(__name__)


def _get_card_service(request: Request) -> CardService:
    svc = getattr(getattr(request.app, "state", None), "card_service", None)
    if not svc:
        raise RuntimeError("CardService not configured")
    return svc


def _read_avatar(avatar: Optional[UploadFile]) -> Optional[AvatarUpload]:
    if not avatar or not avatar.filename:
        return None
    # One byte past the limit is enough to reject oversized files.
    data = avatar.file.read(MAX_UPLOAD_BYTES + 1)
    return AvatarUpload(
        filename=avatar.filename,
        content_type=(avatar.content_type or "").lower(),
        data=data,
    )


@router.post("/register", status_code=201)
def register_card(
    request: Request,
    tag_id: str = Form(""),
    name: str = Form(""),
    wallet_address: str = Form(""),
    avatar: UploadFile | None = File(None),
    user_id: str = Depends(current_user_id),
):
    logger.info("Card register request: tag_id=%s wallet=%s", tag_id, wallet_address)
    card = _get_card_service(request).register_card(
        user_id, tag_id, name, wallet_address, _read_avatar(avatar)
    )
    return {"message": "Card registered", "card": card}


@router.put("/{tag_id}")
def update_card(
    tag_id: str,
    request: Request,
    name: str = Form(""),
    wallet_address: str = Form(""),
    avatar: UploadFile | None = File(None),
    user_id: str = Depends(current_user_id),
):
    logger.info("Card update request: tag_id=%s wallet=%s", tag_id, wallet_address)
    card = _get_card_service(request).update_card(
        user_id, tag_id, name, wallet_address, _read_avatar(avatar)
    )
    return {"message": "Card updated", "card": card}


@router.get("/{tag_id}")
def get_card(tag_id: str, request: Request):
    logger.info("Get card request: tag_id=%s", tag_id)
    return _get_card_service(request).get_card(tag_id)

"""
Tag binding use cases: register, update and public lookup of NFC cards.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from sqlalchemy.exc import IntegrityError

from tagwallet.core.config import Settings, get_settings
from tagwallet.core.errors import ConflictError, NotFoundError, ValidationError
from tagwallet.core.logging import get_logger
from tagwallet.core.uploads import AvatarStorage, AvatarUpload
from tagwallet.core.utils import isoformat
from tagwallet.db.models import Card
from tagwallet.domain.explorer import explorer_link
from tagwallet.repositories.sql_repository import SQLRepository

logger = get_logger(__name__)


def card_to_dict(entity: Card) -> dict:
    return {
        "tag_id": entity.tag_id,
        "user_id": entity.user_id,
        "name": entity.name,
        "wallet_address": entity.wallet_address,
        "avatar_url": entity.avatar_url or "",
        "explorer_link": entity.explorer_link,
        "created_at": isoformat(entity.created_at),
        "updated_at": isoformat(entity.updated_at),
    }


@dataclass
class CardService:
    """Binds NFC tags to wallet addresses for authenticated owners."""

    settings: Settings = field(default_factory=get_settings)
    repository: SQLRepository = field(default_factory=SQLRepository)
    storage: Optional[AvatarStorage] = None

    def __post_init__(self):
        if self.storage is None:
            self.storage = AvatarStorage(self.settings.uploads_dir)

    def register_card(
        self,
        actor_id: str,
        tag_id: Optional[str],
        name: Optional[str],
        wallet_address: Optional[str],
        avatar: Optional[AvatarUpload] = None,
    ) -> dict:
        tag = (tag_id or "").strip()
        display_name = (name or "").strip()
        wallet = (wallet_address or "").strip()
        if not (tag and display_name and wallet):
            raise ValidationError("tag_id, name and wallet_address are required")
        avatar_url = self.storage.save(avatar) if avatar else ""
        try:
            entity = self.repository.create_card(
                tag,
                actor_id,
                display_name,
                wallet,
                explorer_link(wallet),
                avatar_url=avatar_url,
            )
        except IntegrityError as exc:
            self.storage.discard(avatar_url)
            raise ConflictError("Tag ID already registered") from exc
        logger.info("Card %s registered by %s", tag, actor_id)
        return card_to_dict(entity)

    def update_card(
        self,
        actor_id: str,
        tag_id: str,
        name: Optional[str],
        wallet_address: Optional[str],
        avatar: Optional[AvatarUpload] = None,
    ) -> dict:
        display_name = (name or "").strip()
        wallet = (wallet_address or "").strip()
        if not (display_name and wallet):
            raise ValidationError("name and wallet_address are required")
        values = {
            "name": display_name,
            "wallet_address": wallet,
            "explorer_link": explorer_link(wallet),
        }
        avatar_url = self.storage.save(avatar) if avatar else ""
        if avatar_url:
            values["avatar_url"] = avatar_url
        # Ownership is part of the lookup: a foreign card looks exactly like a missing one.
        entity = self.repository.update_owned_card((tag_id or "").strip(), actor_id, values)
        if not entity:
            self.storage.discard(avatar_url)
            raise NotFoundError("Card not found or not owned by you")
        logger.info("Card %s updated by %s", entity.tag_id, actor_id)
        return card_to_dict(entity)

    def get_card(self, tag_id: str) -> dict:
        entity = self.repository.get_card((tag_id or "").strip())
        if not entity:
            raise NotFoundError("Card not found")
        return card_to_dict(entity)

"""
Reward profiles and the daily check-in.

A successful check-in credits the tag's own balances and then, best effort,
pays a small bonus to the first referrer in its referral list. The referral
credit runs in its own transaction: if it fails, the check-in still stands.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError

from tagwallet.core.config import Settings, get_settings
from tagwallet.core.errors import AlreadyCheckedInError, NotFoundError
from tagwallet.core.logging import get_logger
from tagwallet.core.utils import isoformat, utcnow
from tagwallet.db.models import RewardProfile
from tagwallet.domain.rewards import (
    CHECK_IN_PIDOGE,
    CHECK_IN_TLK,
    REFERRAL_PIDOGE,
    REFERRAL_TLK,
    check_in_state,
    cooldown_cutoff,
    primary_referrer,
)
from tagwallet.repositories.sql_repository import SQLRepository

logger = get_logger(__name__)


@dataclass
class CheckInResult:
    tag_id: str
    pidoge_balance: float
    tlk_balance: float
    referrer_credited: Optional[str] = None


def profile_to_dict(entity: RewardProfile, history: list[datetime]) -> dict:
    return {
        "tag_id": entity.tag_id,
        "name": entity.name or "",
        "wallet_address": entity.wallet_address or "",
        "avatar": entity.avatar or "",
        "pidoge_balance": float(entity.pidoge_balance or 0),
        "tlk_balance": float(entity.tlk_balance or 0),
        "last_check_in": isoformat(entity.last_check_in),
        "check_in_history": [isoformat(value) for value in history],
        "referrals": list(entity.referrals or []),
    }


@dataclass
class RewardService:
    """Profile lookup and the once-per-24h check-in with referral bonus."""

    settings: Settings = field(default_factory=get_settings)
    repository: SQLRepository = field(default_factory=SQLRepository)

    def get_profile(self, tag_id: str) -> dict:
        tag = (tag_id or "").strip()
        entity = self.repository.get_reward_profile(tag)
        if not entity:
            raise NotFoundError("User not found")
        return profile_to_dict(entity, self.repository.get_check_in_history(tag))

    def check_in(self, tag_id: str, now: datetime | None = None) -> CheckInResult:
        tag = (tag_id or "").strip()
        moment = now or utcnow()
        entity = self.repository.apply_check_in(
            tag,
            now=moment,
            cutoff=cooldown_cutoff(moment),
            pidoge=CHECK_IN_PIDOGE,
            tlk=CHECK_IN_TLK,
        )
        if entity is None:
            # The conditional update matched nothing: tell the two causes apart.
            current = self.repository.get_reward_profile(tag)
            if not current:
                raise NotFoundError("User not found")
            logger.info("Check-in %s refused: %s", tag, check_in_state(current.last_check_in, moment).value)
            raise AlreadyCheckedInError("Already checked in today, come back after 24 hours")
        logger.info(
            "Check-in %s: pidoge=%s tlk=%s", tag, entity.pidoge_balance, entity.tlk_balance
        )
        credited = self._credit_referrer(tag, entity.referrals)
        return CheckInResult(
            tag_id=tag,
            pidoge_balance=float(entity.pidoge_balance),
            tlk_balance=float(entity.tlk_balance),
            referrer_credited=credited,
        )

    def _credit_referrer(self, tag_id: str, referrals: Optional[list]) -> Optional[str]:
        referrer = primary_referrer(referrals)
        if not referrer:
            return None
        try:
            credited = self.repository.credit_balances(referrer, pidoge=REFERRAL_PIDOGE, tlk=REFERRAL_TLK)
        except SQLAlchemyError:
            logger.exception("Referral bonus for %s (referred by %s) failed", tag_id, referrer)
            return None
        if not credited:
            logger.warning("Referrer %s of %s has no profile; bonus skipped", referrer, tag_id)
            return None
        return referrer

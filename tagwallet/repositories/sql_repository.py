"""High-level data access helpers backed by SQLAlchemy."""
from __future__ import annotations

import secrets
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import or_, select, update

from tagwallet.db.models import CheckIn, Card, RewardProfile, User
from tagwallet.db.session import get_session
from tagwallet.core.utils import as_utc


class SQLRepository:
    """CRUD helpers wrapping the SQLAlchemy session."""

    # -------------------------- users --------------------------
    def create_user(self, email: str, password_hash: str) -> User:
        """Insert a new account; the unique email constraint raises IntegrityError."""
        user = User(
            id=secrets.token_hex(12),
            email=email,
            password_hash=password_hash,
            created_at=datetime.now(timezone.utc),
        )
        with get_session() as session:
            session.add(user)
            session.commit()
            session.refresh(user)
            return user

    def get_user(self, user_id: str) -> Optional[User]:
        with get_session() as session:
            return session.get(User, user_id)

    def get_user_by_email(self, email: str) -> Optional[User]:
        with get_session() as session:
            stmt = select(User).where(User.email == email)
            return session.execute(stmt).scalar_one_or_none()

    # -------------------------- cards --------------------------
    def create_card(
        self,
        tag_id: str,
        user_id: str,
        name: str,
        wallet_address: str,
        explorer_link: str,
        avatar_url: str = "",
    ) -> Card:
        now = datetime.now(timezone.utc)
        entity = Card(
            tag_id=tag_id,
            user_id=user_id,
            name=name,
            wallet_address=wallet_address,
            avatar_url=avatar_url or "",
            explorer_link=explorer_link,
            created_at=now,
            updated_at=now,
        )
        with get_session() as session:
            session.add(entity)
            session.commit()
            session.refresh(entity)
            return entity

    def get_card(self, tag_id: str) -> Optional[Card]:
        with get_session() as session:
            return session.get(Card, tag_id)

    def update_owned_card(self, tag_id: str, user_id: str, values: dict) -> Optional[Card]:
        """Update the card only when `user_id` owns it; None when nothing matched."""
        with get_session() as session:
            stmt = (
                update(Card)
                .where(Card.tag_id == tag_id, Card.user_id == user_id)
                .values(**values, updated_at=datetime.now(timezone.utc))
                .execution_options(synchronize_session=False)
            )
            result = session.execute(stmt)
            if result.rowcount != 1:
                session.rollback()
                return None
            session.commit()
            return session.get(Card, tag_id)

    # -------------------------- reward profiles --------------------------
    def create_reward_profile(
        self,
        tag_id: str,
        *,
        name: str = "",
        wallet_address: str = "",
        avatar: str = "",
        referrals: list[str] | None = None,
        pidoge_balance: float = 0,
        tlk_balance: float = 0,
        last_check_in: datetime | None = None,
    ) -> RewardProfile:
        entity = RewardProfile(
            tag_id=tag_id,
            name=name,
            wallet_address=wallet_address,
            avatar=avatar,
            referrals=list(referrals or []),
            pidoge_balance=pidoge_balance,
            tlk_balance=tlk_balance,
            last_check_in=as_utc(last_check_in),
            created_at=datetime.now(timezone.utc),
        )
        with get_session() as session:
            session.add(entity)
            session.commit()
            session.refresh(entity)
            return entity

    def get_reward_profile(self, tag_id: str) -> Optional[RewardProfile]:
        with get_session() as session:
            return session.get(RewardProfile, tag_id)

    def get_check_in_history(self, tag_id: str) -> list[datetime]:
        with get_session() as session:
            stmt = (
                select(CheckIn.checked_in_at)
                .where(CheckIn.tag_id == tag_id)
                .order_by(CheckIn.checked_in_at, CheckIn.id)
            )
            return [as_utc(value) for value in session.execute(stmt).scalars().all()]

    def apply_check_in(
        self,
        tag_id: str,
        *,
        now: datetime,
        cutoff: datetime,
        pidoge: float,
        tlk: float,
    ) -> Optional[RewardProfile]:
        """
        Credit a check-in in one conditional UPDATE plus the history row.

        The cooldown predicate is evaluated by the database at write time, so two
        concurrent requests for the same tag cannot both succeed. Returns None
        when no row matched (unknown tag or cooldown still running).
        """
        now_utc = as_utc(now)
        with get_session() as session:
            stmt = (
                update(RewardProfile)
                .where(
                    RewardProfile.tag_id == tag_id,
                    or_(
                        RewardProfile.last_check_in.is_(None),
                        RewardProfile.last_check_in <= as_utc(cutoff),
                    ),
                )
                .values(
                    pidoge_balance=RewardProfile.pidoge_balance + pidoge,
                    tlk_balance=RewardProfile.tlk_balance + tlk,
                    last_check_in=now_utc,
                )
                .execution_options(synchronize_session=False)
            )
            result = session.execute(stmt)
            if result.rowcount != 1:
                session.rollback()
                return None
            session.add(CheckIn(tag_id=tag_id, checked_in_at=now_utc))
            session.commit()
            return session.get(RewardProfile, tag_id)

    def credit_balances(self, tag_id: str, *, pidoge: float, tlk: float) -> bool:
        """Atomic increment of both balances; False when the tag has no profile."""
        with get_session() as session:
            stmt = (
                update(RewardProfile)
                .where(RewardProfile.tag_id == tag_id)
                .values(
                    pidoge_balance=RewardProfile.pidoge_balance + pidoge,
                    tlk_balance=RewardProfile.tlk_balance + tlk,
                )
                .execution_options(synchronize_session=False)
            )
            result = session.execute(stmt)
            session.commit()
            return result.rowcount == 1

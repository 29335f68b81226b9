"""SQLAlchemy models for accounts, tag bindings and reward profiles."""
from __future__ import annotations

from sqlalchemy import (
    Column,
    DateTime,
    Float,
    ForeignKey,
    Integer,
    String,
    Text,
    JSON,
    func,
)

from .session import Base


class User(Base):
    __tablename__ = "users"

    id = Column(String(32), primary_key=True)
    email = Column(String(255), unique=True, nullable=False)
    password_hash = Column(Text, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)


class Card(Base):
    __tablename__ = "cards"

    tag_id = Column(String(128), primary_key=True)
    user_id = Column(String(32), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    wallet_address = Column(String(255), nullable=False)
    avatar_url = Column(String(512), default="", nullable=False)
    explorer_link = Column(String(512), nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)


class RewardProfile(Base):
    __tablename__ = "reward_profiles"

    # Not a foreign key to cards: the rewards service owns its own tag space.
    tag_id = Column(String(128), primary_key=True)
    name = Column(String(255), default="", nullable=False)
    wallet_address = Column(String(255), default="", nullable=False)
    avatar = Column(String(512), default="", nullable=False)
    pidoge_balance = Column(Float, default=0, nullable=False)
    tlk_balance = Column(Float, default=0, nullable=False)
    last_check_in = Column(DateTime(timezone=True), nullable=True)
    referrals = Column(JSON, default=list, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)


class CheckIn(Base):
    __tablename__ = "check_ins"

    id = Column(Integer, primary_key=True, autoincrement=True)
    tag_id = Column(String(128), ForeignKey("reward_profiles.tag_id", ondelete="CASCADE"), nullable=False, index=True)
    checked_in_at = Column(DateTime(timezone=True), nullable=False)

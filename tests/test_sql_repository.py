"""
Smoke tests for the SQLRepository against a temporary SQLite database.
"""
from __future__ import annotations

from datetime import datetime, timezone

import pytest
from sqlalchemy.exc import IntegrityError

from tagwallet.repositories.sql_repository import SQLRepository


def test_user_email_is_unique(db_env):
    repo = SQLRepository()
    user = repo.create_user("alice@example.com", password_hash="hash")
    assert repo.get_user(user.id).email == "alice@example.com"
    with pytest.raises(IntegrityError):
        repo.create_user("alice@example.com", password_hash="other")


def test_card_owner_predicate(db_env):
    repo = SQLRepository()
    repo.create_card("tag-1", "owner", "Alice", "GA", "https://x/GA")

    assert repo.update_owned_card("tag-1", "someone-else", {"name": "Mallory"}) is None
    assert repo.get_card("tag-1").name == "Alice"

    card = repo.update_owned_card("tag-1", "owner", {"name": "Alice B."})
    assert card is not None
    assert card.name == "Alice B."


def test_credit_balances_reports_missing_profile(db_env):
    repo = SQLRepository()
    repo.create_reward_profile("B", pidoge_balance=1, tlk_balance=2)

    assert repo.credit_balances("B", pidoge=1.5, tlk=0.75) is True
    assert repo.credit_balances("ghost", pidoge=1.5, tlk=0.75) is False
    profile = repo.get_reward_profile("B")
    assert (profile.pidoge_balance, profile.tlk_balance) == (2.5, 2.75)


def test_check_in_history_is_ordered_utc(db_env):
    repo = SQLRepository()
    repo.create_reward_profile("A")
    first = datetime(2026, 1, 1, 8, 0, tzinfo=timezone.utc)
    second = datetime(2026, 1, 2, 9, 0, tzinfo=timezone.utc)

    repo.apply_check_in("A", now=first, cutoff=first, pidoge=10, tlk=5)
    repo.apply_check_in("A", now=second, cutoff=first, pidoge=10, tlk=5)

    assert repo.get_check_in_history("A") == [first, second]

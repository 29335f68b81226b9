from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest
from sqlalchemy.exc import OperationalError

from tagwallet.core.config import get_settings
from tagwallet.core.errors import AlreadyCheckedInError, NotFoundError
from tagwallet.domain.rewards import CheckInState, check_in_state, primary_referrer
from tagwallet.repositories.sql_repository import SQLRepository
from tagwallet.services.reward_service import RewardService

NOW = datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture()
def repo(db_env):
    return SQLRepository()


@pytest.fixture()
def svc(repo):
    return RewardService(settings=get_settings(), repository=repo)


def _balances(svc: RewardService, tag_id: str) -> tuple[float, float]:
    profile = svc.get_profile(tag_id)
    return profile["pidoge_balance"], profile["tlk_balance"]


def test_state_is_derived_from_last_check_in():
    assert check_in_state(None, NOW) == CheckInState.NEVER_CHECKED_IN
    assert check_in_state(NOW - timedelta(hours=23, minutes=59), NOW) == CheckInState.CHECKED_IN_TODAY
    assert check_in_state(NOW - timedelta(hours=24), NOW) == CheckInState.ELIGIBLE_AGAIN
    # naive values are read as UTC
    assert check_in_state(datetime(2026, 3, 1, 1, 0), NOW) == CheckInState.CHECKED_IN_TODAY


def test_primary_referrer_is_first_entry_only():
    assert primary_referrer(["B", "C"]) == "B"
    assert primary_referrer([]) is None
    assert primary_referrer(None) is None


def test_get_profile_returns_full_record(svc, repo):
    repo.create_reward_profile("A", name="Alice", wallet_address="GA", avatar="/a.png", referrals=["B"])

    assert svc.get_profile("A") == {
        "tag_id": "A",
        "name": "Alice",
        "wallet_address": "GA",
        "avatar": "/a.png",
        "pidoge_balance": 0.0,
        "tlk_balance": 0.0,
        "last_check_in": None,
        "check_in_history": [],
        "referrals": ["B"],
    }


def test_get_missing_profile(svc):
    with pytest.raises(NotFoundError):
        svc.get_profile("ghost")


def test_first_check_in_credits_base_reward(svc, repo):
    repo.create_reward_profile("A")

    result = svc.check_in("A", now=NOW)

    assert (result.pidoge_balance, result.tlk_balance) == (10, 5)
    profile = svc.get_profile("A")
    assert (profile["pidoge_balance"], profile["tlk_balance"]) == (10, 5)
    assert profile["last_check_in"] == NOW.isoformat()
    assert profile["check_in_history"] == [NOW.isoformat()]


def test_repeat_within_cooldown_is_rejected_without_mutation(svc, repo):
    repo.create_reward_profile("A")
    svc.check_in("A", now=NOW)

    with pytest.raises(AlreadyCheckedInError):
        svc.check_in("A", now=NOW + timedelta(hours=23, minutes=59, seconds=59))

    assert _balances(svc, "A") == (10, 5)
    assert len(svc.get_profile("A")["check_in_history"]) == 1


def test_check_in_allowed_again_after_exactly_24_hours(svc, repo):
    repo.create_reward_profile("A")
    svc.check_in("A", now=NOW)
    later = NOW + timedelta(hours=24)

    result = svc.check_in("A", now=later)

    assert (result.pidoge_balance, result.tlk_balance) == (20, 10)
    profile = svc.get_profile("A")
    assert profile["check_in_history"] == [NOW.isoformat(), later.isoformat()]
    assert profile["last_check_in"] == later.isoformat()


def test_seeded_recent_check_in_blocks(svc, repo):
    repo.create_reward_profile("A", pidoge_balance=3, tlk_balance=1, last_check_in=NOW - timedelta(hours=1))
    with pytest.raises(AlreadyCheckedInError):
        svc.check_in("A", now=NOW)
    assert _balances(svc, "A") == (3, 1)


def test_check_in_unknown_tag_creates_nothing(svc, repo):
    with pytest.raises(NotFoundError):
        svc.check_in("ghost", now=NOW)
    assert repo.get_reward_profile("ghost") is None
    assert repo.get_check_in_history("ghost") == []


def test_referrer_receives_bonus(svc, repo):
    repo.create_reward_profile("B")
    repo.create_reward_profile("A", referrals=["B"])

    result = svc.check_in("A", now=NOW)

    assert (result.pidoge_balance, result.tlk_balance) == (10, 5)
    assert result.referrer_credited == "B"
    assert _balances(svc, "B") == (1.5, 0.75)
    # the bonus is not a check-in for the referrer
    assert svc.get_profile("B")["check_in_history"] == []


def test_only_direct_referrer_is_rewarded(svc, repo):
    repo.create_reward_profile("C")
    repo.create_reward_profile("B")
    repo.create_reward_profile("A", referrals=["B", "C"])

    svc.check_in("A", now=NOW)

    assert _balances(svc, "B") == (1.5, 0.75)
    assert _balances(svc, "C") == (0, 0)


def test_referrer_bonus_ignores_referrer_cooldown(svc, repo):
    repo.create_reward_profile("B")
    repo.create_reward_profile("A", referrals=["B"])
    svc.check_in("B", now=NOW)

    svc.check_in("A", now=NOW + timedelta(minutes=5))

    assert _balances(svc, "B") == (11.5, 5.75)


def test_missing_referrer_is_skipped(svc, repo):
    repo.create_reward_profile("A", referrals=["ghost"])

    result = svc.check_in("A", now=NOW)

    assert (result.pidoge_balance, result.tlk_balance) == (10, 5)
    assert result.referrer_credited is None
    assert repo.get_reward_profile("ghost") is None


def test_referral_failure_does_not_undo_check_in(svc, repo, monkeypatch):
    repo.create_reward_profile("B")
    repo.create_reward_profile("A", referrals=["B"])

    def boom(*args, **kwargs):
        raise OperationalError("UPDATE reward_profiles", {}, Exception("database is locked"))

    monkeypatch.setattr(repo, "credit_balances", boom)

    result = svc.check_in("A", now=NOW)

    assert (result.pidoge_balance, result.tlk_balance) == (10, 5)
    assert result.referrer_credited is None
    assert _balances(svc, "A") == (10, 5)
    assert _balances(svc, "B") == (0, 0)


def test_conditional_update_lets_only_one_of_two_racers_win(repo):
    """Two writers that both saw an eligible profile: the database admits only one."""
    repo.create_reward_profile("A")
    cutoff = NOW - timedelta(hours=24)

    first = repo.apply_check_in("A", now=NOW, cutoff=cutoff, pidoge=10, tlk=5)
    second = repo.apply_check_in("A", now=NOW, cutoff=cutoff, pidoge=10, tlk=5)

    assert first is not None
    assert second is None
    profile = repo.get_reward_profile("A")
    assert (profile.pidoge_balance, profile.tlk_balance) == (10, 5)
    assert len(repo.get_check_in_history("A")) == 1

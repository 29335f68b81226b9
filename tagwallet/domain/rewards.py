"""Daily check-in rules: cooldown, reward amounts and derived state."""
from __future__ import annotations

from datetime import datetime, timedelta
from enum import Enum
from typing import Optional

from tagwallet.core.utils import as_utc

CHECK_IN_COOLDOWN = timedelta(hours=24)
CHECK_IN_PIDOGE = 10
CHECK_IN_TLK = 5
# Paid to the direct referrer on every successful check-in: 15% of the base reward.
REFERRAL_PIDOGE = 1.5
REFERRAL_TLK = 0.75


class CheckInState(str, Enum):
    NEVER_CHECKED_IN = "never_checked_in"
    CHECKED_IN_TODAY = "checked_in_today"
    ELIGIBLE_AGAIN = "eligible_again"


def check_in_state(last_check_in: Optional[datetime], now: datetime) -> CheckInState:
    last = as_utc(last_check_in)
    if last is None:
        return CheckInState.NEVER_CHECKED_IN
    if as_utc(now) - last < CHECK_IN_COOLDOWN:
        return CheckInState.CHECKED_IN_TODAY
    return CheckInState.ELIGIBLE_AGAIN


def cooldown_cutoff(now: datetime) -> datetime:
    """Latest `last_check_in` that still allows a check-in at `now`."""
    return as_utc(now) - CHECK_IN_COOLDOWN


def primary_referrer(referrals: Optional[list]) -> Optional[str]:
    """Only the first entry of the referral chain is rewarded."""
    if not referrals:
        return None
    value = str(referrals[0] or "").strip()
    return value or None

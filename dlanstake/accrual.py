"""Whole-day accrual clock for the standard and VIP claim streams."""

from __future__ import annotations

import enum

from dlanstake.config import SECONDS_PER_DAY


class Stream(enum.Enum):
    STANDARD = "standard"
    VIP = "vip"


def accrual_baseline(last_claim_ts: int | None, now: int) -> int:
    """Return the timestamp accrual is measured from.

    An account that has never claimed (no state, or a zero timestamp) is
    treated as having claimed exactly one day before ``now``.
    """
    if not last_claim_ts:
        return now - SECONDS_PER_DAY
    return last_claim_ts


def elapsed_days(last_claim_ts: int | None, now: int) -> int:
    baseline = accrual_baseline(last_claim_ts, now)
    if now <= baseline:
        return 0
    return (now - baseline) // SECONDS_PER_DAY

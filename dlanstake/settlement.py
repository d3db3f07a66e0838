"""Reserve-constrained claim settlement.

A claim converts accrued whole days into a gross USDT amount, caps it by what
the vault reserve can pay, and splits it between the fee recipient and the
user. The fee is always ``gross // 3`` and the user receives the exact
remainder, so the split never creates or loses a base unit.

The same ``settle`` is used for the standard and VIP streams; only the rate
source and destination accounts differ. The VIP stream additionally claims at
least one day (``vip_claim_days``).
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

from dlanstake.config import DEFAULT_DLAN_PER_USD_PER_DAY, USDT_DECIMALS
from dlanstake.errors import (
    EmptyReserve,
    InsufficientReserve,
    NothingAccrued,
    ZeroRate,
)
from dlanstake.units import Amount, to_base_units, to_human

FEE_DIVISOR = 3
USER_SHARE = Decimal(2) / Decimal(3)
DAYS_PER_YEAR = 365


@dataclass(frozen=True)
class Settlement:
    days_accrued: int
    days_settled: int
    gross_units: int
    fee_units: int
    user_units: int

    @property
    def capped(self) -> bool:
        """True when the reserve paid fewer days than had accrued."""
        return self.days_settled < self.days_accrued


def settle(units_per_day: int, days_accrued: int, reserve_units: int) -> Settlement:
    if units_per_day <= 0:
        raise ZeroRate()
    if days_accrued <= 0:
        raise NothingAccrued()
    if reserve_units <= 0:
        raise EmptyReserve()

    days = days_accrued
    if reserve_units < units_per_day * days_accrued:
        max_days = reserve_units // units_per_day
        if max_days <= 0:
            raise InsufficientReserve()
        days = min(days_accrued, max_days)

    gross = units_per_day * days
    fee = gross // FEE_DIVISOR
    return Settlement(
        days_accrued=days_accrued,
        days_settled=days,
        gross_units=gross,
        fee_units=fee,
        user_units=gross - fee,
    )


def vip_claim_days(days_accrued: int) -> int:
    """VIP tiers always claim at least one day, even if the clock says zero."""
    return max(1, days_accrued)


def standard_units_per_day(
    balance_units: int,
    reward_decimals: int,
    dlan_per_usd_per_day: Amount = DEFAULT_DLAN_PER_USD_PER_DAY,
) -> int:
    """Gross daily USDT entitlement, in base units, for a DLAN balance."""
    divisor = Decimal(str(dlan_per_usd_per_day))
    if divisor <= 0:
        raise ValueError(f"dlan_per_usd_per_day must be positive, got {divisor}")
    usd_per_day = to_human(balance_units, reward_decimals) / divisor
    return to_base_units(usd_per_day, USDT_DECIMALS)


def vip_units_per_day(usd_per_day: Amount) -> int:
    return to_base_units(usd_per_day, USDT_DECIMALS)


def apr_estimate(dlan_per_usd_per_day: Amount = DEFAULT_DLAN_PER_USD_PER_DAY) -> float:
    """Gross APR in percent implied by the DLAN-per-dollar-per-day rule."""
    return DAYS_PER_YEAR / float(dlan_per_usd_per_day) * 100


def net_apr_estimate(
    dlan_per_usd_per_day: Amount = DEFAULT_DLAN_PER_USD_PER_DAY,
) -> float:
    """Net APR in percent after the fee split.

    Uses the flat 2/3 user share, so it can drift from floor-divided
    settlements on very small amounts. Display only.
    """
    return apr_estimate(dlan_per_usd_per_day) * float(USER_SHARE)

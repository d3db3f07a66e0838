"""Error taxonomy for staking actions.

Every error raised on purpose by the SDK derives from ``DlanStakeError`` and
carries a message fit to show the user as-is.
"""

from __future__ import annotations


class DlanStakeError(Exception):
    """Base class for staking errors."""

    default_message = "staking action failed"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.default_message)

    @property
    def message(self) -> str:
        return str(self.args[0])


class WalletNotConnected(DlanStakeError):
    default_message = "connect a wallet first"


class QuoteUnavailable(DlanStakeError):
    default_message = "price quote unavailable"


class ZeroOrNegativeInput(DlanStakeError):
    default_message = "amount must be greater than zero"


class ZeroRate(DlanStakeError):
    default_message = "daily payout rate is zero"


class NothingAccrued(DlanStakeError):
    default_message = "no accrued days to claim"


class EmptyReserve(DlanStakeError):
    default_message = "vault reserve is empty"


class InsufficientReserve(DlanStakeError):
    default_message = "vault reserve cannot cover a single day"


class ChainSubmissionFailed(DlanStakeError):
    default_message = "transaction submission failed"


class ConfigUnavailable(DlanStakeError):
    default_message = "VIP configuration unavailable"


class NotVipEligible(DlanStakeError):
    default_message = "this payout is not available for the connected wallet"

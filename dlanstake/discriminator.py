"""Anchor account and instruction discriminators for the staking program."""

import hashlib

DISCRIMINATOR_SIZE = 8


def _sha256_first8(s: str) -> bytes:
    return hashlib.sha256(s.encode()).digest()[:8]


def account_discriminator(name: str) -> bytes:
    """Discriminator for an Anchor account type, e.g. ``UserState``."""
    return _sha256_first8(f"account:{name}")


def instruction_discriminator(name: str) -> bytes:
    """Discriminator for an Anchor instruction, e.g. ``invest_claim_split``."""
    return _sha256_first8(f"global:{name}")


DISCRIMINATOR_USER_STATE = account_discriminator("UserState")
DISCRIMINATOR_VIP_STATE = account_discriminator("VipState")

DISCRIMINATOR_STAKE_AND_MINT_PRICED = instruction_discriminator(
    "stake_and_mint_priced"
)
DISCRIMINATOR_INVEST_CLAIM_SPLIT = instruction_discriminator("invest_claim_split")
DISCRIMINATOR_VIP_CLAIM_SPLIT_TIMED = instruction_discriminator(
    "vip_claim_split_timed"
)


def validate_discriminator(data: bytes, expected: bytes) -> None:
    """Validate the 8-byte discriminator prefix. Raises ValueError on mismatch."""
    if len(data) < DISCRIMINATOR_SIZE:
        raise ValueError(
            f"data too short: {len(data)} bytes, need at least {DISCRIMINATOR_SIZE}"
        )
    got = data[:DISCRIMINATOR_SIZE]
    if got != expected:
        raise ValueError(
            f"invalid discriminator: got {got.hex()}, want {expected.hex()}"
        )

"""On-chain account data structures for the staking program.

Anchor accounts: an 8-byte discriminator followed by the Borsh-encoded
fields. Both state accounts have a fixed layout, so they are decoded with
struct.unpack_from and tolerate extra trailing bytes for forward
compatibility.
"""

from __future__ import annotations

import struct
from dataclasses import dataclass

from solders.pubkey import Pubkey  # type: ignore[import-untyped]

from dlanstake.discriminator import (
    DISCRIMINATOR_SIZE,
    DISCRIMINATOR_USER_STATE,
    DISCRIMINATOR_VIP_STATE,
    validate_discriminator,
)


def _pubkey(data: bytes, offset: int) -> Pubkey:
    return Pubkey.from_bytes(data[offset : offset + 32])


def _deserialize(data: bytes, discriminator: bytes, min_size: int) -> bytes:
    """Validate discriminator and return the body bytes."""
    validate_discriminator(data, discriminator)
    body = data[DISCRIMINATOR_SIZE:]
    if len(body) < min_size:
        raise ValueError(
            f"account data too short: have {len(body)} bytes, need at least {min_size}"
        )
    return body


@dataclass
class UserState:
    authority: Pubkey  # 32 bytes
    last_invest_ts: int  # i64, unix seconds; 0 = never claimed

    STRUCT_SIZE = 40

    @classmethod
    def from_bytes(
        cls, data: bytes, discriminator: bytes = DISCRIMINATOR_USER_STATE
    ) -> UserState:
        b = _deserialize(data, discriminator, cls.STRUCT_SIZE)
        authority = _pubkey(b, 0)
        (last_ts,) = struct.unpack_from("<q", b, 32)
        return cls(authority=authority, last_invest_ts=last_ts)

    @property
    def last_claim_ts(self) -> int:
        return self.last_invest_ts


@dataclass
class VipState:
    authority: Pubkey  # 32 bytes
    last_vip_ts: int  # i64, unix seconds; 0 = never claimed

    STRUCT_SIZE = 40

    @classmethod
    def from_bytes(
        cls, data: bytes, discriminator: bytes = DISCRIMINATOR_VIP_STATE
    ) -> VipState:
        b = _deserialize(data, discriminator, cls.STRUCT_SIZE)
        authority = _pubkey(b, 0)
        (last_ts,) = struct.unpack_from("<q", b, 32)
        return cls(authority=authority, last_vip_ts=last_ts)

    @property
    def last_claim_ts(self) -> int:
        return self.last_vip_ts

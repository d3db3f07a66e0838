"""Shared fakes for dashboard and action tests."""

from __future__ import annotations

from typing import Sequence

import pytest
from solders.instruction import Instruction  # type: ignore[import-untyped]
from solders.keypair import Keypair  # type: ignore[import-untyped]
from solders.pubkey import Pubkey  # type: ignore[import-untyped]
from solders.signature import Signature  # type: ignore[import-untyped]

from dlanstake.accrual import Stream
from dlanstake.client import Deployment, MintInfo
from dlanstake.errors import ChainSubmissionFailed
from dlanstake.wallet import KeypairWallet, Wallet

NOW = 1_750_000_000


class FakeChain:
    """In-memory stand-in for dlanstake.client.Client."""

    def __init__(self, deployment: Deployment) -> None:
        self._deployment = deployment
        self.mint = MintInfo(supply=1_000 * 10**9, decimals=9)
        self.balances: dict[Pubkey, int] = {}
        self.last_claim: dict[Stream, int | None] = {
            Stream.STANDARD: None,
            Stream.VIP: None,
        }
        self.sent: list[Instruction] = []
        self.fail_send = False
        self.reads: list[str] = []
        # Applied to balances when a transaction confirms.
        self.on_send: dict[Pubkey, int] = {}

    @property
    def deployment(self) -> Deployment:
        return self._deployment

    async def fetch_mint_info(self) -> MintInfo:
        return self.mint

    async def fetch_token_balance(self, token_account: Pubkey) -> int:
        self.reads.append(f"balance:{token_account}")
        return self.balances.get(token_account, 0)

    async def fetch_reserve(self) -> int:
        self.reads.append("reserve")
        return self.balances.get(self._deployment.vault_token, 0)

    async def fetch_last_claim_ts(self, stream: Stream, authority: Pubkey) -> int | None:
        self.reads.append(f"ts:{stream.value}")
        return self.last_claim[stream]

    async def send_and_confirm(
        self, instructions: Sequence[Instruction], wallet: Wallet
    ) -> Signature:
        if self.fail_send:
            raise ChainSubmissionFailed("transaction submission failed: blockhash not found")
        self.sent.extend(instructions)
        self.balances.update(self.on_send)
        return Signature.default()


class FakeQuotes:
    def __init__(self, out: int | None = 150_000_000) -> None:
        self.out = out
        self.requests: list[int] = []

    async def quote_stable_output(self, lamports: int) -> int | None:
        self.requests.append(lamports)
        return self.out


def _key(seed: int) -> Pubkey:
    return Keypair.from_seed(bytes([seed]) * 32).pubkey()


@pytest.fixture
def deployment() -> Deployment:
    return Deployment(
        program_id=_key(1),
        dlan_mint=_key(2),
        usdt_mint=_key(3),
        admin=_key(4),
        vault_authority=_key(5),
        vault_token=_key(6),
    )


@pytest.fixture
def chain(deployment: Deployment) -> FakeChain:
    return FakeChain(deployment)


@pytest.fixture
def wallet() -> KeypairWallet:
    return KeypairWallet(Keypair.from_seed(bytes([9]) * 32))


@pytest.fixture
def quotes() -> FakeQuotes:
    return FakeQuotes()

"""Wallet interface used to sign staking transactions."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Protocol

from solders.hash import Hash  # type: ignore[import-untyped]
from solders.keypair import Keypair  # type: ignore[import-untyped]
from solders.message import Message  # type: ignore[import-untyped]
from solders.pubkey import Pubkey  # type: ignore[import-untyped]
from solders.transaction import Transaction  # type: ignore[import-untyped]


class Wallet(Protocol):
    def pubkey(self) -> Pubkey: ...

    def sign_transaction(self, message: Message, blockhash: Hash) -> Transaction: ...

    def sign_all_transactions(
        self, messages: list[Message], blockhash: Hash
    ) -> list[Transaction]: ...


class KeypairWallet:
    """Signs with a local keypair, e.g. a Solana CLI keypair file."""

    def __init__(self, keypair: Keypair) -> None:
        self._keypair = keypair

    @classmethod
    def from_file(cls, path: str | Path) -> KeypairWallet:
        """Load a Solana CLI keypair file (a JSON array of 64 bytes)."""
        raw = json.loads(Path(path).expanduser().read_text())
        return cls(Keypair.from_bytes(bytes(raw)))

    def pubkey(self) -> Pubkey:
        return self._keypair.pubkey()

    def sign_transaction(self, message: Message, blockhash: Hash) -> Transaction:
        return Transaction([self._keypair], message, blockhash)

    def sign_all_transactions(
        self, messages: list[Message], blockhash: Hash
    ) -> list[Transaction]:
        return [self.sign_transaction(m, blockhash) for m in messages]

"""Async RPC client for the staking program's accounts and transactions."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Protocol, Sequence

from solana.exceptions import SolanaRpcException  # type: ignore[import-untyped]
from solana.rpc.async_api import AsyncClient  # type: ignore[import-untyped]
from solana.rpc.commitment import Commitment, Confirmed  # type: ignore[import-untyped]
from solana.rpc.core import (  # type: ignore[import-untyped]
    RPCException,
    TransactionExpiredBlockheightExceededError,
    UnconfirmedTxError,
)
from solana.rpc.types import TxOpts  # type: ignore[import-untyped]
from solders.instruction import Instruction  # type: ignore[import-untyped]
from solders.message import Message  # type: ignore[import-untyped]
from solders.pubkey import Pubkey  # type: ignore[import-untyped]
from solders.signature import Signature  # type: ignore[import-untyped]

from dlanstake.accrual import Stream
from dlanstake.config import (
    ADMIN_WALLET,
    DEFAULT_DLAN_DECIMALS,
    DLAN_MINT,
    PROGRAM_ID,
    USDT_MINT,
    VAULT_AUTHORITY,
    VAULT_USDT_ATA,
    rpc_url,
)
from dlanstake.errors import ChainSubmissionFailed
from dlanstake.pda import derive_user_state_pda, derive_vip_state_pda
from dlanstake.rpc import new_rpc_client
from dlanstake.state import UserState, VipState
from dlanstake.wallet import Wallet

logger = logging.getLogger(__name__)

READ_ERRORS = (RPCException, SolanaRpcException)
_SEND_ERRORS = (
    RPCException,
    SolanaRpcException,
    UnconfirmedTxError,
    TransactionExpiredBlockheightExceededError,
)


@dataclass(frozen=True)
class Deployment:
    """Fixed addresses of one staking program deployment."""

    program_id: Pubkey
    dlan_mint: Pubkey
    usdt_mint: Pubkey
    admin: Pubkey
    vault_authority: Pubkey
    vault_token: Pubkey

    @classmethod
    def mainnet(cls) -> Deployment:
        return cls(
            program_id=Pubkey.from_string(PROGRAM_ID),
            dlan_mint=Pubkey.from_string(DLAN_MINT),
            usdt_mint=Pubkey.from_string(USDT_MINT),
            admin=Pubkey.from_string(ADMIN_WALLET),
            vault_authority=Pubkey.from_string(VAULT_AUTHORITY),
            vault_token=Pubkey.from_string(VAULT_USDT_ATA),
        )


@dataclass(frozen=True)
class MintInfo:
    supply: int
    decimals: int


class ChainClient(Protocol):
    """Chain operations the dashboard and action submitter depend on."""

    @property
    def deployment(self) -> Deployment: ...

    async def fetch_mint_info(self) -> MintInfo: ...

    async def fetch_token_balance(self, token_account: Pubkey) -> int: ...

    async def fetch_reserve(self) -> int: ...

    async def fetch_last_claim_ts(self, stream: Stream, authority: Pubkey) -> int | None: ...

    async def send_and_confirm(
        self, instructions: Sequence[Instruction], wallet: Wallet
    ) -> Signature: ...


class Client:
    """Reads staking accounts and submits signed staking transactions."""

    def __init__(
        self,
        solana_rpc: AsyncClient,
        deployment: Deployment,
        commitment: Commitment = Confirmed,
    ) -> None:
        self._solana_rpc = solana_rpc
        self._deployment = deployment
        self._commitment = commitment

    @classmethod
    def from_env(cls, env: str) -> Client:
        """Create a client configured for the given environment.

        Args:
            env: Environment name ("mainnet-beta", "devnet", "localnet").
                ``DLAN_RPC_URL`` overrides the URL.
        """
        return cls(new_rpc_client(rpc_url(env)), Deployment.mainnet())

    @classmethod
    def mainnet_beta(cls) -> Client:
        return cls.from_env("mainnet-beta")

    @classmethod
    def localnet(cls) -> Client:
        return cls.from_env("localnet")

    @property
    def deployment(self) -> Deployment:
        return self._deployment

    async def aclose(self) -> None:
        await self._solana_rpc.close()

    # -- Token balances --

    async def fetch_mint_info(self) -> MintInfo:
        """Supply and decimals of the DLAN mint.

        Falls back to zero supply and the default decimals if the mint
        cannot be read.
        """
        try:
            resp = await self._solana_rpc.get_token_supply(self._deployment.dlan_mint)
        except READ_ERRORS as e:
            logger.debug("mint read failed, assuming empty supply: %s", e)
            return MintInfo(supply=0, decimals=DEFAULT_DLAN_DECIMALS)
        return MintInfo(supply=int(resp.value.amount), decimals=resp.value.decimals)

    async def fetch_token_balance(self, token_account: Pubkey) -> int:
        """Token account balance in base units; 0 if the account is missing."""
        try:
            resp = await self._solana_rpc.get_token_account_balance(token_account)
        except READ_ERRORS as e:
            logger.debug("balance read for %s failed, treating as 0: %s", token_account, e)
            return 0
        return int(resp.value.amount)

    async def fetch_reserve(self) -> int:
        """Live USDT balance of the payout vault."""
        return await self.fetch_token_balance(self._deployment.vault_token)

    # -- Program accounts --

    async def fetch_user_state(self, authority: Pubkey) -> UserState | None:
        addr, _ = derive_user_state_pda(self._deployment.program_id, authority)
        data = await self._fetch_account_data(addr)
        return UserState.from_bytes(data) if data is not None else None

    async def fetch_vip_state(self, authority: Pubkey) -> VipState | None:
        addr, _ = derive_vip_state_pda(self._deployment.program_id, authority)
        data = await self._fetch_account_data(addr)
        return VipState.from_bytes(data) if data is not None else None

    async def fetch_last_claim_ts(self, stream: Stream, authority: Pubkey) -> int | None:
        """Last claim timestamp of a stream, or None if it never claimed.

        An unreadable or undecodable state account counts as never claimed.
        """
        try:
            if stream is Stream.STANDARD:
                state: UserState | VipState | None = await self.fetch_user_state(authority)
            else:
                state = await self.fetch_vip_state(authority)
        except (*READ_ERRORS, ValueError) as e:
            logger.debug("%s state read failed, treating as unclaimed: %s", stream.value, e)
            return None
        if state is None or state.last_claim_ts == 0:
            return None
        return state.last_claim_ts

    # -- Transactions --

    async def send_and_confirm(
        self, instructions: Sequence[Instruction], wallet: Wallet
    ) -> Signature:
        """Sign, submit and confirm a transaction. Raises ChainSubmissionFailed."""
        try:
            latest = await self._solana_rpc.get_latest_blockhash()
            blockhash = latest.value.blockhash
            message = Message.new_with_blockhash(
                list(instructions), wallet.pubkey(), blockhash
            )
            tx = wallet.sign_transaction(message, blockhash)
            resp = await self._solana_rpc.send_raw_transaction(
                bytes(tx), opts=TxOpts(preflight_commitment=self._commitment)
            )
            signature = resp.value
            logger.info("transaction submitted: %s", signature)
            status = await self._solana_rpc.confirm_transaction(
                signature,
                self._commitment,
                last_valid_block_height=latest.value.last_valid_block_height,
            )
        except _SEND_ERRORS as e:
            raise ChainSubmissionFailed(f"transaction submission failed: {e}") from e

        result = status.value[0] if status.value else None
        if result is not None and result.err is not None:
            raise ChainSubmissionFailed(f"transaction {signature} failed: {result.err}")
        logger.info("transaction confirmed: %s", signature)
        return signature

    # -- Internal helpers --

    async def _fetch_account_data(self, addr: Pubkey) -> bytes | None:
        resp = await self._solana_rpc.get_account_info(addr)
        if resp.value is None:
            return None
        return bytes(resp.value.data)

"""Builds, submits and reconciles the three staking program actions."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from solders.instruction import Instruction  # type: ignore[import-untyped]
from solders.pubkey import Pubkey  # type: ignore[import-untyped]
from solders.signature import Signature  # type: ignore[import-untyped]

from dlanstake import instructions
from dlanstake.client import ChainClient
from dlanstake.errors import ZeroOrNegativeInput
from dlanstake.instructions import ClaimAccounts, StakeAccounts
from dlanstake.wallet import Wallet

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ActionReceipt:
    """Confirmed signature plus the balances re-read after confirmation."""

    signature: Signature
    balances: dict[Pubkey, int] = field(default_factory=dict)


class ChainActions:
    """Submits staking actions on behalf of one connected wallet.

    Balances are only re-read after a confirmed submission; a failed
    submission raises ChainSubmissionFailed and refreshes nothing.
    """

    def __init__(self, client: ChainClient, wallet: Wallet) -> None:
        self._client = client
        self._wallet = wallet

    @property
    def authority(self) -> Pubkey:
        return self._wallet.pubkey()

    async def deposit_and_mint(self, lamports: int, mint_units: int) -> ActionReceipt:
        if lamports <= 0 or mint_units <= 0:
            raise ZeroOrNegativeInput()
        d = self._client.deployment
        accounts = StakeAccounts.derive(d.program_id, self.authority, d.dlan_mint, d.admin)
        ix = instructions.stake_and_mint_priced(
            d.program_id, accounts, lamports, mint_units
        )
        signature = await self._client.send_and_confirm([ix], self._wallet)
        logger.info(
            "staked %d lamports, minted %d DLAN units: %s", lamports, mint_units, signature
        )
        balance = await self._client.fetch_token_balance(accounts.user_token)
        return ActionReceipt(signature, {accounts.user_token: balance})

    async def claim_standard(
        self, user_units: int, fee_units: int, days: int, fee_recipient: Pubkey
    ) -> ActionReceipt:
        d = self._client.deployment
        accounts = ClaimAccounts.derive_standard(
            d.program_id,
            self.authority,
            fee_recipient,
            d.usdt_mint,
            d.vault_token,
            d.vault_authority,
        )
        ix = instructions.invest_claim_split(
            d.program_id, accounts, user_units, fee_units, days
        )
        return await self._submit_claim("standard", accounts, ix, user_units, days)

    async def claim_vip(
        self, user_units: int, fee_units: int, days: int, fee_recipient: Pubkey
    ) -> ActionReceipt:
        d = self._client.deployment
        accounts = ClaimAccounts.derive_vip(
            d.program_id,
            self.authority,
            fee_recipient,
            d.usdt_mint,
            d.vault_token,
            d.vault_authority,
        )
        ix = instructions.vip_claim_split_timed(
            d.program_id, accounts, user_units, fee_units, days
        )
        return await self._submit_claim("vip", accounts, ix, user_units, days)

    async def _submit_claim(
        self,
        kind: str,
        accounts: ClaimAccounts,
        ix: Instruction,
        user_units: int,
        days: int,
    ) -> ActionReceipt:
        signature = await self._client.send_and_confirm([ix], self._wallet)
        logger.info(
            "%s claim of %d USDT units for %d days: %s", kind, user_units, days, signature
        )
        user_balance = await self._client.fetch_token_balance(accounts.user_token)
        reserve = await self._client.fetch_token_balance(accounts.vault_token)
        return ActionReceipt(
            signature,
            {accounts.user_token: user_balance, accounts.vault_token: reserve},
        )

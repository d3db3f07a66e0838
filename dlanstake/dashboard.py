"""Application state and user actions for the staking dashboard.

``DashboardState`` is the only mutable state. It changes at a small set of
points: connect/disconnect, VIP refresh, each poll tick, stake preview, and
after a confirmed submission. User actions (``stake``, ``claim_all``,
``claim_vip``) never raise staking errors; they return a ``Notice`` for the
front end to show once.

Every claim re-reads the accrual timestamp, then the vault reserve,
immediately before settling, so the reserve snapshot is never older than the
accrual snapshot it is checked against. The program re-validates the reserve
on-chain regardless.
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
import time
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Awaitable, Callable

import httpx
from solders.pubkey import Pubkey  # type: ignore[import-untyped]
from solders.signature import Signature  # type: ignore[import-untyped]

from dlanstake.accrual import Stream, elapsed_days
from dlanstake.actions import ActionReceipt, ChainActions
from dlanstake.client import READ_ERRORS, ChainClient
from dlanstake.config import (
    DEFAULT_DLAN_DECIMALS,
    POLL_INTERVAL_SECONDS,
    SOL_DECIMALS,
    USDT_DECIMALS,
)
from dlanstake.errors import (
    ConfigUnavailable,
    DlanStakeError,
    NothingAccrued,
    NotVipEligible,
    QuoteUnavailable,
    WalletNotConnected,
    ZeroOrNegativeInput,
)
from dlanstake.oracle import QuoteClient, mint_units_for_quote
from dlanstake.pda import derive_token_account
from dlanstake.settlement import (
    Settlement,
    apr_estimate,
    net_apr_estimate,
    settle,
    standard_units_per_day,
    vip_claim_days,
    vip_units_per_day,
)
from dlanstake.units import Amount, format_units, share_pct, to_base_units, to_human
from dlanstake.vip import VipConfig, VipConfigSource, default_vip_config, resolve_tier
from dlanstake.wallet import Wallet

logger = logging.getLogger(__name__)

_POLL_ERRORS = (*READ_ERRORS, httpx.HTTPError)


@dataclass
class DashboardState:
    wallet: Pubkey | None = None
    vip: VipConfig = field(default_factory=default_vip_config)
    dlan_decimals: int = DEFAULT_DLAN_DECIMALS
    dlan_supply: int = 0
    dlan_balance: int = 0
    usdt_balance: int = 0
    reserve: int = 0
    standard_days: int = 0
    vip_days: int = 0
    stake_preview: Decimal | None = None


@dataclass(frozen=True)
class Notice:
    ok: bool
    message: str
    signature: Signature | None = None


class Dashboard:
    """Drives the dashboard for at most one connected wallet at a time."""

    def __init__(
        self,
        client: ChainClient,
        quotes: QuoteClient,
        vip_source: VipConfigSource,
        clock: Callable[[], float] = time.time,
        poll_interval: float = POLL_INTERVAL_SECONDS,
    ) -> None:
        self._client = client
        self._quotes = quotes
        self._vip_source = vip_source
        self._clock = clock
        self._poll_interval = poll_interval
        self._actions: ChainActions | None = None
        self._poll_task: asyncio.Task[None] | None = None
        self.state = DashboardState()

    # -- Connection lifecycle --

    async def connect(self, wallet: Wallet) -> None:
        await self._stop_polling()
        self._actions = ChainActions(self._client, wallet)
        self.state = DashboardState(wallet=wallet.pubkey(), vip=self.state.vip)
        await self.refresh_vip()
        await self.refresh()
        self._poll_task = asyncio.create_task(self._poll())

    async def disconnect(self) -> None:
        await self._stop_polling()
        self._actions = None
        self.state = DashboardState(vip=self.state.vip)

    async def aclose(self) -> None:
        await self.disconnect()

    @property
    def polling(self) -> bool:
        return self._poll_task is not None and not self._poll_task.done()

    # -- Refresh --

    async def refresh_vip(self) -> None:
        self.state.vip = await self._vip_source.load()

    async def refresh(self) -> None:
        await self.refresh_balances()
        await self.reload_timers()

    async def refresh_balances(self) -> None:
        mint = await self._client.fetch_mint_info()
        self.state.dlan_decimals = mint.decimals
        self.state.dlan_supply = mint.supply
        self.state.reserve = await self._client.fetch_reserve()
        wallet = self.state.wallet
        if wallet is None:
            return
        d = self._client.deployment
        self.state.dlan_balance = await self._client.fetch_token_balance(
            derive_token_account(wallet, d.dlan_mint)
        )
        self.state.usdt_balance = await self._client.fetch_token_balance(
            derive_token_account(wallet, d.usdt_mint)
        )

    async def reload_timers(self) -> None:
        wallet = self.state.wallet
        if wallet is None:
            return
        self.state.standard_days = await self._accrued_days(Stream.STANDARD, wallet)
        self.state.vip_days = await self._accrued_days(Stream.VIP, wallet)

    async def _poll(self) -> None:
        while True:
            await asyncio.sleep(self._poll_interval)
            try:
                await self.refresh()
            except _POLL_ERRORS as e:
                logger.warning("dashboard refresh failed: %s", e)
            except Exception:
                logger.exception("unexpected error in dashboard refresh")

    async def _stop_polling(self) -> None:
        task, self._poll_task = self._poll_task, None
        if task is None:
            return
        task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await task

    # -- Derived views --

    @property
    def vip_buttons(self) -> tuple[Decimal, ...]:
        if self.state.wallet is None:
            return ()
        return resolve_tier(str(self.state.wallet), self.state.vip).buttons

    @property
    def apr_estimate(self) -> float:
        return apr_estimate(self.state.vip.dlan_per_usd_per_day)

    @property
    def net_apr_estimate(self) -> float:
        return net_apr_estimate(self.state.vip.dlan_per_usd_per_day)

    @property
    def share_pct(self) -> str:
        return share_pct(self.state.dlan_balance, self.state.dlan_supply)

    async def preview_stake(self, sol_amount: Amount) -> Decimal | None:
        """Quoted stablecoin value of ``sol_amount`` SOL, or None."""
        try:
            lamports = _positive_units(sol_amount, SOL_DECIMALS)
        except ZeroOrNegativeInput:
            self.state.stake_preview = None
            return None
        out = await self._quotes.quote_stable_output(lamports)
        self.state.stake_preview = to_human(out, USDT_DECIMALS) if out else None
        return self.state.stake_preview

    # -- User actions --

    async def stake(self, sol_amount: Amount) -> Notice:
        return await self._run("stake", lambda: self._stake(sol_amount))

    async def claim_all(self) -> Notice:
        return await self._run("claim", self._claim_all)

    async def claim_vip(self, usd_per_day: Amount) -> Notice:
        return await self._run("VIP claim", lambda: self._claim_vip(usd_per_day))

    async def _run(self, name: str, action: Callable[[], Awaitable[Notice]]) -> Notice:
        try:
            return await action()
        except DlanStakeError as e:
            logger.warning("%s failed: %s", name, e)
            return Notice(ok=False, message=f"{name} failed: {e.message}")

    async def _stake(self, sol_amount: Amount) -> Notice:
        actions = self._require_actions()
        lamports = _positive_units(sol_amount, SOL_DECIMALS)
        out = await self._quotes.quote_stable_output(lamports)
        if out is None:
            raise QuoteUnavailable()
        mint_units = mint_units_for_quote(out, self.state.dlan_decimals)
        if mint_units <= 0:
            raise ZeroOrNegativeInput("amount too small to mint")

        receipt = await actions.deposit_and_mint(lamports, mint_units)
        self._apply(receipt)
        return Notice(
            ok=True,
            message=(
                f"Staked {format_units(lamports, SOL_DECIMALS)} SOL at "
                f"~{format_units(out, USDT_DECIMALS)} USDC, minted "
                f"{format_units(mint_units, self.state.dlan_decimals)} DLAN."
            ),
            signature=receipt.signature,
        )

    async def _claim_all(self) -> Notice:
        actions = self._require_actions()
        wallet = actions.authority
        vip = self.state.vip

        days = await self._accrued_days(Stream.STANDARD, wallet)
        if days <= 0:
            raise NothingAccrued()
        d = self._client.deployment
        balance = await self._client.fetch_token_balance(
            derive_token_account(wallet, d.dlan_mint)
        )
        rate = standard_units_per_day(
            balance, self.state.dlan_decimals, vip.dlan_per_usd_per_day
        )
        reserve = await self._client.fetch_reserve()
        settlement = settle(rate, days, reserve)

        receipt = await actions.claim_standard(
            settlement.user_units,
            settlement.fee_units,
            settlement.days_settled,
            _fee_recipient(vip.fee_recipient),
        )
        self._apply(receipt)
        await self.reload_timers()
        return self._claim_notice("Claim", settlement, receipt)

    async def _claim_vip(self, usd_per_day: Amount) -> Notice:
        actions = self._require_actions()
        wallet = actions.authority
        tier = resolve_tier(str(wallet), self.state.vip)
        try:
            amount = Decimal(str(usd_per_day))
        except ArithmeticError as e:
            raise ZeroOrNegativeInput(f"invalid amount: {usd_per_day!r}") from e
        if amount not in tier.buttons:
            raise NotVipEligible()

        days = vip_claim_days(await self._accrued_days(Stream.VIP, wallet))
        reserve = await self._client.fetch_reserve()
        settlement = settle(vip_units_per_day(amount), days, reserve)

        receipt = await actions.claim_vip(
            settlement.user_units,
            settlement.fee_units,
            settlement.days_settled,
            _fee_recipient(tier.fee_recipient),
        )
        self._apply(receipt)
        await self.reload_timers()
        return self._claim_notice("VIP claim", settlement, receipt)

    # -- Internal helpers --

    def _require_actions(self) -> ChainActions:
        if self._actions is None:
            raise WalletNotConnected()
        return self._actions

    async def _accrued_days(self, stream: Stream, wallet: Pubkey) -> int:
        last = await self._client.fetch_last_claim_ts(stream, wallet)
        return elapsed_days(last, int(self._clock()))

    def _apply(self, receipt: ActionReceipt) -> None:
        wallet = self.state.wallet
        if wallet is None:
            return
        d = self._client.deployment
        targets = {
            derive_token_account(wallet, d.dlan_mint): "dlan_balance",
            derive_token_account(wallet, d.usdt_mint): "usdt_balance",
            d.vault_token: "reserve",
        }
        for account, amount in receipt.balances.items():
            name = targets.get(account)
            if name is not None:
                setattr(self.state, name, amount)

    @staticmethod
    def _claim_notice(
        name: str, settlement: Settlement, receipt: ActionReceipt
    ) -> Notice:
        message = (
            f"{name} for {settlement.days_settled} day(s): "
            f"{format_units(settlement.user_units, USDT_DECIMALS)} USDT net, "
            f"{format_units(settlement.fee_units, USDT_DECIMALS)} USDT fee."
        )
        if settlement.capped:
            message += (
                f" Reserve covered {settlement.days_settled} of "
                f"{settlement.days_accrued} accrued days."
            )
        return Notice(ok=True, message=message, signature=receipt.signature)


def _positive_units(amount: Amount, decimals: int) -> int:
    try:
        units = to_base_units(amount, decimals)
    except ValueError as e:
        raise ZeroOrNegativeInput(str(e)) from e
    if units <= 0:
        raise ZeroOrNegativeInput()
    return units


def _fee_recipient(value: str) -> Pubkey:
    try:
        return Pubkey.from_string(value)
    except ValueError as e:
        raise ConfigUnavailable(f"invalid fee recipient {value!r}") from e

"""VIP tier configuration and per-wallet tier resolution.

The configuration is a static JSON document::

    {
      "invest_usd_per_dlan_rule": {"dlan_per_usd_per_day": 120},
      "invest_fee_recipient": "<base58 pubkey>",
      "tiers": [
        {"wallet": "<base58 pubkey>", "buttons": [5, 10], "fee_recipient": "..."}
      ]
    }

A missing or malformed document is never fatal: ``VipConfigSource.load``
falls back to ``default_vip_config()``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation

import httpx

from dlanstake.config import ADMIN_WALLET, DEFAULT_DLAN_PER_USD_PER_DAY, vip_config_url
from dlanstake.errors import ConfigUnavailable

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class VipTier:
    wallet: str
    buttons: tuple[Decimal, ...]
    fee_recipient: str = ""


@dataclass(frozen=True)
class VipConfig:
    dlan_per_usd_per_day: Decimal
    fee_recipient: str
    tiers: tuple[VipTier, ...] = field(default_factory=tuple)

    @classmethod
    def from_dict(cls, data: object) -> VipConfig:
        """Parse the wire document. Raises ConfigUnavailable if malformed."""
        if not isinstance(data, dict):
            raise ConfigUnavailable("VIP configuration is not a JSON object")
        try:
            rule = data.get("invest_usd_per_dlan_rule") or {}
            divisor = _decimal(
                rule.get("dlan_per_usd_per_day", DEFAULT_DLAN_PER_USD_PER_DAY)
            )
            if divisor <= 0:
                raise ConfigUnavailable("dlan_per_usd_per_day must be positive")
            fee_recipient = data.get("invest_fee_recipient") or ADMIN_WALLET
            tiers = tuple(
                VipTier(
                    wallet=str(t["wallet"]),
                    buttons=tuple(_decimal(b) for b in _list(t.get("buttons", []), "buttons")),
                    fee_recipient=str(t.get("fee_recipient") or ""),
                )
                for t in _list(data.get("tiers", []), "tiers")
            )
        except (AttributeError, KeyError, TypeError) as e:
            raise ConfigUnavailable(f"malformed VIP configuration: {e}") from e
        return cls(
            dlan_per_usd_per_day=divisor,
            fee_recipient=str(fee_recipient),
            tiers=tiers,
        )


@dataclass(frozen=True)
class TierResolution:
    buttons: tuple[Decimal, ...]
    fee_recipient: str

    @property
    def is_vip(self) -> bool:
        return bool(self.buttons)


def _list(value: object, name: str) -> list:
    if not isinstance(value, list):
        raise TypeError(f"{name} must be a list, got {value!r}")
    return value


def _decimal(value: object) -> Decimal:
    if isinstance(value, bool):
        raise TypeError(f"expected a number, got {value!r}")
    try:
        d = Decimal(str(value))
    except InvalidOperation as e:
        raise TypeError(f"expected a number, got {value!r}") from e
    if not d.is_finite():
        raise TypeError(f"expected a finite number, got {value!r}")
    return d


def default_vip_config() -> VipConfig:
    return VipConfig(
        dlan_per_usd_per_day=Decimal(DEFAULT_DLAN_PER_USD_PER_DAY),
        fee_recipient=ADMIN_WALLET,
        tiers=(),
    )


def resolve_tier(wallet: str, config: VipConfig) -> TierResolution:
    """Look up the VIP buttons and fee recipient for ``wallet``."""
    for tier in config.tiers:
        if tier.wallet == wallet:
            return TierResolution(
                buttons=tier.buttons,
                fee_recipient=tier.fee_recipient or config.fee_recipient,
            )
    return TierResolution(buttons=(), fee_recipient=config.fee_recipient)


class VipConfigSource:
    """Loads the VIP configuration document over HTTP."""

    def __init__(
        self,
        url: str | None = None,
        http: httpx.AsyncClient | None = None,
    ) -> None:
        self._url = url or vip_config_url()
        self._http = http or httpx.AsyncClient(timeout=30)

    async def aclose(self) -> None:
        await self._http.aclose()

    async def fetch(self) -> VipConfig:
        try:
            resp = await self._http.get(
                self._url, headers={"Cache-Control": "no-store"}
            )
            resp.raise_for_status()
            data = resp.json()
        except (httpx.HTTPError, ValueError) as e:
            raise ConfigUnavailable(f"VIP configuration unavailable: {e}") from e
        return VipConfig.from_dict(data)

    async def load(self) -> VipConfig:
        """Fetch the configuration, falling back to the default on any failure."""
        try:
            return await self.fetch()
        except ConfigUnavailable as e:
            logger.warning("%s; using default VIP configuration", e)
            return default_vip_config()

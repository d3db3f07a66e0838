"""SOL/USDC quote client used to size DLAN mints."""

from __future__ import annotations

import logging
from decimal import Decimal, InvalidOperation

import httpx

from dlanstake.config import (
    QUOTE_SLIPPAGE_BPS,
    USDC_MINT,
    USDT_DECIMALS,
    WSOL_MINT,
    quote_url,
)
from dlanstake.units import rescale

logger = logging.getLogger(__name__)


class QuoteClient:
    """Fetches SOL -> USDC swap quotes from the Jupiter quote API."""

    def __init__(
        self,
        base_url: str | None = None,
        http: httpx.AsyncClient | None = None,
        slippage_bps: int = QUOTE_SLIPPAGE_BPS,
    ) -> None:
        self._base_url = base_url or quote_url()
        self._http = http or httpx.AsyncClient(timeout=30)
        self._slippage_bps = slippage_bps

    async def aclose(self) -> None:
        await self._http.aclose()

    async def quote_stable_output(self, lamports: int) -> int | None:
        """Return the quoted USDC output in base units, or None.

        None means the quote is unavailable; it never stands in for zero.
        """
        params = {
            "inputMint": WSOL_MINT,
            "outputMint": USDC_MINT,
            "amount": str(lamports),
            "slippageBps": str(self._slippage_bps),
        }
        try:
            resp = await self._http.get(self._base_url, params=params)
            resp.raise_for_status()
            data = resp.json()
        except (httpx.HTTPError, ValueError) as e:
            logger.debug("quote request for %d lamports failed: %s", lamports, e)
            return None
        return parse_out_amount(data)


def parse_out_amount(data: object) -> int | None:
    """Extract a positive integer ``outAmount`` from a quote response body."""
    if not isinstance(data, dict):
        return None
    raw = data.get("outAmount")
    if raw is None or isinstance(raw, bool):
        return None
    try:
        value = Decimal(str(raw))
    except InvalidOperation:
        return None
    if not value.is_finite() or value <= 0:
        return None
    return int(value)


def mint_units_for_quote(out_units: int, reward_decimals: int) -> int:
    """DLAN base units to mint for a quoted stablecoin output (1 DLAN ~ $1)."""
    return rescale(out_units, USDT_DECIMALS, reward_decimals)

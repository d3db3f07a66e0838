"""Quote client tests."""

import asyncio

import httpx
import pytest

from dlanstake.config import USDC_MINT, WSOL_MINT
from dlanstake.oracle import QuoteClient, mint_units_for_quote, parse_out_amount


def _quote(handler, lamports: int = 1_000_000_000):
    async def run():
        http = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        client = QuoteClient(base_url="https://quote.test/v6/quote", http=http)
        try:
            return await client.quote_stable_output(lamports)
        finally:
            await client.aclose()

    return asyncio.run(run())


def test_quote_request_params():
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={"outAmount": "150123456"})

    assert _quote(handler, 2_000_000_000) == 150_123_456
    params = seen[0].url.params
    assert params["inputMint"] == WSOL_MINT
    assert params["outputMint"] == USDC_MINT
    assert params["amount"] == "2000000000"
    assert params["slippageBps"] == "10"


def test_quote_numeric_out_amount():
    assert _quote(lambda r: httpx.Response(200, json={"outAmount": 42})) == 42


@pytest.mark.parametrize(
    "response",
    [
        httpx.Response(500),
        httpx.Response(200, content=b"<html>"),
        httpx.Response(200, json={"error": "no route"}),
        httpx.Response(200, json={"outAmount": "0"}),
    ],
)
def test_quote_unavailable(response):
    assert _quote(lambda r: response) is None


def test_quote_network_error():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("timed out", request=request)

    assert _quote(handler) is None


@pytest.mark.parametrize(
    "data,expected",
    [
        ({"outAmount": "1"}, 1),
        ({"outAmount": "abc"}, None),
        ({"outAmount": True}, None),
        ({"outAmount": "-5"}, None),
        ([], None),
    ],
)
def test_parse_out_amount(data, expected):
    assert parse_out_amount(data) == expected


def test_mint_units_for_quote():
    # 150 USDC quoted -> 150 DLAN at 9 decimals.
    assert mint_units_for_quote(150_000_000, 9) == 150_000_000_000
    assert mint_units_for_quote(150_000_000, 2) == 15_000

"""Async RPC client helpers with retry on rate limiting."""

import asyncio

import httpx
from solana.rpc.async_api import AsyncClient  # type: ignore[import-untyped]
from solana.rpc.commitment import Commitment, Confirmed  # type: ignore[import-untyped]

_DEFAULT_MAX_RETRIES = 5


class _RetryTransport(httpx.AsyncBaseTransport):
    """HTTP transport that retries on 429 Too Many Requests."""

    def __init__(
        self,
        wrapped: httpx.AsyncBaseTransport | None = None,
        max_retries: int = _DEFAULT_MAX_RETRIES,
    ) -> None:
        self._wrapped = wrapped or httpx.AsyncHTTPTransport()
        self._max_retries = max_retries

    async def handle_async_request(self, request: httpx.Request) -> httpx.Response:
        for attempt in range(self._max_retries + 1):
            response = await self._wrapped.handle_async_request(request)
            if response.status_code != 429 or attempt >= self._max_retries:
                return response
            await response.aclose()
            await asyncio.sleep((attempt + 1) * 2)
        return response  # unreachable, but satisfies type checker

    async def aclose(self) -> None:
        await self._wrapped.aclose()


def new_rpc_client(
    url: str,
    timeout: float = 30,
    max_retries: int = _DEFAULT_MAX_RETRIES,
    commitment: Commitment = Confirmed,
) -> AsyncClient:
    """Create an async Solana RPC client with automatic retry on 429 responses."""
    client = AsyncClient(url, commitment=commitment, timeout=timeout)
    # Wrap the provider's transport in place; the session still owns it.
    session = client._provider.session
    session._transport = _RetryTransport(
        wrapped=session._transport,
        max_retries=max_retries,
    )
    return client

"""VIP configuration parsing, loading and tier resolution tests."""

import asyncio
from decimal import Decimal

import httpx
import pytest

from dlanstake.config import ADMIN_WALLET
from dlanstake.errors import ConfigUnavailable
from dlanstake.vip import VipConfig, VipConfigSource, default_vip_config, resolve_tier

VIP_WALLET = "4uQeVj5tqViQh7yWWGStvkEG1Zmhx6uasJtWCJziofM"
FEE_WALLET = "Gxovarj3kNDd6ks54KNXknRh1GP5ETaUdYGr1xgqeVNh"

DOC = {
    "invest_usd_per_dlan_rule": {"dlan_per_usd_per_day": 100},
    "invest_fee_recipient": FEE_WALLET,
    "tiers": [
        {"wallet": VIP_WALLET, "buttons": [5, "10", 2.5]},
        {"wallet": "other", "buttons": [1], "fee_recipient": ADMIN_WALLET},
    ],
}


def _source(handler) -> VipConfigSource:
    http = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return VipConfigSource(url="https://vip.test/vip.json", http=http)


class TestFromDict:
    def test_full_document(self):
        cfg = VipConfig.from_dict(DOC)
        assert cfg.dlan_per_usd_per_day == Decimal(100)
        assert cfg.fee_recipient == FEE_WALLET
        assert cfg.tiers[0].buttons == (Decimal(5), Decimal(10), Decimal("2.5"))

    def test_defaults(self):
        cfg = VipConfig.from_dict({})
        assert cfg.dlan_per_usd_per_day == Decimal(120)
        assert cfg.fee_recipient == ADMIN_WALLET
        assert cfg.tiers == ()

    @pytest.mark.parametrize(
        "doc",
        [
            [],
            {"invest_usd_per_dlan_rule": {"dlan_per_usd_per_day": 0}},
            {"invest_usd_per_dlan_rule": {"dlan_per_usd_per_day": "abc"}},
            {"tiers": [{"buttons": [5]}]},
            {"tiers": [{"wallet": VIP_WALLET, "buttons": [True]}]},
            {"tiers": [{"wallet": VIP_WALLET, "buttons": "12"}]},
            {"tiers": "abc"},
        ],
    )
    def test_malformed(self, doc):
        with pytest.raises(ConfigUnavailable):
            VipConfig.from_dict(doc)


class TestResolveTier:
    def test_listed_wallet_inherits_global_fee_recipient(self):
        tier = resolve_tier(VIP_WALLET, VipConfig.from_dict(DOC))
        assert tier.is_vip
        assert tier.buttons == (Decimal(5), Decimal(10), Decimal("2.5"))
        assert tier.fee_recipient == FEE_WALLET

    def test_tier_fee_recipient_override(self):
        tier = resolve_tier("other", VipConfig.from_dict(DOC))
        assert tier.fee_recipient == ADMIN_WALLET

    def test_unlisted_wallet(self):
        tier = resolve_tier(FEE_WALLET, VipConfig.from_dict(DOC))
        assert not tier.is_vip
        assert tier.buttons == ()
        assert tier.fee_recipient == FEE_WALLET


class TestVipConfigSource:
    def test_fetch(self):
        seen = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json=DOC)

        async def run():
            source = _source(handler)
            try:
                return await source.load()
            finally:
                await source.aclose()

        cfg = asyncio.run(run())
        assert cfg.dlan_per_usd_per_day == Decimal(100)
        assert seen[0].headers["Cache-Control"] == "no-store"

    @pytest.mark.parametrize(
        "status,body",
        [
            (404, b""),
            (200, b"not json"),
            (200, b'{"invest_usd_per_dlan_rule": {"dlan_per_usd_per_day": -1}}'),
        ],
    )
    def test_load_falls_back_to_default(self, status, body):
        async def run():
            source = _source(lambda request: httpx.Response(status, content=body))
            try:
                with pytest.raises(ConfigUnavailable):
                    await source.fetch()
                return await source.load()
            finally:
                await source.aclose()

        assert asyncio.run(run()) == default_vip_config()

    def test_load_survives_network_error(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        async def run():
            source = _source(handler)
            try:
                return await source.load()
            finally:
                await source.aclose()

        assert asyncio.run(run()) == default_vip_config()

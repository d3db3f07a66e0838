#!/usr/bin/env python3
"""Example CLI that shows DLAN staking status and runs stake/claim actions."""

import argparse
import asyncio
import logging
import sys

from dlanstake.client import Client
from dlanstake.config import SOLANA_RPC_URLS, USDT_DECIMALS
from dlanstake.dashboard import Dashboard, Notice
from dlanstake.oracle import QuoteClient
from dlanstake.units import format_units
from dlanstake.vip import VipConfigSource
from dlanstake.wallet import KeypairWallet


def print_status(dash: Dashboard) -> None:
    s = dash.state
    print("=== DLAN ===")
    print(f"Wallet:             {s.wallet}")
    print(f"Your DLAN:          {format_units(s.dlan_balance, s.dlan_decimals)}")
    print(f"Total DLAN:         {format_units(s.dlan_supply, s.dlan_decimals)}")
    print(f"Your share:         {dash.share_pct}")
    print(f"Your USDT:          {format_units(s.usdt_balance, USDT_DECIMALS)}")
    print(f"Vault reserve:      {format_units(s.reserve, USDT_DECIMALS)} USDT")
    print(f"APR (gross / net):  {dash.apr_estimate:.2f}% / {dash.net_apr_estimate:.2f}%")
    print()
    print("=== Accrual ===")
    print(f"Standard days:      {s.standard_days}")
    print(f"VIP days:           {s.vip_days}")
    buttons = dash.vip_buttons
    if buttons:
        print(f"VIP payouts:        {', '.join(f'{b} USDT/day' for b in buttons)}")
    else:
        print("VIP payouts:        none available")
    print()


def report(notice: Notice) -> int:
    print(notice.message)
    if notice.signature is not None:
        print(f"Signature: {notice.signature}")
    return 0 if notice.ok else 1


async def run(args: argparse.Namespace) -> int:
    client = Client.from_env(args.env)
    quotes = QuoteClient()
    vip_source = VipConfigSource(args.vip_url)
    dash = Dashboard(client, quotes, vip_source)
    try:
        await dash.connect(KeypairWallet.from_file(args.keypair))

        if args.command == "status":
            print_status(dash)
            return 0
        if args.command == "preview":
            out = await dash.preview_stake(args.sol)
            print(f"Estimated: ~{out:.6f} DLAN" if out is not None else "Quote unavailable")
            return 0
        if args.command == "stake":
            return report(await dash.stake(args.sol))
        if args.command == "claim":
            return report(await dash.claim_all())
        if args.command == "vip-claim":
            return report(await dash.claim_vip(args.usd))
        return 2
    finally:
        await dash.aclose()
        await quotes.aclose()
        await vip_source.aclose()
        await client.aclose()


def main() -> None:
    parser = argparse.ArgumentParser(description="DLAN staking dashboard")
    parser.add_argument(
        "--env",
        default="mainnet-beta",
        choices=list(SOLANA_RPC_URLS),
        help="Environment to connect to",
    )
    parser.add_argument(
        "--keypair",
        default="~/.config/solana/id.json",
        help="Path to a Solana CLI keypair file",
    )
    parser.add_argument("--vip-url", default=None, help="Override the vip.json URL")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")

    sub = parser.add_subparsers(dest="command", required=True)
    sub.add_parser("status", help="Show balances and accrued days")
    preview = sub.add_parser("preview", help="Quote how much DLAN a SOL stake mints")
    preview.add_argument("sol", help="Amount of SOL")
    stake = sub.add_parser("stake", help="Stake SOL and mint DLAN")
    stake.add_argument("sol", help="Amount of SOL")
    sub.add_parser("claim", help="Claim all accrued standard days")
    vip = sub.add_parser("vip-claim", help="Claim a VIP payout for all accrued days")
    vip.add_argument("usd", help="VIP payout in USDT per day")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    sys.exit(asyncio.run(run(args)))


if __name__ == "__main__":
    main()

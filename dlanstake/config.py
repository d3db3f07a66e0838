"""Network configuration for the DLAN staking program."""

import os

PROGRAM_ID = "3hQsDEYknZmKKUBApAGtcGPy395ogJdiB8DCvMKh24K7"

# Mainnet token and vault addresses.
DLAN_MINT = "7yTrTBY1PZtknKAQTqzA3KriDc8y7yeMNa9nzTMseYa8"
USDT_MINT = "Es9vMFrzaCERmJfrF4H2FYD4KCoNkY11McCe8BenwNYB"
ADMIN_WALLET = "Gxovarj3kNDd6ks54KNXknRh1GP5ETaUdYGr1xgqeVNh"
VAULT_AUTHORITY = "ByG2RboeJD4hTxZ8MGHMfmsdWbyvVFNh1jrPL27suoyc"
VAULT_USDT_ATA = "AMroGi8sbTG63nMr4VT1hyj18YA8jvoMN3GvVqovhBqa"

# Quote route mints.
WSOL_MINT = "So11111111111111111111111111111111111111112"
USDC_MINT = "EPjFWdd5AufqSSqeM2qN1xzybapC8G4wEGGkZwyTDt1v"

SOL_DECIMALS = 9
USDT_DECIMALS = 6
DEFAULT_DLAN_DECIMALS = 9

SECONDS_PER_DAY = 86_400
DEFAULT_DLAN_PER_USD_PER_DAY = 120
QUOTE_SLIPPAGE_BPS = 10
POLL_INTERVAL_SECONDS = 30

SOLANA_RPC_URLS = {
    "mainnet-beta": "https://api.mainnet-beta.solana.com",
    "devnet": "https://api.devnet.solana.com",
    "localnet": "http://localhost:8899",
}

QUOTE_URL = "https://quote-api.jup.ag/v6/quote"

VIP_CONFIG_URL = "https://dlan.example/vip.json"


def rpc_url(env: str) -> str:
    """Return the RPC URL for ``env``, honouring ``DLAN_RPC_URL``."""
    return os.environ.get("DLAN_RPC_URL") or SOLANA_RPC_URLS[env]


def quote_url() -> str:
    return os.environ.get("DLAN_QUOTE_URL") or QUOTE_URL


def vip_config_url() -> str:
    return os.environ.get("DLAN_VIP_CONFIG_URL") or VIP_CONFIG_URL

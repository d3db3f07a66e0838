from dlanstake.accrual import Stream, elapsed_days
from dlanstake.actions import ActionReceipt, ChainActions
from dlanstake.client import Client, Deployment, MintInfo
from dlanstake.config import (
    PROGRAM_ID,
    QUOTE_URL,
    SOLANA_RPC_URLS,
    VIP_CONFIG_URL,
)
from dlanstake.dashboard import Dashboard, DashboardState, Notice
from dlanstake.errors import (
    ChainSubmissionFailed,
    ConfigUnavailable,
    DlanStakeError,
    EmptyReserve,
    InsufficientReserve,
    NothingAccrued,
    NotVipEligible,
    QuoteUnavailable,
    WalletNotConnected,
    ZeroOrNegativeInput,
    ZeroRate,
)
from dlanstake.oracle import QuoteClient
from dlanstake.pda import (
    derive_mint_authority_pda,
    derive_token_account,
    derive_user_state_pda,
    derive_vip_state_pda,
)
from dlanstake.rpc import new_rpc_client
from dlanstake.settlement import Settlement, settle, vip_claim_days
from dlanstake.state import UserState, VipState
from dlanstake.units import rescale, to_base_units, to_human
from dlanstake.vip import TierResolution, VipConfig, VipConfigSource, resolve_tier
from dlanstake.wallet import KeypairWallet, Wallet

__all__ = [
    "ActionReceipt",
    "ChainActions",
    "Client",
    "Dashboard",
    "DashboardState",
    "Deployment",
    "MintInfo",
    "Notice",
    "PROGRAM_ID",
    "QUOTE_URL",
    "QuoteClient",
    "SOLANA_RPC_URLS",
    "Settlement",
    "Stream",
    "TierResolution",
    "UserState",
    "VIP_CONFIG_URL",
    "VipConfig",
    "VipConfigSource",
    "VipState",
    "KeypairWallet",
    "Wallet",
    "ChainSubmissionFailed",
    "ConfigUnavailable",
    "DlanStakeError",
    "EmptyReserve",
    "InsufficientReserve",
    "NothingAccrued",
    "NotVipEligible",
    "QuoteUnavailable",
    "WalletNotConnected",
    "ZeroOrNegativeInput",
    "ZeroRate",
    "derive_mint_authority_pda",
    "derive_token_account",
    "derive_user_state_pda",
    "derive_vip_state_pda",
    "elapsed_days",
    "new_rpc_client",
    "rescale",
    "resolve_tier",
    "settle",
    "to_base_units",
    "to_human",
    "vip_claim_days",
]

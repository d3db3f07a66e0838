"""Instruction encoding and account validation tests."""

import hashlib
import struct

import pytest
from solders.pubkey import Pubkey  # type: ignore[import-untyped]
from solders.system_program import ID as SYSTEM_PROGRAM_ID  # type: ignore[import-untyped]
from solders.sysvar import RENT  # type: ignore[import-untyped]
from spl.token.constants import TOKEN_PROGRAM_ID  # type: ignore[import-untyped]

from dlanstake.instructions import (
    ClaimAccounts,
    StakeAccounts,
    invest_claim_split,
    stake_and_mint_priced,
    vip_claim_split_timed,
)
from dlanstake.pda import derive_token_account, derive_user_state_pda, derive_vip_state_pda


def _disc(name: str) -> bytes:
    return hashlib.sha256(f"global:{name}".encode()).digest()[:8]


@pytest.fixture
def authority(wallet) -> Pubkey:
    return wallet.pubkey()


def _claim_accounts(deployment, authority, vip=False) -> ClaimAccounts:
    derive = ClaimAccounts.derive_vip if vip else ClaimAccounts.derive_standard
    return derive(
        deployment.program_id,
        authority,
        deployment.admin,
        deployment.usdt_mint,
        deployment.vault_token,
        deployment.vault_authority,
    )


class TestStakeAndMintPriced:
    def test_data_layout(self, deployment, authority):
        accounts = StakeAccounts.derive(
            deployment.program_id, authority, deployment.dlan_mint, deployment.admin
        )
        ix = stake_and_mint_priced(deployment.program_id, accounts, 1_000_000_000, 150_000_000_000)
        assert ix.program_id == deployment.program_id
        assert bytes(ix.data) == _disc("stake_and_mint_priced") + struct.pack(
            "<QQ", 1_000_000_000, 150_000_000_000
        )

    def test_accounts(self, deployment, authority):
        accounts = StakeAccounts.derive(
            deployment.program_id, authority, deployment.dlan_mint, deployment.admin
        )
        ix = stake_and_mint_priced(deployment.program_id, accounts, 1, 1)
        metas = ix.accounts
        assert metas[0].pubkey == authority
        assert metas[0].is_signer and metas[0].is_writable
        assert metas[1].pubkey == deployment.admin and metas[1].is_writable
        assert metas[3].pubkey == derive_token_account(authority, deployment.dlan_mint)
        assert metas[5].pubkey == SYSTEM_PROGRAM_ID
        assert metas[-1].pubkey == RENT
        assert sum(m.is_signer for m in metas) == 1

    def test_rejects_negative_amount(self, deployment, authority):
        accounts = StakeAccounts.derive(
            deployment.program_id, authority, deployment.dlan_mint, deployment.admin
        )
        with pytest.raises(ValueError):
            stake_and_mint_priced(deployment.program_id, accounts, -1, 1)

    def test_rejects_amount_over_i64(self, deployment, authority):
        accounts = StakeAccounts.derive(
            deployment.program_id, authority, deployment.dlan_mint, deployment.admin
        )
        with pytest.raises(ValueError):
            stake_and_mint_priced(deployment.program_id, accounts, 2**63, 1)


class TestClaims:
    def test_invest_claim_split(self, deployment, authority):
        accounts = _claim_accounts(deployment, authority)
        ix = invest_claim_split(deployment.program_id, accounts, 3334, 1666, 5)
        assert bytes(ix.data) == _disc("invest_claim_split") + struct.pack(
            "<QQQ", 3334, 1666, 5
        )
        state, _ = derive_user_state_pda(deployment.program_id, authority)
        assert ix.accounts[1].pubkey == state and ix.accounts[1].is_writable

    def test_vip_claim_split_timed(self, deployment, authority):
        accounts = _claim_accounts(deployment, authority, vip=True)
        ix = vip_claim_split_timed(deployment.program_id, accounts, 2667, 1333, 4)
        assert bytes(ix.data) == _disc("vip_claim_split_timed") + struct.pack(
            "<QQQ", 2667, 1333, 4
        )
        state, _ = derive_vip_state_pda(deployment.program_id, authority)
        assert ix.accounts[1].pubkey == state

    def test_token_accounts(self, deployment, authority):
        accounts = _claim_accounts(deployment, authority)
        assert accounts.user_token == derive_token_account(authority, deployment.usdt_mint)
        assert accounts.fee_token == derive_token_account(deployment.admin, deployment.usdt_mint)
        metas = invest_claim_split(deployment.program_id, accounts, 1, 0, 1).accounts
        assert [m.pubkey for m in metas[:8]] == [
            authority,
            accounts.state,
            accounts.user_token,
            deployment.vault_token,
            deployment.vault_authority,
            deployment.admin,
            accounts.fee_token,
            deployment.usdt_mint,
        ]
        assert metas[8].pubkey == TOKEN_PROGRAM_ID
        assert not metas[4].is_writable  # vault authority
        assert metas[3].is_writable  # vault token

    def test_missing_account_fails_fast(self, deployment, authority):
        with pytest.raises(ValueError, match="fee_owner"):
            ClaimAccounts(
                authority=authority,
                state=deployment.admin,
                user_token=deployment.admin,
                vault_token=deployment.vault_token,
                vault_authority=deployment.vault_authority,
                fee_owner=Pubkey.default(),
                fee_token=deployment.admin,
                usdt_mint=deployment.usdt_mint,
            )

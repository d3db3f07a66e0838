"""Instruction builders for the staking program.

Each instruction has a typed account set that validates itself at
construction, so a missing address fails before anything is signed. Account
metas are emitted in the order of the program's Anchor account structs.
"""

from __future__ import annotations

import struct
from dataclasses import dataclass, fields

from solders.instruction import AccountMeta, Instruction  # type: ignore[import-untyped]
from solders.pubkey import Pubkey  # type: ignore[import-untyped]
from solders.system_program import ID as SYSTEM_PROGRAM_ID  # type: ignore[import-untyped]
from solders.sysvar import RENT  # type: ignore[import-untyped]
from spl.token.constants import (  # type: ignore[import-untyped]
    ASSOCIATED_TOKEN_PROGRAM_ID,
    TOKEN_PROGRAM_ID,
)

from dlanstake.discriminator import (
    DISCRIMINATOR_INVEST_CLAIM_SPLIT,
    DISCRIMINATOR_STAKE_AND_MINT_PRICED,
    DISCRIMINATOR_VIP_CLAIM_SPLIT_TIMED,
)
from dlanstake.pda import (
    derive_mint_authority_pda,
    derive_token_account,
    derive_user_state_pda,
    derive_vip_state_pda,
)

MAX_ARG = 2**63 - 1


def _encode_args(discriminator: bytes, *args: int) -> bytes:
    for v in args:
        if not 0 <= v <= MAX_ARG:
            raise ValueError(f"instruction argument out of range: {v}")
    return discriminator + struct.pack(f"<{len(args)}Q", *args)


def _ro(pubkey: Pubkey) -> AccountMeta:
    return AccountMeta(pubkey, is_signer=False, is_writable=False)


def _rw(pubkey: Pubkey) -> AccountMeta:
    return AccountMeta(pubkey, is_signer=False, is_writable=True)


def _signer(pubkey: Pubkey) -> AccountMeta:
    return AccountMeta(pubkey, is_signer=True, is_writable=True)


class _Accounts:
    def __post_init__(self) -> None:
        for f in fields(self):  # type: ignore[arg-type]
            value = getattr(self, f.name)
            if not isinstance(value, Pubkey) or value == Pubkey.default():
                raise ValueError(f"{type(self).__name__}: missing account {f.name}")


@dataclass(frozen=True)
class StakeAccounts(_Accounts):
    authority: Pubkey
    admin: Pubkey
    mint: Pubkey
    user_token: Pubkey
    mint_authority: Pubkey

    @classmethod
    def derive(
        cls, program_id: Pubkey, authority: Pubkey, mint: Pubkey, admin: Pubkey
    ) -> StakeAccounts:
        mint_authority, _ = derive_mint_authority_pda(program_id)
        return cls(
            authority=authority,
            admin=admin,
            mint=mint,
            user_token=derive_token_account(authority, mint),
            mint_authority=mint_authority,
        )

    def metas(self) -> list[AccountMeta]:
        return [
            _signer(self.authority),
            _rw(self.admin),
            _rw(self.mint),
            _rw(self.user_token),
            _ro(self.mint_authority),
            _ro(SYSTEM_PROGRAM_ID),
            _ro(TOKEN_PROGRAM_ID),
            _ro(ASSOCIATED_TOKEN_PROGRAM_ID),
            _ro(RENT),
        ]


@dataclass(frozen=True)
class ClaimAccounts(_Accounts):
    """Accounts shared by both claim instructions.

    ``state`` is the user's UserState PDA for standard claims and the VipState
    PDA for VIP claims.
    """

    authority: Pubkey
    state: Pubkey
    user_token: Pubkey
    vault_token: Pubkey
    vault_authority: Pubkey
    fee_owner: Pubkey
    fee_token: Pubkey
    usdt_mint: Pubkey

    @classmethod
    def derive_standard(
        cls,
        program_id: Pubkey,
        authority: Pubkey,
        fee_owner: Pubkey,
        usdt_mint: Pubkey,
        vault_token: Pubkey,
        vault_authority: Pubkey,
    ) -> ClaimAccounts:
        state, _ = derive_user_state_pda(program_id, authority)
        return cls._derive(
            state, authority, fee_owner, usdt_mint, vault_token, vault_authority
        )

    @classmethod
    def derive_vip(
        cls,
        program_id: Pubkey,
        authority: Pubkey,
        fee_owner: Pubkey,
        usdt_mint: Pubkey,
        vault_token: Pubkey,
        vault_authority: Pubkey,
    ) -> ClaimAccounts:
        state, _ = derive_vip_state_pda(program_id, authority)
        return cls._derive(
            state, authority, fee_owner, usdt_mint, vault_token, vault_authority
        )

    @classmethod
    def _derive(
        cls,
        state: Pubkey,
        authority: Pubkey,
        fee_owner: Pubkey,
        usdt_mint: Pubkey,
        vault_token: Pubkey,
        vault_authority: Pubkey,
    ) -> ClaimAccounts:
        return cls(
            authority=authority,
            state=state,
            user_token=derive_token_account(authority, usdt_mint),
            vault_token=vault_token,
            vault_authority=vault_authority,
            fee_owner=fee_owner,
            fee_token=derive_token_account(fee_owner, usdt_mint),
            usdt_mint=usdt_mint,
        )

    def metas(self) -> list[AccountMeta]:
        return [
            _signer(self.authority),
            _rw(self.state),
            _rw(self.user_token),
            _rw(self.vault_token),
            _ro(self.vault_authority),
            _ro(self.fee_owner),
            _rw(self.fee_token),
            _ro(self.usdt_mint),
            _ro(TOKEN_PROGRAM_ID),
            _ro(ASSOCIATED_TOKEN_PROGRAM_ID),
            _ro(SYSTEM_PROGRAM_ID),
            _ro(RENT),
        ]


def stake_and_mint_priced(
    program_id: Pubkey,
    accounts: StakeAccounts,
    native_amount: int,
    mint_amount: int,
) -> Instruction:
    data = _encode_args(DISCRIMINATOR_STAKE_AND_MINT_PRICED, native_amount, mint_amount)
    return Instruction(program_id, data, accounts.metas())


def invest_claim_split(
    program_id: Pubkey,
    accounts: ClaimAccounts,
    user_amount: int,
    fee_amount: int,
    days: int,
) -> Instruction:
    data = _encode_args(DISCRIMINATOR_INVEST_CLAIM_SPLIT, user_amount, fee_amount, days)
    return Instruction(program_id, data, accounts.metas())


def vip_claim_split_timed(
    program_id: Pubkey,
    accounts: ClaimAccounts,
    user_amount: int,
    fee_amount: int,
    days: int,
) -> Instruction:
    data = _encode_args(
        DISCRIMINATOR_VIP_CLAIM_SPLIT_TIMED, user_amount, fee_amount, days
    )
    return Instruction(program_id, data, accounts.metas())

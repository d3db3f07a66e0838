"""PDA and token account derivation for the staking program."""

from solders.pubkey import Pubkey  # type: ignore[import-untyped]
from spl.token.instructions import get_associated_token_address  # type: ignore[import-untyped]

SEED_USER_STATE = b"user"
SEED_VIP_STATE = b"vip"
SEED_MINT_AUTHORITY = b"mint-auth"


def derive_user_state_pda(
    program_id: Pubkey, authority: Pubkey
) -> tuple[Pubkey, int]:
    return Pubkey.find_program_address(
        [SEED_USER_STATE, bytes(authority)], program_id
    )


def derive_vip_state_pda(
    program_id: Pubkey, authority: Pubkey
) -> tuple[Pubkey, int]:
    return Pubkey.find_program_address(
        [SEED_VIP_STATE, bytes(authority)], program_id
    )


def derive_mint_authority_pda(program_id: Pubkey) -> tuple[Pubkey, int]:
    return Pubkey.find_program_address([SEED_MINT_AUTHORITY], program_id)


def derive_token_account(owner: Pubkey, mint: Pubkey) -> Pubkey:
    """Associated token account of ``owner`` for ``mint``."""
    return get_associated_token_address(owner, mint)

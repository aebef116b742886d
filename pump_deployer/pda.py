from typing import Sequence, Tuple

from solders.pubkey import Pubkey

from .config import (
    ASSOCIATED_TOKEN_PROGRAM_ID,
    METADATA_PROGRAM_ID,
    PUMP_PROGRAM_ID,
    TOKEN_PROGRAM_ID,
)
from .errors import AddressDerivationExhausted, ValidationError

MAX_SEED_LEN = 32
# 16 seeds per address on-chain, one of them is the bump.
MAX_SEEDS = 15


def _check_seeds(seeds: Sequence[bytes]) -> None:
    if len(seeds) > MAX_SEEDS:
        raise ValidationError(f"too many seeds: {len(seeds)} > {MAX_SEEDS}")
    for idx, seed in enumerate(seeds):
        if len(seed) > MAX_SEED_LEN:
            raise ValidationError(f"seed {idx} is {len(seed)} bytes, max is {MAX_SEED_LEN}")


def derive(seeds: Sequence[bytes], program_id: Pubkey) -> Tuple[Pubkey, int]:
    """
    Canonical program-derived address for ``seeds`` under ``program_id``.

    Walks the bump from 255 down to 0 and returns the first candidate that is
    off the ed25519 curve, i.e. the address the program itself re-derives.
    """
    _check_seeds(seeds)
    base = [bytes(seed) for seed in seeds]
    for bump in range(255, -1, -1):
        try:
            return Pubkey.create_program_address([*base, bytes([bump])], program_id), bump
        except Exception:  # noqa: BLE001
            # candidate is on the curve; try the next bump
            continue
    raise AddressDerivationExhausted(f"no off-curve address for {len(seeds)} seeds under {program_id}")


def associated_token_address(owner: Pubkey, mint: Pubkey, token_program: Pubkey = TOKEN_PROGRAM_ID) -> Pubkey:
    # Owner may itself be a PDA (the bonding curve vault).
    return derive([bytes(owner), bytes(token_program), bytes(mint)], ASSOCIATED_TOKEN_PROGRAM_ID)[0]


def metadata_pda(mint: Pubkey) -> Pubkey:
    return derive([b"metadata", bytes(METADATA_PROGRAM_ID), bytes(mint)], METADATA_PROGRAM_ID)[0]


def bonding_curve_pda(mint: Pubkey) -> Pubkey:
    return derive([b"bonding_curve", bytes(mint)], PUMP_PROGRAM_ID)[0]


def mint_authority_pda(mint: Pubkey) -> Pubkey:
    return derive([b"pump", bytes(mint)], PUMP_PROGRAM_ID)[0]

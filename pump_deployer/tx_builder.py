import base64
from dataclasses import dataclass
from typing import List

from solders.hash import Hash
from solders.instruction import AccountMeta, Instruction
from solders.message import MessageV0
from solders.pubkey import Pubkey
from spl.token.instructions import AuthorityType, SetAuthorityParams, set_authority

from .config import (
    ASSOCIATED_TOKEN_PROGRAM_ID,
    METADATA_PROGRAM_ID,
    PUMP_EVENT_AUTHORITY,
    PUMP_GLOBAL,
    PUMP_PROGRAM_ID,
    SYS_PROGRAM_ID,
    SYSVAR_RENT_PUBKEY,
    TOKEN_PROGRAM_ID,
)


@dataclass
class DeployTransaction:
    instructions: List[Instruction]
    fee_payer: Pubkey
    blockhash: Hash
    last_valid_block_height: int
    message: MessageV0

    @property
    def required_signers(self) -> List[Pubkey]:
        count = self.message.header.num_required_signatures
        return list(self.message.account_keys[:count])


def build_create_ix(
    mint: Pubkey,
    bonding_curve: Pubkey,
    vault: Pubkey,
    metadata: Pubkey,
    payer: Pubkey,
    data: bytes,
) -> Instruction:
    # Positional account list; the launch program reads it by index.
    accounts: List[AccountMeta] = [
        AccountMeta(pubkey=mint, is_signer=True, is_writable=True),
        AccountMeta(pubkey=bonding_curve, is_signer=False, is_writable=True),
        AccountMeta(pubkey=vault, is_signer=False, is_writable=True),
        AccountMeta(pubkey=PUMP_GLOBAL, is_signer=False, is_writable=False),
        AccountMeta(pubkey=METADATA_PROGRAM_ID, is_signer=False, is_writable=False),
        AccountMeta(pubkey=metadata, is_signer=False, is_writable=True),
        AccountMeta(pubkey=payer, is_signer=True, is_writable=True),
        AccountMeta(pubkey=SYS_PROGRAM_ID, is_signer=False, is_writable=False),
        AccountMeta(pubkey=TOKEN_PROGRAM_ID, is_signer=False, is_writable=False),
        AccountMeta(pubkey=ASSOCIATED_TOKEN_PROGRAM_ID, is_signer=False, is_writable=False),
        AccountMeta(pubkey=SYSVAR_RENT_PUBKEY, is_signer=False, is_writable=False),
        AccountMeta(pubkey=PUMP_EVENT_AUTHORITY, is_signer=False, is_writable=False),
        AccountMeta(pubkey=PUMP_PROGRAM_ID, is_signer=False, is_writable=False),
    ]
    return Instruction(program_id=PUMP_PROGRAM_ID, data=data, accounts=accounts)


def build_revoke_mint_authority_ix(mint: Pubkey, current_authority: Pubkey, new_authority: Pubkey) -> Instruction:
    return set_authority(
        SetAuthorityParams(
            program_id=TOKEN_PROGRAM_ID,
            account=mint,
            authority=AuthorityType.MINT_TOKENS,
            current_authority=current_authority,
            new_authority=new_authority,
        )
    )


def assemble(
    create_ix: Instruction,
    revoke_ix: Instruction,
    payer: Pubkey,
    blockhash: Hash,
    last_valid_block_height: int,
) -> DeployTransaction:
    """
    Compose create + authority revocation into one atomic message.

    The blockhash should be fetched right before this call: it stops being
    accepted once the cluster passes ``last_valid_block_height``.
    """
    ixs = [create_ix, revoke_ix]
    message = MessageV0.try_compile(payer, ixs, [], blockhash)
    return DeployTransaction(
        instructions=ixs,
        fee_payer=payer,
        blockhash=blockhash,
        last_valid_block_height=last_valid_block_height,
        message=message,
    )


def instruction_to_dict(ix: Instruction) -> dict:
    return {
        "program_id": str(ix.program_id),
        "keys": [
            {
                "pubkey": str(k.pubkey),
                "is_signer": k.is_signer,
                "is_writable": k.is_writable,
            }
            for k in ix.accounts
        ],
        "data": base64.b64encode(ix.data).decode(),
    }

import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple

import base58
from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator
from pydantic import ValidationError as PydanticValidationError
from solana.rpc.api import Client
from solders.instruction import Instruction
from solders.keypair import Keypair
from solders.pubkey import Pubkey

from . import layouts
from .config import Settings, get_settings
from .errors import DeployError, MetadataPublishError, ValidationError
from .metadata import MetadataPublisher, TokenMetadata, publisher_from_settings
from .pda import associated_token_address, bonding_curve_pda, metadata_pda, mint_authority_pda
from .submitter import fetch_latest_blockhash, sign, submit
from .tx_builder import assemble, build_create_ix, build_revoke_mint_authority_ix

logger = logging.getLogger("pump_deployer")

SECRET_KEY_LEN = 64


class DeployRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    token_name: str = Field(validation_alias=AliasChoices("tokenName", "token_name"))
    token_symbol: str = Field(validation_alias=AliasChoices("tokenSymbol", "token_symbol"))
    image_ref: str = Field(validation_alias=AliasChoices("imageRef", "image", "image_ref"))
    signing_key: str = Field(validation_alias=AliasChoices("signingKey", "privateKey", "signing_key"), repr=False)
    rpc_endpoint: Optional[str] = Field(default=None, validation_alias=AliasChoices("rpcEndpoint", "rpc", "rpc_endpoint"))

    @field_validator("token_name", "token_symbol", "image_ref", "signing_key")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        if not value or not value.strip():
            raise ValueError("must not be empty")
        return value

    @field_validator("rpc_endpoint")
    @classmethod
    def _blank_rpc_is_default(cls, value: Optional[str]) -> Optional[str]:
        return value or None

    @classmethod
    def parse(cls, payload: Dict[str, Any]) -> "DeployRequest":
        try:
            return cls.model_validate(payload)
        except PydanticValidationError as exc:
            fields = sorted({str(err["loc"][0]) for err in exc.errors() if err.get("loc")})
            raise ValidationError(f"Missing or invalid fields: {', '.join(fields)}") from exc


@dataclass(frozen=True)
class DeployResult:
    transaction_id: str
    mint_address: str

    def to_dict(self) -> Dict[str, str]:
        return {"transactionId": self.transaction_id, "mintAddress": self.mint_address}


@dataclass(frozen=True)
class DeploymentPlan:
    mint: Pubkey
    metadata: Pubkey
    bonding_curve: Pubkey
    vault: Pubkey
    mint_authority: Pubkey
    create_ix: Instruction
    revoke_ix: Instruction


def load_signing_key(encoded: str) -> Keypair:
    """
    Decode a base-58 secret into a keypair.

    Only the local bytearray copy is overwritten afterwards. The immutable
    bytes from the decoder, the copy handed to solders and the request string
    stay alive until garbage collected; nothing here keeps a reference to them.
    """
    try:
        secret = bytearray(base58.b58decode(encoded.strip()))
    except ValueError as exc:
        raise ValidationError("signingKey is not valid base-58") from exc
    try:
        if len(secret) != SECRET_KEY_LEN:
            raise ValidationError(f"signingKey must decode to {SECRET_KEY_LEN} bytes, got {len(secret)}")
        try:
            return Keypair.from_bytes(bytes(secret))
        except ValueError as exc:
            raise ValidationError("signingKey is not a valid ed25519 keypair") from exc
    finally:
        for idx in range(len(secret)):
            secret[idx] = 0


def plan_deployment(name: str, symbol: str, uri: str, payer: Pubkey, mint: Pubkey) -> DeploymentPlan:
    metadata = metadata_pda(mint)
    bonding_curve = bonding_curve_pda(mint)
    authority = mint_authority_pda(mint)
    vault = associated_token_address(bonding_curve, mint)
    data = layouts.encode(layouts.CreateInstructionArgs(name=name, symbol=symbol, uri=uri, creator=payer))
    return DeploymentPlan(
        mint=mint,
        metadata=metadata,
        bonding_curve=bonding_curve,
        vault=vault,
        mint_authority=authority,
        create_ix=build_create_ix(mint, bonding_curve, vault, metadata, payer, data),
        revoke_ix=build_revoke_mint_authority_ix(mint, payer, authority),
    )


def deploy_token(
    request: DeployRequest,
    publisher: MetadataPublisher,
    client: Optional[Client] = None,
    settings: Optional[Settings] = None,
) -> DeployResult:
    settings = settings or get_settings()
    # Reject unencodable names before paying for an upload.
    layouts.check_width("name", request.token_name)
    layouts.check_width("symbol", request.token_symbol)
    payer = load_signing_key(request.signing_key)
    payer_pub = payer.pubkey()

    metadata = TokenMetadata.from_request(
        request.token_name,
        request.token_symbol,
        request.image_ref,
        str(payer_pub),
        settings.metadata_description,
    )
    uri = publisher.publish(metadata)
    if not uri:
        raise MetadataPublishError("Metadata publisher returned an empty URI")
    logger.info("deploy_metadata_published symbol=%s uri=%s", request.token_symbol, uri)

    mint = Keypair()
    plan = plan_deployment(request.token_name, request.token_symbol, uri, payer_pub, mint.pubkey())

    if client is None:
        rpc_url = request.rpc_endpoint or settings.solana_rpc
        client = Client(rpc_url, commitment=settings.commitment, timeout=settings.rpc_timeout)
    blockhash, last_valid = fetch_latest_blockhash(client, settings.commitment)
    tx = assemble(plan.create_ix, plan.revoke_ix, payer_pub, blockhash, last_valid)
    signed = sign(tx, [payer, mint])
    signature = submit(client, signed, last_valid, settings.commitment)
    logger.info("deploy_confirmed mint=%s sig=%s", plan.mint, signature)
    return DeployResult(transaction_id=signature, mint_address=str(plan.mint))


def handle_deploy(
    payload: Dict[str, Any],
    publisher: Optional[MetadataPublisher] = None,
    client: Optional[Client] = None,
    settings: Optional[Settings] = None,
) -> Tuple[int, Dict[str, str]]:
    """Transport-facing adapter: ``(status, body)`` for success and failure alike."""
    try:
        request = DeployRequest.parse(payload)
        settings = settings or get_settings()
        result = deploy_token(request, publisher or publisher_from_settings(settings), client, settings)
    except DeployError as exc:
        logger.error("deploy_failed kind=%s error=%s", type(exc).__name__, exc.message)
        return exc.status_code, {"errorMessage": exc.message}
    return 200, result.to_dict()

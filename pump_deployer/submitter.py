import logging
from typing import List, Optional, Sequence, Tuple

from solana.exceptions import SolanaRpcException
from solana.rpc.api import Client
from solana.rpc.commitment import Commitment, Confirmed
from solana.rpc.core import (
    RPCException,
    TransactionExpiredBlockheightExceededError,
    UnconfirmedTxError,
)
from solana.rpc.types import TxOpts
from solders.hash import Hash
from solders.keypair import Keypair
from solders.signature import Signature
from solders.transaction import VersionedTransaction

from .errors import (
    BlockhashExpired,
    ConfirmationTimeout,
    InsufficientFunds,
    NetworkError,
    ProgramRejected,
    ValidationError,
)
from .tx_builder import DeployTransaction

logger = logging.getLogger("pump_deployer")

FUNDS_MARKERS = (
    "insufficientfunds",
    "insufficient funds",
    "insufficient lamports",
    "no record of a prior credit",
    "accountnotfound",
)


def fetch_latest_blockhash(client: Client, commitment: Commitment = Confirmed) -> Tuple[Hash, int]:
    try:
        resp = client.get_latest_blockhash(commitment)
    except (SolanaRpcException, RPCException) as exc:
        raise NetworkError(f"Failed to fetch blockhash: {_rpc_failure_text(exc)}") from exc
    value = resp.value
    return value.blockhash, value.last_valid_block_height


def sign(tx: DeployTransaction, signers: Sequence[Keypair]) -> VersionedTransaction:
    """Sign with exactly the keys the message marks as signers (payer, mint)."""
    required = tx.required_signers
    provided = {kp.pubkey() for kp in signers}
    missing = [str(pk) for pk in required if pk not in provided]
    if missing:
        raise ValidationError(f"missing signatures for {', '.join(missing)}")
    extra = [str(pk) for pk in provided if pk not in required]
    if extra or len(signers) != len(required):
        raise ValidationError(f"unexpected signers {', '.join(extra) or 'duplicate keypair'}")
    return VersionedTransaction(tx.message, list(signers))


def _rpc_failure_text(exc: Exception) -> str:
    # SolanaRpcException keeps its text in error_msg, str() is empty.
    text = getattr(exc, "error_msg", None) or str(exc) or type(exc).__name__
    if exc.__cause__ is not None and str(exc.__cause__):
        text = f"{text} ({exc.__cause__})"
    return text


def _rpc_error_parts(exc: RPCException) -> Tuple[str, List[str], str]:
    detail = exc.args[0] if exc.args else exc
    message = getattr(detail, "message", None) or str(detail)
    data = getattr(detail, "data", None)
    logs = list(getattr(data, "logs", None) or [])
    err = getattr(data, "err", None)
    return message, logs, "" if err is None else str(err)


def _is_funds_failure(*parts: str) -> bool:
    text = " ".join(parts).lower()
    return any(marker in text for marker in FUNDS_MARKERS)


def _rejection(message: str, logs: List[str], err: str, signature: Optional[str] = None) -> ProgramRejected:
    if _is_funds_failure(message, err, *logs):
        return InsufficientFunds(message, logs=logs, signature=signature)
    return ProgramRejected(message, logs=logs, signature=signature)


def submit(
    client: Client,
    signed: VersionedTransaction,
    last_valid_block_height: int,
    commitment: Commitment = Confirmed,
) -> str:
    """
    Send with preflight and block until ``commitment`` is reached.

    Never resends. A timeout leaves the outcome unknown: the signature on the
    raised error is what the caller must look up before trying again.
    """
    opts = TxOpts(skip_confirmation=True, skip_preflight=False, preflight_commitment=commitment)
    try:
        resp = client.send_raw_transaction(bytes(signed), opts=opts)
    except RPCException as exc:
        message, logs, err = _rpc_error_parts(exc)
        if not logs and not err and not _is_funds_failure(message):
            raise NetworkError(f"RPC rejected send: {message}") from exc
        logger.warning("deploy_preflight_failed error=%s logs=%s", message, len(logs))
        raise _rejection(message, logs, err) from exc
    except SolanaRpcException as exc:
        raise NetworkError(f"Failed to send transaction: {_rpc_failure_text(exc)}") from exc

    sig: Signature = resp.value
    signature = str(sig)
    logger.info("deploy_sent sig=%s", signature)
    try:
        status_resp = client.confirm_transaction(
            sig,
            commitment,
            last_valid_block_height=last_valid_block_height,
        )
    except TransactionExpiredBlockheightExceededError as exc:
        raise BlockhashExpired(f"Blockhash expired before {signature} confirmed", signature=signature) from exc
    except UnconfirmedTxError as exc:
        raise ConfirmationTimeout(f"Unable to confirm {signature}: {exc}", signature=signature) from exc
    except SolanaRpcException as exc:
        raise ConfirmationTimeout(
            f"Lost RPC while confirming {signature}: {_rpc_failure_text(exc)}", signature=signature
        ) from exc
    except RPCException as exc:
        message, _, _ = _rpc_error_parts(exc)
        raise ConfirmationTimeout(
            f"RPC error while confirming {signature}: {message}", signature=signature
        ) from exc

    statuses = status_resp.value or []
    status = statuses[0] if statuses else None
    if status is not None and status.err is not None:
        err = str(status.err)
        raise _rejection(f"Transaction {signature} failed on-chain: {err}", [], err, signature=signature)
    return signature

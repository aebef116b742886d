"""
Failure taxonomy for a token deployment.

Every failure reaches the caller as one of these; nothing is retried here.
``status_code`` is the HTTP status a transport should answer with.
"""

from typing import List, Optional


class DeployError(Exception):
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(DeployError):
    """Missing or malformed input. Raised before any side effect."""

    status_code = 400


class FieldTooLong(ValidationError):
    def __init__(self, field: str, width: int, actual: int):
        super().__init__(f"{field} is {actual} bytes, exceeds fixed width of {width} bytes")
        self.field = field
        self.width = width
        self.actual = actual


class AddressDerivationExhausted(DeployError):
    pass


class MetadataPublishError(DeployError):
    status_code = 502


class NetworkError(DeployError):
    """RPC unreachable or errored. Retry with a fresh blockhash."""

    status_code = 502


class ConfirmationTimeout(NetworkError):
    """Confirmation never arrived; the transaction may still have landed."""

    status_code = 504

    def __init__(self, message: str, signature: Optional[str] = None):
        super().__init__(message)
        self.signature = signature


class BlockhashExpired(DeployError):
    status_code = 409

    def __init__(self, message: str, signature: Optional[str] = None):
        super().__init__(message)
        self.signature = signature


class ProgramRejected(DeployError):
    """The cluster or an on-chain program refused the transaction.

    Retrying needs a new mint keypair: the previous mint address may already
    be partially initialized.
    """

    status_code = 422

    def __init__(self, message: str, logs: Optional[List[str]] = None, signature: Optional[str] = None):
        super().__init__(message)
        self.logs = list(logs or [])
        self.signature = signature


class InsufficientFunds(ProgramRejected):
    pass

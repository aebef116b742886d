from .deployer import DeployRequest, DeployResult, deploy_token, handle_deploy
from .errors import (
    AddressDerivationExhausted,
    BlockhashExpired,
    ConfirmationTimeout,
    DeployError,
    FieldTooLong,
    InsufficientFunds,
    MetadataPublishError,
    NetworkError,
    ProgramRejected,
    ValidationError,
)

__all__ = [
    "AddressDerivationExhausted",
    "BlockhashExpired",
    "ConfirmationTimeout",
    "DeployError",
    "DeployRequest",
    "DeployResult",
    "FieldTooLong",
    "InsufficientFunds",
    "MetadataPublishError",
    "NetworkError",
    "ProgramRejected",
    "ValidationError",
    "deploy_token",
    "handle_deploy",
]

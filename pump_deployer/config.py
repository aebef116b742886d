from typing import Final, Optional

from pydantic_settings import BaseSettings
from solders.pubkey import Pubkey
from spl.token.constants import ASSOCIATED_TOKEN_PROGRAM_ID, TOKEN_PROGRAM_ID

DEFAULT_RPC: Final[str] = "https://api.mainnet-beta.solana.com"

PUMP_PROGRAM_ID: Final[Pubkey] = Pubkey.from_string("6EF8rrecthR5Dkzon8Nwu78hRvfCKubJ14M5uBEwF6P")
PUMP_GLOBAL: Final[Pubkey] = Pubkey.from_string("4wTV1YmiEkRvAtNtsSGPtUrqRYQMe5SKy2uB4Jjaxnjf")
PUMP_EVENT_AUTHORITY: Final[Pubkey] = Pubkey.from_string("Ce6TQqeHC9p8KetsN6JsjHK7UTZk7nasjjnr7XxXp9F1")
METADATA_PROGRAM_ID: Final[Pubkey] = Pubkey.from_string("metaqbxxUerdq28cj1RbAWkYQm3ybzjb6a8bt518x1s")
SYS_PROGRAM_ID: Final[Pubkey] = Pubkey.from_string("11111111111111111111111111111111")
SYSVAR_RENT_PUBKEY: Final[Pubkey] = Pubkey.from_string("SysvarRent111111111111111111111111111111111")

__all__ = [
    "ASSOCIATED_TOKEN_PROGRAM_ID",
    "DEFAULT_RPC",
    "METADATA_PROGRAM_ID",
    "PUMP_EVENT_AUTHORITY",
    "PUMP_GLOBAL",
    "PUMP_PROGRAM_ID",
    "SYS_PROGRAM_ID",
    "SYSVAR_RENT_PUBKEY",
    "Settings",
    "TOKEN_PROGRAM_ID",
    "get_settings",
]


class Settings(BaseSettings):
    solana_rpc: str = DEFAULT_RPC
    commitment: str = "confirmed"
    rpc_timeout: float = 30
    ipfs_api_url: str = "https://ipfs.infura.io:5001/api/v0"
    ipfs_project_id: Optional[str] = None
    ipfs_project_secret: Optional[str] = None
    ipfs_gateway: str = "https://ipfs.io/ipfs"
    pinata_api_key: Optional[str] = None
    pinata_secret_key: Optional[str] = None
    metadata_description: str = "Launched from Discord Pump Extension"
    log_level: str = "INFO"

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"


_SETTINGS: Optional[Settings] = None


def get_settings() -> Settings:
    global _SETTINGS
    if _SETTINGS is None:
        _SETTINGS = Settings()
    return _SETTINGS

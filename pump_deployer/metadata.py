"""
Off-chain token metadata and the services that host it.

The deployer only needs the URI back; where the JSON lives is up to the
injected publisher.
"""

import json
import logging
from typing import List, Optional, Protocol

import requests
from pydantic import BaseModel

from .config import Settings
from .errors import MetadataPublishError

logger = logging.getLogger("pump_deployer")


class Creator(BaseModel):
    address: str
    share: int = 100


class MetadataProperties(BaseModel):
    creators: List[Creator]


class TokenMetadata(BaseModel):
    name: str
    symbol: str
    image: str
    description: str
    seller_fee_basis_points: int = 0
    properties: MetadataProperties

    @classmethod
    def from_request(cls, name: str, symbol: str, image: str, creator: str, description: str) -> "TokenMetadata":
        return cls(
            name=name,
            symbol=symbol,
            image=image,
            description=description,
            properties=MetadataProperties(creators=[Creator(address=creator)]),
        )


class MetadataPublisher(Protocol):
    def publish(self, metadata: TokenMetadata) -> str:
        ...


def _gateway_uri(gateway: str, content_hash: str) -> str:
    return f"{gateway.rstrip('/')}/{content_hash}"


class IpfsHttpPublisher:
    """Adds the JSON document through an IPFS node's HTTP API (``/add``)."""

    def __init__(
        self,
        api_url: str,
        gateway: str,
        project_id: Optional[str] = None,
        project_secret: Optional[str] = None,
        timeout: float = 30,
        session: Optional[requests.Session] = None,
    ):
        self.api_url = api_url.rstrip("/")
        self.gateway = gateway
        self.auth = (project_id, project_secret) if project_id and project_secret else None
        self.timeout = timeout
        self.session = session or requests.Session()

    def publish(self, metadata: TokenMetadata) -> str:
        body = json.dumps(metadata.model_dump()).encode("utf-8")
        try:
            resp = self.session.post(
                f"{self.api_url}/add",
                files={"file": ("metadata.json", body, "application/json")},
                auth=self.auth,
                timeout=self.timeout,
            )
            resp.raise_for_status()
            content_hash = resp.json().get("Hash")
        except (requests.RequestException, ValueError) as exc:
            logger.warning("metadata_publish_failed url=%s error=%s", self.api_url, exc, exc_info=True)
            raise MetadataPublishError(f"IPFS upload failed: {exc}") from exc
        if not content_hash:
            raise MetadataPublishError("IPFS upload returned no content hash")
        return _gateway_uri(self.gateway, content_hash)


class PinataPublisher:
    url = "https://api.pinata.cloud/pinning/pinJSONToIPFS"

    def __init__(
        self,
        api_key: str,
        secret_key: str,
        gateway: str,
        timeout: float = 30,
        session: Optional[requests.Session] = None,
    ):
        self.headers = {"pinata_api_key": api_key, "pinata_secret_api_key": secret_key}
        self.gateway = gateway
        self.timeout = timeout
        self.session = session or requests.Session()

    def publish(self, metadata: TokenMetadata) -> str:
        try:
            resp = self.session.post(self.url, json=metadata.model_dump(), headers=self.headers, timeout=self.timeout)
            resp.raise_for_status()
            content_hash = resp.json().get("IpfsHash")
        except (requests.RequestException, ValueError) as exc:
            logger.warning("metadata_publish_failed url=%s error=%s", self.url, exc, exc_info=True)
            raise MetadataPublishError(f"Pinata upload failed: {exc}") from exc
        if not content_hash:
            raise MetadataPublishError("Pinata upload returned no IpfsHash")
        return _gateway_uri(self.gateway, content_hash)


def publisher_from_settings(settings: Settings) -> MetadataPublisher:
    if settings.pinata_api_key and settings.pinata_secret_key:
        return PinataPublisher(
            settings.pinata_api_key,
            settings.pinata_secret_key,
            settings.ipfs_gateway,
            timeout=settings.rpc_timeout,
        )
    return IpfsHttpPublisher(
        settings.ipfs_api_url,
        settings.ipfs_gateway,
        project_id=settings.ipfs_project_id,
        project_secret=settings.ipfs_project_secret,
        timeout=settings.rpc_timeout,
    )

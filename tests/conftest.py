from types import SimpleNamespace
from typing import List, Optional

import base58
import pytest
from solders.hash import Hash
from solders.keypair import Keypair
from solders.signature import Signature

from pump_deployer.config import Settings


class FakeClient:
    """Stands in for solana.rpc.api.Client; records every call."""

    def __init__(self, send_error: Optional[Exception] = None, confirm_error: Optional[Exception] = None, tx_err=None):
        self.calls: List[str] = []
        self.sent: List[bytes] = []
        self.send_error = send_error
        self.confirm_error = confirm_error
        self.tx_err = tx_err
        self.blockhash = Hash.new_unique()

    def get_latest_blockhash(self, commitment=None):
        self.calls.append("get_latest_blockhash")
        return SimpleNamespace(value=SimpleNamespace(blockhash=self.blockhash, last_valid_block_height=1000))

    def send_raw_transaction(self, txn, opts=None):
        self.calls.append("send_raw_transaction")
        if self.send_error is not None:
            raise self.send_error
        self.sent.append(txn)
        return SimpleNamespace(value=Signature.new_unique())

    def confirm_transaction(self, tx_sig, commitment=None, sleep_seconds=0.5, last_valid_block_height=None):
        self.calls.append("confirm_transaction")
        if self.confirm_error is not None:
            raise self.confirm_error
        return SimpleNamespace(value=[SimpleNamespace(err=self.tx_err)])


class FakePublisher:
    def __init__(self, uri: str = "https://ipfs.io/ipfs/Qm123"):
        self.uri = uri
        self.published = []

    def publish(self, metadata):
        self.published.append(metadata)
        return self.uri


@pytest.fixture
def payer() -> Keypair:
    return Keypair()


@pytest.fixture
def signing_key(payer) -> str:
    return base58.b58encode(bytes(payer)).decode()


@pytest.fixture
def settings() -> Settings:
    return Settings(_env_file=None)


@pytest.fixture
def fake_client() -> FakeClient:
    return FakeClient()


@pytest.fixture
def fake_publisher() -> FakePublisher:
    return FakePublisher()

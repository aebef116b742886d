from types import SimpleNamespace

import pytest
from solana.exceptions import SolanaRpcException
from solana.rpc.core import RPCException, TransactionExpiredBlockheightExceededError, UnconfirmedTxError
from solders.keypair import Keypair
from solders.rpc.requests import GetLatestBlockhash

from pump_deployer.deployer import plan_deployment
from pump_deployer.errors import (
    BlockhashExpired,
    ConfirmationTimeout,
    InsufficientFunds,
    NetworkError,
    ProgramRejected,
)
from pump_deployer.submitter import fetch_latest_blockhash, sign, submit
from pump_deployer.tx_builder import assemble

from .conftest import FakeClient


def _signed(client, payer):
    mint = Keypair()
    plan = plan_deployment("DOGE", "DOGE", "https://ipfs.io/ipfs/Qm123", payer.pubkey(), mint.pubkey())
    blockhash, last_valid = fetch_latest_blockhash(client)
    tx = assemble(plan.create_ix, plan.revoke_ix, payer.pubkey(), blockhash, last_valid)
    return sign(tx, [payer, mint])


def _preflight_failure(message, logs=None, err=None):
    return RPCException(SimpleNamespace(message=message, data=SimpleNamespace(logs=logs or [], err=err)))


def _transport_failure():
    def make_request():
        pass

    # Same arguments the provider passes: (self, body).
    cause = ConnectionError("connection refused")
    failure = SolanaRpcException(cause, make_request, None, GetLatestBlockhash())
    failure.__cause__ = cause
    return failure


def test_submit_returns_signature_after_confirmation(payer):
    client = FakeClient()
    signed = _signed(client, payer)
    sig = submit(client, signed, 1000)
    assert sig
    assert client.calls == ["get_latest_blockhash", "send_raw_transaction", "confirm_transaction"]
    assert client.sent == [bytes(signed)]


def test_zero_balance_payer_is_insufficient_funds(payer):
    client = FakeClient(
        send_error=_preflight_failure(
            "Transaction simulation failed: Attempt to debit an account but found no record of a prior credit.",
            err="AccountNotFound",
        )
    )
    with pytest.raises(InsufficientFunds) as info:
        submit(client, _signed(client, payer), 1000)
    assert isinstance(info.value, ProgramRejected)
    assert "confirm_transaction" not in client.calls


def test_program_rejection_keeps_logs_verbatim(payer):
    logs = ["Program 6EF8rrecthR5Dkzon8Nwu78hRvfCKubJ14M5uBEwF6P invoke [1]", "Program log: AnchorError"]
    client = FakeClient(
        send_error=_preflight_failure(
            "Transaction simulation failed: Error processing Instruction 0: custom program error: 0x1770",
            logs=logs,
            err="InstructionError(0, Custom(6000))",
        )
    )
    with pytest.raises(ProgramRejected) as info:
        submit(client, _signed(client, payer), 1000)
    assert not isinstance(info.value, InsufficientFunds)
    assert info.value.logs == logs


def test_rpc_error_without_simulation_is_network_error(payer):
    client = FakeClient(send_error=RPCException(SimpleNamespace(message="Node is behind by 42 slots", data=None)))
    with pytest.raises(NetworkError):
        submit(client, _signed(client, payer), 1000)


def test_transport_failure_is_network_error(payer):
    client = FakeClient(send_error=_transport_failure())
    with pytest.raises(NetworkError) as info:
        submit(client, _signed(client, payer), 1000)
    assert info.value.message.startswith("Failed to send transaction: ")
    assert "GetLatestBlockhash" in info.value.message
    assert "connection refused" in info.value.message


def test_expired_blockhash_is_reported_not_resent(payer):
    client = FakeClient(confirm_error=TransactionExpiredBlockheightExceededError("block height exceeded"))
    with pytest.raises(BlockhashExpired) as info:
        submit(client, _signed(client, payer), 1000)
    assert info.value.signature
    assert client.calls.count("send_raw_transaction") == 1


def test_confirmation_timeout_keeps_signature(payer):
    client = FakeClient(confirm_error=UnconfirmedTxError("Unable to confirm transaction"))
    with pytest.raises(ConfirmationTimeout) as info:
        submit(client, _signed(client, payer), 1000)
    assert isinstance(info.value, NetworkError)
    assert info.value.signature


def test_on_chain_failure_is_program_rejected(payer):
    client = FakeClient(tx_err="InstructionError(1, Custom(4))")
    with pytest.raises(ProgramRejected) as info:
        submit(client, _signed(client, payer), 1000)
    assert info.value.signature


def test_blockhash_fetch_failure_is_network_error():
    class DownClient(FakeClient):
        def get_latest_blockhash(self, commitment=None):
            raise _transport_failure()

    with pytest.raises(NetworkError) as info:
        fetch_latest_blockhash(DownClient())
    assert "connection refused" in info.value.message
    assert info.value.message != "Failed to fetch blockhash: "


def test_rpc_error_while_confirming_keeps_signature(payer):
    client = FakeClient(confirm_error=RPCException(SimpleNamespace(message="Node is unhealthy", data=None)))
    with pytest.raises(ConfirmationTimeout) as info:
        submit(client, _signed(client, payer), 1000)
    assert info.value.signature
    assert info.value.signature in info.value.message
    assert "Node is unhealthy" in info.value.message
    assert client.calls.count("send_raw_transaction") == 1


def test_lost_connection_while_confirming_keeps_signature(payer):
    client = FakeClient(confirm_error=_transport_failure())
    with pytest.raises(ConfirmationTimeout) as info:
        submit(client, _signed(client, payer), 1000)
    assert info.value.signature
    assert "connection refused" in info.value.message

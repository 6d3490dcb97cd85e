"""Tests for the challenge/sign/exchange wallet handshake."""

from unittest.mock import MagicMock, patch

import pytest
import requests

from plaid_coinflow_bridge.client.auth import WalletAuthenticator
from plaid_coinflow_bridge.client.signing import decode_signature, verify_signature
from plaid_coinflow_bridge.errors import (
    HttpStatusError,
    NetworkError,
    ProtocolViolation,
    SignatureConsistencyError,
)
from plaid_coinflow_bridge.types import WalletCredential, WalletKeypair

BASE_URL = "https://coinflow.test"
_REAL_SESSION = requests.Session


def _response(status_code=200, json_data=None, text=""):
    resp = MagicMock()
    resp.status_code = status_code
    if json_data is None:
        resp.json.side_effect = ValueError("no json")
    else:
        resp.json.return_value = json_data
    resp.text = text
    return resp


class MockCoinflow:
    """Stand-in for the auth endpoint; records every request."""

    def __init__(self, challenge_body=None, exchange_body=None):
        self.challenge_body = {"message": "hello"} if challenge_body is None else challenge_body
        self.exchange_body = {"jwt": "jwt-token"} if exchange_body is None else exchange_body
        self.session = MagicMock(spec=_REAL_SESSION)
        self.session.request.side_effect = self._handle

    def _handle(self, method, url, **kwargs):
        if method == "GET":
            return _response(json_data=self.challenge_body)
        return _response(json_data=self.exchange_body)

    @property
    def calls(self):
        return self.session.request.call_args_list


@pytest.mark.asyncio
async def test_authenticate_returns_credential():
    remote = MockCoinflow()
    authenticator = WalletAuthenticator(BASE_URL, session=remote.session)

    credential = await authenticator.authenticate()

    assert isinstance(credential, WalletCredential)
    assert credential.token == "jwt-token"
    assert credential.public_key
    assert [call.args[:2] for call in remote.calls] == [
        ("GET", f"{BASE_URL}/api/auth"),
        ("POST", f"{BASE_URL}/api/auth"),
    ]


@pytest.mark.asyncio
async def test_handshake_headers_and_signature():
    remote = MockCoinflow()
    keypair = WalletKeypair.generate()
    authenticator = WalletAuthenticator(BASE_URL, session=remote.session)

    credential = await authenticator.authenticate(keypair)

    assert credential.public_key == keypair.public_key_b58
    get_call, post_call = remote.calls
    for call in (get_call, post_call):
        headers = call.kwargs["headers"]
        assert headers["x-coinflow-auth-blockchain"] == "solana"
        assert headers["x-coinflow-auth-wallet"] == keypair.public_key_b58
        assert headers["accept"] == "application/json"
    assert "json" not in get_call.kwargs
    assert post_call.kwargs["headers"]["content-type"] == "application/json"

    signature = decode_signature(post_call.kwargs["json"]["signedMessage"])
    assert verify_signature(b"hello", signature, keypair.public_key)


@pytest.mark.asyncio
async def test_custom_blockchain_tag():
    remote = MockCoinflow()
    authenticator = WalletAuthenticator(BASE_URL, blockchain="eth", session=remote.session)

    await authenticator.authenticate()

    assert all(
        call.kwargs["headers"]["x-coinflow-auth-blockchain"] == "eth" for call in remote.calls
    )


@pytest.mark.asyncio
async def test_missing_challenge_fails_before_signing():
    remote = MockCoinflow(challenge_body={"other": "field"})
    authenticator = WalletAuthenticator(BASE_URL, session=remote.session)

    with patch("plaid_coinflow_bridge.client.auth.sign_message") as mock_sign:
        with pytest.raises(ProtocolViolation) as exc_info:
            await authenticator.authenticate()

    assert exc_info.value.field == "message"
    mock_sign.assert_not_called()
    assert len(remote.calls) == 1


@pytest.mark.asyncio
async def test_non_json_challenge_is_protocol_violation():
    remote = MockCoinflow()
    remote.session.request.side_effect = lambda method, url, **kw: _response(text="<html>")
    authenticator = WalletAuthenticator(BASE_URL, session=remote.session)

    with pytest.raises(ProtocolViolation):
        await authenticator.authenticate()


@pytest.mark.asyncio
async def test_missing_credential_is_protocol_violation():
    remote = MockCoinflow(exchange_body={"error": "nope"})
    authenticator = WalletAuthenticator(BASE_URL, session=remote.session)

    with pytest.raises(ProtocolViolation) as exc_info:
        await authenticator.authenticate()

    assert exc_info.value.field == "jwt"
    assert len(remote.calls) == 2


@pytest.mark.asyncio
async def test_network_failure_on_challenge_aborts():
    remote = MockCoinflow()
    remote.session.request.side_effect = requests.ConnectionError("connection refused")
    authenticator = WalletAuthenticator(BASE_URL, session=remote.session)

    with pytest.raises(NetworkError) as exc_info:
        await authenticator.authenticate()

    assert exc_info.value.url == f"{BASE_URL}/api/auth"
    assert not isinstance(exc_info.value, HttpStatusError)
    assert remote.session.request.call_count == 1


@pytest.mark.asyncio
async def test_rejected_exchange_is_http_status_error():
    remote = MockCoinflow()

    def handle(method, url, **kwargs):
        if method == "GET":
            return _response(json_data={"message": "hello"})
        return _response(status_code=401, json_data={"error": "bad signature"}, text="bad signature")

    remote.session.request.side_effect = handle
    authenticator = WalletAuthenticator(BASE_URL, session=remote.session)

    with pytest.raises(HttpStatusError) as exc_info:
        await authenticator.authenticate()

    assert isinstance(exc_info.value, NetworkError)
    assert exc_info.value.status_code == 401
    assert remote.session.request.call_count == 2


@pytest.mark.asyncio
async def test_failed_local_verification_stops_before_exchange():
    remote = MockCoinflow()
    authenticator = WalletAuthenticator(BASE_URL, session=remote.session)

    with patch(
        "plaid_coinflow_bridge.client.signing.verify_signature", return_value=False
    ):
        with pytest.raises(SignatureConsistencyError):
            await authenticator.authenticate()

    assert [call.args[0] for call in remote.calls] == ["GET"]


@pytest.mark.asyncio
async def test_each_handshake_uses_its_own_session():
    sessions = []

    def new_session():
        remote = MockCoinflow()
        remote.session.__enter__.return_value = remote.session
        remote.session.__exit__.return_value = False
        sessions.append(remote.session)
        return remote.session

    authenticator = WalletAuthenticator(BASE_URL)

    with patch("plaid_coinflow_bridge.client.auth.requests.Session", side_effect=new_session):
        first = await authenticator.authenticate()
        second = await authenticator.authenticate()

    assert first.public_key != second.public_key
    assert len(sessions) == 2
    for session in sessions:
        assert [call.args[0] for call in session.request.call_args_list] == ["GET", "POST"]
        session.__exit__.assert_called_once()


def test_credential_headers():
    credential = WalletCredential(public_key="Wallet111", token="jwt-token")

    assert credential.headers("solana") == {
        "Authorization": "jwt-token",
        "accept": "application/json",
        "x-coinflow-auth-wallet": "Wallet111",
        "x-coinflow-auth-blockchain": "solana",
    }
    assert "jwt-token" not in repr(credential)

"""
Shared test fixtures for the Coinbase connection tests.

Provides reusable fixtures for:
- Sample credentials (API key, CDP key with a real P-256 key pair)
- httpx clients backed by a MockTransport
- Sample v2 / v3 account payloads
"""

import httpx
import pytest
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import ec

# ---------------------------------------------------------------------------
# Credentials
# ---------------------------------------------------------------------------


@pytest.fixture
def api_key_config():
    """Aggregator-style config for legacy API keys."""
    return {"apiKey": "test-api-key", "apiSecret": "test-api-secret"}


@pytest.fixture(scope="session")
def ec_private_key():
    """A real EC P-256 key for test purposes (generated per session)."""
    return ec.generate_private_key(ec.SECP256R1())


@pytest.fixture(scope="session")
def ec_private_key_pem(ec_private_key):
    return ec_private_key.private_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PrivateFormat.TraditionalOpenSSL,
        encryption_algorithm=serialization.NoEncryption(),
    ).decode("utf-8")


@pytest.fixture
def cdp_key_config(ec_private_key_pem):
    """Aggregator-style config for CDP keys."""
    return {"name": "organizations/org-id/apiKeys/key-id", "privateKey": ec_private_key_pem}


@pytest.fixture(autouse=True)
def clear_coinbase_env(monkeypatch):
    """Keep real credentials in the environment out of the tests."""
    for var in (
        "COINBASE_API_KEY",
        "COINBASE_API_SECRET",
        "COINBASE_CDP_KEY_FILE",
        "COINBASE_CDP_KEY_NAME",
        "COINBASE_CDP_PRIVATE_KEY",
        "COINBASE_ACCESS_TOKEN",
        "COINBASE_REFRESH_TOKEN",
    ):
        monkeypatch.delenv(var, raising=False)


# ---------------------------------------------------------------------------
# HTTP
# ---------------------------------------------------------------------------


@pytest.fixture
def mock_http_client():
    """
    Build an httpx.AsyncClient whose requests are answered by `handler`.

    Every request sent is recorded on the returned client's `sent` list.
    """

    def _make(handler):
        sent = []

        def _record(request: httpx.Request) -> httpx.Response:
            sent.append(request)
            return handler(request)

        client = httpx.AsyncClient(transport=httpx.MockTransport(_record))
        client.sent = sent
        return client

    return _make


# ---------------------------------------------------------------------------
# Sample data factories
# ---------------------------------------------------------------------------


@pytest.fixture
def v2_account():
    """Build a v2 wallet account record."""

    def _make(currency, amount, account_id=None):
        return {
            "id": account_id or f"{currency.lower()}-wallet",
            "name": f"{currency} Wallet",
            "currency": {"code": currency, "name": currency},
            "balance": {"amount": amount, "currency": currency},
        }

    return _make


@pytest.fixture
def v3_account():
    """Build a v3 brokerage account record."""

    def _make(currency, value, uuid=None):
        return {
            "uuid": uuid or f"{currency.lower()}-uuid",
            "name": f"{currency} Wallet",
            "currency": currency,
            "available_balance": {"value": value, "currency": currency},
            "hold": {"value": "0", "currency": currency},
        }

    return _make

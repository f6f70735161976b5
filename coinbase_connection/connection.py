"""
Coinbase connection for the balance aggregator

The aggregator calls initiate() once when a connection is added and
get_balances() on every refresh. A client may be injected; otherwise each
call builds its own.
"""

import logging
from typing import Any, Mapping, Optional

from coinbase_connection.coinbase_client import CoinbaseClient
from coinbase_connection.exceptions import PermissionsError
from coinbase_connection.models import ApiKeyCredentials, ConnectionBalances

logger = logging.getLogger(__name__)


async def initiate(config: Mapping[str, Any], client: Optional[CoinbaseClient] = None) -> ConnectionBalances:
    """
    Validate the credentials and return the first set of balances

    API keys must carry the required scopes; CDP keys have their scopes
    fixed at creation, so they are not checked.

    Raises:
        CredentialsError: if the config holds no usable credentials
        PermissionsError: if the API key scopes are wrong
    """
    client = client or CoinbaseClient()
    client.set_config(config)

    if isinstance(client.credentials, ApiKeyCredentials):
        if not await client.has_required_permissions():
            raise PermissionsError("Coinbase API key does not have the required permissions")

    return await get_balances(config, client)


async def get_balances(config: Mapping[str, Any], client: Optional[CoinbaseClient] = None) -> ConnectionBalances:
    """Fetch current balances for the configured account"""
    client = client or CoinbaseClient()
    client.set_config(config)

    balances = await client.get_all_balances()
    logger.info(f"Fetched {len(balances)} Coinbase balances")

    return ConnectionBalances(balances=balances)

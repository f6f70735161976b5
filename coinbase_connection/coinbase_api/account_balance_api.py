"""
Account and balance operations for Coinbase API
Fetches every account page and maps accounts to {asset, amount} balances
"""

import logging
from typing import Any, Callable, Dict, List, Optional, Tuple

from coinbase_connection.coinbase_api.pagination import (
    DEFAULT_MAX_PAGES,
    fetch_all_cursor_pages,
    fetch_all_pages,
)
from coinbase_connection.models import Balance

logger = logging.getLogger(__name__)

V2_ACCOUNTS_PATH = "/v2/accounts?&limit=100"
V3_ACCOUNTS_PATH = "/api/v3/brokerage/accounts"


async def get_v2_accounts(request_func: Callable, max_pages: int = DEFAULT_MAX_PAGES) -> List[Dict[str, Any]]:
    """
    Get all wallet accounts from the v2 API, following next_uri pagination
    Required scopes: `wallet:accounts:read`
    """
    accounts = await fetch_all_pages(request_func, "GET", V2_ACCOUNTS_PATH, max_pages=max_pages)
    logger.info(f"Fetched {len(accounts)} total accounts from v2 API")
    return accounts


async def get_v3_accounts(
    request_func: Callable, page_limit: int = 100, max_pages: int = DEFAULT_MAX_PAGES
) -> List[Dict[str, Any]]:
    """Get all brokerage accounts from the v3 API, following the cursor"""
    accounts = await fetch_all_cursor_pages(
        request_func,
        "GET",
        V3_ACCOUNTS_PATH,
        params={"limit": page_limit},
        records_key="accounts",
        max_pages=max_pages,
    )
    logger.info(f"Fetched {len(accounts)} total accounts from v3 API")
    return accounts


def _currency_and_amount(account: Dict[str, Any]) -> Tuple[Optional[str], Optional[str]]:
    # v2: {"balance": {"amount", "currency"}}, v3: {"available_balance": {"value", "currency"}}
    balance = account.get("balance")
    if isinstance(balance, dict):
        return balance.get("currency"), balance.get("amount")

    available = account.get("available_balance")
    if isinstance(available, dict):
        return available.get("currency"), available.get("value")

    return None, None


def _is_positive(amount: str) -> bool:
    try:
        return float(amount) > 0
    except (TypeError, ValueError):
        return False


def normalize_balances(accounts: List[Dict[str, Any]], skip_zero_balances: bool = False) -> List[Balance]:
    """
    Map raw v2 or v3 accounts to balances

    The amount is kept as the exchange's decimal string. With
    skip_zero_balances, accounts whose amount is not positive are dropped.
    """
    balances = []
    for account in accounts:
        currency, amount = _currency_and_amount(account)
        if currency is None or amount is None:
            logger.warning(f"⚠️  Skipping account without balance: {account.get('uuid') or account.get('id')}")
            continue

        if skip_zero_balances and not _is_positive(amount):
            continue

        balances.append(Balance(asset=currency, amount=str(amount)))

    return balances

#!/usr/bin/env python3
"""
Live check: connect to Coinbase with the credentials in the environment
(or .env) and print the balances the aggregator would receive.

    python -m coinbase_connection
"""

import asyncio
import logging
import sys

from coinbase_connection.config import settings
from coinbase_connection.connection import initiate
from coinbase_connection.exceptions import CoinbaseConnectionError


async def check_connection() -> bool:
    """Run initiate() against the live API and display the result"""
    print("=" * 60)
    print("Coinbase Connection - Live Check")
    print("=" * 60)
    print()

    print("1. Checking credentials...")
    config = settings.credentials_config()
    if not config:
        print("   ❌ ERROR: No Coinbase credentials found")
        print("   Set COINBASE_API_KEY/COINBASE_API_SECRET or COINBASE_CDP_KEY_NAME/COINBASE_CDP_PRIVATE_KEY")
        return False

    key_id = config.get("apiKey") or config.get("name") or "oauth"
    print(f"   ✅ Key: {key_id[:8]}...")
    print()

    print("2. Fetching balances...")
    try:
        result = await initiate(config)
    except CoinbaseConnectionError as e:
        print(f"   ❌ {type(e).__name__}: {e}")
        return False

    print(f"   ✅ Found {len(result.balances)} balances")
    print()

    for balance in result.balances:
        print(f"   {balance.asset:>8}  {balance.amount}")

    return True


def main() -> int:
    logging.basicConfig(level=settings.log_level, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s")
    ok = asyncio.run(check_connection())
    return 0 if ok else 1


if __name__ == "__main__":
    sys.exit(main())

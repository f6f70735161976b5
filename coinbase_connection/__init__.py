"""
Coinbase connection

Fetches Coinbase account balances for an aggregator through two calls,
initiate() and get_balances().
"""

from coinbase_connection.connection import get_balances, initiate

__all__ = ["initiate", "get_balances"]

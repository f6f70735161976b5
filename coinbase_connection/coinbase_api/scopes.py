"""API key permission checks"""
from typing import Iterable

from coinbase_connection.exceptions import PermissionsError


def has_correct_scopes(
    required_scopes: Iterable[str],
    granted_scopes: Iterable[str],
    fail_if_not_exact: bool = True,
) -> bool:
    """
    Returns True if the granted scopes cover the required ones

    Scopes are compared as sets. Missing scopes always fail; extra granted
    scopes fail too unless fail_if_not_exact is False.

    Raises:
        PermissionsError: listing the missing or superfluous scopes
    """
    # dict keeps first-seen order for the error messages
    required = dict.fromkeys(required_scopes)
    granted = dict.fromkeys(granted_scopes)

    missing = [scope for scope in required if scope not in granted]
    extra = [scope for scope in granted if scope not in required]

    if missing:
        raise PermissionsError(f"Insufficient permissions: add {','.join(missing)}", missing=missing)

    if fail_if_not_exact and extra:
        raise PermissionsError(f"Superfluous permissions: remove {','.join(extra)}", extra=extra)

    return True

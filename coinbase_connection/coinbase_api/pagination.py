"""
Pagination for Coinbase list endpoints

v2 endpoints return a pagination.next_uri to follow; v3 brokerage endpoints
return has_next plus an opaque cursor. Both loops fetch pages in order and
concatenate their records without deduplicating or reordering. A page
without a records list fails the whole fetch.
"""

import logging
from typing import Any, Callable, Dict, List, Mapping, Optional

from coinbase_connection.exceptions import PaginationLimitError, ResponseError

logger = logging.getLogger(__name__)

DEFAULT_MAX_PAGES = 100


def _page_records(result: Dict[str, Any], key: str, method: str, path: str) -> List[Any]:
    """Records of one page; a page without a records list is a protocol error"""
    records = result.get(key)
    if not isinstance(records, list):
        raise ResponseError("Could not fetch accounts data", method=method, url=path)
    return records


async def fetch_all_pages(
    request_func: Callable,
    method: str,
    path: str,
    data: Any = "",
    max_pages: int = DEFAULT_MAX_PAGES,
) -> List[Any]:
    """
    Follow pagination.next_uri until it is null

    Args:
        request_func: Coroutine (method, path, data) -> result dict
        method: HTTP method, reused for every page
        path: Path of the first page
        data: Request data, reused for every page
        max_pages: Raise PaginationLimitError if more pages remain after this many

    Returns:
        The data records of every page, page 1 first
    """
    records: List[Any] = []
    next_path: Optional[str] = path
    page_count = 0

    while next_path is not None:
        if page_count >= max_pages:
            raise PaginationLimitError(
                f"{method} {path} still had more pages after {max_pages} pages", max_pages=max_pages
            )

        result = await request_func(method, next_path, data)
        page_count += 1
        records.extend(_page_records(result, "data", method, next_path))

        pagination = result.get("pagination")
        next_uri = pagination.get("next_uri") if isinstance(pagination, dict) else None
        next_path = next_uri if isinstance(next_uri, str) else None

        logger.debug(f"Fetched page {page_count} of {path} (total records so far: {len(records)})")

    return records


async def fetch_all_cursor_pages(
    request_func: Callable,
    method: str,
    path: str,
    params: Optional[Mapping[str, Any]] = None,
    records_key: str = "accounts",
    max_pages: int = DEFAULT_MAX_PAGES,
) -> List[Any]:
    """
    Re-issue the request with the returned cursor while has_next is true

    Args:
        request_func: Coroutine (method, path, params=...) -> result dict
        method: HTTP method
        path: Endpoint path
        params: Query parameters of the first page; the cursor is merged in
        records_key: Key holding each page's records
        max_pages: Raise PaginationLimitError if more pages remain after this many

    Returns:
        The records of every page, page 1 first
    """
    base_params: Dict[str, Any] = dict(params or {})
    records: List[Any] = []
    page_params = base_params
    page_count = 0

    while True:
        if page_count >= max_pages:
            raise PaginationLimitError(
                f"{method} {path} still had more pages after {max_pages} pages", max_pages=max_pages
            )

        result = await request_func(method, path, params=page_params)
        page_count += 1
        records.extend(_page_records(result, records_key, method, path))

        logger.debug(f"Fetched page {page_count} of {path} (total records so far: {len(records)})")

        cursor = result.get("cursor")
        if result.get("has_next") is not True or not isinstance(cursor, str) or not cursor:
            break

        page_params = {**base_params, "cursor": cursor}

    return records

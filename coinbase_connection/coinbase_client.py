"""
Coinbase API Client

Supports three credential variants, selected from the connection config:
1. API key + secret - HMAC-SHA256 signed requests against the v2 API
2. CDP key name + EC private key - JWT bearer requests against the v3 API
3. OAuth2 tokens - accepted, but requests are not implemented

Coinbase doesn't ship an official async Python client for the v2 wallet
API, so a basic one is provided.
"""

import logging
from typing import Any, Callable, Dict, List, Mapping, Optional
from urllib.parse import urljoin

import httpx

from coinbase_connection.coinbase_api import account_balance_api, pagination, scopes
from coinbase_connection.coinbase_api.request_handlers import RequestData, RequestHandler, create_request_handler
from coinbase_connection.config import settings
from coinbase_connection.exceptions import CredentialsError, ResponseError
from coinbase_connection.models import Balance, CdpKeyCredentials, Credentials, parse_credentials

logger = logging.getLogger(__name__)

# (kind, messages) where kind is "warning" or "error"
DiagnosticsHook = Callable[[str, List[Dict[str, Any]]], None]

USER_AUTH_PATH = "/v2/user/auth"


def log_service_messages(kind: str, messages: List[Dict[str, Any]]) -> None:
    """Default diagnostics hook: send service warnings/errors to the logger"""
    if kind == "error":
        logger.error(f"❌ Coinbase API errors: {messages}")
    else:
        logger.warning(f"⚠️  Coinbase API warnings: {messages}")


class CoinbaseClient:
    """
    Coinbase API Client

    One instance holds one set of credentials. Nothing is shared between
    instances, so several may be used concurrently.
    """

    def __init__(
        self,
        required_scopes: Optional[List[str]] = None,
        config: Optional[Mapping[str, Any]] = None,
        http_client: Optional[httpx.AsyncClient] = None,
        on_diagnostics: Optional[DiagnosticsHook] = None,
        base_url: Optional[str] = None,
        max_pages: Optional[int] = None,
        accounts_page_limit: Optional[int] = None,
        skip_zero_balances: Optional[bool] = None,
        fail_if_not_exact: Optional[bool] = None,
        timeout: Optional[float] = None,
    ):
        """
        Args:
            required_scopes: Scopes an API key must have (v2 only)
            config: Connection config holding one credential variant
            http_client: Shared httpx client; one is opened per request otherwise
            on_diagnostics: Receives service-reported warnings and errors
            base_url, max_pages, accounts_page_limit, skip_zero_balances,
            fail_if_not_exact, timeout: Override the matching settings
        """
        self.required_scopes = list(
            required_scopes if required_scopes is not None else settings.coinbase_required_scopes
        )
        self.http_client = http_client
        self.on_diagnostics = on_diagnostics or log_service_messages
        self.base_url = base_url or settings.coinbase_base_url
        self.max_pages = max_pages if max_pages is not None else settings.coinbase_max_pages
        self.accounts_page_limit = (
            accounts_page_limit if accounts_page_limit is not None else settings.coinbase_accounts_page_limit
        )
        self.skip_zero_balances = (
            skip_zero_balances if skip_zero_balances is not None else settings.coinbase_skip_zero_balances
        )
        self.fail_if_not_exact = (
            fail_if_not_exact if fail_if_not_exact is not None else settings.coinbase_fail_if_not_exact_scopes
        )
        self.timeout = timeout if timeout is not None else settings.request_timeout_seconds

        self.credentials: Optional[Credentials] = None
        self._request_handler: Optional[RequestHandler] = None

        if config is not None:
            self.set_config(config)

    def set_config(self, config: Any) -> None:
        """
        Set client credentials, replacing any previous ones

        Raises:
            CredentialsError: if no credential variant is populated
        """
        credentials = parse_credentials(config)
        self._request_handler = create_request_handler(
            credentials,
            http_client=self.http_client,
            timeout=self.timeout,
            api_version=settings.coinbase_api_version,
        )
        self.credentials = credentials
        logger.info(f"Using {type(credentials).__name__} for Coinbase requests")

    @property
    def uses_api_v3(self) -> bool:
        return isinstance(self.credentials, CdpKeyCredentials)

    # ===== Requests =====

    async def request(
        self,
        method: str,
        path: str,
        data: RequestData = "",
        params: Optional[Mapping[str, Any]] = None,
    ) -> Dict[str, Any]:
        """
        Execute a request and validate the response

        Only status 200 is accepted as success.

        Raises:
            CredentialsError: if no credentials have been set
            ResponseError: if there is no response, no JSON object, or a non-200 status
        """
        if self._request_handler is None:
            raise CredentialsError("Cannot call request() without request handler")

        url = urljoin(self.base_url, path)
        response = await self._request_handler.request(method, url, data, params)

        if response is None:
            raise ResponseError("Invalid response", method=method, url=url)

        if response.data is None:
            raise ResponseError(
                "Coinbase API responded with no data", method=method, url=url, status_code=response.status_code
            )

        result = response.data

        # @see https://developers.coinbase.com/api/v2#error-response
        if response.status_code != 200:
            if isinstance(result, dict) and result.get("errors"):
                self.on_diagnostics("error", result["errors"])

            raise ResponseError(
                f"{method} {url} responded with status {response.status_code}",
                method=method,
                url=url,
                status_code=response.status_code,
            )

        if not isinstance(result, dict):
            raise ResponseError(
                "Coinbase API responded with no data", method=method, url=url, status_code=response.status_code
            )

        # @see https://developers.coinbase.com/api/v2#warnings
        if result.get("warnings"):
            self.on_diagnostics("warning", result["warnings"])

        return result

    async def request_all(self, method: str, path: str, data: RequestData = "") -> List[Any]:
        """Request a v2 list endpoint and return the records of every page"""
        return await pagination.fetch_all_pages(self.request, method, path, data, max_pages=self.max_pages)

    # ===== Permissions =====

    async def has_required_permissions(self) -> bool:
        """
        Returns True if we can connect and the API key has exactly the
        required scopes. Raises otherwise.

        @see https://developers.coinbase.com/api/v2#show-authorization-information
        """
        user_auth_result = await self.request("GET", USER_AUTH_PATH)

        data = user_auth_result.get("data")
        if not isinstance(data, dict):
            raise ResponseError("Could not fetch scopes data", method="GET", url=urljoin(self.base_url, USER_AUTH_PATH))

        return scopes.has_correct_scopes(
            self.required_scopes, data.get("scopes") or [], fail_if_not_exact=self.fail_if_not_exact
        )

    # ===== Account & Balance Methods =====

    async def get_accounts(self) -> List[Dict[str, Any]]:
        """Get every account, from the v3 API for CDP keys and the v2 API otherwise"""
        if self.uses_api_v3:
            return await account_balance_api.get_v3_accounts(
                self.request, page_limit=self.accounts_page_limit, max_pages=self.max_pages
            )

        return await account_balance_api.get_v2_accounts(self.request, max_pages=self.max_pages)

    async def get_all_balances(self) -> List[Balance]:
        """Returns current Coinbase holdings"""
        accounts = await self.get_accounts()
        return account_balance_api.normalize_balances(accounts, skip_zero_balances=self.skip_zero_balances)

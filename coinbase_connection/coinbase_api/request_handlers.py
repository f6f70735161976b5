"""
Request handlers for the Coinbase client

One handler per credential variant. Each signs a request, sends it, and hands
back whatever the service answered, including error statuses; deciding what
a status means is left to the client.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional, Union
from urllib.parse import urlencode, urlsplit, urlunsplit

import httpx

from coinbase_connection.coinbase_api.auth import (
    build_message,
    generate_hmac_signature,
    generate_jwt,
    get_timestamp,
    serialize_data,
)
from coinbase_connection.exceptions import CredentialsError
from coinbase_connection.models import (
    ApiKeyCredentials,
    CdpKeyCredentials,
    Credentials,
    OAuthCredentials,
)

logger = logging.getLogger(__name__)

API_VERSION = "2015-07-22"
DEFAULT_TIMEOUT = 30.0

RequestData = Union[Mapping[str, Any], str, None]


@dataclass
class HandlerResponse:
    status_code: int
    data: Optional[Any] = None

    @classmethod
    def from_httpx(cls, response: httpx.Response) -> "HandlerResponse":
        """Decode the JSON body, leaving data as None when there is none"""
        data = None
        if response.content:
            try:
                data = response.json()
            except ValueError:
                logger.debug(f"Non-JSON body from {response.request.method} {response.request.url}")

        return cls(status_code=response.status_code, data=data)


def merge_query(url: str, params: Optional[Mapping[str, Any]]) -> str:
    """Append params to the URL's existing query string"""
    if not params:
        return url

    parts = urlsplit(url)
    extra = urlencode(params, doseq=True)
    query = f"{parts.query}&{extra}" if parts.query else extra
    return urlunsplit((parts.scheme, parts.netloc, parts.path, query, parts.fragment))


class RequestHandler(ABC):
    """Signs and sends a single request"""

    def __init__(self, http_client: Optional[httpx.AsyncClient] = None, timeout: float = DEFAULT_TIMEOUT):
        # An injected client is reused across requests and never closed here
        self.http_client = http_client
        self.timeout = timeout

    @abstractmethod
    async def request(
        self,
        method: str,
        url: str,
        data: RequestData = "",
        params: Optional[Mapping[str, Any]] = None,
    ) -> Optional[HandlerResponse]:
        pass

    async def _send(
        self,
        method: str,
        url: str,
        headers: Dict[str, str],
        content: str = "",
        params: Optional[Mapping[str, Any]] = None,
    ) -> HandlerResponse:
        """
        Dispatch the request

        Status errors are returned as responses since Coinbase sends content
        alongside them. Transport errors without a response propagate.
        """
        if self.http_client is not None:
            response = await self._dispatch(self.http_client, method, url, headers, content, params)
        else:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await self._dispatch(client, method, url, headers, content, params)

        return HandlerResponse.from_httpx(response)

    @staticmethod
    async def _dispatch(
        client: httpx.AsyncClient,
        method: str,
        url: str,
        headers: Dict[str, str],
        content: str,
        params: Optional[Mapping[str, Any]],
    ) -> httpx.Response:
        try:
            response = await client.request(
                method,
                url,
                headers=headers,
                content=content or None,
                params=dict(params) if params else None,
            )
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            logger.debug(f"{method} {url} returned status {e.response.status_code}")
            response = e.response

        return response


class APIKeyRequestHandler(RequestHandler):
    """HMAC API key handler (v2 API)"""

    def __init__(
        self,
        api_key: str,
        api_secret: str,
        api_version: str = API_VERSION,
        http_client: Optional[httpx.AsyncClient] = None,
        timeout: float = DEFAULT_TIMEOUT,
    ):
        super().__init__(http_client=http_client, timeout=timeout)
        self.api_key = api_key
        self._api_secret = api_secret
        self.api_version = api_version

    def sign(self, method: str, url: str, body: str = "") -> Dict[str, str]:
        """Build the CB-ACCESS headers for one request"""
        timestamp = get_timestamp()
        message = build_message(timestamp, method, url, body)
        signature = generate_hmac_signature(message, self._api_secret)

        return {
            "CB-ACCESS-SIGN": signature,
            "CB-ACCESS-TIMESTAMP": str(timestamp),
            "CB-ACCESS-KEY": self.api_key,
            "CB-VERSION": self.api_version,
        }

    async def request(
        self,
        method: str,
        url: str,
        data: RequestData = "",
        params: Optional[Mapping[str, Any]] = None,
    ) -> Optional[HandlerResponse]:
        # Params go into the URL so the signed query is exactly what is sent
        url = merge_query(url, params)
        body = serialize_data(data)
        headers = self.sign(method, url, body)

        return await self._send(method, url, headers, content=body)


class CdpKeyRequestHandler(RequestHandler):
    """CDP key handler, authenticates with a signed JWT (v3 brokerage API)"""

    def __init__(
        self,
        name: str,
        private_key: str,
        http_client: Optional[httpx.AsyncClient] = None,
        timeout: float = DEFAULT_TIMEOUT,
    ):
        super().__init__(http_client=http_client, timeout=timeout)
        self.name = name
        self._private_key = private_key

    async def request(
        self,
        method: str,
        url: str,
        data: RequestData = "",
        params: Optional[Mapping[str, Any]] = None,
    ) -> Optional[HandlerResponse]:
        token = generate_jwt(self.name, self._private_key, method, url)
        headers = {"Authorization": f"Bearer {token}"}

        return await self._send(method, url, headers, content=serialize_data(data), params=params)


class OAuth2RequestHandler(RequestHandler):
    """OAuth2 handler. No token flow exists, so every request is refused."""

    def __init__(
        self,
        access_token: str,
        refresh_token: str,
        http_client: Optional[httpx.AsyncClient] = None,
        timeout: float = DEFAULT_TIMEOUT,
    ):
        super().__init__(http_client=http_client, timeout=timeout)
        self._access_token = access_token
        self._refresh_token = refresh_token

    async def request(
        self,
        method: str,
        url: str,
        data: RequestData = "",
        params: Optional[Mapping[str, Any]] = None,
    ) -> Optional[HandlerResponse]:
        raise NotImplementedError("OAuth2 requests are not supported")


def create_request_handler(
    credentials: Credentials,
    http_client: Optional[httpx.AsyncClient] = None,
    timeout: float = DEFAULT_TIMEOUT,
    api_version: str = API_VERSION,
) -> RequestHandler:
    """Select the handler for a credential variant"""
    if isinstance(credentials, ApiKeyCredentials):
        return APIKeyRequestHandler(
            credentials.api_key,
            credentials.api_secret,
            api_version=api_version,
            http_client=http_client,
            timeout=timeout,
        )

    if isinstance(credentials, CdpKeyCredentials):
        return CdpKeyRequestHandler(
            credentials.name,
            credentials.private_key,
            http_client=http_client,
            timeout=timeout,
        )

    if isinstance(credentials, OAuthCredentials):
        return OAuth2RequestHandler(
            credentials.access_token,
            credentials.refresh_token,
            http_client=http_client,
            timeout=timeout,
        )

    raise CredentialsError()

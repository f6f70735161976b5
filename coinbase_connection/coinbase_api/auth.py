"""
Authentication utilities for the Coinbase API
Supports both HMAC API keys (v2 API) and CDP keys (JWT, v3 brokerage API)
"""

import hashlib
import hmac
import logging
import time
from typing import Any, Mapping, Union
from urllib.parse import urlencode, urlsplit

import jwt
from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.backends import default_backend
from cryptography.hazmat.primitives import serialization

from coinbase_connection.exceptions import SigningError

logger = logging.getLogger(__name__)

JWT_ISSUER = "cdp"
JWT_ALGORITHM = "ES256"
JWT_TTL_SECONDS = 120


def get_timestamp() -> int:
    """Return the current Unix timestamp in seconds"""
    return int(time.time())


def serialize_data(data: Union[Mapping[str, Any], str, None]) -> str:
    """
    Convert request data to the string that is signed and sent

    Mappings are form encoded (key=value&key2=value2). Only flat key/value
    bodies survive this; nested values are stringified.
    """
    if data is None:
        return ""
    if isinstance(data, Mapping):
        return urlencode(data)
    return str(data)


def build_message(timestamp: int, method: str, url: str, body: str = "") -> str:
    """
    Concat request options into the message signed for HMAC auth

    Args:
        timestamp: Unix timestamp in seconds
        method: HTTP method
        url: Full URL or path, with optional query string
        body: Serialized request body (see serialize_data)

    Returns:
        timestamp + method + path + query + body, without separators
    """
    if not isinstance(body, str):
        raise TypeError("data must be a string")

    parts = urlsplit(url)
    search = f"?{parts.query}" if parts.query else ""

    return f"{timestamp}{method}{parts.path}{search}{body}"


def generate_hmac_signature(message: str, api_secret: str) -> str:
    """
    Sign message with the API secret

    Returns:
        HMAC-SHA256 signature hex string
    """
    return hmac.new(api_secret.encode("utf-8"), message.encode("utf-8"), hashlib.sha256).hexdigest()


def generate_jwt(key_name: str, private_key: str, request_method: str, url: str) -> str:
    """
    Generate JWT token for a CDP API request

    Args:
        key_name: CDP API key name
        private_key: CDP EC private key PEM string
        request_method: HTTP method (GET, POST, etc.)
        url: Request URL (scheme and query are not part of the signed URI)

    Returns:
        JWT token string

    Raises:
        SigningError: if the key material cannot be loaded or used for signing
    """
    parts = urlsplit(url)
    uri = f"{request_method} {parts.netloc}{parts.path}"
    current_time = get_timestamp()

    payload = {
        "iss": JWT_ISSUER,
        "nbf": current_time,
        "exp": current_time + JWT_TTL_SECONDS,
        "sub": key_name,
        "uri": uri,
    }

    try:
        private_key_obj = serialization.load_pem_private_key(
            private_key.encode("utf-8"), password=None, backend=default_backend()
        )
        token = jwt.encode(
            payload,
            private_key_obj,
            algorithm=JWT_ALGORITHM,
            headers={"kid": key_name, "nonce": str(current_time)},
        )
    except (ValueError, TypeError, AttributeError, UnsupportedAlgorithm, jwt.PyJWTError) as e:
        # Never include the key material itself
        logger.error(f"❌ Failed to get signed token with API credentials: {type(e).__name__}")
        raise SigningError("Unable to access Coinbase API with supplied credentials!") from e

    return token

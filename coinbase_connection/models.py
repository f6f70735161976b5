"""Credential variants and balance schemas"""
from typing import Any, List, Mapping, Optional, Union

from pydantic import BaseModel, Field

from coinbase_connection.exceptions import CredentialsError

PROVIDER_NAME = "coinbase"


class ApiKeyCredentials(BaseModel):
    """Legacy API key + secret, signed with HMAC-SHA256 (v2 API)"""

    api_key: str = Field(..., alias="apiKey", min_length=1)
    api_secret: str = Field(..., alias="apiSecret", min_length=1, repr=False)

    class Config:
        frozen = True
        populate_by_name = True


class CdpKeyCredentials(BaseModel):
    """CDP key name + EC private key, used to sign JWTs (v3 brokerage API)"""

    name: str = Field(..., min_length=1)
    private_key: str = Field(..., alias="privateKey", min_length=1, repr=False)

    class Config:
        frozen = True
        populate_by_name = True


class OAuthCredentials(BaseModel):
    """OAuth2 bearer tokens. Requests with these are not supported yet."""

    access_token: str = Field(..., alias="accessToken", min_length=1, repr=False)
    refresh_token: str = Field(..., alias="refreshToken", min_length=1, repr=False)

    class Config:
        frozen = True
        populate_by_name = True


Credentials = Union[ApiKeyCredentials, CdpKeyCredentials, OAuthCredentials]

# (model, fields that must all be populated), in priority order
_CREDENTIAL_VARIANTS = (
    (ApiKeyCredentials, (("api_key", "apiKey"), ("api_secret", "apiSecret"))),
    (CdpKeyCredentials, (("name", "name"), ("private_key", "privateKey"))),
    (OAuthCredentials, (("access_token", "accessToken"), ("refresh_token", "refreshToken"))),
)


def _lookup(config: Mapping[str, Any], field: str, alias: str) -> Optional[Any]:
    value = config.get(field)
    if not value:
        value = config.get(alias)
    return value or None


def parse_credentials(config: Union[Credentials, Mapping[str, Any], None]) -> Credentials:
    """
    Pick the credential variant populated in a connection config

    Accepts snake_case field names or the camelCase keys used by the
    aggregator. Raises CredentialsError when no variant is fully populated.
    """
    if isinstance(config, (ApiKeyCredentials, CdpKeyCredentials, OAuthCredentials)):
        return config

    if not isinstance(config, Mapping):
        raise CredentialsError()

    for model, fields in _CREDENTIAL_VARIANTS:
        values = {field: _lookup(config, field, alias) for field, alias in fields}
        if all(isinstance(value, str) for value in values.values()):
            return model(**values)

    raise CredentialsError()


class Balance(BaseModel):
    asset: str
    amount: str


class ConnectionBalances(BaseModel):
    provider_name: str = PROVIDER_NAME
    balances: List[Balance] = []

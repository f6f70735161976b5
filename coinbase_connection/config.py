import json
from typing import Any, Dict, List, Tuple

from pydantic import field_validator
from pydantic_settings import BaseSettings


def load_cdp_credentials_from_file(file_path: str) -> Tuple[str, str]:
    """
    Load CDP credentials from JSON key file

    Args:
        file_path: Path to cdp_api_key.json file

    Returns:
        Tuple of (key_name, private_key)
    """
    with open(file_path, "r") as f:
        data = json.load(f)

    return data["name"], data["privateKey"]


class Settings(BaseSettings):
    # Coinbase API - Legacy HMAC keys (v2 API)
    coinbase_api_key: str = ""
    coinbase_api_secret: str = ""

    # Coinbase CDP API - EC private key method (v3 brokerage API)
    coinbase_cdp_key_file: str = ""  # Path to cdp_api_key.json file
    coinbase_cdp_key_name: str = ""
    coinbase_cdp_private_key: str = ""

    # OAuth2 tokens (accepted, but requests are not implemented)
    coinbase_access_token: str = ""
    coinbase_refresh_token: str = ""

    @field_validator("coinbase_cdp_private_key")
    @classmethod
    def convert_newlines(cls, v: str) -> str:
        """Convert literal \\n to actual newlines in private key"""
        if v:
            return v.replace("\\n", "\n")
        return v

    # API
    coinbase_base_url: str = "https://api.coinbase.com"
    coinbase_api_version: str = "2015-07-22"  # CB-VERSION pin for the v2 API
    request_timeout_seconds: float = 30.0

    # Permissions (v2 API keys only)
    coinbase_required_scopes: List[str] = ["wallet:accounts:read"]
    coinbase_fail_if_not_exact_scopes: bool = True

    # Pagination
    coinbase_max_pages: int = 100  # Safety limit, raises once exceeded
    coinbase_accounts_page_limit: int = 100  # v3 accounts per page

    # Balances
    coinbase_skip_zero_balances: bool = False

    # Logging (used by the live check entry point)
    log_level: str = "INFO"

    class Config:
        env_file = ".env"
        case_sensitive = False

    def credentials_config(self) -> Dict[str, Any]:
        """Build the connection config from whichever credentials are set"""
        if self.coinbase_api_key and self.coinbase_api_secret:
            return {"apiKey": self.coinbase_api_key, "apiSecret": self.coinbase_api_secret}

        if self.coinbase_cdp_key_name and self.coinbase_cdp_private_key:
            return {"name": self.coinbase_cdp_key_name, "privateKey": self.coinbase_cdp_private_key}

        if self.coinbase_cdp_key_file:
            key_name, private_key = load_cdp_credentials_from_file(self.coinbase_cdp_key_file)
            return {"name": key_name, "privateKey": private_key}

        if self.coinbase_access_token and self.coinbase_refresh_token:
            return {"accessToken": self.coinbase_access_token, "refreshToken": self.coinbase_refresh_token}

        return {}


settings = Settings()

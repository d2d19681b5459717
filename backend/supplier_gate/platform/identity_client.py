"""
Identity provider client for custom claim lookups.

Used by admin authorization to read the "admin" custom claim of a user.

SECURITY:
- The API key is read from the environment, never from requests
- Lookup failures never grant access; callers fall through to the
  next authorization mechanism
"""

import os
import logging
from dataclasses import dataclass
from typing import Any, Optional
from urllib.parse import quote

import httpx

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = 5.0


@dataclass
class IdentityProviderConfig:
    """Identity provider configuration from environment."""
    api_url: str
    api_key: str
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS

    @classmethod
    def from_env(cls) -> Optional["IdentityProviderConfig"]:
        """Load configuration from environment variables."""
        api_url = os.getenv("IDENTITY_API_URL")
        api_key = os.getenv("IDENTITY_API_KEY")

        if not api_url or not api_key:
            logger.debug(
                "Identity provider not configured",
                extra={
                    "has_api_url": bool(api_url),
                    "has_api_key": bool(api_key),
                }
            )
            return None

        return cls(
            api_url=api_url.rstrip("/"),
            api_key=api_key,
            timeout_seconds=float(os.getenv("IDENTITY_API_TIMEOUT_SECONDS", str(DEFAULT_TIMEOUT_SECONDS))),
        )


class IdentityProviderError(Exception):
    """Raised when an identity provider lookup fails."""
    pass


class IdentityProviderClient:
    """
    Client for identity provider user lookups.

    Usage:
        client = IdentityProviderClient(config)
        claims = client.get_custom_claims("user_123")
    """

    def __init__(self, config: IdentityProviderConfig, http_client: Optional[httpx.Client] = None):
        """
        Args:
            config: IdentityProviderConfig with credentials
            http_client: Optional preconfigured httpx client (tests use MockTransport)
        """
        self.config = config
        self._http_client = http_client or httpx.Client(timeout=config.timeout_seconds)

    def get_custom_claims(self, uid: str) -> dict[str, Any]:
        """
        Fetch the custom claims of a user.

        Returns:
            Claims dict, empty when the user has none

        Raises:
            IdentityProviderError: On transport errors, non-2xx responses
                or malformed payloads
        """
        url = f"{self.config.api_url}/users/{quote(uid, safe='')}"
        try:
            response = self._http_client.get(
                url,
                headers={"Authorization": f"Bearer {self.config.api_key}"},
            )
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPStatusError as e:
            logger.warning(
                "Identity provider lookup failed",
                extra={"status_code": e.response.status_code}
            )
            raise IdentityProviderError(f"User lookup failed: {e.response.status_code}")
        except (httpx.HTTPError, ValueError) as e:
            logger.warning("Identity provider error", extra={"error": str(e)})
            raise IdentityProviderError(f"User lookup error: {e}")

        claims = data.get("customClaims") if isinstance(data, dict) else None
        if claims is None:
            return {}
        if not isinstance(claims, dict):
            raise IdentityProviderError("customClaims is not an object")
        return claims

    def close(self) -> None:
        self._http_client.close()


def get_identity_client() -> Optional[IdentityProviderClient]:
    """Build a client from the environment, or None when not configured."""
    config = IdentityProviderConfig.from_env()
    if config is None:
        return None
    return IdentityProviderClient(config)

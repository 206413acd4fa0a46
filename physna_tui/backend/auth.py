"""
Per-tenant access token cache.

Tokens are obtained with the OAuth2 client-credentials grant and kept until
shortly before they expire. Switching tenant always invalidates the cached
token for that tenant first, so a fresh session never reuses stale credentials.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Callable, Dict, Optional

import httpx

from physna_tui.core.config import TenantCredentials
from physna_tui.core.errors import BackendServiceError

logger = logging.getLogger(__name__)

# Treat tokens as expired this many seconds early.
_EXPIRY_MARGIN_S = 30.0


@dataclass(frozen=True)
class AccessToken:
    value: str
    expires_at: float

    def is_expired(self, now: Optional[float] = None) -> bool:
        t = time.time() if now is None else now
        return t >= self.expires_at - _EXPIRY_MARGIN_S


class CredentialCache:
    """Access tokens keyed by tenant name."""

    def __init__(self, clock: Callable[[], float] = time.time):
        self.clock = clock
        self._tokens: Dict[str, AccessToken] = {}

    def get(self, tenant: str) -> Optional[AccessToken]:
        token = self._tokens.get(tenant)
        if token is None:
            return None
        if token.is_expired(self.clock()):
            del self._tokens[tenant]
            return None
        return token

    def store(self, tenant: str, token: AccessToken) -> None:
        self._tokens[tenant] = token

    def invalidate(self, tenant: str) -> None:
        if self._tokens.pop(tenant, None) is not None:
            logger.debug("Invalidated cached credential for tenant %s", tenant)

    def __contains__(self, tenant: object) -> bool:
        return isinstance(tenant, str) and self.get(tenant) is not None


def request_token(
    http: httpx.Client,
    url: str,
    credentials: TenantCredentials,
    *,
    clock: Callable[[], float] = time.time,
) -> AccessToken:
    """
    Exchange client credentials for an access token.

    Raises:
        BackendServiceError: On transport errors, non-2xx responses or a payload
            without ``access_token``
    """
    try:
        resp = http.post(
            url,
            data={"grant_type": "client_credentials", "scope": "tenant"},
            auth=(credentials.client_id, credentials.client_secret),
            headers={"Accept": "application/json"},
        )
        resp.raise_for_status()
        payload = resp.json()
    except httpx.HTTPStatusError as e:
        raise BackendServiceError(
            f"Authentication failed ({e.response.status_code})", status_code=e.response.status_code
        ) from e
    except httpx.HTTPError as e:
        raise BackendServiceError(f"Authentication request failed: {e}") from e
    except ValueError as e:
        raise BackendServiceError("Authentication response is not JSON") from e

    if not isinstance(payload, dict) or not payload.get("access_token"):
        raise BackendServiceError("Authentication response has no access_token")
    try:
        expires_in = float(payload.get("expires_in", 3600))
    except (TypeError, ValueError):
        expires_in = 3600.0
    return AccessToken(value=str(payload["access_token"]), expires_at=clock() + expires_in)


__all__ = ["AccessToken", "CredentialCache", "request_token"]

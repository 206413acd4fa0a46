"""
HTTP client for the Physna v2 API.

Implements `BackendService` over ``httpx``. Requests are synchronous; the
configured timeout bounds each one. Every failure (transport, HTTP status,
unexpected payload) surfaces as `BackendServiceError`.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Sequence, Set

import httpx

from physna_tui.backend.auth import CredentialCache, request_token
from physna_tui.core.config import AppConfig
from physna_tui.core.errors import BackendServiceError, ConfigError
from physna_tui.core.profiling import profile_method
from physna_tui.model import Folder, Model

logger = logging.getLogger(__name__)


class PhysnaClient:
    """Session-scoped client; call `establish_session` before anything else."""

    def __init__(
        self,
        config: AppConfig,
        *,
        credentials: Optional[CredentialCache] = None,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self.config = config
        self.credentials = credentials or CredentialCache()
        self._transport = transport
        self._auth_http = httpx.Client(timeout=config.timeout, transport=transport)
        self._http: Optional[httpx.Client] = None
        self._tenant: Optional[str] = None

    @property
    def tenant(self) -> Optional[str]:
        return self._tenant

    def close(self) -> None:
        if self._http is not None:
            self._http.close()
            self._http = None
        self._auth_http.close()

    def __enter__(self) -> "PhysnaClient":
        return self

    def __exit__(self, *exc: Any) -> None:
        self.close()

    # Session

    @profile_method("establish_session")
    def establish_session(self, tenant: str) -> None:
        self.credentials.invalidate(tenant)
        token = self._authorize(tenant)

        if self._http is not None:
            self._http.close()
        self._http = httpx.Client(
            base_url=self.config.tenant_url(tenant),
            headers={"Authorization": f"Bearer {token}", "Accept": "application/json"},
            timeout=self.config.timeout,
            transport=self._transport,
        )
        self._tenant = tenant
        logger.info("Connected to tenant %s", tenant)

    def _authorize(self, tenant: str) -> str:
        cached = self.credentials.get(tenant)
        if cached is not None:
            return cached.value
        try:
            creds = self.config.credentials_for(tenant)
        except ConfigError as e:
            raise BackendServiceError(str(e)) from e
        token = request_token(
            self._auth_http, self.config.identity_provider_url, creds, clock=self.credentials.clock
        )
        self.credentials.store(tenant, token)
        return token.value

    # Requests

    def _get(self, path: str, params: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        if self._http is None or self._tenant is None:
            raise BackendServiceError("No active session; select a tenant first")
        try:
            resp = self._http.get(path, params=params)
            if resp.status_code == 401:
                # Token revoked or expired server-side: sign in again once.
                logger.debug("Access token rejected for %s, re-authenticating", self._tenant)
                self.credentials.invalidate(self._tenant)
                self._http.headers["Authorization"] = f"Bearer {self._authorize(self._tenant)}"
                resp = self._http.get(path, params=params)
            resp.raise_for_status()
            data = resp.json()
        except httpx.HTTPStatusError as e:
            raise BackendServiceError(
                f"GET {path} failed with status {e.response.status_code}",
                status_code=e.response.status_code,
            ) from e
        except httpx.HTTPError as e:
            raise BackendServiceError(f"GET {path} failed: {e}") from e
        except ValueError as e:
            raise BackendServiceError(f"GET {path} returned invalid JSON") from e
        if not isinstance(data, dict):
            raise BackendServiceError(f"GET {path} returned an unexpected payload")
        return data

    def _get_paged(self, path: str, key: str, params: Optional[Dict[str, Any]] = None) -> List[Dict[str, Any]]:
        """Collect ``key`` from every page of a paged listing."""
        out: List[Dict[str, Any]] = []
        page = 1
        while True:
            data = self._get(path, {**(params or {}), "page": page, "perPage": self.config.page_size})
            items = data.get(key)
            if not isinstance(items, list):
                raise BackendServiceError(f"GET {path} response has no '{key}' list")
            out.extend(items)
            page_data = data.get("pageData") or {}
            if not isinstance(page_data, dict):
                raise BackendServiceError(f"GET {path} response has malformed 'pageData'")
            try:
                last_page = int(page_data.get("lastPage", page))
            except (TypeError, ValueError):
                last_page = page
            if not items or page >= last_page:
                return out
            page += 1

    @staticmethod
    def _records(items: List[Dict[str, Any]], factory, what: str) -> list:
        try:
            return [factory(item) for item in items]
        except (KeyError, TypeError, ValueError) as e:
            raise BackendServiceError(f"Malformed {what} record: {e}") from e

    # BackendService

    @profile_method("list_folders")
    def list_folders(self) -> Sequence[Folder]:
        return self._records(self._get_paged("/folders", "folders"), Folder.from_api, "folder")

    @profile_method("list_models")
    def list_models(self, folder_ids: Set[int]) -> Sequence[Model]:
        params = {"folderIds": sorted(folder_ids)}
        return self._records(self._get_paged("/models", "models", params), Model.from_api, "model")

    @profile_method("submit_search")
    def submit_search(self, query: str) -> Sequence[Model]:
        items = self._get_paged("/models", "models", {"search": query})
        return self._records(items, Model.from_api, "model")


__all__ = ["PhysnaClient"]

"""Backend service collaborators (contract, HTTP client, offline catalogue)."""

from physna_tui.backend.auth import AccessToken, CredentialCache
from physna_tui.backend.client import PhysnaClient
from physna_tui.backend.service import BackendService, StaticBackend

__all__ = [
    "AccessToken",
    "BackendService",
    "CredentialCache",
    "PhysnaClient",
    "StaticBackend",
]

"""
Configuration loading for physna-tui.

Settings live in a YAML file under the user's config directory (see
`default_config_path`). A missing file yields the defaults; a malformed one
raises `ConfigError` so the CLI can report it before the screen is taken over.
"""

from __future__ import annotations

import os
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from physna_tui.core.errors import ConfigError
from physna_tui.core.keys import Keymap

APP_NAME = "physna-tui"
CONFIG_ENV_VAR = "PHYSNA_TUI_CONFIG"

DEFAULT_BASE_URL = "https://{tenant}.physna.com/api/v2"
DEFAULT_IDENTITY_PROVIDER_URL = "https://physna.okta.com/oauth2/default/v1/token"
DEFAULT_TIMEOUT = 30.0
DEFAULT_PAGE_SIZE = 100


def _user_config_dir(app_name: str = APP_NAME) -> Path:
    """
    Return an OS-appropriate user config directory.

    - macOS: ~/Library/Application Support/<app_name>/
    - Linux/Unix: $XDG_CONFIG_HOME/<app_name>/ or ~/.config/<app_name>/
    - Windows: %APPDATA%\\<app_name>\\
    """
    home = Path.home()
    plat = sys.platform.lower()

    if plat == "darwin":
        return home / "Library" / "Application Support" / app_name

    if plat.startswith("win"):
        appdata = os.environ.get("APPDATA")
        if appdata:
            return Path(appdata) / app_name
        return home / app_name

    xdg = os.environ.get("XDG_CONFIG_HOME")
    base = Path(xdg) if xdg else (home / ".config")
    return base / app_name


def default_config_path() -> Path:
    """Config path, honouring the ``PHYSNA_TUI_CONFIG`` override."""
    override = os.environ.get(CONFIG_ENV_VAR)
    if override:
        return Path(override).expanduser()
    return _user_config_dir() / "config.yaml"


@dataclass
class TenantCredentials:
    client_id: str
    client_secret: str


@dataclass
class AppConfig:
    base_url: str = DEFAULT_BASE_URL
    identity_provider_url: str = DEFAULT_IDENTITY_PROVIDER_URL
    default_tenant: Optional[str] = None
    timeout: float = DEFAULT_TIMEOUT
    page_size: int = DEFAULT_PAGE_SIZE
    tenants: Dict[str, TenantCredentials] = field(default_factory=dict)
    keys: Keymap = field(default_factory=Keymap)
    source_path: Optional[Path] = None

    @property
    def tenant_names(self) -> List[str]:
        return list(self.tenants.keys())

    def tenant_url(self, tenant: str) -> str:
        return self.base_url.format(tenant=tenant).rstrip("/")

    def credentials_for(self, tenant: str) -> TenantCredentials:
        try:
            return self.tenants[tenant]
        except KeyError:
            raise ConfigError(f"No credentials configured for tenant '{tenant}'") from None

    def get_config_summary(self) -> Dict[str, Any]:
        return {
            "config_path": str(self.source_path) if self.source_path else None,
            "base_url": self.base_url,
            "identity_provider_url": self.identity_provider_url,
            "default_tenant": self.default_tenant,
            "timeout": self.timeout,
            "page_size": self.page_size,
            "tenants": self.tenant_names,
            "keys": self.keys.to_dict(),
        }


def _require_str(data: Dict[str, Any], key: str, default: Optional[str]) -> Optional[str]:
    value = data.get(key, default)
    if value is None:
        return None
    if not isinstance(value, str):
        raise ConfigError(f"'{key}' must be a string")
    return value


def _parse_tenants(raw: Any) -> Dict[str, TenantCredentials]:
    if raw is None:
        return {}
    if not isinstance(raw, dict):
        raise ConfigError("'tenants' must be a mapping of tenant name to credentials")
    tenants: Dict[str, TenantCredentials] = {}
    for name, creds in raw.items():
        creds = creds or {}
        if not isinstance(creds, dict):
            raise ConfigError(f"Credentials for tenant '{name}' must be a mapping")
        client_id = creds.get("client_id")
        client_secret = creds.get("client_secret")
        if not client_id or not client_secret:
            raise ConfigError(f"Tenant '{name}' needs both client_id and client_secret")
        tenants[str(name)] = TenantCredentials(client_id=str(client_id), client_secret=str(client_secret))
    return tenants


def config_from_dict(data: Dict[str, Any], *, source_path: Optional[Path] = None) -> AppConfig:
    """Validate a parsed YAML mapping and turn it into an `AppConfig`."""
    if not isinstance(data, dict):
        raise ConfigError("Configuration root must be a mapping")

    try:
        timeout = float(data.get("timeout", DEFAULT_TIMEOUT))
        page_size = int(data.get("page_size", DEFAULT_PAGE_SIZE))
    except (TypeError, ValueError) as e:
        raise ConfigError(f"Invalid numeric setting: {e}") from e
    if timeout <= 0:
        raise ConfigError("'timeout' must be positive")
    if page_size <= 0:
        raise ConfigError("'page_size' must be positive")

    try:
        keys = Keymap.from_mapping(data.get("keys"))
    except ValueError as e:
        raise ConfigError(str(e)) from e

    cfg = AppConfig(
        base_url=_require_str(data, "base_url", DEFAULT_BASE_URL) or DEFAULT_BASE_URL,
        identity_provider_url=_require_str(data, "identity_provider_url", DEFAULT_IDENTITY_PROVIDER_URL)
        or DEFAULT_IDENTITY_PROVIDER_URL,
        default_tenant=_require_str(data, "default_tenant", None),
        timeout=timeout,
        page_size=page_size,
        tenants=_parse_tenants(data.get("tenants")),
        keys=keys,
        source_path=source_path,
    )
    if "{tenant}" not in cfg.base_url:
        raise ConfigError("'base_url' must contain a {tenant} placeholder")
    try:
        cfg.tenant_url("tenant")
    except (AttributeError, KeyError, IndexError, ValueError) as e:
        raise ConfigError(f"'base_url' may only use the {{tenant}} placeholder: {e}") from e
    if cfg.default_tenant and cfg.default_tenant not in cfg.tenants:
        raise ConfigError(f"default_tenant '{cfg.default_tenant}' is not listed under 'tenants'")
    return cfg


def load_config(config_file: Optional[Path] = None) -> AppConfig:
    """
    Load configuration from ``config_file`` or the default location.

    Returns:
        The parsed configuration, or the defaults when no file exists

    Raises:
        ConfigError: If the file cannot be read or fails validation
    """
    path = Path(config_file).expanduser() if config_file is not None else default_config_path()
    if not path.exists():
        if config_file is not None:
            raise ConfigError(f"Config file not found: {path}")
        return AppConfig()
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except (yaml.YAMLError, OSError) as e:
        raise ConfigError(f"Could not load config {path}: {e}") from e
    return config_from_dict(data or {}, source_path=path)


def export_template(output_path: Path) -> None:
    """Write a template with every supported setting."""
    template = {
        "base_url": DEFAULT_BASE_URL,
        "identity_provider_url": DEFAULT_IDENTITY_PROVIDER_URL,
        "default_tenant": "mytenant",
        "timeout": DEFAULT_TIMEOUT,
        "page_size": DEFAULT_PAGE_SIZE,
        "tenants": {
            "mytenant": {"client_id": "CLIENT_ID", "client_secret": "CLIENT_SECRET"},
        },
        "keys": Keymap().to_dict(),
    }
    output_path.parent.mkdir(parents=True, exist_ok=True)
    with open(output_path, "w", encoding="utf-8") as f:
        yaml.dump(template, f, default_flow_style=False, sort_keys=False, allow_unicode=True)


__all__ = [
    "AppConfig",
    "TenantCredentials",
    "config_from_dict",
    "default_config_path",
    "export_template",
    "load_config",
]

from pathlib import Path

import pytest
import yaml

from physna_tui.core.config import (
    DEFAULT_BASE_URL,
    AppConfig,
    config_from_dict,
    default_config_path,
    export_template,
    load_config,
)
from physna_tui.core.errors import ConfigError


def test_default_path_honours_env_override(tmp_path: Path, monkeypatch):
    target = tmp_path / "custom.yaml"
    monkeypatch.setenv("PHYSNA_TUI_CONFIG", str(target))
    assert default_config_path() == target


def test_default_path_uses_xdg(tmp_path: Path, monkeypatch):
    monkeypatch.delenv("PHYSNA_TUI_CONFIG", raising=False)
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path))
    monkeypatch.setattr("sys.platform", "linux")
    assert default_config_path() == tmp_path / "physna-tui" / "config.yaml"


def test_missing_default_file_returns_defaults(tmp_path: Path, monkeypatch):
    monkeypatch.setenv("PHYSNA_TUI_CONFIG", str(tmp_path / "nope.yaml"))
    cfg = load_config()
    assert cfg == AppConfig()
    assert cfg.base_url == DEFAULT_BASE_URL
    assert cfg.tenant_names == []


def test_missing_explicit_file_raises(tmp_path: Path):
    with pytest.raises(ConfigError, match="not found"):
        load_config(tmp_path / "nope.yaml")


def test_load_empty_and_null_yaml(tmp_path: Path):
    for body in ("", "null\n"):
        p = tmp_path / "config.yaml"
        p.write_text(body, encoding="utf-8")
        cfg = load_config(p)
        assert cfg.tenants == {}
        assert cfg.source_path == p


def test_invalid_yaml_raises(tmp_path: Path):
    p = tmp_path / "config.yaml"
    p.write_text(":\n- [\n", encoding="utf-8")
    with pytest.raises(ConfigError, match="Could not load config"):
        load_config(p)


def test_full_config(tmp_path: Path):
    p = tmp_path / "config.yaml"
    p.write_text(
        yaml.safe_dump(
            {
                "base_url": "http://{tenant}.example.test/api",
                "default_tenant": "acme",
                "timeout": 5,
                "page_size": 20,
                "tenants": {
                    "acme": {"client_id": "id-a", "client_secret": "s-a"},
                    "globex": {"client_id": "id-g", "client_secret": "s-g"},
                },
                "keys": {"quit": "x", "help_chord": "f2"},
            }
        ),
        encoding="utf-8",
    )
    cfg = load_config(p)
    assert cfg.tenant_names == ["acme", "globex"]
    assert cfg.tenant_url("acme") == "http://acme.example.test/api"
    assert cfg.credentials_for("globex").client_secret == "s-g"
    assert cfg.timeout == 5.0
    assert cfg.page_size == 20
    assert cfg.keys.quit == "x"
    assert cfg.keys.help_chord == "f2"
    assert cfg.keys.folder == "f"

    summary = cfg.get_config_summary()
    assert summary["tenants"] == ["acme", "globex"]
    assert summary["config_path"] == str(p)
    assert "s-a" not in str(summary)


def test_credentials_for_unknown_tenant():
    with pytest.raises(ConfigError, match="No credentials"):
        AppConfig().credentials_for("acme")


@pytest.mark.parametrize(
    "data,message",
    [
        (["not", "a", "mapping"], "must be a mapping"),
        ({"timeout": "soon"}, "Invalid numeric"),
        ({"timeout": 0}, "positive"),
        ({"page_size": -1}, "positive"),
        ({"base_url": 42}, "must be a string"),
        ({"base_url": "https://physna.com/api"}, "placeholder"),
        ({"base_url": "https://{tenant}.physna.com/{version}"}, "only use the \\{tenant\\} placeholder"),
        ({"base_url": "https://{tenant}.physna.com/{0}"}, "only use the \\{tenant\\} placeholder"),
        ({"tenants": ["acme"]}, "mapping of tenant"),
        ({"tenants": {"acme": {"client_id": "x"}}}, "client_secret"),
        ({"default_tenant": "acme"}, "not listed"),
        ({"keys": {"jump": "j"}}, "Unknown key action"),
        ({"keys": {"quit": ""}}, "non-empty"),
    ],
)
def test_validation_errors(data, message):
    with pytest.raises(ConfigError, match=message):
        config_from_dict(data)


def test_export_template_round_trips(tmp_path: Path):
    out = tmp_path / "nested" / "config.yaml"
    export_template(out)
    cfg = load_config(out)
    assert cfg.default_tenant == "mytenant"
    assert cfg.credentials_for("mytenant").client_id == "CLIENT_ID"

from pathlib import Path
import textwrap

import pytest
from pydantic import ValidationError

from fusebroker.config.loader import config_from_env, load_config
from fusebroker.config.models import BrokerConfig, DeployParameters

def test_load_config_minimal_ok(tmp_path: Path):
    cfg_text = textwrap.dedent("""
        route_suffix: apps.example.com
        images:
          registry: quay.io/acme
          tag: "7.9"
    """)
    f = tmp_path / "broker.yaml"
    f.write_text(cfg_text)
    cfg = load_config(f)
    assert cfg.route_suffix == "apps.example.com"
    assert cfg.images.tag == "7.9"
    assert cfg.service_id == "fuse-service-id"
    assert cfg.grace_window_seconds == 120
    assert cfg.watched_workloads == ["syndesis-oauthproxy", "syndesis-server", "syndesis-ui"]

def test_load_config_expands_env(tmp_path: Path, monkeypatch):
    monkeypatch.setenv("CLUSTER_DOMAIN", "apps.env.example.com")
    f = tmp_path / "broker.yaml"
    f.write_text("route_suffix: ${CLUSTER_DOMAIN}\n")
    assert load_config(f).route_suffix == "apps.env.example.com"

def test_empty_file_gives_defaults(tmp_path: Path):
    f = tmp_path / "broker.yaml"
    f.write_text("")
    assert load_config(f) == BrokerConfig()

def test_config_from_env_reads_route_suffix():
    assert config_from_env({"ROUTE_SUFFIX": "apps.example.com"}).route_suffix == "apps.example.com"
    assert config_from_env({"ROUTE_SUFFIX": ""}).route_suffix is None
    assert config_from_env({}).route_suffix is None

def test_config_from_env_file_then_suffix_override(tmp_path: Path):
    f = tmp_path / "broker.yaml"
    f.write_text("route_suffix: from-file.example.com\nservice_id: other-id\n")
    cfg = config_from_env({"FUSE_BROKER_CONFIG": str(f), "ROUTE_SUFFIX": "from-env.example.com"})
    assert cfg.service_id == "other-id"
    assert cfg.route_suffix == "from-env.example.com"

def test_config_from_env_missing_file_falls_back(tmp_path: Path):
    cfg = config_from_env({"FUSE_BROKER_CONFIG": str(tmp_path / "nope.yaml")})
    assert cfg == BrokerConfig()

def test_blank_route_suffix_is_none():
    assert BrokerConfig(route_suffix="  ").route_suffix is None

@pytest.mark.parametrize("raw, expected", [
    (None, 0),
    (7, 7),
    (7.0, 7),
    ("12", 12),
    (" 5.0 ", 5),
    ("1e2", 100),
])
def test_limit_accepted(raw, expected):
    assert DeployParameters.model_validate({"limit": raw}).limit == expected

def test_limit_absent_is_zero():
    assert DeployParameters.model_validate({"other": True}).limit == 0

@pytest.mark.parametrize("raw", ["lots", 2.5, "2.5", "nan", "-3", True, -1, [1]])
def test_limit_rejected(raw):
    with pytest.raises(ValidationError):
        DeployParameters.model_validate({"limit": raw})

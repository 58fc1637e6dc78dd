# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/fusebroker/config/loader.py

import logging
import os
from pathlib import Path
from typing import Mapping, Optional

import yaml

from .models import BrokerConfig

log = logging.getLogger("fusebroker")


def _load_yaml(path: Path) -> dict:
    """Load a YAML file, expanding ${ENV_VAR} references."""
    raw = path.read_text()
    expanded = os.path.expandvars(raw)
    return yaml.safe_load(expanded) or {}


def load_config(path: str | Path) -> BrokerConfig:
    """
    Load and validate a broker YAML config.

    ``${ENV_VAR}`` placeholders inside the file are resolved at load time
    with ``os.path.expandvars``.
    """
    path = Path(path)
    data = _load_yaml(path)
    log.debug("Loaded broker config from %s", path)
    return BrokerConfig.model_validate(data)


def config_from_env(environ: Optional[Mapping[str, str]] = None) -> BrokerConfig:
    """
    Build the broker config from the process environment.

    1. ``FUSE_BROKER_CONFIG`` points at a YAML config file (optional)
    2. ``ROUTE_SUFFIX`` overrides the route suffix when present

    This is the only place the environment is consulted; the deployer is
    handed the resulting object.
    """
    env = os.environ if environ is None else environ

    cfg_path = env.get("FUSE_BROKER_CONFIG")
    if cfg_path:
        p = Path(cfg_path)
        if p.is_file():
            cfg = load_config(p)
        else:
            log.warning("FUSE_BROKER_CONFIG=%s does not exist, using defaults", cfg_path)
            cfg = BrokerConfig()
    else:
        cfg = BrokerConfig()

    if "ROUTE_SUFFIX" in env:
        cfg = cfg.model_copy(update={"route_suffix": env["ROUTE_SUFFIX"] or None})

    return cfg

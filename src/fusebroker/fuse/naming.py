# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/fusebroker/fuse/naming.py
from typing import Optional

NAMESPACE_PREFIX = "fuse-"


def namespace_for(instance_id: str, prefix: str = NAMESPACE_PREFIX) -> str:
    """The namespace is the only link between an instance and its resources."""
    return prefix + instance_id


def route_hostname(namespace: str, route_suffix: Optional[str] = None) -> str:
    if route_suffix:
        return f"{namespace}.{route_suffix}"
    return namespace


def dashboard_url(hostname: str) -> str:
    return "https://" + hostname

# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/fusebroker/config/models.py

from pathlib import Path
from typing import Any, List, Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator


DEFAULT_WATCHED_WORKLOADS = [
    "syndesis-oauthproxy",
    "syndesis-server",
    "syndesis-ui",
]


class ImageConfig(BaseModel):
    """Where the Fuse Online images are pulled from."""

    registry: str = "docker.io/syndesis"
    tag: str = "1.4"
    operator_image: str = "syndesis-operator"


class LoggingConfig(BaseModel):
    dir: Optional[Path] = None                  # None -> ~/.fusebroker/logs
    keep_runs: Optional[int] = Field(default=None, ge=1)


class BrokerConfig(BaseModel):
    service_id: str = "fuse-service-id"
    namespace_prefix: str = "fuse-"
    route_suffix: Optional[str] = None          # appended to the namespace to build the route host
    grace_window_seconds: int = Field(default=120, ge=0)
    watched_workloads: List[str] = Field(default_factory=lambda: list(DEFAULT_WATCHED_WORKLOADS))
    kube_context: Optional[str] = None
    images: ImageConfig = ImageConfig()
    logging: LoggingConfig = LoggingConfig()

    @field_validator("route_suffix")
    @classmethod
    def _blank_suffix_is_none(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and not v.strip():
            return None
        return v


class DeployParameters(BaseModel):
    """
    Provisioning parameters accepted from the broker host.

    ``limit`` caps the number of integrations the Syndesis instance will run.
    Missing or null means 0; anything that is not a whole number is rejected.
    """

    model_config = ConfigDict(extra="ignore")

    limit: int = Field(default=0, ge=0)

    @field_validator("limit", mode="before")
    @classmethod
    def _coerce_limit(cls, v: Any) -> Any:
        if v is None:
            return 0
        if isinstance(v, bool):
            raise ValueError("limit must be a number, not a boolean")
        if isinstance(v, str):
            try:
                return int(v.strip())
            except ValueError:
                pass
            try:
                v = float(v)
            except ValueError:
                raise ValueError(f"limit must be numeric, got {v!r}") from None
        if isinstance(v, float):
            if not v.is_integer():
                raise ValueError(f"limit must be a whole number, got {v}")
            return int(v)
        return v

# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/fusebroker/observers/events.py

from __future__ import annotations
from dataclasses import dataclass, asdict
from typing import Dict, Any, Optional
from datetime import datetime, timezone
import uuid


# ---------------------------------------------------------------------
# Base context and helper
# ---------------------------------------------------------------------
@dataclass(frozen=True)
class BaseEvent:
    ts: str           # ISO timestamp
    run_id: str       # correlates all events of one broker call
    env: str          # deployer id
    context: Optional[str]  # instance namespace

    def dict(self) -> Dict[str, Any]:
        return asdict(self)


def new_ctx(env: str, context: Optional[str]) -> Dict[str, Any]:
    return {
        "ts": datetime.now(timezone.utc).isoformat(timespec="seconds").replace("+00:00", "Z"),
        "run_id": str(uuid.uuid4()),
        "env": env,
        "context": context,
    }


# ---------------------------------------------------------------------
# Provisioning
# ---------------------------------------------------------------------
@dataclass(frozen=True)
class ProvisionStarted(BaseEvent):
    instance_id: str
    requested_by: str

@dataclass(frozen=True)
class StepSucceeded(BaseEvent):
    step: str

@dataclass(frozen=True)
class StepFailed(BaseEvent):
    step: str
    error: str

@dataclass(frozen=True)
class ProvisionAccepted(BaseEvent):
    instance_id: str
    dashboard_url: str


# ---------------------------------------------------------------------
# Removal
# ---------------------------------------------------------------------
@dataclass(frozen=True)
class RemovalRequested(BaseEvent):
    instance_id: str
    already_gone: bool

@dataclass(frozen=True)
class RemovalFailed(BaseEvent):
    instance_id: str
    error: str


# ---------------------------------------------------------------------
# Last operation
# ---------------------------------------------------------------------
@dataclass(frozen=True)
class OperationPolled(BaseEvent):
    instance_id: str
    operation: str
    state: str
    description: str

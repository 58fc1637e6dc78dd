# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/fusebroker/broker/models.py

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional


class OperationState(str, Enum):
    SUCCEEDED = "succeeded"
    IN_PROGRESS = "in progress"
    FAILED = "failed"

    @property
    def terminal(self) -> bool:
        return self is not OperationState.IN_PROGRESS


@dataclass
class LastOperationResponse:
    state: OperationState
    description: str = ""
    cause: Optional[BaseException] = None     # error observed while computing the state


@dataclass
class CreateServiceInstanceResponse:
    code: int
    dashboard_url: Optional[str] = None
    operation: Optional[str] = None


@dataclass(frozen=True)
class ContextProfile:
    platform: str = "kubernetes"
    namespace: str = ""


@dataclass(frozen=True)
class UserInfo:
    username: str
    uid: str = ""
    groups: List[str] = field(default_factory=list)


@dataclass
class ServicePlan:
    id: str
    name: str
    description: str
    free: bool = True
    parameters_schema: Dict[str, Any] = field(default_factory=dict)


@dataclass
class Service:
    id: str
    name: str
    description: str
    bindable: bool = False
    plan_updatable: bool = False
    tags: List[str] = field(default_factory=list)
    metadata: Dict[str, str] = field(default_factory=dict)
    plans: List[ServicePlan] = field(default_factory=list)

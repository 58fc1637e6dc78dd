# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

from __future__ import annotations
from typing import Any, Dict, List, Protocol, runtime_checkable

from .models import (
    ContextProfile,
    CreateServiceInstanceResponse,
    LastOperationResponse,
    Service,
    UserInfo,
)


@runtime_checkable
class Deployer(Protocol):
    """What the broker host expects from a managed-service deployer."""

    def is_for_service(self, service_id: str) -> bool: ...

    def get_catalog_entries(self) -> List[Service]: ...

    def get_id(self) -> str: ...

    def deploy(
        self,
        instance_id: str,
        broker_namespace: str,
        context_profile: ContextProfile,
        parameters: Dict[str, Any],
        user_info: UserInfo,
        cluster: Any,
    ) -> CreateServiceInstanceResponse: ...

    def remove_deploy(self, instance_id: str, namespace: str, cluster: Any) -> None: ...

    def last_operation(self, instance_id: str, cluster: Any, operation: str) -> LastOperationResponse: ...

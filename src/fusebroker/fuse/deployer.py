# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/fusebroker/fuse/deployer.py
from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional, TypeVar

from pydantic import ValidationError

from fusebroker.broker.errors import (
    InvalidParametersError,
    ProvisioningError,
    RemovalError,
    wrap,
)
from fusebroker.broker.models import (
    ContextProfile,
    CreateServiceInstanceResponse,
    LastOperationResponse,
    OperationState,
    Service,
    UserInfo,
)
from fusebroker.config.models import BrokerConfig, DeployParameters
from fusebroker.k8s.client import ClusterClient
from fusebroker.k8s.errors import is_already_exists, is_not_found
from fusebroker.observers.dispatcher import EventBus
from fusebroker.observers.events import (
    new_ctx,
    OperationPolled,
    ProvisionAccepted,
    ProvisionStarted,
    RemovalFailed,
    RemovalRequested,
    StepFailed,
    StepSucceeded,
)

from . import manifests
from .catalog import catalog_services
from .naming import dashboard_url, namespace_for, route_hostname

log = logging.getLogger("fusebroker")

DEPLOY = "deploy"
REMOVE = "remove"

T = TypeVar("T")


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class FuseDeployer:
    """
    Provisions Fuse Online into a namespace per service instance.

    Holds no per-instance state: the namespace derived from the instance id
    is the record of whether an instance exists, and every status check is
    recomputed from the cluster.
    """

    def __init__(
        self,
        id: str,
        config: Optional[BrokerConfig] = None,
        *,
        observers: Optional[List] = None,
        clock: Callable[[], datetime] = _utcnow,
    ):
        self.id = id
        self.config = config or BrokerConfig()
        self.bus = EventBus(observers or [])
        self._now = clock

    # ------------------------------------------------------------------
    # Catalog
    # ------------------------------------------------------------------
    def is_for_service(self, service_id: str) -> bool:
        return service_id == self.config.service_id

    def get_catalog_entries(self) -> List[Service]:
        log.info("Getting fuse catalog entries")
        return catalog_services(self.config.service_id)

    def get_id(self) -> str:
        return self.id

    def namespace(self, instance_id: str) -> str:
        return namespace_for(instance_id, self.config.namespace_prefix)

    # ------------------------------------------------------------------
    # Provision
    # ------------------------------------------------------------------
    def deploy(
        self,
        instance_id: str,
        broker_namespace: str,
        context_profile: ContextProfile,
        parameters: Optional[Dict[str, Any]],
        user_info: UserInfo,
        cluster: ClusterClient,
    ) -> CreateServiceInstanceResponse:
        """
        Create every resource of the instance, in order, and return at once.

        The first failing step raises ProvisioningError; nothing after it is
        attempted and nothing before it is removed. Readiness is reported
        later through last_operation().
        """
        log.info("Deploying fuse from deployer, id: %s", instance_id)
        namespace = self.namespace(instance_id)
        run_ctx = new_ctx(env=self.id, context=namespace)

        try:
            params = DeployParameters.model_validate(parameters or {})
        except ValidationError as e:
            log.error("rejecting provisioning parameters for %s: %s", instance_id, e)
            raise InvalidParametersError(
                f"invalid provisioning parameters: {e}", step="parameters"
            ) from e

        self.bus.emit(ProvisionStarted(instance_id=instance_id, requested_by=user_info.username, **run_ctx))
        log.debug("broker namespace=%s user namespace=%s", broker_namespace, context_profile.namespace)

        self._step(
            run_ctx, "namespace", "failed to create namespace for fuse service",
            lambda: cluster.create_namespace(manifests.namespace_obj(namespace)),
        )
        self._step(
            run_ctx, "service account", "failed to create service account for fuse service",
            lambda: cluster.create_service_account(namespace, manifests.service_account_obj()),
        )
        self._step(
            run_ctx, "role", "failed to create role for fuse service",
            lambda: cluster.create_role(namespace, manifests.role_obj()),
        )
        self._step(
            run_ctx, "role bindings", None,
            lambda: self._create_role_bindings(namespace, user_info, cluster),
        )
        self._step(
            run_ctx, "image streams", None,
            lambda: self._create_image_streams(namespace, cluster),
        )
        self._step(
            run_ctx, "deployment config", "failed to create deployment config for fuse service",
            lambda: cluster.create_deployment_config(namespace, manifests.deployment_config_obj(self.config.images)),
        )
        url = self._step(
            run_ctx, "custom resource", None,
            lambda: self._create_custom_resource(
                namespace, context_profile.namespace, user_info.username, params, cluster
            ),
        )

        self.bus.emit(ProvisionAccepted(instance_id=instance_id, dashboard_url=url, **run_ctx))
        return CreateServiceInstanceResponse(code=202, dashboard_url=url)

    def _step(self, run_ctx: Dict, step: str, message: Optional[str], fn: Callable[[], T]) -> T:
        try:
            result = fn()
        except Exception as exc:
            text = f"{message}: {exc}" if message else str(exc)
            log.error("failed to create fuse %s: %s", step, exc)
            self.bus.emit(StepFailed(step=step, error=text, **run_ctx))
            raise ProvisioningError(text, step=step) from exc
        self.bus.emit(StepSucceeded(step=step, **run_ctx))
        return result

    def _create_role_bindings(self, namespace: str, user_info: UserInfo, cluster: ClusterClient) -> None:
        # Only the system bindings tolerate an existing object.
        for binding in manifests.system_role_bindings(namespace):
            name = binding["metadata"]["name"]
            try:
                cluster.create_role_binding(namespace, binding)
            except Exception as exc:
                if not is_already_exists(exc):
                    raise wrap(exc, f"failed to create rolebinding for {name}") from exc
                log.debug("rolebinding %s already exists in %s", name, namespace)

        try:
            cluster.create_role_binding(namespace, manifests.install_role_binding_obj())
        except Exception as exc:
            raise wrap(exc, "failed to create install role binding for fuse service") from exc

        try:
            cluster.create_authorization_role_binding(namespace, manifests.view_role_binding_obj())
        except Exception as exc:
            raise wrap(exc, "failed to create view role binding for fuse service") from exc

        try:
            cluster.create_authorization_role_binding(namespace, manifests.edit_role_binding_obj())
        except Exception as exc:
            raise wrap(exc, "failed to create edit role binding for fuse service") from exc

        try:
            cluster.create_authorization_role_binding(
                namespace, manifests.user_view_role_binding_obj(namespace, user_info.username)
            )
        except Exception as exc:
            raise wrap(exc, "failed to create user view role binding for fuse service") from exc

    def _create_image_streams(self, namespace: str, cluster: ClusterClient) -> None:
        for stream in manifests.image_stream_objs(self.config.images):
            name = stream["metadata"]["name"]
            try:
                cluster.create_image_stream(namespace, stream)
            except Exception as exc:
                raise wrap(exc, f"failed to create {name} image stream for fuse service") from exc

    def _create_custom_resource(
        self,
        namespace: str,
        user_namespace: str,
        username: str,
        params: DeployParameters,
        cluster: ClusterClient,
    ) -> str:
        hostname = route_hostname(namespace, self.config.route_suffix)
        obj = manifests.syndesis_obj(
            namespace=namespace,
            user_namespace=user_namespace,
            integrations_limit=params.limit,
            created_by=username,
            route_hostname=hostname,
        )
        try:
            cluster.create_custom_resource(namespace, manifests.SYNDESIS_PLURAL, obj)
        except Exception as exc:
            raise wrap(exc, "failed to create a fuse custom resource") from exc
        return dashboard_url(hostname)

    # ------------------------------------------------------------------
    # Remove
    # ------------------------------------------------------------------
    def remove_deploy(self, instance_id: str, namespace: str, cluster: ClusterClient) -> None:
        """Delete the instance namespace; an already-deleted one is fine."""
        ns = self.namespace(instance_id)
        run_ctx = new_ctx(env=self.id, context=ns)
        try:
            cluster.delete_namespace(ns)
        except Exception as exc:
            if is_not_found(exc):
                log.info("fuse namespace %s already deleted", ns)
                self.bus.emit(RemovalRequested(instance_id=instance_id, already_gone=True, **run_ctx))
                return
            log.error("failed to delete %s namespace: %s", ns, exc)
            self.bus.emit(RemovalFailed(instance_id=instance_id, error=str(exc), **run_ctx))
            raise RemovalError(f"failed to delete namespace {ns}: {exc}") from exc

        self.bus.emit(RemovalRequested(instance_id=instance_id, already_gone=False, **run_ctx))

    # ------------------------------------------------------------------
    # Last operation
    # ------------------------------------------------------------------
    def last_operation(self, instance_id: str, cluster: ClusterClient, operation: str) -> LastOperationResponse:
        """
        Compute the state of the last operation from live cluster state.

        Errors met while looking are returned as ``cause`` on the response,
        never raised: failing to observe is not the same as the operation
        failing.
        """
        log.info("Getting last operation for %s", instance_id)
        namespace = self.namespace(instance_id)

        if operation == DEPLOY:
            resp = self._last_deploy(namespace, cluster)
        elif operation == REMOVE:
            resp = self._last_remove(namespace, cluster)
        else:
            resp = LastOperationResponse(
                state=OperationState.FAILED,
                description=f"unknown operation: {operation}",
            )

        self.bus.emit(
            OperationPolled(
                instance_id=instance_id,
                operation=operation,
                state=resp.state.value,
                description=resp.description,
                **new_ctx(env=self.id, context=namespace),
            )
        )
        return resp

    def _last_deploy(self, namespace: str, cluster: ClusterClient) -> LastOperationResponse:
        log.info("[LAST OPERATION:DEPLOY] Doing last operation for fuse: %s", namespace)

        try:
            ns_obj = cluster.get_namespace(namespace)
        except Exception as exc:
            cause = wrap(exc, f"failed to get namespace {namespace} for last operation check")
            if is_not_found(exc):
                # The namespace is the instance; without it the deploy has failed.
                log.info("[LAST OPERATION:DEPLOY] namespace %s is gone, returning failed", namespace)
                return LastOperationResponse(
                    state=OperationState.FAILED,
                    description=f"Failed to get namespace {namespace} for last operation check",
                    cause=cause,
                )
            log.info("[LAST OPERATION:DEPLOY] could not read namespace %s, returning in progress", namespace)
            return LastOperationResponse(
                state=OperationState.IN_PROGRESS,
                description=f"Unable to get namespace {namespace} for last operation check",
                cause=cause,
            )

        young = self._within_grace_window(ns_obj)

        for name in self.config.watched_workloads:
            status = self._workload_status(namespace, name, cluster)
            if status.state is OperationState.SUCCEEDED:
                continue
            if young:
                log.info(
                    "[LAST OPERATION:DEPLOY] %s namespace is younger than %s secs, returning in progress",
                    namespace, self.config.grace_window_seconds,
                )
                return LastOperationResponse(state=OperationState.IN_PROGRESS, description=status.description)
            log.info(
                "[LAST OPERATION:DEPLOY] %s namespace is older than %s secs, returning actual state",
                namespace, self.config.grace_window_seconds,
            )
            return status

        log.info("[LAST OPERATION:DEPLOY] fuse %s deployed successfully", namespace)
        return LastOperationResponse(state=OperationState.SUCCEEDED, description="fuse deployed successfully")

    def _within_grace_window(self, ns_obj: Any) -> bool:
        created = ns_obj.metadata.creation_timestamp if ns_obj.metadata else None
        if created is None:
            return False
        if created.tzinfo is None:
            created = created.replace(tzinfo=timezone.utc)
        age = (self._now() - created).total_seconds()
        return age <= self.config.grace_window_seconds

    def _workload_status(self, namespace: str, name: str, cluster: ClusterClient) -> LastOperationResponse:
        try:
            dc = cluster.get_deployment_config(namespace, name)
        except Exception as exc:
            log.error("Failed to get status of %s: %s", name, exc)
            return LastOperationResponse(
                state=OperationState.FAILED,
                description=f"Failed to get status of {name}",
                cause=wrap(exc, f"failed to get status of {name}"),
            )

        conditions = (dc.get("status") or {}).get("conditions") or []
        ready = [c for c in conditions if c.get("type") == "Ready"]
        if ready and ready[-1].get("status") == "False":
            return LastOperationResponse(
                state=OperationState.IN_PROGRESS,
                description=ready[-1].get("message") or "",
            )
        return LastOperationResponse(state=OperationState.SUCCEEDED)

    def _last_remove(self, namespace: str, cluster: ClusterClient) -> LastOperationResponse:
        try:
            cluster.get_namespace(namespace)
        except Exception as exc:
            if is_not_found(exc):
                return LastOperationResponse(
                    state=OperationState.SUCCEEDED,
                    description="fuse removed successfully",
                )
            # a read error during teardown is not a terminal failure
            return LastOperationResponse(
                state=OperationState.IN_PROGRESS,
                description="failed to find namespace",
                cause=wrap(exc, "could not find namespace"),
            )
        return LastOperationResponse(
            state=OperationState.IN_PROGRESS,
            description="fuse removal in progress",
        )

# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/fusebroker/k8s/client.py
from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from kubernetes import client, config

log = logging.getLogger("fusebroker")

# (group, version, plural) for the OpenShift / operator kinds we drive
# through the custom objects API.
IMAGE_STREAMS = ("image.openshift.io", "v1", "imagestreams")
DEPLOYMENT_CONFIGS = ("apps.openshift.io", "v1", "deploymentconfigs")
AUTHORIZATION_ROLE_BINDINGS = ("authorization.openshift.io", "v1", "rolebindings")


def split_api_version(api_version: str) -> tuple[str, str]:
    """'syndesis.io/v1alpha1' -> ('syndesis.io', 'v1alpha1')."""
    if "/" not in api_version:
        return "", api_version
    group, version = api_version.split("/", 1)
    return group, version


class ClusterClient:
    """
    Thin facade over the kubernetes client covering the calls a deployer
    makes against the control plane.

    Every method is a single blocking request; ApiException propagates to
    the caller unchanged.
    """

    def __init__(self, api_client: Optional[client.ApiClient] = None):
        self.api_client = api_client or client.ApiClient()
        self.core = client.CoreV1Api(self.api_client)
        self.rbac = client.RbacAuthorizationV1Api(self.api_client)
        self.custom = client.CustomObjectsApi(self.api_client)

    @classmethod
    def from_kubeconfig(cls, context: Optional[str] = None) -> "ClusterClient":
        if context:
            config.load_kube_config(context=context)
        else:
            config.load_kube_config()
        return cls()

    @classmethod
    def in_cluster(cls) -> "ClusterClient":
        config.load_incluster_config()
        return cls()

    # ------------------------------------------------------------------
    # Core
    # ------------------------------------------------------------------
    def create_namespace(self, body: Dict[str, Any]) -> client.V1Namespace:
        return self.core.create_namespace(body=body)

    def get_namespace(self, name: str) -> client.V1Namespace:
        return self.core.read_namespace(name=name)

    def delete_namespace(self, name: str) -> None:
        self.core.delete_namespace(name=name, body=client.V1DeleteOptions())

    def create_service_account(self, namespace: str, body: Dict[str, Any]) -> Any:
        return self.core.create_namespaced_service_account(namespace=namespace, body=body)

    # ------------------------------------------------------------------
    # RBAC
    # ------------------------------------------------------------------
    def create_role(self, namespace: str, body: Dict[str, Any]) -> Any:
        return self.rbac.create_namespaced_role(namespace=namespace, body=body)

    def create_role_binding(self, namespace: str, body: Dict[str, Any]) -> Any:
        return self.rbac.create_namespaced_role_binding(namespace=namespace, body=body)

    def create_authorization_role_binding(self, namespace: str, body: Dict[str, Any]) -> Dict[str, Any]:
        """Role binding through the OpenShift authorization API."""
        group, version, plural = AUTHORIZATION_ROLE_BINDINGS
        return self.custom.create_namespaced_custom_object(group, version, namespace, plural, body)

    # ------------------------------------------------------------------
    # OpenShift workloads
    # ------------------------------------------------------------------
    def create_image_stream(self, namespace: str, body: Dict[str, Any]) -> Dict[str, Any]:
        group, version, plural = IMAGE_STREAMS
        return self.custom.create_namespaced_custom_object(group, version, namespace, plural, body)

    def create_deployment_config(self, namespace: str, body: Dict[str, Any]) -> Dict[str, Any]:
        group, version, plural = DEPLOYMENT_CONFIGS
        return self.custom.create_namespaced_custom_object(group, version, namespace, plural, body)

    def get_deployment_config(self, namespace: str, name: str) -> Dict[str, Any]:
        group, version, plural = DEPLOYMENT_CONFIGS
        return self.custom.get_namespaced_custom_object(group, version, namespace, plural, name)

    # ------------------------------------------------------------------
    # Arbitrary custom resources
    # ------------------------------------------------------------------
    def create_custom_resource(self, namespace: str, plural: str, body: Dict[str, Any]) -> Dict[str, Any]:
        group, version = split_api_version(body["apiVersion"])
        log.debug("creating %s/%s %s in %s", group, version, plural, namespace)
        return self.custom.create_namespaced_custom_object(group, version, namespace, plural, body)

    def get_custom_resource(self, api_version: str, namespace: str, plural: str, name: str) -> Dict[str, Any]:
        group, version = split_api_version(api_version)
        return self.custom.get_namespaced_custom_object(group, version, namespace, plural, name)

# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/fusebroker/fuse/manifests.py
"""
Manifests for a Fuse Online (Syndesis) instance.

Every builder is a pure function over its arguments; the YAML lives in
``templates/`` next to this module.
"""
from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, List

from fusebroker.config.models import ImageConfig
from fusebroker.utils.templates import TemplateRenderer

TEMPLATES_DIR = Path(__file__).resolve().parent / "templates"

SYNDESIS_API_VERSION = "syndesis.io/v1alpha1"
SYNDESIS_PLURAL = "syndesises"
CREATED_BY_ANNOTATION = "syndesis.io/created-by"

OPERATOR_NAME = "syndesis-operator"

IMAGE_STREAMS = [
    "syndesis-operator",
    "syndesis-server",
    "syndesis-ui",
    "syndesis-meta",
    "syndesis-s2i",
]

_renderer = TemplateRenderer(TEMPLATES_DIR)

Manifest = Dict[str, Any]


def namespace_obj(namespace: str) -> Manifest:
    return _renderer.render_manifest("namespace.yaml.j2", {"namespace": namespace})


def service_account_obj() -> Manifest:
    return _renderer.render_manifest("service_account.yaml.j2", {})


def role_obj() -> Manifest:
    return _renderer.render_manifest("role.yaml.j2", {})


def system_role_bindings(namespace: str) -> List[Manifest]:
    """Bindings OpenShift normally creates for a new project."""
    bindings = [
        {"name": "system:deployers", "role": "system:deployer",
         "subject_kind": "ServiceAccount", "subject": "deployer"},
        {"name": "system:image-builders", "role": "system:image-builder",
         "subject_kind": "ServiceAccount", "subject": "builder"},
        {"name": "system:image-pullers", "role": "system:image-puller",
         "subject_kind": "Group", "subject": f"system:serviceaccounts:{namespace}"},
    ]
    return _renderer.render_manifests(
        "system_role_bindings.yaml.j2", {"namespace": namespace, "bindings": bindings}
    )


def install_role_binding_obj() -> Manifest:
    return _renderer.render_manifest("install_role_binding.yaml.j2", {})


def _authorization_role_binding(name: str, role: str, subject_kind: str, subject: str, namespace: str = "") -> Manifest:
    return _renderer.render_manifest(
        "authorization_role_binding.yaml.j2",
        {
            "name": name,
            "role": role,
            "subject_kind": subject_kind,
            "subject": subject,
            "namespace": namespace,
        },
    )


def view_role_binding_obj() -> Manifest:
    return _authorization_role_binding(f"{OPERATOR_NAME}:view", "view", "ServiceAccount", OPERATOR_NAME)


def edit_role_binding_obj() -> Manifest:
    return _authorization_role_binding(f"{OPERATOR_NAME}:edit", "edit", "ServiceAccount", OPERATOR_NAME)


def user_view_role_binding_obj(namespace: str, username: str) -> Manifest:
    """Lets the requesting user see the instance namespace."""
    return _authorization_role_binding(f"{username}-view", "view", "User", username, namespace=namespace)


def image_stream_objs(images: ImageConfig) -> List[Manifest]:
    return _renderer.render_manifests(
        "image_streams.yaml.j2",
        {"streams": IMAGE_STREAMS, "registry": images.registry, "tag": images.tag},
    )


def deployment_config_obj(images: ImageConfig) -> Manifest:
    return _renderer.render_manifest(
        "deployment_config.yaml.j2",
        {"operator_image": images.operator_image, "tag": images.tag},
    )


def syndesis_obj(
    namespace: str,
    user_namespace: str,
    integrations_limit: int,
    created_by: str,
    route_hostname: str,
) -> Manifest:
    return _renderer.render_manifest(
        "syndesis.yaml.j2",
        {
            "namespace": namespace,
            "user_namespace": user_namespace,
            "limit": integrations_limit,
            "created_by": created_by,
            "route_hostname": route_hostname,
        },
    )

# tests/fuse/conftest.py
from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest
from kubernetes.client import V1Namespace, V1ObjectMeta
from kubernetes.client.exceptions import ApiException

from fusebroker.broker.models import ContextProfile, UserInfo
from fusebroker.config.models import BrokerConfig
from fusebroker.fuse.deployer import FuseDeployer

NOW = datetime(2026, 1, 1, 12, 0, 0, tzinfo=timezone.utc)


def not_found(what="namespaces \"x\" not found"):
    return ApiException(status=404, reason=what)


def conflict(what="already exists"):
    return ApiException(status=409, reason=what)


def server_error(what="Internal Server Error"):
    return ApiException(status=500, reason=what)


class FakeCluster:
    """
    Records every call as (method, name) and raises whatever is queued in
    ``failures[(method, name)]`` (or ``failures[method]`` for any name).
    """

    def __init__(self):
        self.calls = []
        self.failures = {}
        self.created = {}
        self.namespaces = {}
        self.deployment_configs = {}

    def _hit(self, method, name=None, body=None):
        self.calls.append((method, name))
        exc = self.failures.get((method, name), self.failures.get(method))
        if exc is not None:
            raise exc
        if body is not None:
            self.created.setdefault(method, []).append(body)

    def methods(self):
        return [m for m, _ in self.calls]

    # create
    def create_namespace(self, body):
        self._hit("create_namespace", body["metadata"]["name"], body)
        return V1Namespace(metadata=V1ObjectMeta(name=body["metadata"]["name"]))

    def create_service_account(self, namespace, body):
        self._hit("create_service_account", body["metadata"]["name"], body)

    def create_role(self, namespace, body):
        self._hit("create_role", body["metadata"]["name"], body)

    def create_role_binding(self, namespace, body):
        self._hit("create_role_binding", body["metadata"]["name"], body)

    def create_authorization_role_binding(self, namespace, body):
        self._hit("create_authorization_role_binding", body["metadata"]["name"], body)

    def create_image_stream(self, namespace, body):
        self._hit("create_image_stream", body["metadata"]["name"], body)

    def create_deployment_config(self, namespace, body):
        self._hit("create_deployment_config", body["metadata"]["name"], body)

    def create_custom_resource(self, namespace, plural, body):
        self._hit("create_custom_resource", plural, body)

    # read / delete
    def get_namespace(self, name):
        self._hit("get_namespace", name)
        if name not in self.namespaces:
            raise not_found(f'namespaces "{name}" not found')
        return self.namespaces[name]

    def get_deployment_config(self, namespace, name):
        self._hit("get_deployment_config", name)
        if name not in self.deployment_configs:
            raise not_found(f'deploymentconfigs "{name}" not found')
        return self.deployment_configs[name]

    def delete_namespace(self, name):
        self._hit("delete_namespace", name)

    # helpers for status tests
    def add_namespace(self, name, age_seconds):
        created = NOW - timedelta(seconds=age_seconds)
        self.namespaces[name] = V1Namespace(metadata=V1ObjectMeta(name=name, creation_timestamp=created))

    def set_ready(self, name, ready=True, message=""):
        self.deployment_configs[name] = {
            "metadata": {"name": name},
            "status": {
                "conditions": [
                    {"type": "Available", "status": "True"},
                    {"type": "Ready", "status": "True" if ready else "False", "message": message},
                ]
            },
        }


class Capture:
    def __init__(self): self.events = []
    def notify(self, ev): self.events.append(ev)


@pytest.fixture
def cluster():
    return FakeCluster()


@pytest.fixture
def capture():
    return Capture()


@pytest.fixture
def make_deployer(capture):
    def _make(**cfg):
        return FuseDeployer("fuse-deployer", BrokerConfig(**cfg), observers=[capture], clock=lambda: NOW)
    return _make


@pytest.fixture
def deployer(make_deployer):
    return make_deployer()


@pytest.fixture
def user():
    return UserInfo(username="developer")


@pytest.fixture
def profile():
    return ContextProfile(platform="kubernetes", namespace="developer-project")

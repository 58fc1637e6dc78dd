from unittest import mock

import pytest
from kubernetes import client
from kubernetes.client.exceptions import ApiException

from fusebroker.k8s.client import ClusterClient, split_api_version
from fusebroker.k8s.errors import is_already_exists, is_not_found


@pytest.fixture
def cc():
    c = ClusterClient(api_client=client.ApiClient())
    c.core = mock.Mock()
    c.rbac = mock.Mock()
    c.custom = mock.Mock()
    return c


def test_split_api_version():
    assert split_api_version("syndesis.io/v1alpha1") == ("syndesis.io", "v1alpha1")
    assert split_api_version("v1") == ("", "v1")


def test_custom_resource_uses_group_from_body(cc):
    body = {"apiVersion": "syndesis.io/v1alpha1", "kind": "Syndesis", "metadata": {"name": "x"}}
    cc.create_custom_resource("fuse-x", "syndesises", body)
    cc.custom.create_namespaced_custom_object.assert_called_once_with(
        "syndesis.io", "v1alpha1", "fuse-x", "syndesises", body
    )


def test_openshift_kinds_go_through_custom_objects(cc):
    cc.create_image_stream("fuse-x", {"metadata": {"name": "s"}})
    cc.create_deployment_config("fuse-x", {"metadata": {"name": "d"}})
    cc.create_authorization_role_binding("fuse-x", {"metadata": {"name": "r"}})
    cc.get_deployment_config("fuse-x", "syndesis-ui")

    groups = [c.args[:4] for c in cc.custom.create_namespaced_custom_object.call_args_list]
    assert groups == [
        ("image.openshift.io", "v1", "fuse-x", "imagestreams"),
        ("apps.openshift.io", "v1", "fuse-x", "deploymentconfigs"),
        ("authorization.openshift.io", "v1", "fuse-x", "rolebindings"),
    ]
    cc.custom.get_namespaced_custom_object.assert_called_once_with(
        "apps.openshift.io", "v1", "fuse-x", "deploymentconfigs", "syndesis-ui"
    )


def test_core_and_rbac_calls(cc):
    cc.create_namespace({"metadata": {"name": "fuse-x"}})
    cc.get_namespace("fuse-x")
    cc.delete_namespace("fuse-x")
    cc.create_service_account("fuse-x", {})
    cc.create_role("fuse-x", {})
    cc.create_role_binding("fuse-x", {})

    cc.core.create_namespace.assert_called_once()
    cc.core.read_namespace.assert_called_once_with(name="fuse-x")
    assert cc.core.delete_namespace.call_args.kwargs["name"] == "fuse-x"
    cc.core.create_namespaced_service_account.assert_called_once_with(namespace="fuse-x", body={})
    cc.rbac.create_namespaced_role.assert_called_once_with(namespace="fuse-x", body={})
    cc.rbac.create_namespaced_role_binding.assert_called_once_with(namespace="fuse-x", body={})


def test_api_errors_propagate(cc):
    cc.core.read_namespace.side_effect = ApiException(status=403, reason="Forbidden")
    with pytest.raises(ApiException):
        cc.get_namespace("fuse-x")


def test_error_classification():
    assert is_not_found(ApiException(status=404, reason="Not Found"))
    assert not is_not_found(ApiException(status=500, reason="Internal Server Error"))
    assert is_not_found(RuntimeError('namespaces "fuse-x" not found'))
    assert is_already_exists(ApiException(status=409, reason="Conflict"))
    assert is_already_exists(RuntimeError("rolebindings \"x\" already exists"))
    assert not is_already_exists(ApiException(status=403, reason="Forbidden"))


def test_status_code_beats_message_text():
    forbidden = ApiException(status=403, reason="Forbidden")
    forbidden.body = 'clusterrole "admin" not found'
    assert not is_not_found(forbidden)

    denied = ApiException(status=403, reason="rolebinding already exists in a terminating namespace")
    assert not is_already_exists(denied)


def test_get_custom_resource(cc):
    cc.get_custom_resource("syndesis.io/v1alpha1", "fuse-x", "syndesises", "fuse-x")
    cc.custom.get_namespaced_custom_object.assert_called_once_with(
        "syndesis.io", "v1alpha1", "fuse-x", "syndesises", "fuse-x"
    )

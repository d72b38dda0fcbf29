"""Pytest configuration and shared fixtures for pod compute info tests."""

import pytest
from typing import Dict, List, Optional
from unittest.mock import Mock

from kubernetes import client


# ============================================================================
# Kubernetes Object Builders
# ============================================================================


def make_container(
    name: str = "app",
    image: Optional[str] = "nginx:1.25",
    requests: Optional[Dict[str, str]] = None,
    with_resources: bool = True,
) -> client.V1Container:
    """
    Build a V1Container. By default requests 500m CPU and 256Mi memory.

    Pass requests={} for a resources block without requests, or
    with_resources=False for a container with no resources block at all.
    """
    if requests is None:
        requests = {"cpu": "500m", "memory": "256Mi"}
    resources = client.V1ResourceRequirements(requests=requests or None) if with_resources else None
    return client.V1Container(name=name, image=image, resources=resources)


def make_pod(
    name: str = "web-0",
    namespace: str = "default",
    phase: Optional[str] = "Running",
    labels: Optional[Dict[str, str]] = None,
    node_name: Optional[str] = "node-1",
    containers: Optional[List[client.V1Container]] = None,
    with_status: bool = True,
) -> client.V1Pod:
    """Build a V1Pod as returned by CoreV1Api.list_namespaced_pod."""
    if containers is None:
        containers = [make_container()]
    return client.V1Pod(
        metadata=client.V1ObjectMeta(name=name, namespace=namespace, labels=labels),
        spec=client.V1PodSpec(containers=containers, node_name=node_name),
        status=client.V1PodStatus(phase=phase) if with_status else None,
    )


# ============================================================================
# Fixtures
# ============================================================================


@pytest.fixture
def running_pod() -> client.V1Pod:
    """
    Provides a scheduled, labelled running pod with one container.

    Returns:
        V1Pod: Pod "web-0" in namespace "default" maintained by team-a
    """
    return make_pod(labels={"app": "web", "maintainer": "team-a"})


@pytest.fixture
def pods_by_namespace() -> Dict[str, List[client.V1Pod]]:
    """
    Provides the pods of two namespaces.

    Namespace "a" holds two running pods and one pending pod,
    namespace "c" holds one running pod.
    """
    return {
        "a": [
            make_pod(name="a-0", namespace="a"),
            make_pod(name="a-1", namespace="a"),
            make_pod(name="a-2", namespace="a", phase="Pending", node_name=None),
        ],
        "c": [make_pod(name="c-0", namespace="c")],
    }


@pytest.fixture
def fake_list_pods(pods_by_namespace):
    """
    Provides a pod lister backed by pods_by_namespace.

    Unknown namespaces raise a 403 ApiException, like a namespace the
    service account cannot read.
    """

    def list_pods(namespace: str) -> List[client.V1Pod]:
        if namespace not in pods_by_namespace:
            raise client.ApiException(status=403, reason="Forbidden")
        return pods_by_namespace[namespace]

    return Mock(side_effect=list_pods)


@pytest.fixture
def pod_factory():
    """Provides the make_pod builder."""
    return make_pod


@pytest.fixture
def container_factory():
    """Provides the make_container builder."""
    return make_container


def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line("markers", "asyncio: mark test as async")

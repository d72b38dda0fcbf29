"""
Normalization of raw Kubernetes pods into compute inventory records.

Fields fall into three classes:
- identity (metadata.name, metadata.namespace): guaranteed by the API server,
  their absence raises PodIdentityError
- resource requests (cpu, memory per container): required, their absence
  raises MissingResourceRequestError and only that pod is dropped
- node, labels and maintainer: optional, normalized to empty values
"""

from typing import Optional

from kubernetes import client

from pod_compute_info.models.compute_info import (
    ComputeResources,
    Container,
    Metadata,
    PodComputeInfo,
)

RUNNING_PHASE = "Running"
DEFAULT_MAINTAINER_LABEL = "maintainer"


class PodIdentityError(RuntimeError):
    """Raised when a pod returned by the API server has no name or namespace."""

    pass


class PodNormalizationError(Exception):
    """Base class for errors that exclude a single pod from the inventory."""

    def __init__(self, pod_name: Optional[str], message: str):
        self.pod_name = pod_name
        super().__init__(f"Pod {pod_name or '<unknown>'}: {message}")


class MissingPodPhaseError(PodNormalizationError):
    pass


class MissingPodSpecError(PodNormalizationError):
    pass


class MissingResourceRequestError(PodNormalizationError):
    def __init__(self, pod_name: str, container_name: str, resource: str):
        self.container_name = container_name
        self.resource = resource
        super().__init__(
            pod_name,
            f"container {container_name} declares no {resource} request",
        )


def _pod_name(pod: client.V1Pod) -> Optional[str]:
    return pod.metadata.name if pod.metadata else None


def get_pod_phase(pod: client.V1Pod) -> str:
    if pod.status is None or not pod.status.phase:
        raise MissingPodPhaseError(_pod_name(pod), "status has no phase")
    return pod.status.phase


def is_running(pod: client.V1Pod) -> bool:
    """Return True when the pod's last known phase is exactly "Running"."""
    return get_pod_phase(pod) == RUNNING_PHASE


def _requested_quantity(
    pod_name: str, container: client.V1Container, resource: str
) -> str:
    requests = container.resources.requests if container.resources else None
    quantity = (requests or {}).get(resource)
    if quantity is None:
        raise MissingResourceRequestError(pod_name, container.name, resource)
    return str(quantity)


def normalize_container(pod_name: str, container: client.V1Container) -> Container:
    return Container(
        name=container.name,
        image=container.image,
        compute_resources=ComputeResources(
            requested_cpu=_requested_quantity(pod_name, container, "cpu"),
            requested_memory=_requested_quantity(pod_name, container, "memory"),
        ),
    )


def normalize_pod(
    pod: client.V1Pod, maintainer_label: str = DEFAULT_MAINTAINER_LABEL
) -> PodComputeInfo:
    """
    Build the inventory record of a running pod.

    Args:
        pod: Pod as returned by CoreV1Api.list_namespaced_pod
        maintainer_label: Label key holding the pod's maintainer

    Returns:
        PodComputeInfo: The normalized record

    Raises:
        PodIdentityError: If the pod has no name or namespace
        PodNormalizationError: If the pod has no spec or a container
                               lacks a cpu or memory request
    """
    metadata = pod.metadata
    if metadata is None or not metadata.name or not metadata.namespace:
        raise PodIdentityError(
            f"Pod returned by the API server without name or namespace: {metadata}"
        )

    if pod.spec is None:
        raise MissingPodSpecError(metadata.name, "pod has no spec")

    labels = dict(metadata.labels or {})
    containers = [
        normalize_container(metadata.name, container)
        for container in pod.spec.containers or []
    ]

    return PodComputeInfo(
        name=metadata.name,
        namespace=metadata.namespace,
        node_name=pod.spec.node_name or "",
        maintainer=labels.get(maintainer_label, ""),
        containers=containers,
        metadata=Metadata(labels=labels),
    )

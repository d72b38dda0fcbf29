from kubernetes import config, client
import logging
from typing import List, Optional

from pod_compute_info.config import get_kubernetes_config

logger = logging.getLogger(__name__)

core_v1_api: Optional[client.CoreV1Api] = None


def load_kubernetes_config() -> str:
    """
    Load cluster credentials, preferring the in-cluster service account.

    Returns:
        str: "in-cluster" or "kubeconfig", depending on the source used

    Raises:
        config.ConfigException: If neither source is usable
    """
    try:
        config.load_incluster_config()
        return "in-cluster"
    except config.ConfigException:
        logger.info("In-cluster Kubernetes config not available, falling back to kubeconfig.")

    kube_config = get_kubernetes_config()
    config.load_kube_config(
        config_file=kube_config["config_file"], context=kube_config["context"]
    )
    return "kubeconfig"


def initialize_kubernetes_client() -> Optional[client.CoreV1Api]:
    global core_v1_api
    try:
        source = load_kubernetes_config()
        core_v1_api = client.CoreV1Api()
        logger.info(f"Kubernetes client initialized successfully from {source} config.")
        return core_v1_api
    except config.ConfigException as e:
        logger.error(f"Could not load Kubernetes config from the cluster or a kubeconfig: {e}")
        return None
    except Exception as e:
        logger.error(f"An unexpected error occurred during Kubernetes client initialization: {e}")
        return None


def get_core_v1_api() -> Optional[client.CoreV1Api]:
    """Return the shared CoreV1Api, initializing it on first use."""
    if core_v1_api is None:
        return initialize_kubernetes_client()
    return core_v1_api


def list_namespaced_pods(
    api: client.CoreV1Api, namespace: str, request_timeout: Optional[float] = None
) -> List[client.V1Pod]:
    """
    List every pod of a namespace in a single, unpaginated request.

    Errors from the API server or the transport are raised to the caller.
    """
    kwargs = {}
    if request_timeout is not None:
        kwargs["_request_timeout"] = request_timeout
    pods = api.list_namespaced_pod(namespace=namespace, **kwargs)
    logger.debug(f"Listed {len(pods.items)} pods in namespace {namespace}.")
    return pods.items

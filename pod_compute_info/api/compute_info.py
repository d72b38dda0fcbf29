from fastapi import APIRouter, Depends, HTTPException, status
from functools import partial
from typing import List
import logging

from pod_compute_info.config import ConfigError, get_collector_config
from pod_compute_info.core.collector import PodComputeInfoCollector
from pod_compute_info.models.compute_info import PodComputeInfo, PodComputeInfoRequest
from pod_compute_info.services.k8s_client import get_core_v1_api, list_namespaced_pods

router = APIRouter()
logger = logging.getLogger(__name__)


def get_pod_compute_info_collector() -> PodComputeInfoCollector:
    api = get_core_v1_api()
    if api is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Kubernetes client not available. Cannot query the cluster.",
        )

    try:
        collector_config = get_collector_config()
    except ConfigError as e:
        logger.error(f"Invalid collector configuration: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Invalid collector configuration: {str(e)}",
        )

    return PodComputeInfoCollector(
        list_pods=partial(
            list_namespaced_pods, api, request_timeout=collector_config["query_timeout"]
        ),
        maintainer_label=collector_config["maintainer_label"],
        max_concurrency=collector_config["max_concurrency"],
    )


@router.post("/compute-info/pods", response_model=List[PodComputeInfo])
async def get_all_pods_info(
    request: PodComputeInfoRequest,
    collector: PodComputeInfoCollector = Depends(get_pod_compute_info_collector),
):
    """
    Return the compute requests of every running pod in the given namespaces.

    Namespaces whose query fails are left out of the response.
    """
    if request.maintainers:
        logger.info(
            f"Ignoring maintainer filter {request.maintainers}; results are not filtered by maintainer"
        )
    return await collector.collect(request.namespaces)

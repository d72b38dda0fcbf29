import asyncio
import logging
from concurrent.futures import ThreadPoolExecutor
from pydantic import BaseModel, Field
from typing import Callable, List, Optional, Sequence

from kubernetes import client

from pod_compute_info.core.normalizer import (
    DEFAULT_MAINTAINER_LABEL,
    PodNormalizationError,
    is_running,
    normalize_pod,
)
from pod_compute_info.models.compute_info import PodComputeInfo

logger = logging.getLogger(__name__)

ListPods = Callable[[str], List[client.V1Pod]]


class NamespaceCollectionResult(BaseModel):
    """Outcome of collecting one namespace."""

    namespace: str
    pods: List[PodComputeInfo] = Field(default_factory=list)
    skipped_pods: int = 0
    error: Optional[str] = None

    @property
    def succeeded(self) -> bool:
        return self.error is None


class PodComputeInfoCollector:
    """
    Collects running pods from several namespaces concurrently.

    Each namespace is listed in its own task; the blocking list call runs in a
    thread of a pool sized to the request. A failing namespace contributes no
    pods and does not affect the others.
    """

    def __init__(
        self,
        list_pods: ListPods,
        maintainer_label: str = DEFAULT_MAINTAINER_LABEL,
        max_concurrency: Optional[int] = None,
    ):
        """
        Args:
            list_pods: Lists every pod of a namespace, raising on failure
            maintainer_label: Label key read into PodComputeInfo.maintainer
            max_concurrency: Maximum number of namespace queries in flight,
                             None for one concurrent query per namespace
        """
        self._list_pods = list_pods
        self.maintainer_label = maintainer_label
        self.max_concurrency = max_concurrency

    async def collect(self, namespaces: Sequence[str]) -> List[PodComputeInfo]:
        """
        Return the inventory of running pods in the given namespaces.

        Records are ordered by the position of their namespace in the request,
        then by the order the API server listed the pods.
        """
        results = await self.collect_namespaces(namespaces)

        pods: List[PodComputeInfo] = []
        for result in results:
            pods.extend(result.pods)

        failed = [result.namespace for result in results if not result.succeeded]
        skipped = sum(result.skipped_pods for result in results)
        logger.info(
            f"Collected {len(pods)} running pod(s) from {len(results)} namespace(s); "
            f"{len(failed)} namespace(s) failed, {skipped} pod(s) skipped"
        )
        return pods

    async def collect_namespaces(
        self, namespaces: Sequence[str]
    ) -> List[NamespaceCollectionResult]:
        """Collect each namespace independently and return one result per entry."""
        if not namespaces:
            return []

        # One thread per namespace unless max_concurrency is set
        executor = ThreadPoolExecutor(
            max_workers=self.max_concurrency or len(namespaces),
            thread_name_prefix="namespace-query",
        )
        try:
            tasks = [
                self._collect_namespace(namespace, executor) for namespace in namespaces
            ]
            return list(await asyncio.gather(*tasks))
        finally:
            executor.shutdown(wait=False)

    async def _collect_namespace(
        self, namespace: str, executor: ThreadPoolExecutor
    ) -> NamespaceCollectionResult:
        result = NamespaceCollectionResult(namespace=namespace)
        try:
            loop = asyncio.get_running_loop()
            raw_pods = await loop.run_in_executor(executor, self._list_pods, namespace)
            self._normalize_namespace(namespace, raw_pods, result)
        except client.ApiException as e:
            logger.error(f"Kubernetes API error when listing pods in namespace {namespace}: {e}")
            result.pods = []
            result.skipped_pods = 0
            result.error = str(e)
        except Exception as e:
            logger.error(
                f"An unexpected error occurred when collecting namespace {namespace}: {e}",
                exc_info=True,
            )
            result.pods = []
            result.skipped_pods = 0
            result.error = str(e)
        return result

    def _normalize_namespace(
        self,
        namespace: str,
        raw_pods: List[client.V1Pod],
        result: NamespaceCollectionResult,
    ) -> None:
        for pod in raw_pods:
            try:
                if not is_running(pod):
                    continue
                result.pods.append(normalize_pod(pod, self.maintainer_label))
            except PodNormalizationError as e:
                logger.warning(f"Skipping pod in namespace {namespace}: {e}")
                result.skipped_pods += 1

        logger.debug(
            f"Namespace {namespace}: {len(result.pods)} running pod(s) out of {len(raw_pods)}"
        )
